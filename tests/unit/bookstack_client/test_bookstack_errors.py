"""Unit tests for bookstack_client.errors module."""

from src.bookstack_client.errors import (
    APIAccessError,
    APIUnreachableError,
    BookStackError,
    InvalidCredentialsError,
    ResourceNotFoundError,
    SyncError,
)


class TestErrorHierarchy:
    """All transport errors share the BookStackError and SyncError bases."""

    def test_subclasses(self):
        for error in (
            InvalidCredentialsError("id", "https://x"),
            ResourceNotFoundError("book", 5),
            APIUnreachableError("https://x/api"),
            APIAccessError(),
        ):
            assert isinstance(error, BookStackError)
            assert isinstance(error, SyncError)


class TestMessages:
    """Test cases for error messages."""

    def test_invalid_credentials_message(self):
        error = InvalidCredentialsError(token_id="abc", endpoint="https://docs.example.com")
        assert str(error) == "API token is invalid (token id: abc, endpoint: https://docs.example.com)"
        assert error.missing == []

    def test_resource_not_found_message(self):
        error = ResourceNotFoundError(resource="book", identifier=42)
        assert str(error) == "Book 42 not found"
        assert error.resource == "book"
        assert error.identifier == 42

    def test_unreachable_message(self):
        error = APIUnreachableError(endpoint="https://docs.example.com/api")
        assert str(error) == "API is not available at https://docs.example.com/api"

    def test_access_error_default_message(self):
        assert str(APIAccessError()) == "BookStack API failure (after 3 retries)"
