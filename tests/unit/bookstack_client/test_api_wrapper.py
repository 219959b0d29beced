"""Unit tests for bookstack_client.api_wrapper module."""

import pytest
from unittest.mock import Mock, call, patch
from requests.exceptions import ConnectionError, HTTPError, Timeout

from src.bookstack_client.api_wrapper import APIWrapper
from src.bookstack_client.auth import Authenticator
from src.bookstack_client.errors import (
    APIAccessError,
    APIUnreachableError,
    InvalidCredentialsError,
    ResourceNotFoundError,
)

BASE = 'https://docs.example.com/api'


def create_auth():
    """Create an authenticator with standard credentials."""
    return Authenticator(url='https://docs.example.com', token_id='abc', token_secret='xyz')


def make_response(json_data=None, status_code=200, text='', content=b''):
    """Create a mock requests.Response."""
    response = Mock()
    response.status_code = status_code
    response.json.return_value = json_data
    response.text = text
    response.content = content
    if status_code >= 400:
        error = HTTPError(f"{status_code} Client Error")
        error.response = response
        response.raise_for_status.side_effect = error
    return response


@pytest.fixture
def session():
    with patch('src.bookstack_client.api_wrapper.requests.Session') as mock_session_cls:
        yield mock_session_cls.return_value


class TestSession:
    """Test cases for lazy session creation."""

    @patch('src.bookstack_client.api_wrapper.requests.Session')
    def test_init_lazy_loads_session(self, mock_session_cls):
        """__init__ should not validate credentials or open a session."""
        mock_auth = Mock()
        APIWrapper(mock_auth)

        mock_auth.get_credentials.assert_not_called()
        mock_session_cls.assert_not_called()

    def test_session_sends_token_header(self, session):
        """The session should authenticate with the Token scheme."""
        session.request.return_value = make_response({'id': 1})

        APIWrapper(create_auth()).get_book(1)

        headers = session.headers.update.call_args[0][0]
        assert headers['Authorization'] == 'Token abc:xyz'
        assert headers['Accept'] == 'application/json'

    def test_missing_credentials_raise_before_request(self, session):
        """Requests without configuration fail with InvalidCredentialsError."""
        api = APIWrapper(Authenticator())

        with pytest.raises(InvalidCredentialsError):
            api.get_books()

        session.request.assert_not_called()

    def test_endpoint_does_not_open_session(self, session):
        """endpoint is usable in messages before any request."""
        api = APIWrapper(create_auth())

        assert api.endpoint == BASE
        session.request.assert_not_called()


class TestErrorTranslation:
    """Test cases for HTTP error translation."""

    def test_404_raises_resource_not_found(self, session):
        session.request.return_value = make_response(status_code=404)

        with pytest.raises(ResourceNotFoundError) as exc_info:
            APIWrapper(create_auth()).get_book(5)

        assert exc_info.value.resource == 'book'
        assert exc_info.value.identifier == 5

    def test_401_raises_invalid_credentials(self, session):
        session.request.return_value = make_response(status_code=401)

        with pytest.raises(InvalidCredentialsError) as exc_info:
            APIWrapper(create_auth()).get_books()

        assert exc_info.value.token_id == 'abc'

    def test_connection_error_raises_unreachable(self, session):
        session.request.side_effect = ConnectionError("Connection refused")

        with pytest.raises(APIUnreachableError) as exc_info:
            APIWrapper(create_auth()).get_books()

        assert exc_info.value.endpoint == BASE

    def test_timeout_raises_unreachable(self, session):
        session.request.side_effect = Timeout("timed out")

        with pytest.raises(APIUnreachableError):
            APIWrapper(create_auth()).get_books()

    def test_server_error_raises_access_error(self, session):
        session.request.return_value = make_response(status_code=500)

        with pytest.raises(APIAccessError):
            APIWrapper(create_auth()).create_book({'name': 'Docs'})

    @patch('src.bookstack_client.retry_logic.time.sleep')
    def test_rate_limit_is_retried(self, mock_sleep, session):
        """A 429 response is retried before translation."""
        session.request.side_effect = [
            make_response(status_code=429),
            make_response({'id': 7, 'name': 'Docs'}),
        ]

        result = APIWrapper(create_auth()).get_book(7)

        assert result['id'] == 7
        assert session.request.call_count == 2
        mock_sleep.assert_called_once_with(1)

    def test_non_numeric_id_rejected_without_request(self, session):
        with pytest.raises(ValueError):
            APIWrapper(create_auth()).get_book('../users')

        session.request.assert_not_called()


class TestBooks:
    """Test cases for book operations."""

    def test_get_book_requests_book_path(self, session):
        session.request.return_value = make_response({'id': 5, 'name': 'Docs', 'contents': []})

        result = APIWrapper(create_auth()).get_book('5')

        assert result['name'] == 'Docs'
        session.request.assert_called_once_with('GET', f'{BASE}/books/5', timeout=30)

    def test_get_books_follows_pagination(self, session):
        """get_books keeps requesting until total is reached."""
        first = [{'id': i, 'name': f'Book {i}'} for i in range(100)]
        second = [{'id': i, 'name': f'Book {i}'} for i in range(100, 130)]
        session.request.side_effect = [
            make_response({'data': first, 'total': 130}),
            make_response({'data': second, 'total': 130}),
        ]

        books = APIWrapper(create_auth()).get_books()

        assert len(books) == 130
        assert session.request.call_args_list == [
            call('GET', f'{BASE}/books', timeout=30, params={'count': 100, 'offset': 0}),
            call('GET', f'{BASE}/books', timeout=30, params={'count': 100, 'offset': 100}),
        ]

    def test_find_book_by_name_matches_name_or_slug(self, session):
        """Matching is case-insensitive on name and slug."""
        data = {'data': [
            {'id': 1, 'name': 'User Guide', 'slug': 'user-guide'},
            {'id': 2, 'name': 'Admin Handbook', 'slug': 'admin-handbook'},
        ], 'total': 2}
        session.request.side_effect = lambda *a, **k: make_response(data)
        api = APIWrapper(create_auth())

        assert api.find_book_by_name('user guide')['id'] == 1
        assert api.find_book_by_name('ADMIN-HANDBOOK')['id'] == 2
        assert api.find_book_by_name('Missing') is None

    def test_create_book_posts_fields(self, session):
        session.request.return_value = make_response({'id': 9, 'name': 'Docs'})

        APIWrapper(create_auth()).create_book({'name': 'Docs', 'description': 'd'})

        session.request.assert_called_once_with(
            'POST', f'{BASE}/books', timeout=30, json={'name': 'Docs', 'description': 'd'}
        )

    def test_update_book_puts_fields(self, session):
        session.request.return_value = make_response({'id': 9})

        APIWrapper(create_auth()).update_book(9, {'description': 'new'})

        session.request.assert_called_once_with(
            'PUT', f'{BASE}/books/9', timeout=30, json={'description': 'new'}
        )


class TestChaptersAndPages:
    """Test cases for chapter and page operations."""

    CONTENTS = {
        'id': 3,
        'contents': [
            {'id': 10, 'type': 'page', 'name': 'Intro', 'slug': 'intro'},
            {'id': 20, 'type': 'chapter', 'name': 'Setup', 'slug': 'setup', 'pages': [
                {'id': 21, 'name': 'Install', 'slug': 'install', 'chapter_id': 20},
            ]},
        ],
    }

    def test_get_chapters_reads_book_contents(self, session):
        session.request.return_value = make_response(self.CONTENTS)

        chapters = APIWrapper(create_auth()).get_chapters(3)

        assert [c['id'] for c in chapters] == [20]
        assert chapters[0]['book_id'] == 3

    def test_get_pages_lists_top_level_then_chapter_pages(self, session):
        session.request.return_value = make_response(self.CONTENTS)

        pages = APIWrapper(create_auth()).get_pages(3)

        assert [p['id'] for p in pages] == [10, 21]
        assert all(p['book_id'] == 3 for p in pages)

    def test_create_chapter_adds_book_id(self, session):
        session.request.return_value = make_response({'id': 30})

        APIWrapper(create_auth()).create_chapter(3, {'name': 'New'})

        session.request.assert_called_once_with(
            'POST', f'{BASE}/chapters', timeout=30, json={'name': 'New', 'book_id': 3}
        )

    def test_create_page_drops_none_fields(self, session):
        session.request.return_value = make_response({'id': 40})

        APIWrapper(create_auth()).create_page(
            {'book_id': 3, 'chapter_id': None, 'name': 'P', 'html': '<p>x</p>', 'markdown': None}
        )

        payload = session.request.call_args[1]['json']
        assert payload == {'book_id': 3, 'name': 'P', 'html': '<p>x</p>'}


class TestExports:
    """Test cases for export endpoints."""

    def test_export_page_markdown_returns_text(self, session):
        session.request.return_value = make_response(text='# Intro\n')

        result = APIWrapper(create_auth()).export_page(10, 'markdown')

        assert result == '# Intro\n'
        session.request.assert_called_once_with('GET', f'{BASE}/pages/10/export/markdown', timeout=30)

    def test_export_book_pdf_returns_bytes(self, session):
        session.request.return_value = make_response(content=b'%PDF')

        assert APIWrapper(create_auth()).export_book(3, 'pdf') == b'%PDF'

    def test_unsupported_format_rejected(self, session):
        with pytest.raises(ValueError):
            APIWrapper(create_auth()).export_page(10, 'docx')

        session.request.assert_not_called()


class TestConnection:
    """Test cases for test_connection."""

    def test_returns_true_when_api_answers(self, session):
        session.request.return_value = make_response({'data': [], 'total': 0})

        assert APIWrapper(create_auth()).test_connection() is True

    def test_returns_false_when_unreachable(self, session):
        session.request.side_effect = ConnectionError("refused")

        assert APIWrapper(create_auth()).test_connection() is False

    def test_rejected_token_propagates(self, session):
        session.request.return_value = make_response(status_code=403)

        with pytest.raises(InvalidCredentialsError):
            APIWrapper(create_auth()).test_connection()


class TestSanitizeCredentials:
    """Test cases for _sanitize_credentials."""

    def test_masks_token_header(self):
        api = APIWrapper(create_auth())

        assert 'abc:xyz' not in api._sanitize_credentials("sent Token abc:xyz to server")

    def test_masks_token_fields(self):
        api = APIWrapper(create_auth())

        sanitized = api._sanitize_credentials('{"token_secret": "xyz"}')

        assert 'xyz' not in sanitized
