"""API wrapper for the BookStack REST API.

This module wraps a requests session pointed at ``<url>/api`` and provides
error translation from HTTP exceptions to our typed exception hierarchy.
It integrates with the retry logic for handling rate limits.
"""

import logging
import re
from typing import Any, Dict, List, Optional, Union

import requests
from requests.exceptions import (
    ConnectionError as RequestsConnectionError,
    Timeout,
)

from .auth import Authenticator
from .errors import (
    APIAccessError,
    APIUnreachableError,
    BookStackError,
    InvalidCredentialsError,
    ResourceNotFoundError,
)
from .retry_logic import retry_on_rate_limit

logger = logging.getLogger(__name__)

# Formats accepted by the /export/{format} endpoints
EXPORT_FORMATS = ('markdown', 'html', 'plaintext', 'pdf')

# BookStack caps list endpoints at 500 items per request
LIST_PAGE_SIZE = 100

REQUEST_TIMEOUT = 30


class APIWrapper:
    """Wrapper around the BookStack REST API with error translation.

    This class provides a thin wrapper over the BookStack endpoints that:
    1. Builds an authenticated requests session on first use
    2. Translates HTTP errors to typed exceptions
    3. Integrates retry logic for 429 rate limits
    4. Returns decoded JSON dictionaries

    Example:
        >>> auth = Authenticator(url="https://docs.example.com", token_id="id", token_secret="s")
        >>> api = APIWrapper(auth)
        >>> book = api.get_book(12)
    """

    def __init__(self, authenticator: Authenticator):
        """Initialize the API wrapper.

        Args:
            authenticator: Authenticator holding the connection settings
        """
        self._authenticator = authenticator
        self._session: Optional[requests.Session] = None
        self._base_url: Optional[str] = None

    def _get_session(self) -> requests.Session:
        """Get or create the authenticated requests session.

        Raises:
            InvalidCredentialsError: If credentials are missing
        """
        if self._session is None:
            creds = self._authenticator.get_credentials()
            session = requests.Session()
            session.headers.update({
                'Authorization': creds.authorization_header,
                'Content-Type': 'application/json',
                'Accept': 'application/json',
            })
            self._base_url = f"{creds.url}/api"
            self._session = session
        return self._session

    def _validate_id(self, value: Union[int, str], resource: str) -> int:
        """Validate that an entity ID is numeric.

        BookStack IDs are always positive integers. Rejecting anything else
        keeps arbitrary text out of request paths.

        Raises:
            ValueError: If value is not a valid numeric ID
        """
        text = str(value).strip() if value is not None else ''
        if not re.match(r'^\d+$', text):
            raise ValueError(
                f"Invalid {resource} id: '{value}'. IDs must contain only numeric characters."
            )
        return int(text)

    def _sanitize_credentials(self, text: str) -> str:
        """Mask tokens and secrets in text destined for logs.

        Example:
            >>> api._sanitize_credentials("Authorization: Token abc:def")
            'Authorization: ***REDACTED***'
        """
        if not text:
            return text

        sanitized = re.sub(
            r'://([\w.-]+):([\w.-]+)@',
            r'://***:***@',
            text
        )
        sanitized = re.sub(
            r'Authorization:\s*[^\n\r]+',
            'Authorization: ***REDACTED***',
            sanitized,
            flags=re.IGNORECASE
        )
        sanitized = re.sub(
            r'Token\s+[^\s:]+:[^\s]+',
            'Token ***REDACTED***',
            sanitized
        )
        sanitized = re.sub(
            r'(token_?(?:id|secret)|tokenId|tokenSecret)["\']?\s*[:=]\s*["\']?([^"\'\s&,}]+)',
            r'\1=***REDACTED***',
            sanitized,
            flags=re.IGNORECASE
        )
        return sanitized

    def _translate_error(
        self,
        exception: Exception,
        operation: str,
        resource: str = "resource",
        identifier: Union[int, str] = "unknown",
    ) -> Exception:
        """Translate HTTP exceptions to typed BookStack exceptions.

        Args:
            exception: The original exception from requests
            operation: Description of the operation that failed (for logging)
            resource: Resource kind used in not-found messages
            identifier: Resource identifier used in not-found messages

        Returns:
            Exception: Translated exception (one of our typed exceptions)
        """
        endpoint = self._base_url or "unknown"

        if isinstance(exception, (Timeout, RequestsConnectionError)):
            return APIUnreachableError(endpoint=endpoint)

        response = getattr(exception, 'response', None)
        status_code = getattr(response, 'status_code', None)

        if status_code in (401, 403):
            creds = self._authenticator.get_credentials()
            return InvalidCredentialsError(token_id=creds.token_id, endpoint=creds.url)

        if status_code == 404:
            return ResourceNotFoundError(resource=resource, identifier=identifier)

        safe_error_msg = self._sanitize_credentials(str(exception))
        logger.error(f"API operation failed: {operation} - {safe_error_msg}")
        return APIAccessError(f"BookStack API failure during {operation}")

    def _request(
        self,
        method: str,
        path: str,
        resource: str = "resource",
        identifier: Union[int, str] = "unknown",
        **kwargs: Any,
    ) -> requests.Response:
        """Send one API request with rate-limit retry and error translation.

        Raises:
            InvalidCredentialsError: If credentials are missing or rejected
            ResourceNotFoundError: If the API answers 404
            APIUnreachableError: If the API cannot be reached
            APIAccessError: If the request fails for any other reason
        """
        session = self._get_session()
        url = f"{self._base_url}{path}"
        operation = f"{method} {path}"

        def _send() -> requests.Response:
            logger.info(f"BookStack API: {operation}")
            response = session.request(method, url, timeout=REQUEST_TIMEOUT, **kwargs)
            response.raise_for_status()
            return response

        try:
            return retry_on_rate_limit(_send)
        except BookStackError:
            raise
        except Exception as e:
            raise self._translate_error(e, operation, resource, identifier) from e

    @property
    def endpoint(self) -> str:
        """API base URL for messages. Does not build the session."""
        if self._base_url:
            return self._base_url
        url = self._authenticator.url
        return f"{url}/api" if url else "unknown"

    def test_connection(self) -> bool:
        """Check that the API answers an authenticated request.

        Returns:
            True if the books endpoint responded, False otherwise

        Raises:
            InvalidCredentialsError: If credentials are missing or rejected
        """
        try:
            self._request('GET', '/books', params={'count': 1})
            return True
        except InvalidCredentialsError:
            raise
        except BookStackError as e:
            logger.debug(f"Connection test failed: {e}")
            return False

    def _list_all(self, path: str) -> List[Dict[str, Any]]:
        """Collect every item of a paginated list endpoint."""
        items: List[Dict[str, Any]] = []
        offset = 0
        while True:
            response = self._request(
                'GET', path, params={'count': LIST_PAGE_SIZE, 'offset': offset}
            )
            payload = response.json() or {}
            batch = payload.get('data', [])
            items.extend(batch)
            total = payload.get('total', len(items))
            offset += len(batch)
            if not batch or offset >= total:
                return items

    # Books

    def get_books(self) -> List[Dict[str, Any]]:
        """List all books visible to the token."""
        return self._list_all('/books')

    def get_book(self, book_id: Union[int, str]) -> Dict[str, Any]:
        """Fetch a book, including its ``contents`` tree of chapters and pages.

        Raises:
            ResourceNotFoundError: If the book doesn't exist
        """
        book_id = self._validate_id(book_id, 'book')
        response = self._request('GET', f'/books/{book_id}', resource='book', identifier=book_id)
        return response.json()

    def find_book_by_name(self, name: str) -> Optional[Dict[str, Any]]:
        """Find a book whose name or slug matches ``name`` case-insensitively.

        Returns:
            The book dictionary, or None if no book matches
        """
        needle = name.lower()
        for book in self.get_books():
            if (book.get('name') or '').lower() == needle or (book.get('slug') or '').lower() == needle:
                return book
        return None

    def create_book(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        response = self._request('POST', '/books', json=fields)
        return response.json()

    def update_book(self, book_id: Union[int, str], fields: Dict[str, Any]) -> Dict[str, Any]:
        book_id = self._validate_id(book_id, 'book')
        response = self._request(
            'PUT', f'/books/{book_id}', resource='book', identifier=book_id, json=fields
        )
        return response.json()

    def _get_book_contents(self, book_id: Union[int, str]) -> List[Dict[str, Any]]:
        data = self.get_book(book_id) or {}
        return data.get('contents') or data.get('content') or []

    # Chapters

    def get_chapters(self, book_id: Union[int, str]) -> List[Dict[str, Any]]:
        """List the chapters of a book.

        BookStack exposes a book's chapters through the ``contents`` of the
        book read endpoint rather than a filtered list endpoint.
        """
        book_id = self._validate_id(book_id, 'book')
        chapters = []
        for item in self._get_book_contents(book_id):
            if item.get('type') != 'chapter':
                continue
            chapter = dict(item)
            chapter.setdefault('book_id', book_id)
            chapters.append(chapter)
        return chapters

    def create_chapter(self, book_id: Union[int, str], fields: Dict[str, Any]) -> Dict[str, Any]:
        book_id = self._validate_id(book_id, 'book')
        payload = dict(fields)
        payload['book_id'] = book_id
        response = self._request('POST', '/chapters', json=payload)
        return response.json()

    # Pages

    def get_all_pages(self) -> List[Dict[str, Any]]:
        """List all pages visible to the token."""
        return self._list_all('/pages')

    def get_pages(self, book_id: Union[int, str]) -> List[Dict[str, Any]]:
        """List a book's pages, top-level pages first, then chapter pages."""
        book_id = self._validate_id(book_id, 'book')
        contents = self._get_book_contents(book_id)
        top_level = [dict(item) for item in contents if item.get('type') == 'page']
        nested = [
            dict(page)
            for item in contents if item.get('type') == 'chapter'
            for page in (item.get('pages') or [])
        ]
        pages = top_level + nested
        for page in pages:
            page.setdefault('book_id', book_id)
        return pages

    def create_page(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Create a page in a book or chapter.

        Args:
            fields: Page payload with ``book_id`` or ``chapter_id``, ``name``,
                    ``html`` and optionally ``markdown``
        """
        payload = {key: value for key, value in fields.items() if value is not None}
        response = self._request('POST', '/pages', json=payload)
        return response.json()

    # Exports

    def _export(self, resource: str, entity_id: Union[int, str], fmt: str) -> Union[str, bytes]:
        if fmt not in EXPORT_FORMATS:
            raise ValueError(
                f"Unsupported export format '{fmt}'. Expected one of: {', '.join(EXPORT_FORMATS)}"
            )
        entity_id = self._validate_id(entity_id, resource)
        response = self._request(
            'GET',
            f'/{resource}s/{entity_id}/export/{fmt}',
            resource=resource,
            identifier=entity_id,
        )
        if fmt == 'pdf':
            return response.content
        return response.text

    def export_page(self, page_id: Union[int, str], fmt: str) -> Union[str, bytes]:
        """Export a single page. Text for markdown/html/plaintext, bytes for pdf."""
        return self._export('page', page_id, fmt)

    def export_book(self, book_id: Union[int, str], fmt: str) -> Union[str, bytes]:
        """Export a whole book as one document."""
        return self._export('book', book_id, fmt)
