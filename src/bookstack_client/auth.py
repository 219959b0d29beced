"""Credential validation for the BookStack API.

BookStack authenticates API calls with a token id and token secret pair
sent in the ``Authorization`` header. Values come from the layered config
resolver in ``src.cli.config``; this module only validates that all three
pieces are present before the first request is made.
"""

from typing import NamedTuple, Optional

from .errors import InvalidCredentialsError


class Credentials(NamedTuple):
    """BookStack API credentials."""
    url: str
    token_id: str
    token_secret: str

    @property
    def authorization_header(self) -> str:
        return f"Token {self.token_id}:{self.token_secret}"


class Authenticator:
    """Holds and validates BookStack credentials.

    Credentials are never logged. Validation is deferred to
    ``get_credentials`` so that commands which never reach the network
    (dry-run imports) work without any configuration.

    Example:
        >>> auth = Authenticator(url="https://docs.example.com", token_id="id", token_secret="s")
        >>> creds = auth.get_credentials()
        >>> print(f"Connecting to {creds.url}")
    """

    def __init__(
        self,
        url: Optional[str] = None,
        token_id: Optional[str] = None,
        token_secret: Optional[str] = None,
    ):
        self._url = url.rstrip('/') if url else url
        self._token_id = token_id
        self._token_secret = token_secret

    @property
    def url(self) -> Optional[str]:
        return self._url

    def get_credentials(self) -> Credentials:
        """Return validated credentials.

        Returns:
            Credentials: A named tuple containing url, token_id and token_secret

        Raises:
            InvalidCredentialsError: If any required value is missing
        """
        missing = []
        if not self._url:
            missing.append('url')
        if not self._token_id:
            missing.append('tokenId')
        if not self._token_secret:
            missing.append('tokenSecret')

        if missing:
            raise InvalidCredentialsError(
                token_id=self._token_id or "unknown",
                endpoint=self._url or "unknown",
                missing=missing,
            )

        return Credentials(
            url=self._url,  # type: ignore[arg-type]
            token_id=self._token_id,  # type: ignore[arg-type]
            token_secret=self._token_secret,  # type: ignore[arg-type]
        )
