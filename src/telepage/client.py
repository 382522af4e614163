"""
Telegraph API client.

See https://telegra.ph/api for the methods and objects.

Example:
    >>> from telepage import Telegraph, html_to_nodes
    >>> telegraph = Telegraph.create("sandbox")
    >>> page = telegraph.create_page("Title", html_to_nodes("<p>Hello, world</p>"))
    >>> print(page.url)
"""
import json
import logging
from typing import Any, Dict, List, Optional, Sequence, Union

import requests

from .config import DEFAULT_API_URL, DEFAULT_TIMEOUT, DEFAULT_UPLOAD_URL, get_client_config
from .exceptions import ApiError, ParseError, TransportError, ValidationError
from .types import Account, ImageInfo, Node, Page, PageList, PageViews, nodes_to_json
from .upload import Uploadable, build_upload_files, parse_upload_response
from .utils import MAX_IMAGE_SIZE, validate_content_size

logger = logging.getLogger(__name__)

ACCOUNT_FIELDS = ('short_name', 'author_name', 'author_url', 'auth_url', 'page_count')
VIEWS_FIELDS = ('year', 'month', 'day', 'hour')

Content = Union[str, Sequence[Node]]


def _bool_param(value: bool) -> str:
    return 'true' if value else 'false'


def _content_param(content: Content) -> str:
    """Content is sent as a JSON string; node lists are serialized first."""
    if isinstance(content, str):
        data = content
    else:
        data = nodes_to_json(content)
    validate_content_size(data)
    return data


class Telegraph:
    """
    A Telegraph API client bound to one account.

    Every method performs a single HTTP request. Nothing is retried: transport
    failures raise TransportError, undecodable responses ParseError and
    ok=false answers ApiError.

    Args:
        access_token: Token of the account. Only get_page/get_views/create_account work without one.
        short_name: Account name, shown above the Edit/Publish button.
        author_name: Default author name for new pages (defaults to short_name).
        author_url: Default profile link for new pages.
        session: requests.Session to send requests with (a new one by default).
        api_url: Base URL of the API.
        upload_url: URL of the upload endpoint.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        access_token: Optional[str] = None,
        short_name: Optional[str] = None,
        author_name: Optional[str] = None,
        author_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        api_url: str = DEFAULT_API_URL,
        upload_url: str = DEFAULT_UPLOAD_URL,
        timeout: float = DEFAULT_TIMEOUT
    ):
        self.access_token = access_token
        self.short_name = short_name
        self.author_name = author_name or short_name
        self.author_url = author_url
        # Sessions passed in belong to the caller and are left open by close()
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.api_url = api_url.rstrip('/')
        self.upload_url = upload_url
        self.timeout = timeout

    def __repr__(self):
        return f"Telegraph(short_name={self.short_name!r}, author_name={self.author_name!r})"

    def close(self):
        """Release the HTTP connection pool of a session this client created."""
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> 'Telegraph':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    @classmethod
    def create(
        cls,
        short_name: str,
        author_name: Optional[str] = None,
        author_url: Optional[str] = None,
        access_token: Optional[str] = None,
        **kwargs
    ) -> 'Telegraph':
        """
        Build a client for an account.

        If access_token is not given a new account is created, otherwise the
        existing account is imported as-is (no request is made).
        """
        client = cls(
            access_token=access_token,
            short_name=short_name,
            author_name=author_name,
            author_url=author_url,
            **kwargs
        )
        if access_token is None:
            account = client.create_account(short_name, author_name, author_url)
            if not account.access_token:
                raise ParseError("createAccount returned no access_token")
            client.access_token = account.access_token
            logger.info("Created Telegraph account %s", short_name)
        return client

    @classmethod
    def from_config(cls, config_path: Optional[str] = None, **overrides) -> 'Telegraph':
        """Build a client from ~/.telepage.json / TELEPAGE_* settings; keyword arguments win."""
        config = get_client_config(config_path)
        config.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**config)

    # Transport

    def _require_token(self) -> str:
        if not self.access_token:
            raise ValidationError("This method requires an access token")
        return self.access_token

    def _send(self, http_method: str, url: str, **kwargs) -> Any:
        """Send one request and return the decoded JSON body."""
        try:
            response = self.session.request(http_method, url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
        except requests.RequestException as e:
            raise TransportError(f"{http_method} {url} failed: {e}", original=e) from e

        try:
            return response.json()
        except ValueError as e:
            raise ParseError(f"Invalid JSON response from {url}: {e}") from e

    def _call(
        self,
        method: str,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        path: Optional[str] = None
    ) -> Any:
        """Call an API method and unwrap the {"ok", "result", "error"} envelope."""
        url = f"{self.api_url}/{method}"
        if path:
            url = f"{url}/{path.lstrip('/')}"
        http_method = 'POST' if data is not None else 'GET'
        logger.debug("Calling %s %s", http_method, method)

        body = self._send(http_method, url, params=params, data=data)

        if not isinstance(body, dict) or 'ok' not in body:
            raise ParseError(f"Unexpected response from {method}: {body!r}")
        if not body['ok']:
            error = body.get('error', 'Unknown error')
            logger.debug("%s returned error: %s", method, error)
            raise ApiError(error)
        if 'result' not in body:
            raise ParseError(f"Response from {method} has no result")
        return body['result']

    # Account methods

    def create_account(
        self,
        short_name: str,
        author_name: Optional[str] = None,
        author_url: Optional[str] = None
    ) -> Account:
        """
        Create a new Telegraph account.

        Returns an Account with the regular fields plus access_token. The
        client itself is not modified; see Telegraph.create for that.
        """
        params = {'short_name': short_name}
        if author_name is not None:
            params['author_name'] = author_name
        if author_url is not None:
            params['author_url'] = author_url
        return Account.from_dict(self._call('createAccount', params=params))

    def edit_account_info(
        self,
        short_name: Optional[str] = None,
        author_name: Optional[str] = None,
        author_url: Optional[str] = None
    ) -> Account:
        """
        Update information about the account.

        Fields left as None keep the client's current values. On success the
        client's short_name, author_name and author_url follow the response.
        """
        params = {
            'access_token': self._require_token(),
            'short_name': short_name if short_name is not None else self.short_name,
            'author_name': author_name if author_name is not None else self.author_name,
            'author_url': author_url if author_url is not None else (self.author_url or ''),
        }
        if not params['short_name']:
            raise ValidationError("short_name is required")
        if params['author_name'] is None:
            params['author_name'] = params['short_name']

        account = Account.from_dict(self._call('editAccountInfo', params=params))
        self.short_name = account.short_name or params['short_name']
        self.author_name = account.author_name or self.short_name
        self.author_url = account.author_url
        return account

    def get_account_info(self, fields: Optional[Sequence[str]] = None) -> Account:
        """
        Get information about the account.

        Args:
            fields: Any of short_name, author_name, author_url, auth_url,
                    page_count (default: the first three, server-side)
        """
        params = {'access_token': self._require_token()}
        if fields is not None:
            unknown = [f for f in fields if f not in ACCOUNT_FIELDS]
            if unknown:
                raise ValidationError(
                    f"Unknown account fields: {', '.join(unknown)}. "
                    f"Available: {', '.join(ACCOUNT_FIELDS)}"
                )
            params['fields'] = json.dumps(list(fields))
        return Account.from_dict(self._call('getAccountInfo', params=params))

    def revoke_access_token(self) -> Account:
        """
        Revoke the access token and generate a new one.

        Returns an Account with the new access_token and auth_url; the client
        switches to the new token.
        """
        params = {'access_token': self._require_token()}
        account = Account.from_dict(self._call('revokeAccessToken', params=params))
        if account.access_token:
            self.access_token = account.access_token
        return account

    # Page methods

    def _page_form(
        self,
        title: str,
        content: Content,
        author_name: Optional[str],
        author_url: Optional[str],
        return_content: bool
    ) -> Dict[str, str]:
        if not title:
            raise ValidationError("title is required")
        return {
            'access_token': self._require_token(),
            'title': title,
            'author_name': author_name if author_name is not None else (self.author_name or ''),
            'author_url': author_url if author_url is not None else (self.author_url or ''),
            'content': _content_param(content),
            'return_content': _bool_param(return_content),
        }

    def create_page(
        self,
        title: str,
        content: Content,
        author_name: Optional[str] = None,
        author_url: Optional[str] = None,
        return_content: bool = False
    ) -> Page:
        """
        Create a new page.

        Args:
            title: Page title
            content: List of nodes, or an already serialized JSON string
                     (see html_to_node)
            author_name: Defaults to the client's author_name
            author_url: Defaults to the client's author_url
            return_content: Include content in the returned Page
        """
        data = self._page_form(title, content, author_name, author_url, return_content)
        return Page.from_dict(self._call('createPage', data=data))

    def edit_page(
        self,
        path: str,
        title: str,
        content: Content,
        author_name: Optional[str] = None,
        author_url: Optional[str] = None,
        return_content: bool = False
    ) -> Page:
        """Edit an existing page. Arguments as for create_page."""
        if not path:
            raise ValidationError("path is required")
        data = self._page_form(title, content, author_name, author_url, return_content)
        data['path'] = path
        return Page.from_dict(self._call('editPage', data=data))

    def get_page(self, path: str, return_content: bool = False) -> Page:
        """Get a page. Works without an access token."""
        if not path:
            raise ValidationError("path is required")
        params = {'return_content': _bool_param(return_content)}
        return Page.from_dict(self._call('getPage', params=params, path=path))

    def get_page_list(self, offset: int = 0, limit: int = 50) -> PageList:
        """
        Get the account's pages, most recently created first.

        Args:
            offset: Sequential number of the first page to return
            limit: Number of pages to return (0-200)
        """
        if offset < 0:
            raise ValidationError(f"offset must be >= 0, got {offset}")
        if not 0 <= limit <= 200:
            raise ValidationError(f"limit must be between 0 and 200, got {limit}")
        params = {
            'access_token': self._require_token(),
            'offset': str(offset),
            'limit': str(limit),
        }
        return PageList.from_dict(self._call('getPageList', params=params))

    def get_views(
        self,
        path: str,
        year: Optional[int] = None,
        month: Optional[int] = None,
        day: Optional[int] = None,
        hour: Optional[int] = None
    ) -> PageViews:
        """
        Get the number of views of a page. Works without an access token.

        With no date the total is returned. The date is narrowed from the
        left: month needs year, day needs month, hour needs day.

            >>> telegraph.get_views("Sample-Page-12-15", year=2016, month=12)
        """
        if not path:
            raise ValidationError("path is required")
        params = {}
        missing = None
        for name, value in zip(VIEWS_FIELDS, (year, month, day, hour)):
            if value is None:
                missing = missing or name
            elif missing:
                raise ValidationError(f"'{name}' requires '{missing}'")
            else:
                params[name] = str(value)
        return PageViews.from_dict(self._call('getViews', params=params, path=path))

    # Upload

    def upload(
        self,
        files: Sequence[Uploadable],
        auto_compress: bool = False,
        max_size: int = MAX_IMAGE_SIZE
    ) -> List[ImageInfo]:
        """
        Upload files to telegra.ph.

        Args:
            files: Paths or (filename, data) pairs
            auto_compress: Recompress images above max_size with Pillow
            max_size: Size limit per file in bytes (default: 5MB)

        Returns:
            One ImageInfo per file, in order. Use ImageInfo.url in img/video src.
        """
        parts = build_upload_files(files, auto_compress=auto_compress, max_size=max_size)
        logger.debug("Uploading %d file(s) to %s", len(parts), self.upload_url)
        data = self._send('POST', self.upload_url, files=parts)
        return parse_upload_response(data)
