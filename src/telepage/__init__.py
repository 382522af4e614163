"""
telepage - Telegraph API client with HTML to node conversion.

Basic usage:
    >>> from telepage import Telegraph, html_to_nodes
    >>>
    >>> telegraph = Telegraph.create("sandbox", author_name="Anonymous")
    >>> page = telegraph.create_page("Hello", html_to_nodes("<p>Hello, <b>world</b></p>"))
    >>>
    >>> # Reading needs no account
    >>> from telepage import get_page
    >>> page = get_page("Sample-Page-12-15", return_content=True)
"""

from typing import Optional

from .client import Telegraph
from .converter import (
    HtmlConverter,
    MarkdownConverter,
    dom_to_node,
    doms_to_nodes,
    html_to_node,
    html_to_nodes,
    markdown_to_nodes,
)
from .config import load_config, get_client_config
from .types import (
    Node,
    NodeElement,
    Account,
    Page,
    PageList,
    PageViews,
    ImageInfo,
    node_to_json,
    node_from_json,
    nodes_to_json,
    nodes_from_json,
)
from .exceptions import (
    TelepageError,
    TransportError,
    ParseError,
    ApiError,
    UploadError,
    ValidationError,
    ConversionError,
    DependencyError,
)
from .utils import MAX_CONTENT_SIZE, MAX_IMAGE_SIZE

__version__ = "0.6.2"
__all__ = [
    # Client
    'Telegraph',

    # Conversion
    'html_to_nodes',
    'html_to_node',
    'dom_to_node',
    'doms_to_nodes',
    'markdown_to_nodes',
    'HtmlConverter',
    'MarkdownConverter',

    # Types
    'Node',
    'NodeElement',
    'Account',
    'Page',
    'PageList',
    'PageViews',
    'ImageInfo',
    'node_to_json',
    'node_from_json',
    'nodes_to_json',
    'nodes_from_json',

    # Config
    'load_config',
    'get_client_config',

    # Convenience functions
    'get_page',
    'get_views',

    # Exceptions
    'TelepageError',
    'TransportError',
    'ParseError',
    'ApiError',
    'UploadError',
    'ValidationError',
    'ConversionError',
    'DependencyError',

    # Constants
    'MAX_CONTENT_SIZE',
    'MAX_IMAGE_SIZE',
]


def get_page(path: str, return_content: bool = False) -> Page:
    """
    Convenience function to fetch a page without an account.

    Example:
        >>> from telepage import get_page
        >>> page = get_page("Sample-Page-12-15")
        >>> print(page.title)
        Sample Page
    """
    with Telegraph() as telegraph:
        return telegraph.get_page(path, return_content=return_content)


def get_views(
    path: str,
    year: Optional[int] = None,
    month: Optional[int] = None,
    day: Optional[int] = None,
    hour: Optional[int] = None
) -> PageViews:
    """
    Convenience function to get page views without an account.

    Example:
        >>> from telepage import get_views
        >>> get_views("Sample-Page-12-15", year=2016, month=12).views
    """
    with Telegraph() as telegraph:
        return telegraph.get_views(path, year=year, month=month, day=day, hour=hour)
