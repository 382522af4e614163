"""
HTML and Markdown to Telegraph node conversion.

    >>> html_to_nodes('<p>a<b>c</b>d</p>')
    [NodeElement(tag='p', attrs=None, children=['a', NodeElement(tag='b', attrs=None, children=['c']), 'd'])]
    >>> html_to_node('<p>Hello, world</p>')
    '[{"tag":"p","children":["Hello, world"]}]'
"""
from typing import Iterable, Iterator, List, Optional

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PageElement, PreformattedString, Tag

from .exceptions import DependencyError, ParseError
from .interfaces import IConverter
from .types import Node, NodeElement, filter_attrs, nodes_to_json
from .utils import sanitize_nodes, strip_blank_text

try:
    import markdown
except ImportError:
    markdown = None

MARKDOWN_EXTENSIONS = ['fenced_code', 'tables', 'sane_lists']


def dom_to_node(element: PageElement) -> Optional[Node]:
    """
    Convert one parsed DOM node. Returns None for nodes Telegraph has no
    representation for (comments, doctypes, processing instructions, CDATA).
    """
    # Comment, Doctype, CData, ProcessingInstruction and Declaration
    # are all PreformattedString subclasses
    if isinstance(element, PreformattedString):
        return None
    if isinstance(element, NavigableString):
        return str(element)
    if isinstance(element, Tag):
        children = doms_to_nodes(element.children)
        return NodeElement(
            tag=element.name.lower(),
            attrs=filter_attrs(element.attrs),
            children=children or None
        )
    return None


def doms_to_nodes(elements: Iterable[PageElement]) -> List[Node]:
    """Convert a sequence of parsed DOM nodes, skipping the unrepresentable ones."""
    nodes = []
    for element in elements:
        node = dom_to_node(element)
        if node is not None:
            nodes.append(node)
    return nodes


def _parse(html: str) -> BeautifulSoup:
    if not isinstance(html, str):
        raise ParseError(f"HTML must be text, got {type(html).__name__}")
    try:
        # The root is always on the open-tag stack, so this keeps
        # whitespace-only text verbatim everywhere
        return BeautifulSoup(html, 'html.parser', preserve_whitespace_tags={'[document]'})
    except Exception as e:
        raise ParseError(f"Failed to parse HTML: {e}") from e


def _document_children(root: Tag, in_html: bool = False) -> Iterator[PageElement]:
    """Top-level nodes with <html>/<body> unwrapped and <head> dropped."""
    for element in root.children:
        if isinstance(element, Tag) and element.name == 'head':
            continue
        if isinstance(element, Tag) and element.name in ('html', 'body'):
            yield from _document_children(element, in_html=element.name == 'html')
        elif in_html and isinstance(element, NavigableString) and not element.strip():
            # Formatting between <html>, <head> and <body>
            continue
        else:
            yield element


def html_to_nodes(html: str) -> List[Node]:
    """
    Parse an HTML fragment into Telegraph nodes.

    Only href/src attributes are kept, tag names are lower-cased and
    whitespace text is preserved as-is. For a full document the contents
    of <body> are returned, along with anything placed outside it; <head>
    is dropped.

    Raises:
        ParseError: If the input is not text or cannot be parsed
    """
    return doms_to_nodes(_document_children(_parse(html)))


def html_to_node(html: str) -> str:
    """Parse HTML to the JSON content string accepted by createPage/editPage."""
    return nodes_to_json(html_to_nodes(html))


def markdown_to_nodes(md_content: str) -> List[Node]:
    """Render Markdown and convert it to Telegraph nodes."""
    return MarkdownConverter().convert(md_content)


class HtmlConverter(IConverter):
    def convert(self, content: str) -> List[Node]:
        return html_to_nodes(content)


class MarkdownConverter(IConverter):
    """
    Converts Markdown to Telegraph nodes.

    Headings are downgraded to the levels Telegraph renders (h1->h3,
    h2/h5/h6->h4) and the newlines Markdown puts between top-level blocks
    are dropped.
    """

    def __init__(self, extensions: Optional[List[str]] = None):
        if markdown is None:
            raise DependencyError("markdown library is required")
        self.extensions = MARKDOWN_EXTENSIONS if extensions is None else extensions

    def convert(self, md_content: str) -> List[Node]:
        if not isinstance(md_content, str):
            raise ParseError(f"Markdown must be text, got {type(md_content).__name__}")
        html_content = markdown.markdown(md_content, extensions=self.extensions)
        nodes = strip_blank_text(html_to_nodes(html_content))
        return sanitize_nodes(nodes)
