"""
Telegraph API objects.

Content is a list of ``Node`` values. A node is either a plain string or a
``NodeElement``. On the wire a text node is a bare JSON string and an element
is an object::

    {"tag": "a", "attrs": {"href": "https://t.me"}, "children": ["link"]}

``attrs`` and ``children`` are omitted when empty.
"""
import json
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Iterable, List, Optional, Union

from .exceptions import ParseError

TELEGRAPH_URL = "https://telegra.ph"

# Telegraph keeps only these attributes on elements
ALLOWED_ATTRIBUTES = frozenset({'href', 'src'})


@dataclass
class NodeElement:
    """Element variant of a Telegraph node."""
    tag: str
    attrs: Optional[Dict[str, str]] = None
    children: Optional[List['Node']] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {'tag': self.tag}
        if self.attrs:
            data['attrs'] = dict(self.attrs)
        if self.children:
            data['children'] = [node_to_json(child) for child in self.children]
        return data


Node = Union[str, NodeElement]


def filter_attrs(attrs: Optional[Dict[str, Any]]) -> Optional[Dict[str, str]]:
    """Keep href/src only. Returns None when nothing is left."""
    if not attrs:
        return None
    kept = {}
    for name, value in attrs.items():
        key = name.lower()
        if key in ALLOWED_ATTRIBUTES:
            kept[key] = '' if value is None else str(value)
    return kept or None


def node_to_json(node: Node) -> Union[str, Dict[str, Any]]:
    """Convert a node to its JSON-compatible value (str or dict)."""
    if isinstance(node, str):
        return node
    if isinstance(node, NodeElement):
        return node.to_dict()
    raise TypeError(f"Not a Telegraph node: {node!r}")


def node_from_json(data: Any) -> Node:
    """Build a node from a decoded JSON value."""
    if isinstance(data, str):
        return data
    if not isinstance(data, dict) or not isinstance(data.get('tag'), str):
        raise ParseError(f"Invalid node: {data!r}")

    attrs = data.get('attrs')
    if attrs is not None and not isinstance(attrs, dict):
        raise ParseError(f"Invalid attrs for <{data['tag']}>: {attrs!r}")

    children = data.get('children')
    if children is not None and not isinstance(children, list):
        raise ParseError(f"Invalid children for <{data['tag']}>: {children!r}")

    return NodeElement(
        tag=data['tag'],
        attrs=filter_attrs(attrs),
        children=[node_from_json(child) for child in children] if children else None
    )


def nodes_to_json(nodes: Iterable[Node]) -> str:
    """Serialize nodes to the compact JSON string Telegraph expects as content."""
    return json.dumps(
        [node_to_json(node) for node in nodes],
        ensure_ascii=False,
        separators=(',', ':')
    )


def nodes_from_json(content: Union[str, List[Any]]) -> List[Node]:
    """Parse a JSON string (or already decoded list) into nodes."""
    if isinstance(content, str):
        try:
            content = json.loads(content)
        except ValueError as e:
            raise ParseError(f"Invalid content JSON: {e}") from e
    if not isinstance(content, list):
        raise ParseError(f"Content must be a list of nodes, got {type(content).__name__}")
    return [node_from_json(item) for item in content]


def _pick(cls, data: Dict[str, Any]) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise ParseError(f"Expected an object for {cls.__name__}, got {data!r}")
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in data.items() if k in names}


@dataclass
class Account:
    """A Telegraph account."""
    short_name: Optional[str] = None
    author_name: Optional[str] = None
    author_url: Optional[str] = None
    access_token: Optional[str] = None
    auth_url: Optional[str] = None
    page_count: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Account':
        return cls(**_pick(cls, data))


@dataclass
class Page:
    """A Telegraph page. ``content`` is only set when requested."""
    path: str
    url: str
    title: str
    description: str = ''
    author_name: Optional[str] = None
    author_url: Optional[str] = None
    image_url: Optional[str] = None
    content: Optional[List[Node]] = None
    views: int = 0
    can_edit: Optional[bool] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Page':
        values = _pick(cls, data)
        missing = [name for name in ('path', 'url', 'title') if name not in values]
        if missing:
            raise ParseError(f"Page is missing fields: {', '.join(missing)}")
        if values.get('content') is not None:
            values['content'] = nodes_from_json(values['content'])
        return cls(**values)


@dataclass
class PageList:
    """A list of pages belonging to an account, most recent first."""
    total_count: int = 0
    pages: List[Page] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PageList':
        values = _pick(cls, data)
        return cls(
            total_count=values.get('total_count', 0),
            pages=[Page.from_dict(p) for p in values.get('pages') or []]
        )


@dataclass
class PageViews:
    views: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PageViews':
        return cls(**_pick(cls, data))


@dataclass
class ImageInfo:
    """A file stored on telegra.ph, as returned by the upload endpoint."""
    src: str

    @property
    def url(self) -> str:
        if self.src.startswith('/'):
            return f"{TELEGRAPH_URL}{self.src}"
        return self.src

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ImageInfo':
        values = _pick(cls, data)
        if 'src' not in values:
            raise ParseError(f"Upload result has no src: {data!r}")
        return cls(**values)
