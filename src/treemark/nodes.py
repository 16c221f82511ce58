#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/treemark/nodes.py
"""Node data model for parsed HTML documents.

A document is a tree of immutable :class:`Node` values. Element nodes carry a
lower-case tag name, an attribute mapping and ordered children; text and
comment nodes carry their payload in ``data``. Trees are produced once (by
:func:`treemark.parsers.html.parse_html` or built directly with :func:`h`)
and only read afterwards, so one tree may be converted from several threads.

Examples
--------
Build a small tree by hand:

    >>> from treemark.nodes import h
    >>> tree = h("p", "Hello ", h("b", "world"))
    >>> tree.children[1].tag
    'b'

"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Mapping, Union

DOCUMENT_TAG = "#document"


class NodeKind(Enum):
    """Kinds of nodes found in a parsed document."""

    ELEMENT = "element"
    TEXT = "text"
    COMMENT = "comment"


@dataclass(frozen=True)
class Node:
    """A single node in a parsed HTML document.

    Parameters
    ----------
    kind : NodeKind
        Element, text or comment
    tag : str, default ""
        Lower-case element name; empty for text and comment nodes
    attrs : Mapping[str, str], default empty
        Element attributes. Multi-valued attributes (``class``) are joined
        with single spaces.
    children : tuple of Node, default ()
        Child nodes in document order
    data : str, default ""
        Text or comment payload

    """

    kind: NodeKind
    tag: str = ""
    attrs: Mapping[str, str] = field(default_factory=dict)
    children: tuple[Node, ...] = ()
    data: str = ""

    @classmethod
    def element(
        cls,
        tag: str,
        attrs: Mapping[str, str] | None = None,
        children: tuple[Node, ...] | list[Node] = (),
    ) -> Node:
        """Create an element node."""
        return cls(NodeKind.ELEMENT, tag=tag.lower(), attrs=dict(attrs or {}), children=tuple(children))

    @classmethod
    def text(cls, data: str) -> Node:
        """Create a text node."""
        return cls(NodeKind.TEXT, data=data)

    @classmethod
    def comment(cls, data: str) -> Node:
        """Create a comment node."""
        return cls(NodeKind.COMMENT, data=data)

    @property
    def is_element(self) -> bool:
        return self.kind is NodeKind.ELEMENT

    @property
    def is_text(self) -> bool:
        return self.kind is NodeKind.TEXT

    @property
    def is_comment(self) -> bool:
        return self.kind is NodeKind.COMMENT

    def get(self, name: str, default: str = "") -> str:
        """Return an attribute value, or ``default`` when it is absent.

        Parameters
        ----------
        name : str
            Attribute name (case-insensitive)
        default : str, default ""
            Value returned for a missing attribute

        Returns
        -------
        str
            The attribute value

        """
        return self.attrs.get(name.lower(), default)

    def has_attr(self, name: str) -> bool:
        return name.lower() in self.attrs

    @property
    def classes(self) -> list[str]:
        """Return the element's CSS classes."""
        return self.get("class").split()

    def element_children(self, *tags: str) -> list[Node]:
        """Return direct element children, optionally filtered by tag name."""
        return [child for child in self.children if child.is_element and (not tags or child.tag in tags)]

    def iter_descendants(self) -> Iterator[Node]:
        """Yield all descendants in document order.

        Traversal uses an explicit stack, so arbitrarily deep trees are safe.

        """
        stack = list(reversed(self.children))
        while stack:
            node = stack.pop()
            yield node
            if node.children:
                stack.extend(reversed(node.children))

    def text_content(self) -> str:
        """Return the concatenated text of all descendant text nodes."""
        if self.is_text:
            return self.data
        return "".join(node.data for node in self.iter_descendants() if node.is_text)


NodeLike = Union[Node, str]


def h(tag: str, *children: NodeLike, **attrs: str) -> Node:
    """Build an element node; string children become text nodes.

    Attribute names that clash with Python keywords may be given with a
    trailing underscore (``class_="x"``); other underscores become hyphens
    (``data_lang="py"``).

    Parameters
    ----------
    tag : str
        Element name
    *children : Node or str
        Child nodes
    **attrs : str
        Element attributes

    Returns
    -------
    Node
        The new element node

    """
    normalized_attrs = {}
    for name, value in attrs.items():
        name = name[:-1] if name.endswith("_") else name
        normalized_attrs[name.replace("_", "-").lower()] = value
    nodes = tuple(Node.text(child) if isinstance(child, str) else child for child in children)
    return Node.element(tag, normalized_attrs, nodes)


def document(*children: NodeLike) -> Node:
    """Build a document root node holding ``children``."""
    return h(DOCUMENT_TAG, *children)
