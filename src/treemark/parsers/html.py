#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/treemark/parsers/html.py
"""HTML to node tree parsing.

This module turns an HTML string (or bytes) into a :class:`~treemark.nodes.Node`
tree using BeautifulSoup. The BeautifulSoup tree is copied into immutable
nodes with an explicit stack, so deeply nested documents never exhaust the
interpreter's recursion limit here.
"""

from __future__ import annotations

import logging
from typing import Any

from bs4 import BeautifulSoup, FeatureNotFound
from bs4.element import CData, Comment, Declaration, Doctype, NavigableString, ProcessingInstruction, Tag

from treemark.constants import DANGEROUS_NULL_LIKE_CHARS
from treemark.exceptions import DependencyError, EncodingError, ParseError, ValidationError
from treemark.nodes import DOCUMENT_TAG, Node
from treemark.options import ParserOptions

logger = logging.getLogger(__name__)

# Distribution providing each non-stdlib BeautifulSoup tree builder
PARSER_PACKAGES = {"lxml": "lxml", "html5lib": "html5lib"}

# Elements whose first newline is dropped by the HTML parsing algorithm
_LEADING_NEWLINE_ELEMENTS = frozenset({"pre", "listing", "textarea"})


def sanitize_null_bytes(content: str) -> str:
    r"""Remove null bytes and zero-width characters.

    Parameters
    ----------
    content : str
        Content to sanitize

    Returns
    -------
    str
        Content with the characters removed

    Examples
    --------
    >>> sanitize_null_bytes("Hello\x00World")
    'HelloWorld'
    >>> sanitize_null_bytes("Test\u200bZero\u200cWidth")
    'TestZeroWidth'

    """
    if not content:
        return content

    for char in DANGEROUS_NULL_LIKE_CHARS:
        content = content.replace(char, "")
    return content


def decode_html(data: bytes, encoding: str) -> str:
    """Decode raw HTML bytes strictly.

    Raises
    ------
    EncodingError
        If ``data`` holds a malformed byte sequence for ``encoding``
    ValidationError
        If ``encoding`` is not a known codec

    """
    try:
        return data.decode(encoding)
    except LookupError as e:
        raise ValidationError(
            f"Unknown encoding: {encoding}", parameter_name="encoding", parameter_value=encoding, original_error=e
        ) from e
    except UnicodeDecodeError as e:
        raise EncodingError(
            f"Malformed {encoding} byte sequence at offset {e.start}",
            encoding=encoding,
            position=e.start,
            original_error=e,
        ) from e


def parse_html(html: str | bytes, options: ParserOptions | None = None) -> Node:
    """Parse HTML into a node tree.

    Parameters
    ----------
    html : str or bytes
        HTML document or fragment. Bytes are decoded with ``options.encoding``.
    options : ParserOptions, optional
        Parser configuration

    Returns
    -------
    Node
        Root node with tag ``"#document"``

    Raises
    ------
    EncodingError
        If byte input cannot be decoded
    DependencyError
        If the selected parser backend is not installed
    ParseError
        If BeautifulSoup fails on the input
    ValidationError
        If ``html`` is neither str nor bytes

    """
    options = options or ParserOptions()

    if isinstance(html, bytes):
        html = decode_html(html, options.encoding)
    elif not isinstance(html, str):
        raise ValidationError(
            f"Expected HTML as str or bytes, got {type(html).__name__}",
            parameter_name="html",
            parameter_value=type(html).__name__,
        )

    if options.strip_null_bytes:
        html = sanitize_null_bytes(html)

    try:
        soup = BeautifulSoup(html, options.html_parser)
    except FeatureNotFound as e:
        package = PARSER_PACKAGES.get(options.html_parser)
        raise DependencyError(
            f"Selected ParserOptions.html_parser not found: {options.html_parser}.",
            missing_packages=[package] if package else [],
            original_error=e,
        ) from e
    except Exception as e:
        raise ParseError(f"Failed to parse HTML: {e}", original_error=e) from e

    root = soup_to_node(soup, drop_leading_newline=options.html_parser == "html.parser")
    logger.debug(f"Parsed HTML with {options.html_parser} into {len(root.children)} top-level nodes")
    return root


def soup_to_node(soup: Any, drop_leading_newline: bool = True) -> Node:
    """Copy a BeautifulSoup tree into immutable nodes.

    Parameters
    ----------
    soup : BeautifulSoup or Tag
        Tree to copy
    drop_leading_newline : bool, default True
        Drop a newline directly after ``<pre>``, as browsers do. html5lib
        and lxml already apply this rule; html.parser does not.

    Returns
    -------
    Node
        The copied tree. A BeautifulSoup object becomes a ``"#document"`` node.

    """
    # Each frame: tag name, attributes, child iterator, converted children, first-child flag
    frames: list[list[Any]] = [[_tag_name(soup), _attributes(soup), iter(soup.contents), [], True]]
    root: Node | None = None

    while frames:
        frame = frames[-1]
        name, attrs, contents, children, first = frame
        child = next(contents, None)

        if child is None:
            frames.pop()
            node = Node.element(name, attrs, children)
            if frames:
                frames[-1][3].append(node)
            else:
                root = node
            continue

        frame[4] = False
        if isinstance(child, Tag):
            frames.append([_tag_name(child), _attributes(child), iter(child.contents), [], True])
        elif isinstance(child, Comment):
            children.append(Node.comment(str(child)))
        elif isinstance(child, (Doctype, Declaration, ProcessingInstruction)):
            continue
        elif isinstance(child, (CData, NavigableString)):
            text = str(child)
            if first and drop_leading_newline and name in _LEADING_NEWLINE_ELEMENTS and text.startswith("\n"):
                text = text[1:]
            if text:
                children.append(Node.text(text))

    assert root is not None
    return root


def _tag_name(tag: Any) -> str:
    if isinstance(tag, BeautifulSoup):
        return DOCUMENT_TAG
    return (tag.name or "").lower()


def _attributes(tag: Any) -> dict[str, str]:
    attrs = {}
    for key, value in (tag.attrs or {}).items():
        if isinstance(value, (list, tuple)):
            value = " ".join(value)
        attrs[str(key).lower()] = "" if value is None else str(value)
    return attrs
