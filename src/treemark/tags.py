#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/treemark/tags.py
"""Closed classification of HTML tag names.

Every element the walker meets is classified into exactly one
:class:`ElementKind`. The classification is a single lookup table; names not
found in it are :attr:`ElementKind.UNKNOWN`.
"""

from __future__ import annotations

from enum import Enum

from treemark.nodes import DOCUMENT_TAG


class ElementKind(Enum):
    """Categories of HTML elements, each with one handler in the walker."""

    # Block level
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    BLOCKQUOTE = "blockquote"
    LIST = "list"
    LIST_ITEM = "list_item"
    CODE_BLOCK = "code_block"
    TABLE = "table"
    THEMATIC_BREAK = "thematic_break"
    DEFINITION_LIST = "definition_list"
    CONTAINER = "container"

    # Inline level
    STRONG = "strong"
    EMPHASIS = "emphasis"
    STRIKETHROUGH = "strikethrough"
    CODE = "code"
    LINK = "link"
    IMAGE = "image"
    LINE_BREAK = "line_break"

    # Structural
    TRANSPARENT = "transparent"
    TABLE_PART = "table_part"
    IGNORED = "ignored"
    UNKNOWN = "unknown"


HEADING_LEVELS = {"h1": 1, "h2": 2, "h3": 3, "h4": 4, "h5": 5, "h6": 6}

TAG_KINDS: dict[str, ElementKind] = {
    **{tag: ElementKind.HEADING for tag in HEADING_LEVELS},
    "p": ElementKind.PARAGRAPH,
    "blockquote": ElementKind.BLOCKQUOTE,
    "ul": ElementKind.LIST,
    "ol": ElementKind.LIST,
    "menu": ElementKind.LIST,
    "li": ElementKind.LIST_ITEM,
    "pre": ElementKind.CODE_BLOCK,
    "listing": ElementKind.CODE_BLOCK,
    "table": ElementKind.TABLE,
    "hr": ElementKind.THEMATIC_BREAK,
    "dl": ElementKind.DEFINITION_LIST,
    # Definition parts outside a <dl> behave like plain containers
    "dt": ElementKind.CONTAINER,
    "dd": ElementKind.CONTAINER,
    **{
        tag: ElementKind.CONTAINER
        for tag in (
            "div",
            "section",
            "article",
            "main",
            "header",
            "footer",
            "nav",
            "aside",
            "figure",
            "figcaption",
            "details",
            "summary",
            "address",
            "form",
            "fieldset",
            "legend",
            "center",
            "hgroup",
            "search",
        )
    },
    "strong": ElementKind.STRONG,
    "b": ElementKind.STRONG,
    "em": ElementKind.EMPHASIS,
    "i": ElementKind.EMPHASIS,
    "cite": ElementKind.EMPHASIS,
    "dfn": ElementKind.EMPHASIS,
    "var": ElementKind.EMPHASIS,
    "del": ElementKind.STRIKETHROUGH,
    "s": ElementKind.STRIKETHROUGH,
    "strike": ElementKind.STRIKETHROUGH,
    "code": ElementKind.CODE,
    "kbd": ElementKind.CODE,
    "samp": ElementKind.CODE,
    "tt": ElementKind.CODE,
    "a": ElementKind.LINK,
    "img": ElementKind.IMAGE,
    "br": ElementKind.LINE_BREAK,
    **{
        tag: ElementKind.TRANSPARENT
        for tag in (
            DOCUMENT_TAG,
            "html",
            "body",
            "span",
            "u",
            "ins",
            "mark",
            "small",
            "big",
            "abbr",
            "acronym",
            "q",
            "sub",
            "sup",
            "font",
            "time",
            "data",
            "label",
            "bdi",
            "bdo",
            "wbr",
            "nobr",
            "picture",
            "output",
        )
    },
    **{tag: ElementKind.TABLE_PART for tag in ("thead", "tbody", "tfoot", "tr", "td", "th", "caption")},
    **{
        tag: ElementKind.IGNORED
        for tag in (
            "head",
            "title",
            "meta",
            "link",
            "base",
            "script",
            "style",
            "template",
            "noscript",
            "colgroup",
            "col",
            "iframe",
            "object",
            "embed",
            "svg",
            "math",
            "canvas",
            "audio",
            "video",
            "source",
            "track",
            "input",
            "button",
            "select",
            "textarea",
            "option",
            "optgroup",
            "datalist",
            "map",
            "area",
            "param",
        )
    },
}

BLOCK_KINDS = frozenset(
    {
        ElementKind.HEADING,
        ElementKind.PARAGRAPH,
        ElementKind.BLOCKQUOTE,
        ElementKind.LIST,
        ElementKind.LIST_ITEM,
        ElementKind.CODE_BLOCK,
        ElementKind.TABLE,
        ElementKind.THEMATIC_BREAK,
        ElementKind.DEFINITION_LIST,
        ElementKind.CONTAINER,
    }
)

# Kinds whose block/inline nature is decided by their content
PASS_THROUGH_KINDS = frozenset({ElementKind.TRANSPARENT, ElementKind.TABLE_PART, ElementKind.UNKNOWN})


def classify(tag: str) -> ElementKind:
    """Return the element kind for a tag name.

    Parameters
    ----------
    tag : str
        Element name; matched case-insensitively

    Returns
    -------
    ElementKind
        The tag's category, or ``ElementKind.UNKNOWN``

    """
    return TAG_KINDS.get(tag.lower(), ElementKind.UNKNOWN)
