#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/treemark/options.py
"""Configuration options for HTML parsing and Markdown rendering.

Options are frozen dataclasses so a single instance can be shared between
threads and conversions. Use ``create_updated`` to derive a modified copy.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, replace
from typing import Any

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from treemark.constants import (
    DEFAULT_BULLET_SYMBOLS,
    DEFAULT_CODE_FENCE_CHAR,
    DEFAULT_CODE_FENCE_MIN,
    DEFAULT_COMMENT_MODE,
    DEFAULT_EMPHASIS_SYMBOL,
    DEFAULT_ENCODING,
    DEFAULT_ESCAPE_SPECIAL,
    DEFAULT_EXTRACT_TITLE,
    DEFAULT_HEADING_STYLE,
    DEFAULT_HTML_PARSER,
    DEFAULT_LINK_STYLE,
    DEFAULT_LIST_INDENT_WIDTH,
    DEFAULT_MAX_DEPTH,
    DEFAULT_STRIP_NULL_BYTES,
    DEFAULT_UNKNOWN_TAG_MODE,
    MAX_ALLOWED_DEPTH,
    MIN_CODE_FENCE_LENGTH,
    CodeFenceChar,
    CommentMode,
    EmphasisSymbol,
    HeadingStyle,
    HtmlParserType,
    LinkStyleType,
    UnknownTagMode,
)


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class MarkdownOptions(CloneFrozenMixin):
    """Configuration options for rendering a node tree as Markdown.

    Parameters
    ----------
    heading_style : {"atx", "setext"}, default "atx"
        ``# Title`` headings, or underlined headings for levels 1 and 2.
    emphasis_symbol : {"*", "_"}, default "*"
        Marker for emphasis; strong emphasis doubles it. Nested emphasis of
        the same kind alternates with the other symbol.
    bullet_symbols : str, default "-"
        Characters cycled through for unordered list markers by depth.
    list_indent_width : int, default 2
        Minimum indentation of nested list content, in spaces.
    code_fence_char : {"`", "~"}, default "`"
        Character used for fenced code blocks.
    code_fence_min : int, default 3
        Minimum fence length.
    link_style : {"inline", "reference"}, default "inline"
        ``[text](url)`` or ``[text][n]`` with definitions at the end.
    escape_special : bool, default True
        Escape Markdown metacharacters found in text.
    unknown_tag_mode : {"unwrap", "drop"}, default "unwrap"
        Keep the children of unrecognized elements, or drop the subtree.
        Both record a warning.
    comment_mode : {"ignore", "html"}, default "ignore"
        Drop HTML comments, or pass them through as ``<!-- ... -->``.
    extract_title : bool, default False
        Emit the document ``<title>`` as a level-1 heading and demote the
        body headings by one level.
    max_depth : int, default 100
        Tree depth past which subtrees are flattened to plain text.

    """

    heading_style: HeadingStyle = field(
        default=DEFAULT_HEADING_STYLE,
        metadata={"help": "Heading syntax", "choices": ["atx", "setext"]},
    )
    emphasis_symbol: EmphasisSymbol = field(
        default=DEFAULT_EMPHASIS_SYMBOL,
        metadata={"help": "Symbol used for emphasis", "choices": ["*", "_"]},
    )
    bullet_symbols: str = field(
        default=DEFAULT_BULLET_SYMBOLS,
        metadata={"help": "Characters to cycle through for nested bullet lists"},
    )
    list_indent_width: int = field(
        default=DEFAULT_LIST_INDENT_WIDTH,
        metadata={"help": "Spaces per nesting level for list content", "type": int},
    )
    code_fence_char: CodeFenceChar = field(
        default=DEFAULT_CODE_FENCE_CHAR,
        metadata={"help": "Character used for code fences", "choices": ["`", "~"]},
    )
    code_fence_min: int = field(
        default=DEFAULT_CODE_FENCE_MIN,
        metadata={"help": "Minimum code fence length", "type": int},
    )
    link_style: LinkStyleType = field(
        default=DEFAULT_LINK_STYLE,
        metadata={"help": "Inline links or numbered reference links", "choices": ["inline", "reference"]},
    )
    escape_special: bool = field(
        default=DEFAULT_ESCAPE_SPECIAL,
        metadata={"help": "Escape Markdown special characters in text", "cli_name": "no-escape-special"},
    )
    unknown_tag_mode: UnknownTagMode = field(
        default=DEFAULT_UNKNOWN_TAG_MODE,
        metadata={"help": "Handling of unrecognized elements", "choices": ["unwrap", "drop"]},
    )
    comment_mode: CommentMode = field(
        default=DEFAULT_COMMENT_MODE,
        metadata={"help": "Handling of HTML comments", "choices": ["ignore", "html"]},
    )
    extract_title: bool = field(
        default=DEFAULT_EXTRACT_TITLE,
        metadata={"help": "Use the document <title> as the main heading"},
    )
    max_depth: int = field(
        default=DEFAULT_MAX_DEPTH,
        metadata={"help": "Nesting depth after which subtrees are flattened to text", "type": int},
    )

    def __post_init__(self) -> None:
        """Validate option values.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        if self.heading_style not in ("atx", "setext"):
            raise ValueError(f"heading_style must be 'atx' or 'setext', got {self.heading_style!r}")
        if self.emphasis_symbol not in ("*", "_"):
            raise ValueError(f"emphasis_symbol must be '*' or '_', got {self.emphasis_symbol!r}")
        if not self.bullet_symbols or any(symbol not in "*-+" for symbol in self.bullet_symbols):
            raise ValueError(f"bullet_symbols must be a non-empty string of '*', '-', '+', got {self.bullet_symbols!r}")
        if self.list_indent_width < 1:
            raise ValueError(f"list_indent_width must be positive, got {self.list_indent_width}")
        if self.code_fence_char not in ("`", "~"):
            raise ValueError(f"code_fence_char must be '`' or '~', got {self.code_fence_char!r}")
        if self.code_fence_min < MIN_CODE_FENCE_LENGTH:
            raise ValueError(f"code_fence_min must be at least {MIN_CODE_FENCE_LENGTH}, got {self.code_fence_min}")
        if self.link_style not in ("inline", "reference"):
            raise ValueError(f"link_style must be 'inline' or 'reference', got {self.link_style!r}")
        if self.unknown_tag_mode not in ("unwrap", "drop"):
            raise ValueError(f"unknown_tag_mode must be 'unwrap' or 'drop', got {self.unknown_tag_mode!r}")
        if self.comment_mode not in ("ignore", "html"):
            raise ValueError(f"comment_mode must be 'ignore' or 'html', got {self.comment_mode!r}")
        if not 1 <= self.max_depth <= MAX_ALLOWED_DEPTH:
            raise ValueError(f"max_depth must be between 1 and {MAX_ALLOWED_DEPTH}, got {self.max_depth}")

    @property
    def alternate_emphasis_symbol(self) -> str:
        """Return the emphasis symbol used for odd nesting levels."""
        return "_" if self.emphasis_symbol == "*" else "*"


@dataclass(frozen=True)
class ParserOptions(CloneFrozenMixin):
    """Configuration options for turning HTML into a node tree.

    Parameters
    ----------
    html_parser : {"html.parser", "lxml", "html5lib"}, default "html.parser"
        BeautifulSoup tree builder. ``html.parser`` ships with Python; the
        others need their packages installed.
    encoding : str, default "utf-8"
        Encoding used to decode byte input. Malformed sequences are fatal.
    strip_null_bytes : bool, default True
        Remove NUL and zero-width characters before parsing.

    """

    html_parser: HtmlParserType = field(
        default=DEFAULT_HTML_PARSER,
        metadata={"help": "HTML parser backend", "choices": ["html.parser", "lxml", "html5lib"]},
    )
    encoding: str = field(
        default=DEFAULT_ENCODING,
        metadata={"help": "Encoding for byte input"},
    )
    strip_null_bytes: bool = field(
        default=DEFAULT_STRIP_NULL_BYTES,
        metadata={"help": "Remove null bytes and zero-width characters", "cli_name": "keep-null-bytes"},
    )

    def __post_init__(self) -> None:
        """Validate option values.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        if self.html_parser not in ("html.parser", "lxml", "html5lib"):
            raise ValueError(f"html_parser must be one of html.parser, lxml, html5lib, got {self.html_parser!r}")
        if not self.encoding:
            raise ValueError("encoding must be a non-empty codec name")
