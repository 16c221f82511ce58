#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the treemark library.

This module centralizes hardcoded values, magic numbers, and default
configuration constants used across the converter.

Constants are organized by category:
1. Type Definitions - All Literal types and type aliases
2. Markdown Formatting - Output syntax defaults
3. Escaping and Whitespace - Character classes used by the text pipeline
4. Parsing and Retrieval - Parser backends, encodings, HTTP defaults
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions - All Literal Types and Type Aliases
# =============================================================================

EmphasisSymbol = Literal["*", "_"]
HeadingStyle = Literal["atx", "setext"]
LinkStyleType = Literal["inline", "reference"]
CodeFenceChar = Literal["`", "~"]
UnknownTagMode = Literal["unwrap", "drop"]
CommentMode = Literal["ignore", "html"]
HtmlParserType = Literal["html.parser", "lxml", "html5lib"]

# =============================================================================
# Markdown Formatting Constants
# =============================================================================

DEFAULT_HEADING_STYLE: HeadingStyle = "atx"
DEFAULT_EMPHASIS_SYMBOL: EmphasisSymbol = "*"
DEFAULT_BULLET_SYMBOLS = "-"
DEFAULT_LIST_INDENT_WIDTH = 2
DEFAULT_LINK_STYLE: LinkStyleType = "inline"
DEFAULT_ESCAPE_SPECIAL = True
DEFAULT_UNKNOWN_TAG_MODE: UnknownTagMode = "unwrap"
DEFAULT_COMMENT_MODE: CommentMode = "ignore"
DEFAULT_EXTRACT_TITLE = False

# Code block formatting
DEFAULT_CODE_FENCE_CHAR: CodeFenceChar = "`"
DEFAULT_CODE_FENCE_MIN = 3
MIN_CODE_FENCE_LENGTH = 3

# Code fence language identifier security (markdown injection prevention)
SAFE_LANGUAGE_IDENTIFIER_PATTERN = r"^[a-zA-Z0-9_+\-]+$"
MAX_LANGUAGE_IDENTIFIER_LENGTH = 50

# Tree depth after which subtrees are flattened to plain text
DEFAULT_MAX_DEPTH = 100
MAX_ALLOWED_DEPTH = 150
MAX_HEADING_LEVEL = 6

# Hard line break, and its substitutes in single-line contexts
LINE_BREAK = "  \n"
TABLE_CELL_LINE_BREAK = "<br>"

# Placed between two adjacent lists so they do not merge into one
LIST_SEPARATOR = "<!-- -->"

# Table formatting
TABLE_ALIGNMENT_MAPPING = {"left": ":---", "center": ":---:", "right": "---:", "justify": ":---"}
TABLE_DEFAULT_ALIGNMENT = "---"
MAX_TABLE_SPAN = 1000

# =============================================================================
# Escaping and Whitespace Constants
# =============================================================================

# Escaped wherever they occur in NORMAL text
MARKDOWN_ALWAYS_ESCAPE = "\\`*[]<~"

# Escaped only when they open a line
MARKDOWN_LINE_START_ESCAPE = "#>-+="

# Characters a backslash may escape (CommonMark: any ASCII punctuation)
ASCII_PUNCTUATION = frozenset("!\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~")

# HTML "ASCII whitespace"; U+00A0 and friends are content
HTML_WHITESPACE_PATTERN = r"[ \t\n\r\f]+"

# Removed from parser input (null bytes and zero-width characters)
DANGEROUS_NULL_LIKE_CHARS = [
    "\x00",  # NULL
    "\ufeff",  # BOM/Zero Width No-Break Space
    "\u200b",  # Zero Width Space
    "\u200c",  # Zero Width Non-Joiner
    "\u200d",  # Zero Width Joiner
    "\u2060",  # Word Joiner
]

# =============================================================================
# Parsing and Retrieval Constants
# =============================================================================

DEFAULT_HTML_PARSER: HtmlParserType = "html.parser"
DEFAULT_ENCODING = "utf-8"
DEFAULT_STRIP_NULL_BYTES = True

DEFAULT_USER_AGENT = "treemark/0.1 (+https://pypi.org/project/treemark/)"
DEFAULT_FETCH_TIMEOUT = 30.0
