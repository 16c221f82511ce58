"""treemark - convert HTML node trees to CommonMark-compatible Markdown.

treemark walks a parsed HTML tree and renders it as Markdown text. The core
operation, :func:`convert`, takes a :class:`Node` tree and returns a
:class:`ConversionResult` holding the Markdown and a list of warnings for
anything that could not be rendered faithfully (unknown tags, missing
attributes, pathological nesting). Only malformed text is fatal.

Key Features
------------
- Context-aware escaping: text never turns into accidental Markdown syntax,
  and already-escaped text is left unchanged
- HTML whitespace collapsing with ``<pre>`` and ``<code>`` content preserved
  verbatim
- Nested lists, blockquotes, tables and definition lists
- Code fences sized to never collide with the code they enclose
- Deterministic output; warnings instead of exceptions for odd input

Examples
--------
Convert a hand-built tree:

    >>> from treemark import convert, document, h
    >>> tree = document(h("h1", "Title"), h("p", "Hello ", h("strong", "world")))
    >>> print(convert(tree).markdown)
    # Title
    <BLANKLINE>
    Hello **world**
    <BLANKLINE>

Convert an HTML string:

    >>> from treemark import html_to_markdown
    >>> html_to_markdown("<ul><li>A</li><li>B</li></ul>")
    '- A\\n- B\\n'

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "treemark requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "0.1.0"

from treemark.api import convert, convert_html, html_to_markdown
from treemark.context import Context, Mode
from treemark.diagnostics import ConversionResult, ConversionWarning, WarningKind
from treemark.escape import escape
from treemark.exceptions import (
    ConversionError,
    DependencyError,
    EncodingError,
    FetchError,
    OutputWriteError,
    ParseError,
    TreemarkError,
    ValidationError,
)
from treemark.nodes import Node, NodeKind, document, h
from treemark.options import MarkdownOptions, ParserOptions
from treemark.parsers import parse_html
from treemark.walker import TreeWalker

__all__ = [
    "__version__",
    "convert",
    "convert_html",
    "html_to_markdown",
    "parse_html",
    "escape",
    # Tree
    "Node",
    "NodeKind",
    "h",
    "document",
    # Options
    "MarkdownOptions",
    "ParserOptions",
    # Walking
    "Context",
    "Mode",
    "TreeWalker",
    # Results
    "ConversionResult",
    "ConversionWarning",
    "WarningKind",
    # Exceptions
    "TreemarkError",
    "ConversionError",
    "ParseError",
    "EncodingError",
    "ValidationError",
    "DependencyError",
    "FetchError",
    "OutputWriteError",
]
