#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/treemark/escape.py
"""Markdown escaping for literal text.

Text taken from the document must not be re-interpreted as Markdown syntax.
:func:`escape` backslash-escapes the characters that could start a
construct in the active :class:`~treemark.context.Mode`.

Escaping is idempotent: ``escape(escape(s)) == escape(s)``. A backslash that
already precedes ASCII punctuation is treated as an existing escape and
copied unchanged, so escaped text passes through a second time untouched.
"""

from __future__ import annotations

import re

from treemark.constants import (
    ASCII_PUNCTUATION,
    MARKDOWN_ALWAYS_ESCAPE,
    MARKDOWN_LINE_START_ESCAPE,
    TABLE_CELL_LINE_BREAK,
)
from treemark.context import Mode

_ORDERED_MARKER_PATTERN = re.compile(r"\d{1,9}[.)](?=[ \t\n]|$)")

# Named and numeric character references a reader would decode
_ENTITY_PATTERN = re.compile(r"&(?:[A-Za-z][A-Za-z0-9]{1,31}|#[0-9]{1,7}|#[xX][0-9A-Fa-f]{1,6});")


def escape(text: str, mode: Mode = Mode.NORMAL, line_start: bool = True) -> str:
    """Escape Markdown metacharacters in literal text.

    Parameters
    ----------
    text : str
        Text to escape, already whitespace-normalized
    mode : Mode, default Mode.NORMAL
        Active text mode. CODE text is returned unchanged.
    line_start : bool, default True
        Whether ``text`` begins at the start of an output line. Position 0
        then receives the line-start rules; every position after a newline
        always does.

    Returns
    -------
    str
        Escaped text

    Notes
    -----
    NORMAL mode escapes backslash, backtick, ``*``, ``[``, ``]``, ``<`` and
    ``~`` everywhere, ``&`` when it opens a character reference (``&copy;``)
    and ``_`` unless it sits between two alphanumerics (``snake_case`` stays
    as is). At the start of a line, after optional spaces or tabs, ``#``,
    ``>``, ``-``, ``+`` and ``=`` are escaped, and so is the delimiter of an
    ordered-list marker (``1.`` becomes ``1\\.``).

    TABLE_CELL mode applies the NORMAL rules except the line-start ones,
    escapes ``|`` and replaces newlines with ``<br>``. A ``<br>`` already in
    the text is kept as a line break.

    Examples
    --------
        >>> escape("Use the * character")
        'Use the \\\\* character'
        >>> escape("# not a heading")
        '\\\\# not a heading'
        >>> escape("my_variable")
        'my_variable'

    """
    if mode is Mode.CODE or not text:
        return text

    in_cell = mode is Mode.TABLE_CELL
    at_line_start = line_start and not in_cell
    length = len(text)
    out: list[str] = []
    i = 0
    while i < length:
        char = text[i]

        if char == "\\":
            if i + 1 < length and text[i + 1] in ASCII_PUNCTUATION:
                out.append(text[i : i + 2])
                i += 2
            else:
                # A backslash ending the text or a line would join with what follows
                out.append("\\\\" if i + 1 == length or text[i + 1] == "\n" else "\\")
                i += 1
            at_line_start = False
            continue

        if in_cell and text.startswith(TABLE_CELL_LINE_BREAK, i):
            out.append(TABLE_CELL_LINE_BREAK)
            i += len(TABLE_CELL_LINE_BREAK)
            continue

        if char == "\n":
            out.append(TABLE_CELL_LINE_BREAK if in_cell else "\n")
            at_line_start = not in_cell
            i += 1
            continue

        if at_line_start:
            if char in " \t":
                out.append(char)
                i += 1
                continue
            at_line_start = False
            if char in MARKDOWN_LINE_START_ESCAPE:
                out.append("\\" + char)
                i += 1
                continue
            if char.isdigit():
                match = _ORDERED_MARKER_PATTERN.match(text, i)
                if match:
                    marker = match.group(0)
                    out.append(marker[:-1] + "\\" + marker[-1])
                    i = match.end()
                    continue

        if char in MARKDOWN_ALWAYS_ESCAPE:
            out.append("\\" + char)
        elif char == "&" and _ENTITY_PATTERN.match(text, i):
            out.append("\\&")
        elif char == "_":
            prev_alnum = i > 0 and text[i - 1].isalnum()
            next_alnum = i + 1 < length and text[i + 1].isalnum()
            out.append("_" if prev_alnum and next_alnum else "\\_")
        elif char == "|" and in_cell:
            out.append("\\|")
        else:
            out.append(char)
        i += 1

    return "".join(out)


def escape_table_pipes(text: str) -> str:
    """Escape pipe characters that are not already escaped."""
    return re.sub(r"(?<!\\)\|", r"\\|", text)
