#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/treemark/whitespace.py
"""Whitespace normalization and block layout helpers.

HTML collapses runs of whitespace when rendering; Markdown gives blank lines
and leading spaces structural meaning. The helpers in this module translate
between the two: text nodes are collapsed, inline fragments are joined
without doubled spaces, and rendered blocks are separated by exactly one
blank line.
"""

from __future__ import annotations

import re
from typing import Iterable

from treemark.buffer import Chunk, ChunkKind
from treemark.constants import HTML_WHITESPACE_PATTERN, LINE_BREAK, LIST_SEPARATOR
from treemark.context import Mode

_WHITESPACE_RUN = re.compile(HTML_WHITESPACE_PATTERN)

# Characters trimmed from the ends of inline runs (not U+00A0)
_INLINE_TRIM = " \t\n\r\f"


def normalize_text(text: str, mode: Mode = Mode.NORMAL) -> str:
    """Collapse HTML whitespace runs to single spaces.

    Parameters
    ----------
    text : str
        Raw text node content
    mode : Mode, default Mode.NORMAL
        CODE text is returned unchanged

    Returns
    -------
    str
        Normalized text. Leading and trailing runs collapse to one space
        and are kept.

    """
    if mode is Mode.CODE:
        return text
    return _WHITESPACE_RUN.sub(" ", text)


def collapse_to_line(text: str) -> str:
    """Join a multi-line inline run into a single line."""
    return _WHITESPACE_RUN.sub(" ", text.replace(LINE_BREAK, " ")).strip(" ")


def trim_inline(text: str) -> str:
    """Strip leading and trailing whitespace from an inline run."""
    return text.strip(_INLINE_TRIM)


def trim_blank_lines(text: str) -> str:
    """Remove leading and trailing blank lines, keeping interior lines as they are."""
    lines = text.split("\n")
    start = 0
    end = len(lines)
    while start < end and not lines[start].strip():
        start += 1
    while end > start and not lines[end - 1].strip():
        end -= 1
    return "\n".join(lines[start:end])


def split_edge_whitespace(text: str) -> tuple[str, str, str]:
    """Split ``text`` into leading whitespace, core and trailing whitespace.

    Emphasis and link markers go around the core only; the whitespace is
    re-emitted outside them.
    """
    core = text.strip(_INLINE_TRIM)
    if not core:
        return text, "", ""
    leading = text[: len(text) - len(text.lstrip(_INLINE_TRIM))]
    trailing = text[len(text.rstrip(_INLINE_TRIM)) :]
    return _as_space(leading), core, _as_space(trailing)


def _as_space(edge: str) -> str:
    if not edge:
        return ""
    return LINE_BREAK if "\n" in edge else " "


class InlineRun:
    """Accumulates inline fragments into one run of text.

    Fragments are joined without doubling spaces across fragment boundaries,
    spaces before a hard line break are dropped, and spaces at the start of
    a line are dropped.

    Parameters
    ----------
    line_start : bool, default False
        Whether the run begins at the start of an output line

    """

    def __init__(self, line_start: bool = False) -> None:
        self._parts: list[str] = []
        self._line_start = line_start
        self._blank = True

    def append(self, fragment: str) -> None:
        if not fragment:
            return
        if fragment.startswith(LINE_BREAK):
            if (not self._parts and self._line_start) or self._ends_with_newline():
                # At most one hard break per line; a second would leave a blank line
                fragment = fragment[len(LINE_BREAK) :]
            else:
                self._rstrip_spaces()
        elif fragment[0] == " " and self._ends_with_space_or_newline():
            fragment = fragment.lstrip(" ")
        if not fragment:
            return
        if fragment[0] == "\n":
            self._rstrip_spaces()
        self._parts.append(fragment)
        if self._blank and fragment.strip(_INLINE_TRIM):
            self._blank = False

    @property
    def at_line_start(self) -> bool:
        """Whether the next fragment starts an output line."""
        if self._blank:
            return self._line_start or self._ends_with_newline()
        return self._ends_with_newline()

    @property
    def last_char(self) -> str:
        """The last character of the run so far, or an empty string."""
        return self._parts[-1][-1] if self._parts else ""

    def _ends_with_newline(self) -> bool:
        return bool(self._parts) and self._parts[-1].endswith("\n")

    def _ends_with_space_or_newline(self) -> bool:
        if not self._parts:
            return self._line_start
        return self._parts[-1][-1] in " \n"

    def _rstrip_spaces(self) -> None:
        while self._parts:
            stripped = self._parts[-1].rstrip(" ")
            if stripped:
                self._parts[-1] = stripped
                return
            self._parts.pop()

    def getvalue(self) -> str:
        return "".join(self._parts)

    def __bool__(self) -> bool:
        return not self._blank


def join_blocks(chunks: Iterable[Chunk]) -> str:
    """Join rendered chunks with exactly one blank line between them.

    Two lists in a row would read back as one list, so an empty HTML
    comment is placed between them.

    Parameters
    ----------
    chunks : iterable of Chunk
        Chunks in document order; empty chunks are skipped

    Returns
    -------
    str
        The joined text, without leading or trailing blank lines

    """
    texts: list[str] = []
    previous: ChunkKind | None = None
    for chunk in chunks:
        text = chunk.text.strip("\n")
        if not text.strip():
            continue
        if previous is ChunkKind.LIST and chunk.kind is ChunkKind.LIST:
            texts.append(LIST_SEPARATOR)
        texts.append(text)
        previous = chunk.kind
    return "\n\n".join(texts)


def join_item_blocks(chunks: list[Chunk]) -> str:
    """Join the chunks of one list item.

    Nested lists attach directly below the preceding line; every other pair
    of chunks is separated by a blank line. Adjacent nested lists are kept
    apart as in :func:`join_blocks`.
    """
    out: list[str] = []
    previous: ChunkKind | None = None
    for chunk in chunks:
        text = chunk.text.strip("\n")
        if not text.strip():
            continue
        if out:
            if chunk.kind is ChunkKind.LIST:
                out.append(f"\n\n{LIST_SEPARATOR}\n\n" if previous is ChunkKind.LIST else "\n")
            else:
                out.append("\n\n")
        out.append(text)
        previous = chunk.kind
    return "".join(out)


def indent_lines(text: str, prefix: str, first: str | None = None) -> str:
    """Prefix every non-empty line of ``text``.

    Parameters
    ----------
    text : str
        Text to indent
    prefix : str
        Prefix for each line after the first (and for the first when
        ``first`` is not given)
    first : str, optional
        Prefix for the first line, e.g. a list marker

    Returns
    -------
    str
        Indented text. Empty lines stay empty.

    """
    lines = text.split("\n")
    out = []
    for index, line in enumerate(lines):
        if index == 0 and first is not None:
            out.append((first + line) if line else first.rstrip())
        else:
            out.append(prefix + line if line else "")
    return "\n".join(out)


def prefix_lines(text: str, prefix: str) -> str:
    """Prefix every line of ``text``; empty lines get the prefix without trailing spaces."""
    bare = prefix.rstrip()
    return "\n".join(prefix + line if line else bare for line in text.split("\n"))
