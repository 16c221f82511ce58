#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/treemark/formatters/inline.py
"""Inline-level Markdown formatting.

The :class:`InlineFormatter` renders text, emphasis, code spans, links,
images and line breaks. It returns fragments; joining them into runs is the
job of :class:`treemark.whitespace.InlineRun` inside the walker.
"""

from __future__ import annotations

import logging
import unicodedata
from typing import TYPE_CHECKING

from treemark.constants import ASCII_PUNCTUATION, LINE_BREAK, TABLE_CELL_LINE_BREAK
from treemark.context import Context, Mode
from treemark.escape import escape, escape_table_pipes
from treemark.exceptions import EncodingError
from treemark.nodes import Node
from treemark.whitespace import normalize_text, split_edge_whitespace

if TYPE_CHECKING:
    from treemark.walker import TreeWalker

logger = logging.getLogger(__name__)


def longest_run(text: str, char: str) -> int:
    """Return the length of the longest run of ``char`` in ``text``."""
    longest = 0
    current = 0
    for c in text:
        if c == char:
            current += 1
            longest = max(longest, current)
        else:
            current = 0
    return longest


def ensure_encodable(value: str, source: str) -> str:
    """Return ``value`` unchanged if it can be encoded as UTF-8.

    Parameters
    ----------
    value : str
        Text that will be copied into the output
    source : str
        What the text came from, for the error message (``"text"``,
        ``"href attribute"``, ...)

    Raises
    ------
    EncodingError
        If ``value`` holds a lone surrogate

    """
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as e:
        raise EncodingError(
            f"Malformed {source} at offset {e.start}: {value[e.start:e.end]!r}",
            encoding="utf-8",
            position=e.start,
            original_error=e,
        ) from e
    return value


def _is_punctuation(char: str) -> bool:
    return char in ASCII_PUNCTUATION or unicodedata.category(char)[0] in "PS"


def can_delimit(marker: str, core: str, preceding: str = "", following: str = "") -> bool:
    """Return True when ``marker`` both opens and closes around ``core``.

    Applies the CommonMark flanking rules to the delimiter runs on either
    side of ``core``. ``preceding`` and ``following`` are the characters
    rendered next to the span; an empty string stands for whitespace or a
    line edge. A run that would merge with an identical character before it
    is rejected too.

    Examples
    --------
        >>> can_delimit("**", "word", " ", " ")
        True
        >>> can_delimit("**", "foo.", "", "b")
        False
        >>> can_delimit("_", "x", "a", "")
        False

    """
    char = marker[0]
    if not core or preceding == char:
        return False
    first, last = core[0], core[-1]
    space_before = not preceding or preceding.isspace()
    space_after = not following or following.isspace()
    punct_before = not space_before and _is_punctuation(preceding)
    punct_after = not space_after and _is_punctuation(following)

    opens = not first.isspace() and (not _is_punctuation(first) or space_before or punct_before)
    closes = not last.isspace() and (not _is_punctuation(last) or space_after or punct_after)
    if char == "_":
        # No intraword emphasis with underscores
        opens = opens and (space_before or punct_before)
        closes = closes and (space_after or punct_after)
    return opens and closes


def gather_code_text(node: Node) -> str:
    """Collect the verbatim text of a code element.

    Text of nested elements is included, ``<br>`` becomes a newline and
    comments are skipped. Traversal is iterative.

    Raises
    ------
    EncodingError
        If the code text holds characters that cannot be encoded as UTF-8
    """
    parts: list[str] = []
    stack = list(reversed(node.children))
    while stack:
        current = stack.pop()
        if current.is_text:
            parts.append(current.data)
        elif current.is_element:
            if current.tag == "br":
                parts.append("\n")
            else:
                stack.extend(reversed(current.children))
    return ensure_encodable("".join(parts), "code text")


def format_destination(url: str, in_table_cell: bool = False) -> str:
    """Format a link destination.

    Destinations containing spaces, angle brackets or unbalanced parentheses
    are wrapped in ``<...>``. Inside a table cell pipes are percent-encoded.
    """
    url = url.strip().replace("\n", "").replace("\r", "")
    if in_table_cell:
        url = url.replace("|", "%7C")
    if " " in url or "<" in url or ">" in url or _unbalanced_parens(url):
        return "<" + url.replace("<", "%3C").replace(">", "%3E") + ">"
    return url


def _unbalanced_parens(url: str) -> bool:
    depth = 0
    for char in url:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                return True
    return depth != 0


def format_title(title: str, in_table_cell: bool = False) -> str:
    """Format a link title as ``' "title"'``, or an empty string."""
    if not title:
        return ""
    title = normalize_text(title).strip().replace('"', '\\"')
    if in_table_cell:
        title = escape_table_pipes(title)
    return f' "{title}"' if title else ""


class InlineFormatter:
    """Render inline elements to Markdown fragments.

    Parameters
    ----------
    walker : TreeWalker
        Walker that owns this formatter; used to render child content and
        to record warnings and link references

    """

    def __init__(self, walker: TreeWalker) -> None:
        self.walker = walker
        self.options = walker.options

    def text(self, node: Node, ctx: Context, line_start: bool = False) -> str:
        """Normalize and escape a text node.

        Raises
        ------
        EncodingError
            If the text holds characters that cannot be encoded as UTF-8

        """
        data = ensure_encodable(node.data, "text content")
        text = normalize_text(data, ctx.mode)
        if self.options.escape_special:
            return escape(text, ctx.mode, line_start=line_start)
        if ctx.mode is Mode.TABLE_CELL:
            return escape_table_pipes(text)
        return text

    def comment(self, node: Node, ctx: Context) -> str:
        if self.options.comment_mode != "html" or ctx.in_table_cell:
            return ""
        body = ensure_encodable(node.data, "comment").strip()
        return f"<!-- {body} -->" if body else "<!-- -->"

    def strong(self, node: Node, ctx: Context, preceding: str = "", following: str = "") -> str:
        primary = self.options.emphasis_symbol * 2
        alternate = self.options.alternate_emphasis_symbol * 2
        markers = self._marker_choices(primary, alternate, ctx.strong_depth)
        return self._wrap(node, ctx.enter_strong(), markers, "strong", preceding, following)

    def emphasis(self, node: Node, ctx: Context, preceding: str = "", following: str = "") -> str:
        primary = self.options.emphasis_symbol
        alternate = self.options.alternate_emphasis_symbol
        markers = self._marker_choices(primary, alternate, ctx.emphasis_depth)
        return self._wrap(node, ctx.enter_emphasis(), markers, "em", preceding, following)

    def strikethrough(self, node: Node, ctx: Context, preceding: str = "", following: str = "") -> str:
        return self._wrap(node, ctx, ("~~",), "del", preceding, following)

    @staticmethod
    def _marker_choices(primary: str, alternate: str, depth: int) -> tuple[str, ...]:
        # Nested spans alternate; only the outermost may fall back to the other symbol
        if depth % 2:
            return (alternate,)
        return (primary,) if depth else (primary, alternate)

    def _wrap(
        self,
        node: Node,
        inner_ctx: Context,
        markers: tuple[str, ...],
        html_tag: str,
        preceding: str,
        following: str,
    ) -> str:
        """Wrap rendered children in the first delimiter that parses back unambiguously.

        When no delimiter can open and close around the content (``foo.``
        directly followed by a letter, or a run touching an identical
        delimiter), the content is wrapped in ``html_tag`` instead.
        """
        content = self.walker.render_inline(node.children, inner_ctx.descend())
        leading, core, trailing = split_edge_whitespace(content)
        if not core:
            return leading
        before = " " if leading else preceding
        after = " " if trailing else following
        for marker in markers:
            if can_delimit(marker, core, before, after):
                return f"{leading}{marker}{core}{marker}{trailing}"
        return f"{leading}<{html_tag}>{core}</{html_tag}>{trailing}"

    def code_span(self, node: Node, ctx: Context) -> str:
        """Render a code element as a code span."""
        return self.code_span_text(gather_code_text(node), ctx)

    def code_span_text(self, content: str, ctx: Context) -> str:
        """Wrap verbatim ``content`` in a backtick run longer than any it contains.

        Parameters
        ----------
        content : str
            Code text; not escaped or normalized
        ctx : Context
            Current context. In a table cell pipes are escaped and newlines
            become spaces.

        Returns
        -------
        str
            The code span, or an empty string for empty content

        """
        if not content:
            return ""
        if ctx.in_table_cell:
            content = escape_table_pipes(content.replace("\r\n", " ").replace("\n", " "))

        fence = "`" * (longest_run(content, "`") + 1)
        pad = ""
        if content.startswith("`") or content.endswith("`"):
            pad = " "
        elif content.startswith(" ") and content.endswith(" ") and content.strip(" "):
            # One space is stripped from each side when both are present
            pad = " "
        return f"{fence}{pad}{content}{pad}{fence}"

    def link(self, node: Node, ctx: Context) -> str:
        """Render an anchor as an inline or reference link.

        A missing ``href`` records a warning and renders ``[text]()``.
        """
        if not node.has_attr("href"):
            self.walker.warnings.missing_attribute(node.tag, "href")
        content = self.walker.render_inline(node.children, ctx.descend())
        leading, core, trailing = split_edge_whitespace(content)

        if not core:
            return leading

        href = ensure_encodable(node.get("href"), "href attribute")
        title = ensure_encodable(node.get("title"), "title attribute")
        in_cell = ctx.in_table_cell

        if href and self.options.link_style == "reference":
            number = self.walker.reference_number(href, title)
            return f"{leading}[{core}][{number}]{trailing}"

        destination = format_destination(href, in_cell)
        return f"{leading}[{core}]({destination}{format_title(title, in_cell)}){trailing}"

    def image(self, node: Node, ctx: Context) -> str:
        if not node.has_attr("src"):
            self.walker.warnings.missing_attribute(node.tag, "src")

        alt = normalize_text(ensure_encodable(node.get("alt"), "alt attribute")).strip()
        if alt and self.options.escape_special:
            alt = escape(alt, Mode.TABLE_CELL if ctx.in_table_cell else Mode.NORMAL, line_start=False)
        in_cell = ctx.in_table_cell
        destination = format_destination(ensure_encodable(node.get("src"), "src attribute"), in_cell)
        title = ensure_encodable(node.get("title"), "title attribute")
        return f"![{alt}]({destination}{format_title(title, in_cell)})"

    def line_break(self, node: Node, ctx: Context) -> str:
        return TABLE_CELL_LINE_BREAK if ctx.in_table_cell else LINE_BREAK

    def reference_definitions(self, references: list[tuple[str, str]]) -> str:
        """Render ``[n]: url "title"`` lines for collected reference links."""
        lines = []
        for number, (url, title) in enumerate(references, start=1):
            lines.append(f"[{number}]: {format_destination(url)}{format_title(title)}")
        return "\n".join(lines)
