#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/treemark/formatters/block.py
"""Block-level Markdown formatting.

The :class:`BlockFormatter` renders headings, paragraphs, blockquotes, lists,
code blocks, tables, thematic breaks and definition lists. Every handler
returns a list of :class:`~treemark.buffer.Chunk` values; the walker joins
them with exactly one blank line between blocks.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from treemark.buffer import Chunk, ChunkKind
from treemark.constants import (
    MAX_HEADING_LEVEL,
    MAX_LANGUAGE_IDENTIFIER_LENGTH,
    MAX_TABLE_SPAN,
    SAFE_LANGUAGE_IDENTIFIER_PATTERN,
    TABLE_ALIGNMENT_MAPPING,
    TABLE_CELL_LINE_BREAK,
    TABLE_DEFAULT_ALIGNMENT,
)
from treemark.context import Context, Mode
from treemark.formatters.inline import gather_code_text, longest_run
from treemark.nodes import Node
from treemark.tags import HEADING_LEVELS, ElementKind, classify
from treemark.whitespace import (
    collapse_to_line,
    indent_lines,
    join_blocks,
    join_item_blocks,
    normalize_text,
    prefix_lines,
    trim_inline,
)

if TYPE_CHECKING:
    from treemark.walker import TreeWalker

logger = logging.getLogger(__name__)

_LANGUAGE_CLASS_PATTERN = re.compile(r"^(?:language|lang)-(.+)$")
_TEXT_ALIGN_PATTERN = re.compile(r"text-align\s*:\s*(left|center|right|justify)")
_CLOSING_HASHES_PATTERN = re.compile(r"(^|[ \t])(#+)$")
_SAFE_LANGUAGE = re.compile(SAFE_LANGUAGE_IDENTIFIER_PATTERN)


def _has_content(node: Node) -> bool:
    if node.is_text:
        return bool(node.data.strip())
    return node.is_element and classify(node.tag) is not ElementKind.IGNORED


def _span(value: str) -> int:
    try:
        span = int(value.strip() or "1")
    except ValueError:
        return 1
    return min(max(span, 1), MAX_TABLE_SPAN)


def get_alignment(cell: Node) -> str | None:
    """Return a cell's alignment from its ``align`` attribute or ``text-align`` style.

    Parameters
    ----------
    cell : Node
        Table cell or column element

    Returns
    -------
    str or None
        'left', 'center', 'right' or 'justify', or None when unspecified

    """
    align = cell.get("align").strip().lower()
    if align in TABLE_ALIGNMENT_MAPPING:
        return align

    match = _TEXT_ALIGN_PATTERN.search(cell.get("style").lower())
    if match:
        return match.group(1)
    return None


def extract_language(node: Node) -> str:
    """Return the code language declared on a ``pre`` element or its ``code`` child.

    Languages come from ``language-xxx``/``lang-xxx`` classes or a
    ``data-lang`` attribute. Identifiers that are not plain
    ``[A-Za-z0-9_+-]`` words are discarded.
    """
    candidates = [node] + node.element_children("code")
    for element in candidates:
        for cls in element.classes:
            match = _LANGUAGE_CLASS_PATTERN.match(cls)
            if match:
                return _sanitize_language(match.group(1))
        for attr in ("data-lang", "data-language"):
            if element.get(attr):
                return _sanitize_language(element.get(attr))
    return ""


def _sanitize_language(language: str) -> str:
    language = language.strip()
    if len(language) > MAX_LANGUAGE_IDENTIFIER_LENGTH or not _SAFE_LANGUAGE.match(language):
        logger.debug(f"Discarding unsafe code language identifier: {language!r}")
        return ""
    return language


class BlockFormatter:
    """Render block-level elements to chunks.

    Parameters
    ----------
    walker : TreeWalker
        Walker that owns this formatter; used to render child content

    """

    def __init__(self, walker: TreeWalker) -> None:
        self.walker = walker
        self.options = walker.options

    # ------------------------------------------------------------------
    # Headings and paragraphs
    # ------------------------------------------------------------------

    def heading(self, node: Node, ctx: Context) -> list[Chunk]:
        """Render ``h1``-``h6`` as a single-line heading.

        Levels are shifted by ``ctx.heading_offset`` and clamped to 6. With
        ``heading_style="setext"`` levels 1 and 2 are underlined.
        """
        level = min(HEADING_LEVELS[node.tag] + ctx.heading_offset, MAX_HEADING_LEVEL)
        setext = self.options.heading_style == "setext" and level <= 2 and not ctx.in_table_cell

        content = self.walker.render_inline(node.children, ctx.descend(), line_start=setext)
        text = collapse_to_line(trim_inline(content))
        if not text:
            return []

        if ctx.in_table_cell:
            strong = self.options.emphasis_symbol * 2
            return [Chunk(ChunkKind.BLOCK, f"{strong}{text}{strong}")]

        if setext:
            underline = ("=" if level == 1 else "-") * max(3, len(text))
            return [Chunk(ChunkKind.BLOCK, f"{text}\n{underline}")]

        # A trailing run of '#' would be read as a closing sequence
        text = _CLOSING_HASHES_PATTERN.sub(r"\1\\\2", text)
        return [Chunk(ChunkKind.BLOCK, f"{'#' * level} {text}")]

    def paragraph(self, node: Node, ctx: Context) -> list[Chunk]:
        if self.walker.has_block_children(node, ctx):
            return self.container(node, ctx)
        text = trim_inline(self.walker.render_inline(node.children, ctx.descend(), line_start=True))
        return [Chunk(ChunkKind.BLOCK, text)] if text else []

    def container(self, node: Node, ctx: Context) -> list[Chunk]:
        """Splice a container's chunks into the parent; its inline runs become paragraphs."""
        chunks = self.walker.render_blocks(node.children, ctx.descend())
        return [Chunk(ChunkKind.BLOCK, chunk.text) if chunk.kind is ChunkKind.INLINE else chunk for chunk in chunks]

    def thematic_break(self, node: Node, ctx: Context) -> list[Chunk]:
        if ctx.in_table_cell:
            return []
        return [Chunk(ChunkKind.BLOCK, "---")]

    # ------------------------------------------------------------------
    # Blockquotes and lists
    # ------------------------------------------------------------------

    def blockquote(self, node: Node, ctx: Context) -> list[Chunk]:
        chunks = self.walker.render_blocks(node.children, ctx.enter_blockquote().descend())
        if ctx.in_table_cell:
            return chunks

        text = join_blocks(chunks)
        if not text:
            return []
        return [Chunk(ChunkKind.BLOCK, prefix_lines(text, "> "))]

    def list_block(self, node: Node, ctx: Context) -> list[Chunk]:
        """Render ``ul``/``ol`` with markers, nesting and continuation indentation.

        Parameters
        ----------
        node : Node
            The list element
        ctx : Context
            Context of the list element

        Returns
        -------
        list of Chunk
            One LIST chunk, or nothing for a list without items

        Notes
        -----
        Each item's content is indented by ``max(list_indent_width, marker
        width + 1)`` spaces so continuation lines and nested lists line up
        with the item text. Content that is not wrapped in ``<li>`` becomes
        an item of its own, except a stray nested list, which attaches to
        the preceding item.

        """
        ordered = node.tag == "ol"
        start = self._list_start(node) if ordered else 1
        list_ctx = ctx.enter_list(ordered, start).descend()

        items: list[tuple[str, list[Chunk]]] = []
        item_ctx = list_ctx
        pending: list[Node] = []

        def flush_pending() -> None:
            nonlocal list_ctx
            content = [child for child in pending if _has_content(child)]
            pending.clear()
            if not content:
                return
            if items and all(child.is_element and classify(child.tag) is ElementKind.LIST for child in content):
                items[-1][1].extend(self.walker.render_blocks(content, item_ctx))
                return
            list_ctx = list_ctx.next_item()
            items.append((self._marker(list_ctx), self.walker.render_blocks(content, list_ctx)))

        for child in node.children:
            if child.is_element and child.tag == "li":
                flush_pending()
                list_ctx = list_ctx.next_item()
                item_ctx = list_ctx.descend()
                items.append((self._marker(list_ctx), self.walker.render_blocks(child.children, item_ctx)))
            else:
                pending.append(child)
        flush_pending()

        if not items:
            return []

        lines = []
        for marker, chunks in items:
            indent = max(self.options.list_indent_width, len(marker) + 1)
            text = join_item_blocks(chunks)
            if text:
                lines.append(indent_lines(text, " " * indent, (marker + " ").ljust(indent)))
            else:
                lines.append(marker)
        return [Chunk(ChunkKind.LIST, "\n".join(lines))]

    def _marker(self, ctx: Context) -> str:
        frame = ctx.lists[-1]
        if frame.ordered:
            return f"{frame.counter}."
        bullets = self.options.bullet_symbols
        return bullets[(ctx.list_depth - 1) % len(bullets)]

    @staticmethod
    def _list_start(node: Node) -> int:
        try:
            start = int(node.get("start").strip() or "1")
        except ValueError:
            return 1
        # CommonMark list numbers have at most nine digits
        return start if 0 <= start <= 999_999_999 else 1

    def definition_list(self, node: Node, ctx: Context) -> list[Chunk]:
        """Render ``dl`` as bold terms followed by ``: definition`` lines."""
        dl_ctx = ctx.descend()
        strong = self.options.emphasis_symbol * 2
        chunks: list[Chunk] = []
        group: list[str] = []
        last = ""

        def flush_group() -> None:
            if group:
                chunks.append(Chunk(ChunkKind.BLOCK, "\n".join(group)))
                group.clear()

        for child in node.children:
            if child.is_element and child.tag == "dt":
                if last == "dd":
                    flush_group()
                term = self.walker.render_inline(child.children, dl_ctx.descend())
                term = collapse_to_line(trim_inline(term))
                if term:
                    group.append(f"{strong}{term}{strong}")
                last = "dt"
            elif child.is_element and child.tag == "dd":
                definition = join_blocks(self.walker.render_blocks(child.children, dl_ctx.descend()))
                if definition:
                    group.append(indent_lines(definition, "  ", ": "))
                last = "dd"
            elif _has_content(child):
                flush_group()
                chunks.extend(self.walker.render_blocks([child], dl_ctx))
                last = ""
        flush_group()
        return chunks

    # ------------------------------------------------------------------
    # Code blocks
    # ------------------------------------------------------------------

    def code_block(self, node: Node, ctx: Context) -> list[Chunk]:
        """Render ``pre`` as a fenced code block.

        The fence is one character longer than the longest run of the fence
        character in the content, and never shorter than ``code_fence_min``.
        Inside a table cell the content becomes a code span instead.
        """
        code_ctx = ctx.with_mode(Mode.CODE)
        content = normalize_text(gather_code_text(node), code_ctx.mode)
        if not content:
            return []

        if ctx.in_table_cell:
            return [Chunk(ChunkKind.BLOCK, self.walker.inline.code_span_text(content, ctx))]

        fence_char = self.options.code_fence_char
        fence = fence_char * max(self.options.code_fence_min, longest_run(content, fence_char) + 1)
        language = extract_language(node)
        newline = "" if content.endswith("\n") else "\n"
        return [Chunk(ChunkKind.BLOCK, f"{fence}{language}\n{content}{newline}{fence}")]

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def table(self, node: Node, ctx: Context) -> list[Chunk]:
        """Render a pipe table.

        The first row is the header. Alignment comes from the header cells,
        falling back to ``<col>`` elements. A caption renders as an
        emphasized line before the table, and content that is not part of
        any row renders after it.
        """
        if ctx.in_table_cell:
            text = self.flatten_table(node, ctx, TABLE_CELL_LINE_BREAK)
            return [Chunk(ChunkKind.BLOCK, text)] if text else []

        table_ctx = ctx.descend()
        caption, rows, column_aligns, stray = self._collect_table(node, table_ctx)

        grid: list[list[str]] = []
        header_aligns: list[str | None] = []
        for row_index, (row, row_ctx) in enumerate(rows):
            cells: list[str] = []
            for cell in row.element_children("td", "th"):
                span = _span(cell.get("colspan"))
                cells.extend([self._render_cell(cell, row_ctx)] + [""] * (span - 1))
                if row_index == 0:
                    header_aligns.extend([get_alignment(cell)] * span)
            stray.extend(child for child in row.children if _has_content(child) and child.tag not in ("td", "th"))
            grid.append(cells)

        chunks: list[Chunk] = []
        if caption is not None:
            text = collapse_to_line(trim_inline(self.walker.render_inline(caption.children, table_ctx.descend())))
            if text:
                symbol = self.options.emphasis_symbol
                chunks.append(Chunk(ChunkKind.BLOCK, f"{symbol}{text}{symbol}"))

        columns = max((len(cells) for cells in grid), default=0)
        if columns:
            separators = []
            for index in range(columns):
                align = header_aligns[index] if index < len(header_aligns) else None
                if align is None and index < len(column_aligns):
                    align = column_aligns[index]
                separators.append(TABLE_ALIGNMENT_MAPPING.get(align or "", TABLE_DEFAULT_ALIGNMENT))

            lines = [self._format_row(grid[0], columns), self._format_row(separators, columns)]
            lines.extend(self._format_row(cells, columns) for cells in grid[1:])
            chunks.append(Chunk(ChunkKind.BLOCK, "\n".join(lines)))

        if stray:
            chunks.extend(self.walker.render_blocks(stray, table_ctx))
        return chunks

    def flatten_table(self, node: Node, ctx: Context, row_separator: str) -> str:
        """Render a table as text: cells joined by spaces, rows by ``row_separator``."""
        table_ctx = ctx.descend()
        caption, rows, _, _ = self._collect_table(node, table_ctx)
        lines = []
        if caption is not None:
            caption_text = self.walker.render_inline(caption.children, table_ctx.descend())
            lines.append(collapse_to_line(trim_inline(caption_text)))
        for row, row_ctx in rows:
            cells = [self._render_cell(cell, row_ctx) for cell in row.element_children("td", "th")]
            lines.append(" ".join(cell for cell in cells if cell))
        return row_separator.join(line for line in lines if line)

    def _collect_table(
        self, node: Node, table_ctx: Context
    ) -> tuple[Node | None, list[tuple[Node, Context]], list[str | None], list[Node]]:
        caption: Node | None = None
        rows: list[tuple[Node, Context]] = []
        column_aligns: list[str | None] = []
        stray: list[Node] = []

        for child in node.children:
            if not _has_content(child):
                if child.is_element and child.tag in ("colgroup", "col"):
                    column_aligns.extend(self._column_alignments(child))
                continue
            if child.tag == "caption" and caption is None:
                caption = child
            elif child.tag == "tr":
                rows.append((child, table_ctx))
            elif child.tag in ("thead", "tbody", "tfoot"):
                section_ctx = table_ctx.descend()
                for grandchild in child.children:
                    if grandchild.is_element and grandchild.tag == "tr":
                        rows.append((grandchild, section_ctx))
                    elif _has_content(grandchild):
                        stray.append(grandchild)
            else:
                stray.append(child)
        return caption, rows, column_aligns, stray

    @staticmethod
    def _column_alignments(node: Node) -> list[str | None]:
        if node.tag == "col":
            return [get_alignment(node)] * _span(node.get("span"))
        cols = node.element_children("col")
        if not cols:
            return [get_alignment(node)] * _span(node.get("span"))
        aligns: list[str | None] = []
        group_align = get_alignment(node)
        for col in cols:
            aligns.extend([get_alignment(col) or group_align] * _span(col.get("span")))
        return aligns

    def _render_cell(self, cell: Node, row_ctx: Context) -> str:
        cell_ctx = row_ctx.descend().with_mode(Mode.TABLE_CELL).descend()
        chunks = self.walker.render_blocks(cell.children, cell_ctx)
        text = TABLE_CELL_LINE_BREAK.join(trim_inline(chunk.text) for chunk in chunks if chunk.text.strip())
        return text.replace("\n", TABLE_CELL_LINE_BREAK)

    @staticmethod
    def _format_row(cells: list[str], columns: int) -> str:
        padded = cells + [""] * (columns - len(cells))
        return "| " + " | ".join(padded) + " |"
