#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/treemark/walker.py
"""Depth-first traversal of a node tree into Markdown.

The :class:`TreeWalker` owns one conversion. It classifies each element with
:func:`treemark.tags.classify`, dispatches it to exactly one handler of the
:class:`~treemark.formatters.block.BlockFormatter` or
:class:`~treemark.formatters.inline.InlineFormatter`, and threads an
immutable :class:`~treemark.context.Context` through the recursion.

Block sequences are rendered by :meth:`TreeWalker.render_blocks`: runs of
consecutive inline nodes are gathered into one inline chunk, and each
block-level node contributes its own chunks. Inline content is rendered by
:meth:`TreeWalker.render_inline`, which joins fragments through an
:class:`~treemark.whitespace.InlineRun`.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable

from treemark.buffer import Chunk, ChunkKind, OutputBuffer
from treemark.context import Context, Mode
from treemark.diagnostics import ConversionWarning, WarningCollector
from treemark.escape import escape
from treemark.formatters.block import BlockFormatter
from treemark.formatters.inline import InlineFormatter, ensure_encodable, gather_code_text
from treemark.nodes import Node
from treemark.options import MarkdownOptions
from treemark.tags import BLOCK_KINDS, PASS_THROUGH_KINDS, ElementKind, classify
from treemark.whitespace import InlineRun, collapse_to_line, join_blocks, normalize_text, trim_inline

logger = logging.getLogger(__name__)

# Inline kinds rendered with delimiter runs that depend on their neighbors
_DELIMITER_KINDS = frozenset({ElementKind.STRONG, ElementKind.EMPHASIS, ElementKind.STRIKETHROUGH})
_NEIGHBOR_AWARE_KINDS = _DELIMITER_KINDS | PASS_THROUGH_KINDS

# First character each inline kind renders, where it is fixed
_LEADING_CHARS = {
    ElementKind.LINK: "[",
    ElementKind.IMAGE: "!",
    ElementKind.CODE: "`",
    ElementKind.CODE_BLOCK: "`",
    ElementKind.STRIKETHROUGH: "~",
    ElementKind.LINE_BREAK: " ",
    ElementKind.IGNORED: "",
}


class TreeWalker:
    """Convert one node tree to Markdown.

    A walker holds the per-conversion state (warnings, link references) and
    is not meant to be reused across conversions.

    Parameters
    ----------
    options : MarkdownOptions, optional
        Rendering options

    Examples
    --------
        >>> from treemark.nodes import h
        >>> walker = TreeWalker()
        >>> walker.walk(h("p", "Hello ", h("b", "world"))).getvalue()
        'Hello **world**\\n'

    """

    # Handler names on the BlockFormatter, per element kind
    _BLOCK_HANDLERS = {
        ElementKind.HEADING: "heading",
        ElementKind.PARAGRAPH: "paragraph",
        ElementKind.BLOCKQUOTE: "blockquote",
        ElementKind.LIST: "list_block",
        ElementKind.LIST_ITEM: "container",
        ElementKind.CODE_BLOCK: "code_block",
        ElementKind.TABLE: "table",
        ElementKind.THEMATIC_BREAK: "thematic_break",
        ElementKind.DEFINITION_LIST: "definition_list",
        ElementKind.CONTAINER: "container",
    }

    # Handler names on the InlineFormatter, per element kind
    _INLINE_HANDLERS = {
        ElementKind.STRONG: "strong",
        ElementKind.EMPHASIS: "emphasis",
        ElementKind.STRIKETHROUGH: "strikethrough",
        ElementKind.CODE: "code_span",
        ElementKind.LINK: "link",
        ElementKind.IMAGE: "image",
        ElementKind.LINE_BREAK: "line_break",
    }

    def __init__(self, options: MarkdownOptions | None = None) -> None:
        self.options = options or MarkdownOptions()
        self.warnings = WarningCollector()
        self.inline = InlineFormatter(self)
        self.block = BlockFormatter(self)
        self._references: list[tuple[str, str]] = []
        self._reference_numbers: dict[tuple[str, str], int] = {}
        self._block_cache: dict[int, bool] = {}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def walk(self, root: Node, context: Context | None = None) -> OutputBuffer:
        """Render ``root`` as a document and return the filled buffer.

        Parameters
        ----------
        root : Node
            Root of the tree to convert
        context : Context, optional
            Starting context; a fresh one by default

        Returns
        -------
        OutputBuffer
            Buffer holding the complete Markdown document. A document whose
            last chunk is a block ends with a newline; a bare inline run
            does not.

        """
        ctx = context or Context()
        chunks: list[Chunk] = []

        if self.options.extract_title:
            title = self._find_title(root)
            if title:
                chunks.append(Chunk(ChunkKind.BLOCK, f"# {title}"))
                ctx = replace(ctx, heading_offset=ctx.heading_offset + 1)

        chunks.extend(self.render_blocks([root], ctx))

        if self._references:
            definitions = self.inline.reference_definitions(self._references)
            chunks.append(Chunk(ChunkKind.BLOCK, definitions))

        chunks = [chunk for chunk in chunks if chunk.text.strip()]
        buffer = OutputBuffer()
        buffer.write(join_blocks(chunks))
        if chunks and chunks[-1].kind is not ChunkKind.INLINE:
            buffer.write("\n")

        logger.debug(f"Walked tree into {len(chunks)} top-level chunks with {len(self.warnings.warnings)} warnings")
        return buffer

    def render_blocks(self, nodes: Iterable[Node], ctx: Context) -> list[Chunk]:
        """Render a sequence of sibling nodes as blocks.

        Consecutive inline-level nodes are collected into a single inline
        run, flushed as one INLINE chunk when a block-level node arrives or
        the sequence ends.

        Parameters
        ----------
        nodes : iterable of Node
            Sibling nodes in document order
        ctx : Context
            Context the nodes are rendered in

        Returns
        -------
        list of Chunk
            Rendered chunks in document order

        """
        chunks: list[Chunk] = []
        inline_buffer: list[Node] = []

        def flush_inline() -> None:
            if not inline_buffer:
                return
            text = trim_inline(self.render_inline(inline_buffer, ctx, line_start=True))
            inline_buffer.clear()
            if text:
                chunks.append(Chunk(ChunkKind.INLINE, text))

        for node in nodes:
            if self.is_block(node, ctx):
                flush_inline()
                chunks.extend(self._render_block_node(node, ctx))
            else:
                inline_buffer.append(node)
        flush_inline()
        return chunks

    def render_inline(
        self,
        nodes: Iterable[Node],
        ctx: Context,
        line_start: bool = False,
        preceding: str = "",
        following: str = "",
    ) -> str:
        """Render nodes as one inline run.

        Parameters
        ----------
        nodes : iterable of Node
            Nodes in document order
        ctx : Context
            Context the nodes are rendered in
        line_start : bool, default False
            Whether the run begins at the start of an output line
        preceding : str, default ""
            Character rendered just before the run; empty for whitespace or a
            line edge
        following : str, default ""
            Character rendered just after the run

        Returns
        -------
        str
            The joined fragments, untrimmed

        """
        nodes = list(nodes)
        run = InlineRun(line_start)
        for index, node in enumerate(nodes):
            after = following
            if node.is_element and classify(node.tag) in _NEIGHBOR_AWARE_KINDS:
                after = self._next_char(nodes, index + 1, following)
            fragment = self.render_inline_node(node, ctx, run.at_line_start, run.last_char or preceding, after)
            run.append(fragment)
        return run.getvalue()

    def render_inline_node(
        self,
        node: Node,
        ctx: Context,
        line_start: bool = False,
        preceding: str = "",
        following: str = "",
    ) -> str:
        """Render a single node as an inline fragment.

        ``preceding`` and ``following`` are the characters rendered next to
        the node; emphasis handlers use them to pick a delimiter that parses
        back.
        """
        self.on_node(node, ctx)

        if node.is_text:
            return self.inline.text(node, ctx, line_start)
        if node.is_comment:
            return self.inline.comment(node, ctx)
        if ctx.depth >= self.options.max_depth:
            return self._flatten(node, ctx, line_start)

        kind = classify(node.tag)
        if kind in _DELIMITER_KINDS:
            return getattr(self.inline, self._INLINE_HANDLERS[kind])(node, ctx, preceding, following)
        handler_name = self._INLINE_HANDLERS.get(kind)
        if handler_name:
            return getattr(self.inline, handler_name)(node, ctx)

        if kind is ElementKind.IGNORED:
            return ""
        if kind is ElementKind.UNKNOWN:
            dropped = self.options.unknown_tag_mode == "drop"
            self.warnings.unsupported_element(node.tag, dropped=dropped)
            if dropped:
                return ""
        if kind in PASS_THROUGH_KINDS:
            return self.render_inline(node.children, ctx.descend(), line_start, preceding, following)

        return self._degrade_block(node, kind, ctx)

    def has_block_children(self, node: Node, ctx: Context) -> bool:
        """Return True when any child of ``node`` renders as a block."""
        child_ctx = ctx.descend()
        return any(self.is_block(child, child_ctx) for child in node.children)

    def is_block(self, node: Node, ctx: Context) -> bool:
        """Return True when ``node`` renders as a block in ``ctx``.

        Block-level kinds are always blocks. Pass-through elements (``span``,
        unknown tags, table parts outside a table) are blocks when they
        contain block-level content. Elements at the depth limit are
        flattened into inline text.
        """
        if not node.is_element or ctx.depth >= self.options.max_depth:
            return False
        kind = classify(node.tag)
        if kind in BLOCK_KINDS:
            return True
        if kind in PASS_THROUGH_KINDS:
            if kind is ElementKind.UNKNOWN and self.options.unknown_tag_mode == "drop":
                return False
            return self._contains_block(node)
        return False

    def reference_number(self, url: str, title: str) -> int:
        """Return the reference number for a link target, assigning the next one if new."""
        key = (url, title)
        number = self._reference_numbers.get(key)
        if number is None:
            self._references.append(key)
            number = len(self._references)
            self._reference_numbers[key] = number
        return number

    def on_node(self, node: Node, ctx: Context) -> None:
        """Hook called with every node the walker dispatches, and its context.

        Subclasses can override it to observe the traversal; the default
        does nothing.
        """

    @property
    def collected_warnings(self) -> tuple[ConversionWarning, ...]:
        return self.warnings.warnings

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _render_block_node(self, node: Node, ctx: Context) -> list[Chunk]:
        self.on_node(node, ctx)
        kind = classify(node.tag)

        handler_name = self._BLOCK_HANDLERS.get(kind)
        if handler_name:
            return getattr(self.block, handler_name)(node, ctx)

        # Pass-through element holding block content
        if kind is ElementKind.UNKNOWN:
            self.warnings.unsupported_element(node.tag)
        return self.render_blocks(node.children, ctx.descend())

    def _next_char(self, nodes: list[Node], start: int, default: str) -> str:
        """Return the first character the nodes from ``start`` on will render."""
        for node in nodes[start:]:
            char = self._leading_char(node)
            if char:
                return char
        return default

    def _leading_char(self, node: Node) -> str:
        if node.is_text:
            return normalize_text(node.data)[:1]
        if node.is_comment:
            return "<" if self.options.comment_mode == "html" else ""
        if not node.is_element:
            return ""
        kind = classify(node.tag)
        if kind in _LEADING_CHARS:
            return _LEADING_CHARS[kind]
        if kind in (ElementKind.STRONG, ElementKind.EMPHASIS):
            return self.options.emphasis_symbol
        if kind in BLOCK_KINDS:
            return " "
        return normalize_text(node.text_content())[:1]

    def _degrade_block(self, node: Node, kind: ElementKind, ctx: Context) -> str:
        """Render a block-level element met in inline context as inline content."""
        if kind is ElementKind.CODE_BLOCK:
            return self.inline.code_span_text(gather_code_text(node), ctx)
        if kind is ElementKind.THEMATIC_BREAK:
            return " "
        if kind is ElementKind.TABLE:
            return " " + self.block.flatten_table(node, ctx, " ") + " "

        child_ctx = ctx
        if kind is ElementKind.LIST:
            child_ctx = ctx.enter_list(node.tag == "ol")
        elif kind is ElementKind.BLOCKQUOTE:
            child_ctx = ctx.enter_blockquote()
        return " " + self.render_inline(node.children, child_ctx.descend()) + " "

    def _flatten(self, node: Node, ctx: Context, line_start: bool) -> str:
        """Render a subtree past the depth limit as its plain text."""
        self.warnings.depth_limit(node.tag, self.options.max_depth)
        text = normalize_text(ensure_encodable(node.text_content(), "text content"), ctx.mode)
        if self.options.escape_special:
            text = escape(text, ctx.mode, line_start=line_start)
        return text

    def _contains_block(self, node: Node) -> bool:
        """Return True when a pass-through element holds block-level content.

        Nested pass-through elements are searched too. Results are cached per
        node and computed with an explicit stack.
        """
        cache = self._block_cache
        cached = cache.get(id(node))
        if cached is not None:
            return cached

        stack: list[tuple[Node, bool]] = [(node, False)]
        while stack:
            current, expanded = stack.pop()
            if id(current) in cache:
                continue
            pass_through = [
                child
                for child in current.children
                if child.is_element and classify(child.tag) in PASS_THROUGH_KINDS
            ]
            if not expanded:
                stack.append((current, True))
                stack.extend((child, False) for child in pass_through if id(child) not in cache)
                continue
            cache[id(current)] = any(
                child.is_element and classify(child.tag) in BLOCK_KINDS for child in current.children
            ) or any(cache.get(id(child), False) for child in pass_through)
        return cache[id(node)]

    def _find_title(self, root: Node) -> str:
        for node in root.iter_descendants():
            if node.is_element and node.tag == "title":
                title = collapse_to_line(normalize_text(ensure_encodable(node.text_content(), "title"))).strip()
                if title and self.options.escape_special:
                    title = escape(title, Mode.NORMAL, line_start=False)
                return title
        return ""
