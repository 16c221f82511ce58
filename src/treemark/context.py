#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/treemark/context.py
"""Traversal context for the tree walker.

A :class:`Context` records where in the document the walker currently is:
the active text mode, the enclosing lists, blockquote depth, emphasis
nesting and tree depth. It is an immutable value. Entering a container
derives a new Context; leaving it simply goes back to using the caller's
value, so every push is matched by a pop without any bookkeeping.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum


class Mode(Enum):
    """Text handling modes.

    NORMAL text is whitespace-collapsed and escaped, CODE text is passed
    through verbatim, and TABLE_CELL text is escaped for a single pipe-table
    line.
    """

    NORMAL = "normal"
    CODE = "code"
    TABLE_CELL = "table_cell"


@dataclass(frozen=True)
class ListFrame:
    """One level of list nesting.

    Parameters
    ----------
    ordered : bool
        Whether the list is numbered
    counter : int
        Number of the current item; before the first item it is one less
        than the list start

    """

    ordered: bool
    counter: int = 0


@dataclass(frozen=True)
class Context:
    """Immutable walker state.

    Parameters
    ----------
    modes : tuple of Mode
        Mode stack; the last entry is the active mode
    lists : tuple of ListFrame
        Enclosing lists, outermost first
    blockquote_depth : int
        Number of enclosing blockquotes
    emphasis_depth : int
        Number of enclosing emphasis elements
    strong_depth : int
        Number of enclosing strong elements
    depth : int
        Element depth below the conversion root
    heading_offset : int
        Levels added to every heading

    """

    modes: tuple[Mode, ...] = (Mode.NORMAL,)
    lists: tuple[ListFrame, ...] = ()
    blockquote_depth: int = 0
    emphasis_depth: int = 0
    strong_depth: int = 0
    depth: int = 0
    heading_offset: int = 0

    @property
    def mode(self) -> Mode:
        return self.modes[-1]

    @property
    def list_depth(self) -> int:
        return len(self.lists)

    @property
    def in_code(self) -> bool:
        return self.mode is Mode.CODE

    @property
    def in_table_cell(self) -> bool:
        return Mode.TABLE_CELL in self.modes

    def with_mode(self, mode: Mode) -> Context:
        """Return a context with ``mode`` pushed on the mode stack."""
        return replace(self, modes=self.modes + (mode,))

    def enter_list(self, ordered: bool, start: int = 1) -> Context:
        """Return a context one list level deeper, positioned before the first item."""
        return replace(self, lists=self.lists + (ListFrame(ordered, start - 1),))

    def next_item(self) -> Context:
        """Return a context whose innermost list frame moved to the next item.

        Raises
        ------
        ValueError
            If the context is not inside a list

        """
        if not self.lists:
            raise ValueError("next_item() called outside of a list")
        frame = self.lists[-1]
        return replace(self, lists=self.lists[:-1] + (ListFrame(frame.ordered, frame.counter + 1),))

    def enter_blockquote(self) -> Context:
        return replace(self, blockquote_depth=self.blockquote_depth + 1)

    def enter_emphasis(self) -> Context:
        return replace(self, emphasis_depth=self.emphasis_depth + 1)

    def enter_strong(self) -> Context:
        return replace(self, strong_depth=self.strong_depth + 1)

    def descend(self) -> Context:
        """Return a context one element level deeper."""
        return replace(self, depth=self.depth + 1)
