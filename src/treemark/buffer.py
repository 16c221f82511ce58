#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/treemark/buffer.py
"""Output accumulation for the tree walker."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ChunkKind(Enum):
    """How a rendered chunk takes part in a block sequence.

    INLINE chunks are flushed runs of inline content, BLOCK chunks are
    complete block constructs, and LIST chunks are lists (which attach to a
    preceding list item line without a blank line).
    """

    INLINE = "inline"
    BLOCK = "block"
    LIST = "list"


@dataclass(frozen=True)
class Chunk:
    """A rendered element of a block sequence."""

    kind: ChunkKind
    text: str


class OutputBuffer:
    """Append-only sequence of output segments.

    Segments can be appended but never removed or reordered; ``getvalue``
    joins them in insertion order.
    """

    def __init__(self) -> None:
        self._segments: list[str] = []

    def write(self, segment: str) -> None:
        """Append a segment to the buffer."""
        if segment:
            self._segments.append(segment)

    def getvalue(self) -> str:
        return "".join(self._segments)

    def __len__(self) -> int:
        return len(self._segments)
