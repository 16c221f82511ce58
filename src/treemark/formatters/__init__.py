#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Block and inline Markdown formatters used by the tree walker."""

from treemark.formatters.block import BlockFormatter
from treemark.formatters.inline import InlineFormatter

__all__ = ["BlockFormatter", "InlineFormatter"]
