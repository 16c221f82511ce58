#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/treemark/diagnostics.py
"""Non-fatal conversion diagnostics and the conversion result type.

Structural problems in the input tree never abort a conversion. They are
recorded as :class:`ConversionWarning` values, in document order, and
returned together with the complete Markdown output.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class WarningKind(Enum):
    """Categories of recoverable conversion problems."""

    UNSUPPORTED_ELEMENT = "unsupported_element"
    MISSING_ATTRIBUTE = "missing_attribute"
    DEPTH_LIMIT = "depth_limit"


@dataclass(frozen=True)
class ConversionWarning:
    """A recoverable problem found while converting a tree.

    Parameters
    ----------
    kind : WarningKind
        Category of the problem
    tag : str
        Tag of the element concerned
    message : str
        Human-readable description
    attribute : str or None, default None
        Attribute concerned, for ``MISSING_ATTRIBUTE`` warnings

    """

    kind: WarningKind
    tag: str
    message: str
    attribute: str | None = None

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


class WarningCollector:
    """Collect warnings in the order they are reported."""

    def __init__(self) -> None:
        self._warnings: list[ConversionWarning] = []

    def unsupported_element(self, tag: str, dropped: bool = False) -> None:
        action = "dropped" if dropped else "unwrapped"
        self._add(ConversionWarning(WarningKind.UNSUPPORTED_ELEMENT, tag, f"Unsupported element <{tag}> {action}"))

    def missing_attribute(self, tag: str, attribute: str) -> None:
        self._add(
            ConversionWarning(
                WarningKind.MISSING_ATTRIBUTE,
                tag,
                f"<{tag}> without '{attribute}' attribute",
                attribute=attribute,
            )
        )

    def depth_limit(self, tag: str, max_depth: int) -> None:
        self._add(
            ConversionWarning(
                WarningKind.DEPTH_LIMIT,
                tag,
                f"Nesting deeper than {max_depth} levels at <{tag}>; subtree flattened to text",
            )
        )

    def _add(self, warning: ConversionWarning) -> None:
        logger.debug("Conversion warning: %s", warning)
        self._warnings.append(warning)

    @property
    def warnings(self) -> tuple[ConversionWarning, ...]:
        return tuple(self._warnings)


@dataclass(frozen=True)
class ConversionResult:
    """Markdown output of a conversion and the warnings it produced.

    Parameters
    ----------
    markdown : str
        The converted document
    warnings : tuple of ConversionWarning
        Recoverable problems, in document order

    """

    markdown: str
    warnings: tuple[ConversionWarning, ...] = ()

    @property
    def ok(self) -> bool:
        """Return True when the conversion produced no warnings."""
        return not self.warnings

    def warnings_of(self, kind: WarningKind) -> list[ConversionWarning]:
        return [warning for warning in self.warnings if warning.kind is kind]

    def __str__(self) -> str:
        return self.markdown
