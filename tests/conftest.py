"""Pytest configuration and shared fixtures for the treemark test suite."""

import logging
import os
from typing import Callable, Generator

import pytest

from treemark import ConversionResult, MarkdownOptions, Node, convert, convert_html

# Configure Hypothesis for property-based testing
try:
    from hypothesis import Phase, Verbosity, settings

    settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
    settings.register_profile("dev", max_examples=20)
    settings.register_profile(
        "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
    )

    profile = os.getenv("HYPOTHESIS_PROFILE", "dev")
    settings.load_profile(profile)
except ImportError:
    # Hypothesis not installed, skip configuration
    pass


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "slow: Slow tests that may take several seconds")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")
    config.addinivalue_line("markers", "property: Property-based tests using Hypothesis")


@pytest.fixture
def md() -> Callable[..., str]:
    """Convert a node tree and return only the Markdown text.

    Keyword arguments are passed to :class:`MarkdownOptions`.
    """

    def _convert(tree: Node, **options) -> str:
        return convert(tree, MarkdownOptions(**options)).markdown

    return _convert


@pytest.fixture
def md_html() -> Callable[..., ConversionResult]:
    """Convert an HTML string and return the full result."""

    def _convert(html: str, **options) -> ConversionResult:
        return convert_html(html, MarkdownOptions(**options))

    return _convert


@pytest.fixture
def restore_logging() -> Generator[None, None, None]:
    """Restore root logger handlers and level changed by the CLI."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    try:
        yield
    finally:
        for handler in root.handlers:
            if handler not in handlers:
                handler.close()
        root.handlers[:] = handlers
        root.setLevel(level)
