#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/treemark/api.py
"""Public conversion entry points.

:func:`convert` is the core operation: a parsed node tree in, Markdown and
warnings out. :func:`convert_html` and :func:`html_to_markdown` add parsing
in front of it for callers holding raw HTML.
"""

from __future__ import annotations

import logging
from dataclasses import fields
from typing import Any

from treemark.diagnostics import ConversionResult
from treemark.exceptions import ValidationError
from treemark.nodes import Node
from treemark.options import MarkdownOptions, ParserOptions
from treemark.parsers.html import parse_html
from treemark.walker import TreeWalker

logger = logging.getLogger(__name__)


def convert(tree: Node, options: MarkdownOptions | None = None) -> ConversionResult:
    """Convert a parsed node tree to Markdown.

    Parameters
    ----------
    tree : Node
        Root of the tree to convert
    options : MarkdownOptions, optional
        Rendering options

    Returns
    -------
    ConversionResult
        The Markdown text and the warnings recorded while producing it

    Raises
    ------
    EncodingError
        If a text node holds malformed text; no partial output is returned
    ValidationError
        If ``tree`` is not a Node

    Examples
    --------
        >>> from treemark import convert, h
        >>> convert(h("p", "Use the * character")).markdown
        'Use the \\\\* character\\n'

    """
    if not isinstance(tree, Node):
        raise ValidationError(
            f"Expected a Node tree, got {type(tree).__name__}",
            parameter_name="tree",
            parameter_value=type(tree).__name__,
        )

    walker = TreeWalker(options or MarkdownOptions())
    markdown = walker.walk(tree).getvalue()
    warnings = walker.collected_warnings
    if warnings:
        logger.debug(f"Conversion finished with {len(warnings)} warning(s)")
    return ConversionResult(markdown=markdown, warnings=warnings)


def convert_html(
    html: str | bytes,
    options: MarkdownOptions | None = None,
    parser_options: ParserOptions | None = None,
) -> ConversionResult:
    """Parse HTML and convert it to Markdown.

    Parameters
    ----------
    html : str or bytes
        HTML document or fragment
    options : MarkdownOptions, optional
        Rendering options
    parser_options : ParserOptions, optional
        Parsing options

    Returns
    -------
    ConversionResult
        The Markdown text and the warnings recorded while producing it

    """
    return convert(parse_html(html, parser_options), options)


def html_to_markdown(
    html: str | bytes,
    options: MarkdownOptions | None = None,
    parser_options: ParserOptions | None = None,
    **kwargs: Any,
) -> str:
    """Convert HTML to a Markdown string.

    Keyword arguments naming a :class:`MarkdownOptions` or
    :class:`ParserOptions` field override the corresponding option.

    Parameters
    ----------
    html : str or bytes
        HTML document or fragment
    options : MarkdownOptions, optional
        Rendering options
    parser_options : ParserOptions, optional
        Parsing options
    **kwargs
        Individual option overrides, e.g. ``heading_style="setext"``

    Returns
    -------
    str
        The Markdown text; warnings are discarded

    Raises
    ------
    ValidationError
        If a keyword argument is not an option name or has an invalid value

    """
    options = options or MarkdownOptions()
    parser_options = parser_options or ParserOptions()

    markdown_fields = {f.name for f in fields(MarkdownOptions)}
    parser_fields = {f.name for f in fields(ParserOptions)}
    markdown_updates = {key: value for key, value in kwargs.items() if key in markdown_fields}
    parser_updates = {key: value for key, value in kwargs.items() if key in parser_fields}

    unknown = sorted(set(kwargs) - markdown_fields - parser_fields)
    if unknown:
        raise ValidationError(f"Unknown option(s): {', '.join(unknown)}", parameter_name=unknown[0])

    try:
        if markdown_updates:
            options = options.create_updated(**markdown_updates)
        if parser_updates:
            parser_options = parser_options.create_updated(**parser_updates)
    except ValueError as e:
        raise ValidationError(str(e), original_error=e) from e

    return convert_html(html, options, parser_options).markdown
