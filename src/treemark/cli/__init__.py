"""Command-line interface for treemark.

Convert an HTML document to Markdown from a URL, a file, or standard input.

Examples
--------
Basic usage:
    $ treemark page.html

Fetch a page and save the result:
    $ treemark https://example.com/article.html -o article.md

Read from standard input with setext headings:
    $ cat page.html | treemark - --heading-style setext

Fail when anything could not be converted faithfully:
    $ treemark page.html --strict

Environment Variables
---------------------
Every option reads a default from ``TREEMARK_<OPTION>``:
    TREEMARK_HEADING_STYLE=setext
    TREEMARK_ESCAPE_SPECIAL=false
    TREEMARK_LOG_LEVEL=DEBUG
    TREEMARK_USER_AGENT="my-crawler/1.0"

Exit Codes
----------
    0  success
    1  conversion error
    2  missing dependency (e.g. parser backend not installed)
    3  invalid option value
    4  source could not be read or output could not be written
    5  warnings were recorded and ``--strict`` was given
"""

#  Copyright (c) 2025 Tom Villani, Ph.D.
from __future__ import annotations

import logging
import sys
from collections import Counter

from treemark.api import convert_html
from treemark.cli.builder import (
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
    EXIT_WARNINGS,
    build_options,
    create_parser,
    get_exit_code_for_exception,
)
from treemark.diagnostics import ConversionResult
from treemark.exceptions import TreemarkError
from treemark.logging_utils import configure_logging
from treemark.sources import read_source, write_markdown

logger = logging.getLogger(__name__)

__all__ = ["main", "create_parser"]


def print_summary(result: ConversionResult, source: str, destination: str) -> None:
    """Print a conversion summary to stderr using rich."""
    from rich.console import Console
    from rich.table import Table

    console = Console(stderr=True)
    table = Table(title="Conversion Summary", show_header=True, header_style="bold cyan")
    table.add_column("Item", style="cyan", no_wrap=True)
    table.add_column("Value")

    table.add_row("Source", source)
    table.add_row("Output", destination)
    table.add_row("Characters", str(len(result.markdown)))
    table.add_row("Lines", str(result.markdown.count("\n")))

    counts = Counter(warning.kind.value for warning in result.warnings)
    if counts:
        for kind, count in sorted(counts.items()):
            table.add_row(f"[yellow]Warnings ({kind})[/yellow]", str(count))
    else:
        table.add_row("Warnings", "[green]none[/green]")

    console.print(table)


def main(args: list[str] | None = None) -> int:
    """Run the treemark command-line interface.

    Parameters
    ----------
    args : list[str], optional
        Command-line arguments; ``sys.argv[1:]`` when not given

    Returns
    -------
    int
        Process exit code

    """
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    configure_logging(
        parsed_args.log_level,
        log_file=parsed_args.log_file,
        trace_mode=parsed_args.trace,
        use_rich=parsed_args.rich,
    )

    try:
        markdown_options, parser_options = build_options(parsed_args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    try:
        html = read_source(parsed_args.source, timeout=parsed_args.timeout)
        result = convert_html(html, markdown_options, parser_options)
        for warning in result.warnings:
            logger.warning(str(warning))

        if parsed_args.out:
            written = write_markdown(result.markdown, parsed_args.out)
            destination = str(written)
        else:
            sys.stdout.write(result.markdown)
            sys.stdout.flush()
            destination = "<stdout>"
    except TreemarkError as e:
        logger.debug("Conversion failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return get_exit_code_for_exception(e)

    if parsed_args.rich:
        print_summary(result, parsed_args.source, destination)

    if parsed_args.strict and result.warnings:
        return EXIT_WARNINGS
    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
