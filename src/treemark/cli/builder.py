#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/treemark/cli/builder.py
"""Argument parser construction for the treemark CLI.

Option flags are generated from the fields of :class:`MarkdownOptions` and
:class:`ParserOptions`, using the ``help``, ``choices``, ``type`` and
``cli_name`` entries of each field's metadata.
"""

from __future__ import annotations

import argparse
from dataclasses import MISSING, Field, fields
from typing import Any

from treemark import __version__
from treemark.cli.actions import (
    EnvDefaultStoreAction,
    EnvDefaultStoreFalseAction,
    EnvDefaultStoreTrueAction,
)
from treemark.constants import DEFAULT_FETCH_TIMEOUT
from treemark.exceptions import (
    ConversionError,
    DependencyError,
    FetchError,
    OutputWriteError,
    ValidationError,
)
from treemark.options import MarkdownOptions, ParserOptions

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_DEPENDENCY_ERROR = 2
EXIT_VALIDATION_ERROR = 3
EXIT_FILE_ERROR = 4
EXIT_WARNINGS = 5

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def get_exit_code_for_exception(exception: Exception) -> int:
    """Map an exception to a CLI exit code.

    Parameters
    ----------
    exception : Exception
        The exception to map

    Returns
    -------
    int
        Exit code: 2 for missing dependencies, 3 for invalid arguments, 4 for
        fetch/read/write failures, 1 for conversion failures and anything else

    """
    if isinstance(exception, (DependencyError, ImportError)):
        return EXIT_DEPENDENCY_ERROR
    if isinstance(exception, ValidationError):
        return EXIT_VALIDATION_ERROR
    if isinstance(exception, (FetchError, OutputWriteError)):
        return EXIT_FILE_ERROR
    if isinstance(exception, ConversionError):
        return EXIT_ERROR
    return EXIT_ERROR


def _positive_float(value: str) -> float:
    number = float(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return number


class DynamicCLIBuilder:
    """Build the argument parser from the option dataclasses."""

    option_classes: tuple[type, ...] = (MarkdownOptions, ParserOptions)

    def build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="treemark",
            description="Convert an HTML document (URL, file or stdin) to Markdown.",
            epilog="Every option also reads a default from TREEMARK_<OPTION>, e.g. TREEMARK_HEADING_STYLE=setext.",
        )
        parser.add_argument("source", help="http(s) URL, path to an HTML file, or '-' for standard input")
        parser.add_argument(
            "-o",
            "--out",
            action=EnvDefaultStoreAction,
            metavar="PATH",
            help="Write Markdown to PATH instead of standard output",
        )
        parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

        for options_class in self.option_classes:
            group = parser.add_argument_group(f"{options_class.__name__} options")
            for field in fields(options_class):
                self._add_field_argument(group, field)

        general = parser.add_argument_group("General options")
        general.add_argument(
            "--timeout",
            action=EnvDefaultStoreAction,
            type=_positive_float,
            default=DEFAULT_FETCH_TIMEOUT,
            help=f"HTTP timeout in seconds when SOURCE is a URL (default: {DEFAULT_FETCH_TIMEOUT})",
        )
        general.add_argument(
            "--log-level",
            action=EnvDefaultStoreAction,
            dest="log_level",
            choices=LOG_LEVELS,
            type=str.upper,
            default="WARNING",
            help="Logging level (default: WARNING)",
        )
        general.add_argument("--log-file", action=EnvDefaultStoreAction, dest="log_file", help="Also log to this file")
        general.add_argument("--trace", action=EnvDefaultStoreTrueAction, help="Debug logging with timestamps")
        general.add_argument(
            "--rich", action=EnvDefaultStoreTrueAction, help="Print a summary and log output using rich"
        )
        general.add_argument(
            "--strict",
            action=EnvDefaultStoreTrueAction,
            help="Exit with status 5 when the conversion recorded warnings",
        )
        return parser

    @staticmethod
    def _add_field_argument(group: argparse._ArgumentGroup, field: Field) -> None:
        metadata = field.metadata
        default = field.default if field.default is not MISSING else None
        help_text = metadata.get("help", "")

        if isinstance(default, bool):
            cli_name = metadata.get("cli_name")
            if default:
                flag = f"--{cli_name or 'no-' + field.name.replace('_', '-')}"
                group.add_argument(
                    flag, dest=field.name, action=EnvDefaultStoreFalseAction, help=f"Disable: {help_text}"
                )
            else:
                flag = f"--{cli_name or field.name.replace('_', '-')}"
                group.add_argument(flag, dest=field.name, action=EnvDefaultStoreTrueAction, help=help_text)
            return

        kwargs: dict[str, Any] = {
            "dest": field.name,
            "action": EnvDefaultStoreAction,
            "default": default,
            "help": f"{help_text} (default: {default})",
        }
        if "choices" in metadata:
            kwargs["choices"] = metadata["choices"]
        if "type" in metadata:
            kwargs["type"] = metadata["type"]
        group.add_argument(f"--{field.name.replace('_', '-')}", **kwargs)


def create_parser() -> argparse.ArgumentParser:
    """Create the treemark argument parser."""
    return DynamicCLIBuilder().build_parser()


def build_options(parsed_args: argparse.Namespace) -> tuple[MarkdownOptions, ParserOptions]:
    """Create option objects from parsed arguments.

    Raises
    ------
    ValueError
        If an option value is invalid
    """
    markdown_kwargs = {f.name: getattr(parsed_args, f.name) for f in fields(MarkdownOptions)}
    parser_kwargs = {f.name: getattr(parsed_args, f.name) for f in fields(ParserOptions)}
    return MarkdownOptions(**markdown_kwargs), ParserOptions(**parser_kwargs)
