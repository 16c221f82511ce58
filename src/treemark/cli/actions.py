"""Custom argparse actions with environment variable defaults.

Every option accepts a default from an environment variable named
``TREEMARK_<DEST>``, where ``<DEST>`` is the upper-cased destination name.
Arguments given on the command line always win over the environment.
"""

from __future__ import annotations

#  Copyright (c) 2025 Tom Villani, Ph.D.
import argparse
import logging
import os
from typing import Any, Callable, Optional, Sequence, Union

ENV_PREFIX = "TREEMARK_"

_TRUE_VALUES = ("true", "1", "yes", "on")


def env_key_for(dest: str) -> str:
    """Return the environment variable name holding the default for ``dest``."""
    return f"{ENV_PREFIX}{dest.upper().replace('-', '_').replace('.', '_')}"


def env_flag(dest: str, default: bool) -> bool:
    """Return a boolean default from the environment, or ``default`` when unset."""
    env_value = os.environ.get(env_key_for(dest))
    if env_value is None:
        return default
    return env_value.strip().lower() in _TRUE_VALUES


class EnvDefaultStoreAction(argparse.Action):
    """Store action whose default may come from a ``TREEMARK_*`` variable.

    Invalid environment values are reported and ignored, leaving the
    built-in default in place.
    """

    def __init__(
        self,
        option_strings: Sequence[str],
        dest: str,
        nargs: Optional[Union[int, str]] = None,
        const: Optional[Any] = None,
        default: Optional[Any] = None,
        type: Optional[Callable[[str], Any]] = None,
        choices: Optional[Sequence[Any]] = None,
        required: bool = False,
        help: Optional[str] = None,
        metavar: Optional[Union[str, tuple[str, ...]]] = None,
    ) -> None:
        env_key = env_key_for(dest)
        env_value = os.environ.get(env_key)
        if env_value is not None:
            try:
                converted = type(env_value) if type is not None else env_value
            except (ValueError, TypeError) as e:
                logging.warning(f"Invalid environment variable {env_key}={env_value}: {e}")
            else:
                if choices is not None and converted not in choices:
                    logging.warning(f"Invalid environment variable {env_key}={env_value}: expected one of {choices}")
                else:
                    default = converted

        super().__init__(
            option_strings=option_strings,
            dest=dest,
            nargs=nargs,
            const=const,
            default=default,
            type=type,
            choices=choices,
            required=required,
            help=help,
            metavar=metavar,
        )

    def __call__(
        self,
        parser: argparse.ArgumentParser,
        namespace: argparse.Namespace,
        values: Union[str, Sequence[Any], None],
        option_string: Optional[str] = None,
    ) -> None:
        setattr(namespace, self.dest, values)


class EnvDefaultStoreTrueAction(argparse.Action):
    """``store_true`` flag whose default may come from a ``TREEMARK_*`` variable."""

    def __init__(
        self,
        option_strings: Sequence[str],
        dest: str,
        default: bool = False,
        required: bool = False,
        help: Optional[str] = None,
    ) -> None:
        super().__init__(
            option_strings=option_strings,
            dest=dest,
            nargs=0,
            const=True,
            default=env_flag(dest, default),
            required=required,
            help=help,
        )

    def __call__(
        self,
        parser: argparse.ArgumentParser,
        namespace: argparse.Namespace,
        values: Union[str, Sequence[Any], None],
        option_string: Optional[str] = None,
    ) -> None:
        setattr(namespace, self.dest, True)


class EnvDefaultStoreFalseAction(argparse.Action):
    """``store_false`` flag (``--no-...``) whose default may come from a ``TREEMARK_*`` variable.

    The environment variable is named after the destination, so
    ``TREEMARK_ESCAPE_SPECIAL=false`` has the same effect as
    ``--no-escape-special``.
    """

    def __init__(
        self,
        option_strings: Sequence[str],
        dest: str,
        default: bool = True,
        required: bool = False,
        help: Optional[str] = None,
    ) -> None:
        super().__init__(
            option_strings=option_strings,
            dest=dest,
            nargs=0,
            const=False,
            default=env_flag(dest, default),
            required=required,
            help=help,
        )

    def __call__(
        self,
        parser: argparse.ArgumentParser,
        namespace: argparse.Namespace,
        values: Union[str, Sequence[Any], None],
        option_string: Optional[str] = None,
    ) -> None:
        setattr(namespace, self.dest, False)
