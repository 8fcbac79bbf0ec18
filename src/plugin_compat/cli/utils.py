"""CLI utility functions and error handling.

Shared helpers for the plugin-compat CLI:
- Exit code constants
- Output helpers for consistent stderr/stdout usage

Example:
    from plugin_compat.cli.utils import error_exit, ExitCode

    if not path.exists():
        error_exit("File not found", exit_code=ExitCode.FILE_NOT_FOUND, path=str(path))
"""

from __future__ import annotations

import sys
from enum import IntEnum
from typing import TYPE_CHECKING

import click

if TYPE_CHECKING:
    from typing import NoReturn


class ExitCode(IntEnum):
    """Standard exit codes for CLI commands.

    Diagnostics are advisory and never change the exit code.
    """

    SUCCESS = 0
    """Command completed successfully."""

    GENERAL_ERROR = 1
    """General error (catch-all for failures)."""

    USAGE_ERROR = 2
    """Invalid usage (bad arguments, missing required options)."""

    FILE_NOT_FOUND = 3
    """Required file or directory not found."""

    VALIDATION_ERROR = 5
    """Settings failed validation or a required version is unparseable."""


def _format(prefix: str, message: str, context: dict[str, str | int | bool | None]) -> str:
    context_str = ", ".join(f"{k}={v}" for k, v in context.items() if v is not None)
    if context_str:
        return f"{prefix}: {message} ({context_str})"
    return f"{prefix}: {message}"


def error(message: str, **context: str | int | bool | None) -> None:
    """Print an error message to stderr.

    Example:
        error("File not found", path="/path/to/file")
        # Output: Error: File not found (path=/path/to/file)
    """
    click.echo(_format("Error", message, context), err=True)


def error_exit(
    message: str,
    exit_code: ExitCode = ExitCode.GENERAL_ERROR,
    **context: str | int | bool | None,
) -> NoReturn:
    """Print an error message to stderr and exit with a code.

    Raises:
        SystemExit: Always exits with the specified code.
    """
    error(message, **context)
    sys.exit(exit_code)


def warn(message: str) -> None:
    """Print a warning block to stderr."""
    click.echo(message, err=True)


def info(message: str) -> None:
    """Print an informational message to stderr.

    Keeps stdout free for machine-readable output.
    """
    click.echo(message, err=True)


def success(message: str) -> None:
    """Print a message to stdout."""
    click.echo(message)


__all__ = [
    "ExitCode",
    "error",
    "error_exit",
    "info",
    "success",
    "warn",
]
