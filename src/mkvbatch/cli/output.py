"""CLI output helpers shared by the commands."""

from __future__ import annotations

import sys
from typing import NoReturn

import click

from mkvbatch.cli.exit_codes import ExitCode


def error_exit(message: str, code: ExitCode | int) -> NoReturn:
    """Print an error to stderr and exit with the given code.

    Args:
        message: Error message to display.
        code: Exit code to use.
    """
    click.echo(f"Error: {message}", err=True)
    sys.exit(int(code))
