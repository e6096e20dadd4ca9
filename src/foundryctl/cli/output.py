"""Output utilities for CLI commands with clear intent.

user_output() is for humans and goes to stderr. machine_output() is for
data meant to be piped or parsed and goes to stdout.
"""

from typing import Any

import click


def user_output(message: Any = "", nl: bool = True, color: bool | None = None) -> None:
    """Write a human-facing message to stderr."""
    click.echo(message, nl=nl, err=True, color=color)


def machine_output(message: Any = "", nl: bool = True) -> None:
    """Write machine-readable data to stdout."""
    click.echo(message, nl=nl)


def user_error(message: str) -> None:
    """Write a red "Error:" line to stderr."""
    user_output(click.style("Error: ", fg="red") + message)
