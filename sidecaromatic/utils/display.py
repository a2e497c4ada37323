"""Utility functions to print formatted CLI messages for progress updates."""

from __future__ import annotations

from pathlib import Path

import click

__all__ = ["echo_banner", "echo_dataset", "echo_success", "echo_skipped"]


def echo_banner(text: str) -> None:
    """Print a colourful banner announcing a processing step.

    Args:
        text: Banner text.
    """
    click.secho(f"\n=== {text} ===", fg="cyan")


def echo_dataset(path: Path) -> None:
    """Echo a bullet naming the acquisition being converted."""
    click.echo(f"  • {path}")


def echo_success(text: str) -> None:
    """Echo a green success message prefixed with a tick.

    Args:
        text: Message to display.
    """
    click.secho(f"✓ {text}", fg="green")


def echo_skipped(text: str) -> None:
    click.secho(f"– {text}", fg="yellow")
