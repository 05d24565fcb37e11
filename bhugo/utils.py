"""Utility functions for bhugo."""

from __future__ import annotations

from collections.abc import Mapping

from rich.console import Console

console = Console()


def print_summary(stats: Mapping[str, int]) -> None:
    """Print per-run statistics using rich console formatting."""
    console.print("[bold green]Bhugo Summary[/]")
    for key in ("created", "updated", "unchanged", "skipped", "failed"):
        style = "bold red" if key == "failed" and stats.get(key) else "bold"
        console.print(f"Notes {key}: [{style}]{stats.get(key, 0)}[/]")
