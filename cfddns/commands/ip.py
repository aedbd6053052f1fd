"""Show this host's current public addresses."""

from pathlib import Path

import typer

from cfddns.commands.common import ConfigOption, console, get_settings
from cfddns.resolver import IPResolver


def show(config: Path | None = ConfigOption) -> None:
    """Resolve and print the current public address for each configured family."""
    settings = get_settings(config)
    resolver = IPResolver(settings.endpoints, timeout=settings.http_timeout_seconds)

    addresses, failures = resolver.resolve_all()
    for family in resolver.families:
        if family in addresses:
            console.print(f"[green]✓[/green] {family.label}: {addresses[family]}")
        else:
            console.print(f"[red]✗[/red] {family.label}: {failures[family]}")

    if failures:
        raise typer.Exit(1)
