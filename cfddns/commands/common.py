"""Helpers shared by CLI commands."""

from pathlib import Path

import typer
from rich.console import Console

from cfddns.config import Settings, load_settings
from cfddns.exceptions import ConfigError
from cfddns.providers.dns import CloudflareProvider

console = Console()

ConfigOption = typer.Option(
    None,
    "--config",
    "-c",
    help="YAML settings file (default: cfddns.yaml in this or a parent directory)",
    dir_okay=False,
)


def get_settings(config_path: Path | None = None) -> Settings:
    """Load settings, exiting with a readable message when they are invalid."""
    try:
        return load_settings(config_path)
    except ConfigError as e:
        console.print("[red]✗[/red] Invalid configuration:")
        for problem in e.problems:
            console.print(f"  {problem}")
        raise typer.Exit(1)


def get_dns_provider(settings: Settings) -> CloudflareProvider:
    """Get the DNS provider for the configured credentials."""
    return CloudflareProvider(
        token=settings.api_token,
        timeout=settings.http_timeout_seconds,
    )
