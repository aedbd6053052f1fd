"""CLI entry point for cfddns."""

import typer
from rich.console import Console

from cfddns import __version__
from cfddns.commands import ip, records, run

app = typer.Typer(
    name="cfddns",
    help="Keep Cloudflare A/AAAA records pointed at this host's public IP.",
    no_args_is_help=True,
)
console = Console()

# Register sub-commands
app.add_typer(records.app, name="records", help="Inspect DNS records")

app.command(name="run")(run.run)
app.command(name="ip")(ip.show)


@app.command()
def version() -> None:
    """Show the cfddns version."""
    console.print(f"cfddns v{__version__}")


@app.callback()
def main() -> None:
    """cfddns - dynamic DNS for Cloudflare."""
    pass


if __name__ == "__main__":
    app()
