"""DNS record inspection commands."""

from pathlib import Path

import typer
from rich.table import Table

from cfddns.commands.common import ConfigOption, console, get_dns_provider, get_settings
from cfddns.exceptions import ApiError, NetworkError
from cfddns.models import AddressFamily

app = typer.Typer()


@app.command("list")
def list_records(
    config: Path | None = ConfigOption,
    managed_only: bool = typer.Option(
        False, "--managed", "-m", help="Only show records named in CF_DNS_HOSTS"
    ),
) -> None:
    """List the zone's A and AAAA records."""
    settings = get_settings(config)
    provider = get_dns_provider(settings)

    console.print(f"[bold]Address records in zone {settings.zone_id}[/bold]")

    try:
        records = [
            record
            for family in AddressFamily
            for record in provider.list_records(settings.zone_id, record_type=family.record_type)
        ]
    except (ApiError, NetworkError) as e:
        console.print(f"[red]✗[/red] Failed to list records: {e}")
        raise typer.Exit(1)
    finally:
        provider.close()

    if managed_only:
        hostnames = settings.hostnames
        records = [
            r for r in records if any(r.matches(h, r.record_type) for h in hostnames)
        ]

    table = Table()
    table.add_column("Type")
    table.add_column("Name")
    table.add_column("Content")
    table.add_column("TTL")
    table.add_column("Proxied")
    table.add_column("ID")

    for record in records:
        table.add_row(
            record.record_type,
            record.name,
            record.content,
            "auto" if record.ttl == 1 else str(record.ttl),
            "yes" if record.proxied else "no",
            record.id,
        )

    console.print(table)
