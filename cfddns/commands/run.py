"""The reconciliation daemon command."""

import logging
from pathlib import Path

import typer

from cfddns.commands.common import ConfigOption, get_dns_provider, get_settings
from cfddns.logging_setup import setup_logging
from cfddns.reconciler import Reconciler
from cfddns.resolver import IPResolver
from cfddns.scheduler import Scheduler

logger = logging.getLogger(__name__)


def run(
    config: Path | None = ConfigOption,
    once: bool = typer.Option(False, "--once", help="Run a single tick, ignoring the interval"),
    interval: int | None = typer.Option(
        None, "--interval", "-i", min=0, help="Seconds between ticks (overrides settings)"
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Log planned changes without sending them"
    ),
) -> None:
    """Keep the configured hostnames pointed at this host's public IP."""
    settings = get_settings(config)
    setup_logging(settings.log_level)

    repeat = 0 if once else (interval if interval is not None else settings.repeat_interval_seconds)
    hostnames = settings.hostnames
    resolver = IPResolver(settings.endpoints, timeout=settings.http_timeout_seconds)

    logger.info(f"Monitoring {len(hostnames)} hosts: {', '.join(hostnames)}")
    logger.info(
        "For DNS record types: "
        + ", ".join(family.record_type for family in resolver.families)
    )
    if repeat:
        logger.info(f"Repeat interval: {repeat}s")
    if dry_run:
        logger.info("Dry run: no changes will be sent")

    provider = get_dns_provider(settings)
    reconciler = Reconciler(
        provider,
        settings.zone_id,
        create_if_missing=settings.create_if_missing,
        ttl=settings.ttl,
        proxied=settings.proxied,
        dry_run=dry_run,
        max_attempts=settings.max_attempts,
    )
    scheduler = Scheduler(resolver, reconciler, hostnames, interval=repeat)

    try:
        ok = scheduler.run()
    except KeyboardInterrupt:
        logger.info("Shutting down gracefully...")
        ok = not scheduler.any_failed
    finally:
        provider.close()

    if not ok:
        raise typer.Exit(1)
