"""The polling loop that drives reconciliation ticks."""

import logging
import time
from collections.abc import Callable
from enum import Enum

from cfddns.models import AddressFamily, IPAddress, TickResult
from cfddns.reconciler import Reconciler
from cfddns.resolver import IPResolver

logger = logging.getLogger(__name__)


class SchedulerState(Enum):
    IDLE = "idle"
    TICKING = "ticking"
    SLEEPING = "sleeping"
    TERMINATED = "terminated"


class Scheduler:
    """Run ticks back to back, sleeping a fixed interval in between.

    Ticks never overlap: a slow tick simply delays the next one. With an
    interval of 0 exactly one tick runs.
    """

    def __init__(
        self,
        resolver: IPResolver,
        reconciler: Reconciler,
        hostnames: list[str],
        interval: int = 0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.resolver = resolver
        self.reconciler = reconciler
        self.hostnames = hostnames
        self.interval = interval
        self.state = SchedulerState.IDLE
        self.ticks = 0
        self.any_failed = False
        self._sleep = sleep
        # Only used to log transitions; decisions always come from the provider.
        self._last_addresses: dict[AddressFamily, IPAddress] = {}

    def tick(self) -> TickResult:
        """Resolve all families, then reconcile every hostname."""
        self.state = SchedulerState.TICKING
        self.ticks += 1

        addresses, failures = self.resolver.resolve_all()
        for family, error in failures.items():
            logger.error(f"Could not resolve {family.label}: {error}")
        self._log_transitions(addresses)

        result = self.reconciler.reconcile(addresses, self.hostnames)
        result.resolve_failures = {family: str(error) for family, error in failures.items()}

        if result.failed:
            self.any_failed = True
            logger.warning(f"Tick {self.ticks} finished with failures: {result.summary()}")
        else:
            logger.info(f"Tick {self.ticks} finished: {result.summary()}")
        return result

    def run(self, max_ticks: int | None = None) -> bool:
        """Run until terminated.

        Returns:
            True if no tick had a failed operation.
        """
        try:
            while True:
                self.tick()
                if self.interval <= 0 or (max_ticks is not None and self.ticks >= max_ticks):
                    break
                self.state = SchedulerState.SLEEPING
                logger.debug(f"Sleeping {self.interval}s until next tick")
                self._sleep(self.interval)
        finally:
            self.state = SchedulerState.TERMINATED

        return not self.any_failed

    def _log_transitions(self, addresses: dict[AddressFamily, IPAddress]) -> None:
        for family, address in addresses.items():
            previous = self._last_addresses.get(family)
            if previous != address:
                logger.info(f"{family.label} changed from '{previous}' to '{address}'")
        self._last_addresses.update(addresses)
