"""Reconcile provider records against this host's current addresses.

Every tick starts from scratch: provider state is listed again for each
(hostname, family) pair, a small plan is computed, and the plan is executed
right away. Nothing about previous ticks is remembered.
"""

import logging
import time
from collections.abc import Callable

from cfddns.exceptions import ApiError, CfddnsError, NetworkError, PolicyError
from cfddns.models import (
    SKIP_DUPLICATES,
    SKIP_NOT_FOUND,
    SKIP_UNCHANGED,
    AddressFamily,
    Create,
    DesiredTarget,
    HostResult,
    IPAddress,
    Operation,
    ProviderRecord,
    Skip,
    Status,
    TickResult,
    Update,
)
from cfddns.providers.dns.base import DNSProvider

logger = logging.getLogger(__name__)


def plan_operations(
    target: DesiredTarget, records: list[ProviderRecord], create_if_missing: bool
) -> list[Operation]:
    """Decide what to do for one target given the provider's records.

    Only records with the target's exact name and record type are
    considered. When several match, the first in provider order is
    authoritative and the rest are reported, not touched.

    Raises:
        PolicyError: If no record matches and creation is disabled.
    """
    matching = [r for r in records if r.matches(target.hostname, target.record_type)]

    if not matching:
        if not create_if_missing:
            raise PolicyError(SKIP_NOT_FOUND)
        return [Create(target)]

    current = matching[0]
    if current.has_address(target.address):
        operations: list[Operation] = [Skip(target, SKIP_UNCHANGED)]
    else:
        operations = [Update(current, target)]

    if len(matching) > 1:
        operations.append(Skip(target, SKIP_DUPLICATES))
    return operations


def _is_retryable(error: CfddnsError) -> bool:
    if isinstance(error, ApiError):
        return error.retryable
    return isinstance(error, NetworkError)


class Reconciler:
    """Bring a zone's address records in line with resolved addresses."""

    def __init__(
        self,
        provider: DNSProvider,
        zone_id: str,
        *,
        create_if_missing: bool = False,
        ttl: int = 1,
        proxied: bool = False,
        dry_run: bool = False,
        max_attempts: int = 3,
        retry_delay: float = 2.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.provider = provider
        self.zone_id = zone_id
        self.create_if_missing = create_if_missing
        self.ttl = ttl
        self.proxied = proxied
        self.dry_run = dry_run
        self.max_attempts = max(1, max_attempts)
        self.retry_delay = retry_delay
        self._sleep = sleep

    def reconcile(
        self, addresses: dict[AddressFamily, IPAddress], hostnames: list[str]
    ) -> TickResult:
        """Reconcile every hostname for every family that has an address.

        A failure for one hostname does not stop the others; the caller
        gets the whole batch back.
        """
        tick = TickResult()
        for hostname in hostnames:
            for family in AddressFamily:
                address = addresses.get(family)
                if address is None:
                    continue
                target = DesiredTarget(hostname=hostname, family=family, address=address)
                tick.results.append(self.reconcile_target(target))
        return tick

    def reconcile_target(self, target: DesiredTarget) -> HostResult:
        """List, decide and apply for a single target, retrying safely.

        Each attempt lists the records again before deciding, so a create
        that reached the provider before failing is never sent twice.
        """
        attempt = 1
        while True:
            try:
                return self._attempt(target)
            except (NetworkError, ApiError) as e:
                if not _is_retryable(e) or attempt >= self.max_attempts:
                    logger.error(f"Failed to reconcile {target}: {e}")
                    return HostResult(target, Status.FAILED, detail=str(e))
                delay = self.retry_delay * attempt
                logger.warning(
                    f"Attempt {attempt}/{self.max_attempts} for {target} failed: {e}; "
                    f"retrying in {delay:g}s"
                )
                self._sleep(delay)
                attempt += 1

    def _attempt(self, target: DesiredTarget) -> HostResult:
        records = self.provider.list_records(
            self.zone_id, name=target.hostname, record_type=target.record_type
        )
        try:
            operations = plan_operations(target, records, self.create_if_missing)
        except PolicyError as e:
            logger.warning(
                f"No {target.record_type} record named '{target.hostname}' "
                f"and record creation is disabled"
            )
            return HostResult(
                target, Status.SKIPPED, operations=[Skip(target, str(e))], detail=str(e)
            )

        result = HostResult(target, Status.SKIPPED, operations=operations)
        for operation in operations:
            if isinstance(operation, Create):
                result.status = self._create(operation)
            elif isinstance(operation, Update):
                result.status = self._update(operation)
            elif operation.reason == SKIP_UNCHANGED:
                logger.debug(f"{target} already points to {target.address}")
                result.status = Status.UNCHANGED
            else:
                logger.warning(
                    f"Multiple {target.record_type} records named '{target.hostname}'; "
                    f"only the first was considered"
                )
        return result

    def _create(self, operation: Create) -> Status:
        target = operation.target
        if self.dry_run:
            logger.info(f"Would create {target} with IP '{target.address}'")
            return Status.PLANNED

        self.provider.create_record(
            self.zone_id,
            target.hostname,
            target.record_type,
            str(target.address),
            ttl=self.ttl,
            proxied=self.proxied,
        )
        logger.info(f"Created {target} with IP '{target.address}'")
        return Status.CREATED

    def _update(self, operation: Update) -> Status:
        target = operation.target
        old = operation.record.content
        if self.dry_run:
            logger.info(f"Would update {target} from IP '{old}' to '{target.address}'")
            return Status.PLANNED

        self.provider.update_record(self.zone_id, operation.record_id, str(target.address))
        logger.info(f"Updated {target} from IP '{old}' to '{target.address}'")
        return Status.UPDATED
