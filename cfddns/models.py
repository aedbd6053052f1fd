"""Domain types shared by the resolver, provider client and reconciler."""

from dataclasses import dataclass, field
from enum import Enum
from ipaddress import IPv4Address, IPv6Address, ip_address

from pydantic import BaseModel, ConfigDict, Field

IPAddress = IPv4Address | IPv6Address


class AddressFamily(Enum):
    """Address family of a record and of the endpoint used to resolve it."""

    V4 = "v4"
    V6 = "v6"

    @property
    def record_type(self) -> str:
        return "A" if self is AddressFamily.V4 else "AAAA"

    @property
    def label(self) -> str:
        return "IPv4" if self is AddressFamily.V4 else "IPv6"

    def parse(self, text: str) -> IPAddress:
        """Parse text as an address of this family.

        Raises:
            ValueError: If text is not a valid address, or belongs to the
                other family.
        """
        address = ip_address(text.strip())
        expected = IPv4Address if self is AddressFamily.V4 else IPv6Address
        if not isinstance(address, expected):
            raise ValueError(f"'{text.strip()}' is not an {self.label} address")
        return address


class ProviderRecord(BaseModel):
    """A DNS record as stored by the provider."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    zone_id: str = ""
    name: str
    record_type: str = Field(alias="type")
    content: str
    ttl: int = 1
    proxied: bool = False

    def matches(self, hostname: str, record_type: str) -> bool:
        """Check whether this record is the given name and type.

        Names compare literally (a wildcard label is just a label), ignoring
        case and a trailing dot.
        """
        return (
            _normalize_name(self.name) == _normalize_name(hostname)
            and self.record_type.upper() == record_type.upper()
        )

    def has_address(self, address: IPAddress) -> bool:
        """Canonical comparison of the stored content against an address."""
        try:
            return ip_address(self.content.strip()) == address
        except ValueError:
            return self.content == str(address)


def _normalize_name(name: str) -> str:
    return name.rstrip(".").lower()


@dataclass(frozen=True)
class DesiredTarget:
    """A hostname that should resolve to address for its family."""

    hostname: str
    family: AddressFamily
    address: IPAddress

    @property
    def record_type(self) -> str:
        return self.family.record_type

    def __str__(self) -> str:
        return f"{self.record_type} {self.hostname}"


# Plan operations


SKIP_NOT_FOUND = "record not found, creation disabled"
SKIP_UNCHANGED = "unchanged"
SKIP_DUPLICATES = "extra duplicate records ignored"


@dataclass(frozen=True)
class Create:
    target: DesiredTarget


@dataclass(frozen=True)
class Update:
    record: ProviderRecord
    target: DesiredTarget

    @property
    def record_id(self) -> str:
        return self.record.id


@dataclass(frozen=True)
class Skip:
    target: DesiredTarget
    reason: str


Operation = Create | Update | Skip


# Outcomes


class Status(Enum):
    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    SKIPPED = "skipped"
    PLANNED = "planned"
    FAILED = "failed"


@dataclass
class HostResult:
    """Outcome of reconciling one (hostname, family) pair."""

    target: DesiredTarget
    status: Status
    operations: list[Operation] = field(default_factory=list)
    detail: str = ""

    @property
    def failed(self) -> bool:
        return self.status is Status.FAILED


@dataclass
class TickResult:
    """Batch outcome of one reconciliation tick."""

    results: list[HostResult] = field(default_factory=list)
    resolve_failures: dict[AddressFamily, str] = field(default_factory=dict)

    @property
    def failed(self) -> bool:
        return bool(self.resolve_failures) or any(r.failed for r in self.results)

    def count(self, status: Status) -> int:
        return sum(1 for r in self.results if r.status is status)

    def summary(self) -> str:
        parts = [
            f"{self.count(status)} {status.value}"
            for status in Status
            if self.count(status)
        ]
        if self.resolve_failures:
            families = ", ".join(f.label for f in self.resolve_failures)
            parts.append(f"resolution failed for {families}")
        return ", ".join(parts) or "nothing to do"
