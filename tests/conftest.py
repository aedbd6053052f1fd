"""Shared test fixtures for cfddns tests."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from cfddns.exceptions import NetworkError
from cfddns.models import ProviderRecord
from cfddns.providers.dns.base import DNSProvider

ENV_VARS = [
    "IPV4_ENDPOINT",
    "IPV6_ENDPOINT",
    "CF_DNS_ZONE_ID",
    "CF_DNS_API_TOKEN",
    "CF_DNS_HOSTS",
    "CF_DNS_CREATE_HOST_RECORDS",
    "CF_DNS_TTL",
    "CF_DNS_PROXIED",
    "REPEAT_INTERVAL_SECONDS",
    "HTTP_TIMEOUT_SECONDS",
    "CF_DNS_MAX_ATTEMPTS",
    "LOG_LEVEL",
]


# ============================================================================
# Fake DNS provider
# ============================================================================


class FakeDNSProvider(DNSProvider):
    """In-memory DNS provider with call tracking and scripted failures."""

    def __init__(self, records: list[ProviderRecord] | None = None):
        self.records = list(records or [])
        self.list_calls: list[tuple[str, str | None, str | None]] = []
        self.create_calls: list[tuple[str, str, str]] = []
        self.update_calls: list[tuple[str, str]] = []
        # hostname -> errors raised by successive list calls
        self.list_errors: dict[str, list[Exception]] = {}
        self.create_errors: list[Exception] = []
        # Creates that are stored but whose response is lost
        self.lost_create_responses = 0
        self._next_id = 1

    def list_records(self, zone_id, name=None, record_type=None):
        self.list_calls.append((zone_id, name, record_type))
        errors = self.list_errors.get(name)
        if errors:
            raise errors.pop(0)
        return [
            r
            for r in self.records
            if (name is None or r.name == name)
            and (record_type is None or r.record_type == record_type)
        ]

    def create_record(self, zone_id, name, record_type, content, ttl=1, proxied=False):
        self.create_calls.append((name, record_type, content))
        if self.create_errors:
            raise self.create_errors.pop(0)
        record = ProviderRecord(
            id=f"new-{self._next_id}",
            zone_id=zone_id,
            name=name,
            record_type=record_type,
            content=content,
            ttl=ttl,
            proxied=proxied,
        )
        self._next_id += 1
        self.records.append(record)
        if self.lost_create_responses:
            self.lost_create_responses -= 1
            raise NetworkError("connection reset")
        return record

    def update_record(self, zone_id, record_id, content):
        self.update_calls.append((record_id, content))
        for i, record in enumerate(self.records):
            if record.id == record_id:
                self.records[i] = record.model_copy(update={"content": content})
                return self.records[i]
        raise AssertionError(f"unknown record {record_id}")

    @property
    def mutation_count(self) -> int:
        return len(self.create_calls) + len(self.update_calls)


def make_record(
    name: str, content: str, record_type: str = "A", record_id: str | None = None
) -> ProviderRecord:
    """Create a ProviderRecord for testing."""
    return ProviderRecord(
        id=record_id or f"id-{name}-{record_type}",
        zone_id="zone-1",
        name=name,
        record_type=record_type,
        content=content,
    )


@pytest.fixture
def fake_provider():
    """Provide a factory for FakeDNSProvider instances."""
    return FakeDNSProvider


@pytest.fixture
def record():
    """Provide the make_record helper."""
    return make_record


# ============================================================================
# CLI / environment fixtures
# ============================================================================


@pytest.fixture
def runner() -> CliRunner:
    """Provide a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def clean_env(tmp_path: Path, monkeypatch) -> Path:
    """Run in an empty directory with no cfddns variables set."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def valid_env(clean_env: Path, monkeypatch) -> Path:
    """Set a minimal valid configuration in the environment."""
    monkeypatch.setenv("IPV4_ENDPOINT", "https://ipv4.example.net")
    monkeypatch.setenv("CF_DNS_ZONE_ID", "zone-1")
    monkeypatch.setenv("CF_DNS_API_TOKEN", "secret-token")
    monkeypatch.setenv("CF_DNS_HOSTS", "a.example.com;b.example.com")
    return clean_env
