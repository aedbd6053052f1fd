"""Abstract base class for DNS providers."""

from abc import ABC, abstractmethod

from cfddns.models import ProviderRecord


class DNSProvider(ABC):
    """Abstract DNS provider interface.

    Implementations never cache: every call is a fresh round trip. Failures
    raise ``NetworkError`` (transport) or ``ApiError`` (rejected request).
    """

    @abstractmethod
    def list_records(
        self, zone_id: str, name: str | None = None, record_type: str | None = None
    ) -> list[ProviderRecord]:
        """List DNS records in a zone, in provider order.

        Args:
            zone_id: The provider-assigned zone identifier
            name: Only records with this exact name (e.g. "home.example.com")
            record_type: Only records of this type (e.g. "A")

        Returns:
            List of matching records, possibly empty
        """
        pass

    @abstractmethod
    def create_record(
        self,
        zone_id: str,
        name: str,
        record_type: str,
        content: str,
        ttl: int = 1,
        proxied: bool = False,
    ) -> ProviderRecord:
        """Create a record.

        Not idempotent: calling this twice creates two records.

        Args:
            zone_id: The provider-assigned zone identifier
            name: Fully-qualified record name
            record_type: "A" or "AAAA"
            content: The address to point to
            ttl: Time to live in seconds, 1 for automatic
            proxied: Whether traffic is proxied through the provider

        Returns:
            The record as created by the provider
        """
        pass

    @abstractmethod
    def update_record(self, zone_id: str, record_id: str, content: str) -> ProviderRecord:
        """Point an existing record at a new address.

        Args:
            zone_id: The provider-assigned zone identifier
            record_id: The provider-assigned record identifier
            content: The new address

        Returns:
            The record as updated by the provider
        """
        pass

    def close(self) -> None:
        """Release any held connections."""
