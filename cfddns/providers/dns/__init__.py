"""DNS provider implementations."""

from cfddns.providers.dns.base import DNSProvider
from cfddns.providers.dns.cloudflare import CloudflareProvider

__all__ = ["CloudflareProvider", "DNSProvider"]
