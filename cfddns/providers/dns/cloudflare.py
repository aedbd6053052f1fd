"""Cloudflare DNS provider implementation."""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from cfddns.exceptions import ApiError, NetworkError
from cfddns.models import ProviderRecord
from cfddns.providers.dns.base import DNSProvider

logger = logging.getLogger(__name__)


class CloudflareProvider(DNSProvider):
    """DNS provider implementation for the Cloudflare v4 API."""

    BASE_URL = "https://api.cloudflare.com/client/v4"
    PAGE_SIZE = 100

    def __init__(self, token: str, timeout: float = 30.0):
        """Initialize Cloudflare provider.

        Args:
            token: Cloudflare API token with DNS edit permission on the zone
            timeout: Timeout in seconds for every request
        """
        self.client = httpx.Client(
            base_url=self.BASE_URL,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
            timeout=timeout,
        )

    def list_records(
        self, zone_id: str, name: str | None = None, record_type: str | None = None
    ) -> list[ProviderRecord]:
        """List DNS records, following pagination."""
        params: dict[str, Any] = {"per_page": self.PAGE_SIZE}
        if name:
            params["name"] = name
        if record_type:
            params["type"] = record_type

        records = []
        page = 1
        while True:
            payload = self._send(
                "GET", f"/zones/{zone_id}/dns_records", params={**params, "page": page}
            )
            result = payload.get("result") or []
            if not isinstance(result, list):
                raise ApiError(200, "Unexpected response format: 'result' is not a list")

            for item in result:
                record = self._parse_record(item, zone_id)
                if record is not None:
                    records.append(record)

            total_pages = (payload.get("result_info") or {}).get("total_pages") or 1
            if page >= total_pages:
                break
            page += 1

        return records

    def create_record(
        self,
        zone_id: str,
        name: str,
        record_type: str,
        content: str,
        ttl: int = 1,
        proxied: bool = False,
    ) -> ProviderRecord:
        """Create a record."""
        payload = self._send(
            "POST",
            f"/zones/{zone_id}/dns_records",
            json={
                "name": name,
                "type": record_type,
                "content": content,
                "ttl": ttl,
                "proxied": proxied,
            },
        )
        return self._result_record(payload, zone_id)

    def update_record(self, zone_id: str, record_id: str, content: str) -> ProviderRecord:
        """Update only the content of a record, keeping ttl and proxied."""
        payload = self._send(
            "PATCH",
            f"/zones/{zone_id}/dns_records/{record_id}",
            json={"content": content},
        )
        return self._result_record(payload, zone_id)

    def close(self) -> None:
        self.client.close()

    def _send(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        """Send a request and return the decoded envelope.

        Raises:
            NetworkError: On transport failure or timeout
            ApiError: On a non-2xx status or an unsuccessful envelope
        """
        try:
            if method == "GET":
                response = self.client.get(path, **kwargs)
            elif method == "POST":
                response = self.client.post(path, **kwargs)
            else:
                response = self.client.patch(path, **kwargs)
        except httpx.HTTPError as e:
            raise NetworkError(f"{method} {path} failed: {e}") from e

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if not response.is_success:
            raise ApiError(response.status_code, _error_message(payload, response.text))
        if not isinstance(payload, dict):
            raise ApiError(response.status_code, "Response body is not a JSON object")
        if payload.get("success") is False:
            raise ApiError(response.status_code, _error_message(payload, response.text))

        return payload

    def _result_record(self, payload: dict[str, Any], zone_id: str) -> ProviderRecord:
        record = self._parse_record(payload.get("result"), zone_id)
        if record is None:
            raise ApiError(200, "Response did not contain a valid record")
        return record

    def _parse_record(self, item: Any, zone_id: str) -> ProviderRecord | None:
        if not isinstance(item, dict):
            logger.warning(f"Skipping malformed record: {item}")
            return None
        try:
            return ProviderRecord.model_validate({"zone_id": zone_id, **item})
        except ValidationError as e:
            logger.warning(f"Skipping malformed record {item.get('id', '?')}: {e}")
            return None


def _error_message(payload: Any, fallback: str) -> str:
    """Extract the provider's messages from a Cloudflare error envelope."""
    if isinstance(payload, dict):
        errors = payload.get("errors") or []
        messages = []
        for error in errors:
            if isinstance(error, dict) and error.get("message"):
                code = error.get("code")
                messages.append(f"{error['message']} ({code})" if code else error["message"])
        if messages:
            return "; ".join(messages)
    return fallback.strip() or "Unknown error"
