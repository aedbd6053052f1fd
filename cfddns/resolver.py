"""Public IP address lookup."""

import logging
from concurrent.futures import ThreadPoolExecutor

import httpx

from cfddns.exceptions import NetworkError
from cfddns.models import AddressFamily, IPAddress

logger = logging.getLogger(__name__)


class IPResolver:
    """Resolve this host's public address per family via "what is my IP" endpoints.

    Each endpoint must answer a plain GET with the bare address as the body.
    Families without endpoints are not resolved at all.
    """

    def __init__(self, endpoints: dict[AddressFamily, list[str]], timeout: float = 10.0):
        self.endpoints = {family: urls for family, urls in endpoints.items() if urls}
        self.timeout = timeout

    @property
    def families(self) -> list[AddressFamily]:
        return [family for family in AddressFamily if family in self.endpoints]

    def resolve(self, family: AddressFamily) -> IPAddress:
        """Return the current public address for family.

        Endpoints are tried in configured order and the first valid answer
        wins. There is no retry of a single endpoint.

        Raises:
            NetworkError: If no endpoint produced a valid address.
        """
        urls = self.endpoints.get(family)
        if not urls:
            raise NetworkError(f"No {family.label} endpoint configured")

        errors = []
        for url in urls:
            try:
                return self._query(family, url)
            except NetworkError as e:
                logger.debug(f"{family.label} lookup via {url} failed: {e}")
                errors.append(str(e))

        raise NetworkError("; ".join(errors))

    def _query(self, family: AddressFamily, url: str) -> IPAddress:
        try:
            response = httpx.get(url, timeout=self.timeout)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise NetworkError(f"Could not get external IP from '{url}': {e}") from e

        if not response.is_success:
            raise NetworkError(f"Endpoint '{url}' answered HTTP {response.status_code}")

        body = response.text.strip()
        try:
            return family.parse(body)
        except ValueError as e:
            # Typically an HTML error page from a misconfigured endpoint
            preview = body[:60] + ("..." if len(body) > 60 else "")
            raise NetworkError(
                f"Could not parse {family.label} '{preview}' from '{url}': {e}"
            ) from e

    def resolve_all(
        self,
    ) -> tuple[dict[AddressFamily, IPAddress], dict[AddressFamily, NetworkError]]:
        """Resolve every configured family concurrently.

        Returns once all lookups have finished, as (addresses, failures).
        """
        families = self.families
        addresses: dict[AddressFamily, IPAddress] = {}
        failures: dict[AddressFamily, NetworkError] = {}
        if not families:
            return addresses, failures

        with ThreadPoolExecutor(max_workers=len(families)) as pool:
            futures = {family: pool.submit(self.resolve, family) for family in families}

        for family, future in futures.items():
            try:
                addresses[family] = future.result()
            except NetworkError as e:
                failures[family] = e

        return addresses, failures
