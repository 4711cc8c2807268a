"""DigitalOcean DNS provider — create/delete TXT records via the DigitalOcean REST API."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import httpx

from do_acme_hook.dns.base import DnsProvider
from do_acme_hook.errors import ApiError
from do_acme_hook.models import DnsRecord

logger = logging.getLogger(__name__)

_API_BASE = "https://api.digitalocean.com/v2"
# DigitalOcean rejects TTLs below 30 seconds.
_CHALLENGE_TTL = 300


class DigitalOceanDnsProvider(DnsProvider):
    """DNS provider backed by the DigitalOcean domains API."""

    def __init__(
        self,
        api_token: str,
        api_url: str = _API_BASE,
        timeout: float = 30,
        verify: bool | str = True,
        clean_match: str = "prefix",
        _http_client: httpx.Client | None = None,
    ) -> None:
        self._api_url = api_url.rstrip("/")
        self._clean_match = clean_match
        self._client = _http_client or httpx.Client(
            headers={
                "Authorization": f"Bearer {api_token}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            verify=verify,
            follow_redirects=True,
        )

    def _request(self, method: str, url: str, payload: dict | None = None) -> dict:
        """Send one API request and return the decoded JSON body ({} when empty).

        A request counts as failed when the transport raises, the status is an
        HTTP error, or the body mentions "error" anywhere.
        """
        kwargs = {} if payload is None else {"json": payload}
        try:
            resp = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise ApiError(method, url, str(exc)) from exc

        body = resp.text
        logger.debug("Request %s %s data=%s response=%s", method, url, payload, body)

        if resp.is_error or "error" in body:
            raise ApiError(method, url, body or f"HTTP {resp.status_code}")
        if not body.strip():
            return {}
        try:
            return resp.json()
        except ValueError as exc:
            raise ApiError(method, url, f"invalid JSON response: {body[:200]}") from exc

    def _pages(self, url: str) -> Iterator[dict]:
        """Yield each page of a listing, following ``links.pages.next`` until it runs out."""
        next_page: str | None = url
        while next_page:
            logger.debug("Fetching %s", next_page)
            page = self._request("GET", next_page)
            yield page
            next_page = ((page.get("links") or {}).get("pages") or {}).get("next")
            if next_page:
                logger.debug("Next page at %s", next_page)

    def _matches(self, record: DnsRecord, record_name: str) -> bool:
        if record.type != "TXT":
            return False
        name, wanted = record.name.lower(), record_name.lower()
        if self._clean_match == "exact":
            return name == wanted
        return name.startswith(wanted)

    def list_zones(self) -> list[str]:
        zones: list[str] = []
        for page in self._pages(f"{self._api_url}/domains"):
            zones.extend(domain["name"] for domain in page.get("domains", []))
        return zones

    def list_records(self, zone: str) -> list[DnsRecord]:
        """Return every record in ``zone`` across all result pages."""
        records: list[DnsRecord] = []
        for page in self._pages(f"{self._api_url}/domains/{zone}/records"):
            records.extend(DnsRecord.from_dict(r) for r in page.get("domain_records", []))
        return records

    def create_txt_record(self, zone: str, record_name: str, value: str) -> None:
        self._request(
            "POST",
            f"{self._api_url}/domains/{zone}/records",
            {"type": "TXT", "name": record_name, "data": value, "ttl": _CHALLENGE_TTL},
        )
        logger.info("Created TXT record %s in DigitalOcean zone %s", record_name, zone)

    def delete_txt_records(self, zone: str, record_name: str) -> int:
        # Every page is read before the first delete is issued.
        doomed = [r for r in self.list_records(zone) if self._matches(r, record_name)]
        if not doomed:
            logger.info("No TXT records matching %s in DigitalOcean zone %s", record_name, zone)
            return 0

        logger.debug(
            "Deleting records with IDs %s for names %s",
            [r.id for r in doomed],
            [r.name for r in doomed],
        )
        for record in doomed:
            self._request("DELETE", f"{self._api_url}/domains/{zone}/records/{record.id}")
        logger.info("Deleted %d TXT record(s) %s from DigitalOcean zone %s", len(doomed), record_name, zone)
        return len(doomed)

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()
