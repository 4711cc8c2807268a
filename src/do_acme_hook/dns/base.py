"""Abstract base class for DNS providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Self


class DnsProvider(ABC):
    """Interface for DNS providers that manage ACME DNS-01 challenge TXT records."""

    def close(self) -> None:
        """Release resources. Override in subclasses that hold open connections."""

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    @abstractmethod
    def list_zones(self) -> list[str]:
        """Return the names of every zone hosted by the account."""

    @abstractmethod
    def create_txt_record(self, zone: str, record_name: str, value: str) -> None:
        """Create a TXT record for DNS-01 challenge validation.

        Args:
            zone: DNS zone name (e.g. "example.com").
            record_name: Relative record name within the zone (e.g. "_acme-challenge.www").
            value: TXT record value (the ACME challenge token).
        """

    @abstractmethod
    def delete_txt_records(self, zone: str, record_name: str) -> int:
        """Delete the challenge TXT records named ``record_name`` after validation.

        Args:
            zone: DNS zone name (e.g. "example.com").
            record_name: Relative record name within the zone (e.g. "_acme-challenge.www").

        Returns:
            Number of records deleted. Zero is not an error.
        """
