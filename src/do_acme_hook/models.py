"""Data classes passed between the dispatcher, the resolver and the DNS provider."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ChallengeRequest:
    """Pending DNS-01 challenge tokens for a single (de-wildcarded) domain."""

    domain: str
    tokens: tuple[str, ...] = ()

    @staticmethod
    def tokens_from_string(token: str) -> tuple[str, ...]:
        """Split a whitespace-joined token string into its sub-tokens."""
        return tuple(token.split())

    def merge(self, tokens: tuple[str, ...]) -> ChallengeRequest:
        return ChallengeRequest(domain=self.domain, tokens=self.tokens + tokens)


@dataclass(frozen=True)
class ResolvedName:
    """Zone owning a challenge record and the record name relative to that zone."""

    zone: str
    relative_name: str
    guessed: bool = False

    @property
    def fqdn(self) -> str:
        if self.relative_name in ("", "@"):
            return self.zone
        return f"{self.relative_name}.{self.zone}"


@dataclass(frozen=True)
class DnsRecord:
    """A record as returned by the DigitalOcean domain records API."""

    id: int
    type: str
    name: str
    data: str = ""
    ttl: int | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "name": self.name,
            "data": self.data,
            "ttl": self.ttl,
        }

    @classmethod
    def from_dict(cls, data: dict) -> DnsRecord:
        return cls(
            id=data["id"],
            type=data["type"],
            name=data["name"],
            data=data.get("data") or "",
            ttl=data.get("ttl"),
        )
