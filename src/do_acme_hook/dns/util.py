"""DNS utility functions — zone directory handling and challenge record name resolution."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from do_acme_hook.dns.base import DnsProvider
from do_acme_hook.errors import ConfigError
from do_acme_hook.models import ResolvedName

logger = logging.getLogger(__name__)

CHALLENGE_LABEL = "_acme-challenge"


def _zone_key(zone: str) -> tuple[str, ...]:
    return tuple(reversed(zone.split(".")))


def normalize_zones(zones: Iterable[str]) -> list[str]:
    """Strip whitespace and trailing dots, lower-case, and drop empties and duplicates."""
    seen: dict[str, None] = {}
    for zone in zones:
        name = zone.strip().rstrip(".").lower()
        if name:
            seen.setdefault(name, None)
    return list(seen)


def sort_zones(zones: Iterable[str]) -> list[str]:
    """Order zones most-specific-first.

    Zones are keyed on their reversed label sequence and sorted descending, so
    ``dev.example.com`` (``com, example, dev``) always sorts ahead of
    ``example.com`` (``com, example``) while unrelated zones stay grouped by
    their shared parent.
    """
    return sorted(zones, key=_zone_key, reverse=True)


def read_zones_file(path: Path) -> list[str]:
    """Read a zones file: one zone per line, blank lines and ``#`` comments ignored."""
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot read zones file {path}: {exc}") from exc
    return [line.strip() for line in lines if line.strip() and not line.lstrip().startswith("#")]


def load_zones(provider: DnsProvider, zones_file: Path | None = None) -> list[str]:
    """Return the account's zones, most specific first.

    A local zones file wins when it exists; otherwise the provider is asked.
    """
    if zones_file is not None and zones_file.is_file():
        logger.debug("Reading zones from %s", zones_file)
        raw = read_zones_file(zones_file)
    else:
        raw = provider.list_zones()
    zones = sort_zones(normalize_zones(raw))
    logger.debug("Zones: %s", " ".join(zones))
    return zones


def resolve_record_name(domain: str, zones: Iterable[str], suffix: str | None = None) -> ResolvedName:
    """Find the zone owning ``_acme-challenge.<domain>[.<suffix>]`` and the name relative to it.

    The longest zone that is a dot-suffix of the record name wins. When no zone
    matches, the last two labels are assumed to be the zone and a warning is logged.

    Args:
        domain: Challenge domain, already stripped of any wildcard prefix.
        zones: Known zone names without trailing dots.
        suffix: Optional delegation suffix appended to the record name, for
            ``_acme-challenge`` CNAMEs pointing into a separate zone.

    Returns:
        ResolvedName with the zone and relative record name.
    """
    fqdn = f"{CHALLENGE_LABEL}.{domain.rstrip('.')}"
    if suffix:
        fqdn = f"{fqdn}.{suffix.strip('.')}"
    labels = fqdn.split(".")
    known = set(zones)

    for i in range(len(labels)):
        candidate = ".".join(labels[i:])
        if candidate.lower() in known:
            return ResolvedName(zone=candidate.lower(), relative_name=".".join(labels[:i]) or "@")

    zone = ".".join(labels[-2:])
    name = ".".join(labels[:-2]) or "@"
    logger.warning("zone not found, using '%s' and name '%s'", zone, name)
    return ResolvedName(zone=zone, relative_name=name, guessed=True)
