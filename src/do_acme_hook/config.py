"""Configuration loading and validation from the environment and dehydrated config files."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from dotenv import dotenv_values

from do_acme_hook.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_DIRS = ("/etc/dehydrated", "/usr/local/etc/dehydrated")

_DIGITALOCEAN_API = "https://api.digitalocean.com/v2"
_DEFAULT_WAIT_SECONDS = 10.0
_DEFAULT_TIMEOUT_SECONDS = 30.0
_CLEAN_MATCH_MODES = ("prefix", "exact")


@dataclass(frozen=True)
class HookConfig:
    """Hook configuration merged from the environment and config files."""

    api_token: str
    zones_file: Path | None = None
    suffix: str | None = None
    wait_seconds: float = _DEFAULT_WAIT_SECONDS
    timeout: float = _DEFAULT_TIMEOUT_SECONDS
    verify: bool | str = True
    api_url: str = _DIGITALOCEAN_API
    clean_match: str = "prefix"
    exit_hook: str | None = None
    deploy_cert_hook: str | None = None
    debug: bool = False


def search_dirs(hook_dir: Path | None = None) -> list[Path]:
    """Directories searched for ``config`` and ``zones.txt``, in priority order."""
    dirs = [Path(d) for d in CONFIG_DIRS]
    dirs.append(Path.cwd())
    if hook_dir is not None:
        dirs.append(hook_dir)
    return dirs


def find_file(name: str, hook_dir: Path | None = None) -> Path | None:
    """Return the first regular file called ``name`` in the search directories."""
    for directory in search_dirs(hook_dir):
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None


def _parse_config_file(path: Path) -> dict[str, str]:
    # Keys declared without a value come back as None and are ignored.
    return {k: v for k, v in dotenv_values(path).items() if v is not None}


def read_settings(hook_dir: Path | None = None, environ: Mapping[str, str] | None = None) -> dict[str, str]:
    """Collect raw settings: environment first, then the config file, then ``CONFIG_D/*.sh``.

    Later sources override earlier ones, matching what sourcing the files from a
    shell would do.
    """
    settings = dict(os.environ if environ is None else environ)

    config_path = settings.get("CONFIG")
    if not config_path:
        found = find_file("config", hook_dir)
        config_path = str(found) if found else None

    if not config_path:
        logger.warning("No config file found, using default config!")
    elif Path(config_path).is_file():
        logger.debug("Loading config file %s", config_path)
        settings.update(_parse_config_file(Path(config_path)))

    config_d = settings.get("CONFIG_D")
    if config_d:
        config_d_path = Path(config_d)
        if not config_d_path.is_dir():
            raise ConfigError(f"The path {config_d} specified for CONFIG_D does not point to a directory.")
        for extra in sorted(config_d_path.glob("*.sh")):
            if not extra.is_file() or not os.access(extra, os.R_OK):
                raise ConfigError(f"Specified additional config {extra} is not readable or not a file at all.")
            logger.info("Using additional config file %s", extra)
            settings.update(_parse_config_file(extra))

    return settings


def _parse_seconds(settings: Mapping[str, str], name: str, default: float, allow_zero: bool) -> float:
    raw = settings.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number of seconds, got: {raw!r}")
    if value < 0 or (value == 0 and not allow_zero):
        qualifier = "non-negative" if allow_zero else "positive"
        raise ConfigError(f"{name} must be a {qualifier} number, got: {raw}")
    return value


def _parse_verify(raw: str | None) -> bool | str:
    if raw is None or raw == "":
        return True
    lowered = raw.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    if not Path(raw).exists():
        raise ConfigError(f"DO_VERIFY must be true, false or a CA bundle path, got: {raw!r}")
    return raw


def _locate_zones_file(settings: Mapping[str, str], hook_dir: Path | None) -> Path | None:
    explicit = settings.get("PDNS_ZONES_TXT")
    if explicit:
        return Path(explicit)
    return find_file("zones.txt", hook_dir)


def load_config(hook_dir: Path | None = None, environ: Mapping[str, str] | None = None) -> HookConfig:
    """Load and validate the hook configuration."""
    settings = read_settings(hook_dir, environ)

    api_token = settings.get("DIGITALOCEAN_TOKEN")
    if not api_token:
        raise ConfigError("DIGITALOCEAN_TOKEN setting is required.")

    clean_match = (settings.get("DO_CLEAN_MATCH") or "prefix").lower()
    if clean_match not in _CLEAN_MATCH_MODES:
        raise ConfigError(f"DO_CLEAN_MATCH must be one of {', '.join(_CLEAN_MATCH_MODES)}, got: {clean_match!r}")

    return HookConfig(
        api_token=api_token,
        zones_file=_locate_zones_file(settings, hook_dir),
        suffix=settings.get("PDNS_SUFFIX") or None,
        wait_seconds=_parse_seconds(settings, "DO_WAIT", _DEFAULT_WAIT_SECONDS, allow_zero=True),
        timeout=_parse_seconds(settings, "DO_TIMEOUT", _DEFAULT_TIMEOUT_SECONDS, allow_zero=False),
        verify=_parse_verify(settings.get("DO_VERIFY")),
        api_url=(settings.get("DO_API_URL") or _DIGITALOCEAN_API).rstrip("/"),
        clean_match=clean_match,
        exit_hook=settings.get("PDNS_EXIT_HOOK") or None,
        deploy_cert_hook=settings.get("PDNS_DEPLOY_CERT_HOOK") or None,
        debug=bool(settings.get("DEBUG")),
    )
