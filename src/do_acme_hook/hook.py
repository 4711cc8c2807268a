"""dehydrated hook entry point — argument parsing and per-domain dispatch."""

from __future__ import annotations

import logging
import os
import shlex
import sys
import time
from collections.abc import Sequence
from pathlib import Path

from do_acme_hook.config import HookConfig, load_config
from do_acme_hook.dns import get_dns_provider
from do_acme_hook.dns.base import DnsProvider
from do_acme_hook.dns.util import load_zones, resolve_record_name
from do_acme_hook.errors import ConfigError, HookError
from do_acme_hook.models import ChallengeRequest, ResolvedName

logger = logging.getLogger(__name__)

CHALLENGE_HOOKS = ("deploy_challenge", "clean_challenge")
HANDLED_HOOKS = (*CHALLENGE_HOOKS, "exit_hook", "deploy_cert")


def collect_challenges(args: Sequence[str]) -> list[ChallengeRequest]:
    """Group hook arguments into one ChallengeRequest per unique domain.

    dehydrated passes ``<domain> <token-filename> <token-value>`` triples. Wildcard
    domains share the ``_acme-challenge`` record of their base domain, so
    ``*.example.com`` is folded into ``example.com`` and the tokens are merged.
    """
    merged: dict[str, ChallengeRequest] = {}
    for i in range(0, len(args), 3):
        domain = args[i]
        token = args[i + 2] if i + 2 < len(args) else ""
        if domain.startswith("*."):
            logger.debug("Domain %s is a wildcard domain, ACME challenge will be for domain apex (%s)", domain, domain[2:])
            domain = domain[2:]
        tokens = ChallengeRequest.tokens_from_string(token)
        existing = merged.get(domain)
        merged[domain] = existing.merge(tokens) if existing else ChallengeRequest(domain=domain, tokens=tokens)
    return list(merged.values())


def deploy_challenge(provider: DnsProvider, resolved: ResolvedName, tokens: Sequence[str]) -> None:
    """Create one TXT record per token. A failure leaves earlier records in place."""
    for token in tokens:
        provider.create_txt_record(resolved.zone, resolved.relative_name, token)


def clean_challenge(provider: DnsProvider, resolved: ResolvedName) -> int:
    """Remove the challenge TXT records for ``resolved``."""
    return provider.delete_txt_records(resolved.zone, resolved.relative_name)


def _exec_hook(command: str | None) -> None:
    if not command:
        return
    try:
        argv = shlex.split(command)
    except ValueError as exc:
        raise ConfigError(f"Cannot parse hook command {command!r}: {exc}") from exc
    if not argv:
        raise ConfigError(f"Hook command {command!r} is empty")
    logger.debug("Executing %s", argv)
    try:
        os.execvp(argv[0], argv)
    except OSError as exc:
        raise ConfigError(f"Cannot execute hook command {argv[0]}: {exc}") from exc


def run_hook(hook: str, args: Sequence[str], config: HookConfig, provider: DnsProvider | None = None) -> None:
    """Run one hook phase. Errors propagate as HookError subclasses."""
    if hook == "exit_hook":
        _exec_hook(config.exit_hook)
        return
    if hook == "deploy_cert":
        _exec_hook(config.deploy_cert_hook)
        return
    if hook not in CHALLENGE_HOOKS:
        return

    challenges = collect_challenges(args)
    dns = provider or get_dns_provider(config)
    with dns:
        zones = load_zones(dns, config.zones_file)
        logger.debug("Suffix: %r", config.suffix or "")

        for challenge in challenges:
            resolved = resolve_record_name(challenge.domain, zones, config.suffix)
            logger.debug(
                "Domain %s: record=%s name=%s zone=%s%s tokens=%s",
                challenge.domain,
                resolved.fqdn,
                resolved.relative_name,
                resolved.zone,
                " (guessed)" if resolved.guessed else "",
                " ".join(challenge.tokens),
            )
            if hook == "deploy_challenge":
                deploy_challenge(dns, resolved, challenge.tokens)
            else:
                clean_challenge(dns, resolved)

    if hook == "deploy_challenge" and config.wait_seconds > 0:
        logger.debug("Waiting for %s seconds", config.wait_seconds)
        time.sleep(config.wait_seconds)


class _HookFormatter(logging.Formatter):
    """Prefix warnings and errors with "Warning:" / "Error:"; leave other records bare."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if record.levelno >= logging.ERROR:
            return f"Error: {message}"
        if record.levelno >= logging.WARNING:
            return f"Warning: {message}"
        return message


def _configure_logging(debug: bool) -> None:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_HookFormatter("%(message)s"))
    logging.basicConfig(level=logging.INFO, handlers=[handler])
    _set_debug(debug)


def _set_debug(debug: bool) -> None:
    logging.getLogger().setLevel(logging.DEBUG if debug else logging.INFO)
    # httpx logs every request at INFO.
    logging.getLogger("httpx").setLevel(logging.DEBUG if debug else logging.WARNING)


def main(argv: Sequence[str] | None = None) -> int:
    """Console entry point. Returns the process exit status."""
    argv = list(sys.argv if argv is None else argv)
    if len(argv) < 2 or argv[1] not in HANDLED_HOOKS:
        return 0

    hook, args = argv[1], argv[2:]
    _configure_logging(bool(os.environ.get("DEBUG")))
    logger.debug("Args: %s", " ".join(argv[1:]))

    try:
        config = load_config(hook_dir=Path(argv[0]).resolve().parent)
        if config.debug:
            _set_debug(True)
        run_hook(hook, args, config)
    except HookError as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
