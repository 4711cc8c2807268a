"""DNS provider factory — build the configured provider."""

from __future__ import annotations

from do_acme_hook.config import HookConfig
from do_acme_hook.dns.base import DnsProvider
from do_acme_hook.dns.digitalocean import DigitalOceanDnsProvider


def get_dns_provider(config: HookConfig) -> DnsProvider:
    """Instantiate the DigitalOcean provider from the hook configuration."""
    return DigitalOceanDnsProvider(
        api_token=config.api_token,
        api_url=config.api_url,
        timeout=config.timeout,
        verify=config.verify,
        clean_match=config.clean_match,
    )
