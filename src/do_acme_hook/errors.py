"""Exceptions raised by the hook. Anything derived from HookError aborts the invocation."""

from __future__ import annotations


class HookError(Exception):
    """Fatal hook failure; the invocation exits with status 1."""


class ConfigError(HookError, ValueError):
    """Missing or invalid configuration."""


class ApiError(HookError):
    """A DigitalOcean API request failed or reported an error."""

    def __init__(self, method: str, url: str, detail: str) -> None:
        super().__init__(f"API error: {method} {url}: {detail}")
        self.method = method
        self.url = url
        self.detail = detail
