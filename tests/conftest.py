"""Shared test fixtures for do-acme-hook."""

import pytest

import do_acme_hook.config as _config


@pytest.fixture(autouse=True)
def _isolate_config_search(tmp_path, monkeypatch):
    """Keep config discovery away from the real /etc/dehydrated and the repo checkout."""
    monkeypatch.setattr(_config, "CONFIG_DIRS", ())
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    for name in ("CONFIG", "CONFIG_D", "DEBUG", "DIGITALOCEAN_TOKEN", "PDNS_ZONES_TXT", "PDNS_SUFFIX", "DO_WAIT"):
        monkeypatch.delenv(name, raising=False)
