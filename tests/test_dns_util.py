"""Tests for zone directory and record name resolution."""

import logging
from unittest.mock import MagicMock

import pytest

from do_acme_hook.dns.util import (
    load_zones,
    normalize_zones,
    read_zones_file,
    resolve_record_name,
    sort_zones,
)
from do_acme_hook.errors import ConfigError
from do_acme_hook.models import ResolvedName


class TestNormalizeZones:
    def test_strips_trailing_dots_and_deduplicates(self):
        assert normalize_zones(["example.com.", "example.com", " Example.COM ", "", "dev.example.com."]) == [
            "example.com",
            "dev.example.com",
        ]


class TestSortZones:
    def test_more_specific_zone_first(self):
        assert sort_zones(["example.com", "dev.example.com"]) == ["dev.example.com", "example.com"]

    def test_suffix_extensions_always_precede_their_parent(self):
        zones = sort_zones(
            ["example.com", "a.example.org", "example.org", "x.dev.example.com", "dev.example.com", "b.example.com"]
        )

        for i, zone in enumerate(zones):
            for other in zones[i + 1 :]:
                assert not other.endswith(f".{zone}"), f"{other} should precede {zone}"


class TestReadZonesFile:
    def test_one_zone_per_line(self, tmp_path):
        path = tmp_path / "zones.txt"
        path.write_text("example.com.\n\n# comment\n  dev.example.com  \n")

        assert read_zones_file(path) == ["example.com.", "dev.example.com"]


class TestLoadZones:
    def test_uses_zones_file_when_present(self, tmp_path):
        path = tmp_path / "zones.txt"
        path.write_text("example.com.\ndev.example.com\n")
        provider = MagicMock()

        zones = load_zones(provider, path)

        assert zones == ["dev.example.com", "example.com"]
        provider.list_zones.assert_not_called()

    def test_queries_provider_without_zones_file(self):
        provider = MagicMock()
        provider.list_zones.return_value = ["example.com", "dev.example.com", "example.com."]

        assert load_zones(provider) == ["dev.example.com", "example.com"]

    def test_queries_provider_when_zones_file_missing(self, tmp_path):
        provider = MagicMock()
        provider.list_zones.return_value = ["example.org"]

        assert load_zones(provider, tmp_path / "missing.txt") == ["example.org"]

    def test_provider_failure_propagates(self):
        provider = MagicMock()
        provider.list_zones.side_effect = RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            load_zones(provider)


class TestResolveRecordName:
    def test_subdomain_in_parent_zone(self):
        assert resolve_record_name("www.example.com", ["example.com"]) == ResolvedName(
            zone="example.com", relative_name="_acme-challenge.www"
        )

    def test_apex_domain(self):
        assert resolve_record_name("example.com", ["example.com"]) == ResolvedName(
            zone="example.com", relative_name="_acme-challenge"
        )

    def test_most_specific_zone_wins(self):
        assert resolve_record_name("a.b.example.com", ["b.example.com", "example.com"]) == ResolvedName(
            zone="b.example.com", relative_name="_acme-challenge.a"
        )

    def test_most_specific_zone_wins_regardless_of_order(self):
        resolved = resolve_record_name("a.b.example.com", ["example.com", "b.example.com"])
        assert resolved.zone == "b.example.com"

    def test_zone_must_match_on_label_boundary(self):
        resolved = resolve_record_name("www.myexample.com", ["example.com", "myexample.com"])
        assert resolved == ResolvedName(zone="myexample.com", relative_name="_acme-challenge.www")

    def test_suffix_for_cname_delegation(self):
        resolved = resolve_record_name("www.example.com", ["example.com", "acme.example.net"], suffix="acme.example.net")
        assert resolved == ResolvedName(zone="acme.example.net", relative_name="_acme-challenge.www.example.com")

    def test_fallback_guesses_last_two_labels(self, caplog):
        with caplog.at_level(logging.WARNING):
            resolved = resolve_record_name("sub.unknown.tld", [])

        assert resolved == ResolvedName(zone="unknown.tld", relative_name="_acme-challenge.sub", guessed=True)
        assert "zone not found, using 'unknown.tld' and name '_acme-challenge.sub'" in caplog.text

    def test_fallback_when_no_zone_matches(self):
        resolved = resolve_record_name("example.com", ["example.org"])
        assert resolved == ResolvedName(zone="example.com", relative_name="_acme-challenge", guessed=True)

    def test_matches_case_insensitively(self):
        resolved = resolve_record_name("WWW.Example.COM", ["example.com"])
        assert resolved.zone == "example.com"
        assert resolved.relative_name == "_acme-challenge.WWW"


class TestReadZonesFileErrors:
    def test_undecodable_file_raises_config_error(self, tmp_path):
        path = tmp_path / "zones.txt"
        path.write_bytes(b"\xff\xfeexample.com\n")

        with pytest.raises(ConfigError, match="Cannot read zones file"):
            read_zones_file(path)

    def test_directory_raises_config_error(self, tmp_path):
        with pytest.raises(ConfigError, match="Cannot read zones file"):
            read_zones_file(tmp_path)
