"""Tests for DnsProvider ABC."""

import pytest

from do_acme_hook.dns.base import DnsProvider


class FakeProvider(DnsProvider):
    closed = False

    def list_zones(self):
        return []

    def create_txt_record(self, zone, record_name, value):
        pass

    def delete_txt_records(self, zone, record_name):
        return 0

    def close(self):
        self.closed = True


def test_cannot_instantiate_abc():
    with pytest.raises(TypeError, match="abstract"):
        DnsProvider()


def test_concrete_subclass_works():
    provider = FakeProvider()
    assert isinstance(provider, DnsProvider)


def test_context_manager_closes_provider():
    with FakeProvider() as provider:
        assert not provider.closed
    assert provider.closed
