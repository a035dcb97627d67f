"""Shared fixtures for the myipmon test suite."""

from __future__ import annotations

import pytest
from loguru import logger

from myipmon.models import TrafficCounters
from myipmon.reconcile import build_snapshot
from myipmon.stats import RawStatsProvider


class FakeProvider(RawStatsProvider):
    """In-memory provider; set ``error`` to make both queries raise it."""

    def __init__(self, addresses=None, traffic=None):
        self.addresses = dict(addresses or {})
        self.traffic = dict(traffic or {})
        self.error: Exception | None = None

    def list_address_interfaces(self):
        if self.error is not None:
            raise self.error
        return dict(self.addresses)

    def list_traffic_interfaces(self):
        if self.error is not None:
            raise self.error
        return dict(self.traffic)


@pytest.fixture(autouse=True)
def _reset_logging():
    """Leave loguru disabled and sink-free between tests."""
    yield
    logger.remove()
    logger.disable("myipmon")


@pytest.fixture()
def fake_provider():
    """Factory fixture returning a FakeProvider."""

    def _make(addresses=None, traffic=None):
        return FakeProvider(addresses, traffic)

    return _make


@pytest.fixture()
def two_nic_provider(fake_provider):
    """Provider with eth0 and wlan0 plus a loopback entry."""
    return fake_provider(
        addresses={
            "lo": ["127.0.0.1", "::1"],
            "eth0": ["192.168.1.10", "fe80::1%eth0"],
            "wlan0": ["10.0.0.5"],
        },
        traffic={
            "lo": TrafficCounters(999, 999),
            "eth0": TrafficCounters(1000, 2000),
            "wlan0": TrafficCounters(3000, 4000),
        },
    )


@pytest.fixture()
def sample_snapshot(two_nic_provider):
    """Snapshot built from ``two_nic_provider`` without touching netstat."""
    return build_snapshot(two_nic_provider, hostname="testhost", use_netstat=False)
