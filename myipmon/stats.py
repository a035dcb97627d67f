"""Raw interface snapshot providers.

Two independent enumerations of the host's adapters: one keyed by the
address-configuration name, one keyed by the traffic-counter name. The
names do not always agree; ``myipmon.reconcile`` merges them.
"""

from __future__ import annotations

import socket
from abc import ABC, abstractmethod

import psutil

from myipmon.exceptions import StatsError
from myipmon.models import TrafficCounters

INET_FAMILIES = (socket.AF_INET, socket.AF_INET6)


class RawStatsProvider(ABC):
    """Source of address and traffic enumerations."""

    @abstractmethod
    def list_address_interfaces(self) -> dict[str, list[str]]:
        """Return {name: [address, ...]} in discovery order."""

    @abstractmethod
    def list_traffic_interfaces(self) -> dict[str, TrafficCounters]:
        """Return {name: cumulative counters}."""


class PsutilStatsProvider(RawStatsProvider):
    """Reads ``psutil.net_if_addrs`` and ``psutil.net_io_counters(pernic=True)``."""

    def list_address_interfaces(self) -> dict[str, list[str]]:
        try:
            raw = psutil.net_if_addrs()
        except (psutil.Error, OSError) as e:
            raise StatsError(f"cannot list interface addresses: {e}") from e
        result: dict[str, list[str]] = {}
        for name, addrs in raw.items():
            inet = [a.address for a in addrs if a.family in INET_FAMILIES and a.address]
            if inet:
                result[name] = inet
        return result

    def list_traffic_interfaces(self) -> dict[str, TrafficCounters]:
        try:
            raw = psutil.net_io_counters(pernic=True)
        except (psutil.Error, OSError) as e:
            raise StatsError(f"cannot read interface counters: {e}") from e
        return {
            name: TrafficCounters(received=io.bytes_recv, transmitted=io.bytes_sent)
            for name, io in raw.items()
        }
