"""Dashboard state: interfaces and the per-tick network snapshot."""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass, field

from myipmon.rates import HISTORY_SIZE, RateTracker


@dataclass(frozen=True)
class TrafficCounters:
    """Cumulative byte counters for one interface as reported by the OS."""

    received: int = 0
    transmitted: int = 0


@dataclass
class Interface:
    """One network adapter as shown on the dashboard.

    ``mac_address``, ``mtu`` and ``speed_mbps`` stay ``None``: no current
    source fills them.
    """

    name: str
    ipv4_addresses: list[str] = field(default_factory=list)
    ipv6_addresses: list[str] = field(default_factory=list)
    received_bytes: int = 0
    transmitted_bytes: int = 0
    is_up: bool = True
    mac_address: str | None = None
    mtu: int | None = None
    speed_mbps: int | None = None
    rate: RateTracker = field(default_factory=RateTracker, repr=False)

    @property
    def counters(self) -> TrafficCounters:
        return TrafficCounters(self.received_bytes, self.transmitted_bytes)

    @property
    def has_no_stats(self) -> bool:
        return self.received_bytes == 0 and self.transmitted_bytes == 0

    def add_address(self, address: str) -> None:
        """Append an address to the IPv4 or IPv6 list, keeping source order.

        Unparseable strings are ignored.
        """
        try:
            parsed = ipaddress.ip_address(address.split("%", 1)[0])
        except ValueError:
            return
        if parsed.version == 4:
            self.ipv4_addresses.append(address)
        else:
            self.ipv6_addresses.append(address)

    def apply_counters(self, counters: TrafficCounters) -> None:
        self.received_bytes = counters.received
        self.transmitted_bytes = counters.transmitted


@dataclass
class NetworkSnapshot:
    """Complete dashboard state for one tick, mutated in place by refreshes."""

    hostname: str
    public_ip: str | None = None
    interfaces: list[Interface] = field(default_factory=list)
    cycle_count: int = 0
    history_size: int = HISTORY_SIZE
    debug_info: dict[str, list[str]] = field(default_factory=dict)
    last_error: str | None = None

    def interface(self, name: str) -> Interface | None:
        for iface in self.interfaces:
            if iface.name == name:
                return iface
        return None
