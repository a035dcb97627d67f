"""Interface identity reconciliation.

Merges the address enumeration (canonical names) with the traffic
enumeration (counters) into one ``Interface`` per adapter. Names are
matched by an ordered list of matcher functions; the first matcher that
pairs two names wins. Interfaces nobody matches keep zero counters and
may be backfilled from ``netstat -i``.
"""

from __future__ import annotations

import itertools
import shutil
import socket
import subprocess
from dataclasses import dataclass, field
from typing import Callable, NamedTuple

from loguru import logger

from myipmon.exceptions import StartupError, StatsError
from myipmon.models import Interface, NetworkSnapshot, TrafficCounters
from myipmon.rates import HISTORY_SIZE, RateTracker
from myipmon.stats import RawStatsProvider

LOOPBACK_PREFIX = "lo"

NETSTAT_ARGS = ["-i"]
NETSTAT_TIMEOUT_S = 2.0
# Column positions are tool-version specific; counts are scaled by NETSTAT_UNIT.
NETSTAT_UNIT = 1024
NETSTAT_RX_COLUMN = 4
NETSTAT_TX_COLUMN = 7

Matcher = Callable[[str, str], bool]

MATCHERS: list[Matcher] = []


def matcher(fn: Matcher) -> Matcher:
    """Decorator that appends a name matcher to the policy, in definition order."""
    MATCHERS.append(fn)
    return fn


@matcher
def exact_name(address_name: str, traffic_name: str) -> bool:
    return address_name == traffic_name


@matcher
def casefold_name(address_name: str, traffic_name: str) -> bool:
    return address_name.lower() == traffic_name.lower()


@matcher
def suffix_name(address_name: str, traffic_name: str) -> bool:
    """Match ``eth0`` with ``en0``: equal, non-empty suffixes after the letters."""
    suffix = strip_alpha_prefix(address_name)
    return bool(suffix) and suffix == strip_alpha_prefix(traffic_name)


def strip_alpha_prefix(name: str) -> str:
    return "".join(itertools.dropwhile(str.isalpha, name))


def is_loopback(name: str) -> bool:
    return name.startswith(LOOPBACK_PREFIX) or "loopback" in name.lower()


def match_traffic(
    name: str,
    traffic: dict[str, TrafficCounters],
    matchers: list[Matcher] | None = None,
) -> tuple[str, TrafficCounters] | None:
    """Find the traffic entry for ``name``; returns (traffic_name, counters) or None."""
    for match in MATCHERS if matchers is None else matchers:
        for traffic_name, counters in traffic.items():
            if match(name, traffic_name):
                logger.debug(f"{name}: matched traffic entry {traffic_name!r} via {match.__name__}")
                return traffic_name, counters
    return None


# ---- netstat fallback ----


class NetstatRow(NamedTuple):
    name: str
    received: int | None
    transmitted: int | None


def _parse_count(parts: list[str], column: int) -> int | None:
    if len(parts) <= column:
        return None
    try:
        return int(parts[column]) * NETSTAT_UNIT
    except ValueError:
        return None


def parse_netstat(output: str) -> list[NetstatRow]:
    """Heuristic parse of ``netstat -i`` output.

    First column is the name; the receive and transmit columns are taken
    at fixed positions. Lines whose receive column is not a number
    (headers, banners) are skipped.
    """
    rows = []
    for line in output.splitlines():
        parts = line.split()
        if len(parts) <= NETSTAT_RX_COLUMN:
            continue
        received = _parse_count(parts, NETSTAT_RX_COLUMN)
        if received is None:
            continue
        rows.append(NetstatRow(parts[0], received, _parse_count(parts, NETSTAT_TX_COLUMN)))
    return rows


def run_netstat() -> str | None:
    """Run ``netstat -i`` if it is installed; None on any failure."""
    path = shutil.which("netstat")
    if path is None:
        return None
    try:
        result = subprocess.run(
            [path, *NETSTAT_ARGS],
            capture_output=True,
            text=True,
            timeout=NETSTAT_TIMEOUT_S,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug(f"netstat failed: {e}")
        return None
    if result.returncode != 0:
        logger.debug(f"netstat exited with {result.returncode}")
        return None
    return result.stdout


def apply_netstat(interfaces: list[Interface], rows: list[NetstatRow]) -> None:
    """Backfill interfaces whose name equals, or prefixes, a netstat row name."""
    for row in rows:
        for iface in interfaces:
            if iface.name == row.name or row.name.startswith(iface.name):
                if row.received is not None:
                    iface.received_bytes = row.received
                if row.transmitted is not None:
                    iface.transmitted_bytes = row.transmitted
                logger.debug(f"{iface.name}: counters backfilled from netstat row {row.name!r}")
                break


# ---- reconciliation ----


@dataclass
class ReconcileResult:
    interfaces: list[Interface] = field(default_factory=list)
    debug_info: dict[str, list[str]] = field(default_factory=dict)


def reconcile(
    addresses: dict[str, list[str]],
    traffic: dict[str, TrafficCounters],
    *,
    use_netstat: bool = True,
    history: int = HISTORY_SIZE,
) -> ReconcileResult:
    """Build one ``Interface`` per non-loopback address-source entry."""
    debug_info = {
        "address_sources": list(addresses),
        "traffic_sources": list(traffic),
    }
    # Loopback counters must not reach a real adapter through the suffix matcher.
    traffic = {name: counters for name, counters in traffic.items() if not is_loopback(name)}
    interfaces = []
    for name, addrs in addresses.items():
        if is_loopback(name):
            continue
        iface = Interface(name=name, rate=RateTracker(history))
        for address in addrs:
            iface.add_address(address)
        found = match_traffic(name, traffic)
        if found is not None:
            iface.apply_counters(found[1])
        interfaces.append(iface)

    no_stats = [iface.name for iface in interfaces if iface.has_no_stats]
    if no_stats:
        debug_info["no_stats"] = no_stats
        if use_netstat:
            output = run_netstat()
            if output is not None:
                debug_info["netstat_output"] = [output]
                apply_netstat([i for i in interfaces if i.has_no_stats], parse_netstat(output))

    return ReconcileResult(interfaces=interfaces, debug_info=debug_info)


def _fetch(provider: RawStatsProvider) -> tuple[dict[str, list[str]], dict[str, TrafficCounters]]:
    return provider.list_address_interfaces(), provider.list_traffic_interfaces()


def build_snapshot(
    provider: RawStatsProvider,
    *,
    history: int = HISTORY_SIZE,
    use_netstat: bool = True,
    hostname: str | None = None,
) -> NetworkSnapshot:
    """Initial fetch. Any failure here is fatal and raised as ``StartupError``."""
    if hostname is None:
        try:
            hostname = socket.gethostname()
        except OSError as e:
            raise StartupError(f"Failed to resolve hostname: {e}") from e
    if not hostname:
        raise StartupError("Failed to resolve hostname: empty name")

    try:
        addresses, traffic = _fetch(provider)
    except StatsError as e:
        raise StartupError(f"Failed to get network info: {e}") from e

    result = reconcile(addresses, traffic, use_netstat=use_netstat, history=history)
    for iface in result.interfaces:
        iface.rate.observe(iface.received_bytes, iface.transmitted_bytes)

    logger.info(f"{hostname}: {len(result.interfaces)} interfaces discovered")
    return NetworkSnapshot(
        hostname=hostname,
        interfaces=result.interfaces,
        history_size=history,
        debug_info=result.debug_info,
    )


def refresh_snapshot(
    snapshot: NetworkSnapshot,
    provider: RawStatsProvider,
) -> None:
    """Re-sample and update ``snapshot`` in place.

    Rate history carries over only for names present in both the old and
    the new enumeration. The netstat fallback belongs to the initial fetch
    only; its captured output stays in the debug collections. Provider
    errors propagate before anything is mutated.
    """
    addresses, traffic = _fetch(provider)
    result = reconcile(addresses, traffic, use_netstat=False, history=snapshot.history_size)
    if "netstat_output" in snapshot.debug_info:
        result.debug_info["netstat_output"] = snapshot.debug_info["netstat_output"]

    trackers = {iface.name: iface.rate for iface in snapshot.interfaces}
    for iface in result.interfaces:
        tracker = trackers.get(iface.name)
        if tracker is not None:
            iface.rate = tracker
        iface.rate.observe(iface.received_bytes, iface.transmitted_bytes)

    snapshot.interfaces[:] = result.interfaces
    snapshot.debug_info = result.debug_info
    snapshot.cycle_count += 1
    snapshot.last_error = None
