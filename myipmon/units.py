"""Binary unit scaling for byte counts and rates."""

from __future__ import annotations

SIZE_UNITS = [("B", 1), ("KB", 1024), ("MB", 1024**2), ("GB", 1024**3)]
RATE_UNITS = [("B/s", 1), ("KB/s", 1024), ("MB/s", 1024**2), ("GB/s", 1024**3)]

# Chart axes stop at MB/s.
AXIS_UNITS = RATE_UNITS[:3]


def pick_unit(max_val: float, units: list[tuple[str, int]] | None = None) -> tuple[str, int]:
    """Choose the largest unit whose divisor does not exceed ``max_val``."""
    if units is None:
        units = RATE_UNITS
    for name, divisor in reversed(units):
        if max_val >= divisor:
            return name, divisor
    return units[0]


def format_rate(bps: float, units: list[tuple[str, int]] | None = None) -> str:
    """Format a value into a human-readable string with auto-scaled units."""
    name, divisor = pick_unit(bps, units)
    if divisor == 1:
        return f"{bps:.0f} {name}"
    return f"{bps / divisor:.1f} {name}"


def format_bytes(count: int) -> str:
    """Format a cumulative byte count: ``512 B``, ``1.50 KB``, ``2.00 GB``."""
    name, divisor = pick_unit(count, SIZE_UNITS)
    if divisor == 1:
        return f"{count} {name}"
    return f"{count / divisor:.2f} {name}"
