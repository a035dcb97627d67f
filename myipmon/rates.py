"""Rolling rate history built from cumulative byte counters.

A ``RateTracker`` owns one ``RateHistory`` per direction. Each history is
a fixed-length deque pre-filled with zeros, so charts always have ``W``
points to draw. Samples are the number of bytes moved during one tick.
"""

from __future__ import annotations

from collections import deque

HISTORY_SIZE = 60
PEAK_FLOOR = 1.0


class RateHistory:
    """One direction's sample window plus the axis peak over that window."""

    def __init__(self, size: int = HISTORY_SIZE):
        if size < 1:
            raise ValueError(f"history size must be positive, got {size}")
        self.size = size
        self.samples: deque[float] = deque([0.0] * size, maxlen=size)
        self.peak = PEAK_FLOOR
        # None while cold: no cumulative value seen yet.
        self.previous: int | None = None

    @property
    def is_warm(self) -> bool:
        return self.previous is not None

    @property
    def latest(self) -> float:
        return self.samples[-1]

    def observe(self, cumulative: int) -> float | None:
        """Feed one cumulative counter reading, return the emitted sample.

        The first reading only sets the baseline and emits nothing. A
        reading lower than the previous one is a counter reset: the new
        cumulative value itself is taken as the delta.
        """
        if cumulative < 0:
            raise ValueError(f"cumulative counter must be non-negative, got {cumulative}")
        previous = self.previous
        self.previous = cumulative
        if previous is None:
            return None
        delta = float(cumulative - previous) if cumulative >= previous else float(cumulative)
        self.push(delta)
        return delta

    def push(self, sample: float) -> None:
        self.samples.append(sample)
        # Full rescan so a peak that ages out of the window is dropped.
        self.peak = max(max(self.samples), PEAK_FLOOR)


class RateTracker:
    """Receive/transmit rate histories for one interface."""

    def __init__(self, size: int = HISTORY_SIZE):
        self.rx = RateHistory(size)
        self.tx = RateHistory(size)

    @property
    def size(self) -> int:
        return self.rx.size

    def observe(self, received: int, transmitted: int) -> tuple[float | None, float | None]:
        return self.rx.observe(received), self.tx.observe(transmitted)

    def __repr__(self) -> str:
        return (
            f"RateTracker(size={self.size}, rx_peak={self.rx.peak:.0f}, "
            f"tx_peak={self.tx.peak:.0f})"
        )
