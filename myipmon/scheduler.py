"""Refresh scheduler — deadline-based render / wait / refresh loop.

Each iteration renders, waits for a quit key for whatever is left of the
tick, then refreshes once the full tick has elapsed. Refreshes never
overlap: the loop is single-threaded and each refresh completes before
the next render.
"""

from __future__ import annotations

import time
from typing import Callable

from loguru import logger

from myipmon.models import NetworkSnapshot

TICK_S = 0.5
MIN_TICK_S = 0.1


class RefreshScheduler:
    """Drive render and refresh for one snapshot until the user quits.

    ``poll_quit(timeout)`` must block for at most ``timeout`` seconds and
    return True when the user asked to quit.
    """

    def __init__(
        self,
        snapshot: NetworkSnapshot,
        *,
        refresh: Callable[[NetworkSnapshot], None],
        render: Callable[[NetworkSnapshot], None],
        poll_quit: Callable[[float], bool],
        tick_s: float = TICK_S,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.snapshot = snapshot
        self._refresh = refresh
        self._render = render
        self._poll_quit = poll_quit
        self.tick_s = max(MIN_TICK_S, tick_s)
        self._clock = clock
        self._last_refresh = clock()

    def remaining(self) -> float:
        return max(0.0, self.tick_s - (self._clock() - self._last_refresh))

    def step(self) -> bool:
        """Run one iteration; return False once the user quit."""
        self._render(self.snapshot)
        if self._poll_quit(self.remaining()):
            return False
        if self._clock() - self._last_refresh >= self.tick_s:
            self.refresh_once()
            self._last_refresh = self._clock()
        return True

    def refresh_once(self) -> None:
        """Refresh the snapshot; failures keep the last good data on screen."""
        try:
            self._refresh(self.snapshot)
        except Exception as e:
            logger.opt(exception=e).warning(f"refresh #{self.snapshot.cycle_count + 1} failed: {e}")
            self.snapshot.last_error = f"{type(e).__name__}: {e}"

    def run(self) -> None:
        while self.step():
            pass
