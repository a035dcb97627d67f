"""Terminal session guard and keyboard polling.

``TerminalSession`` puts a TTY stdin into cbreak mode so single key
presses are readable without Enter, and restores the saved attributes on
every exit path. Screen switching and cursor hiding belong to rich's
``Live(screen=True)``.
"""

from __future__ import annotations

import os
import select
import sys
import termios
import time
import tty
from typing import TextIO

ESC = "\x1b"
QUIT_KEYS = frozenset({"q", "Q"})


class TerminalSession:
    """Context manager owning the terminal's input mode for the dashboard's lifetime."""

    def __init__(self, stream: TextIO | None = None):
        self.stream = stream if stream is not None else sys.stdin
        self._saved: list | None = None

    @property
    def is_tty(self) -> bool:
        try:
            return self.stream.isatty()
        except ValueError:
            return False

    def __enter__(self) -> TerminalSession:
        if self.is_tty:
            fd = self.stream.fileno()
            self._saved = termios.tcgetattr(fd)
            tty.setcbreak(fd)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        if self._saved is not None:
            termios.tcsetattr(self.stream.fileno(), termios.TCSADRAIN, self._saved)
            self._saved = None

    def read_key(self, timeout: float) -> str | None:
        """Wait up to ``timeout`` seconds for pending input; None if nothing arrived."""
        if not self.is_tty:
            # No keyboard to read from; only Ctrl+C can stop the loop.
            time.sleep(max(0.0, timeout))
            return None
        ready, _, _ = select.select([self.stream], [], [], max(0.0, timeout))
        if not ready:
            return None
        data = os.read(self.stream.fileno(), 32)
        if not data:
            return None
        return data.decode(errors="ignore") or None

    def poll_quit(self, timeout: float) -> bool:
        """Bounded wait for a quit key; other keys are consumed and ignored."""
        key = self.read_key(timeout)
        if key is None:
            return False
        if key.startswith(ESC):
            # A lone ESC quits; arrow keys and other sequences do not.
            return key == ESC
        return any(ch in QUIT_KEYS for ch in key)
