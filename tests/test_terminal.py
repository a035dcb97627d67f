"""Tests for myipmon/terminal.py"""

import io
from unittest.mock import MagicMock, patch

import pytest

from myipmon.terminal import TerminalSession


class TestTerminalSession:
    """Input-mode guard and quit polling."""

    def test_non_tty_is_left_alone(self):
        """A non-terminal stream is never switched to cbreak mode."""
        with patch("myipmon.terminal.tty.setcbreak") as mock_cbreak:
            with TerminalSession(io.StringIO()) as session:
                assert session.is_tty is False
        mock_cbreak.assert_not_called()

    def test_non_tty_read_waits_and_returns_nothing(self):
        """Without a keyboard the bounded wait just elapses."""
        with patch("myipmon.terminal.time.sleep") as mock_sleep:
            assert TerminalSession(io.StringIO()).read_key(0.25) is None
        mock_sleep.assert_called_once_with(0.25)

    def test_tty_mode_restored_on_error(self):
        """Saved attributes are restored even when the body raises."""
        stream = MagicMock()
        stream.fileno.return_value = 0
        with patch.object(TerminalSession, "is_tty", True), patch(
            "myipmon.terminal.termios.tcgetattr", return_value=["saved"]
        ), patch("myipmon.terminal.tty.setcbreak") as mock_cbreak, patch(
            "myipmon.terminal.termios.tcsetattr"
        ) as mock_restore:
            with pytest.raises(RuntimeError):
                with TerminalSession(stream):
                    raise RuntimeError("boom")
        mock_cbreak.assert_called_once_with(0)
        assert mock_restore.call_args.args[2] == ["saved"]

    @pytest.mark.parametrize(
        "key,expected",
        [
            ("q", True),
            ("Q", True),
            ("\x1b", True),
            ("\x1b[A", False),
            ("x", False),
            ("qx", True),
            ("aq", True),
            ("xyzQ", True),
            (None, False),
        ],
    )
    def test_poll_quit(self, key, expected):
        """q or Q anywhere in a burst, or a lone ESC, quits; other input is ignored."""
        session = TerminalSession(io.StringIO())
        with patch.object(session, "read_key", return_value=key) as mock_read:
            assert session.poll_quit(0.5) is expected
        mock_read.assert_called_once_with(0.5)
