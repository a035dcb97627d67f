"""Tests for myipmon/public_ip.py"""

import time
from unittest.mock import MagicMock

import requests

from myipmon.public_ip import DEFAULT_ENDPOINTS, PublicIpResolver, resolve_public_ip

ENDPOINTS = ["https://one.example", "https://two.example", "https://three.example"]


def _response(status_code=200, text=""):
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = text
    return resp


def _called_urls(session):
    return [c.args[0] for c in session.get.call_args_list]


class TestPublicIpResolver:
    """Sequential endpoint fallback under a deadline."""

    def test_default_endpoints(self):
        """Without arguments the built-in provider list is used, in order."""
        resolver = PublicIpResolver()
        assert resolver.endpoints == DEFAULT_ENDPOINTS
        assert resolver.endpoints[0] == "https://api.ipify.org"

    def test_first_success_wins(self):
        """The first good answer is returned and later endpoints are untouched."""
        session = MagicMock()
        session.get.side_effect = [_response(200, "198.51.100.7\n")]
        assert PublicIpResolver(ENDPOINTS, session=session).resolve() == "198.51.100.7"
        assert _called_urls(session) == ENDPOINTS[:1]

    def test_empty_body_falls_through(self):
        """An empty body moves on; the third endpoint is never called."""
        session = MagicMock()
        session.get.side_effect = [
            _response(200, "   \n"),
            _response(200, "203.0.113.5"),
            _response(200, "192.0.2.1"),
        ]
        assert PublicIpResolver(ENDPOINTS, session=session).resolve() == "203.0.113.5"
        assert _called_urls(session) == ENDPOINTS[:2]

    def test_non_success_status_falls_through(self):
        """A non-2xx status is skipped."""
        session = MagicMock()
        session.get.side_effect = [_response(503, "busy"), _response(200, "203.0.113.9")]
        assert PublicIpResolver(ENDPOINTS, session=session).resolve() == "203.0.113.9"

    def test_transport_errors_fall_through(self):
        """Connection errors are swallowed and the next endpoint is tried."""
        session = MagicMock()
        session.get.side_effect = [requests.ConnectionError("refused"), _response(200, "203.0.113.10")]
        assert PublicIpResolver(ENDPOINTS, session=session).resolve() == "203.0.113.10"

    def test_all_fail_is_unresolved(self):
        """Exhausting every endpoint returns None instead of raising."""
        session = MagicMock()
        session.get.side_effect = requests.Timeout("slow")
        assert PublicIpResolver(ENDPOINTS, session=session).resolve() is None
        assert _called_urls(session) == ENDPOINTS

    def test_global_deadline_is_unresolved(self):
        """A lookup that outlives the global deadline returns None."""
        session = MagicMock()

        def slow_get(url, timeout):
            time.sleep(0.5)
            return _response(200, "203.0.113.11")

        session.get.side_effect = slow_get
        resolver = PublicIpResolver(ENDPOINTS, global_timeout=0.1, session=session)
        started = time.monotonic()
        assert resolver.resolve() is None
        assert time.monotonic() - started < 0.45

    def test_request_timeout_is_bounded(self):
        """Each request gets at most the per-request timeout."""
        session = MagicMock()
        session.get.return_value = _response(200, "203.0.113.12")
        PublicIpResolver(ENDPOINTS, global_timeout=5.0, request_timeout=4.0, session=session).resolve()
        assert 0 < session.get.call_args.kwargs["timeout"] <= 4.0

    def test_empty_endpoint_list(self):
        """No endpoints means unresolved."""
        assert PublicIpResolver([], session=MagicMock()).resolve() is None

    def test_resolve_public_ip_helper(self):
        """The module helper forwards its arguments."""
        session = MagicMock()
        session.get.return_value = _response(200, "203.0.113.13")
        assert resolve_public_ip(ENDPOINTS, session=session) == "203.0.113.13"
