"""Public IP lookup against plain-text IP-echo services.

Endpoints are tried one after another, in priority order, never in
parallel. The first 2xx response with a non-empty body wins. The whole
lookup runs on a worker thread bounded by a global deadline; each
request has its own, shorter timeout.
"""

from __future__ import annotations

import concurrent.futures
import threading
import time

import requests
from loguru import logger

DEFAULT_ENDPOINTS = [
    "https://api.ipify.org",
    "https://ifconfig.me/ip",
    "https://icanhazip.com",
    "https://ipinfo.io/ip",
    "https://myexternalip.com/raw",
]
GLOBAL_TIMEOUT_S = 5.0
REQUEST_TIMEOUT_S = 4.0


class PublicIpResolver:
    """Resolve the host's public IP once; ``None`` means unresolved."""

    def __init__(
        self,
        endpoints: list[str] | None = None,
        *,
        global_timeout: float = GLOBAL_TIMEOUT_S,
        request_timeout: float = REQUEST_TIMEOUT_S,
        session: requests.Session | None = None,
    ):
        self.endpoints = list(DEFAULT_ENDPOINTS if endpoints is None else endpoints)
        self.global_timeout = global_timeout
        self.request_timeout = request_timeout
        self._session = session
        self._expired = threading.Event()

    def resolve(self) -> str | None:
        """Return the first successful answer, or None on exhaustion or deadline."""
        self._expired.clear()
        pool = concurrent.futures.ThreadPoolExecutor(max_workers=1, thread_name_prefix="public-ip")
        future = pool.submit(self._try_endpoints, time.monotonic() + self.global_timeout)
        try:
            ip = future.result(timeout=self.global_timeout)
        except concurrent.futures.TimeoutError:
            logger.info(f"public IP unresolved: no answer within {self.global_timeout:.1f}s")
            self._expired.set()
            return None
        finally:
            pool.shutdown(wait=False, cancel_futures=True)
        if ip is None:
            logger.info("public IP unresolved: all endpoints failed")
        else:
            logger.info(f"public IP resolved: {ip}")
        return ip

    def _try_endpoints(self, deadline: float) -> str | None:
        session = self._session or requests.Session()
        try:
            for url in self.endpoints:
                remaining = deadline - time.monotonic()
                if self._expired.is_set() or remaining <= 0:
                    return None
                ip = self._query(session, url, min(self.request_timeout, remaining))
                if ip:
                    return ip
            return None
        finally:
            if self._session is None:
                session.close()

    @staticmethod
    def _query(session: requests.Session, url: str, timeout: float) -> str | None:
        try:
            resp = session.get(url, timeout=timeout)
        except requests.RequestException as e:
            logger.debug(f"{url}: {e}")
            return None
        if not 200 <= resp.status_code < 300:
            logger.debug(f"{url}: HTTP {resp.status_code}")
            return None
        ip = resp.text.strip()
        if not ip:
            logger.debug(f"{url}: empty body")
            return None
        return ip


def resolve_public_ip(endpoints: list[str] | None = None, **kwargs) -> str | None:
    return PublicIpResolver(endpoints, **kwargs).resolve()
