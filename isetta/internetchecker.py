"""Checks for internet access directly and via the proxy at the same time."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from .ports import HttpChecker


@dataclass
class InternetChecker:
    http_checker: HttpChecker
    timeout_ms: int = 1000

    def has_internet_access(self) -> bool:
        """Return True if the test URL is reachable directly or via the proxy."""
        with ThreadPoolExecutor(max_workers=2) as pool:
            direct = pool.submit(self.http_checker.has_direct_internet_access, self.timeout_ms)
            via_proxy = pool.submit(self.http_checker.has_internet_access_via_proxy, self.timeout_ms)
            return bool(direct.result()) or bool(via_proxy.result())