"""HTTP probes for internet access, directly and through the Px proxy."""

from __future__ import annotations

import os
from dataclasses import dataclass
from urllib.parse import urlsplit

import requests

from .helper import IsettaError
from .ports import HttpChecker
from .simplelogger import logger


def _validate_proxy_url(url: str) -> None:
    if url.startswith(":"):
        raise IsettaError(f'parse "{url}": missing protocol scheme')
    if any(ord(char) < 0x20 or ord(char) == 0x7F for char in url):
        raise IsettaError(f'parse "{url}": invalid control character in URL')
    try:
        urlsplit(url).port
    except ValueError as err:
        raise IsettaError(f'parse "{url}": {err}') from err


@dataclass
class HttpProbe(HttpChecker):
    """Fetches the test URL to find out how the internet can be reached."""

    internet_access_test_url: str
    proxy_url: str
    default_timeout_ms: int = 5000

    def __post_init__(self) -> None:
        _validate_proxy_url(self.proxy_url)

    def _timeout(self, timeout_ms: int | None) -> float:
        milliseconds = self.default_timeout_ms if timeout_ms is None else timeout_ms
        return milliseconds / 1000

    def has_direct_internet_access(self, timeout_ms: int | None = None) -> bool:
        """Return True if the test URL answers with status 200 without the proxy."""
        os.environ.pop("https_proxy", None)
        os.environ.pop("HTTPS_PROXY", None)
        url = self.internet_access_test_url
        try:
            response = requests.get(url, timeout=self._timeout(timeout_ms))
        except requests.RequestException as err:
            logger.debug("Unable to directly access %s", url)
            logger.debug("Error was: %s", err)
            return False
        if response.status_code == 200:
            logger.debug("Successfully connected directly to %s", url)
            return True
        logger.debug(
            "HTTP error when trying to directly connect to %s. HTTP status code was: %s",
            url,
            response.status_code,
        )
        return False

    def has_internet_access_via_proxy(self, timeout_ms: int | None = None) -> bool:
        """Return True if the test URL answers with status 200 through the proxy."""
        url = self.internet_access_test_url
        proxies = {"http": self.proxy_url, "https": self.proxy_url}
        try:
            with requests.Session() as session:
                session.trust_env = False
                response = session.get(url, proxies=proxies, timeout=self._timeout(timeout_ms))
        except requests.RequestException as err:
            logger.debug("Unable to access %s via proxy", url)
            logger.debug("Error was: %s", err)
            return False
        if response.status_code == 200:
            logger.debug("Successfully connected to %s via proxy %s", url, self.proxy_url)
            return True
        logger.debug(
            "HTTP error when connecting to %s via proxy %s. HTTP status code was: %s",
            url,
            self.proxy_url,
            response.status_code,
        )
        return False

    def is_px_proxy_reachable(self) -> bool:
        """Return True if the proxy answers an HTTP request at all."""
        try:
            requests.get(self.proxy_url, timeout=self._timeout(None))
        except requests.RequestException:
            return False
        return True