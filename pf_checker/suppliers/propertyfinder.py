from __future__ import annotations

import logging

import requests

from pf_checker.errors import FetchError
from pf_checker.suppliers.base import PageFetcher

logger = logging.getLogger(__name__)

# requests decodes gzip/deflate itself; "br" needs the brotli package installed.
HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Encoding": "gzip, deflate, br",
    "Accept-Language": "en-US,en;q=0.5",
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64)",
}

DEFAULT_TIMEOUT = 30


class PropertyFinderFetcher(PageFetcher):
    def __init__(self, session: requests.Session | None = None,
                 timeout: float = DEFAULT_TIMEOUT):
        # Reuse a session for keep-alive + connection pooling
        self._session = session or requests.Session()
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "propertyfinder"

    def fetch(self, url: str) -> str:
        logger.info("GET %s", url)
        try:
            resp = self._session.get(url, headers=HEADERS, timeout=self._timeout)
            resp.raise_for_status()
            # body is decompressed lazily, so decode errors surface here too
            return resp.text
        except requests.RequestException as e:
            raise FetchError(url, str(e)) from e

    def close(self) -> None:
        self._session.close()
