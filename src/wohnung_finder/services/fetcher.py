"""HTTP fetching of provider pages."""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

import requests

from ..utils.retry import retry_with_backoff

logger = logging.getLogger(__name__)


@dataclass
class FetchResult:
    """Page body plus whether the request succeeded."""

    body: str
    success: bool
    status_code: Optional[int] = None


class HttpFetcher:
    """
    Fetch provider pages with browser-like headers.

    Never raises: non-2xx responses and transport errors come back as
    ``FetchResult(success=False)`` so the caller can try the next URL.
    Connection errors and timeouts are retried with backoff first.
    """

    DEFAULT_HEADERS = {
        "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36",
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "de-DE,de;q=0.9,en;q=0.8",
    }

    def __init__(
        self,
        timeout: float = 15,
        retries: int = 1,
        backoff_factor: float = 2,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.timeout = timeout
        self.retries = retries
        self.backoff_factor = backoff_factor
        self.headers = dict(headers or self.DEFAULT_HEADERS)

    def _get(self, url: str) -> requests.Response:
        return requests.get(url, headers=self.headers, timeout=self.timeout, allow_redirects=True)

    def fetch(self, url: str) -> FetchResult:
        """
        Fetch a URL.

        Args:
            url: Page to fetch

        Returns:
            FetchResult with the body on success, an empty body otherwise
        """
        get_with_retry = retry_with_backoff(
            max_retries=self.retries,
            backoff_factor=self.backoff_factor,
            exceptions=(requests.ConnectionError, requests.Timeout),
        )(self._get)

        try:
            response = get_with_retry(url)
        except requests.RequestException as e:
            logger.error(f"Failed to fetch {url}: {e}")
            return FetchResult(body="", success=False)

        if not response.ok:
            logger.warning(f"Non-success status {response.status_code} for {url}")
            return FetchResult(body="", success=False, status_code=response.status_code)

        return FetchResult(body=response.text, success=True, status_code=response.status_code)
