"""
Blocking HTTP fetcher for the Grid hub: one GET per call, bytes or TransportError.
"""
from __future__ import annotations

import httpx

from utils import get_logger, join_url

logger = get_logger(__name__)


class TransportError(Exception):
    """Hub could not be reached, or answered with a non-2xx status."""

    def __init__(self, url: str, reason: str, status_code: int | None = None) -> None:
        self.url = url
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"GET {url} failed: {reason}")


class HubFetcher:
    """Fetch raw response bodies from paths under the hub base URL."""

    def __init__(
        self,
        base_url: str,
        timeout_sec: float = 5.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url
        self.timeout_sec = timeout_sec
        self.transport = transport

    def url_for(self, path: str) -> str:
        return join_url(self.base_url, path)

    def fetch(self, path: str) -> bytes:
        url = self.url_for(path)
        try:
            with httpx.Client(timeout=self.timeout_sec, transport=self.transport) as client:
                resp = client.get(url)
                resp.raise_for_status()
                return resp.content
        except httpx.HTTPStatusError as e:
            raise TransportError(url, f"HTTP {e.response.status_code}", e.response.status_code) from e
        except httpx.HTTPError as e:
            raise TransportError(url, str(e) or type(e).__name__) from e
