"""Shared fixtures: a HubFetcher backed by an in-memory hub."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable

import httpx
import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from fetcher import HubFetcher

HUB_URL = "http://hub.test:4444"

Route = tuple[int, bytes] | Exception


@pytest.fixture
def hub_fetcher() -> Callable[[dict[str, Route]], HubFetcher]:
    """Build a fetcher whose hub answers from a {path: (status, body) | exception} map.

    Unknown paths answer 404. Requested paths are recorded on ``fetcher.calls``.
    """

    def factory(routes: dict[str, Route]) -> HubFetcher:
        calls: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request.url.path)
            route = routes.get(request.url.path)
            if route is None:
                return httpx.Response(404, text="not found")
            if isinstance(route, Exception):
                raise route
            status, body = route
            return httpx.Response(status, content=body)

        fetcher = HubFetcher(HUB_URL, timeout_sec=1.0, transport=httpx.MockTransport(handler))
        fetcher.calls = calls  # type: ignore[attr-defined]
        return fetcher

    return factory


@pytest.fixture(autouse=True)
def _reset_config():
    import config
    config.reset_overrides()
    yield
    config.reset_overrides()
