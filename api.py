"""
HTTP surface for the Grid exporter: Prometheus /metrics plus health and JSON status.
"""
from __future__ import annotations

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

import config
from fetcher import HubFetcher
from metrics import build_registry, collect
from utils import get_logger
from version import __version__

logger = get_logger(__name__)


def create_app(hub_url: str | None = None, fetcher: HubFetcher | None = None) -> FastAPI:
    hub_url = hub_url or str(config.get("hub.url"))
    if fetcher is None:
        fetcher = HubFetcher(hub_url, timeout_sec=float(config.get("hub.timeout_sec", 5.0)))
    registry = build_registry(hub_url, fetcher=fetcher)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Exporting metrics for hub %s", hub_url)
        yield

    app = FastAPI(
        title="Selenium Grid Exporter",
        description="Prometheus metrics for a Selenium Grid hub",
        version=__version__,
        lifespan=lifespan,
    )

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok", "timestamp": time.time()}

    # Sync handlers run in the threadpool; each scrape builds its own documents.
    @app.get(str(config.get("exporter.metrics_path", "/metrics")))
    def metrics() -> Response:
        return Response(generate_latest(registry), media_type=CONTENT_TYPE_LATEST)

    @app.get("/status")
    def status() -> dict:
        return collect(hub_url, fetcher=fetcher).to_dict()

    return app


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(create_app(), host=config.LISTEN_HOST, port=config.LISTEN_PORT)
