"""
Gather Selenium Grid metrics: hub accessibility, readiness, nodes, sessions, queue.
One collection cycle fetches the hub status and the new-session queue, and the
result is exposed to Prometheus through a custom prometheus_client collector.
"""
from __future__ import annotations

import sys
import time
from dataclasses import dataclass, field
from typing import Any, Iterator

from prometheus_client import CollectorRegistry
from prometheus_client.core import GaugeMetricFamily

import config
from collectors.queue_collector import QueueCollector
from collectors.status_collector import HubStatusCollector
from fetcher import HubFetcher
from utils import get_logger

logger = get_logger(__name__)

NAMESPACE = "selenium_grid"

# Emission order and help text per gauge.
GAUGES: tuple[tuple[str, str], ...] = (
    ("accessible",
     "This metric will be set to 1 if the last ping to the hub was successful, and 0 otherwise"),
    ("deserialization_error",
     "This metric will be set to 1 if there was an error deserializing the last status "
     "response from the server, and 0 otherwise"),
    ("ready",
     "This metric will be set to 1 if the hub server indicates it is ready to receive "
     "requests, and 0 otherwise"),
    ("num_nodes",
     "This metric provides the current number of nodes within the Selenium Grid cluster"),
    ("max_sessions_aggregated",
     "This metric provides an aggregated quantity of the maximum number of sessions able "
     "to be run within this Selenium Grid cluster"),
    ("num_sessions_aggregated",
     "This metric provides an aggregated quantity of the number of sessions running within "
     "this Selenium Grid cluster"),
    ("queue_deserialization_error",
     "This metric will be set to 1 if there was an error deserializing the last queue "
     "status response from the server, and 0 otherwise"),
    ("queue_size",
     "This metric provides information on the queue size within your Selenium Grid Hub"),
)


def metric_name(key: str) -> str:
    return f"{NAMESPACE}_{key}"


@dataclass
class GridMetrics:
    """Observations from one collection cycle. None means "not emitted this cycle"."""

    hub_url: str = ""
    timestamp: float = 0.0  # time.time() at collection
    accessible: int | None = None
    deserialization_error: int | None = None
    ready: int | None = None
    num_nodes: int | None = None
    max_sessions_aggregated: int | None = None
    num_sessions_aggregated: int | None = None
    queue_deserialization_error: int | None = None
    queue_size: int | None = None
    errors: dict[str, str] = field(default_factory=dict)  # collector name -> reason

    def observations(self) -> dict[str, int]:
        """Present observations keyed by gauge suffix, in emission order."""
        out: dict[str, int] = {}
        for key, _ in GAUGES:
            value = getattr(self, key)
            if value is not None:
                out[key] = value
        return out

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "hub_url": self.hub_url,
            "timestamp": self.timestamp,
            "metrics": {metric_name(k): v for k, v in self.observations().items()},
            "errors": dict(self.errors),
        }


def collect(hub_url: str | None = None, fetcher: HubFetcher | None = None) -> GridMetrics:
    """Run one collection cycle against the hub. Safe to call from any thread."""
    if fetcher is None:
        fetcher = HubFetcher(
            hub_url or str(config.get("hub.url")),
            timeout_sec=float(config.get("hub.timeout_sec", 5.0)),
        )
    status_path = str(config.get("hub.status_path", "/status"))
    queue_path = str(config.get("hub.queue_path", "/se/grid/newsessionqueue/queue"))

    m = GridMetrics(hub_url=fetcher.base_url, timestamp=time.time())
    data: dict[str, float] = {}

    # The queue branch runs regardless of how the status branch went.
    for collector in (
        HubStatusCollector(fetcher, path=status_path),
        QueueCollector(fetcher, path=queue_path),
    ):
        res = collector.collect_safe()
        res.merge_into(data)
        if res.error:
            m.errors[collector.name] = res.error

    for key, _ in GAUGES:
        if key in data:
            setattr(m, key, int(data[key]))
    return m


class GridCollector:
    """prometheus_client collector running one Grid collection cycle per scrape."""

    def __init__(self, hub_url: str, fetcher: HubFetcher | None = None) -> None:
        self.hub_url = hub_url
        self.fetcher = fetcher

    def describe(self) -> Iterator[GaugeMetricFamily]:
        # Sample-less families, so registering never triggers a fetch.
        for key, help_text in GAUGES:
            yield GaugeMetricFamily(metric_name(key), help_text)

    def collect(self) -> Iterator[GaugeMetricFamily]:
        m = collect(self.hub_url, fetcher=self.fetcher)
        help_texts = dict(GAUGES)
        for key, value in m.observations().items():
            yield GaugeMetricFamily(metric_name(key), help_texts[key], value=value)


def build_registry(hub_url: str, fetcher: HubFetcher | None = None) -> CollectorRegistry:
    """Fresh registry holding only the Grid collector."""
    registry = CollectorRegistry()
    registry.register(GridCollector(hub_url, fetcher=fetcher))
    return registry


def main(hub_url: str | None = None) -> None:
    """Print one collection cycle using rich."""
    from rich.console import Console
    from rich.panel import Panel
    from rich.table import Table

    m = collect(hub_url)
    console = Console()

    table = Table(title="Selenium Grid Metrics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")
    observed = m.observations()
    for key, _ in GAUGES:
        if key in observed:
            table.add_row(metric_name(key), str(observed[key]))
        else:
            table.add_row(metric_name(key), "[dim]not emitted[/dim]")
    console.print(Panel(table, title=f"Hub: {m.hub_url}"))

    for name, reason in sorted(m.errors.items()):
        console.print(f"[yellow]{name}[/yellow]: {reason}")

    if not m.accessible:
        sys.exit(1)


if __name__ == "__main__":
    main()
