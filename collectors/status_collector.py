"""
Hub status collector: GET /status, decode, and fold nodes/slots into aggregates.
"""
from __future__ import annotations

from fetcher import HubFetcher, TransportError
from models import DecodeError, StatusDocument
from utils import bool_gauge, get_logger

from collectors.base import BaseCollector, CollectorResult

logger = get_logger(__name__)


def aggregate_nodes(doc: StatusDocument) -> tuple[int, int, int]:
    """Single pass over nodes: (num_nodes, max_sessions, occupied slots)."""
    max_sessions = 0
    used_sessions = 0
    for node in doc.nodes:
        max_sessions += node.max_sessions
        for slot in node.slots:
            if slot.session is not None:
                used_sessions += 1
    return len(doc.nodes), max_sessions, used_sessions


class HubStatusCollector(BaseCollector):
    name = "hub_status"

    def __init__(self, fetcher: HubFetcher, path: str = "/status") -> None:
        self.fetcher = fetcher
        self.path = path

    def collect(self) -> CollectorResult:
        try:
            body = self.fetcher.fetch(self.path)
        except TransportError as e:
            logger.warning("Hub not accessible: %s", e)
            return CollectorResult(success=False, error=str(e), data={"accessible": 0})

        data: dict[str, float] = {"accessible": 1}
        try:
            doc = StatusDocument.decode(body)
        except DecodeError as e:
            logger.warning("Failed to decode hub status from %s: %s", self.fetcher.url_for(self.path), e)
            data["deserialization_error"] = 1
            return CollectorResult(success=False, error=f"decode error: {e}", data=data)

        num_nodes, max_sessions, used_sessions = aggregate_nodes(doc)
        data["deserialization_error"] = 0
        data["ready"] = bool_gauge(doc.ready)
        data["num_nodes"] = num_nodes
        data["max_sessions_aggregated"] = max_sessions
        data["num_sessions_aggregated"] = used_sessions
        logger.debug(
            "Hub status: ready=%s nodes=%d max_sessions=%d sessions=%d",
            doc.ready, num_nodes, max_sessions, used_sessions,
        )
        return CollectorResult(success=True, data=data)
