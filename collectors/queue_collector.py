"""
New-session queue collector: GET the queue endpoint and count pending requests.
"""
from __future__ import annotations

from fetcher import HubFetcher, TransportError
from models import DecodeError, QueueDocument
from utils import get_logger

from collectors.base import BaseCollector, CollectorResult

logger = get_logger(__name__)


class QueueCollector(BaseCollector):
    name = "session_queue"

    def __init__(self, fetcher: HubFetcher, path: str = "/se/grid/newsessionqueue/queue") -> None:
        self.fetcher = fetcher
        self.path = path

    def collect(self) -> CollectorResult:
        try:
            body = self.fetcher.fetch(self.path)
        except TransportError as e:
            # Older hubs have no queue endpoint: report nothing rather than 0.
            logger.debug("Session queue not accessible: %s", e)
            return CollectorResult(success=False, error=str(e), data={})

        try:
            doc = QueueDocument.decode(body)
        except DecodeError as e:
            logger.warning("Failed to decode session queue from %s: %s", self.fetcher.url_for(self.path), e)
            return CollectorResult(
                success=False,
                error=f"decode error: {e}",
                data={"queue_deserialization_error": 1},
            )

        logger.debug("Session queue: %d pending request(s)", len(doc.entries))
        return CollectorResult(success=True, data={
            "queue_deserialization_error": 0,
            "queue_size": len(doc.entries),
        })
