"""
Collectors package: one collector per Grid hub endpoint.
"""
from __future__ import annotations

from collectors.base import BaseCollector, CollectorResult
from collectors.queue_collector import QueueCollector
from collectors.status_collector import HubStatusCollector, aggregate_nodes

__all__ = [
    "BaseCollector",
    "CollectorResult",
    "HubStatusCollector",
    "QueueCollector",
    "aggregate_nodes",
]
