"""
Base collector interface: each Grid endpoint branch implements this.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from utils import get_logger

logger = get_logger(__name__)


@dataclass
class CollectorResult:
    """Result from a single collector: success flag, optional error, and observations."""
    success: bool = True
    error: str | None = None
    data: dict[str, float] = field(default_factory=dict)

    def merge_into(self, target: dict[str, float]) -> None:
        """Copy observations into target; later collectors overwrite earlier ones."""
        for k, v in self.data.items():
            target[k] = v


class BaseCollector(ABC):
    """Abstract base for all Grid collectors."""

    name: str = "base"

    @abstractmethod
    def collect(self) -> CollectorResult:
        """Run one collection cycle. Upstream failures are reported in the result, not raised."""
        ...

    def collect_safe(self) -> CollectorResult:
        """Wrapper that catches unexpected exceptions and returns a failed result."""
        try:
            return self.collect()
        except Exception as e:
            logger.exception("Collector %s failed", self.name)
            return CollectorResult(success=False, error=str(e), data={})
