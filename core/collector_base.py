import logging
from abc import ABC, abstractmethod
from typing import Any, Dict

from .models import CollectorOutcome, ServiceConfig

logger = logging.getLogger(__name__)

class Collector(ABC):
    """
    One independent signal source contributing a single key cluster to the report.

    collect() reports transport and parse failures through the returned
    outcome. The only exception allowed out is a configuration error.
    """
    key: str = ''

    @abstractmethod
    async def collect(self, service_config: ServiceConfig) -> CollectorOutcome:
        pass

    def success(self, fragment: Dict[str, Any]) -> CollectorOutcome:
        return CollectorOutcome(key=self.key, ok=True, fragment=fragment)

    def failure(self, error: Exception, marker: Any = False) -> CollectorOutcome:
        logger.warning(f"Collector {self.key} degraded: {error}")
        return CollectorOutcome(key=self.key, ok=False, fragment={self.key: marker}, error=str(error))

def collapse(outcome: CollectorOutcome) -> Dict[str, Any]:
    """Fragment to merge into the report, whether or not the collector succeeded."""
    if outcome.ok:
        return outcome.fragment
    return outcome.fragment or {outcome.key: False}
