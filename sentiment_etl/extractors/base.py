"""Base class shared by all source extractors."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Mapping

from sentiment_etl.models.dtos import RawItem, SourceExtraction, utc_now

logger = logging.getLogger(__name__)


class BaseExtractor(ABC):
    """
    Pulls one burst of items from a single source.

    `extract` either returns the source's items (possibly with per-request
    warnings) or raises; the orchestrator turns raised errors into the
    source's error marker.
    """

    source: str = ""

    @abstractmethod
    async def extract(self) -> SourceExtraction:
        """Fetch items from the source."""

    def _to_items(self, payloads: Iterable[Any]) -> List[RawItem]:
        extracted_at = utc_now()
        items = []
        for payload in payloads:
            if not isinstance(payload, Mapping):
                logger.debug(f"{self.source}: dropping non-object payload of type {type(payload).__name__}")
                continue
            items.append(RawItem(source=self.source, payload=dict(payload), extracted_at=extracted_at))
        return items
