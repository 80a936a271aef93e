"""
Indonesia News source: search across several Indonesian outlets.

Each outlet has its own search endpoint with its own query parameter name.
Outlets are queried one after another with a fixed delay between requests;
an outlet failure is recorded as a warning and the next outlet is tried.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sentiment_etl.errors import SourceExtractionError, SourceTransportError
from sentiment_etl.extractors.base import BaseExtractor
from sentiment_etl.extractors.base_client import RapidAPIClient
from sentiment_etl.models.categories import SourceTag
from sentiment_etl.models.dtos import SourceExtraction

logger = logging.getLogger(__name__)

# outlet -> (search path, query parameter name, default limit)
SEARCH_ENDPOINTS: Dict[str, Tuple[str, str, int]] = {
    "kompas": ("/search/kompas", "command", 10),
    "detik": ("/search/detik", "keyword", 10),
    "cnn": ("/search/cnn", "query", 100),
    "tempo": ("/search/tempo", "query", 10),
}


def _articles(data: Any) -> List[Dict[str, Any]]:
    if isinstance(data, list):
        return [a for a in data if isinstance(a, dict)]
    if not isinstance(data, dict):
        return []
    for key in ("items", "data"):
        value = data.get(key)
        if isinstance(value, list):
            return [a for a in value if isinstance(a, dict)]
        if isinstance(value, dict) and isinstance(value.get("items"), list):
            return [a for a in value["items"] if isinstance(a, dict)]
    return []


class IndonesiaNewsClient(RapidAPIClient):
    source = SourceTag.INDONESIA_NEWS.value

    @staticmethod
    def supported_outlets() -> List[str]:
        return list(SEARCH_ENDPOINTS)

    def _check_status(self, outlet: str, data: Any) -> None:
        if isinstance(data, dict) and data.get("status") not in (None, "success", "ok", "OK", True):
            detail = data.get("error") or data.get("message") or f"status {data.get('status')!r}"
            raise SourceTransportError(self.source, f"{outlet}: {detail}")

    async def search(self, outlet: str, query: str, page: int = 1, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Search one outlet.

        Args:
            outlet: One of `supported_outlets()`.
            query: Search terms.
            page: 1-based results page.
            limit: Page size; defaults to the outlet's usual page size.

        Raises:
            SourceTransportError: For unsupported outlets and failed requests.
        """
        endpoint = SEARCH_ENDPOINTS.get(outlet)
        if endpoint is None:
            raise SourceTransportError(self.source, f"Unsupported source: {outlet}")
        path, query_param, default_limit = endpoint
        params: Dict[str, Any] = {query_param: query}
        if outlet != "tempo":
            params.update(page=page, limit=limit or default_limit)
        data = await self.get_json(path, params)
        self._check_status(outlet, data)
        return _articles(data)


class IndonesiaNewsExtractor(BaseExtractor):
    source = SourceTag.INDONESIA_NEWS.value

    def __init__(
        self,
        client: IndonesiaNewsClient,
        query: str,
        outlets: Sequence[str] = ("kompas", "detik", "cnn"),
        delay_seconds: float = 5.0,
        limit: Optional[int] = None,
    ):
        """
        Args:
            client: Indonesia News API client.
            query: Search terms sent to every outlet.
            outlets: Outlets to query, in order.
            delay_seconds: Pause between consecutive outlet requests.
            limit: Page size override for every outlet.
        """
        self.client = client
        self.query = query
        self.outlets = list(outlets)
        self.delay_seconds = delay_seconds
        self.limit = limit

    async def extract(self) -> SourceExtraction:
        items = []
        warnings: Dict[str, str] = {}
        failed = 0
        for index, outlet in enumerate(self.outlets):
            if index > 0 and self.delay_seconds > 0:
                await asyncio.sleep(self.delay_seconds)
            logger.info(f"Extracting Indonesia News from outlet: {outlet}")
            try:
                articles = await self.client.search(outlet, self.query, limit=self.limit)
            except SourceTransportError as e:
                warnings[outlet] = e.message
                failed += 1
                logger.warning(f"Indonesia News outlet {outlet} failed: {e.message}")
                continue
            if not articles:
                warnings[outlet] = "no items found"
                logger.info(f"Indonesia News outlet {outlet} returned no items")
                continue
            for article in articles:
                article.setdefault("outlet", outlet)
            items.extend(self._to_items(articles))
            logger.info(f"Indonesia News outlet {outlet}: {len(articles)} items")

        if self.outlets and failed == len(self.outlets):
            failures = "; ".join(f"{o}: {msg}" for o, msg in warnings.items())
            raise SourceExtractionError(self.source, f"all outlets failed ({failures})")

        return SourceExtraction(source=self.source, items=items, warnings=warnings)
