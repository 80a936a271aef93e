"""
Real-Time News source: a breaking-news search API.
"""

import logging
from typing import Any, Dict, List

from sentiment_etl.errors import SourceTransportError
from sentiment_etl.extractors.base import BaseExtractor
from sentiment_etl.extractors.base_client import RapidAPIClient
from sentiment_etl.models.categories import SourceTag
from sentiment_etl.models.dtos import SourceExtraction

logger = logging.getLogger(__name__)

SUCCESS_STATUSES = ("OK", "success")


class RealTimeNewsClient(RapidAPIClient):
    source = SourceTag.REALTIME_NEWS.value

    async def search(
        self,
        query: str,
        country: str = "ID",
        lang: str = "id",
        limit: int = 10,
        time_published: str = "anytime",
    ) -> List[Dict[str, Any]]:
        """
        Search recent articles.

        Raises:
            SourceTransportError: If the API reports a status other than OK/success.
        """
        data = await self.get_json(
            "/search",
            {
                "query": query,
                "country": country,
                "lang": lang,
                "limit": limit,
                "time_published": time_published,
            },
        )
        if not isinstance(data, dict):
            raise SourceTransportError(self.source, "unexpected search response shape")
        status = data.get("status")
        if status not in SUCCESS_STATUSES:
            detail = data.get("error") or data.get("message") or f"status {status!r}"
            raise SourceTransportError(self.source, f"API returned error: {detail}")
        return [a for a in data.get("data") or [] if isinstance(a, dict)]


class RealTimeNewsExtractor(BaseExtractor):
    source = SourceTag.REALTIME_NEWS.value

    def __init__(
        self,
        client: RealTimeNewsClient,
        query: str,
        country: str = "ID",
        lang: str = "id",
        limit: int = 10,
        time_published: str = "anytime",
    ):
        self.client = client
        self.query = query
        self.country = country
        self.lang = lang
        self.limit = limit
        self.time_published = time_published

    async def extract(self) -> SourceExtraction:
        articles = await self.client.search(
            self.query,
            country=self.country,
            lang=self.lang,
            limit=self.limit,
            time_published=self.time_published,
        )
        items = self._to_items(articles)
        logger.info(f"Real-Time News extraction complete: {len(items)} articles for '{self.query}'")
        return SourceExtraction(source=self.source, items=items)
