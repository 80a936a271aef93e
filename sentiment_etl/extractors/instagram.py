"""
Instagram source: recent media posted under a hashtag.
"""

import logging
from typing import Any, Dict, List, Optional

from sentiment_etl.errors import SourceTransportError
from sentiment_etl.extractors.base import BaseExtractor
from sentiment_etl.extractors.base_client import RapidAPIClient
from sentiment_etl.models.categories import SourceTag
from sentiment_etl.models.dtos import SourceExtraction

logger = logging.getLogger(__name__)


def _media_list(data: Any) -> List[Dict[str, Any]]:
    # The chunk endpoint returns [medias, next_max_id]; other variants wrap the
    # list in an object.
    if isinstance(data, list):
        if data and isinstance(data[0], list):
            data = data[0]
        return [m for m in data if isinstance(m, dict)]
    if isinstance(data, dict):
        for key in ("data", "posts", "items", "medias"):
            if isinstance(data.get(key), list):
                return [m for m in data[key] if isinstance(m, dict)]
        return []
    raise ValueError(f"unexpected response type {type(data).__name__}")


class InstagramClient(RapidAPIClient):
    source = SourceTag.INSTAGRAM.value

    async def get_hashtag_media(self, hashtag: str, max_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """Returns one chunk of top/recent media for a hashtag."""
        data = await self.get_json("/v1/hashtag/medias/top/recent/chunk", {"name": hashtag, "max_id": max_id})
        if isinstance(data, dict) and data.get("status") == "error":
            raise SourceTransportError(self.source, str(data.get("error") or data.get("detail") or "API returned error"))
        try:
            return _media_list(data)
        except ValueError as e:
            raise SourceTransportError(self.source, str(e)) from e


class InstagramHashtagExtractor(BaseExtractor):
    source = SourceTag.INSTAGRAM.value

    def __init__(self, client: InstagramClient, hashtag: str):
        self.client = client
        self.hashtag = hashtag.lstrip("#")

    async def extract(self) -> SourceExtraction:
        posts = await self.client.get_hashtag_media(self.hashtag)
        items = self._to_items(posts)
        logger.info(f"Instagram extraction complete: {len(items)} posts for #{self.hashtag}")
        return SourceExtraction(source=self.source, items=items)
