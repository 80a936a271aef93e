"""
YouTube comments source.

Fetches the comment thread of the first video, from a configured candidate
list, that returns comments, and wraps each comment with its video's metadata.
"""

import asyncio
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from sentiment_etl.errors import SourceExtractionError, SourceTransportError
from sentiment_etl.extractors.base import BaseExtractor
from sentiment_etl.extractors.base_client import RapidAPIClient
from sentiment_etl.models.categories import SourceTag
from sentiment_etl.models.dtos import SourceExtraction

logger = logging.getLogger(__name__)


class YouTubeClient(RapidAPIClient):
    source = SourceTag.YOUTUBE.value

    async def get_video_comments(self, video_id: str) -> List[Dict[str, Any]]:
        """Returns the comments of a video; an empty list if it has none."""
        data = await self.get_json("/video/comments/", {"id": video_id})
        if not isinstance(data, dict):
            raise SourceTransportError(self.source, "unexpected comments response shape")
        if data.get("error"):
            raise SourceTransportError(self.source, str(data["error"]))
        return [c for c in data.get("comments") or [] if isinstance(c, dict)]


class YouTubeCommentsExtractor(BaseExtractor):
    source = SourceTag.YOUTUBE.value

    def __init__(
        self,
        client: YouTubeClient,
        video_ids: Sequence[str],
        retry_delay: float = 0.5,
        video_info: Optional[Mapping[str, Mapping[str, str]]] = None,
    ):
        """
        Args:
            client: YouTube API client.
            video_ids: Candidate videos, tried in order.
            retry_delay: Seconds to wait before trying the next candidate.
            video_info: Known video metadata keyed by video id; each entry may
                carry a title, author and published date.
        """
        self.client = client
        self.video_ids = list(video_ids)
        self.retry_delay = retry_delay
        self.video_info = dict(video_info or {})

    def _video_summary(self, video_id: str) -> Dict[str, Any]:
        info = self.video_info.get(video_id) or {}
        return {
            "videoId": video_id,
            "title": info.get("title", ""),
            "author": info.get("author", ""),
            "published": info.get("published", ""),
            "url": f"https://www.youtube.com/watch?v={video_id}",
        }

    async def extract(self) -> SourceExtraction:
        last_error = "no candidate video ids configured"
        for attempt, video_id in enumerate(self.video_ids):
            if attempt > 0:
                await asyncio.sleep(self.retry_delay)
            try:
                comments = await self.client.get_video_comments(video_id)
            except SourceTransportError as e:
                last_error = e.message
                logger.warning(f"YouTube video {video_id}: {e.message}; trying next candidate")
                continue
            if not comments:
                last_error = f"video {video_id} returned no comments"
                logger.info(f"YouTube video {video_id} returned no comments; trying next candidate")
                continue

            video = self._video_summary(video_id)
            items = self._to_items({"comment": comment, "video": video} for comment in comments)
            logger.info(f"YouTube extraction complete: {len(items)} comments from video {video_id}")
            return SourceExtraction(source=self.source, items=items)

        raise SourceExtractionError(self.source, f"no candidate video produced comments ({last_error})")
