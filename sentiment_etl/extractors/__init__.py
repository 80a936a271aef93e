"""
Source clients and extractors, plus the concurrent extraction orchestrator.
"""

from typing import List

from sentiment_etl.config.settings import Settings
from sentiment_etl.extractors.base import BaseExtractor
from sentiment_etl.extractors.base_client import RapidAPIClient
from sentiment_etl.extractors.indonesia_news import IndonesiaNewsClient, IndonesiaNewsExtractor
from sentiment_etl.extractors.instagram import InstagramClient, InstagramHashtagExtractor
from sentiment_etl.extractors.orchestrator import ExtractionOrchestrator
from sentiment_etl.extractors.realtime_news import RealTimeNewsClient, RealTimeNewsExtractor
from sentiment_etl.extractors.youtube import YouTubeClient, YouTubeCommentsExtractor


def build_extractors(settings: Settings) -> List[BaseExtractor]:
    """
    Build the four configured source extractors, each with its own HTTP client.

    The caller owns the clients and must close them (see `close_extractors`).
    """
    key = settings.RAPIDAPI_KEY or ""
    timeout = settings.HTTP_TIMEOUT_SECONDS
    return [
        YouTubeCommentsExtractor(
            YouTubeClient(key, settings.YOUTUBE_HOST, timeout),
            video_ids=settings.YOUTUBE_VIDEO_IDS,
            retry_delay=settings.YOUTUBE_RETRY_DELAY_SECONDS,
            video_info=settings.YOUTUBE_VIDEO_INFO,
        ),
        RealTimeNewsExtractor(
            RealTimeNewsClient(key, settings.REALTIME_NEWS_HOST, timeout),
            query=settings.EXTRACTION_QUERY,
            country=settings.REALTIME_NEWS_COUNTRY,
            lang=settings.REALTIME_NEWS_LANG,
            limit=settings.REALTIME_NEWS_LIMIT,
            time_published=settings.REALTIME_NEWS_TIME_PUBLISHED,
        ),
        InstagramHashtagExtractor(
            InstagramClient(key, settings.INSTAGRAM_HOST, timeout),
            hashtag=settings.INSTAGRAM_HASHTAG,
        ),
        IndonesiaNewsExtractor(
            IndonesiaNewsClient(key, settings.INDONESIA_NEWS_HOST, timeout),
            query=settings.EXTRACTION_QUERY,
            outlets=settings.INDONESIA_NEWS_OUTLETS,
            delay_seconds=settings.INDONESIA_NEWS_DELAY_SECONDS,
            limit=settings.INDONESIA_NEWS_LIMIT,
        ),
    ]


async def close_extractors(extractors: List[BaseExtractor]) -> None:
    for extractor in extractors:
        client = getattr(extractor, "client", None)
        if isinstance(client, RapidAPIClient):
            await client.close()


__all__ = [
    "BaseExtractor",
    "ExtractionOrchestrator",
    "IndonesiaNewsClient",
    "IndonesiaNewsExtractor",
    "InstagramClient",
    "InstagramHashtagExtractor",
    "RapidAPIClient",
    "RealTimeNewsClient",
    "RealTimeNewsExtractor",
    "YouTubeClient",
    "YouTubeCommentsExtractor",
    "build_extractors",
    "close_extractors",
]
