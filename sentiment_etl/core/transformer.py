"""
Record classification and transformation engine.

Turns the raw items of an extraction batch into normalized records: each item
is mapped onto its payload variant, its text is cleaned, it is attributed to a
source category, and it receives relevance, language and sentiment scores.
"""
import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from sentiment_etl.core.id_generator import IdentifierGenerator
from sentiment_etl.core.lexicon import Lexicon, default_lexicon
from sentiment_etl.core.sentiment_scorer import SentimentScorer
from sentiment_etl.core.source_classifier import classify_source
from sentiment_etl.core.text_processing import (
    clean_text,
    detect_language,
    parse_datetime,
    relevance_score,
    word_count,
)
from sentiment_etl.models.categories import SourceCategory
from sentiment_etl.models.dtos import (
    ExtractionBatch,
    NormalizedRecord,
    RawItem,
    TransformationSummary,
    utc_now,
)
from sentiment_etl.models.payloads import (
    InstagramPostPayload,
    NewsArticlePayload,
    YouTubeCommentPayload,
    to_payload,
)

logger = logging.getLogger(__name__)


@dataclass
class _Draft:
    """Variant-independent fields extracted from a payload before scoring."""
    title: str
    description: str
    content: str
    # Text that language, relevance and sentiment are computed over.
    analysis_text: str
    url: Optional[str]
    category: SourceCategory
    id_prefix: str
    fingerprint: List[str]
    published_at: Optional[datetime] = None
    author: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


def _join_distinct(*parts: str) -> str:
    """Join the non-empty parts, skipping repeats of an earlier part."""
    seen: List[str] = []
    for part in parts:
        if part and part not in seen:
            seen.append(part)
    return " ".join(seen)


def _youtube_watch_url(video_id: str) -> Optional[str]:
    return f"https://www.youtube.com/watch?v={video_id}" if video_id else None


def _draft_youtube_comment(payload: YouTubeCommentPayload) -> Optional[_Draft]:
    text = clean_text(payload.text)
    title = clean_text(payload.video_title)
    if not text and not title:
        return None
    return _Draft(
        title=title,
        description=text,
        content=text,
        analysis_text=_join_distinct(title, text),
        url=payload.video_url or _youtube_watch_url(payload.video_id),
        category=SourceCategory.YOUTUBE,
        id_prefix="comment",
        fingerprint=[payload.comment_id, payload.video_id, payload.text],
        author=payload.author or None,
        metadata={
            "video": {
                "video_id": payload.video_id,
                "title": payload.video_title,
                "author": payload.video_author,
                "published": payload.video_published,
                "views": payload.views,
                "duration": payload.duration,
            },
            "comment": {
                "comment_id": payload.comment_id,
                "author": payload.author,
                "published_time_text": payload.published_time_text,
                "replies": payload.replies,
                "votes": payload.votes,
            },
        },
    )


def _draft_instagram_post(payload: InstagramPostPayload) -> Optional[_Draft]:
    caption = clean_text(payload.caption)
    if not caption and not payload.code:
        return None
    title = f"Instagram Post by @{payload.username}" if payload.username else "Instagram Post"
    description = caption
    if payload.like_count > 0 or payload.comment_count > 0:
        description = f"{caption} (Likes: {payload.like_count}, Comments: {payload.comment_count})".strip()
    return _Draft(
        title=title,
        description=description,
        content=caption,
        analysis_text=caption,
        url=f"https://instagram.com/p/{payload.code}" if payload.code else None,
        category=SourceCategory.INSTAGRAM,
        id_prefix="instagram",
        fingerprint=[payload.code, str(payload.taken_at)],
        published_at=parse_datetime(payload.taken_at),
        author=payload.username or None,
        metadata={
            "code": payload.code,
            "username": payload.username,
            "like_count": payload.like_count,
            "comment_count": payload.comment_count,
        },
    )


def _draft_news_article(payload: NewsArticlePayload, lexicon: Lexicon) -> Optional[_Draft]:
    title = clean_text(payload.title)
    description = clean_text(payload.description)
    content = clean_text(payload.content)
    if not (title or description or content):
        return None
    return _Draft(
        title=title,
        description=description,
        content=content,
        analysis_text=_join_distinct(title, description, content),
        url=payload.url,
        category=classify_source(payload.fields, payload.url, lexicon),
        id_prefix="article",
        fingerprint=[payload.title, payload.url or ""],
        published_at=parse_datetime(payload.published),
        author=payload.author,
    )


class RecordTransformer:
    """
    Converts raw items into normalized, scored records.

    A transformer owns the identifier counter for one run; use a fresh
    instance (or pass a fresh IdentifierGenerator) per pipeline run.
    """

    def __init__(
        self,
        scorer: Optional[SentimentScorer] = None,
        lexicon: Optional[Lexicon] = None,
        id_generator: Optional[IdentifierGenerator] = None,
    ):
        self.lexicon = lexicon or (scorer.lexicon if scorer else default_lexicon())
        self.scorer = scorer or SentimentScorer(self.lexicon)
        self.id_generator = id_generator or IdentifierGenerator()

    def _draft(self, item: RawItem) -> Optional[_Draft]:
        payload = to_payload(item)
        if isinstance(payload, YouTubeCommentPayload):
            return _draft_youtube_comment(payload)
        if isinstance(payload, InstagramPostPayload):
            return _draft_instagram_post(payload)
        if isinstance(payload, NewsArticlePayload):
            return _draft_news_article(payload, self.lexicon)
        return None

    def transform_item(self, item: RawItem) -> Optional[NormalizedRecord]:
        """
        Transforms one raw item.

        Returns:
            The normalized record, or None if the item has no usable title or
            body text.
        """
        draft = self._draft(item)
        if draft is None:
            return None

        text = draft.analysis_text
        sentiment = self.scorer.score(text)
        return NormalizedRecord(
            id=self.id_generator.next_id(draft.id_prefix, draft.fingerprint),
            title=draft.title,
            description=draft.description,
            content=draft.content,
            url=draft.url,
            source_category=draft.category,
            relevance_score=relevance_score(text, self.lexicon.topic_keywords),
            language=detect_language(text, self.lexicon.language_markers),
            word_count=word_count(text),
            sentiment=sentiment.category,
            sentiment_score=sentiment.score,
            sentiment_confidence=sentiment.confidence,
            sentiment_keywords=sentiment.matched_terms,
            published_at=draft.published_at,
            author=draft.author,
            metadata=draft.metadata,
            extracted_at=item.extracted_at,
            transformed_at=utc_now(),
        )

    def transform(self, batch: ExtractionBatch) -> List[NormalizedRecord]:
        """
        Transforms every raw item of a batch, in batch order.

        Items that cannot be normalized are skipped; they never fail the batch.
        Sources that failed extraction contribute nothing.
        """
        records = []
        skipped = 0
        for item in batch.iter_items():
            try:
                record = self.transform_item(item)
            except ValueError as e:
                # pydantic.ValidationError is a ValueError subclass.
                logger.warning(f"Skipping malformed {item.source} item: {e}")
                record = None
            if record is None:
                skipped += 1
                logger.debug(f"Skipped {item.source} item without usable text")
                continue
            records.append(record)

        logger.info(
            f"Transformed {len(records)} records from {batch.total_items} raw items "
            f"({skipped} skipped)"
        )
        return records

    @staticmethod
    def summarize(records: Sequence[NormalizedRecord], skipped_items: int = 0) -> TransformationSummary:
        """Counts per category, sentiment and language, plus mean relevance."""
        if not records:
            return TransformationSummary(skipped_items=skipped_items)
        return TransformationSummary(
            total_records=len(records),
            by_category=dict(Counter(r.source_category.value for r in records)),
            by_sentiment=dict(Counter(r.sentiment for r in records)),
            by_language=dict(Counter(r.language for r in records)),
            average_relevance=sum(r.relevance_score for r in records) / len(records),
            skipped_items=skipped_items,
        )
