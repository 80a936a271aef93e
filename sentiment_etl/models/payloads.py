"""
Typed payload variants for raw items, one per source shape.

Raw items arrive as loosely typed dicts. `to_payload` maps each one into
exactly one variant based on the tag of the extractor that produced it and
the structural markers it carries. News articles keep their raw field
mapping because source attribution depends on which fields are present.
"""

import logging
from typing import Annotated, Any, Dict, Literal, Mapping, Optional, Union

from pydantic import BaseModel, Field

from .categories import SourceTag
from .dtos import RawItem

logger = logging.getLogger(__name__)


class YouTubeCommentPayload(BaseModel):
    kind: Literal["youtube_comment"] = "youtube_comment"
    comment_id: str = ""
    text: str = ""
    author: str = ""
    published_time_text: str = ""
    replies: Any = None
    votes: Any = None
    video_id: str = ""
    video_title: str = ""
    video_url: Optional[str] = None
    video_author: str = ""
    video_published: str = ""
    views: Any = None
    duration: Any = None


class InstagramPostPayload(BaseModel):
    kind: Literal["instagram_post"] = "instagram_post"
    code: str = ""
    caption: str = ""
    username: str = ""
    like_count: int = 0
    comment_count: int = 0
    taken_at: Any = None


class NewsArticlePayload(BaseModel):
    kind: Literal["news_article"] = "news_article"
    title: str = ""
    description: str = ""
    content: str = ""
    url: Optional[str] = None
    author: Optional[str] = None
    published: Optional[str] = None
    fields: Dict[str, Any] = Field(default_factory=dict)


SourcePayload = Annotated[
    Union[YouTubeCommentPayload, InstagramPostPayload, NewsArticlePayload],
    Field(discriminator="kind"),
]


def _text(value: Any) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value)


def _first_text(fields: Mapping[str, Any], *keys: str) -> str:
    """Return the first non-empty string value among `keys`."""
    for key in keys:
        value = _text(fields.get(key))
        if value.strip():
            return value
    return ""


def _count(value: Any) -> int:
    try:
        return max(int(value), 0)
    except (TypeError, ValueError):
        return 0


def _author_name(value: Any) -> str:
    # Authors are either a plain string or an object with a display title.
    if isinstance(value, Mapping):
        return _first_text(value, "title", "name", "username")
    return _text(value)


def youtube_comment_from_dict(data: Mapping[str, Any]) -> YouTubeCommentPayload:
    comment = data.get("comment") or {}
    video = data.get("video") or {}
    stats = comment.get("stats") if isinstance(comment.get("stats"), Mapping) else {}
    return YouTubeCommentPayload(
        comment_id=_first_text(comment, "commentId", "id"),
        text=_first_text(comment, "content", "textDisplay", "text"),
        author=_author_name(comment.get("author") or comment.get("authorText")),
        published_time_text=_first_text(comment, "publishedTimeText"),
        replies=stats.get("replies", comment.get("replyCount")),
        votes=stats.get("votes", comment.get("likesCount")),
        video_id=_first_text(video, "videoId", "id"),
        video_title=_first_text(video, "title"),
        video_url=_first_text(video, "url") or None,
        video_author=_author_name(video.get("author")),
        video_published=_first_text(video, "published", "publishedTimeText"),
        views=video.get("views"),
        duration=video.get("duration"),
    )


def instagram_post_from_dict(data: Mapping[str, Any]) -> InstagramPostPayload:
    user = data.get("user") if isinstance(data.get("user"), Mapping) else {}
    caption = data.get("caption_text")
    if caption is None and isinstance(data.get("caption"), Mapping):
        caption = data["caption"].get("text")
    return InstagramPostPayload(
        code=_first_text(data, "code"),
        caption=_text(caption),
        username=_first_text(user, "username"),
        like_count=_count(data.get("like_count")),
        comment_count=_count(data.get("comment_count")),
        taken_at=data.get("taken_at"),
    )


def news_article_from_dict(data: Mapping[str, Any]) -> NewsArticlePayload:
    description = _first_text(data, "summary", "description", "snippet")
    published = _first_text(data, "published_at", "published_datetime_utc")
    if not published and isinstance(data.get("date"), Mapping):
        published = _first_text(data["date"], "publish")
    return NewsArticlePayload(
        title=_first_text(data, "title"),
        description=description,
        content=_first_text(data, "content") or description,
        url=_first_text(data, "url", "link") or None,
        author=_first_text(data, "author", "penulis", "editor") or None,
        published=published or None,
        fields=dict(data),
    )


def to_payload(item: RawItem) -> Optional[SourcePayload]:
    """
    Map a raw item onto its payload variant.

    Returns None when the item matches no known shape for its source.
    """
    data = item.payload
    if not isinstance(data, Mapping):
        return None

    if item.source == SourceTag.YOUTUBE:
        if isinstance(data.get("comment"), Mapping):
            return youtube_comment_from_dict(data)
        return None
    if item.source == SourceTag.INSTAGRAM:
        if "code" in data or "caption_text" in data or "caption" in data:
            return instagram_post_from_dict(data)
        return None
    if item.source in (SourceTag.REALTIME_NEWS, SourceTag.INDONESIA_NEWS):
        return news_article_from_dict(data)

    logger.debug(f"No payload mapping for source tag '{item.source}'; treating as news article")
    return news_article_from_dict(data)
