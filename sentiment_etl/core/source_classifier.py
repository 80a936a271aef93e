"""
Source attribution for news-style payloads.

News items arrive from two different providers (and may be relayed through
others), so their category is derived from the fields they carry. The rules
below are evaluated in order and the first one that returns a category wins.
"""
import logging
from typing import Any, Callable, List, Mapping, Optional, Tuple

from sentiment_etl.core.lexicon import Lexicon, default_lexicon
from sentiment_etl.models.categories import SourceCategory

logger = logging.getLogger(__name__)

Rule = Callable[[Mapping[str, Any], str, Lexicon], Optional[SourceCategory]]

# Field names that only the Indonesian outlet API emits.
INDONESIA_NEWS_MARKERS = ("namakanal", "idberita")
INDONESIA_NEWS_SECONDARY_MARKERS = ("namaparent", "namasubkanal")


def _field_rule(field: str, category: SourceCategory) -> Rule:
    def rule(fields: Mapping[str, Any], url: str, lexicon: Lexicon) -> Optional[SourceCategory]:
        return category if field in fields else None
    rule.__name__ = f"has_{field}"
    return rule


def normalize_source_label(label: str, lexicon: Lexicon) -> SourceCategory:
    """
    Map a free-form source name onto the category vocabulary.

    Known outlet names map to Indonesia News; names that mention a category
    map to it; anything else is the generic fallback.
    """
    lowered = label.strip().lower()
    category = SourceCategory.from_label(lowered)
    if category is not None:
        return category
    if lowered in lexicon.outlets.indonesia_news:
        return SourceCategory.INDONESIA_NEWS
    if "instagram" in lowered:
        return SourceCategory.INSTAGRAM
    if "youtube" in lowered:
        return SourceCategory.YOUTUBE
    if "indonesia" in lowered:
        return SourceCategory.INDONESIA_NEWS
    return SourceCategory.NEWS


def _explicit_source(fields: Mapping[str, Any], url: str, lexicon: Lexicon) -> Optional[SourceCategory]:
    value = fields.get("source")
    if isinstance(value, Mapping):
        value = value.get("name") or value.get("title")
    if isinstance(value, str) and value.strip():
        return normalize_source_label(value, lexicon)
    return None


def _secondary_markers(fields: Mapping[str, Any], url: str, lexicon: Lexicon) -> Optional[SourceCategory]:
    if any(marker in fields for marker in INDONESIA_NEWS_SECONDARY_MARKERS):
        return SourceCategory.INDONESIA_NEWS
    return None


def _url_domain(fields: Mapping[str, Any], url: str, lexicon: Lexicon) -> Optional[SourceCategory]:
    if not url:
        return None
    lowered = url.lower()
    domain_tables: List[Tuple[Tuple[str, ...], SourceCategory]] = [
        (lexicon.outlets.indonesia_news_domains, SourceCategory.INDONESIA_NEWS),
        (lexicon.outlets.youtube_domains, SourceCategory.YOUTUBE),
        (lexicon.outlets.instagram_domains, SourceCategory.INSTAGRAM),
    ]
    for domains, category in domain_tables:
        if any(domain in lowered for domain in domains):
            return category
    return None


RULES: List[Rule] = [
    _field_rule("article_id", SourceCategory.REALTIME_NEWS),
    _field_rule("source_name", SourceCategory.REALTIME_NEWS),
    _field_rule("namakanal", SourceCategory.INDONESIA_NEWS),
    _field_rule("idberita", SourceCategory.INDONESIA_NEWS),
    _explicit_source,
    _secondary_markers,
    _url_domain,
]


def classify_source(
    fields: Mapping[str, Any],
    url: Optional[str] = None,
    lexicon: Optional[Lexicon] = None,
) -> SourceCategory:
    """
    Attribute a news-style payload to a source category.

    Args:
        fields: The raw payload fields.
        url: The item's link, if any.
        lexicon: Outlet tables to use; defaults to the packaged lexicon.

    Returns:
        The category of the first matching rule, or SourceCategory.NEWS.
    """
    lexicon = lexicon or default_lexicon()
    for rule in RULES:
        category = rule(fields, url or "", lexicon)
        if category is not None:
            logger.debug(f"Source rule '{rule.__name__}' matched: {category.value}")
            return category
    return SourceCategory.NEWS
