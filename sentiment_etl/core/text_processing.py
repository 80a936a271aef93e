"""
Text helpers used during transformation: cleaning, topical relevance,
coarse language detection, word counting and date parsing.
"""
import logging
import re
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Sequence

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")
_DISALLOWED_CHARS_RE = re.compile(r"[^\w\s.,!?-]")


def clean_text(text: Optional[str]) -> str:
    """
    Trim, collapse runs of whitespace to one space and drop characters other
    than word characters, whitespace and basic punctuation (. , ! ? -).
    """
    if not text:
        return ""
    text = _WHITESPACE_RE.sub(" ", text.strip())
    return _DISALLOWED_CHARS_RE.sub("", text)


def relevance_score(text: str, keywords: Sequence[str]) -> float:
    """
    Fraction of topical keywords present in the text, matched as
    case-insensitive substrings. Returns 0.0 for empty text.
    """
    if not text or not keywords:
        return 0.0
    lowered = text.lower()
    hits = sum(1 for keyword in keywords if keyword in lowered)
    return min(hits / len(keywords), 1.0)


def detect_language(text: str, markers: Mapping[str, Sequence[str]]) -> str:
    """
    Returns the first language whose marker words occur as substrings of the
    text, checking languages in table order, or "unknown".
    """
    if not text:
        return "unknown"
    lowered = text.lower()
    for language, words in markers.items():
        if any(word in lowered for word in words):
            return language
    return "unknown"


def word_count(text: str) -> int:
    return len(text.split())


def parse_datetime(value: Any) -> Optional[datetime]:
    """
    Parse a date from an ISO/RFC 3339 string, a "YYYY-MM-DD[ HH:MM:SS]"
    string or a Unix timestamp. Naive results are taken to be UTC.

    Returns None when the value cannot be parsed.
    """
    if value is None or value == "":
        return None
    try:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return datetime.fromtimestamp(value, tz=timezone.utc)
        text = str(value).strip()
        if text.isdigit():
            return datetime.fromtimestamp(int(text), tz=timezone.utc)
        parsed = date_parser.parse(text)
    except (ValueError, OverflowError, OSError) as e:
        logger.debug(f"Could not parse date value {value!r}: {e}")
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
