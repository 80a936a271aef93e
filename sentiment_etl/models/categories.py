"""
Normalized source categories and their storage partitions.
"""

from enum import Enum
from typing import Optional


class SourceCategory(str, Enum):
    """Fixed vocabulary every normalized record is attributed to."""

    YOUTUBE = "YouTube"
    INSTAGRAM = "Instagram"
    INDONESIA_NEWS = "Indonesia News"
    REALTIME_NEWS = "Real-Time News"
    NEWS = "News"

    @property
    def partition(self) -> str:
        """Storage partition key for records of this category."""
        return _PARTITIONS[self]

    @classmethod
    def from_label(cls, label: str) -> Optional["SourceCategory"]:
        """
        Resolve a category from its display label or its partition key.

        Matching is case-insensitive. Returns None for unknown names.
        """
        wanted = label.strip().lower()
        for category in cls:
            if wanted in (category.value.lower(), category.partition):
                return category
        return None


_PARTITIONS = {
    SourceCategory.YOUTUBE: "youtube",
    SourceCategory.INSTAGRAM: "instagram",
    SourceCategory.INDONESIA_NEWS: "indonesia_news",
    SourceCategory.REALTIME_NEWS: "realtime_news",
    SourceCategory.NEWS: "news",
}


class SourceTag(str, Enum):
    """Tags identifying which extractor produced a raw item."""

    YOUTUBE = "youtube"
    REALTIME_NEWS = "realtime_news"
    INSTAGRAM = "instagram"
    INDONESIA_NEWS = "indonesia_news"
