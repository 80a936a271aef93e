"""
Loading and validation of the keyword tables.

Sentiment weights, topical keywords, language markers and outlet names live
in a YAML file so they can be changed without touching code. The file is
parsed into an immutable `Lexicon` that every scorer and transformer shares.
"""
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, FrozenSet, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from sentiment_etl.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_LEXICON_PATH = Path(__file__).parent.parent / "config" / "lexicon.yaml"


def _normalize_terms(terms: Any) -> Any:
    if isinstance(terms, dict):
        return {str(k).strip().lower(): v for k, v in terms.items()}
    if isinstance(terms, (list, tuple, set, frozenset)):
        return [str(t).strip().lower() for t in terms]
    return terms


class OutletTables(BaseModel):
    indonesia_news: Tuple[str, ...] = ()
    indonesia_news_domains: Tuple[str, ...] = ()
    youtube_domains: Tuple[str, ...] = ()
    instagram_domains: Tuple[str, ...] = ()

    model_config = {"frozen": True}

    @field_validator("*", mode="before")
    @classmethod
    def _lower(cls, v: Any) -> Any:
        return _normalize_terms(v)


class Lexicon(BaseModel):
    """
    Immutable keyword tables.

    Positive weights lie in (0, 1], negative weights in [-1, 0), and a term
    appears in at most one of the positive, negative and neutral tables.
    """
    topic_keywords: Tuple[str, ...]
    language_markers: Dict[str, Tuple[str, ...]] = Field(default_factory=dict)
    positive: Dict[str, float] = Field(default_factory=dict)
    negative: Dict[str, float] = Field(default_factory=dict)
    neutral: FrozenSet[str] = frozenset()
    outlets: OutletTables = Field(default_factory=OutletTables)

    model_config = {"frozen": True}

    @field_validator("topic_keywords", "positive", "negative", "neutral", mode="before")
    @classmethod
    def _lower(cls, v: Any) -> Any:
        return _normalize_terms(v)

    @field_validator("language_markers", mode="before")
    @classmethod
    def _lower_markers(cls, v: Any) -> Any:
        if isinstance(v, dict):
            return {str(lang): _normalize_terms(words) for lang, words in v.items()}
        return v

    @field_validator("topic_keywords")
    @classmethod
    def _non_empty(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        if not v:
            raise ValueError("topic_keywords must not be empty")
        return v

    @model_validator(mode="after")
    def _check_weights(self) -> "Lexicon":
        for term, weight in self.positive.items():
            if not 0.0 < weight <= 1.0:
                raise ValueError(f"positive weight for {term!r} must be in (0, 1], got {weight}")
        for term, weight in self.negative.items():
            if not -1.0 <= weight < 0.0:
                raise ValueError(f"negative weight for {term!r} must be in [-1, 0), got {weight}")
        overlap = (set(self.positive) & set(self.negative)) | (
            (set(self.positive) | set(self.negative)) & self.neutral
        )
        if overlap:
            raise ValueError(f"terms appear in more than one sentiment table: {sorted(overlap)}")
        return self

    @classmethod
    def from_mapping(cls, data: Dict[str, Any]) -> "Lexicon":
        sentiment = data.get("sentiment") or {}
        return cls(
            topic_keywords=data.get("topic_keywords") or (),
            language_markers=data.get("language_markers") or {},
            positive=sentiment.get("positive") or {},
            negative=sentiment.get("negative") or {},
            neutral=sentiment.get("neutral") or (),
            outlets=data.get("outlets") or {},
        )


def load_lexicon(path: Optional[Union[str, Path]] = None) -> Lexicon:
    """
    Load and validate a lexicon file.

    Args:
        path: YAML file to read. Defaults to the packaged lexicon.

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid.
    """
    lexicon_path = Path(path) if path else DEFAULT_LEXICON_PATH
    try:
        with open(lexicon_path, "rt", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Cannot read lexicon file {lexicon_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Lexicon file {lexicon_path} must contain a mapping")
    try:
        lexicon = Lexicon.from_mapping(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid lexicon file {lexicon_path}: {e}") from e

    logger.debug(
        f"Loaded lexicon from {lexicon_path}: {len(lexicon.positive)} positive, "
        f"{len(lexicon.negative)} negative, {len(lexicon.neutral)} neutral terms, "
        f"{len(lexicon.topic_keywords)} topic keywords"
    )
    return lexicon


@lru_cache
def default_lexicon() -> Lexicon:
    """Returns a cached instance of the packaged lexicon."""
    return load_lexicon(DEFAULT_LEXICON_PATH)
