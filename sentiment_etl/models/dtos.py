"""
Pydantic Data Transfer Objects (DTOs) for the sentiment ETL service.

These models carry data between the extraction, transformation, loading and
reprocessing stages, and form the results returned to callers.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from .categories import SourceCategory

SentimentLabel = Literal["positive", "negative", "neutral"]
LanguageCode = Literal["id", "en", "unknown"]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RawItem(BaseModel):
    """
    A single unprocessed item as returned by a source client.

    The payload is kept loosely typed; it is mapped to a typed payload variant
    during transformation.
    """
    source: str
    payload: Dict[str, Any]
    extracted_at: datetime = Field(default_factory=utc_now)

    model_config = {"frozen": True}


class SourceExtraction(BaseModel):
    """
    Outcome of extracting one source: either items or an error marker.

    `warnings` holds partial failures that did not fail the source as a whole,
    keyed by the sub-request that failed (e.g. a news outlet name).
    """
    source: str
    items: List[RawItem] = Field(default_factory=list)
    error: Optional[str] = None
    warnings: Dict[str, str] = Field(default_factory=dict)
    duration_seconds: float = 0.0

    model_config = {"frozen": True}

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, source: str, message: str, duration_seconds: float = 0.0) -> "SourceExtraction":
        return cls(source=source, error=message, duration_seconds=duration_seconds)


class ExtractionBatch(BaseModel):
    """
    Result of one extraction burst, keyed by source tag in configured order.

    A source slot always exists for every configured source, holding either its
    items or its error marker. Immutable once built.
    """
    query: str
    created_at: datetime = Field(default_factory=utc_now)
    sources: Dict[str, SourceExtraction] = Field(default_factory=dict)

    model_config = {"frozen": True}

    def iter_items(self) -> Iterator[RawItem]:
        """Yield raw items in source order, then per-source item order."""
        for extraction in self.sources.values():
            yield from extraction.items

    def errors(self) -> Dict[str, str]:
        return {name: ex.error for name, ex in self.sources.items() if ex.error is not None}

    @property
    def total_items(self) -> int:
        return sum(len(ex.items) for ex in self.sources.values())


class SentimentResult(BaseModel):
    """Output of the lexicon sentiment scorer."""
    category: SentimentLabel = "neutral"
    score: float = Field(default=0.0, ge=-1.0, le=1.0)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    matched_terms: List[str] = Field(default_factory=list)

    model_config = {"frozen": True}


class NormalizedRecord(BaseModel):
    """
    A raw item after cleaning, source attribution, relevance, language and
    sentiment scoring. Ready to be persisted.
    """
    id: str
    title: str = ""
    description: str = ""
    content: str = ""
    url: Optional[str] = None
    source_category: SourceCategory
    relevance_score: float = Field(ge=0.0, le=1.0)
    language: LanguageCode = "unknown"
    word_count: int = Field(default=0, ge=0)
    sentiment: SentimentLabel = "neutral"
    sentiment_score: float = Field(default=0.0, ge=-1.0, le=1.0)
    sentiment_confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    sentiment_keywords: List[str] = Field(default_factory=list)
    published_at: Optional[datetime] = None
    author: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    extracted_at: datetime
    transformed_at: datetime = Field(default_factory=utc_now)

    model_config = {"frozen": True}


class PersistedRecord(BaseModel):
    """
    A processed record as read back from storage.

    Mirrors ProcessedDataORM and is what the batch reprocessor pages over.
    """
    id: int
    source: str
    title: Optional[str] = None
    content: Optional[str] = None
    relevance_score: float = 0.0
    sentiment: Optional[str] = None
    sentiment_score: Optional[float] = None
    sentiment_confidence: Optional[float] = None
    processed_at: Optional[datetime] = None
    sentiment_updated_at: Optional[datetime] = None
    processed_data: Optional[Dict[str, Any]] = None

    model_config = {"from_attributes": True}

    def scoring_text(self) -> str:
        """Text the reprocessor rescores: title and content joined by a space."""
        return f"{self.title or ''} {self.content or ''}"


class ReprocessScope(BaseModel):
    """
    Which persisted records a reprocessing run covers.

    `source` holds a storage partition key; `start`/`end` bound the record's
    processed timestamp inclusively.
    """
    kind: Literal["all", "source", "date_range"] = "all"
    source: Optional[str] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_fields(self) -> "ReprocessScope":
        if self.kind == "source" and not self.source:
            raise ValueError("a source scope needs a source name")
        if self.kind == "date_range":
            if self.start is None or self.end is None:
                raise ValueError("a date range scope needs both start and end")
            if self.end < self.start:
                raise ValueError("date range end is before its start")
        return self

    @classmethod
    def all_records(cls) -> "ReprocessScope":
        return cls(kind="all")

    @classmethod
    def for_source(cls, name: str) -> "ReprocessScope":
        """
        Scope to one source category.

        Args:
            name: A category label ("Instagram") or partition key ("instagram").

        Raises:
            ValueError: If the name is not a known source category.
        """
        category = SourceCategory.from_label(name)
        if category is None:
            raise ValueError(f"Unknown source category: {name!r}")
        return cls(kind="source", source=category.partition)

    @classmethod
    def for_date_range(cls, start: datetime, end: datetime) -> "ReprocessScope":
        return cls(kind="date_range", start=start, end=end)

    def describe(self) -> str:
        if self.kind == "source":
            return f"source={self.source}"
        if self.kind == "date_range":
            return f"processed_at between {self.start.isoformat()} and {self.end.isoformat()}"
        return "all records"


class CleanupResult(BaseModel):
    """Outcome of a batch sentiment reprocessing run."""
    scope: str = "all records"
    total_records: int = 0
    processed_records: int = 0
    updated_records: int = 0
    error_records: int = 0
    processing_time_seconds: float = 0.0
    errors: List[str] = Field(default_factory=list)
    status: Literal["processing", "completed", "completed_with_errors", "error"] = "processing"


class LoadResult(BaseModel):
    """Outcome of writing one group of rows to storage."""
    success: bool = True
    message: str = ""
    records_count: int = 0
    inserted: int = 0
    failed: int = 0
    errors: List[str] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=utc_now)


class TransformationSummary(BaseModel):
    """Aggregate view over one run's normalized records."""
    total_records: int = 0
    by_category: Dict[str, int] = Field(default_factory=dict)
    by_sentiment: Dict[str, int] = Field(default_factory=dict)
    by_language: Dict[str, int] = Field(default_factory=dict)
    average_relevance: float = 0.0
    skipped_items: int = 0


class ExtractionSummary(BaseModel):
    """Per-source counts and error markers of one extraction batch."""
    total_items: int = 0
    items_by_source: Dict[str, int] = Field(default_factory=dict)
    errors: Dict[str, str] = Field(default_factory=dict)
    warnings: Dict[str, Dict[str, str]] = Field(default_factory=dict)

    @classmethod
    def from_batch(cls, batch: ExtractionBatch) -> "ExtractionSummary":
        return cls(
            total_items=batch.total_items,
            items_by_source={name: len(ex.items) for name, ex in batch.sources.items()},
            errors=batch.errors(),
            warnings={name: dict(ex.warnings) for name, ex in batch.sources.items() if ex.warnings},
        )


class LoadingSummary(BaseModel):
    raw: LoadResult = Field(default_factory=LoadResult)
    processed: LoadResult = Field(default_factory=LoadResult)


class PipelineRunResult(BaseModel):
    """Structured outcome of one full extract, transform and load run."""
    status: Literal["success", "completed_with_errors", "error"] = "success"
    message: str = ""
    started_at: datetime = Field(default_factory=utc_now)
    duration_seconds: float = 0.0
    extraction: ExtractionSummary = Field(default_factory=ExtractionSummary)
    transformation: TransformationSummary = Field(default_factory=TransformationSummary)
    loading: LoadingSummary = Field(default_factory=LoadingSummary)
    error: Optional[str] = None
