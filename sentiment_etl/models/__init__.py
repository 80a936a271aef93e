"""
Models package for the sentiment ETL service.

This package contains SQLAlchemy ORM models, Pydantic DTOs and the typed
source payload variants.
"""

from .base import Base
from .categories import SourceCategory, SourceTag
from .dtos import (
    CleanupResult,
    ExtractionBatch,
    ExtractionSummary,
    LoadResult,
    LoadingSummary,
    NormalizedRecord,
    PersistedRecord,
    PipelineRunResult,
    RawItem,
    ReprocessScope,
    SentimentResult,
    SourceExtraction,
    TransformationSummary,
)
from .processed_data_orm import ProcessedDataORM
from .raw_data_orm import RawDataORM

__all__ = [
    "Base",
    "SourceCategory",
    "SourceTag",
    "CleanupResult",
    "ExtractionBatch",
    "ExtractionSummary",
    "LoadResult",
    "LoadingSummary",
    "NormalizedRecord",
    "PersistedRecord",
    "PipelineRunResult",
    "RawItem",
    "ReprocessScope",
    "SentimentResult",
    "SourceExtraction",
    "TransformationSummary",
    "ProcessedDataORM",
    "RawDataORM",
]
