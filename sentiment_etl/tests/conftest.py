"""Shared fixtures for the sentiment ETL test-suite."""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Set

import pytest

from sentiment_etl.config.settings import Settings
from sentiment_etl.core.lexicon import Lexicon, default_lexicon
from sentiment_etl.errors import StorageError, StorageUnavailableError
from sentiment_etl.models.dtos import NormalizedRecord, PersistedRecord, ReprocessScope


class InMemoryStorage:
    """
    Storage client keeping rows in dictionaries.

    Failures can be injected per operation: `fail_ping`, `fail_count`,
    `fail_fetch_offsets`, `fail_update_ids` and `fail_insert_item_ids`.
    """

    def __init__(self):
        self.raw_rows: List[Dict[str, Any]] = []
        self.rows: Dict[int, Dict[str, Any]] = {}
        self._next_id = 1
        self.fail_ping = False
        self.fail_count = False
        self.fail_fetch_offsets: Set[int] = set()
        self.fail_update_ids: Set[int] = set()
        self.fail_insert_item_ids: Set[str] = set()
        self.update_calls = 0

    def add_row(
        self,
        source: str,
        title: str,
        content: str = "",
        processed_at: Optional[datetime] = None,
        sentiment: str = "neutral",
        sentiment_score: float = 0.0,
    ) -> int:
        row_id = self._next_id
        self._next_id += 1
        self.rows[row_id] = {
            "id": row_id,
            "source": source,
            "title": title,
            "content": content,
            "relevance_score": 0.0,
            "sentiment": sentiment,
            "sentiment_score": sentiment_score,
            "sentiment_confidence": 0.0,
            "processed_at": processed_at or datetime.now(timezone.utc),
            "sentiment_updated_at": None,
        }
        return row_id

    def _in_scope(self, row: Dict[str, Any], scope: ReprocessScope) -> bool:
        if scope.kind == "source":
            return row["source"] == scope.source
        if scope.kind == "date_range":
            return scope.start <= row["processed_at"] <= scope.end
        return True

    def _scoped(self, scope: ReprocessScope) -> List[Dict[str, Any]]:
        return [row for _, row in sorted(self.rows.items()) if self._in_scope(row, scope)]

    async def ping(self) -> None:
        if self.fail_ping:
            raise StorageUnavailableError("Storage unavailable: connection refused")

    async def insert_processed_record(self, record: NormalizedRecord) -> int:
        if record.id in self.fail_insert_item_ids:
            raise StorageError(f"Failed to insert record {record.id}")
        row_id = self.add_row(record.source_category.partition, record.title, record.content,
                              sentiment=record.sentiment, sentiment_score=record.sentiment_score)
        self.rows[row_id]["item_id"] = record.id
        return row_id

    async def insert_raw_item(self, source: str, query: str, payload: Dict[str, Any], extracted_at: datetime) -> int:
        self.raw_rows.append({"source": source, "query": query, "raw_data": payload, "extracted_at": extracted_at})
        return len(self.raw_rows)

    async def count_records(self, scope: ReprocessScope) -> int:
        if self.fail_count:
            raise StorageError("Failed to count records")
        return len(self._scoped(scope))

    async def fetch_records_page(self, offset: int, limit: int, scope: ReprocessScope) -> List[PersistedRecord]:
        if offset in self.fail_fetch_offsets:
            raise StorageError(f"Failed to fetch records at offset {offset}")
        return [PersistedRecord(**row) for row in self._scoped(scope)[offset:offset + limit]]

    async def update_sentiment(self, record_id: int, category: str, score: float, confidence: float, updated_at: datetime) -> None:
        self.update_calls += 1
        if record_id in self.fail_update_ids:
            raise StorageError(f"Failed to update record {record_id}")
        row = self.rows.get(record_id)
        if row is None:
            raise StorageError(f"Record {record_id} not found")
        row.update(
            sentiment=category,
            sentiment_score=score,
            sentiment_confidence=confidence,
            sentiment_updated_at=updated_at,
        )


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def test_settings() -> Settings:
    """Settings isolated from any local .env file."""
    return Settings(
        RAPIDAPI_KEY="test-key",
        YOUTUBE_RETRY_DELAY_SECONDS=0,
        INDONESIA_NEWS_DELAY_SECONDS=0,
        _env_file=None,
    )


@pytest.fixture
def lexicon() -> Lexicon:
    return default_lexicon()
