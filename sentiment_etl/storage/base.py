"""Defines the storage protocol the pipeline and reprocessor depend on."""

from datetime import datetime
from typing import Any, Dict, List, Protocol, runtime_checkable

from sentiment_etl.models.dtos import NormalizedRecord, PersistedRecord, ReprocessScope


@runtime_checkable
class StorageClient(Protocol):
    """
    Persistence for raw payloads and normalized records.

    Implementations raise `StorageError` on failure and must make
    `update_sentiment` atomic per row.
    """

    async def ping(self) -> None:
        """Raises StorageUnavailableError if the backend cannot be reached."""
        ...

    async def insert_processed_record(self, record: NormalizedRecord) -> int:
        """Stores one normalized record and returns its row id."""
        ...

    async def insert_raw_item(
        self, source: str, query: str, payload: Dict[str, Any], extracted_at: datetime
    ) -> int:
        """Stores one raw payload and returns its row id."""
        ...

    async def count_records(self, scope: ReprocessScope) -> int:
        """Counts processed records within `scope`."""
        ...

    async def fetch_records_page(self, offset: int, limit: int, scope: ReprocessScope) -> List[PersistedRecord]:
        """Returns up to `limit` records within `scope`, ordered by id, skipping `offset`."""
        ...

    async def update_sentiment(
        self,
        record_id: int,
        category: str,
        score: float,
        confidence: float,
        updated_at: datetime,
    ) -> None:
        """Overwrites the sentiment fields of one record."""
        ...
