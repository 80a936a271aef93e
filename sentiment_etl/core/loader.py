"""
Loading stage: writes raw payloads and normalized records to storage.

Write failures are logged and counted per row; they never abort the load.
"""
import logging
from typing import Sequence

from sentiment_etl.errors import StorageError
from sentiment_etl.models.dtos import ExtractionBatch, LoadResult, NormalizedRecord
from sentiment_etl.storage.base import StorageClient

logger = logging.getLogger(__name__)


class DataLoader:
    """
    Persists pipeline output through an explicit storage client.
    """

    def __init__(self, storage: StorageClient):
        self.storage = storage

    async def load_raw(self, batch: ExtractionBatch) -> LoadResult:
        """
        Stores every raw item of a batch, plus one error row per failed source.

        Args:
            batch: The extraction batch to archive.

        Returns:
            A LoadResult counting inserted and failed rows.
        """
        result = LoadResult(message="raw data load")
        for source, extraction in batch.sources.items():
            rows = [(item.payload, item.extracted_at) for item in extraction.items]
            if extraction.error is not None:
                rows.append(({"error": extraction.error}, batch.created_at))
            for payload, extracted_at in rows:
                result.records_count += 1
                try:
                    await self.storage.insert_raw_item(source, batch.query, payload, extracted_at)
                    result.inserted += 1
                except StorageError as e:
                    result.failed += 1
                    result.errors.append(f"{source}: {e}")
                    logger.error(f"Failed to store raw item from {source}: {e}")

        result.success = result.failed == 0
        result.message = f"Stored {result.inserted} of {result.records_count} raw items"
        logger.info(result.message)
        return result

    async def load_records(self, records: Sequence[NormalizedRecord]) -> LoadResult:
        """
        Stores normalized records one at a time.

        Args:
            records: Records to persist, in order.

        Returns:
            A LoadResult counting inserted and failed records.
        """
        result = LoadResult(message="processed data load", records_count=len(records))
        for record in records:
            try:
                await self.storage.insert_processed_record(record)
                result.inserted += 1
            except StorageError as e:
                result.failed += 1
                result.errors.append(f"{record.id}: {e}")
                logger.error(f"Failed to store record {record.id} ({record.source_category.partition}): {e}")

        result.success = result.failed == 0
        result.message = f"Stored {result.inserted} of {result.records_count} processed records"
        logger.info(result.message)
        return result
