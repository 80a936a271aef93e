"""
Batch sentiment reprocessing.

Recomputes sentiment for records already in storage, page by page, so that
lexicon changes can be applied retroactively. Rows are rewritten in place;
running it twice with an unchanged lexicon yields identical results.
"""
import logging
import time
from typing import Optional

from sentiment_etl.core.sentiment_scorer import SentimentScorer
from sentiment_etl.errors import StorageError
from sentiment_etl.models.dtos import CleanupResult, ReprocessScope, utc_now
from sentiment_etl.storage.base import StorageClient

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 100


class SentimentReprocessor:
    """
    Rescores persisted records within a scope and writes the results back.
    """

    def __init__(
        self,
        storage: StorageClient,
        scorer: Optional[SentimentScorer] = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ):
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self.storage = storage
        self.scorer = scorer or SentimentScorer()
        self.page_size = page_size

    async def reprocess(self, scope: Optional[ReprocessScope] = None) -> CleanupResult:
        """
        Rescore every record in `scope`.

        A failed count ends the run with status "error". A failed page fetch is
        recorded and the next page is tried. A failed row update is counted in
        `error_records` and processing continues.

        Args:
            scope: Which records to rescore; defaults to all records.

        Returns:
            The run's CleanupResult. `processed_records` always equals
            `updated_records + error_records`.
        """
        scope = scope or ReprocessScope.all_records()
        started = time.monotonic()
        result = CleanupResult(scope=scope.describe())
        logger.info(f"Starting sentiment reprocessing for {result.scope}")

        try:
            result.total_records = await self.storage.count_records(scope)
        except StorageError as e:
            logger.error(f"Failed to count records for {result.scope}: {e}")
            result.errors.append(f"Failed to count records: {e}")
            result.status = "error"
            result.processing_time_seconds = time.monotonic() - started
            return result

        offset = 0
        while offset < result.total_records:
            try:
                page = await self.storage.fetch_records_page(offset, self.page_size, scope)
            except StorageError as e:
                logger.error(f"Failed to fetch records at offset {offset}: {e}")
                result.errors.append(f"Failed to fetch records at offset {offset}: {e}")
                offset += self.page_size
                continue

            if not page:
                # Fewer rows than counted; nothing further to page through.
                break

            for record in page:
                sentiment = self.scorer.score(record.scoring_text())
                result.processed_records += 1
                try:
                    await self.storage.update_sentiment(
                        record.id,
                        sentiment.category,
                        sentiment.score,
                        sentiment.confidence,
                        utc_now(),
                    )
                    result.updated_records += 1
                except StorageError as e:
                    result.error_records += 1
                    result.errors.append(f"Failed to update record {record.id}: {e}")
                    logger.warning(f"Failed to update sentiment for record {record.id}: {e}")

            offset += self.page_size
            logger.info(
                f"Reprocessed {result.processed_records}/{result.total_records} records "
                f"({result.error_records} errors)"
            )

        result.status = "completed" if not result.errors else "completed_with_errors"
        result.processing_time_seconds = time.monotonic() - started
        logger.info(
            f"Sentiment reprocessing {result.status}: {result.updated_records} updated, "
            f"{result.error_records} failed in {result.processing_time_seconds:.2f}s"
        )
        return result
