"""
Concurrent multi-source extraction.

Runs every configured extractor concurrently and joins them all. A failing
source never affects the others: its exception becomes that source's error
marker in the batch.
"""

import asyncio
import logging
import time
from typing import Dict, List, Optional, Sequence

from sentiment_etl.errors import SourceExtractionError
from sentiment_etl.extractors.base import BaseExtractor
from sentiment_etl.models.dtos import ExtractionBatch, SourceExtraction

logger = logging.getLogger(__name__)


class ExtractionOrchestrator:
    """
    Fans extraction out to one task per source and collects the results.
    """

    def __init__(self, extractors: Sequence[BaseExtractor], query: str = "", max_concurrency: Optional[int] = None):
        """
        Args:
            extractors: One extractor per source, in the order results should appear.
            query: The query the extractors were configured with, recorded on the batch.
            max_concurrency: Upper bound on simultaneously running extractors;
                defaults to one slot per extractor.
        """
        names = [extractor.source for extractor in extractors]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate extractor sources: {names}")
        self.extractors = list(extractors)
        self.query = query
        self.max_concurrency = max_concurrency or max(len(self.extractors), 1)

    async def _run_one(self, extractor: BaseExtractor, semaphore: asyncio.Semaphore) -> SourceExtraction:
        started = time.monotonic()
        async with semaphore:
            logger.info(f"Starting extraction for source: {extractor.source}")
            try:
                result = await extractor.extract()
            except SourceExtractionError as e:
                elapsed = time.monotonic() - started
                logger.error(f"Extraction failed for {extractor.source}: {e.message}")
                return SourceExtraction.failed(extractor.source, e.message, elapsed)
            except Exception as e:
                elapsed = time.monotonic() - started
                logger.error(f"Unexpected error extracting {extractor.source}: {e}", exc_info=True)
                return SourceExtraction.failed(extractor.source, f"{type(e).__name__}: {e}", elapsed)

        elapsed = time.monotonic() - started
        logger.info(f"Finished extraction for {extractor.source}: {len(result.items)} items in {elapsed:.2f}s")
        return result.model_copy(update={"source": extractor.source, "duration_seconds": elapsed})

    async def extract_all(self) -> ExtractionBatch:
        """
        Extract from every source concurrently.

        Returns:
            A batch with one slot per source, in extractor order, each holding
            either items or an error marker. Never raises for source failures.
        """
        semaphore = asyncio.Semaphore(self.max_concurrency)
        tasks: List[asyncio.Task] = []
        logger.info(f"Extracting from {len(self.extractors)} sources (max concurrency {self.max_concurrency})")
        async with asyncio.TaskGroup() as group:
            for extractor in self.extractors:
                tasks.append(group.create_task(self._run_one(extractor, semaphore)))

        sources: Dict[str, SourceExtraction] = {}
        for extractor, task in zip(self.extractors, tasks):
            sources[extractor.source] = task.result()

        batch = ExtractionBatch(query=self.query, sources=sources)
        failed = batch.errors()
        logger.info(
            f"Extraction complete: {batch.total_items} items from {len(sources) - len(failed)} "
            f"of {len(sources)} sources"
        )
        return batch
