"""
Main Pipeline Orchestrator for the sentiment ETL service.

Coordinates one extract, transform and load run across all sources, and
exposes the batch sentiment reprocessing entry point. Both entry points
return structured results; only configuration problems and an unreachable
storage backend are raised to the caller.
"""
import asyncio
import logging
import time
from pathlib import Path
from typing import Optional

from sentiment_etl.config.settings import Settings, settings as default_settings
from sentiment_etl.core.lexicon import DEFAULT_LEXICON_PATH, Lexicon, default_lexicon, load_lexicon
from sentiment_etl.core.loader import DataLoader
from sentiment_etl.core.reprocessor import SentimentReprocessor
from sentiment_etl.core.sentiment_scorer import SentimentScorer
from sentiment_etl.core.transformer import RecordTransformer
from sentiment_etl.errors import ConfigurationError
from sentiment_etl.extractors import ExtractionOrchestrator, build_extractors, close_extractors
from sentiment_etl.models.dtos import (
    CleanupResult,
    ExtractionSummary,
    LoadingSummary,
    PipelineRunResult,
    ReprocessScope,
    utc_now,
)
from sentiment_etl.storage.base import StorageClient
from sentiment_etl.storage.sqlalchemy_storage import SQLAlchemyStorage

logger = logging.getLogger(__name__)


def lexicon_from_settings(config: Settings) -> Lexicon:
    if Path(config.LEXICON_PATH).resolve() == DEFAULT_LEXICON_PATH.resolve():
        return default_lexicon()
    return load_lexicon(config.LEXICON_PATH)


class ETLPipeline:
    """
    Orchestrates the sentiment ETL pipeline.
    """

    def __init__(
        self,
        storage: StorageClient,
        config: Optional[Settings] = None,
        orchestrator: Optional[ExtractionOrchestrator] = None,
        lexicon: Optional[Lexicon] = None,
    ):
        """
        Args:
            storage: Storage client every stage writes through.
            config: Settings to run with; defaults to the environment settings.
            orchestrator: Extraction orchestrator to use. When omitted, one is
                built from `config` for every run and its clients are closed
                afterwards.
            lexicon: Keyword tables; defaults to the file named by LEXICON_PATH.
        """
        self.storage = storage
        self.config = config or default_settings
        self._orchestrator = orchestrator
        self.lexicon = lexicon or lexicon_from_settings(self.config)
        self.scorer = SentimentScorer(self.lexicon)
        self.loader = DataLoader(storage)

    def _check_config(self) -> None:
        problems = self.config.validate_for_extraction()
        if problems:
            raise ConfigurationError("Invalid configuration: " + "; ".join(problems))

    async def run(self) -> PipelineRunResult:
        """
        Run extraction, transformation and loading once.

        Returns:
            A PipelineRunResult; its status is "success" when every source and
            every write succeeded, "completed_with_errors" when some failed, and
            "error" when a stage could not run at all.

        Raises:
            ConfigurationError: If required settings are missing.
            StorageUnavailableError: If storage cannot be reached.
        """
        self._check_config()
        await self.storage.ping()

        started = time.monotonic()
        result = PipelineRunResult(started_at=utc_now())
        logger.info("Starting ETL pipeline run")

        stage = "extraction"
        extractors = None
        try:
            orchestrator = self._orchestrator
            if orchestrator is None:
                extractors = build_extractors(self.config)
                orchestrator = ExtractionOrchestrator(
                    extractors,
                    query=self.config.EXTRACTION_QUERY,
                    max_concurrency=self.config.EXTRACTION_MAX_CONCURRENCY,
                )
            batch = await orchestrator.extract_all()
            result.extraction = ExtractionSummary.from_batch(batch)

            stage = "transformation"
            transformer = RecordTransformer(scorer=self.scorer, lexicon=self.lexicon)
            records = transformer.transform(batch)
            result.transformation = transformer.summarize(records, batch.total_items - len(records))

            stage = "loading"
            raw_load = await self.loader.load_raw(batch)
            processed_load = await self.loader.load_records(records)
            result.loading = LoadingSummary(raw=raw_load, processed=processed_load)
        except Exception as e:
            logger.critical(f"ETL pipeline failed during {stage}: {e}", exc_info=True)
            result.status = "error"
            result.message = f"ETL pipeline failed during {stage}"
            result.error = f"{type(e).__name__}: {e}"
            result.duration_seconds = time.monotonic() - started
            return result
        finally:
            if extractors is not None:
                await close_extractors(extractors)

        degraded = bool(result.extraction.errors) or not (
            result.loading.raw.success and result.loading.processed.success
        )
        result.status = "completed_with_errors" if degraded else "success"
        result.message = (
            "ETL pipeline completed with errors" if degraded else "ETL pipeline completed successfully"
        )
        result.duration_seconds = time.monotonic() - started
        logger.info(
            f"{result.message}: {result.extraction.total_items} items extracted, "
            f"{result.transformation.total_records} transformed, "
            f"{result.loading.processed.inserted} stored in {result.duration_seconds:.2f}s"
        )
        return result

    async def reprocess_sentiment(self, scope: Optional[ReprocessScope] = None) -> CleanupResult:
        """
        Recompute sentiment for persisted records within `scope`.

        Raises:
            StorageUnavailableError: If storage cannot be reached.
        """
        await self.storage.ping()
        reprocessor = SentimentReprocessor(
            self.storage, scorer=self.scorer, page_size=self.config.REPROCESS_PAGE_SIZE
        )
        return await reprocessor.reprocess(scope)


async def _run_with_storage(config: Settings, action):
    storage = SQLAlchemyStorage.from_url(config.DATABASE_URL, echo=config.DEBUG)
    try:
        return await action(ETLPipeline(storage, config=config))
    finally:
        await storage.close()


def run_pipeline(config: Optional[Settings] = None) -> PipelineRunResult:
    """Blocking entry point: one full pipeline run against the configured database."""
    config = config or default_settings
    return asyncio.run(_run_with_storage(config, lambda pipeline: pipeline.run()))


def reprocess_sentiment(scope: Optional[ReprocessScope] = None, config: Optional[Settings] = None) -> CleanupResult:
    """Blocking entry point: sentiment reprocessing against the configured database."""
    config = config or default_settings
    return asyncio.run(_run_with_storage(config, lambda pipeline: pipeline.reprocess_sentiment(scope)))
