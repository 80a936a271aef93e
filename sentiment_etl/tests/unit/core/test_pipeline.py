import pytest
from unittest.mock import AsyncMock, MagicMock

from sentiment_etl.core.pipeline import ETLPipeline
from sentiment_etl.errors import ConfigurationError, StorageUnavailableError
from sentiment_etl.models.dtos import ExtractionBatch, RawItem, ReprocessScope, SourceExtraction


def make_orchestrator(batch=None, side_effect=None):
    orchestrator = MagicMock()
    orchestrator.extract_all = AsyncMock(return_value=batch, side_effect=side_effect)
    return orchestrator


def healthy_batch():
    return ExtractionBatch(query="COVID-19", sources={
        "realtime_news": SourceExtraction(source="realtime_news", items=[
            RawItem(source="realtime_news", payload={
                "title": "Vaksin COVID-19 berhasil dan efektif",
                "article_id": "a1",
                "link": "https://example.com/a1",
            }),
        ]),
        "instagram": SourceExtraction(source="instagram", items=[
            RawItem(source="instagram", payload={"code": "X1", "caption_text": "Pakai mask di Jakarta"}),
        ]),
    })


@pytest.mark.asyncio
async def test_successful_run(storage, test_settings, lexicon):
    pipeline = ETLPipeline(storage, config=test_settings, orchestrator=make_orchestrator(healthy_batch()), lexicon=lexicon)

    result = await pipeline.run()

    assert result.status == "success"
    assert result.error is None
    assert result.extraction.total_items == 2
    assert result.transformation.total_records == 2
    assert result.transformation.by_sentiment["positive"] >= 1
    assert result.loading.raw.inserted == 2
    assert result.loading.processed.inserted == 2
    assert {row["source"] for row in storage.rows.values()} == {"realtime_news", "instagram"}


@pytest.mark.asyncio
async def test_failed_source_completes_with_errors(storage, test_settings, lexicon):
    batch = ExtractionBatch(query="COVID-19", sources={
        **healthy_batch().sources,
        "youtube": SourceExtraction.failed("youtube", "no candidate video produced comments"),
    })
    pipeline = ETLPipeline(storage, config=test_settings, orchestrator=make_orchestrator(batch), lexicon=lexicon)

    result = await pipeline.run()

    assert result.status == "completed_with_errors"
    assert result.extraction.errors == {"youtube": "no candidate video produced comments"}
    assert result.loading.processed.inserted == 2
    # two raw items plus the error marker row
    assert result.loading.raw.inserted == 3


@pytest.mark.asyncio
async def test_stage_failure_returns_error_result(storage, test_settings, lexicon):
    orchestrator = make_orchestrator(side_effect=RuntimeError("event loop exploded"))
    pipeline = ETLPipeline(storage, config=test_settings, orchestrator=orchestrator, lexicon=lexicon)

    result = await pipeline.run()

    assert result.status == "error"
    assert "extraction" in result.message
    assert "RuntimeError" in result.error
    assert storage.raw_rows == []


@pytest.mark.asyncio
async def test_missing_api_key_raises(storage, test_settings, lexicon):
    config = test_settings.model_copy(update={"RAPIDAPI_KEY": None})
    orchestrator = make_orchestrator(healthy_batch())
    pipeline = ETLPipeline(storage, config=config, orchestrator=orchestrator, lexicon=lexicon)

    with pytest.raises(ConfigurationError, match="RAPIDAPI_KEY"):
        await pipeline.run()
    orchestrator.extract_all.assert_not_called()


@pytest.mark.asyncio
async def test_unreachable_storage_raises(storage, test_settings, lexicon):
    storage.fail_ping = True
    orchestrator = make_orchestrator(healthy_batch())
    pipeline = ETLPipeline(storage, config=test_settings, orchestrator=orchestrator, lexicon=lexicon)

    with pytest.raises(StorageUnavailableError):
        await pipeline.run()
    orchestrator.extract_all.assert_not_called()


@pytest.mark.asyncio
async def test_builds_and_closes_extractors_when_no_orchestrator_given(storage, test_settings, lexicon, mocker):
    mock_build = mocker.patch("sentiment_etl.core.pipeline.build_extractors", return_value=["extractor"])
    mock_close = mocker.patch("sentiment_etl.core.pipeline.close_extractors", new_callable=AsyncMock)
    mock_orchestrator_cls = mocker.patch("sentiment_etl.core.pipeline.ExtractionOrchestrator")
    mock_orchestrator_cls.return_value.extract_all = AsyncMock(return_value=healthy_batch())

    result = await ETLPipeline(storage, config=test_settings, lexicon=lexicon).run()

    assert result.status == "success"
    mock_build.assert_called_once_with(test_settings)
    mock_orchestrator_cls.assert_called_once_with(
        ["extractor"],
        query=test_settings.EXTRACTION_QUERY,
        max_concurrency=test_settings.EXTRACTION_MAX_CONCURRENCY,
    )
    mock_close.assert_awaited_once_with(["extractor"])


@pytest.mark.asyncio
async def test_reprocess_sentiment_through_pipeline(storage, test_settings, lexicon):
    storage.add_row("instagram", "Vaksin sukses", "")
    storage.add_row("youtube", "Wabah", "")
    pipeline = ETLPipeline(storage, config=test_settings, orchestrator=make_orchestrator(), lexicon=lexicon)

    result = await pipeline.reprocess_sentiment(ReprocessScope.for_source("instagram"))

    assert result.status == "completed"
    assert result.updated_records == 1
    assert storage.rows[1]["sentiment"] == "positive"
    assert storage.rows[2]["sentiment_updated_at"] is None


@pytest.mark.asyncio
async def test_reprocess_sentiment_requires_storage(storage, test_settings, lexicon):
    storage.fail_ping = True
    pipeline = ETLPipeline(storage, config=test_settings, orchestrator=make_orchestrator(), lexicon=lexicon)

    with pytest.raises(StorageUnavailableError):
        await pipeline.reprocess_sentiment()
