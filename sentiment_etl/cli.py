"""Command-line interface for the sentiment ETL service."""

import asyncio
import logging
from datetime import datetime, time, timezone
from typing import Annotated, Optional

import typer

from sentiment_etl.config.settings import settings
from sentiment_etl.core.pipeline import lexicon_from_settings, reprocess_sentiment, run_pipeline
from sentiment_etl.core.sentiment_scorer import SentimentScorer
from sentiment_etl.errors import ConfigurationError, StorageError
from sentiment_etl.models.dtos import ReprocessScope
from sentiment_etl.storage.sqlalchemy_storage import SQLAlchemyStorage
from sentiment_etl.utils.logging_utils import setup_logging

app = typer.Typer(help="Topic sentiment ETL - extract, score and store topic content from several sources")

logger = logging.getLogger(__name__)

LogLevelOption = Annotated[str, typer.Option("--loglevel", "-l", help="Logging level")]


def parse_date(date_str: str) -> datetime:
    """
    Parse a YYYY-MM-DD string into a UTC midnight datetime.

    Raises:
        typer.BadParameter: If the date format is invalid.
    """
    try:
        return datetime.strptime(date_str, "%Y-%m-%d").replace(tzinfo=timezone.utc)
    except ValueError:
        raise typer.BadParameter(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")


def build_scope(source: Optional[str], start_date: Optional[str], end_date: Optional[str]) -> ReprocessScope:
    """
    Resolve reprocess options into a scope: a source, an inclusive date range
    (whole days), or all records when neither is given.
    """
    if source and (start_date or end_date):
        raise typer.BadParameter("Use either --source or --start-date/--end-date, not both")
    if source:
        try:
            return ReprocessScope.for_source(source)
        except ValueError as e:
            raise typer.BadParameter(str(e))
    if start_date or end_date:
        if not (start_date and end_date):
            raise typer.BadParameter("--start-date and --end-date must be given together")
        start = parse_date(start_date)
        end = datetime.combine(parse_date(end_date).date(), time.max, tzinfo=timezone.utc)
        try:
            return ReprocessScope.for_date_range(start, end)
        except ValueError as e:
            raise typer.BadParameter(str(e))
    return ReprocessScope.all_records()


@app.command()
def run(loglevel: LogLevelOption = "INFO") -> None:
    """Run one extract, transform and load pass over all sources."""
    setup_logging(settings.LOGGING_CONFIG_PATH, level=loglevel)
    try:
        result = run_pipeline(settings)
    except (ConfigurationError, StorageError) as e:
        logger.critical(f"Pipeline aborted: {e}")
        raise typer.Exit(code=1)
    typer.echo(result.model_dump_json(indent=2))
    if result.status == "error":
        raise typer.Exit(code=1)


@app.command()
def reprocess(
    source: Annotated[Optional[str], typer.Option("--source", "-s", help="Source category or partition to reprocess")] = None,
    start_date: Annotated[Optional[str], typer.Option("--start-date", help="First processed date to include (YYYY-MM-DD)")] = None,
    end_date: Annotated[Optional[str], typer.Option("--end-date", help="Last processed date to include (YYYY-MM-DD)")] = None,
    loglevel: LogLevelOption = "INFO",
) -> None:
    """Recompute sentiment for stored records."""
    setup_logging(settings.LOGGING_CONFIG_PATH, level=loglevel)
    scope = build_scope(source, start_date, end_date)
    try:
        result = reprocess_sentiment(scope, settings)
    except (ConfigurationError, StorageError) as e:
        logger.critical(f"Reprocessing aborted: {e}")
        raise typer.Exit(code=1)
    typer.echo(result.model_dump_json(indent=2))
    if result.status == "error":
        raise typer.Exit(code=1)


@app.command()
def score(text: Annotated[str, typer.Argument(help="Text to score")]) -> None:
    """Score a single piece of text with the sentiment lexicon."""
    try:
        scorer = SentimentScorer(lexicon_from_settings(settings))
    except ConfigurationError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)
    typer.echo(scorer.score(text).model_dump_json(indent=2))


@app.command("init-db")
def init_db(loglevel: LogLevelOption = "INFO") -> None:
    """Create the database tables if they do not exist."""
    setup_logging(settings.LOGGING_CONFIG_PATH, level=loglevel)

    async def _create() -> None:
        storage = SQLAlchemyStorage.from_url(settings.DATABASE_URL, echo=settings.DEBUG)
        try:
            await storage.create_schema()
        finally:
            await storage.close()

    try:
        asyncio.run(_create())
    except (StorageError, OSError) as e:
        logger.critical(f"Schema creation failed: {e}")
        raise typer.Exit(code=1)
    typer.echo("Database tables are ready.")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
