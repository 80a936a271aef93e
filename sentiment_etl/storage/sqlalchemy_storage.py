"""
SQLAlchemy-based storage backend.

Stores raw payloads in `raw_data` and normalized records in `processed_data`.
Every operation runs in its own session, so each row write commits or rolls
back independently.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import Select, func, select, text, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from sentiment_etl.errors import StorageError, StorageUnavailableError
from sentiment_etl.models.base import Base
from sentiment_etl.models.dtos import NormalizedRecord, PersistedRecord, ReprocessScope
from sentiment_etl.models.processed_data_orm import ProcessedDataORM
from sentiment_etl.models.raw_data_orm import RawDataORM
from sentiment_etl.utils.db_session import create_engine, create_session_factory, session_scope

logger = logging.getLogger(__name__)


def _apply_scope(stmt: Select, scope: ReprocessScope) -> Select:
    if scope.kind == "source":
        return stmt.where(ProcessedDataORM.source == scope.source)
    if scope.kind == "date_range":
        return stmt.where(ProcessedDataORM.processed_at.between(scope.start, scope.end))
    return stmt


def record_to_orm(record: NormalizedRecord) -> ProcessedDataORM:
    return ProcessedDataORM(
        item_id=record.id,
        source=record.source_category.partition,
        source_category=record.source_category.value,
        title=record.title,
        content=record.content,
        url=record.url,
        relevance_score=record.relevance_score,
        language=record.language,
        sentiment=record.sentiment,
        sentiment_score=record.sentiment_score,
        sentiment_confidence=record.sentiment_confidence,
        processed_data=record.model_dump(mode="json"),
    )


class SQLAlchemyStorage:
    """Storage client backed by an async SQLAlchemy engine."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        engine: Optional[AsyncEngine] = None,
    ):
        """
        Args:
            session_factory: Factory producing sessions for every operation.
            engine: The engine behind the factory, if this client owns it;
                disposed by `close()`.
        """
        self._session_factory = session_factory
        self._engine = engine

    @classmethod
    def from_url(cls, database_url: str, echo: bool = False) -> "SQLAlchemyStorage":
        engine = create_engine(database_url, echo=echo)
        return cls(create_session_factory(engine), engine=engine)

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()

    async def create_schema(self) -> None:
        """Creates the tables if they do not exist."""
        if self._engine is None:
            raise StorageError("create_schema needs a storage client that owns its engine")
        try:
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to create schema: {e}") from e
        except OSError as e:
            raise StorageUnavailableError(f"Database unreachable: {e}") from e
        logger.info("Database schema created")

    async def ping(self) -> None:
        try:
            async with session_scope(self._session_factory) as session:
                await session.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Storage health check failed: {e}")
            raise StorageUnavailableError(f"Storage unavailable: {e}") from e

    async def insert_processed_record(self, record: NormalizedRecord) -> int:
        orm = record_to_orm(record)
        try:
            async with session_scope(self._session_factory) as session:
                session.add(orm)
                await session.flush()
                row_id = orm.id
        except SQLAlchemyError as e:
            logger.error(f"Failed to insert record {record.id}: {e}")
            raise StorageError(f"Failed to insert record {record.id}: {e}") from e
        return row_id

    async def insert_raw_item(
        self, source: str, query: str, payload: Dict[str, Any], extracted_at: datetime
    ) -> int:
        orm = RawDataORM(source=source, query=query, raw_data=payload, extracted_at=extracted_at)
        try:
            async with session_scope(self._session_factory) as session:
                session.add(orm)
                await session.flush()
                row_id = orm.id
        except SQLAlchemyError as e:
            logger.error(f"Failed to insert raw item from {source}: {e}")
            raise StorageError(f"Failed to insert raw item from {source}: {e}") from e
        return row_id

    async def count_records(self, scope: ReprocessScope) -> int:
        stmt = _apply_scope(select(func.count()).select_from(ProcessedDataORM), scope)
        try:
            async with session_scope(self._session_factory) as session:
                result = await session.execute(stmt)
                return int(result.scalar_one())
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to count records ({scope.describe()}): {e}") from e

    async def fetch_records_page(self, offset: int, limit: int, scope: ReprocessScope) -> List[PersistedRecord]:
        stmt = _apply_scope(select(ProcessedDataORM), scope).order_by(ProcessedDataORM.id).offset(offset).limit(limit)
        try:
            async with session_scope(self._session_factory) as session:
                result = await session.execute(stmt)
                rows = result.scalars().all()
                return [PersistedRecord.model_validate(row) for row in rows]
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to fetch records at offset {offset}: {e}") from e

    async def update_sentiment(
        self,
        record_id: int,
        category: str,
        score: float,
        confidence: float,
        updated_at: datetime,
    ) -> None:
        stmt = (
            update(ProcessedDataORM)
            .where(ProcessedDataORM.id == record_id)
            .values(
                sentiment=category,
                sentiment_score=score,
                sentiment_confidence=confidence,
                sentiment_updated_at=updated_at,
            )
        )
        try:
            async with session_scope(self._session_factory) as session:
                result = await session.execute(stmt)
                if result.rowcount == 0:
                    raise StorageError(f"Record {record_id} not found")
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to update record {record_id}: {e}") from e
