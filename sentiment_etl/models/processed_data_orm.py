"""
SQLAlchemy ORM model for the 'processed_data' table.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import Float, Index, Integer, Text, func
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql.sqltypes import TIMESTAMP

from .base import Base, JSONDocument


class ProcessedDataORM(Base):
    """
    One normalized, scored record.

    Attributes:
        id (int): Primary key, auto-incrementing.
        item_id (str): Run-unique identifier assigned during transformation.
        source (str): Storage partition key derived from the source category.
        source_category (str): Display label of the source category.
        title (str, optional): Cleaned title.
        content (str, optional): Cleaned body text.
        url (str, optional): Link back to the original item.
        relevance_score (float): Topical keyword relevance in [0, 1].
        language (str): Coarse language code ("id", "en" or "unknown").
        sentiment (str): Sentiment label.
        sentiment_score (float): Lexicon sentiment score in [-1, 1].
        sentiment_confidence (float): Confidence of the label in [0, 1].
        processed_at (datetime): When the record was loaded (defaults to NOW()).
        sentiment_updated_at (datetime, optional): Last time sentiment was recomputed.
        processed_data (JSON object): The full serialized normalized record.
    """
    __tablename__ = "processed_data"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True, comment="Auto-incrementing row id")
    item_id: Mapped[Optional[str]] = mapped_column(Text, nullable=True, comment="Identifier assigned during transformation")
    source: Mapped[str] = mapped_column(Text, nullable=False, comment="Storage partition key (e.g. 'youtube', 'indonesia_news')")
    source_category: Mapped[Optional[str]] = mapped_column(Text, nullable=True, comment="Source category label")
    title: Mapped[Optional[str]] = mapped_column(Text, nullable=True, comment="Cleaned title")
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True, comment="Cleaned body text")
    url: Mapped[Optional[str]] = mapped_column(Text, nullable=True, comment="Link to the original item")
    relevance_score: Mapped[float] = mapped_column(Float, nullable=False, default=0.0, comment="Topical relevance in [0, 1]")
    language: Mapped[Optional[str]] = mapped_column(Text, nullable=True, comment="Detected language code")
    sentiment: Mapped[Optional[str]] = mapped_column(Text, nullable=True, comment="Sentiment label")
    sentiment_score: Mapped[Optional[float]] = mapped_column(Float, nullable=True, comment="Sentiment score in [-1, 1]")
    sentiment_confidence: Mapped[Optional[float]] = mapped_column(Float, nullable=True, comment="Sentiment confidence in [0, 1]")
    processed_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), comment="When the record was loaded")
    sentiment_updated_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True), nullable=True, comment="When sentiment was last recomputed")
    processed_data: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSONDocument, nullable=True, comment="Serialized normalized record")

    __table_args__ = (
        Index("ix_processed_data_source", "source"),
        Index("ix_processed_data_processed_at", "processed_at"),
        {"comment": "Normalized records with relevance and sentiment scores."},
    )

    def __repr__(self) -> str:
        return (
            f"<ProcessedDataORM(id={self.id}, source='{self.source}', "
            f"sentiment='{self.sentiment}', score={self.sentiment_score})>"
        )
