"""
SQLAlchemy ORM model for the 'raw_data' table.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import Integer, Text, func
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql.sqltypes import TIMESTAMP

from .base import Base, JSONDocument


class RawDataORM(Base):
    """Unprocessed source payloads, kept for audit."""
    __tablename__ = "raw_data"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True, comment="Auto-incrementing row id")
    source: Mapped[str] = mapped_column(Text, nullable=False, comment="Extractor tag (e.g. 'youtube')")
    query: Mapped[Optional[str]] = mapped_column(Text, nullable=True, comment="Query the extraction ran with")
    extracted_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), comment="When the payload was extracted")
    raw_data: Mapped[Dict[str, Any]] = mapped_column(JSONDocument, nullable=False, comment="Payload exactly as returned by the source")

    def __repr__(self) -> str:
        return f"<RawDataORM(id={self.id}, source='{self.source}', extracted_at='{self.extracted_at}')>"
