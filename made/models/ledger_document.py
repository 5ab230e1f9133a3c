"""Ledger Document ORM — one row holds the whole serialized store.

Invariants:
    - key is the primary key; one key per independent ledger
    - payload holds the five-collection snapshot (core/ledger_snapshot.py)
    - version starts at 1 on first save and increments by exactly one per save

Design Decisions:
    - JSON column for payload: the persisted layout is the document, not a
      normalized schema
    - version column is the optimistic-concurrency stamp checked on every save
"""

from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from made.db.base import Base


class LedgerDocumentRow(Base):
    """Persisted ledger document."""
    __tablename__ = "ledger_documents"

    key: Mapped[str] = mapped_column(String(100), primary_key=True)
    payload: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
