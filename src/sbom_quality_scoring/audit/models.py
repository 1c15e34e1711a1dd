"""SQLAlchemy models for the scoring audit trail."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Index, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


class JSONType(TypeDecorator):
    """Platform-independent JSON type.

    Uses JSONB for PostgreSQL and JSON for other databases (like SQLite).
    """
    impl = JSON
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            return dialect.type_descriptor(JSONB())
        else:
            return dialect.type_descriptor(JSON())


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


class AuditEventModel(Base):
    """Audit events table model."""
    __tablename__ = "scoring_audit_events"

    id = Column(String(36), primary_key=True, default=_new_id)
    event_type = Column(String(50), nullable=False)
    timestamp = Column(DateTime(timezone=True), default=_utcnow)
    run_id = Column(String(36), nullable=True)
    path = Column(Text, nullable=True)
    details = Column(JSONType)

    __table_args__ = (
        Index("idx_scoring_audit_events_event_type", "event_type"),
        Index("idx_scoring_audit_events_timestamp", "timestamp"),
        Index("idx_scoring_audit_events_run_id", "run_id"),
    )
