"""Audit logger implementation for the SBOM Quality Scoring System."""

import csv
import io
import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import and_, select

from ..interfaces.audit import AuditEvent, AuditEventType, IAuditLogger
from .database import DatabaseManager
from .models import AuditEventModel

logger = logging.getLogger(__name__)


def new_event(
    event_type: AuditEventType,
    run_id: Optional[str] = None,
    path: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
) -> AuditEvent:
    """Create an event stamped with a fresh id and the current UTC time."""
    return AuditEvent(
        id=str(uuid.uuid4()),
        event_type=event_type,
        timestamp=datetime.now(timezone.utc),
        run_id=run_id,
        path=path,
        details=details or {},
    )


class AuditLogger(IAuditLogger):
    """
    Audit logger implementation with a SQLAlchemy backend.

    Records the events of scoring runs (start, per-document outcome,
    completion) and supports querying and exporting them per run. Tables
    are created on first use.
    """

    def __init__(
        self,
        db_manager: Optional[DatabaseManager] = None,
        database_url: Optional[str] = None,
    ):
        """
        Initialize the audit logger.

        Args:
            db_manager: Optional DatabaseManager instance. If not provided,
                       a new one will be created.
            database_url: Database URL for creating a new DatabaseManager.
        """
        if db_manager is not None:
            self._db_manager = db_manager
            self._owns_db_manager = False
        else:
            self._db_manager = DatabaseManager(database_url=database_url)
            self._owns_db_manager = True
        self._schema_ready = False

    def _ensure_schema(self) -> None:
        if not self._schema_ready:
            self._db_manager.init_database()
            self._schema_ready = True

    def _to_model(self, event: AuditEvent) -> AuditEventModel:
        """Convert AuditEvent dataclass to SQLAlchemy model."""
        return AuditEventModel(
            id=str(event.id),
            event_type=event.event_type.value if isinstance(event.event_type, AuditEventType) else event.event_type,
            timestamp=event.timestamp,
            run_id=event.run_id,
            path=event.path,
            details=event.details or {},
        )

    def _from_model(self, model: AuditEventModel) -> AuditEvent:
        """Convert SQLAlchemy model to AuditEvent dataclass."""
        timestamp = model.timestamp
        # SQLite hands back naive datetimes; everything is stored in UTC.
        if timestamp is not None and timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return AuditEvent(
            id=model.id,
            event_type=AuditEventType(model.event_type),
            timestamp=timestamp,
            run_id=model.run_id,
            path=model.path,
            details=model.details or {},
        )

    def log_event(self, event: AuditEvent) -> None:
        """
        Record an audit event to the database.

        Args:
            event: The audit event to record.
        """
        self._ensure_schema()
        model = self._to_model(event)
        with self._db_manager.get_session() as session:
            session.add(model)
        logger.debug(f"Audit event {model.event_type} recorded for run {event.run_id}")

    def get_events(
        self,
        run_id: Optional[str] = None,
        event_type: Optional[AuditEventType] = None,
        start_time: Optional[datetime] = None,
        end_time: Optional[datetime] = None,
    ) -> List[AuditEvent]:
        """
        Query audit events with optional filters.

        Args:
            run_id: Filter by scoring run.
            event_type: Filter by event type.
            start_time: Filter events after this time.
            end_time: Filter events before this time.

        Returns:
            List of matching audit events, oldest first.
        """
        self._ensure_schema()
        with self._db_manager.get_session() as session:
            query = select(AuditEventModel)

            conditions = []
            if run_id:
                conditions.append(AuditEventModel.run_id == run_id)
            if event_type:
                event_type_value = event_type.value if isinstance(event_type, AuditEventType) else event_type
                conditions.append(AuditEventModel.event_type == event_type_value)
            if start_time:
                conditions.append(AuditEventModel.timestamp >= start_time)
            if end_time:
                conditions.append(AuditEventModel.timestamp <= end_time)

            if conditions:
                query = query.where(and_(*conditions))

            query = query.order_by(AuditEventModel.timestamp.asc())

            result = session.execute(query)
            models = result.scalars().all()

            return [self._from_model(m) for m in models]

    def export_log(self, run_id: str, format: str = "json") -> str:
        """
        Export the audit log of one run.

        Args:
            run_id: The run to export logs for.
            format: Export format ("json" or "csv").

        Returns:
            Exported log content as a string.

        Raises:
            ValueError: If format is not supported.
        """
        if format not in ("json", "csv"):
            raise ValueError(f"Unsupported export format: {format}. Use 'json' or 'csv'.")

        events = self.get_events(run_id=run_id)

        if format == "json":
            return self._export_json(run_id, events)
        else:
            return self._export_csv(events)

    def _export_json(self, run_id: str, events: List[AuditEvent]) -> str:
        """Export events to JSON with a per-run score summary."""
        scored = [e for e in events if e.event_type == AuditEventType.DOCUMENT_SCORED]
        skipped = [e for e in events if e.event_type == AuditEventType.DOCUMENT_SKIPPED]
        scores = [e.details.get("score") for e in scored if e.details.get("score") is not None]

        data = {
            "export_timestamp": datetime.now(timezone.utc).isoformat(),
            "run_id": run_id,
            "event_count": len(events),
            "summary": {
                "documents_scored": len(scored),
                "documents_skipped": len(skipped),
                "average_score": sum(scores) / len(scores) if scores else 0,
                "min_score": min(scores) if scores else 0,
                "max_score": max(scores) if scores else 0,
            },
            "events": [
                {
                    "id": e.id,
                    "event_type": e.event_type.value,
                    "timestamp": e.timestamp.isoformat() if e.timestamp else None,
                    "run_id": e.run_id,
                    "path": e.path,
                    "details": e.details,
                }
                for e in events
            ],
        }
        return json.dumps(data, indent=2, ensure_ascii=False)

    def _export_csv(self, events: List[AuditEvent]) -> str:
        """Export events to CSV format."""
        output = io.StringIO()
        writer = csv.writer(output)

        writer.writerow(["id", "event_type", "timestamp", "run_id", "path", "details"])

        for e in events:
            writer.writerow([
                e.id,
                e.event_type.value,
                e.timestamp.isoformat() if e.timestamp else "",
                e.run_id or "",
                e.path or "",
                json.dumps(e.details, ensure_ascii=False),
            ])

        return output.getvalue()

    def close(self) -> None:
        """Release the database engine if this logger created it."""
        if self._owns_db_manager:
            self._db_manager.close()
