"""Unit tests for the Audit Logger."""

import csv
import io
import json
import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from sbom_quality_scoring.audit import AuditLogger, DatabaseManager, get_database_url, new_event
from sbom_quality_scoring.interfaces.audit import AuditEvent, AuditEventType


@pytest.fixture
def audit_logger(tmp_path):
    logger = AuditLogger(database_url=f"sqlite:///{tmp_path}/audit.db")
    yield logger
    logger.close()


def make_event(event_type, run_id, offset, path=None, details=None):
    """Event with a fixed timestamp so ordering is deterministic."""
    return AuditEvent(
        id=str(uuid.uuid4()),
        event_type=event_type,
        timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(seconds=offset),
        run_id=run_id,
        path=path,
        details=details or {},
    )


@pytest.fixture
def recorded_run(audit_logger):
    """Two scored documents and one skipped document in one run."""
    run_id = str(uuid.uuid4())
    events = [
        make_event(AuditEventType.RUN_STARTED, run_id, 0, details={"mode": "comprehensive"}),
        make_event(AuditEventType.DOCUMENT_SCORED, run_id, 1, "a.json", {"score": 9.0, "grade": "A"}),
        make_event(AuditEventType.DOCUMENT_SKIPPED, run_id, 2, "b.xml", {"message": "XML not supported"}),
        make_event(AuditEventType.DOCUMENT_SCORED, run_id, 3, "c.json", {"score": 6.0, "grade": "D"}),
        make_event(AuditEventType.RUN_COMPLETED, run_id, 4, details={"scored": 2, "skipped": 1}),
    ]
    for event in events:
        audit_logger.log_event(event)
    return run_id


class TestNewEvent:
    """Tests for event construction."""

    def test_stamps_id_and_time(self):
        event = new_event(AuditEventType.RUN_STARTED, run_id="r1")
        assert uuid.UUID(event.id)
        assert event.timestamp.tzinfo is not None
        assert event.details == {}
        assert event.path is None


class TestLogAndQuery:
    """Tests for recording and querying events."""

    def test_events_returned_in_order(self, audit_logger, recorded_run):
        events = audit_logger.get_events(run_id=recorded_run)
        assert [e.event_type for e in events] == [
            AuditEventType.RUN_STARTED,
            AuditEventType.DOCUMENT_SCORED,
            AuditEventType.DOCUMENT_SKIPPED,
            AuditEventType.DOCUMENT_SCORED,
            AuditEventType.RUN_COMPLETED,
        ]
        assert events[1].path == "a.json"
        assert events[1].details == {"score": 9.0, "grade": "A"}
        assert events[0].timestamp.tzinfo is not None

    def test_filter_by_event_type(self, audit_logger, recorded_run):
        scored = audit_logger.get_events(run_id=recorded_run, event_type=AuditEventType.DOCUMENT_SCORED)
        assert [e.path for e in scored] == ["a.json", "c.json"]

    def test_filter_by_run(self, audit_logger, recorded_run):
        audit_logger.log_event(new_event(AuditEventType.RUN_FAILED, run_id="other-run"))
        assert len(audit_logger.get_events(run_id=recorded_run)) == 5
        assert len(audit_logger.get_events(run_id="other-run")) == 1
        assert len(audit_logger.get_events()) == 6

    def test_unknown_run_is_empty(self, audit_logger):
        assert audit_logger.get_events(run_id="missing") == []


class TestExport:
    """Tests for audit log export."""

    def test_json_export_summary(self, audit_logger, recorded_run):
        data = json.loads(audit_logger.export_log(recorded_run, "json"))

        assert data["run_id"] == recorded_run
        assert data["event_count"] == 5
        assert data["summary"] == {
            "documents_scored": 2,
            "documents_skipped": 1,
            "average_score": 7.5,
            "min_score": 6.0,
            "max_score": 9.0,
        }
        assert data["events"][2]["event_type"] == "document_skipped"

    def test_csv_export(self, audit_logger, recorded_run):
        rows = list(csv.reader(io.StringIO(audit_logger.export_log(recorded_run, "csv"))))
        assert rows[0] == ["id", "event_type", "timestamp", "run_id", "path", "details"]
        assert len(rows) == 6
        assert rows[2][1] == "document_scored"
        assert json.loads(rows[2][5]) == {"score": 9.0, "grade": "A"}

    def test_unsupported_format(self, audit_logger):
        with pytest.raises(ValueError, match="Unsupported export format"):
            audit_logger.export_log("r1", "xml")


class TestOwnership:
    """Tests for database manager lifecycle."""

    def test_injected_manager_not_closed(self):
        db_manager = MagicMock(spec=DatabaseManager)
        AuditLogger(db_manager=db_manager).close()
        db_manager.close.assert_not_called()

    def test_database_url_from_environment(self, monkeypatch):
        monkeypatch.setenv("SBOM_QUALITY_AUDIT_DB", "sqlite:///env.db")
        assert get_database_url() == "sqlite:///env.db"
        assert get_database_url("sqlite:///explicit.db") == "sqlite:///explicit.db"

    def test_database_created_on_first_use(self, tmp_path):
        db_file = tmp_path / "lazy.db"
        logger = AuditLogger(database_url=f"sqlite:///{db_file}")
        try:
            assert not db_file.exists()
            logger.log_event(new_event(AuditEventType.RUN_STARTED, run_id="r1"))
            assert db_file.exists()
        finally:
            logger.close()
