"""Audit trail contract for scoring runs."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional


class AuditEventType(Enum):
    """Milestones of a scoring run."""
    RUN_STARTED = "run_started"
    DOCUMENT_SCORED = "document_scored"
    DOCUMENT_SKIPPED = "document_skipped"
    RUN_COMPLETED = "run_completed"
    RUN_FAILED = "run_failed"


@dataclass
class AuditEvent:
    """
    One milestone of a scoring run.

    ``path`` is set for per-document events; ``details`` carries the
    score, grade or failure reason as plain JSON values.
    """
    id: str
    event_type: AuditEventType
    timestamp: datetime
    run_id: Optional[str] = None
    path: Optional[str] = None
    details: dict = field(default_factory=dict)

    def __post_init__(self):
        if self.details is None:
            self.details = {}


class IAuditLogger(ABC):
    """Sink the engine reports run milestones to."""

    @abstractmethod
    def log_event(self, event: AuditEvent) -> None:
        pass

    @abstractmethod
    def get_events(
        self,
        run_id: Optional[str] = None,
        event_type: Optional[AuditEventType] = None,
        start_time: Optional[datetime] = None,
        end_time: Optional[datetime] = None,
    ) -> List[AuditEvent]:
        """
        Events matching every given filter, oldest first.

        Time bounds are inclusive.
        """
        pass

    @abstractmethod
    def export_log(self, run_id: str, format: str = "json") -> str:
        """
        Serialize one run's events with a per-run score summary.

        Args:
            run_id: Run to export.
            format: "json" or "csv".

        Raises:
            ValueError: If the format is not supported.
        """
        pass
