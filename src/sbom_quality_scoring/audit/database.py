"""Storage for the scoring audit trail."""

import logging
import os
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .models import Base

logger = logging.getLogger(__name__)

AUDIT_DB_ENV = "SBOM_QUALITY_AUDIT_DB"
DEFAULT_DATABASE_URL = "sqlite:///sbom_quality_audit.db"


def get_database_url(database_url: Optional[str] = None) -> str:
    """Explicit URL, else $SBOM_QUALITY_AUDIT_DB, else a SQLite file in the cwd."""
    return database_url or os.environ.get(AUDIT_DB_ENV, DEFAULT_DATABASE_URL)


class DatabaseManager:
    """
    Owns the SQLAlchemy engine behind one audit trail.

    The engine is created lazily so that building an AuditLogger never
    touches the database; the first recorded or queried event does.
    """

    def __init__(self, database_url: Optional[str] = None):
        self._database_url = get_database_url(database_url)
        self._engine: Optional[Engine] = None
        self._sessions: Optional[sessionmaker] = None

    @property
    def database_url(self) -> str:
        return self._database_url

    def _get_engine(self) -> Engine:
        if self._engine is None:
            options = {} if self._database_url.startswith("sqlite") else {"pool_pre_ping": True}
            self._engine = create_engine(self._database_url, **options)
            self._sessions = sessionmaker(bind=self._engine, expire_on_commit=False)
        return self._engine

    @contextmanager
    def get_session(self) -> Iterator[Session]:
        """
        Open a session for one unit of audit work.

        Commits when the block exits normally; rolls back and re-raises
        otherwise.
        """
        self._get_engine()
        session = self._sessions()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def init_database(self) -> None:
        """Create the audit table and its indexes if missing."""
        Base.metadata.create_all(self._get_engine())
        logger.debug(f"Audit schema ready at {self._database_url}")

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._sessions = None
