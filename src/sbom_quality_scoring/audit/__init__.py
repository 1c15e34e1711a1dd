"""Audit module for the SBOM Quality Scoring System."""

from .audit_logger import AuditLogger, new_event
from .database import DEFAULT_DATABASE_URL, DatabaseManager, get_database_url
from .models import AuditEventModel, Base

__all__ = [
    "AuditLogger",
    "new_event",
    "DatabaseManager",
    "DEFAULT_DATABASE_URL",
    "get_database_url",
    "AuditEventModel",
    "Base",
]
