"""Abstract interfaces for the SBOM Quality Scoring System."""

from .audit import AuditEvent, AuditEventType, IAuditLogger
from .evaluator import IFeatureEvaluator
from .parser import ISBOMParser

__all__ = [
    "AuditEvent",
    "AuditEventType",
    "IAuditLogger",
    "IFeatureEvaluator",
    "ISBOMParser",
]
