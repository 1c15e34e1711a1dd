"""
SBOM Quality Scoring System

Scores SPDX and CycloneDX manifests for quality (weighted categories) and
regulatory compliance (NTIA, BSI, OpenChain Telco and Interlynk profiles).
"""

__version__ = "0.1.0"

# Export main components
from .models.enums import FileFormat, Grade, ScoringMode, SpecType
from .models.document import Component, SBOMDocument, SpecInfo
from .models.results import (
    CategoryResult,
    FeatureResult,
    FeatureScore,
    ProfileItemResult,
    ProfileResult,
    ScoreResult,
)
from .interfaces.audit import AuditEvent, AuditEventType, IAuditLogger
from .interfaces.evaluator import IFeatureEvaluator
from .catalog import Catalog, CatalogError, build_default_catalog
from .config import (
    ConfigurationError,
    ConfigurationManager,
    ScoringConfig,
    SignatureBundle,
    ValidationResult,
)
from .parsers import SBOMParser, ParseError
from .audit import AuditLogger, DatabaseManager
from .engine import (
    NoDocumentsScoredError,
    ScoringCancelledError,
    ScoringEngine,
    score_sbom,
)

__all__ = [
    "FileFormat",
    "Grade",
    "ScoringMode",
    "SpecType",
    "Component",
    "SBOMDocument",
    "SpecInfo",
    "CategoryResult",
    "FeatureResult",
    "FeatureScore",
    "ProfileItemResult",
    "ProfileResult",
    "ScoreResult",
    "AuditEvent",
    "AuditEventType",
    "IAuditLogger",
    "IFeatureEvaluator",
    "Catalog",
    "CatalogError",
    "build_default_catalog",
    "ConfigurationError",
    "ConfigurationManager",
    "ScoringConfig",
    "SignatureBundle",
    "ValidationResult",
    "SBOMParser",
    "ParseError",
    "AuditLogger",
    "DatabaseManager",
    "NoDocumentsScoredError",
    "ScoringCancelledError",
    "ScoringEngine",
    "score_sbom",
]
