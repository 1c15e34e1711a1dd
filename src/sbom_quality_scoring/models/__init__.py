"""Data models and enums for the SBOM Quality Scoring System."""

from .enums import (
    CompositionAggregate,
    CompositionScope,
    FileFormat,
    Grade,
    ScoringMode,
    SpecType,
)
from .document import (
    Checksum,
    Component,
    Composition,
    License,
    Party,
    Relationship,
    SBOMDocument,
    Signature,
    SpecInfo,
    Tool,
)
from .results import (
    CategoryResult,
    FeatureResult,
    FeatureScore,
    ProfileItemResult,
    ProfileResult,
    ScoreResult,
)

__all__ = [
    # Enums
    "CompositionAggregate",
    "CompositionScope",
    "FileFormat",
    "Grade",
    "ScoringMode",
    "SpecType",
    # Document models
    "Checksum",
    "Component",
    "Composition",
    "License",
    "Party",
    "Relationship",
    "SBOMDocument",
    "Signature",
    "SpecInfo",
    "Tool",
    # Result models
    "CategoryResult",
    "FeatureResult",
    "FeatureScore",
    "ProfileItemResult",
    "ProfileResult",
    "ScoreResult",
]
