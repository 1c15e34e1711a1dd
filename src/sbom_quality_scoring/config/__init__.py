"""Configuration management for the SBOM Quality Scoring System."""

from .config_manager import ConfigurationManager
from .models import (
    CategoryEntry,
    ConfigurationError,
    FeatureEntry,
    LoadedConfig,
    ProfileEntry,
    ProfileFeatureEntry,
    ScoringConfig,
    SignatureBundle,
    ValidationResult,
)

__all__ = [
    "CategoryEntry",
    "ConfigurationError",
    "ConfigurationManager",
    "FeatureEntry",
    "LoadedConfig",
    "ProfileEntry",
    "ProfileFeatureEntry",
    "ScoringConfig",
    "SignatureBundle",
    "ValidationResult",
]
