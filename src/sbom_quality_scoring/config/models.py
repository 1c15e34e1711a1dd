"""Data models for configuration management."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..models.enums import ScoringMode


@dataclass
class ValidationResult:
    """Result of configuration validation."""
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        """Add an error message."""
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str) -> None:
        """Add a warning message."""
        self.warnings.append(message)

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        """Merge another validation result into this one."""
        return ValidationResult(
            is_valid=self.is_valid and other.is_valid,
            errors=self.errors + other.errors,
            warnings=self.warnings + other.warnings
        )


class ConfigurationError(Exception):
    """Exception raised for configuration errors."""

    def __init__(self, message: str, validation_result: Optional[ValidationResult] = None):
        super().__init__(message)
        self.message = message
        self.validation_result = validation_result


@dataclass
class SignatureBundle:
    """
    Detached signature material supplied alongside a manifest.

    Values are paths or inline content; they are only checked for presence.
    """
    sig_value: str = ""
    public_key: str = ""
    blob: str = ""

    def is_empty(self) -> bool:
        return not (self.sig_value.strip() or self.public_key.strip() or self.blob.strip())


@dataclass
class ScoringConfig:
    """
    Options of one scoring run.

    ``categories``/``features`` select comprehensive scoring, ``profiles``
    selects compliance scoring. Leaving all three empty scores every
    non-informational category, unless ``scoring_mode`` asks for profiles,
    in which case the default profiles are scored.
    """
    categories: List[str] = field(default_factory=list)
    features: List[str] = field(default_factory=list)
    profiles: List[str] = field(default_factory=list)
    config_file: Optional[str] = None
    signature_bundle: SignatureBundle = field(default_factory=SignatureBundle)
    recursive: bool = False
    fetch_timeout: float = 30.0
    enable_audit_logging: bool = False
    database_url: Optional[str] = None
    scoring_mode: Optional[ScoringMode] = None

    @property
    def mode(self) -> ScoringMode:
        """Explicit ``scoring_mode`` if set, else inferred from the selection."""
        if self.scoring_mode is not None:
            return self.scoring_mode
        if self.profiles:
            return ScoringMode.PROFILES
        return ScoringMode.COMPREHENSIVE


# =========================================================================
# Config-file entries
# =========================================================================

@dataclass
class FeatureEntry:
    """Feature row of a comprehensive config file."""
    name: str
    key: str
    weight: float
    ignore: bool = False


@dataclass
class CategoryEntry:
    """Category row of a comprehensive config file."""
    name: str
    key: str
    weight: float
    description: str = ""
    features: List[FeatureEntry] = field(default_factory=list)


@dataclass
class ProfileFeatureEntry:
    """Feature row of a profiles config file."""
    name: str
    key: str
    required: bool = True
    description: str = ""


@dataclass
class ProfileEntry:
    """Profile row of a profiles config file."""
    name: str
    key: str
    description: str = ""
    features: List[ProfileFeatureEntry] = field(default_factory=list)


@dataclass
class LoadedConfig:
    """
    Parsed config file.

    Exactly one of ``categories`` or ``profiles`` is filled, according to
    ``mode``.
    """
    mode: ScoringMode
    categories: List[CategoryEntry] = field(default_factory=list)
    profiles: List[ProfileEntry] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
