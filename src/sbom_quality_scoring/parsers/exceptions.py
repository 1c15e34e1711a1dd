"""Custom exceptions for manifest parsing."""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class ParseError(Exception):
    """
    Base exception for manifest parsing errors.

    Provides detailed error information including file path, location,
    and additional context for debugging and user feedback.

    Attributes:
        message: Human-readable error description.
        file_path: Path or URL of the manifest that caused the error.
        location: Specific location within the manifest (JSON path, line).
        details: Additional error details.
    """
    message: str
    file_path: Optional[str] = None
    location: Optional[str] = None
    details: Optional[dict] = field(default_factory=dict)

    def __post_init__(self):
        if self.details is None:
            self.details = {}
        super().__init__(str(self))

    def __str__(self) -> str:
        parts = [self.message]
        if self.file_path:
            parts.append(f"File: {self.file_path}")
        if self.location:
            parts.append(f"Location: {self.location}")
        return " | ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "file_path": self.file_path,
            "location": self.location,
            "details": self.details,
        }


@dataclass
class DocumentCorruptedError(ParseError):
    """
    Exception raised when a manifest cannot be decoded.

    The file exists but is not valid JSON or YAML, or its structure is
    unusable (e.g. ``components`` is not a list).
    """


@dataclass
class UnsupportedFormatError(ParseError):
    """
    Exception raised when a manifest format is not supported.

    Covers content that is neither CycloneDX nor SPDX as well as
    serializations this package does not read (XML, tag-value, RDF).
    """

    def get_supported_formats(self) -> list[str]:
        """Return list of supported formats."""
        return self.details.get("supported_formats", ["cyclonedx-json", "spdx-json", "spdx-yaml"])


@dataclass
class DocumentFetchError(ParseError):
    """
    Exception raised when a manifest cannot be read or downloaded.

    ``details`` carries the HTTP status code for failed downloads.
    """


class ErrorHandler:
    """
    Utility class for collecting per-document errors of a scoring batch.

    Errors are recorded while the batch continues, so one bad manifest
    never aborts the run.
    """

    def __init__(self, source: str):
        self.source = source
        self.errors: list[ParseError] = []
        self.warnings: list[str] = []

    def add_error(self, error: ParseError) -> None:
        """Add an error to the collection."""
        self.errors.append(error)

    def add_warning(self, message: str, location: Optional[str] = None) -> None:
        """Add a warning message."""
        warning = f"{message}"
        if location:
            warning += f" (at {location})"
        self.warnings.append(warning)

    def has_errors(self) -> bool:
        """Check if any errors were recorded."""
        return len(self.errors) > 0

    def get_summary(self) -> dict[str, Any]:
        """Get a summary of all errors and warnings."""
        return {
            "source": self.source,
            "error_count": len(self.errors),
            "warning_count": len(self.warnings),
            "errors": [e.to_dict() for e in self.errors],
            "warnings": self.warnings,
        }
