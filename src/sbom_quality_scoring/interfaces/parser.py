"""Manifest parser interface for the SBOM Quality Scoring System."""

from abc import ABC, abstractmethod
from typing import Any, Dict

from ..models.document import SBOMDocument


class ISBOMParser(ABC):
    """
    Abstract interface for manifest parsing.

    Implementations turn raw manifest content into an SBOMDocument.
    """

    @abstractmethod
    def can_parse(self, data: Dict[str, Any]) -> bool:
        """
        Check whether the decoded content belongs to this parser's format.

        Args:
            data: Decoded JSON/YAML mapping.

        Returns:
            True if this parser understands the content.
        """
        pass

    @abstractmethod
    def parse_data(self, data: Dict[str, Any], file_format: str) -> SBOMDocument:
        """
        Build a document from decoded content.

        Args:
            data: Decoded JSON/YAML mapping.
            file_format: Serialization the content was read from ("json", "yaml").

        Returns:
            SBOMDocument exposing the manifest's query surface.

        Raises:
            ParseError: If the content is structurally unusable.
        """
        pass
