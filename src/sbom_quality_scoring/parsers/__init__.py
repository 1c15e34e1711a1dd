"""Manifest parsers for the SBOM Quality Scoring System."""

from .sbom_parser import SBOMParser, SUPPORTED_FORMATS, is_url, raw_github_url
from .cyclonedx_parser import CycloneDXParser
from .spdx_parser import SPDXParser, parse_actor, parse_tool
from .exceptions import (
    ParseError,
    DocumentCorruptedError,
    UnsupportedFormatError,
    DocumentFetchError,
    ErrorHandler,
)

__all__ = [
    "SBOMParser",
    "SUPPORTED_FORMATS",
    "is_url",
    "raw_github_url",
    "CycloneDXParser",
    "SPDXParser",
    "parse_actor",
    "parse_tool",
    "ParseError",
    "DocumentCorruptedError",
    "UnsupportedFormatError",
    "DocumentFetchError",
    "ErrorHandler",
]
