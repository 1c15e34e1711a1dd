"""Enumerations for the SBOM Quality Scoring System."""

from enum import Enum


class SpecType(Enum):
    """Manifest specifications understood by the scorer."""
    SPDX = "spdx"
    CYCLONEDX = "cyclonedx"
    UNKNOWN = ""


class FileFormat(Enum):
    """Serialization formats a manifest may be written in."""
    JSON = "json"
    YAML = "yaml"
    XML = "xml"
    RDF = "rdf"
    TAG_VALUE = "tag-value"
    UNKNOWN = ""


class ScoringMode(Enum):
    """Which aggregation a scoring run produces."""
    COMPREHENSIVE = "comprehensive"
    PROFILES = "profiles"


class Grade(Enum):
    """Letter grades derived from the overall score."""
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"


class CompositionScope(Enum):
    """What a composition (completeness) declaration applies to."""
    GLOBAL = "global"
    DEPENDENCIES = "dependencies"
    ASSEMBLIES = "assemblies"
    UNKNOWN = "unknown"


class CompositionAggregate(Enum):
    """Completeness state declared by a composition."""
    COMPLETE = "complete"
    INCOMPLETE = "incomplete"
    UNKNOWN = "unknown"
    NOT_SPECIFIED = "not_specified"


SUPPORTED_SPECS = [SpecType.SPDX.value, SpecType.CYCLONEDX.value]

SUPPORTED_SPEC_VERSIONS = {
    SpecType.SPDX.value: ["SPDX-2.1", "SPDX-2.2", "SPDX-2.3"],
    SpecType.CYCLONEDX.value: ["1.0", "1.1", "1.2", "1.3", "1.4", "1.5", "1.6"],
}

SUPPORTED_FILE_FORMATS = {
    SpecType.SPDX.value: ["json", "yaml", "rdf", "tag-value"],
    SpecType.CYCLONEDX.value: ["json", "xml"],
}

SUPPORTED_PRIMARY_PURPOSES = {
    SpecType.SPDX.value: [
        "application", "framework", "library", "container", "operating-system",
        "device", "firmware", "source", "archive", "file", "install", "other",
    ],
    SpecType.CYCLONEDX.value: [
        "application", "framework", "library", "container", "platform",
        "operating-system", "device", "device-driver", "firmware", "file",
        "machine-learning-model", "data", "cryptographic-asset",
    ],
}

CYCLONEDX_LIFECYCLE_PHASES = [
    "design", "pre-build", "build", "post-build", "operations", "discovery", "decommission",
]
