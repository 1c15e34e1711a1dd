"""Manifest document models for the SBOM Quality Scoring System.

These dataclasses are the narrow query surface the scoring core reads.
Parsers populate them; evaluators only ever read them.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .enums import CompositionAggregate, CompositionScope, SpecType


@dataclass(frozen=True)
class License:
    """
    A single license resolved from a license expression.

    ``source`` is ``"spdx"``, ``"aboutcode"`` or ``"custom"`` and tells
    whether the identifier was found in a known license list.
    """
    short_id: str
    name: str
    source: str = "custom"
    deprecated: bool = False
    restrictive: bool = False


@dataclass(frozen=True)
class Checksum:
    """Hash of a component artifact."""
    algorithm: str
    content: str


@dataclass
class Party:
    """
    A person, organization or tool named in a manifest.

    Used for document authors, the document supplier/manufacturer and
    component suppliers/manufacturers.
    """
    name: str = ""
    email: str = ""
    url: str = ""
    phone: str = ""
    kind: str = ""  # "person", "organization", "tool"
    contacts: List["Party"] = field(default_factory=list)

    def has_identity(self) -> bool:
        """Whether any of name, e-mail or URL is filled in."""
        return any(v.strip() for v in (self.name, self.email, self.url))

    def has_contact(self) -> bool:
        return bool(self.email.strip() or self.url.strip() or self.contacts)


@dataclass
class Tool:
    """Tool that generated the manifest."""
    name: str = ""
    version: str = ""


@dataclass
class Signature:
    """Signature material attached to (or supplied alongside) a manifest."""
    algorithm: str = ""
    value: str = ""
    public_key: str = ""
    certificate_path: List[str] = field(default_factory=list)
    blob: str = ""


@dataclass
class Composition:
    """
    Completeness declaration.

    CycloneDX ``compositions`` entries map onto this directly.
    """
    scope: CompositionScope = CompositionScope.UNKNOWN
    aggregate: CompositionAggregate = CompositionAggregate.NOT_SPECIFIED
    dependencies: List[str] = field(default_factory=list)
    assemblies: List[str] = field(default_factory=list)

    def is_sbom_complete(self) -> bool:
        return (
            self.scope == CompositionScope.GLOBAL
            and self.aggregate == CompositionAggregate.COMPLETE
        )


@dataclass(frozen=True)
class Relationship:
    """Directed relationship between two elements (e.g. DEPENDS_ON)."""
    source_id: str
    target_id: str
    type: str = "DEPENDS_ON"


@dataclass
class Component:
    """
    A package/component listed in a manifest.

    ``dependencies`` holds the ids of components this one depends on, as
    resolved by the parser from CycloneDX dependencies or SPDX relationships.
    """
    id: str
    name: str = ""
    version: str = ""
    purls: List[str] = field(default_factory=list)
    cpes: List[str] = field(default_factory=list)
    concluded_licenses: List[License] = field(default_factory=list)
    declared_licenses: List[License] = field(default_factory=list)
    checksums: List[Checksum] = field(default_factory=list)
    primary_purpose: str = ""
    supplier: Optional[Party] = None
    manufacturer: Optional[Party] = None
    source_code_url: str = ""
    download_url: str = ""
    source_code_hash: str = ""
    dependencies: List[str] = field(default_factory=list)
    spdx_id: str = ""
    file_analyzed: bool = False
    copyright: str = ""
    is_primary: bool = False

    @property
    def licenses(self) -> List[License]:
        """Concluded licenses, falling back to declared ones."""
        return self.concluded_licenses or self.declared_licenses

    def has_dependencies(self) -> bool:
        return len(self.dependencies) > 0


@dataclass
class SpecInfo:
    """Document-level specification metadata."""
    spec_type: SpecType = SpecType.UNKNOWN
    version: str = ""
    file_format: str = ""
    name: str = ""
    namespace: str = ""
    uri: str = ""
    creation_timestamp: str = ""
    licenses: List[License] = field(default_factory=list)
    organization: str = ""
    comment: str = ""
    spdx_id: str = ""
    external_refs: List[str] = field(default_factory=list)

    @property
    def spec_name(self) -> str:
        return self.spec_type.value


@dataclass
class SBOMDocument:
    """
    Parsed manifest.

    Represents everything the evaluators may query about one document:
    spec metadata, components, authorship and completeness declarations.
    """
    spec: SpecInfo
    components: List[Component] = field(default_factory=list)
    authors: List[Party] = field(default_factory=list)
    tools: List[Tool] = field(default_factory=list)
    lifecycles: List[str] = field(default_factory=list)
    supplier: Optional[Party] = None
    manufacturer: Optional[Party] = None
    compositions: List[Composition] = field(default_factory=list)
    relationships: List[Relationship] = field(default_factory=list)
    vulnerabilities: List[str] = field(default_factory=list)
    signature: Optional[Signature] = None
    schema_valid: bool = False

    @property
    def primary_component(self) -> Optional[Component]:
        for comp in self.components:
            if comp.is_primary:
                return comp
        return None

    def direct_dependencies(self, component_id: str, rel_type: str = "DEPENDS_ON") -> List[str]:
        """Ids of elements the given component directly relates to."""
        return [
            rel.target_id
            for rel in self.relationships
            if rel.source_id == component_id and rel.type.upper() == rel_type.upper()
        ]

    def is_spdx(self) -> bool:
        return self.spec.spec_type == SpecType.SPDX

    def is_cyclonedx(self) -> bool:
        return self.spec.spec_type == SpecType.CYCLONEDX
