"""SPDX 2.x JSON/YAML document parser."""

import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from ..interfaces.parser import ISBOMParser
from ..licenses import custom_license, lookup_expression
from ..models.document import (
    Checksum,
    Component,
    License,
    Party,
    Relationship,
    SBOMDocument,
    SpecInfo,
    Tool,
)
from ..models.enums import SUPPORTED_SPEC_VERSIONS, SpecType
from .exceptions import DocumentCorruptedError

logger = logging.getLogger(__name__)

DOCUMENT_ID = "SPDXRef-DOCUMENT"

# "Person: Jane Doe (jane@example.com)" -> ("Person", "Jane Doe", "jane@example.com")
_ACTOR = re.compile(r"^\s*(Person|Organization|Tool)\s*:\s*(.*?)\s*(?:\((.*)\))?\s*$", re.IGNORECASE)

_REQUIRED_FIELDS = ("spdxVersion", "dataLicense", "SPDXID", "name", "documentNamespace")


def _str(value: Any) -> str:
    if isinstance(value, bool):
        return ""
    if isinstance(value, (int, float)):
        return str(value)
    return value.strip() if isinstance(value, str) else ""


def _list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def parse_actor(value: str) -> Optional[Tuple[str, str, str]]:
    """
    Split an SPDX actor string into (kind, name, email).

    Returns None for NOASSERTION and strings without a known actor prefix.
    """
    match = _ACTOR.match(value or "")
    if not match:
        return None
    kind, name, email = match.groups()
    return kind.lower(), name, (email or "").strip()


def parse_tool(name: str) -> Tool:
    """``syft-0.80.0`` -> Tool("syft", "0.80.0"); no version when nothing follows a dash."""
    name = name.strip()
    head, sep, tail = name.rpartition("-")
    if sep and head and tail[:1].isdigit():
        return Tool(name=head, version=tail)
    return Tool(name=name)


class SPDXParser(ISBOMParser):
    """
    Parser for SPDX 2.1 to 2.3 documents decoded from JSON or YAML.

    Packages become components; DEPENDS_ON/DEPENDENCY_OF relationships
    become component dependencies and DESCRIBES marks the primary package.
    """

    def can_parse(self, data: Dict[str, Any]) -> bool:
        return _str(data.get("spdxVersion")).upper().startswith("SPDX-")

    def parse_data(self, data: Dict[str, Any], file_format: str) -> SBOMDocument:
        """
        Build a document from decoded SPDX content.

        Args:
            data: Decoded JSON/YAML mapping.
            file_format: Serialization the content was read from.

        Returns:
            SBOMDocument with one component per package.

        Raises:
            DocumentCorruptedError: If a top-level section has the wrong type.
        """
        for section in ("packages", "relationships", "hasExtractedLicensingInfos"):
            if section in data and not isinstance(data[section], list):
                raise DocumentCorruptedError(
                    message=f"'{section}' must be a list",
                    location=section,
                )

        extracted = [
            custom_license(_str(info.get("licenseId")), _str(info.get("name")) or None)
            for info in _list(data.get("hasExtractedLicensingInfos"))
            if isinstance(info, dict) and _str(info.get("licenseId"))
        ]
        creation = _dict(data.get("creationInfo"))
        doc = SBOMDocument(spec=self._parse_spec(data, creation, file_format, extracted))

        for creator in _list(creation.get("creators")):
            self._add_creator(_str(creator), doc)

        doc.components = [
            self._parse_package(pkg, extracted) for pkg in _list(data.get("packages")) if isinstance(pkg, dict)
        ]
        self._apply_relationships(data, doc)
        doc.schema_valid = self._is_schema_valid(data, creation)

        logger.debug(
            f"Parsed {doc.spec.version}: {len(doc.components)} packages, "
            f"{len(doc.relationships)} relationships"
        )
        return doc

    def _parse_spec(
        self,
        data: Dict[str, Any],
        creation: Dict[str, Any],
        file_format: str,
        extracted: List[License],
    ) -> SpecInfo:
        namespace = _str(data.get("documentNamespace"))
        return SpecInfo(
            spec_type=SpecType.SPDX,
            version=_str(data.get("spdxVersion")),
            file_format=file_format,
            name=_str(data.get("name")),
            namespace=namespace,
            uri=namespace,
            creation_timestamp=_str(creation.get("created")),
            licenses=lookup_expression(_str(data.get("dataLicense")), extracted),
            comment=_str(creation.get("comment")) or _str(data.get("comment")),
            spdx_id=_str(data.get("SPDXID")),
            external_refs=[
                _str(ref.get("spdxDocument")) for ref in _list(data.get("externalDocumentRefs"))
                if isinstance(ref, dict) and _str(ref.get("spdxDocument"))
            ],
        )

    def _add_creator(self, creator: str, doc: SBOMDocument) -> None:
        actor = parse_actor(creator)
        if actor is None:
            return
        kind, name, email = actor
        if kind == "tool":
            doc.tools.append(parse_tool(name))
            return
        doc.authors.append(Party(name=name, email=email, kind=kind))
        if kind == "organization" and not doc.spec.organization:
            doc.spec.organization = name

    def _parse_party(self, value: Any) -> Optional[Party]:
        actor = parse_actor(_str(value))
        if actor is None:
            return None
        kind, name, email = actor
        return Party(name=name, email=email, kind=kind)

    def _parse_package(self, pkg: Dict[str, Any], extracted: List[License]) -> Component:
        spdx_id = _str(pkg.get("SPDXID"))
        comp = Component(
            id=spdx_id,
            spdx_id=spdx_id,
            name=_str(pkg.get("name")),
            version=_str(pkg.get("versionInfo")),
            concluded_licenses=lookup_expression(_str(pkg.get("licenseConcluded")), extracted),
            declared_licenses=lookup_expression(_str(pkg.get("licenseDeclared")), extracted),
            checksums=[
                Checksum(algorithm=_str(c.get("algorithm")), content=_str(c.get("checksumValue")))
                for c in _list(pkg.get("checksums")) if isinstance(c, dict)
            ],
            primary_purpose=_str(pkg.get("primaryPackagePurpose")).lower().replace("_", "-"),
            supplier=self._parse_party(pkg.get("supplier")),
            manufacturer=self._parse_party(pkg.get("originator")),
            download_url=_str(pkg.get("downloadLocation")),
            source_code_hash=_str(_dict(pkg.get("packageVerificationCode")).get("packageVerificationCodeValue")),
            # filesAnalyzed defaults to true in SPDX 2.x.
            file_analyzed=pkg.get("filesAnalyzed", True) is not False,
            copyright=_str(pkg.get("copyrightText")),
        )

        for ref in _list(pkg.get("externalRefs")):
            if not isinstance(ref, dict):
                continue
            ref_type = _str(ref.get("referenceType")).lower()
            locator = _str(ref.get("referenceLocator"))
            if not locator:
                continue
            if ref_type == "purl":
                comp.purls.append(locator)
            elif ref_type in ("cpe23type", "cpe22type"):
                comp.cpes.append(locator)
            elif ref_type == "vcs" and not comp.source_code_url:
                comp.source_code_url = locator
        return comp

    def _apply_relationships(self, data: Dict[str, Any], doc: SBOMDocument) -> None:
        by_id = {c.id: c for c in doc.components if c.id}
        described = {_str(d) for d in _list(data.get("documentDescribes")) if _str(d)}

        for rel in _list(data.get("relationships")):
            if not isinstance(rel, dict):
                continue
            source = _str(rel.get("spdxElementId"))
            target = _str(rel.get("relatedSpdxElement"))
            rel_type = _str(rel.get("relationshipType")).upper()
            if not source or not target:
                continue

            if rel_type == "DESCRIBES" and source == DOCUMENT_ID:
                described.add(target)
            elif rel_type == "DESCRIBED_BY" and target == DOCUMENT_ID:
                described.add(source)
            elif rel_type == "DEPENDENCY_OF":
                source, target = target, source
                rel_type = "DEPENDS_ON"

            doc.relationships.append(Relationship(source_id=source, target_id=target, type=rel_type))
            if rel_type == "DEPENDS_ON" and source in by_id and target not in by_id[source].dependencies:
                by_id[source].dependencies.append(target)

        for comp in doc.components:
            if comp.id in described:
                comp.is_primary = True
                break

    def _is_schema_valid(self, data: Dict[str, Any], creation: Dict[str, Any]) -> bool:
        """Structural checks standing in for full JSON-schema validation."""
        if any(not _str(data.get(name)) for name in _REQUIRED_FIELDS):
            return False
        if _str(data.get("spdxVersion")) not in SUPPORTED_SPEC_VERSIONS[SpecType.SPDX.value]:
            return False
        if not _str(creation.get("created")) or not _list(creation.get("creators")):
            return False
        for pkg in _list(data.get("packages")):
            if not isinstance(pkg, dict) or not _str(pkg.get("SPDXID")) or not _str(pkg.get("name")):
                return False
        return True
