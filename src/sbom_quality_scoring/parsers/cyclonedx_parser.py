"""CycloneDX JSON/YAML manifest parser."""

import json
import logging
from typing import Any, Dict, List, Optional

from ..interfaces.parser import ISBOMParser
from ..licenses import custom_license, lookup_expression, lookup_license
from ..models.document import (
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
from ..models.enums import (
    SUPPORTED_SPEC_VERSIONS,
    CompositionAggregate,
    CompositionScope,
    SpecType,
)
from .exceptions import DocumentCorruptedError

logger = logging.getLogger(__name__)

_AGGREGATES = {
    "complete": CompositionAggregate.COMPLETE,
    "incomplete": CompositionAggregate.INCOMPLETE,
    "incomplete_first_party_only": CompositionAggregate.INCOMPLETE,
    "incomplete_first_party_proprietary_only": CompositionAggregate.INCOMPLETE,
    "incomplete_first_party_opensource_only": CompositionAggregate.INCOMPLETE,
    "incomplete_third_party_only": CompositionAggregate.INCOMPLETE,
    "incomplete_third_party_proprietary_only": CompositionAggregate.INCOMPLETE,
    "incomplete_third_party_opensource_only": CompositionAggregate.INCOMPLETE,
    "unknown": CompositionAggregate.UNKNOWN,
    "not_specified": CompositionAggregate.NOT_SPECIFIED,
}

_SOURCE_REF_TYPES = {"vcs", "source-distribution"}
_DOWNLOAD_REF_TYPES = {"distribution", "distribution-intake"}


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


class CycloneDXParser(ISBOMParser):
    """
    Parser for CycloneDX documents decoded from JSON or YAML.

    Handles the 1.0 to 1.6 layouts, including the 1.5 ``tools`` object and
    the 1.6 ``manufacturer`` and license ``acknowledgement`` fields.
    """

    def can_parse(self, data: Dict[str, Any]) -> bool:
        return _str(data.get("bomFormat")).lower() == "cyclonedx"

    def parse_data(self, data: Dict[str, Any], file_format: str) -> SBOMDocument:
        """
        Build a document from decoded CycloneDX content.

        Args:
            data: Decoded JSON/YAML mapping.
            file_format: Serialization the content was read from.

        Returns:
            SBOMDocument with metadata.component marked as primary.

        Raises:
            DocumentCorruptedError: If a top-level section has the wrong type.
        """
        for section in ("components", "dependencies", "compositions", "vulnerabilities"):
            if section in data and not isinstance(data[section], list):
                raise DocumentCorruptedError(
                    message=f"'{section}' must be a list",
                    location=section,
                )

        metadata = _dict(data.get("metadata"))
        doc = SBOMDocument(spec=self._parse_spec(data, metadata, file_format))

        primary = metadata.get("component")
        if isinstance(primary, dict):
            comp = self._parse_component(primary)
            comp.is_primary = True
            doc.components.append(comp)
        for raw in _list(data.get("components")):
            self._collect_components(raw, doc.components)

        doc.authors = [self._parse_party(a, "person") for a in _list(metadata.get("authors"))]
        doc.tools = self._parse_tools(metadata.get("tools"))
        doc.lifecycles = [
            _str(lc.get("phase")) or _str(lc.get("name"))
            for lc in _list(metadata.get("lifecycles")) if isinstance(lc, dict)
        ]
        if isinstance(metadata.get("supplier"), dict):
            doc.supplier = self._parse_party(metadata["supplier"], "organization")
        manufacturer = metadata.get("manufacturer") or metadata.get("manufacture")
        if isinstance(manufacturer, dict):
            doc.manufacturer = self._parse_party(manufacturer, "organization")

        doc.compositions = [
            self._parse_composition(c) for c in _list(data.get("compositions")) if isinstance(c, dict)
        ]
        doc.vulnerabilities = [
            _str(v.get("id")) for v in _list(data.get("vulnerabilities"))
            if isinstance(v, dict) and _str(v.get("id"))
        ]
        doc.signature = self._parse_signature(data.get("signature"))
        self._apply_dependencies(data, doc)
        doc.schema_valid = self._is_schema_valid(data, doc)

        logger.debug(
            f"Parsed CycloneDX {doc.spec.version}: {len(doc.components)} components, "
            f"{len(doc.relationships)} dependency edges"
        )
        return doc

    # =========================================================================
    # Document sections
    # =========================================================================

    def _parse_spec(self, data: Dict[str, Any], metadata: Dict[str, Any], file_format: str) -> SpecInfo:
        serial = _str(data.get("serialNumber"))
        version = data.get("version")
        uri = f"{serial}/{version}" if serial and version is not None else serial

        external_refs = [
            _str(ref.get("url")) for ref in _list(data.get("externalReferences"))
            if isinstance(ref, dict) and _str(ref.get("type")) == "bom" and _str(ref.get("url"))
        ]
        primary = _dict(metadata.get("component"))
        return SpecInfo(
            spec_type=SpecType.CYCLONEDX,
            version=_str(data.get("specVersion")),
            file_format=file_format,
            name=_str(primary.get("name")),
            namespace=serial,
            uri=uri,
            creation_timestamp=_str(metadata.get("timestamp")),
            licenses=self._parse_licenses(metadata.get("licenses"))[0],
            organization=_str(_dict(metadata.get("supplier")).get("name")),
            external_refs=external_refs,
        )

    def _parse_tools(self, raw: Any) -> List[Tool]:
        # Up to 1.4 a list of tools; from 1.5 an object of components/services.
        if isinstance(raw, dict):
            entries = _list(raw.get("components")) + _list(raw.get("services"))
        else:
            entries = _list(raw)
        return [
            Tool(name=_str(t.get("name")), version=_str(t.get("version")))
            for t in entries if isinstance(t, dict)
        ]

    def _parse_party(self, raw: Dict[str, Any], kind: str) -> Party:
        urls = raw.get("url")
        url = _str(urls[0]) if isinstance(urls, list) and urls else _str(urls)
        return Party(
            name=_str(raw.get("name")),
            email=_str(raw.get("email")),
            url=url,
            phone=_str(raw.get("phone")),
            kind=kind,
            contacts=[
                self._parse_party(c, "person") for c in _list(raw.get("contact")) if isinstance(c, dict)
            ],
        )

    def _parse_composition(self, raw: Dict[str, Any]) -> Composition:
        dependencies = [_str(d) for d in _list(raw.get("dependencies")) if _str(d)]
        assemblies = [_str(a) for a in _list(raw.get("assemblies")) if _str(a)]
        if dependencies:
            scope = CompositionScope.DEPENDENCIES
        elif assemblies:
            scope = CompositionScope.ASSEMBLIES
        else:
            scope = CompositionScope.GLOBAL
        return Composition(
            scope=scope,
            aggregate=_AGGREGATES.get(_str(raw.get("aggregate")).lower(), CompositionAggregate.UNKNOWN),
            dependencies=dependencies,
            assemblies=assemblies,
        )

    def _parse_signature(self, raw: Any) -> Optional[Signature]:
        if not isinstance(raw, dict):
            return None
        public_key = raw.get("publicKey")
        if isinstance(public_key, dict):
            public_key = json.dumps(public_key, sort_keys=True)
        return Signature(
            algorithm=_str(raw.get("algorithm")),
            value=_str(raw.get("value")),
            public_key=_str(public_key),
            certificate_path=[_str(c) for c in _list(raw.get("certificatePath")) if _str(c)],
        )

    def _apply_dependencies(self, data: Dict[str, Any], doc: SBOMDocument) -> None:
        by_id = {c.id: c for c in doc.components if c.id}
        for entry in _list(data.get("dependencies")):
            if not isinstance(entry, dict):
                continue
            ref = _str(entry.get("ref"))
            targets = [_str(t) for t in _list(entry.get("dependsOn")) if _str(t)]
            for target in targets:
                doc.relationships.append(Relationship(source_id=ref, target_id=target))
            if ref in by_id:
                by_id[ref].dependencies.extend(t for t in targets if t not in by_id[ref].dependencies)

    def _is_schema_valid(self, data: Dict[str, Any], doc: SBOMDocument) -> bool:
        """Structural checks standing in for full JSON-schema validation."""
        if doc.spec.version not in SUPPORTED_SPEC_VERSIONS[SpecType.CYCLONEDX.value]:
            return False
        for raw in _list(data.get("components")):
            if not isinstance(raw, dict) or not _str(raw.get("name")) or not _str(raw.get("type")):
                return False
        return True

    # =========================================================================
    # Components
    # =========================================================================

    def _collect_components(self, raw: Any, out: List[Component]) -> None:
        if not isinstance(raw, dict):
            return
        out.append(self._parse_component(raw))
        for child in _list(raw.get("components")):
            self._collect_components(child, out)

    def _parse_component(self, raw: Dict[str, Any]) -> Component:
        concluded, declared = self._parse_licenses(raw.get("licenses"))
        comp = Component(
            id=_str(raw.get("bom-ref")),
            name=_str(raw.get("name")),
            version=_str(raw.get("version")),
            purls=[_str(raw.get("purl"))] if _str(raw.get("purl")) else [],
            cpes=[_str(raw.get("cpe"))] if _str(raw.get("cpe")) else [],
            concluded_licenses=concluded,
            declared_licenses=declared,
            checksums=[
                Checksum(algorithm=_str(h.get("alg")), content=_str(h.get("content")))
                for h in _list(raw.get("hashes")) if isinstance(h, dict)
            ],
            primary_purpose=_str(raw.get("type")),
            copyright=_str(raw.get("copyright")),
        )
        if isinstance(raw.get("supplier"), dict):
            comp.supplier = self._parse_party(raw["supplier"], "organization")
        if isinstance(raw.get("manufacturer"), dict):
            comp.manufacturer = self._parse_party(raw["manufacturer"], "organization")

        for ref in _list(raw.get("externalReferences")):
            if not isinstance(ref, dict):
                continue
            ref_type = _str(ref.get("type")).lower()
            url = _str(ref.get("url"))
            if ref_type in _SOURCE_REF_TYPES and not comp.source_code_url:
                comp.source_code_url = url
            elif ref_type in _DOWNLOAD_REF_TYPES and not comp.download_url:
                comp.download_url = url
        return comp

    def _parse_licenses(self, raw: Any):
        """
        Split a CycloneDX license list into (concluded, declared).

        Entries without an acknowledgement count as both.
        """
        concluded: List[License] = []
        declared: List[License] = []
        for entry in _list(raw):
            if not isinstance(entry, dict):
                continue
            if "expression" in entry:
                found = lookup_expression(_str(entry.get("expression")))
                ack = _str(entry.get("acknowledgement"))
            else:
                lic = _dict(entry.get("license"))
                ack = _str(lic.get("acknowledgement"))
                found = self._single_license(lic)
            if ack != "declared":
                concluded.extend(found)
            if ack != "concluded":
                declared.extend(found)
        return concluded, declared

    @staticmethod
    def _single_license(lic: Dict[str, Any]) -> List[License]:
        lic_id = _str(lic.get("id"))
        if lic_id:
            return [lookup_license(lic_id) or custom_license(lic_id)]
        name = _str(lic.get("name"))
        if name:
            return [lookup_license(name) or custom_license(name)]
        return []
