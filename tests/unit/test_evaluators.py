"""Unit tests for the feature evaluators."""

import pytest

from sbom_quality_scoring import evaluators as ev
from sbom_quality_scoring.licenses import lookup_expression
from sbom_quality_scoring.models.document import (
    Checksum,
    Component,
    Composition,
    Party,
    Relationship,
    SBOMDocument,
    Signature,
    SpecInfo,
    Tool,
)
from sbom_quality_scoring.models.enums import CompositionAggregate, CompositionScope, SpecType


def cdx_doc(**kwargs):
    spec = kwargs.pop("spec", None) or SpecInfo(spec_type=SpecType.CYCLONEDX, version="1.5", file_format="json")
    return SBOMDocument(spec=spec, **kwargs)


def spdx_doc(**kwargs):
    spec = kwargs.pop("spec", None) or SpecInfo(spec_type=SpecType.SPDX, version="SPDX-2.3", file_format="json")
    return SBOMDocument(spec=spec, **kwargs)


class TestPerComponentEvaluators:
    """Tests for identification and other per-component rules."""

    def test_no_components_is_ignored(self):
        result = ev.CompWithName().evaluate(cdx_doc())
        assert result.ignore
        assert result.desc == "N/A (no components)"

    def test_share_of_versions(self):
        doc = cdx_doc(components=[
            Component(id="a", name="a", version="1.0"),
            Component(id="b", name="b", version=""),
            Component(id="c", name="c", version="2.0"),
            Component(id="d", name="d", version="  "),
        ])
        result = ev.CompWithVersion().evaluate(doc)
        assert result.score == 5.0
        assert result.desc == "2/4 have version"

    def test_unique_ids_accept_purl_or_cpe(self):
        doc = cdx_doc(components=[
            Component(id="a", purls=["pkg:npm/left-pad@1.3.0"]),
            Component(id="b", cpes=["cpe:2.3:a:vendor:product:1.0:*:*:*:*:*:*:*"]),
            Component(id="c", purls=["not-a-purl"]),
        ])
        result = ev.CompWithUniqueID().evaluate(doc)
        assert result.score == pytest.approx(10 * 2 / 3)

    def test_purpose_depends_on_spec(self):
        comps = [Component(id="a", primary_purpose="platform")]
        assert ev.CompWithPurpose().evaluate(cdx_doc(components=list(comps))).score == 10.0
        assert ev.CompWithPurpose().evaluate(spdx_doc(components=list(comps))).score == 0.0

    def test_supplier_needs_name_and_contact(self):
        doc = cdx_doc(components=[
            Component(id="a", supplier=Party(name="Acme", url="https://acme.example")),
            Component(id="b", supplier=Party(name="Acme")),
            Component(id="c"),
        ])
        assert ev.CompWithSupplier().evaluate(doc).desc == "1/3 have supplier"


class TestProvenance:
    """Tests for document provenance rules."""

    @pytest.mark.parametrize("timestamp,score", [
        ("2024-01-15T10:30:00Z", 10.0),
        ("2024-01-15T10:30:00.123456789+02:00", 10.0),
        ("2024-01-15 10:30:00", 0.0),
        ("2024-13-15T10:30:00Z", 0.0),
        ("", 0.0),
    ])
    def test_creation_timestamp(self, timestamp, score):
        doc = cdx_doc(spec=SpecInfo(spec_type=SpecType.CYCLONEDX, creation_timestamp=timestamp))
        assert ev.SBOMCreationTimestamp().evaluate(doc).score == score

    def test_tool_version(self):
        evaluator = ev.SBOMToolVersion()
        assert evaluator.evaluate(cdx_doc(tools=[Tool("syft", "1.0")])).score == 10.0

        partial = evaluator.evaluate(cdx_doc(tools=[Tool("syft", ""), Tool("trivy", "")]))
        assert partial.score == 5.0
        assert partial.desc == "add version to 2 tools"

        missing = evaluator.evaluate(cdx_doc())
        assert missing.score == 0.0
        assert missing.desc == "missing tool"

    def test_supplier_not_supported_by_spdx(self):
        result = ev.SBOMSupplier().evaluate(spdx_doc())
        assert result.score == 0.0
        assert not result.ignore
        assert result.desc == "N/A (SPDX)"

    def test_lifecycle(self):
        assert ev.SBOMLifecycle().evaluate(cdx_doc(lifecycles=["Build"])).desc == "build"
        assert ev.SBOMLifecycle().evaluate(cdx_doc(lifecycles=["shipping"])).score == 0.0
        assert ev.SBOMLifecycle().evaluate(cdx_doc()).desc == "missing lifecycle"


class TestIntegrity:
    """Tests for checksum and signature rules."""

    def test_strong_checksums_normalize_algorithm(self):
        doc = cdx_doc(components=[
            Component(id="a", checksums=[Checksum("sha-256", "abc")]),
            Component(id="b", checksums=[Checksum("SHA3-512", "abc")]),
            Component(id="c", checksums=[Checksum("MD5", "abc")]),
            Component(id="d", checksums=[Checksum("SHA256", "")]),
        ])
        assert ev.CompWithStrongChecksums().evaluate(doc).score == 5.0

    def test_weak_checksums_only_count_checksummed_components(self):
        doc = cdx_doc(components=[
            Component(id="a", checksums=[Checksum("SHA1", "abc"), Checksum("SHA256", "def")]),
            Component(id="b", checksums=[Checksum("MD5", "abc")]),
            Component(id="c"),
        ])
        result = ev.CompWithWeakChecksums().evaluate(doc)
        assert result.score == 5.0
        assert result.desc == "1/2 have strong checksums"

    def test_weak_checksums_without_any_checksum(self):
        result = ev.CompWithWeakChecksums().evaluate(cdx_doc(components=[Component(id="a")]))
        assert result.desc == "no checksums found"

    def test_bsi_hash_accepts_md5(self):
        doc = cdx_doc(components=[Component(id="a", checksums=[Checksum("MD5", "abc")])])
        assert ev.CompWithAnyChecksum().evaluate(doc).score == 10.0
        assert ev.CompWithSHA256Plus().evaluate(doc).score == 0.0

    @pytest.mark.parametrize("signature,score", [
        (None, 0.0),
        (Signature(algorithm="RS256"), 0.0),
        (Signature(algorithm="RS256", value="c2ln"), 5.0),
        (Signature(algorithm="RS256", value="c2ln", public_key="{}"), 10.0),
        (Signature(algorithm="RS256", value="c2ln", certificate_path=["cert.pem"]), 10.0),
    ])
    def test_signature(self, signature, score):
        assert ev.SBOMSignature().evaluate(cdx_doc(signature=signature)).score == score

    def test_signature_ignored_for_spdx(self):
        assert ev.SBOMSignature().evaluate(spdx_doc()).ignore


class TestCompleteness:
    """Tests for dependency and completeness rules."""

    def test_cyclonedx_dependencies_need_complete_composition(self):
        doc = cdx_doc(
            components=[
                Component(id="app", dependencies=["lib-a"]),
                Component(id="lib-a", dependencies=["lib-b"]),
                Component(id="lib-b"),
            ],
            compositions=[Composition(
                scope=CompositionScope.DEPENDENCIES,
                aggregate=CompositionAggregate.COMPLETE,
                dependencies=["app"],
            )],
        )
        result = ev.CompWithDependencies().evaluate(doc)
        assert result.score == 5.0
        assert result.desc == "1/2 have complete dependencies"

    def test_spdx_dependencies_share(self):
        doc = spdx_doc(components=[
            Component(id="a", dependencies=["b"]),
            Component(id="b"),
        ])
        assert ev.CompWithDependencies().evaluate(doc).score == 5.0

    def test_completeness_declared(self):
        doc = cdx_doc(compositions=[Composition(
            scope=CompositionScope.GLOBAL, aggregate=CompositionAggregate.COMPLETE,
        )])
        assert ev.SBOMCompletenessDeclared().evaluate(doc).score == 10.0
        assert ev.SBOMCompletenessDeclared().evaluate(cdx_doc()).desc == "missing completeness declaration"

    def test_primary_component(self):
        assert ev.SBOMPrimaryComponent().evaluate(cdx_doc()).desc == "add primary component"
        doc = cdx_doc(components=[Component(id="app", is_primary=True)])
        assert ev.SBOMPrimaryComponent().evaluate(doc).score == 10.0


class TestLicensing:
    """Tests for license rules."""

    def _doc(self, *expressions):
        return spdx_doc(components=[
            Component(id=f"c{i}", concluded_licenses=lookup_expression(expr))
            for i, expr in enumerate(expressions)
        ])

    def test_valid_licenses(self):
        doc = self._doc("MIT", "LicenseRef-internal", "Some Custom Text", "NOASSERTION")
        assert ev.CompWithLicenses().evaluate(doc).desc == "3/4 have licenses"
        assert ev.CompWithValidLicenses().evaluate(doc).desc == "2/4 have valid licenses"

    def test_deprecated_and_restrictive_score_the_clean_share(self):
        doc = self._doc("GPL-2.0", "MIT", "Apache-2.0", "LGPL-2.1-only")
        assert ev.CompWithoutDeprecatedLicenses().evaluate(doc).score == 7.5
        assert ev.CompWithoutRestrictiveLicenses().evaluate(doc).score == 5.0

    def test_data_license(self):
        ok = spdx_doc(spec=SpecInfo(spec_type=SpecType.SPDX, licenses=lookup_expression("CC0-1.0")))
        assert ev.SBOMDataLicense().evaluate(ok).score == 10.0
        assert ev.SBOMDataLicense().evaluate(spdx_doc()).ignore


class TestStructural:
    """Tests for spec, version and format rules."""

    def test_supported_spec_and_version(self):
        doc = spdx_doc()
        assert ev.SBOMSpecDeclared().evaluate(doc).desc == "spdx"
        assert ev.SBOMSpecVersion().evaluate(doc).score == 10.0
        assert ev.SBOMFileFormat().evaluate(doc).desc == "json"

    def test_unsupported_version(self):
        doc = cdx_doc(spec=SpecInfo(spec_type=SpecType.CYCLONEDX, version="2.0", file_format="json"))
        assert ev.SBOMSpecVersion().evaluate(doc).score == 0.0

    def test_missing_spec(self):
        assert ev.SBOMSpecDeclared().evaluate(SBOMDocument(spec=SpecInfo())).desc == "missing spec"

    def test_xml_not_supported_for_spdx(self):
        doc = spdx_doc(spec=SpecInfo(spec_type=SpecType.SPDX, version="SPDX-2.3", file_format="xml"))
        assert ev.SBOMFileFormat().evaluate(doc).score == 0.0


class TestNTIA:
    """Tests for NTIA minimum element checks."""

    def test_machine_format(self):
        assert ev.SBOMMachineFormat().evaluate(cdx_doc()).desc == "cyclonedx, json"

    def test_dependency_relationships_direct(self):
        doc = spdx_doc(
            components=[Component(id="root", is_primary=True), Component(id="dep")],
            relationships=[Relationship("root", "dep")],
        )
        assert ev.SBOMDependencyRelationships().evaluate(doc).score == 10.0

    @pytest.mark.parametrize("aggregate,score", [
        (CompositionAggregate.COMPLETE, 10.0),
        (CompositionAggregate.UNKNOWN, 5.0),
        (CompositionAggregate.INCOMPLETE, 0.0),
    ])
    def test_dependency_relationships_from_composition(self, aggregate, score):
        doc = cdx_doc(
            components=[Component(id="root", is_primary=True)],
            compositions=[Composition(
                scope=CompositionScope.DEPENDENCIES, aggregate=aggregate, dependencies=["root"],
            )],
        )
        assert ev.SBOMDependencyRelationships().evaluate(doc).score == score

    def test_dependency_relationships_without_primary(self):
        result = ev.SBOMDependencyRelationships().evaluate(cdx_doc())
        assert result.desc == "define primary component"

    def test_creator_fallbacks(self):
        creator = ev.SBOMCreator()
        assert creator.evaluate(cdx_doc(authors=[Party(email="a@example.com")])).score == 10.0
        assert creator.evaluate(cdx_doc(tools=[Tool("syft", "")])).score == 5.0
        assert creator.evaluate(cdx_doc(supplier=Party(url="https://acme.example"))).score == 10.0
        assert creator.evaluate(cdx_doc()).score == 0.0


class TestBSI:
    """Tests for BSI TR-03183-2 checks."""

    @pytest.mark.parametrize("spec_type,version,score", [
        (SpecType.SPDX, "SPDX-2.3", 10.0),
        (SpecType.SPDX, "SPDX-2.2", 5.0),
        (SpecType.CYCLONEDX, "1.4", 10.0),
        (SpecType.CYCLONEDX, "1.3", 5.0),
        (SpecType.CYCLONEDX, "1.7", 0.0),
    ])
    def test_spec_version_compliance(self, spec_type, version, score):
        doc = SBOMDocument(spec=SpecInfo(spec_type=spec_type, version=version))
        assert ev.SpecVersionCompliance().evaluate(doc).score == score

    def test_vulnerabilities(self):
        assert ev.SBOMVulnerabilities().evaluate(cdx_doc()).score == 10.0
        found = ev.SBOMVulnerabilities().evaluate(cdx_doc(vulnerabilities=["CVE-2024-0001"]))
        assert found.score == 0.0
        assert "CVE-2024-0001" in found.desc
        assert ev.SBOMVulnerabilities().evaluate(spdx_doc()).ignore

    def test_download_url_excludes_noassertion(self):
        doc = spdx_doc(components=[
            Component(id="a", download_url="https://example.com/a.tgz"),
            Component(id="b", download_url="NOASSERTION"),
        ])
        assert ev.CompWithDownloadURL().evaluate(doc).score == 5.0

    def test_source_hash_not_applicable_to_cyclonedx(self):
        doc = cdx_doc(components=[Component(id="a")])
        assert ev.CompWithSourceCodeHash().evaluate(doc).ignore

    def test_bom_links(self):
        spec = SpecInfo(spec_type=SpecType.CYCLONEDX, external_refs=["urn:cdx:abc/1"])
        assert ev.SBOMBomLinks().evaluate(cdx_doc(spec=spec)).desc == "found 1 bom links"


class TestOCT:
    """Tests for OpenChain Telco checks."""

    def test_document_field_present(self):
        spec = SpecInfo(spec_type=SpecType.SPDX, spdx_id="SPDXRef-DOCUMENT")
        assert ev.DocumentFieldPresent("spdx_id", "spdxid").evaluate(spdx_doc(spec=spec)).score == 10.0
        assert ev.DocumentFieldPresent("comment", "creator comment").evaluate(spdx_doc()).desc == \
            "missing creator comment"

    def test_copyright_excludes_noassertion(self):
        doc = spdx_doc(components=[
            Component(id="a", copyright="Copyright 2024 Acme"),
            Component(id="b", copyright="NOASSERTION"),
        ])
        assert ev.CompWithCopyright().evaluate(doc).score == 5.0

    def test_creator_organization_from_authors(self):
        doc = spdx_doc(authors=[Party(name="Acme", kind="organization")])
        assert ev.SBOMCreatorOrganization().evaluate(doc).score == 10.0


class TestNotApplicable:
    def test_always_ignored(self):
        result = ev.NotApplicableEvaluator("N/A (needs feed)").evaluate(cdx_doc())
        assert result.ignore
        assert result.desc == "N/A (needs feed)"
