"""Integration tests for end-to-end scoring runs."""

import json
import threading
import time
from unittest.mock import MagicMock

import pytest
import yaml
from sqlalchemy.exc import OperationalError

from sbom_quality_scoring import (
    AuditEventType,
    AuditLogger,
    ConfigurationError,
    IAuditLogger,
    NoDocumentsScoredError,
    ScoringCancelledError,
    ScoringConfig,
    ScoringEngine,
    SignatureBundle,
    score_sbom,
)


def ntia_complete_bom():
    """CycloneDX 1.5 manifest meeting every NTIA minimum element."""
    return {
        "bomFormat": "CycloneDX",
        "specVersion": "1.5",
        "serialNumber": "urn:uuid:3e671687-395b-41f5-a30f-a58921a69b79",
        "version": 1,
        "metadata": {
            "timestamp": "2024-01-01T00:00:00Z",
            "authors": [{"name": "Jane Doe", "email": "jane@example.com"}],
            "tools": {"components": [{"type": "application", "name": "syft", "version": "0.98.0"}]},
            "component": {
                "bom-ref": "app",
                "type": "application",
                "name": "app",
                "version": "1.0.0",
                "purl": "pkg:generic/acme/app@1.0.0",
            },
        },
        "components": [
            {
                "bom-ref": "lib",
                "type": "library",
                "name": "lib",
                "version": "2.0.0",
                "purl": "pkg:pypi/lib@2.0.0",
                "hashes": [{"alg": "SHA-256", "content": "def456"}],
                "licenses": [{"license": {"id": "MIT"}}],
            },
        ],
        "dependencies": [
            {"ref": "app", "dependsOn": ["lib"]},
            {"ref": "lib", "dependsOn": []},
        ],
    }


@pytest.fixture
def bom_path(tmp_path):
    path = tmp_path / "app.cdx.json"
    path.write_text(json.dumps(ntia_complete_bom()), encoding="utf-8")
    return str(path)


@pytest.fixture
def xml_path(tmp_path):
    path = tmp_path / "legacy.cdx.xml"
    path.write_text('<?xml version="1.0"?><bom xmlns="http://cyclonedx.org/schema/bom/1.4"/>', encoding="utf-8")
    return str(path)


@pytest.fixture
def audit_logger(tmp_path):
    logger = AuditLogger(database_url=f"sqlite:///{tmp_path}/audit.db")
    yield logger
    logger.close()


class TestComprehensiveRun:
    """Tests for category-weighted scoring."""

    def test_scores_every_default_category(self, bom_path):
        [result] = score_sbom(ScoringConfig(), [bom_path])

        assert result.filename == bom_path
        assert result.spec == "cyclonedx"
        assert result.spec_version == "1.5"
        assert result.num_components == 2
        assert result.profiles is None
        assert [c.key for c in result.categories] == [
            "identification",
            "provenance",
            "integrity",
            "completeness",
            "licensing_and_compliance",
            "vulnerability_and_traceability",
            "structural",
        ]
        assert 0.0 <= result.interlynk_score <= 10.0
        assert result.grade in ("A", "B", "C", "D", "F")

    def test_identification_is_complete(self, bom_path):
        [result] = score_sbom(ScoringConfig(categories=["identification"]), [bom_path])
        [category] = result.categories
        assert category.score == pytest.approx(10.0)
        assert result.interlynk_score == pytest.approx(10.0)
        assert result.grade == "A"

    def test_feature_filter(self, bom_path):
        [result] = score_sbom(ScoringConfig(features=["comp_with_name", "sbom_authors"]), [bom_path])
        assert [(c.key, [f.key for f in c.features]) for c in result.categories] == [
            ("identification", ["comp_with_name"]),
            ("provenance", ["sbom_authors"]),
        ]

    def test_signature_bundle_fills_missing_signature(self, bom_path):
        config = ScoringConfig(
            features=["sbom_signature"],
            signature_bundle=SignatureBundle(sig_value="sbom.sig", public_key="cosign.pub"),
        )
        [result] = score_sbom(config, [bom_path])
        [feature] = result.categories[0].features
        assert feature.score == 10.0
        assert feature.desc == "complete"

    def test_result_serialization(self, bom_path):
        [result] = score_sbom(ScoringConfig(), [bom_path])
        data = result.to_dict()
        assert set(data) == {
            "filename", "num_components", "creation_time", "spec", "spec_version",
            "file_format", "interlynk_score", "grade", "categories",
        }
        json.dumps(data)


class TestProfileRun:
    """Tests for compliance profile scoring."""

    def test_ntia_fully_compliant(self, bom_path):
        [result] = score_sbom(ScoringConfig(profiles=["ntia"]), [bom_path])

        assert result.categories is None
        [profile] = result.profiles
        assert profile.required_compliant == 7
        assert result.interlynk_score == pytest.approx(10.0)
        assert result.grade == "A"

    def test_only_inapplicable_profile_skips_document(self, bom_path):
        with pytest.raises(NoDocumentsScoredError) as exc_info:
            score_sbom(ScoringConfig(profiles=["oct"]), [bom_path])
        assert exc_info.value.summary["warning_count"] == 1

    def test_profiles_config_file(self, bom_path, tmp_path):
        config_path = tmp_path / "profiles.yaml"
        config_path.write_text(yaml.safe_dump({"profiles": [
            {"name": "Minimal", "key": "minimal", "features": [
                {"key": "comp_name", "required": True},
                {"key": "sbom_timestamp", "required": True},
            ]},
        ]}), encoding="utf-8")

        [result] = score_sbom(ScoringConfig(config_file=str(config_path)), [bom_path])

        assert [p.key for p in result.profiles] == ["minimal"]
        assert result.interlynk_score == pytest.approx(10.0)


class TestBatchBehaviour:
    """Tests for path handling and per-document failures."""

    def test_bad_document_skipped(self, bom_path, xml_path):
        results = score_sbom(ScoringConfig(), [xml_path, bom_path])
        assert [r.filename for r in results] == [bom_path]

    def test_all_documents_failing(self, xml_path):
        with pytest.raises(NoDocumentsScoredError) as exc_info:
            score_sbom(ScoringConfig(), [xml_path])
        assert exc_info.value.summary["error_count"] == 1
        assert exc_info.value.summary["errors"][0]["error_type"] == "UnsupportedFormatError"

    def test_no_valid_paths(self, tmp_path):
        with pytest.raises(ConfigurationError, match="no valid paths provided"):
            score_sbom(ScoringConfig(), ["", "   ", str(tmp_path / "missing.json")])

    def test_invalid_options_fail_before_parsing(self, bom_path):
        with pytest.raises(ConfigurationError):
            score_sbom(ScoringConfig(profiles=["ntia"], categories=["integrity"]), [bom_path])

    def test_directory_expansion(self, tmp_path):
        nested = tmp_path / "nested"
        nested.mkdir()
        (tmp_path / "a.json").write_text("{}", encoding="utf-8")
        (nested / "b.json").write_text("{}", encoding="utf-8")
        engine = ScoringEngine()

        assert engine.validate_paths([str(tmp_path)]) == [str(tmp_path / "a.json")]
        assert engine.validate_paths([str(tmp_path)], recursive=True) == [
            str(tmp_path / "a.json"),
            str(nested / "b.json"),
        ]

    def test_urls_kept(self):
        assert ScoringEngine().validate_paths(["https://example.com/sbom.json"]) == [
            "https://example.com/sbom.json"
        ]


class TestCancellation:
    """Tests for cancellation and deadlines."""

    def test_cancel_event(self, bom_path):
        cancel = threading.Event()
        cancel.set()
        with pytest.raises(ScoringCancelledError, match="cancelled"):
            score_sbom(ScoringConfig(), [bom_path], cancel_event=cancel)

    def test_deadline_passed(self, bom_path):
        with pytest.raises(ScoringCancelledError, match="deadline"):
            score_sbom(ScoringConfig(), [bom_path], deadline=time.monotonic() - 1)


class TestAuditTrail:
    """Tests for audit events recorded during runs."""

    def test_run_events(self, bom_path, xml_path, audit_logger):
        score_sbom(ScoringConfig(), [bom_path, xml_path], audit_logger=audit_logger)

        def count(event_type):
            return len(audit_logger.get_events(event_type=event_type))

        assert count(AuditEventType.RUN_STARTED) == 1
        assert count(AuditEventType.DOCUMENT_SCORED) == 1
        assert count(AuditEventType.DOCUMENT_SKIPPED) == 1
        assert count(AuditEventType.RUN_COMPLETED) == 1

        [scored] = audit_logger.get_events(event_type=AuditEventType.DOCUMENT_SCORED)
        assert scored.path == bom_path
        assert scored.details["spec"] == "cyclonedx"
        assert scored.details["num_components"] == 2

        summary = json.loads(audit_logger.export_log(scored.run_id))["summary"]
        assert summary["documents_scored"] == 1
        assert summary["documents_skipped"] == 1

    def test_failed_run_recorded(self, xml_path, audit_logger):
        with pytest.raises(NoDocumentsScoredError):
            score_sbom(ScoringConfig(), [xml_path], audit_logger=audit_logger)

        [failed] = audit_logger.get_events(event_type=AuditEventType.RUN_FAILED)
        assert failed.details["error_type"] == "NoDocumentsScoredError"

    def test_audit_enabled_from_config(self, bom_path, tmp_path):
        database_url = f"sqlite:///{tmp_path}/owned.db"
        score_sbom(ScoringConfig(enable_audit_logging=True, database_url=database_url), [bom_path])

        reader = AuditLogger(database_url=database_url)
        try:
            assert len(reader.get_events(event_type=AuditEventType.RUN_COMPLETED)) == 1
        finally:
            reader.close()

    @pytest.fixture
    def broken_audit(self):
        audit = MagicMock(spec=IAuditLogger)
        audit.log_event.side_effect = OperationalError("INSERT", {}, Exception("disk I/O error"))
        return audit

    def test_audit_failure_does_not_abort_run(self, bom_path, broken_audit):
        [result] = score_sbom(ScoringConfig(), [bom_path], audit_logger=broken_audit)
        assert result.filename == bom_path
        assert broken_audit.log_event.call_count == 3

    def test_audit_failure_keeps_original_error(self, xml_path, broken_audit):
        with pytest.raises(NoDocumentsScoredError):
            score_sbom(ScoringConfig(), [xml_path], audit_logger=broken_audit)
