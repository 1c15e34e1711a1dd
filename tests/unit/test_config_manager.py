"""Unit tests for the Configuration Manager."""

import pytest
import yaml

from sbom_quality_scoring.catalog import build_default_catalog
from sbom_quality_scoring.config import (
    ConfigurationError,
    ConfigurationManager,
    ScoringConfig,
    SignatureBundle,
)
from sbom_quality_scoring.models.enums import ScoringMode


@pytest.fixture(scope="module")
def catalog():
    return build_default_catalog()


@pytest.fixture
def manager():
    return ConfigurationManager()


def write_yaml(path, data):
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return str(path)


class TestValidate:
    """Tests for run option validation."""

    def test_normalizes_without_mutating_input(self, manager, catalog):
        config = ScoringConfig(
            categories=[" Licensing ", ""],
            signature_bundle=SignatureBundle(sig_value="sig.bin"),
        )
        normalized, result = manager.validate(catalog, config)

        assert result.is_valid
        assert normalized.categories == ["licensing_and_compliance"]
        assert normalized.scoring_mode == ScoringMode.COMPREHENSIVE
        assert config.categories == [" Licensing ", ""]
        assert config.scoring_mode is None
        assert normalized.signature_bundle is not config.signature_bundle

    def test_profiles_mode_inferred(self, manager, catalog):
        normalized, _ = manager.validate(catalog, ScoringConfig(profiles=["NTIA", "bsi"]))
        assert normalized.mode == ScoringMode.PROFILES
        assert normalized.profiles == ["ntia", "bsi-v1.1"]

    def test_explicit_profile_mode_uses_defaults(self, manager, catalog):
        normalized, _ = manager.validate(catalog, ScoringConfig(scoring_mode=ScoringMode.PROFILES))
        assert normalized.profiles == ["interlynk", "ntia", "bsi-v1.1"]

    def test_profiles_with_filters_rejected(self, manager, catalog):
        config = ScoringConfig(profiles=["ntia"], features=["comp_with_name"])
        with pytest.raises(ConfigurationError, match="Invalid scoring options") as exc_info:
            manager.validate(catalog, config)
        assert "Profiles cannot be combined with category or feature filters" in \
            exc_info.value.validation_result.errors

    def test_non_positive_timeout_rejected(self, manager, catalog):
        with pytest.raises(ConfigurationError):
            manager.validate(catalog, ScoringConfig(fetch_timeout=0))

    def test_unknown_feature_warns(self, manager, catalog):
        normalized, result = manager.validate(
            catalog, ScoringConfig(features=["comp_with_name", "comp_with_magic"])
        )
        assert normalized.features == ["comp_with_name"]
        assert any("comp_with_magic" in w for w in result.warnings)


class TestConfigFiles:
    """Tests for generating, writing and reading config files."""

    def test_comprehensive_round_trip(self, manager, catalog, tmp_path):
        path = tmp_path / "config" / "categories.yaml"
        manager.write_config_file(manager.generate_comprehensive_config(catalog), path)

        loaded = manager.read_config_file(path)

        assert loaded.mode == ScoringMode.COMPREHENSIVE
        assert [c.key for c in loaded.categories] == catalog.category_order()
        integrity = next(c for c in loaded.categories if c.key == "integrity")
        assert integrity.weight == 15.0
        assert [f.key for f in integrity.features] == list(catalog.category("integrity").feature_keys)
        assert loaded.metadata["version"] == "2.0.0"

    def test_profiles_round_trip(self, manager, catalog, tmp_path):
        path = tmp_path / "profiles.yaml"
        manager.write_config_file(manager.generate_profiles_config(catalog), path)

        loaded = manager.read_config_file(path)

        assert loaded.mode == ScoringMode.PROFILES
        assert [p.key for p in loaded.profiles] == catalog.profile_order()
        bsi2 = next(p for p in loaded.profiles if p.key == "bsi-v2.0")
        required = {f.key: f.required for f in bsi2.features}
        assert required["sbom_bomlinks"] is False
        assert required["sbom_signature"] is True

    def test_ignored_features_dropped(self, manager, tmp_path):
        path = write_yaml(tmp_path / "c.yaml", {"categories": [
            {"name": "Identification", "key": "identification", "weight": 10, "features": [
                {"key": "comp_with_name", "weight": 0.5},
                {"key": "comp_with_version", "weight": 0.5, "ignore": True},
            ]},
            {"name": "Integrity", "key": "integrity", "weight": 15, "features": [
                {"key": "sbom_signature", "weight": 1.0, "ignore": True},
            ]},
        ]})

        loaded = manager.read_config_file(path)

        assert [c.key for c in loaded.categories] == ["identification"]
        assert [f.key for f in loaded.categories[0].features] == ["comp_with_name"]

    def test_missing_file(self, manager, tmp_path):
        with pytest.raises(ConfigurationError, match="Configuration file not found"):
            manager.read_config_file(tmp_path / "absent.yaml")

    def test_invalid_yaml(self, manager, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("categories: [unclosed", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            manager.read_config_file(path)

    def test_mixed_sections(self, manager, tmp_path):
        path = write_yaml(tmp_path / "mixed.yaml", {"categories": [], "profiles": []})
        with pytest.raises(ConfigurationError, match="mixes 'categories' and 'profiles'"):
            manager.read_config_file(path)

    def test_no_section(self, manager, tmp_path):
        path = write_yaml(tmp_path / "empty.yaml", {"metadata": {"version": "2.0.0"}})
        with pytest.raises(ConfigurationError, match="has neither"):
            manager.read_config_file(path)

    def test_missing_fields_and_bad_weight(self, manager, tmp_path):
        path = write_yaml(tmp_path / "bad.yaml", {"categories": [
            {"key": "identification", "weight": 10, "features": []},
            {"name": "Integrity", "key": "integrity", "weight": -1, "features": []},
        ]})
        with pytest.raises(ConfigurationError, match="validation failed") as exc_info:
            manager.read_config_file(path)
        errors = exc_info.value.validation_result.errors
        assert "Category [0]: Missing required field 'name'" in errors
        assert "Category [1]: 'weight' must be a non-negative number" in errors

    def test_duplicate_keys(self, manager, tmp_path):
        profile = {"name": "P", "key": "p", "features": [{"key": "comp_name"}]}
        path = write_yaml(tmp_path / "dup.yaml", {"profiles": [profile, profile]})
        with pytest.raises(ConfigurationError) as exc_info:
            manager.read_config_file(path)
        assert "Duplicate keys found: ['p']" in exc_info.value.validation_result.errors

    def test_all_categories_ignored(self, manager, tmp_path):
        path = write_yaml(tmp_path / "none.yaml", {"categories": [
            {"name": "Integrity", "key": "integrity", "weight": 15, "features": [
                {"key": "sbom_signature", "weight": 1.0, "ignore": True},
            ]},
        ]})
        with pytest.raises(ConfigurationError) as exc_info:
            manager.read_config_file(path)
        assert "Configuration file defines nothing to score" in exc_info.value.validation_result.errors


class TestBuildCatalog:
    """Tests for applying a config file to the base catalog."""

    def test_without_file_returns_base(self, manager, catalog):
        derived, loaded = manager.build_catalog(ScoringConfig(), catalog)
        assert derived is catalog
        assert loaded is None

    def test_comprehensive_override(self, manager, catalog, tmp_path):
        path = write_yaml(tmp_path / "c.yaml", {"categories": [
            {"name": "Identification", "key": "identification", "weight": 4, "features": [
                {"name": "Name", "key": "comp_with_name", "weight": 0.7},
                {"name": "Version", "key": "comp_with_version", "weight": 0.3},
            ]},
        ]})

        derived, loaded = manager.build_catalog(ScoringConfig(config_file=path), catalog)

        assert loaded.mode == ScoringMode.COMPREHENSIVE
        assert derived.category_order() == ["identification"]
        assert derived.category("identification").weight == 4.0
        assert derived.feature("comp_with_name").weight == 0.7
        assert derived.feature("comp_with_name").evaluator is catalog.feature("comp_with_name").evaluator

    def test_unknown_feature_in_file(self, manager, catalog, tmp_path):
        path = write_yaml(tmp_path / "c.yaml", {"categories": [
            {"name": "Identification", "key": "identification", "weight": 4, "features": [
                {"key": "comp_with_magic", "weight": 1.0},
            ]},
        ]})
        with pytest.raises(ConfigurationError, match="references unknown rules"):
            manager.build_catalog(ScoringConfig(config_file=path), catalog)

    def test_profiles_file_implies_profile_run(self, manager, catalog, tmp_path):
        path = write_yaml(tmp_path / "p.yaml", {"profiles": [
            {"name": "Minimal", "key": "minimal", "features": [
                {"key": "comp_name", "required": True},
                {"key": "sbom_timestamp", "required": False},
            ]},
        ]})
        config = ScoringConfig(config_file=path)

        derived, loaded = manager.build_catalog(config, catalog)
        normalized, _ = manager.validate(derived, config, loaded)

        assert derived.profile_order() == ["minimal"]
        assert normalized.mode == ScoringMode.PROFILES
        assert normalized.profiles == ["minimal"]

    def test_interleaved_runs_keep_their_own_files(self, manager, catalog, tmp_path):
        path = write_yaml(tmp_path / "p.yaml", {"profiles": [
            {"name": "Mine", "key": "mine", "features": [{"key": "comp_name", "required": True}]},
        ]})
        run_a = ScoringConfig(config_file=path)
        run_b = ScoringConfig()

        catalog_a, loaded_a = manager.build_catalog(run_a, catalog)
        catalog_b, loaded_b = manager.build_catalog(run_b, catalog)
        normalized_a, _ = manager.validate(catalog_a, run_a, loaded_a)
        normalized_b, _ = manager.validate(catalog_b, run_b, loaded_b)

        assert normalized_a.mode == ScoringMode.PROFILES
        assert normalized_a.profiles == ["mine"]
        assert normalized_b.mode == ScoringMode.COMPREHENSIVE
        assert normalized_b.profiles == []
