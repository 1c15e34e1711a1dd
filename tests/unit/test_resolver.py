"""Unit tests for name resolution and rule selection."""

import pytest

from sbom_quality_scoring import resolver
from sbom_quality_scoring.catalog import build_default_catalog
from sbom_quality_scoring.config import ConfigurationError, ValidationResult


@pytest.fixture(scope="module")
def catalog():
    return build_default_catalog()


class TestNormalizeNames:
    """Tests for input clean-up."""

    def test_trims_and_drops_blanks(self):
        assert resolver.normalize_names(["  a ", "", "   ", "b"]) == ["a", "b"]

    def test_none(self):
        assert resolver.normalize_names(None) == []


class TestResolveNames:
    """Tests for alias resolution with warnings."""

    def test_canonical_order_and_dedup(self, catalog):
        keys = resolver.resolve_names(
            ["Structural", "identification", "IDENTIFICATION"],
            catalog.resolve_category,
            catalog.category_order(),
            "category",
        )
        assert keys == ["identification", "structural"]

    def test_unknown_names_warned_and_dropped(self, catalog):
        result = ValidationResult(is_valid=True)
        keys = resolver.resolve_names(
            ["sbom_authors", "not_present"],
            catalog.resolve_feature,
            catalog.feature_order(),
            "feature",
            result,
        )
        assert keys == ["sbom_authors"]
        assert result.is_valid
        assert result.warnings == ["Unknown feature 'not_present' ignored"]


class TestFilterCategories:
    """Tests for category/feature intersection."""

    def test_no_filters_returns_input_unchanged(self, catalog):
        categories = catalog.scoring_categories
        filtered = resolver.filter_categories(catalog, categories)
        assert filtered == categories
        assert [c.key for c in filtered] == [c.key for c in categories]

    def test_category_filter_keeps_all_features(self, catalog):
        filtered = resolver.filter_categories(catalog, catalog.categories, ["Provenance"])
        assert [c.key for c in filtered] == ["provenance"]
        assert filtered[0].feature_keys == catalog.category("provenance").feature_keys

    def test_category_and_feature_filters_intersect(self, catalog):
        filtered = resolver.filter_categories(
            catalog, catalog.categories, ["Provenance"], ["sbom_authors", "not_present"]
        )
        assert [c.key for c in filtered] == ["provenance"]
        assert filtered[0].feature_keys == ("sbom_authors",)
        # The catalog definition itself is not narrowed.
        assert len(catalog.category("provenance").feature_keys) == 6

    def test_feature_filter_matching_nothing(self, catalog):
        assert resolver.filter_categories(catalog, catalog.categories, None, ["not_present"]) == []

    def test_category_dropped_when_it_loses_all_features(self, catalog):
        filtered = resolver.filter_categories(
            catalog, catalog.categories, ["provenance", "integrity"], ["sbom_signature"]
        )
        assert [c.key for c in filtered] == ["integrity"]

    def test_feature_filter_alone_spans_categories(self, catalog):
        filtered = resolver.filter_categories(
            catalog, catalog.categories, None, ["comp_with_ids", "compwithpurl"]
        )
        assert [(c.key, c.feature_keys) for c in filtered] == [
            ("identification", ("comp_with_identifiers",)),
            ("vulnerability_and_traceability", ("comp_with_purl",)),
        ]


class TestSelectCategories:
    """Tests for comprehensive rule selection."""

    def test_defaults_skip_informational(self, catalog):
        selected = resolver.select_categories(catalog)
        assert "compinfo" not in [c.key for c in selected]

    def test_explicit_informational_category(self, catalog):
        selected = resolver.select_categories(catalog, ["componentquality"])
        assert [c.key for c in selected] == ["compinfo"]

    def test_partially_unknown_filter_warns(self, catalog):
        result = ValidationResult(is_valid=True)
        selected = resolver.select_categories(catalog, ["integrity", "bogus"], None, result)
        assert [c.key for c in selected] == ["integrity"]
        assert any("bogus" in w for w in result.warnings)

    def test_fully_unknown_category_filter_is_error(self, catalog):
        with pytest.raises(ConfigurationError, match="no known category"):
            resolver.select_categories(catalog, ["bogus"])

    def test_fully_unknown_feature_filter_is_error(self, catalog):
        with pytest.raises(ConfigurationError, match="no known feature"):
            resolver.select_categories(catalog, None, ["bogus"])

    def test_empty_intersection_is_error(self, catalog):
        with pytest.raises(ConfigurationError, match="empty rule set") as exc_info:
            resolver.select_categories(catalog, ["identification"], ["sbom_authors"])
        assert not exc_info.value.validation_result.is_valid


class TestSelectProfiles:
    """Tests for compliance profile selection."""

    def test_empty_request_selects_defaults(self, catalog):
        profiles = resolver.select_profiles(catalog, [])
        assert [p.key for p in profiles] == ["interlynk", "ntia", "bsi-v1.1"]

    def test_aliases_in_canonical_order(self, catalog):
        profiles = resolver.select_profiles(catalog, ["bsi-v2_0", "NTIA"])
        assert [p.key for p in profiles] == ["ntia", "bsi-v2.0"]

    def test_unknown_profiles_only_is_error(self, catalog):
        with pytest.raises(ConfigurationError, match="no profile"):
            resolver.select_profiles(catalog, ["fsct"])
