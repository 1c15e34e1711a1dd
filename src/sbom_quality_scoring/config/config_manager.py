"""Configuration Manager implementation for the SBOM Quality Scoring System.

This module validates scoring options and reads, writes and generates the
YAML config files that override the built-in categories or profiles.
"""

import logging
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml

from .. import resolver
from ..catalog.catalog import Catalog, CatalogError
from ..catalog.specs import CategorySpec, FeatureSpec, ProfileItem, ProfileSpec
from ..models.enums import ScoringMode
from .models import (
    CategoryEntry,
    ConfigurationError,
    FeatureEntry,
    LoadedConfig,
    ProfileEntry,
    ProfileFeatureEntry,
    ScoringConfig,
    ValidationResult,
)

logger = logging.getLogger(__name__)

CONFIG_VERSION = "2.0.0"


class ConfigurationManager:
    """
    Manager for scoring configuration.

    Validates run options against a catalog and handles the config files
    that replace the default category or profile definitions.
    """

    # =========================================================================
    # Run options
    # =========================================================================

    def validate(
        self,
        catalog: Catalog,
        config: ScoringConfig,
        loaded: Optional[LoadedConfig] = None,
    ) -> Tuple[ScoringConfig, ValidationResult]:
        """
        Validate run options and return a normalized copy.

        Names are trimmed and resolved to canonical keys. Unknown names are
        dropped with a warning; a selection that ends up empty is an error.
        The input config is never modified.

        Args:
            catalog: Catalog the names are resolved against.
            config: Options supplied by the caller.
            loaded: Config file returned by build_catalog for this run, if any.

        Returns:
            Tuple of (normalized config, validation result with warnings).

        Raises:
            ConfigurationError: If the options cannot produce a scoring run.
        """
        result = ValidationResult(is_valid=True)
        normalized = replace(
            config,
            categories=resolver.normalize_names(config.categories),
            features=resolver.normalize_names(config.features),
            profiles=resolver.normalize_names(config.profiles),
            signature_bundle=replace(config.signature_bundle),
        )

        if normalized.profiles and (normalized.categories or normalized.features):
            result.add_error("Profiles cannot be combined with category or feature filters")
        if normalized.scoring_mode == ScoringMode.COMPREHENSIVE and normalized.profiles:
            result.add_error("Profiles given for a comprehensive scoring run")
        if normalized.scoring_mode == ScoringMode.PROFILES and (normalized.categories or normalized.features):
            result.add_error("Category or feature filters given for a profile scoring run")
        if normalized.fetch_timeout <= 0:
            result.add_error(f"'fetch_timeout' must be positive, got {normalized.fetch_timeout}")

        if not result.is_valid:
            raise ConfigurationError("Invalid scoring options", validation_result=result)

        # A profiles config file implies a compliance run over its profiles.
        if (
            loaded is not None
            and loaded.mode == ScoringMode.PROFILES
            and not (normalized.profiles or normalized.categories or normalized.features)
        ):
            normalized.profiles = [p.key for p in loaded.profiles]

        if normalized.mode == ScoringMode.PROFILES:
            profiles = resolver.select_profiles(catalog, normalized.profiles, result)
            normalized.profiles = [p.key for p in profiles]
            normalized.scoring_mode = ScoringMode.PROFILES
        else:
            selected = resolver.select_categories(
                catalog, normalized.categories, normalized.features, result
            )
            if normalized.categories:
                normalized.categories = [c.key for c in selected]
            if normalized.features:
                normalized.features = [k for c in selected for k in c.feature_keys]
            normalized.scoring_mode = ScoringMode.COMPREHENSIVE

        for warning in result.warnings:
            logger.debug(f"Configuration warning: {warning}")
        return normalized, result

    # =========================================================================
    # Config file generation
    # =========================================================================

    def generate_comprehensive_config(self, catalog: Catalog) -> str:
        """
        Render every category and feature of a catalog as a YAML config file.

        Args:
            catalog: Catalog whose definitions are written.

        Returns:
            YAML text accepted by read_config_file.
        """
        data = {
            "metadata": {
                "version": CONFIG_VERSION,
                "description": "SBOM quality scoring categories and feature weights",
                "last_updated": date.today().isoformat(),
            },
            "categories": [
                {
                    "name": category.name,
                    "key": category.key,
                    "weight": category.weight,
                    "description": category.description,
                    "features": [
                        {
                            "name": feature.name,
                            "key": feature.key,
                            "weight": feature.weight,
                            "ignore": False,
                        }
                        for feature in catalog.category_features(category.key)
                    ],
                }
                for category in catalog.categories
            ],
        }
        header = (
            "# SBOM quality scoring configuration\n"
            "# Set 'ignore: true' on a feature to leave it out of scoring.\n"
        )
        return header + self._dump(data)

    def generate_profiles_config(self, catalog: Catalog) -> str:
        """
        Render every profile of a catalog as a YAML config file.

        Args:
            catalog: Catalog whose profiles are written.

        Returns:
            YAML text accepted by read_config_file.
        """
        data = {
            "profiles": [
                {
                    "name": profile.name,
                    "key": profile.key,
                    "description": profile.description,
                    "features": [
                        {
                            "name": item.name or feature.name,
                            "key": item.key,
                            "required": item.required,
                            "description": item.description or feature.description,
                        }
                        for item, feature in catalog.profile_entries(profile.key)
                    ],
                }
                for profile in catalog.profiles
            ],
        }
        header = "# SBOM compliance profiles configuration\n"
        return header + self._dump(data)

    @staticmethod
    def _dump(data: Dict[str, Any]) -> str:
        return yaml.safe_dump(data, sort_keys=False, default_flow_style=False, allow_unicode=True)

    # =========================================================================
    # Config file I/O
    # =========================================================================

    def write_config_file(self, content: str, path: Union[str, Path]) -> None:
        """
        Write generated config content to disk.

        Raises:
            ConfigurationError: If the file cannot be written.
        """
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"Cannot write configuration file {path}: {e}") from e
        logger.info(f"Configuration written to {path}")

    def read_config_file(self, path: Union[str, Path]) -> LoadedConfig:
        """
        Read and validate a categories or profiles config file.

        The shape is detected from the top-level key. Features marked
        ``ignore: true`` are skipped.

        Args:
            path: YAML file path.

        Returns:
            LoadedConfig holding the parsed entries.

        Raises:
            ConfigurationError: If the file is missing, malformed or invalid.
        """
        raw_data = self._parse_source(path)

        if not isinstance(raw_data, dict):
            raise ConfigurationError(f"Configuration file {path} must contain a mapping")

        has_categories = "categories" in raw_data
        has_profiles = "profiles" in raw_data
        if has_categories and has_profiles:
            raise ConfigurationError(
                f"Configuration file {path} mixes 'categories' and 'profiles'"
            )
        if not has_categories and not has_profiles:
            raise ConfigurationError(
                f"Configuration file {path} has neither a 'categories' nor a 'profiles' section"
            )

        result = ValidationResult(is_valid=True)
        if has_categories:
            loaded = LoadedConfig(mode=ScoringMode.COMPREHENSIVE, metadata=raw_data.get("metadata") or {})
            section = self._require_list(raw_data["categories"], "categories", path)
            for i, category_dict in enumerate(section):
                category_result, category = self._validate_category(category_dict, index=i)
                result = result.merge(category_result)
                if category:
                    loaded.categories.append(category)
            keys = [c.key for c in loaded.categories]
        else:
            loaded = LoadedConfig(mode=ScoringMode.PROFILES, metadata=raw_data.get("metadata") or {})
            section = self._require_list(raw_data["profiles"], "profiles", path)
            for i, profile_dict in enumerate(section):
                profile_result, profile = self._validate_profile(profile_dict, index=i)
                result = result.merge(profile_result)
                if profile:
                    loaded.profiles.append(profile)
            keys = [p.key for p in loaded.profiles]

        duplicates = sorted({k for k in keys if keys.count(k) > 1})
        if duplicates:
            result.add_error(f"Duplicate keys found: {duplicates}")
        if result.is_valid and not keys:
            result.add_error("Configuration file defines nothing to score")

        if not result.is_valid:
            raise ConfigurationError(
                f"Configuration file validation failed: {path}",
                validation_result=result
            )

        for warning in result.warnings:
            logger.warning(f"{path}: {warning}")
        return loaded

    def _parse_source(self, source: Union[str, Path]) -> Any:
        """Parse a YAML configuration file to raw data."""
        path = Path(source)
        if not path.is_file():
            raise ConfigurationError(f"Configuration file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                return yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file {path}: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration file {path}: {e}") from e

    @staticmethod
    def _require_list(value: Any, section: str, path: Union[str, Path]) -> List[Any]:
        if not isinstance(value, list):
            raise ConfigurationError(f"'{section}' in {path} must be a list")
        return value

    def _validate_category(
        self,
        data: Any,
        index: int = 0
    ) -> Tuple[ValidationResult, Optional[CategoryEntry]]:
        """Validate a single category dictionary."""
        result = ValidationResult(is_valid=True)
        prefix = f"Category [{index}]"

        if not isinstance(data, dict):
            result.add_error(f"{prefix}: must be a mapping")
            return result, None

        for field_name in ("name", "key", "weight", "features"):
            if field_name not in data:
                result.add_error(f"{prefix}: Missing required field '{field_name}'")

        if not result.is_valid:
            return result, None

        if not isinstance(data["key"], str) or not data["key"].strip():
            result.add_error(f"{prefix}: 'key' must be a non-empty string")
        if not self._is_number(data["weight"]) or data["weight"] < 0:
            result.add_error(f"{prefix}: 'weight' must be a non-negative number")
        if not isinstance(data["features"], list):
            result.add_error(f"{prefix}: 'features' must be a list")

        if not result.is_valid:
            return result, None

        prefix = f"Category '{data['key'].strip()}'"
        features: List[FeatureEntry] = []
        for i, feature_dict in enumerate(data["features"]):
            feature_result, feature = self._validate_feature(feature_dict, prefix, index=i)
            result = result.merge(feature_result)
            if feature and feature.ignore:
                continue
            if feature:
                features.append(feature)

        if not result.is_valid:
            return result, None

        if not features:
            result.add_warning(f"{prefix}: all features ignored, category skipped")
            return result, None

        category = CategoryEntry(
            name=str(data["name"]).strip(),
            key=data["key"].strip().lower(),
            weight=float(data["weight"]),
            description=str(data.get("description") or ""),
            features=features,
        )
        return result, category

    def _validate_feature(
        self,
        data: Any,
        parent: str,
        index: int = 0
    ) -> Tuple[ValidationResult, Optional[FeatureEntry]]:
        """Validate a single feature dictionary of a category."""
        result = ValidationResult(is_valid=True)
        prefix = f"{parent} feature [{index}]"

        if not isinstance(data, dict):
            result.add_error(f"{prefix}: must be a mapping")
            return result, None

        for field_name in ("key", "weight"):
            if field_name not in data:
                result.add_error(f"{prefix}: Missing required field '{field_name}'")

        if not result.is_valid:
            return result, None

        if not isinstance(data["key"], str) or not data["key"].strip():
            result.add_error(f"{prefix}: 'key' must be a non-empty string")
        if not self._is_number(data["weight"]) or data["weight"] < 0:
            result.add_error(f"{prefix}: 'weight' must be a non-negative number")
        if not isinstance(data.get("ignore", False), bool):
            result.add_error(f"{prefix}: 'ignore' must be a boolean")

        if not result.is_valid:
            return result, None

        feature = FeatureEntry(
            name=str(data.get("name") or data["key"]).strip(),
            key=data["key"].strip().lower(),
            weight=float(data["weight"]),
            ignore=data.get("ignore", False),
        )
        return result, feature

    def _validate_profile(
        self,
        data: Any,
        index: int = 0
    ) -> Tuple[ValidationResult, Optional[ProfileEntry]]:
        """Validate a single profile dictionary."""
        result = ValidationResult(is_valid=True)
        prefix = f"Profile [{index}]"

        if not isinstance(data, dict):
            result.add_error(f"{prefix}: must be a mapping")
            return result, None

        for field_name in ("name", "key", "features"):
            if field_name not in data:
                result.add_error(f"{prefix}: Missing required field '{field_name}'")

        if not result.is_valid:
            return result, None

        if not isinstance(data["key"], str) or not data["key"].strip():
            result.add_error(f"{prefix}: 'key' must be a non-empty string")
        if not isinstance(data["features"], list) or not data["features"]:
            result.add_error(f"{prefix}: 'features' must be a non-empty list")

        if not result.is_valid:
            return result, None

        prefix = f"Profile '{data['key'].strip()}'"
        features: List[ProfileFeatureEntry] = []
        for i, feature_dict in enumerate(data["features"]):
            feature_result, feature = self._validate_profile_feature(feature_dict, prefix, index=i)
            result = result.merge(feature_result)
            if feature:
                features.append(feature)

        if not result.is_valid:
            return result, None

        profile = ProfileEntry(
            name=str(data["name"]).strip(),
            key=data["key"].strip().lower(),
            description=str(data.get("description") or ""),
            features=features,
        )
        return result, profile

    def _validate_profile_feature(
        self,
        data: Any,
        parent: str,
        index: int = 0
    ) -> Tuple[ValidationResult, Optional[ProfileFeatureEntry]]:
        """Validate a single feature dictionary of a profile."""
        result = ValidationResult(is_valid=True)
        prefix = f"{parent} feature [{index}]"

        if not isinstance(data, dict):
            result.add_error(f"{prefix}: must be a mapping")
            return result, None

        if "key" not in data:
            result.add_error(f"{prefix}: Missing required field 'key'")
            return result, None

        if not isinstance(data["key"], str) or not data["key"].strip():
            result.add_error(f"{prefix}: 'key' must be a non-empty string")
        if not isinstance(data.get("required", True), bool):
            result.add_error(f"{prefix}: 'required' must be a boolean")

        if not result.is_valid:
            return result, None

        feature = ProfileFeatureEntry(
            name=str(data.get("name") or data["key"]).strip(),
            key=data["key"].strip().lower(),
            required=data.get("required", True),
            description=str(data.get("description") or ""),
        )
        return result, feature

    @staticmethod
    def _is_number(value: Any) -> bool:
        return isinstance(value, (int, float)) and not isinstance(value, bool)

    # =========================================================================
    # Catalog overrides
    # =========================================================================

    def build_catalog(
        self,
        config: ScoringConfig,
        base_catalog: Catalog
    ) -> Tuple[Catalog, Optional[LoadedConfig]]:
        """
        Apply the run's config file to a catalog.

        Without a config file the base catalog is returned as is. Otherwise
        the file's categories or profiles replace the base definitions;
        evaluators are bound from the base catalog by key.

        Args:
            config: Run options; only ``config_file`` is used.
            base_catalog: Catalog providing evaluators and aliases.

        Returns:
            Tuple of (catalog to score with, loaded config file or None).

        Raises:
            ConfigurationError: If the file is invalid or references unknown keys.
        """
        if not config.config_file or not config.config_file.strip():
            return base_catalog, None

        loaded = self.read_config_file(config.config_file.strip())
        result = ValidationResult(is_valid=True)

        if loaded.mode == ScoringMode.COMPREHENSIVE:
            categories, features = self._category_specs(loaded, base_catalog, result)
            kwargs = {"categories": categories, "features": features}
        else:
            kwargs = {"profiles": self._profile_specs(loaded, base_catalog, result)}

        if not result.is_valid:
            raise ConfigurationError(
                f"Configuration file references unknown rules: {config.config_file}",
                validation_result=result
            )

        try:
            catalog = base_catalog.with_definitions(**kwargs)
        except CatalogError as e:
            raise ConfigurationError(f"Configuration file is inconsistent: {e}") from e

        logger.info(
            f"Loaded {len(loaded.categories)} categories and {len(loaded.profiles)} profiles "
            f"from {config.config_file}"
        )
        return catalog, loaded

    @staticmethod
    def _category_specs(
        loaded: LoadedConfig,
        base: Catalog,
        result: ValidationResult
    ) -> Tuple[List[CategorySpec], List[FeatureSpec]]:
        categories: List[CategorySpec] = []
        features: List[FeatureSpec] = []
        for entry in loaded.categories:
            keys = []
            for feature in entry.features:
                key = base.resolve_feature(feature.key)
                if key is None:
                    result.add_error(f"Category '{entry.key}': unknown feature '{feature.key}'")
                    continue
                features.append(FeatureSpec(
                    key=key,
                    name=feature.name,
                    weight=feature.weight,
                    evaluator=base.feature(key).evaluator,
                    description=base.feature(key).description,
                ))
                keys.append(key)

            informational = base.has_category(entry.key) and base.category(entry.key).informational
            categories.append(CategorySpec(
                key=entry.key,
                name=entry.name,
                weight=entry.weight,
                feature_keys=tuple(keys),
                description=entry.description,
                informational=informational,
            ))
        return categories, features

    @staticmethod
    def _profile_specs(
        loaded: LoadedConfig,
        base: Catalog,
        result: ValidationResult
    ) -> List[ProfileSpec]:
        profiles: List[ProfileSpec] = []
        for entry in loaded.profiles:
            items = []
            for feature in entry.features:
                if not base.has_profile_feature(feature.key):
                    result.add_error(f"Profile '{entry.key}': unknown feature '{feature.key}'")
                    continue
                items.append(ProfileItem(
                    key=feature.key,
                    required=feature.required,
                    name=feature.name,
                    description=feature.description,
                ))
            profiles.append(ProfileSpec(
                key=entry.key,
                name=entry.name,
                items=tuple(items),
                description=entry.description,
            ))
        return profiles
