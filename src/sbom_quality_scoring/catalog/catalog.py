"""Immutable rule catalog for the SBOM Quality Scoring System.

The catalog is the single source of truth for feature, category and profile
definitions and their accepted aliases. It is validated once at
construction and never mutated afterwards, so one instance can be shared by
concurrent scoring passes.
"""

import logging
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from .specs import CategorySpec, FeatureSpec, ProfileFeatureSpec, ProfileItem, ProfileSpec

logger = logging.getLogger(__name__)


class CatalogError(ValueError):
    """Raised when catalog definitions are inconsistent."""


def normalize_name(name: str) -> str:
    """Canonical lookup form for keys and aliases: trimmed and lower-cased."""
    return name.strip().lower()


class Catalog:
    """
    Registry of every rule a scoring run may evaluate.

    Categories and profiles reference features by key; construction fails
    if any reference is dangling so that evaluation can never hit a missing
    evaluator mid-run.
    """

    def __init__(
        self,
        features: Iterable[FeatureSpec],
        categories: Iterable[CategorySpec],
        profile_features: Iterable[ProfileFeatureSpec] = (),
        profiles: Iterable[ProfileSpec] = (),
        category_aliases: Optional[Mapping[str, str]] = None,
        feature_aliases: Optional[Mapping[str, str]] = None,
        profile_aliases: Optional[Mapping[str, str]] = None,
        default_profiles: Iterable[str] = (),
    ):
        self._features = self._index(features, "feature")
        self._categories = self._index(categories, "category")
        self._profile_features = self._index(profile_features, "profile feature")
        self._profiles = self._index(profiles, "profile")

        self._validate_categories()
        self._validate_profiles()

        self._category_lookup = self._build_lookup(
            self._categories, category_aliases or {}, "category",
            extra={normalize_name(c.name): c.key for c in self._categories.values()},
        )
        self._feature_lookup = self._build_lookup(
            self._features, feature_aliases or {}, "feature",
        )
        self._profile_lookup = self._build_lookup(
            self._profiles, profile_aliases or {}, "profile",
        )

        defaults = []
        for raw in default_profiles:
            key = self.resolve_profile(raw)
            if key is None:
                raise CatalogError(f"Default profile '{raw}' is not defined")
            defaults.append(key)
        self._default_profiles: Tuple[str, ...] = tuple(defaults)

        logger.debug(
            f"Catalog built: {len(self._features)} features, "
            f"{len(self._categories)} categories, {len(self._profiles)} profiles"
        )

    # =========================================================================
    # Construction helpers
    # =========================================================================

    @staticmethod
    def _index(items, kind: str) -> Mapping[str, object]:
        index: Dict[str, object] = {}
        for item in items:
            if not item.key or normalize_name(item.key) != item.key:
                raise CatalogError(f"Invalid {kind} key '{item.key}': keys must be trimmed lower-case")
            if item.key in index:
                raise CatalogError(f"Duplicate {kind} key '{item.key}'")
            index[item.key] = item
        return MappingProxyType(index)

    def _validate_categories(self) -> None:
        owners: Dict[str, str] = {}
        for category in self._categories.values():
            if not category.feature_keys:
                raise CatalogError(f"Category '{category.key}' has no features")
            for key in category.feature_keys:
                if key not in self._features:
                    raise CatalogError(
                        f"Category '{category.key}' references unknown feature '{key}'"
                    )
                if key in owners:
                    raise CatalogError(
                        f"Feature '{key}' belongs to both '{owners[key]}' and '{category.key}'"
                    )
                owners[key] = category.key

    def _validate_profiles(self) -> None:
        for profile in self._profiles.values():
            if not profile.items:
                raise CatalogError(f"Profile '{profile.key}' has no features")
            seen = set()
            for item in profile.items:
                if item.key not in self._profile_features:
                    raise CatalogError(
                        f"Profile '{profile.key}' references unknown feature '{item.key}'"
                    )
                if item.key in seen:
                    raise CatalogError(
                        f"Profile '{profile.key}' lists feature '{item.key}' twice"
                    )
                seen.add(item.key)

    @staticmethod
    def _build_lookup(
        index: Mapping[str, object],
        aliases: Mapping[str, str],
        kind: str,
        extra: Optional[Mapping[str, str]] = None,
    ) -> Mapping[str, str]:
        lookup = {key: key for key in index}
        for alias, key in list((extra or {}).items()) + list(aliases.items()):
            if key not in index:
                raise CatalogError(f"{kind.capitalize()} alias '{alias}' points to unknown key '{key}'")
            # A canonical key always resolves to itself.
            if normalize_name(alias) in index:
                continue
            lookup[normalize_name(alias)] = key
        return MappingProxyType(lookup)

    # =========================================================================
    # Alias resolution
    # =========================================================================

    def resolve_category(self, name: str) -> Optional[str]:
        """Canonical category key for a key, display name or alias."""
        return self._category_lookup.get(normalize_name(name))

    def resolve_feature(self, name: str) -> Optional[str]:
        return self._feature_lookup.get(normalize_name(name))

    def resolve_profile(self, name: str) -> Optional[str]:
        return self._profile_lookup.get(normalize_name(name))

    # =========================================================================
    # Lookup and membership
    # =========================================================================

    def has_category(self, key: str) -> bool:
        return key in self._categories

    def has_feature(self, key: str) -> bool:
        return key in self._features

    def has_profile(self, key: str) -> bool:
        return key in self._profiles

    def has_profile_feature(self, key: str) -> bool:
        return key in self._profile_features

    def category(self, key: str) -> CategorySpec:
        return self._categories[key]

    def feature(self, key: str) -> FeatureSpec:
        return self._features[key]

    def profile(self, key: str) -> ProfileSpec:
        return self._profiles[key]

    def profile_feature(self, key: str) -> ProfileFeatureSpec:
        return self._profile_features[key]

    def category_features(self, key: str) -> List[FeatureSpec]:
        """Features of a category in their declared order."""
        return [self._features[k] for k in self._categories[key].feature_keys]

    def profile_entries(self, key: str) -> List[Tuple[ProfileItem, ProfileFeatureSpec]]:
        """Items of a profile paired with the feature definitions they reference."""
        return [(item, self._profile_features[item.key]) for item in self._profiles[key].items]

    # =========================================================================
    # Canonical order
    # =========================================================================

    @property
    def categories(self) -> List[CategorySpec]:
        """All categories in canonical evaluation order."""
        return list(self._categories.values())

    @property
    def scoring_categories(self) -> List[CategorySpec]:
        """Categories scored when no category filter is given."""
        return [c for c in self._categories.values() if not c.informational]

    @property
    def features(self) -> List[FeatureSpec]:
        return list(self._features.values())

    @property
    def profiles(self) -> List[ProfileSpec]:
        return list(self._profiles.values())

    @property
    def profile_features(self) -> List[ProfileFeatureSpec]:
        return list(self._profile_features.values())

    @property
    def default_profiles(self) -> List[str]:
        return list(self._default_profiles)

    def category_order(self) -> List[str]:
        return list(self._categories.keys())

    def feature_order(self) -> List[str]:
        """Feature keys in category order, the order of a full scoring pass."""
        return [k for c in self._categories.values() for k in c.feature_keys]

    def profile_order(self) -> List[str]:
        return list(self._profiles.keys())

    # =========================================================================
    # Derivation
    # =========================================================================

    def with_definitions(
        self,
        categories: Optional[Iterable[CategorySpec]] = None,
        features: Optional[Iterable[FeatureSpec]] = None,
        profiles: Optional[Iterable[ProfileSpec]] = None,
    ) -> "Catalog":
        """
        Build a new catalog replacing categories/features or profiles.

        Used when a configuration file overrides the default definitions.
        Evaluators and aliases are carried over; aliases whose target no
        longer exists are dropped.
        """
        new_features = list(features) if features is not None else self.features
        new_categories = list(categories) if categories is not None else self.categories
        new_profiles = list(profiles) if profiles is not None else self.profiles

        feature_keys = {f.key for f in new_features}
        category_keys = {c.key for c in new_categories}
        profile_keys = {p.key for p in new_profiles}

        return Catalog(
            features=new_features,
            categories=new_categories,
            profile_features=self.profile_features,
            profiles=new_profiles,
            category_aliases=self._aliases(self._category_lookup, category_keys, self._categories),
            feature_aliases=self._aliases(self._feature_lookup, feature_keys, self._features),
            profile_aliases=self._aliases(self._profile_lookup, profile_keys, self._profiles),
            default_profiles=[k for k in self._default_profiles if k in profile_keys],
        )

    @staticmethod
    def _aliases(lookup: Mapping[str, str], keep: set, index: Mapping[str, object]) -> Dict[str, str]:
        return {
            alias: key for alias, key in lookup.items()
            if key in keep and alias not in index
        }
