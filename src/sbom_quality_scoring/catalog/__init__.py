"""Rule catalog: feature, category and profile definitions."""

from .catalog import Catalog, CatalogError, normalize_name
from .registry import DEFAULT_PROFILES, SPDX_ONLY_PROFILES, build_default_catalog
from .specs import CategorySpec, FeatureSpec, ProfileFeatureSpec, ProfileItem, ProfileSpec

__all__ = [
    "Catalog",
    "CatalogError",
    "CategorySpec",
    "DEFAULT_PROFILES",
    "FeatureSpec",
    "ProfileFeatureSpec",
    "ProfileItem",
    "ProfileSpec",
    "SPDX_ONLY_PROFILES",
    "build_default_catalog",
    "normalize_name",
]
