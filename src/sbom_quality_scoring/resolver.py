"""Rule selection for a scoring run.

Turns user-supplied category, feature and profile names into canonical
catalog keys and computes the rule set a run evaluates.
"""

import logging
from dataclasses import replace
from typing import Callable, Iterable, List, Optional, Sequence

from .catalog.catalog import Catalog
from .catalog.specs import CategorySpec, ProfileSpec
from .config.models import ConfigurationError, ValidationResult

logger = logging.getLogger(__name__)


def normalize_names(names: Optional[Iterable[str]]) -> List[str]:
    """Trim entries and drop blanks, keeping input order."""
    if not names:
        return []
    return [name.strip() for name in names if name and name.strip()]


def resolve_names(
    names: Iterable[str],
    resolve: Callable[[str], Optional[str]],
    order: Sequence[str],
    kind: str,
    result: Optional[ValidationResult] = None,
) -> List[str]:
    """
    Resolve raw names to canonical keys.

    Unknown names are dropped with a warning. The returned keys are
    de-duplicated and sorted in the catalog's canonical order, not the
    order the user typed them.

    Args:
        names: Raw user input.
        resolve: Catalog lookup returning a key or None.
        order: Canonical key order.
        kind: Noun used in warnings ("category", "feature", "profile").
        result: Collects warnings for the caller when given.

    Returns:
        Canonical keys.
    """
    found = set()
    for name in normalize_names(names):
        key = resolve(name)
        if key is None:
            message = f"Unknown {kind} '{name}' ignored"
            logger.warning(message)
            if result is not None:
                result.add_warning(message)
            continue
        found.add(key)

    return [key for key in order if key in found]


def filter_categories(
    catalog: Catalog,
    categories: Sequence[CategorySpec],
    category_names: Optional[Iterable[str]] = None,
    feature_names: Optional[Iterable[str]] = None,
) -> List[CategorySpec]:
    """
    Intersect a category list with category and feature filters.

    A category survives when it matches the category filter (or none was
    given) and keeps at least one feature after the feature filter (or
    none was given). Names go through alias resolution; unknown names
    simply match nothing.

    Args:
        catalog: Catalog used for alias resolution.
        categories: Candidate categories, in the order to keep.
        category_names: Category keys, display names or aliases.
        feature_names: Feature keys or aliases.

    Returns:
        Filtered categories. Categories that lost features are copies
        holding only the surviving feature keys.
    """
    category_names = normalize_names(category_names)
    feature_names = normalize_names(feature_names)
    if not category_names and not feature_names:
        return list(categories)

    wanted_categories = {catalog.resolve_category(n) for n in category_names} - {None}
    wanted_features = {catalog.resolve_feature(n) for n in feature_names} - {None}

    filtered = []
    for category in categories:
        if category_names and category.key not in wanted_categories:
            continue

        if not feature_names:
            filtered.append(category)
            continue

        keep = tuple(k for k in category.feature_keys if k in wanted_features)
        if not keep:
            logger.debug(f"Category '{category.key}' dropped: no feature matched the feature filter")
            continue
        if keep == category.feature_keys:
            filtered.append(category)
        else:
            filtered.append(replace(category, feature_keys=keep))

    return filtered


def select_categories(
    catalog: Catalog,
    category_names: Optional[Iterable[str]] = None,
    feature_names: Optional[Iterable[str]] = None,
    result: Optional[ValidationResult] = None,
) -> List[CategorySpec]:
    """
    Compute the categories a comprehensive run scores.

    Without filters every non-informational category is scored. A filter
    whose entries are all unknown, or a combination of filters that leaves
    nothing to score, is a configuration error.

    Raises:
        ConfigurationError: If the selection is empty.
    """
    result = result if result is not None else ValidationResult(is_valid=True)
    category_names = normalize_names(category_names)
    feature_names = normalize_names(feature_names)

    if not category_names and not feature_names:
        return catalog.scoring_categories

    category_keys = resolve_names(
        category_names, catalog.resolve_category, catalog.category_order(), "category", result
    )
    if category_names and not category_keys:
        result.add_error(f"No known category in {category_names}")
        raise ConfigurationError("Category filter matches no known category", validation_result=result)

    feature_keys = resolve_names(
        feature_names, catalog.resolve_feature, catalog.feature_order(), "feature", result
    )
    if feature_names and not feature_keys:
        result.add_error(f"No known feature in {feature_names}")
        raise ConfigurationError("Feature filter matches no known feature", validation_result=result)

    # Explicit filters may reach informational categories.
    selected = filter_categories(catalog, catalog.categories, category_keys, feature_keys)
    if not selected:
        result.add_error("Category and feature filters have no feature in common")
        raise ConfigurationError("Selection resolves to an empty rule set", validation_result=result)

    logger.debug(f"Selected categories: {[c.key for c in selected]}")
    return selected


def select_profiles(
    catalog: Catalog,
    profile_names: Optional[Iterable[str]] = None,
    result: Optional[ValidationResult] = None,
) -> List[ProfileSpec]:
    """
    Compute the profiles a compliance run scores.

    An empty request selects the catalog's default profiles.

    Raises:
        ConfigurationError: If none of the requested profiles is known.
    """
    result = result if result is not None else ValidationResult(is_valid=True)
    profile_names = normalize_names(profile_names)

    if not profile_names:
        keys = catalog.default_profiles
    else:
        keys = resolve_names(
            profile_names, catalog.resolve_profile, catalog.profile_order(), "profile", result
        )

    if not keys:
        result.add_error(f"No known profile in {profile_names}")
        raise ConfigurationError("Profile selection resolves to no profile", validation_result=result)

    logger.debug(f"Selected profiles: {keys}")
    return [catalog.profile(key) for key in keys]
