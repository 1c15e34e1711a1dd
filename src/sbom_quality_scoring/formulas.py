"""Scoring formulas shared by every evaluator and aggregator.

All scores live on a 0-10 scale. Aggregations never divide by zero: an
empty or fully ignored input yields exactly 0.0.
"""

from typing import Iterable, Sequence

from .models.results import (
    CategoryResult,
    FeatureResult,
    FeatureScore,
    ProfileItemResult,
    ProfileResult,
)

MAX_SCORE = 10.0

# Lower bounds of each grade band, checked top-down.
GRADE_BANDS = (
    (9.0, "A"),
    (8.0, "B"),
    (7.0, "C"),
    (5.0, "D"),
)


# =========================================================================
# Per-feature scoring
# =========================================================================

def per_component_score(have: int, total: int) -> float:
    """Share of components satisfying a rule, scaled to 0-10."""
    if total <= 0:
        return 0.0
    return MAX_SCORE * have / total


def boolean_score(present: bool) -> float:
    return MAX_SCORE if present else 0.0


def to_grade(score: float) -> str:
    """
    Map a 0-10 score to a letter grade.

    Bands are closed at their lower bound: 9.0 is an A, 8.99 a B.
    """
    for lower, grade in GRADE_BANDS:
        if score >= lower:
            return grade
    return "F"


# =========================================================================
# Description helpers
# =========================================================================

def no_components_na() -> str:
    return "N/A (no components)"


def missing_field(field: str) -> str:
    return f"missing {field}"


def present_field(field: str) -> str:
    return f"present {field}"


def non_supported_spdx_field() -> str:
    return "N/A (SPDX)"


def unknown_spec() -> str:
    return "N/A (unknown spec)"


def comp_description(have: int, total: int, field: str) -> str:
    return f"{have}/{total} have {field}"


def score_comp_na() -> FeatureScore:
    """Result for a per-component rule on a document without components."""
    return FeatureScore(score=0.0, desc=no_components_na(), ignore=True)


def score_comp_full(have: int, total: int, field: str, ignore: bool = False) -> FeatureScore:
    return FeatureScore(
        score=per_component_score(have, total),
        desc=comp_description(have, total, field),
        ignore=ignore,
    )


def score_present(field: str) -> FeatureScore:
    return FeatureScore(score=MAX_SCORE, desc=present_field(field))


def score_missing(field: str) -> FeatureScore:
    return FeatureScore(score=0.0, desc=missing_field(field))


# =========================================================================
# Aggregation
# =========================================================================

def compute_category_score(features: Iterable[FeatureResult]) -> float:
    """
    Weighted mean of feature scores, ignoring N/A features entirely.

    Ignored features are excluded from both numerator and denominator so
    the remaining weights are renormalized upward.
    """
    weighted_sum = 0.0
    weight_sum = 0.0
    for feature in features:
        if feature.ignored:
            continue
        weighted_sum += feature.score * feature.weight
        weight_sum += feature.weight

    if weight_sum <= 0:
        return 0.0
    return weighted_sum / weight_sum


def compute_overall_score(categories: Iterable[CategoryResult]) -> float:
    """Category-weighted mean over the categories that were scored."""
    weighted_sum = 0.0
    weight_sum = 0.0
    for category in categories:
        weighted_sum += category.score * category.weight
        weight_sum += category.weight

    if weight_sum <= 0:
        return 0.0
    return weighted_sum / weight_sum


def compute_profile_score(items: Iterable[ProfileItemResult]) -> float:
    """Equal-weight mean over non-ignored required items."""
    scores = [item.score for item in items if item.required and not item.ignored]
    if not scores:
        return 0.0
    return sum(scores) / len(scores)


def compute_multi_profile_score(profiles: Sequence[ProfileResult]) -> float:
    """Mean of per-profile scores."""
    if not profiles:
        return 0.0
    return sum(p.score for p in profiles) / len(profiles)
