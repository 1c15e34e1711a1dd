"""Rule definitions held by the catalog."""

from dataclasses import dataclass
from typing import Tuple

from ..interfaces.evaluator import IFeatureEvaluator


@dataclass(frozen=True)
class FeatureSpec:
    """
    One comprehensive scoring rule.

    ``weight`` is the feature's share inside its category.
    """
    key: str
    name: str
    weight: float
    evaluator: IFeatureEvaluator
    description: str = ""


@dataclass(frozen=True)
class CategorySpec:
    """
    Named, weighted group of comprehensive features.

    Informational categories carry weight 0 and are only scored when
    explicitly selected.
    """
    key: str
    name: str
    weight: float
    feature_keys: Tuple[str, ...]
    description: str = ""
    informational: bool = False


@dataclass(frozen=True)
class ProfileFeatureSpec:
    """One check in the profile namespace, shared by every profile using its key."""
    key: str
    name: str
    evaluator: IFeatureEvaluator
    description: str = ""


@dataclass(frozen=True)
class ProfileItem:
    """Reference from a profile to a profile feature, tagged required/optional."""
    key: str
    required: bool = True
    name: str = ""
    description: str = ""


@dataclass(frozen=True)
class ProfileSpec:
    """Named compliance checklist."""
    key: str
    name: str
    items: Tuple[ProfileItem, ...]
    description: str = ""
