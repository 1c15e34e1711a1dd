"""Scoring result models for the SBOM Quality Scoring System."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class FeatureScore:
    """
    Raw outcome of one evaluator run.

    ``score`` lies in [0, 10]. ``ignore`` marks the rule as not applicable
    to the document, which removes it from weighted aggregation.
    """
    score: float
    desc: str
    ignore: bool = False


@dataclass
class FeatureResult:
    """Outcome of a comprehensive feature within a category."""
    key: str
    name: str
    weight: float
    score: float = 0.0
    desc: str = ""
    ignored: bool = False


@dataclass
class CategoryResult:
    """Aggregated outcome for one category."""
    key: str
    name: str
    weight: float
    score: float = 0.0
    features: List[FeatureResult] = field(default_factory=list)


@dataclass
class ProfileItemResult:
    """Outcome of one profile checklist item."""
    key: str
    name: str
    required: bool
    score: float = 0.0
    passed: bool = False
    desc: str = "no evaluator bound"
    ignored: bool = False


@dataclass
class ProfileResult:
    """
    Aggregated outcome for one compliance profile.

    The score is an equal-weight mean over non-ignored required items.
    Compliance counts only give credit to items at the maximum score.
    """
    key: str
    name: str
    description: str = ""
    score: float = 0.0
    grade: str = "F"
    items: List[ProfileItemResult] = field(default_factory=list)

    @property
    def required_total(self) -> int:
        return sum(1 for item in self.items if item.required)

    @property
    def required_compliant(self) -> int:
        return sum(1 for item in self.items if item.required and item.score >= 10.0)

    @property
    def optional_total(self) -> int:
        return sum(1 for item in self.items if not item.required)

    @property
    def optional_present(self) -> int:
        return sum(1 for item in self.items if not item.required and item.score >= 10.0)


@dataclass
class ScoreResult:
    """
    Final per-document report.

    Exactly one of ``categories`` (comprehensive mode) or ``profiles``
    (compliance mode) is populated.
    """
    filename: str
    num_components: int
    creation_time: str
    spec: str
    spec_version: str
    file_format: str
    interlynk_score: float = 0.0
    grade: str = "F"
    categories: Optional[List[CategoryResult]] = None
    profiles: Optional[List[ProfileResult]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert the result to plain data for JSON/YAML serialization."""
        data: Dict[str, Any] = {
            "filename": self.filename,
            "num_components": self.num_components,
            "creation_time": self.creation_time,
            "spec": self.spec,
            "spec_version": self.spec_version,
            "file_format": self.file_format,
            "interlynk_score": round(self.interlynk_score, 4),
            "grade": self.grade,
        }
        if self.categories is not None:
            data["categories"] = [
                {
                    "key": cat.key,
                    "name": cat.name,
                    "weight": cat.weight,
                    "score": round(cat.score, 4),
                    "features": [
                        {
                            "key": feat.key,
                            "name": feat.name,
                            "weight": feat.weight,
                            "score": round(feat.score, 4),
                            "description": feat.desc,
                            "ignored": feat.ignored,
                        }
                        for feat in cat.features
                    ],
                }
                for cat in self.categories
            ]
        if self.profiles is not None:
            data["profiles"] = [
                {
                    "key": prof.key,
                    "name": prof.name,
                    "score": round(prof.score, 4),
                    "grade": prof.grade,
                    "required_compliant": prof.required_compliant,
                    "required_total": prof.required_total,
                    "optional_present": prof.optional_present,
                    "optional_total": prof.optional_total,
                    "items": [
                        {
                            "key": item.key,
                            "name": item.name,
                            "required": item.required,
                            "score": round(item.score, 4),
                            "passed": item.passed,
                            "description": item.desc,
                        }
                        for item in prof.items
                    ],
                }
                for prof in self.profiles
            ]
        return data
