"""Base classes shared by the concrete evaluators."""

from abc import abstractmethod

from .. import formulas
from ..interfaces.evaluator import IFeatureEvaluator
from ..models.document import Component, SBOMDocument
from ..models.results import FeatureScore


class PerComponentEvaluator(IFeatureEvaluator):
    """
    Scores the share of components satisfying a predicate.

    Subclasses set ``label`` (used in the description, e.g. "3/4 have
    version") and implement ``has``. A document without components yields
    an ignored result.
    """

    label: str = ""

    @abstractmethod
    def has(self, component: Component, doc: SBOMDocument) -> bool:
        """Whether one component satisfies the rule."""
        pass

    def evaluate(self, doc: SBOMDocument) -> FeatureScore:
        comps = doc.components
        if not comps:
            return formulas.score_comp_na()

        have = sum(1 for comp in comps if self.has(comp, doc))
        return formulas.score_comp_full(have, len(comps), self.label)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class NotApplicableEvaluator(IFeatureEvaluator):
    """
    Rule that needs data a manifest cannot carry on its own.

    Always reports N/A so it never influences a weighted score.
    """

    def __init__(self, reason: str = "N/A"):
        self.reason = reason

    def evaluate(self, doc: SBOMDocument) -> FeatureScore:
        return FeatureScore(score=0.0, desc=self.reason, ignore=True)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.reason!r})"
