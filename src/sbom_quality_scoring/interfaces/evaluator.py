"""Feature evaluator interface for the SBOM Quality Scoring System."""

from abc import ABC, abstractmethod

from ..models.document import SBOMDocument
from ..models.results import FeatureScore


class IFeatureEvaluator(ABC):
    """
    Abstract interface for a single scoring rule.

    Implementations are bound to exactly one feature key in the catalog.
    They must be deterministic and side-effect free, and must never raise:
    anomalies are reported through the returned FeatureScore.
    """

    @abstractmethod
    def evaluate(self, doc: SBOMDocument) -> FeatureScore:
        """
        Evaluate the rule against a parsed manifest.

        Args:
            doc: The document to inspect.

        Returns:
            FeatureScore with a score in [0, 10], a short description and
            an ignore flag for rules that do not apply to this document.
        """
        pass
