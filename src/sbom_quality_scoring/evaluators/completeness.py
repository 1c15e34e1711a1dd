"""Completeness evaluators: dependencies, completeness declarations, component detail."""

from .. import formulas
from ..interfaces.evaluator import IFeatureEvaluator
from ..models.enums import SUPPORTED_PRIMARY_PURPOSES, CompositionAggregate, CompositionScope
from ..models.results import FeatureScore
from .base import PerComponentEvaluator
from .helpers import has_text


class CompWithDependencies(IFeatureEvaluator):
    """
    Dependency coverage.

    SPDX: share of components with at least one dependency. CycloneDX:
    among components that declare dependencies, the share whose dependency
    list is declared complete by a ``dependencies`` composition.
    """

    def evaluate(self, doc):
        comps = doc.components
        if not comps:
            return formulas.score_comp_na()

        if not doc.is_cyclonedx():
            have = sum(1 for c in comps if c.has_dependencies())
            return formulas.score_comp_full(have, len(comps), "dependencies")

        with_deps = [c for c in comps if c.has_dependencies()]
        if not with_deps:
            return FeatureScore(score=0.0, desc="no components declare dependencies")

        complete_ids = set()
        for comp in doc.compositions:
            if comp.scope == CompositionScope.DEPENDENCIES and comp.aggregate == CompositionAggregate.COMPLETE:
                complete_ids.update(comp.dependencies)

        have = sum(1 for c in with_deps if c.id in complete_ids)
        return formulas.score_comp_full(have, len(with_deps), "complete dependencies")


class SBOMCompletenessDeclared(IFeatureEvaluator):
    def evaluate(self, doc):
        if doc.is_spdx():
            return FeatureScore(score=0.0, desc=formulas.non_supported_spdx_field())
        if any(c.is_sbom_complete() for c in doc.compositions):
            return FeatureScore(score=formulas.MAX_SCORE, desc="complete")
        return formulas.score_missing("completeness declaration")


class SBOMPrimaryComponent(IFeatureEvaluator):
    def evaluate(self, doc):
        if doc.primary_component is not None:
            return FeatureScore(score=formulas.MAX_SCORE, desc="complete")
        return FeatureScore(score=0.0, desc="add primary component")


class CompWithSourceCode(PerComponentEvaluator):
    label = "source code"

    def has(self, component, doc):
        return has_text(component.source_code_url)


class CompWithSupplier(PerComponentEvaluator):
    """Supplier named and reachable (e-mail, URL or contact entries)."""

    label = "supplier"

    def has(self, component, doc):
        supplier = component.supplier
        return supplier is not None and has_text(supplier.name) and supplier.has_contact()


class CompWithPurpose(PerComponentEvaluator):
    label = "primary purpose"

    def has(self, component, doc):
        purpose = component.primary_purpose.strip().lower()
        return purpose in SUPPORTED_PRIMARY_PURPOSES.get(doc.spec.spec_name, [])
