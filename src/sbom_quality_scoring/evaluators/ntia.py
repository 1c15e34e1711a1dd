"""Checks for the NTIA minimum elements."""

from .. import formulas
from ..interfaces.evaluator import IFeatureEvaluator
from ..models.enums import (
    SUPPORTED_FILE_FORMATS,
    SUPPORTED_SPECS,
    CompositionAggregate,
    CompositionScope,
)
from ..models.results import FeatureScore
from .helpers import has_text


class SBOMMachineFormat(IFeatureEvaluator):
    """Automation support: a known spec written in a format supported for it."""

    def evaluate(self, doc):
        spec = doc.spec.spec_name
        file_format = doc.spec.file_format.strip().lower()
        if not spec:
            return formulas.score_missing("spec")
        if spec not in SUPPORTED_SPECS:
            return FeatureScore(score=0.0, desc=f"unsupported spec: {spec}")
        if not file_format:
            return formulas.score_missing("file format")
        if file_format not in SUPPORTED_FILE_FORMATS[spec]:
            return FeatureScore(score=0.0, desc=f"unsupported file format: {file_format} (spec {spec})")
        return FeatureScore(score=formulas.MAX_SCORE, desc=f"{spec}, {file_format}")


class SBOMDependencyRelationships(IFeatureEvaluator):
    """
    Dependency relationships of the primary component.

    Direct DEPENDS_ON relationships satisfy the rule. Without them, a
    ``dependencies`` composition naming the primary component decides:
    complete 10, unknown 5, incomplete 0.
    """

    def evaluate(self, doc):
        primary = doc.primary_component
        if primary is None:
            return FeatureScore(score=0.0, desc="define primary component")

        direct = set(doc.direct_dependencies(primary.id)) | set(primary.dependencies)
        if direct:
            return FeatureScore(
                score=formulas.MAX_SCORE,
                desc=f"primary component declares {len(direct)} direct dependencies",
            )

        for comp in doc.compositions:
            if comp.scope != CompositionScope.DEPENDENCIES or primary.id not in comp.dependencies:
                continue
            if comp.aggregate == CompositionAggregate.COMPLETE:
                return FeatureScore(score=formulas.MAX_SCORE, desc="no direct dependencies, declared complete")
            if comp.aggregate == CompositionAggregate.UNKNOWN:
                return FeatureScore(score=5.0, desc="no direct dependencies, completeness unknown")
            if comp.aggregate == CompositionAggregate.INCOMPLETE:
                return FeatureScore(score=0.0, desc="no direct dependencies, declared incomplete")

        return FeatureScore(score=0.0, desc="no direct dependencies and no completeness declaration")


class SBOMCreator(IFeatureEvaluator):
    """
    Who created the document.

    Explicit authors win; otherwise the generating tool, then the document
    supplier or manufacturer stand in for the author.
    """

    def evaluate(self, doc):
        for author in doc.authors:
            if has_text(author.name) or has_text(author.email):
                return FeatureScore(score=formulas.MAX_SCORE, desc="author declared explicitly")

        for tool in doc.tools:
            if has_text(tool.name) and has_text(tool.version):
                return FeatureScore(score=formulas.MAX_SCORE, desc="author inferred from tool")
            if has_text(tool.name):
                return FeatureScore(score=5.0, desc="author inferred from tool (name only)")

        for fallback, label in ((doc.supplier, "supplier"), (doc.manufacturer, "manufacturer")):
            if fallback is not None and fallback.has_identity():
                return FeatureScore(score=formulas.MAX_SCORE, desc=f"author inferred from {label}")

        return FeatureScore(score=0.0, desc="author information missing")
