"""Provenance evaluators: who made the document, when, and with what."""

from .. import formulas
from ..interfaces.evaluator import IFeatureEvaluator
from ..models.enums import CYCLONEDX_LIFECYCLE_PHASES
from ..models.results import FeatureScore
from .helpers import has_legal_author, has_text, is_rfc3339, tool_summary


class SBOMCreationTimestamp(IFeatureEvaluator):
    """Creation time present and RFC 3339 formatted."""

    def evaluate(self, doc):
        ts = doc.spec.creation_timestamp.strip()
        if not ts:
            return formulas.score_missing("timestamp")
        if not is_rfc3339(ts):
            return FeatureScore(score=0.0, desc=f"invalid timestamp: {ts}")
        return FeatureScore(score=formulas.MAX_SCORE, desc=ts)


class SBOMAuthors(IFeatureEvaluator):
    def evaluate(self, doc):
        if has_legal_author(doc):
            return FeatureScore(score=formulas.MAX_SCORE, desc="complete")
        return formulas.score_missing("author")


class SBOMToolVersion(IFeatureEvaluator):
    """
    Generating tool with name and version.

    A tool carrying only its name earns half credit.
    """

    def evaluate(self, doc):
        if not doc.tools:
            return formulas.score_missing("tool")

        complete, missing_version, missing_name = tool_summary(doc.tools)
        if complete:
            return FeatureScore(score=formulas.MAX_SCORE, desc="complete")
        if missing_version:
            return FeatureScore(score=5.0, desc=f"add version to {missing_version} tools")
        if missing_name:
            return FeatureScore(score=0.0, desc=f"add name to {missing_name} tools")
        return FeatureScore(score=0.0, desc="add tool")


class SBOMSupplier(IFeatureEvaluator):
    """Document-level supplier; SPDX has no such field."""

    def evaluate(self, doc):
        if doc.is_spdx():
            return FeatureScore(score=0.0, desc=formulas.non_supported_spdx_field())
        if doc.is_cyclonedx():
            supplier = doc.supplier
            if supplier is not None and (has_text(supplier.name) or supplier.has_contact()):
                return FeatureScore(score=formulas.MAX_SCORE, desc="complete")
            return formulas.score_missing("supplier")
        return FeatureScore(score=0.0, desc=formulas.unknown_spec(), ignore=True)


class SBOMNamespace(IFeatureEvaluator):
    """SPDX document namespace or CycloneDX serial number."""

    def evaluate(self, doc):
        if not (doc.is_spdx() or doc.is_cyclonedx()):
            return FeatureScore(score=0.0, desc=formulas.unknown_spec(), ignore=True)
        if has_text(doc.spec.uri):
            return formulas.score_present("namespace")
        return formulas.score_missing("namespace")


class SBOMLifecycle(IFeatureEvaluator):
    def evaluate(self, doc):
        if doc.is_spdx():
            return FeatureScore(score=0.0, desc=formulas.non_supported_spdx_field())
        if not doc.is_cyclonedx():
            return FeatureScore(score=0.0, desc=formulas.unknown_spec(), ignore=True)

        if not doc.lifecycles:
            return formulas.score_missing("lifecycle")
        phases = [p.strip().lower() for p in doc.lifecycles]
        valid = [p for p in phases if p in CYCLONEDX_LIFECYCLE_PHASES]
        if valid:
            return FeatureScore(score=formulas.MAX_SCORE, desc=", ".join(valid))
        return FeatureScore(score=0.0, desc="invalid lifecycle phase")
