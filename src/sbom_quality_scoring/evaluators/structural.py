"""Structural evaluators: can the document be processed by automation."""

from .. import formulas
from ..interfaces.evaluator import IFeatureEvaluator
from ..models.enums import SUPPORTED_FILE_FORMATS, SUPPORTED_SPEC_VERSIONS, SUPPORTED_SPECS
from ..models.results import FeatureScore


class SBOMSpecDeclared(IFeatureEvaluator):
    def evaluate(self, doc):
        spec = doc.spec.spec_name
        if not spec:
            return formulas.score_missing("spec")
        if spec in SUPPORTED_SPECS:
            return FeatureScore(score=formulas.MAX_SCORE, desc=spec)
        return FeatureScore(score=0.0, desc=f"unsupported spec: {spec}")


class SBOMSpecVersion(IFeatureEvaluator):
    def evaluate(self, doc):
        spec = doc.spec.spec_name
        version = doc.spec.version.strip()
        if not spec:
            return formulas.score_missing("spec")
        if not version:
            return formulas.score_missing("version")
        if version in SUPPORTED_SPEC_VERSIONS.get(spec, []):
            return FeatureScore(score=formulas.MAX_SCORE, desc=version)
        return FeatureScore(score=0.0, desc=f"unsupported spec version: {version} (spec {spec})")


class SBOMFileFormat(IFeatureEvaluator):
    """File format supported for the declared spec (SPDX tag-value, CycloneDX XML, ...)."""

    def evaluate(self, doc):
        spec = doc.spec.spec_name
        file_format = doc.spec.file_format.strip().lower()
        if not spec:
            return formulas.score_missing("spec")
        if not file_format:
            return formulas.score_missing("file format")
        if file_format in SUPPORTED_FILE_FORMATS.get(spec, []):
            return FeatureScore(score=formulas.MAX_SCORE, desc=file_format)
        return FeatureScore(score=0.0, desc=f"unsupported file format: {file_format} (spec {spec})")


class SBOMSchemaValid(IFeatureEvaluator):
    def evaluate(self, doc):
        if doc.schema_valid:
            return FeatureScore(score=formulas.MAX_SCORE, desc="schema valid")
        return FeatureScore(score=0.0, desc="schema invalid")
