"""Licensing evaluators: presence, validity and risk of component licenses."""

from .. import formulas
from ..interfaces.evaluator import IFeatureEvaluator
from ..licenses import are_licenses_valid
from ..models.results import FeatureScore
from .base import PerComponentEvaluator


class CompWithLicenses(PerComponentEvaluator):
    label = "licenses"

    def has(self, component, doc):
        return bool(component.licenses)


class CompWithValidLicenses(PerComponentEvaluator):
    label = "valid licenses"

    def has(self, component, doc):
        return are_licenses_valid(component.licenses)


class CompWithDeclaredLicenses(PerComponentEvaluator):
    label = "declared licenses"

    def has(self, component, doc):
        return bool(component.declared_licenses)


class CompWithConcludedLicenses(PerComponentEvaluator):
    label = "concluded licenses"

    def has(self, component, doc):
        return bool(component.concluded_licenses)


class SBOMDataLicense(IFeatureEvaluator):
    def evaluate(self, doc):
        licenses = doc.spec.licenses
        if not licenses:
            return FeatureScore(score=0.0, desc="no data license", ignore=True)
        if are_licenses_valid(licenses):
            return FeatureScore(score=formulas.MAX_SCORE, desc="complete")
        return FeatureScore(score=0.0, desc="invalid data license")


class CompWithoutDeprecatedLicenses(PerComponentEvaluator):
    label = "no deprecated licenses"

    def has(self, component, doc):
        return not any(lic.deprecated for lic in component.licenses)


class CompWithoutRestrictiveLicenses(PerComponentEvaluator):
    label = "no restrictive licenses"

    def has(self, component, doc):
        return not any(lic.restrictive for lic in component.licenses)
