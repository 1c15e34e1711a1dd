"""Checks for BSI TR-03183-2 (v1.1 and v2.0)."""

from .. import formulas
from ..interfaces.evaluator import IFeatureEvaluator
from ..models.enums import SUPPORTED_SPEC_VERSIONS
from ..models.results import FeatureScore
from .base import PerComponentEvaluator
from .helpers import has_text

# Oldest spec version each standard accepts at full credit.
MINIMUM_VERSIONS = {
    "spdx": "SPDX-2.3",
    "cyclonedx": "1.4",
}


def _version_tuple(version: str):
    digits = version.upper().replace("SPDX-", "")
    return tuple(int(p) for p in digits.split(".") if p.isdigit())


class SpecVersionCompliance(IFeatureEvaluator):
    """
    Spec version recent enough for regulatory use.

    Supported versions below the minimum earn half credit.
    """

    def evaluate(self, doc):
        spec = doc.spec.spec_name
        version = doc.spec.version.strip()
        if not spec:
            return formulas.score_missing("spec")
        if not version:
            return formulas.score_missing("version")
        if version not in SUPPORTED_SPEC_VERSIONS.get(spec, []):
            return FeatureScore(score=0.0, desc=f"unsupported spec version: {version} (spec {spec})")
        if _version_tuple(version) >= _version_tuple(MINIMUM_VERSIONS[spec]):
            return FeatureScore(score=formulas.MAX_SCORE, desc=version)
        return FeatureScore(score=5.0, desc=f"{version} is older than {MINIMUM_VERSIONS[spec]}")


class SBOMBuildLifecycle(IFeatureEvaluator):
    def evaluate(self, doc):
        if doc.is_spdx():
            return FeatureScore(score=0.0, desc=formulas.non_supported_spdx_field(), ignore=True)
        if any(p.strip().lower() == "build" for p in doc.lifecycles):
            return FeatureScore(score=formulas.MAX_SCORE, desc="lifecycle includes build")
        return FeatureScore(score=0.0, desc="no build phase in lifecycle")


class SBOMBomLinks(IFeatureEvaluator):
    def evaluate(self, doc):
        links = [ref for ref in doc.spec.external_refs if has_text(ref)]
        if not links:
            return FeatureScore(score=0.0, desc="no bom links found")
        return FeatureScore(score=formulas.MAX_SCORE, desc=f"found {len(links)} bom links")


class SBOMVulnerabilities(IFeatureEvaluator):
    """Absence of known vulnerabilities is preferred; SPDX cannot express them."""

    def evaluate(self, doc):
        if doc.is_spdx():
            return FeatureScore(score=0.0, desc=formulas.non_supported_spdx_field(), ignore=True)
        ids = [v for v in doc.vulnerabilities if has_text(v)]
        if ids:
            return FeatureScore(score=0.0, desc="vulnerabilities found: " + ", ".join(ids))
        return FeatureScore(score=formulas.MAX_SCORE, desc="no vulnerabilities found")


class CompWithDownloadURL(PerComponentEvaluator):
    label = "download URL"

    def has(self, component, doc):
        url = component.download_url.strip()
        return bool(url) and url.upper() not in ("NONE", "NOASSERTION")


class CompWithSourceCodeHash(PerComponentEvaluator):
    """Hash of the component source; CycloneDX has no field for it."""

    label = "source code hash"

    def evaluate(self, doc):
        if doc.is_cyclonedx():
            return FeatureScore(score=0.0, desc="N/A (CycloneDX)", ignore=True)
        return super().evaluate(doc)

    def has(self, component, doc):
        return has_text(component.source_code_hash)


class CompWithDependencyRelationships(PerComponentEvaluator):
    label = "dependencies"

    def has(self, component, doc):
        return component.has_dependencies() or bool(doc.direct_dependencies(component.id))
