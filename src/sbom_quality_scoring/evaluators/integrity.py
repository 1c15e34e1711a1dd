"""Integrity evaluators: checksums and document signatures."""

from .. import formulas
from ..interfaces.evaluator import IFeatureEvaluator
from ..models.results import FeatureScore
from .base import PerComponentEvaluator
from .helpers import has_checksum, has_text, is_any_sha, is_sha256_plus, is_strong_checksum


class CompWithStrongChecksums(PerComponentEvaluator):
    label = "strong checksums"

    def has(self, component, doc):
        return has_checksum(component.checksums, is_strong_checksum)


class CompWithWeakChecksums(IFeatureEvaluator):
    """
    Share of checksummed components that do not rely on weak hashes alone.

    Components without any checksum are not counted here; they are already
    penalized by the strong checksum rule.
    """

    def evaluate(self, doc):
        comps = doc.components
        if not comps:
            return formulas.score_comp_na()

        checksummed = [c for c in comps if has_checksum(c.checksums, lambda _: True)]
        if not checksummed:
            return FeatureScore(score=0.0, desc="no checksums found")

        strong = sum(1 for c in checksummed if has_checksum(c.checksums, is_strong_checksum))
        return formulas.score_comp_full(strong, len(checksummed), "strong checksums")


class CompWithSHA256Plus(PerComponentEvaluator):
    label = "SHA-256+ checksums"

    def has(self, component, doc):
        return has_checksum(component.checksums, is_sha256_plus)


class CompWithAnyChecksum(PerComponentEvaluator):
    label = "checksums"

    def has(self, component, doc):
        return has_checksum(component.checksums, is_any_sha)


class SBOMSignature(IFeatureEvaluator):
    """
    Document signature with verification material.

    Only the presence of signature parts is graded; the signature itself
    is not cryptographically verified.
    """

    def evaluate(self, doc):
        if doc.is_spdx():
            return FeatureScore(score=0.0, desc=formulas.non_supported_spdx_field(), ignore=True)

        sig = doc.signature
        if sig is None:
            return formulas.score_missing("signature")
        if not (has_text(sig.algorithm) and has_text(sig.value)):
            return FeatureScore(score=0.0, desc="incomplete signature")
        if not (has_text(sig.public_key) or sig.certificate_path):
            return FeatureScore(score=5.0, desc="signature without public key or certificate")
        return FeatureScore(score=formulas.MAX_SCORE, desc="complete")
