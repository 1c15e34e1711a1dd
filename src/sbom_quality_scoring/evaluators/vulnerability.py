"""Vulnerability and traceability evaluators."""

from .base import PerComponentEvaluator
from .helpers import valid_cpes, valid_purls


class CompWithPURL(PerComponentEvaluator):
    label = "PURL"

    def has(self, component, doc):
        return bool(valid_purls(component))


class CompWithCPE(PerComponentEvaluator):
    label = "CPE"

    def has(self, component, doc):
        return bool(valid_cpes(component))


class CompWithUniqueID(PerComponentEvaluator):
    """Globally resolvable identifier: a valid PURL or CPE."""

    label = "unique identifiers"

    def has(self, component, doc):
        return bool(valid_purls(component) or valid_cpes(component))
