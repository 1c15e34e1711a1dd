"""Identification evaluators: can every component be told apart."""

from .base import PerComponentEvaluator
from .helpers import has_text


class CompWithName(PerComponentEvaluator):
    label = "name"

    def has(self, component, doc):
        return has_text(component.name)


class CompWithVersion(PerComponentEvaluator):
    label = "version"

    def has(self, component, doc):
        return has_text(component.version)


class CompWithLocalID(PerComponentEvaluator):
    """Components carrying a document-local identifier (bom-ref / SPDXID)."""

    label = "local identifiers"

    def has(self, component, doc):
        return has_text(component.id)
