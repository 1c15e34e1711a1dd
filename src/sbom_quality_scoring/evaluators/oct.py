"""Checks for the OpenChain Telco SBOM guide (SPDX only)."""

from .. import formulas
from ..interfaces.evaluator import IFeatureEvaluator
from .base import PerComponentEvaluator
from .helpers import has_text


class DocumentFieldPresent(IFeatureEvaluator):
    """
    Presence of a single document-level field.

    Args:
        attribute: Attribute of the document's SpecInfo to inspect.
        label: Field name used in the description.
    """

    def __init__(self, attribute: str, label: str):
        self.attribute = attribute
        self.label = label

    def evaluate(self, doc):
        if has_text(getattr(doc.spec, self.attribute, "")):
            return formulas.score_present(self.label)
        return formulas.score_missing(self.label)

    def __repr__(self) -> str:
        return f"DocumentFieldPresent({self.attribute!r})"


class CompWithSpdxID(PerComponentEvaluator):
    label = "SPDX identifiers"

    def has(self, component, doc):
        return has_text(component.spdx_id)


class CompWithFileAnalyzed(PerComponentEvaluator):
    label = "files analyzed"

    def has(self, component, doc):
        return component.file_analyzed


class CompWithCopyright(PerComponentEvaluator):
    label = "copyright"

    def has(self, component, doc):
        text = component.copyright.strip()
        return bool(text) and text.lower() not in ("none", "noassertion")


class SBOMCreatorOrganization(IFeatureEvaluator):
    """Organization named in the creation info, falling back to organization authors."""

    def evaluate(self, doc):
        if has_text(doc.spec.organization):
            return formulas.score_present("creator organization")
        if any(a.kind == "organization" and has_text(a.name) for a in doc.authors):
            return formulas.score_present("creator organization")
        return formulas.score_missing("creator organization")
