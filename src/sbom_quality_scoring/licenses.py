"""License lookup for the SBOM Quality Scoring System.

Resolves license expressions into License records carrying the metadata
the licensing rules need: which list the identifier came from, whether it
is deprecated, and whether it is a copyleft/restrictive license.

Identifiers are looked up in the ScanCode LicenseDB index bundled with
``license-expression``. Every SPDX license and exception id is listed there,
either as an entry's ``spdx_license_key`` or, for ids SPDX has deprecated,
under ``other_spdx_license_keys``.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from license_expression import ExpressionError, Licensing, get_license_index

from .models.document import License

logger = logging.getLogger(__name__)

_NOT_A_LICENSE = {"", "NONE", "NOASSERTION"}


@dataclass(frozen=True)
class _IndexEntry:
    short_id: str
    name: str
    source: str
    deprecated: bool
    restrictive: bool


def _is_restrictive_category(category: Optional[str]) -> bool:
    lowered = (category or "").lower()
    return "copyleft" in lowered or "restricted" in lowered


def _source_for(short_id: str) -> str:
    return "aboutcode" if short_id.startswith("LicenseRef-") else "spdx"


def _build_tables(index: List[dict]):
    """
    Index license entries by lower-cased identifier.

    Primary keys win over alias keys, and live entries win over entries
    ScanCode has retired.
    """
    primary: Dict[str, _IndexEntry] = {}
    alias: Dict[str, _IndexEntry] = {}

    for entry in sorted(index, key=lambda e: not e.get("is_deprecated", False)):
        name = entry.get("license_key", "")
        retired = bool(entry.get("is_deprecated", False))
        restrictive = _is_restrictive_category(entry.get("category"))

        key = entry.get("spdx_license_key")
        if key:
            primary[key.lower()] = _IndexEntry(key, name, _source_for(key), retired, restrictive)

        for other in entry.get("other_spdx_license_keys") or []:
            # Non-LicenseRef aliases are ids SPDX keeps only as deprecated.
            deprecated = retired or not other.startswith("LicenseRef-")
            alias[other.lower()] = _IndexEntry(other, name, _source_for(other), deprecated, restrictive)

    logger.debug(f"Loaded {len(primary)} license ids and {len(alias)} aliases")
    return primary, alias


_PRIMARY, _ALIAS = _build_tables(get_license_index())

_licensing = Licensing()


def is_license_text(value: Optional[str]) -> bool:
    """Whether a string names a license at all (NONE/NOASSERTION do not)."""
    if value is None:
        return False
    return value.strip().upper() not in _NOT_A_LICENSE


def _find(ident: str) -> Optional[_IndexEntry]:
    lowered = ident.lower()
    return _PRIMARY.get(lowered) or _ALIAS.get(lowered)


def lookup_license(identifier: str) -> Optional[License]:
    """
    Resolve a single license identifier against the license index.

    A trailing "+" is tolerated. Returns None for unknown identifiers.
    """
    if not is_license_text(identifier):
        return None
    ident = identifier.strip()
    entry = _find(ident) or _find(ident.rstrip("+"))
    if entry is None:
        return None
    return License(
        short_id=entry.short_id,
        name=entry.name or entry.short_id,
        source=entry.source,
        deprecated=entry.deprecated,
        restrictive=entry.restrictive,
    )


def custom_license(identifier: str, name: Optional[str] = None) -> License:
    return License(short_id=identifier, name=name or identifier, source="custom")


def split_expression(expression: str) -> List[str]:
    """
    Identifiers referenced by an SPDX license expression, in order.

    Raises:
        ExpressionError: If the expression cannot be parsed.
    """
    return _licensing.license_keys(expression, unique=False)


def lookup_expression(expression: Optional[str], custom: Iterable[License] = ()) -> List[License]:
    """
    Resolve every identifier of a license expression.

    Identifiers not in the license index are matched against ``custom``
    (e.g. LicenseRef- declarations of the document) and otherwise kept as
    custom licenses. An expression that does not parse becomes a single
    custom license.
    """
    if not is_license_text(expression):
        return []

    try:
        idents = split_expression(expression)
    except ExpressionError as e:
        logger.debug(f"Unparseable license expression '{expression}': {e}")
        return [custom_license(expression.strip())]

    custom_by_id = {lic.short_id: lic for lic in custom}
    result: List[License] = []
    for ident in idents:
        if not is_license_text(ident):
            continue
        found = lookup_license(ident)
        if found is None:
            found = custom_by_id.get(ident) or custom_license(ident)
        result.append(found)
    return result


def are_licenses_valid(licenses: List[License]) -> bool:
    """
    Whether every license comes from a known list or is a LicenseRef-.

    An empty list is not valid.
    """
    if not licenses:
        return False
    for lic in licenses:
        if lic.source in ("spdx", "aboutcode"):
            continue
        if lic.source == "custom" and (
            lic.short_id.startswith("LicenseRef-") or lic.name.startswith("LicenseRef-")
        ):
            continue
        return False
    return True
