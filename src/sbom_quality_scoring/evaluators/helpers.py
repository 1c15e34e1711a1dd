"""Field checks shared by comprehensive and profile evaluators."""

import re
from datetime import datetime
from typing import Iterable, List, Optional

from ..models.document import Checksum, Component, SBOMDocument, Tool

STRONG_CHECKSUMS = {"SHA224", "SHA256", "SHA384", "SHA512", "BLAKE3"}
STRONG_CHECKSUM_PREFIXES = ("SHA3", "BLAKE2B", "STREEBOG")
WEAK_CHECKSUMS = {"MD2", "MD4", "MD5", "MD6", "SHA1", "ADLER32"}
SHA256_PLUS = {"SHA256", "SHA384", "SHA512"}

_RFC3339 = re.compile(
    r"^\d{4}-\d{2}-\d{2}[Tt]\d{2}:\d{2}:\d{2}(\.\d+)?([Zz]|[+-]\d{2}:\d{2})$"
)
_PURL = re.compile(r"^pkg:[A-Za-z.+-][A-Za-z0-9.+-]*/.+")
_CPE22 = re.compile(r"^cpe:/[aho]?(:[^:]*){0,6}$")


def normalize_algorithm(algorithm: str) -> str:
    """Upper-case an algorithm name and drop separators (``sha-256`` -> ``SHA256``)."""
    return algorithm.strip().upper().replace("-", "").replace("_", "")


def is_strong_checksum(algorithm: str) -> bool:
    algo = normalize_algorithm(algorithm)
    return algo in STRONG_CHECKSUMS or algo.startswith(STRONG_CHECKSUM_PREFIXES)


def is_weak_checksum(algorithm: str) -> bool:
    return normalize_algorithm(algorithm) in WEAK_CHECKSUMS


def is_sha256_plus(algorithm: str) -> bool:
    return normalize_algorithm(algorithm) in SHA256_PLUS


def is_any_sha(algorithm: str) -> bool:
    """SHA family or MD5, the hashes BSI accepts for component integrity."""
    algo = normalize_algorithm(algorithm)
    return algo.startswith("SHA") or algo == "MD5"


def has_checksum(checksums: Iterable[Checksum], predicate) -> bool:
    return any(c.content.strip() and predicate(c.algorithm) for c in checksums)


def is_rfc3339(value: str) -> bool:
    """
    Check a timestamp against RFC 3339.

    Fractional seconds are optional; an offset or ``Z`` is mandatory.
    """
    value = value.strip()
    if not _RFC3339.match(value):
        return False
    # Fractions are dropped: fromisoformat only takes 3 or 6 digits before 3.11.
    normalized = re.sub(r"\.\d+", "", value.upper()).replace("Z", "+00:00")
    try:
        datetime.fromisoformat(normalized)
    except ValueError:
        return False
    return True


def is_valid_purl(value: str) -> bool:
    return bool(_PURL.match(value.strip()))


def is_valid_cpe(value: str) -> bool:
    """Accept CPE 2.3 formatted strings (13 fields) and CPE 2.2 URIs."""
    value = value.strip()
    if value.startswith("cpe:2.3:"):
        return len(re.split(r"(?<!\\):", value)) == 13
    return bool(_CPE22.match(value))


def valid_purls(component: Component) -> List[str]:
    return [p for p in component.purls if is_valid_purl(p)]


def valid_cpes(component: Component) -> List[str]:
    return [c for c in component.cpes if is_valid_cpe(c)]


def tool_summary(tools: List[Tool]):
    """
    Count complete, name-only and version-only tool entries.

    Returns:
        Tuple of (complete, missing_version, missing_name).
    """
    complete = missing_version = missing_name = 0
    for tool in tools:
        name = tool.name.strip()
        version = tool.version.strip()
        if name and version:
            complete += 1
        elif name:
            missing_version += 1
        elif version:
            missing_name += 1
    return complete, missing_version, missing_name


def has_legal_author(doc: SBOMDocument) -> bool:
    """Any author identified by name, e-mail or phone."""
    return any(
        a.name.strip() or a.email.strip() or a.phone.strip()
        for a in doc.authors
    )


def has_text(value: Optional[str]) -> bool:
    return bool(value and value.strip())
