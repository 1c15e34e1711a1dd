"""Default rule registry.

Declares every comprehensive category and feature, the profile feature
namespace, the compliance profiles and the accepted name aliases, and
assembles them into a Catalog.
"""

from typing import List, Tuple

from .. import evaluators as ev
from .catalog import Catalog
from .specs import CategorySpec, FeatureSpec, ProfileFeatureSpec, ProfileItem, ProfileSpec

# =========================================================================
# Comprehensive categories
# =========================================================================

_THREAT_INTEL_NA = "N/A (requires external threat intelligence)"

# (key, name, weight, description, informational, [(feature key, name, weight, evaluator)])
_CATEGORY_TABLE = [
    (
        "identification", "Identification", 10.0,
        "Identification of components is critical for understanding supply chain metadata",
        False,
        [
            ("comp_with_name", "Component With Name", 0.40, ev.CompWithName()),
            ("comp_with_version", "Component With Version", 0.35, ev.CompWithVersion()),
            ("comp_with_identifiers", "Component With Local IDs", 0.25, ev.CompWithLocalID()),
        ],
    ),
    (
        "provenance", "Provenance", 12.0,
        "Enables trust and audit trails",
        False,
        [
            ("sbom_creation_timestamp", "Document Creation Time", 0.20, ev.SBOMCreationTimestamp()),
            ("sbom_authors", "Document Authors", 0.20, ev.SBOMAuthors()),
            ("sbom_tool_version", "Document Creator Tool & Version", 0.20, ev.SBOMToolVersion()),
            ("sbom_supplier", "Document Supplier", 0.15, ev.SBOMSupplier()),
            ("sbom_namespace", "Document URI/Namespace", 0.15, ev.SBOMNamespace()),
            ("sbom_lifecycle", "Document Lifecycle", 0.10, ev.SBOMLifecycle()),
        ],
    ),
    (
        "integrity", "Integrity", 15.0,
        "Allows for verification if artifacts were altered",
        False,
        [
            ("comp_with_strong_checksums", "Component With Strong Checksums", 0.50, ev.CompWithStrongChecksums()),
            ("comp_with_weak_checksums", "Component With Weak Checksums", 0.40, ev.CompWithWeakChecksums()),
            ("sbom_signature", "Document Signature", 0.10, ev.SBOMSignature()),
        ],
    ),
    (
        "completeness", "Completeness", 12.0,
        "Allows for vulnerability and impact analysis",
        False,
        [
            ("comp_with_dependencies", "Component With Dependencies", 0.25, ev.CompWithDependencies()),
            ("sbom_completeness_declared", "Component With Declared Completeness", 0.15, ev.SBOMCompletenessDeclared()),
            ("sbom_primary_component", "Primary Component", 0.20, ev.SBOMPrimaryComponent()),
            ("comp_with_source_code", "Component With Source Code", 0.15, ev.CompWithSourceCode()),
            ("comp_with_supplier", "Component With Supplier", 0.15, ev.CompWithSupplier()),
            ("comp_with_purpose", "Component With Primary Purpose", 0.10, ev.CompWithPurpose()),
        ],
    ),
    (
        "licensing_and_compliance", "Licensing", 15.0,
        "Determines redistribution rights and legal compliance",
        False,
        [
            ("comp_with_licenses", "Components With Licenses", 0.20, ev.CompWithLicenses()),
            ("comp_with_valid_licenses", "Component With Valid Licenses", 0.20, ev.CompWithValidLicenses()),
            ("comp_with_declared_licenses", "Component With Original Licenses", 0.15, ev.CompWithDeclaredLicenses()),
            ("sbom_data_license", "Document Data License", 0.10, ev.SBOMDataLicense()),
            ("comp_no_deprecated_licenses", "Component Without Deprecated Licenses", 0.15, ev.CompWithoutDeprecatedLicenses()),
            ("comp_no_restrictive_licenses", "Component Without Restrictive Licenses", 0.20, ev.CompWithoutRestrictiveLicenses()),
        ],
    ),
    (
        "vulnerability_and_traceability", "Vulnerability", 10.0,
        "Ability to map components to vulnerability databases",
        False,
        [
            ("comp_with_purl", "Component With PURL", 0.50, ev.CompWithPURL()),
            ("comp_with_cpe", "Component With CPE", 0.50, ev.CompWithCPE()),
        ],
    ),
    (
        "structural", "Structural", 8.0,
        "If a BOM can't be reliably parsed, all downstream automation fails",
        False,
        [
            ("sbom_spec_declared", "SBOM Spec", 0.30, ev.SBOMSpecDeclared()),
            ("sbom_spec_version", "SBOM Spec Version", 0.30, ev.SBOMSpecVersion()),
            ("sbom_file_format", "SBOM File Format", 0.20, ev.SBOMFileFormat()),
            ("sbom_schema_valid", "Schema Validation", 0.20, ev.SBOMSchemaValid()),
        ],
    ),
    (
        "compinfo", "Component Quality (Info)", 0.0,
        "Component risk based on external threat intelligence; informational only",
        True,
        [
            ("comp_eol_eos", "Component No Longer Maintained or Declared EOL", 0.10, ev.NotApplicableEvaluator(_THREAT_INTEL_NA)),
            ("comp_malicious", "Component Tagged as Malicious", 0.30, ev.NotApplicableEvaluator(_THREAT_INTEL_NA)),
            ("comp_vuln_sev_critical", "Component With Critical Vulnerabilities", 0.30, ev.NotApplicableEvaluator(_THREAT_INTEL_NA)),
            ("comp_kev", "Component Actively Exploited (KEV)", 0.30, ev.NotApplicableEvaluator(_THREAT_INTEL_NA)),
            ("comp_purl_valid", "Component PURL Resolves", 0.30, ev.NotApplicableEvaluator(_THREAT_INTEL_NA)),
            ("comp_cpe_valid", "Component CPE Found in NVD", 0.30, ev.NotApplicableEvaluator(_THREAT_INTEL_NA)),
        ],
    ),
]

CATEGORY_ALIASES = {
    "licensing": "licensing_and_compliance",
    "licensingandcompliance": "licensing_and_compliance",
    "vulnerability": "vulnerability_and_traceability",
    "vulnerabilityandtraceability": "vulnerability_and_traceability",
    "componentquality(info)": "compinfo",
    "component_quality_info": "compinfo",
    "componentquality": "compinfo",
}

FEATURE_ALIASES = {
    "comp_with_ids": "comp_with_identifiers",
    "compwithpurl": "comp_with_purl",
    "compwithcpe": "comp_with_cpe",
    "sbomwithspec": "sbom_spec_declared",
    "sbomspecversion": "sbom_spec_version",
    "sbomfileformat": "sbom_file_format",
    "sbomschemavalid": "sbom_schema_valid",
    "comp_with_checksums": "comp_with_strong_checksums",
    "comp_with_sha256": "comp_with_strong_checksums",
    "primary_component": "sbom_primary_component",
}

# =========================================================================
# Profile feature namespace
# =========================================================================

# One evaluator per key, shared by every profile listing the key.
_PROFILE_FEATURE_TABLE = [
    # Document
    ("sbom_spec", "SBOM Spec", ev.SBOMSpecDeclared()),
    ("sbom_spec_declared", "SBOM Spec", ev.SBOMSpecDeclared()),
    ("sbom_spec_version", "SBOM Spec Version", ev.SpecVersionCompliance()),
    ("sbom_file_format", "SBOM File Format", ev.SBOMFileFormat()),
    ("sbom_schema_valid", "SBOM Schema", ev.SBOMSchemaValid()),
    ("sbom_machine_format", "Automation Support", ev.SBOMMachineFormat()),
    ("sbom_timestamp", "SBOM Timestamp", ev.SBOMCreationTimestamp()),
    ("sbom_authors", "SBOM Authors", ev.SBOMAuthors()),
    ("sbom_creator", "SBOM Creator", ev.SBOMCreator()),
    ("sbom_tool", "SBOM Creation Tool", ev.SBOMToolVersion()),
    ("sbom_supplier", "SBOM Supplier", ev.SBOMSupplier()),
    ("sbom_namespace", "SBOM Namespace", ev.SBOMNamespace()),
    ("sbom_uri", "URI/Namespace", ev.SBOMNamespace()),
    ("sbom_lifecycle", "SBOM Lifecycle", ev.SBOMLifecycle()),
    ("sbom_build", "Build Information", ev.SBOMBuildLifecycle()),
    ("sbom_signature", "SBOM Signature", ev.SBOMSignature()),
    ("sbom_dependencies", "Dependency Relationships", ev.SBOMDependencyRelationships()),
    ("sbom_depth", "SBOM Depth", ev.SBOMDependencyRelationships()),
    ("sbom_completeness", "SBOM Completeness", ev.SBOMCompletenessDeclared()),
    ("sbom_primary_component", "Primary Component", ev.SBOMPrimaryComponent()),
    ("sbom_data_license", "SBOM Data License", ev.SBOMDataLicense()),
    ("sbom_bomlinks", "External References", ev.SBOMBomLinks()),
    ("sbom_vulnerabilities", "Vulnerability Info", ev.SBOMVulnerabilities()),
    ("sbom_spdxid", "SPDX ID", ev.DocumentFieldPresent("spdx_id", "spdxid")),
    ("sbom_name", "Document Name", ev.DocumentFieldPresent("name", "sbom name")),
    ("sbom_comment", "Document Comment", ev.DocumentFieldPresent("comment", "creator comment")),
    ("sbom_organization", "Creator Organization", ev.SBOMCreatorOrganization()),
    # Components
    ("comp_name", "Component Name", ev.CompWithName()),
    ("comp_version", "Component Version", ev.CompWithVersion()),
    ("comp_local_id", "Component Local IDs", ev.CompWithLocalID()),
    ("comp_uniq_id", "Component Other Identifiers", ev.CompWithUniqueID()),
    ("comp_checksums", "Component Checksum", ev.CompWithAnyChecksum()),
    ("comp_sha256", "Component Checksum SHA256", ev.CompWithSHA256Plus()),
    ("comp_hash", "Component Hash", ev.CompWithAnyChecksum()),
    ("comp_hash_sha256", "SHA-256 Checksums", ev.CompWithSHA256Plus()),
    ("comp_dependencies", "Component Dependencies", ev.CompWithDependencies()),
    ("comp_depth", "Component Dependencies", ev.CompWithDependencyRelationships()),
    ("comp_source_code", "Component Source Code", ev.CompWithSourceCode()),
    ("comp_source_code_url", "Component Source URL", ev.CompWithSourceCode()),
    ("comp_download_url", "Component Download URL", ev.CompWithDownloadURL()),
    ("comp_source_hash", "Component Source Hash", ev.CompWithSourceCodeHash()),
    ("comp_supplier", "Component Supplier", ev.CompWithSupplier()),
    ("comp_purpose", "Component Type", ev.CompWithPurpose()),
    ("comp_licenses", "Component License", ev.CompWithLicenses()),
    ("comp_license", "Component License", ev.CompWithValidLicenses()),
    ("comp_valid_licenses", "Component Valid License", ev.CompWithValidLicenses()),
    ("comp_associated_license", "License Validation", ev.CompWithValidLicenses()),
    ("comp_declared_licenses", "Component Declared License", ev.CompWithDeclaredLicenses()),
    ("comp_no_deprecated_licenses", "Component With No Deprecated License", ev.CompWithoutDeprecatedLicenses()),
    ("comp_no_restrictive_licenses", "Component With No Restrictive License", ev.CompWithoutRestrictiveLicenses()),
    ("comp_purl", "Component PURL", ev.CompWithPURL()),
    ("comp_cpe", "Component CPE", ev.CompWithCPE()),
    # SPDX packages
    ("pack_name", "Package Name", ev.CompWithName()),
    ("pack_version", "Package Version", ev.CompWithVersion()),
    ("pack_spdxid", "Package SPDXID", ev.CompWithSpdxID()),
    ("pack_download_url", "Package Download Location", ev.CompWithDownloadURL()),
    ("pack_file_analyzed", "Package Analyzed", ev.CompWithFileAnalyzed()),
    ("pack_license_con", "Package License Concluded", ev.CompWithConcludedLicenses()),
    ("pack_license_dec", "Package License Declared", ev.CompWithDeclaredLicenses()),
    ("pack_copyright", "Package Copyright", ev.CompWithCopyright()),
]

# =========================================================================
# Profiles
# =========================================================================

R, O = True, False

# (key, name, description, [(feature key, required, item name, item description)])
_PROFILE_TABLE = [
    (
        "interlynk", "Interlynk Profile", "Interlynk Default Scoring Profile",
        [
            ("comp_name", R, "Component Name", "components with name"),
            ("comp_version", R, "Component Version", "components with version"),
            ("comp_local_id", R, "Component Local IDs", "components with local identifiers"),
            ("sbom_timestamp", R, "SBOM Creation Time", "Document creation time"),
            ("sbom_authors", R, "SBOM Authors", "Document authors"),
            ("sbom_tool", R, "SBOM Creation Tool", "Document creator tool & version"),
            ("sbom_supplier", R, "SBOM Supplier", "Document supplier"),
            ("sbom_namespace", R, "SBOM Namespace", "Document URI/namespace"),
            ("sbom_lifecycle", R, "SBOM Lifecycle", "Document lifecycle"),
            ("comp_checksums", R, "Component Checksum", "components with checksums"),
            ("comp_sha256", R, "Component Checksum SHA256", "components with SHA-256+"),
            ("sbom_signature", R, "SBOM Signature", "Document signature"),
            ("comp_dependencies", R, "Component Dependencies", "components with dependencies"),
            ("sbom_completeness", R, "SBOM Completeness", "components with declared completeness"),
            ("sbom_primary_component", R, "Primary Component", "Primary component identified"),
            ("comp_source_code", R, "Component Source Code", "components with source code"),
            ("comp_supplier", R, "Component Supplier", "components with supplier"),
            ("comp_purpose", R, "Component Type", "components with primary purpose"),
            ("comp_licenses", R, "Component License", "components with licenses"),
            ("comp_valid_licenses", R, "Component Valid License", "components with valid licenses"),
            ("comp_declared_licenses", R, "Component Declared License", "components with original licenses"),
            ("sbom_data_license", R, "SBOM Data License", "Document data license"),
            ("comp_no_deprecated_licenses", R, "Component With No Deprecated License", "components without deprecated licenses"),
            ("comp_no_restrictive_licenses", R, "Component With No Restrictive License", "components without restrictive licenses"),
            ("comp_purl", R, "Component PURL", "components with PURL"),
            ("comp_cpe", R, "Component CPE", "components with CPE"),
            ("sbom_spec_declared", R, "SBOM Spec", "SBOM spec declared"),
            ("sbom_spec_version", R, "SBOM Spec Version", "SBOM spec version"),
            ("sbom_file_format", R, "SBOM File Format", "SBOM file format"),
            ("sbom_schema_valid", R, "SBOM Schema", "Schema validation"),
        ],
    ),
    (
        "ntia", "NTIA Minimum Elements", "NTIA Minimum Elements Profile",
        [
            ("sbom_machine_format", R, "Automation Support", "Valid spec (SPDX/CycloneDX) and format (JSON/XML)"),
            ("comp_name", R, "Component Name", "All components must have names"),
            ("comp_version", R, "Component Version", "Version strings for all components"),
            ("comp_uniq_id", R, "Component Other Identifiers", "PURL, CPE, or other unique IDs"),
            ("sbom_dependencies", R, "Dependency Relationships", "Component dependency mapping"),
            ("sbom_creator", R, "SBOM Author", "Tool or person who created SBOM"),
            ("sbom_timestamp", R, "SBOM Timestamp", "ISO 8601 creation timestamp"),
        ],
    ),
]

_BSI_V11_ITEMS = [
    ("sbom_spec", R, "SBOM Formats", "SPDX or CycloneDX"),
    ("sbom_spec_version", R, "SBOM Spec Version", "Valid supported version"),
    ("sbom_build", O, "Build Information", "Build phase indication"),
    ("sbom_depth", R, "SBOM Depth", "Complete dependency tree"),
    ("sbom_creator", R, "Creator Info", "Contact email/URL"),
    ("sbom_timestamp", R, "Creation Time", "Valid timestamp (ISO-8601)"),
    ("sbom_uri", R, "URI/Namespace", "Unique SBOM identifier"),
    ("comp_name", R, "Component Name", "All components named"),
    ("comp_version", R, "Component Version", "Version for each component"),
    ("comp_license", R, "Component License", "License information"),
    ("comp_hash", R, "Component Hash", "Checksums for components"),
    ("comp_source_code_url", O, "Component Source URL", "Source code repository"),
    ("comp_download_url", R, "Component Download URL", "Where to obtain component"),
    ("comp_source_hash", O, "Component Source Hash", "Hash of source code"),
    ("comp_depth", R, "Component Dependencies", "Dependency relationships"),
]

_BSI_V20_ITEMS = _BSI_V11_ITEMS + [
    ("sbom_signature", R, "Digital Signature", "Signature over the SBOM"),
    ("sbom_bomlinks", O, "External References", "Links to other SBOMs"),
    ("sbom_vulnerabilities", O, "Vulnerability Info", "Known vulnerabilities (absence preferred)"),
    ("comp_hash_sha256", R, "SHA-256 Checksums", "SHA-256 or stronger required"),
    ("comp_associated_license", R, "License Validation", "Valid SPDX license identifiers"),
]

_PROFILE_TABLE += [
    ("bsi-v1.1", "BSI TR-03183-2 v1.1", "BSI TR-03183-2 v1.1 Profile", _BSI_V11_ITEMS),
    ("bsi-v2.0", "BSI TR-03183-2 v2.0", "BSI TR-03183-2 v2.0 Profile", _BSI_V20_ITEMS),
    (
        "oct", "OpenChain Telco (OCT)", "OpenChain Telco (OCT) Profile",
        [
            ("sbom_spec", R, "SBOM Format", "Must be SPDX"),
            ("sbom_spec_version", R, "Spec Version", "SPDX version"),
            ("sbom_spdxid", R, "SPDX ID", "Document SPDXID"),
            ("sbom_name", R, "Document Name", "SBOM name"),
            ("sbom_comment", O, "Document Comment", "Additional info"),
            ("sbom_organization", R, "Creator Organization", "Organization info"),
            ("sbom_tool", R, "Creator Tool", "Tool name & version"),
            ("sbom_namespace", R, "Document Namespace", "Unique namespace"),
            ("sbom_data_license", R, "Data License", "CC0-1.0 or similar"),
            ("pack_name", R, "Package Name", "All packages named"),
            ("pack_version", R, "Package Version", "Package versions"),
            ("pack_spdxid", R, "Package SPDXID", "Unique SPDX IDs"),
            ("pack_download_url", O, "Package Download Location", "Where to get package"),
            ("pack_file_analyzed", O, "Package Analyzed", "File analysis status"),
            ("pack_license_con", R, "Package License Concluded", "Concluded license"),
            ("pack_license_dec", R, "Package License Declared", "Declared license"),
            ("pack_copyright", R, "Package Copyright", "Copyright text"),
        ],
    ),
]

PROFILE_ALIASES = {
    "nita-minimum-elements": "ntia",
    "ntia-minimum-elements": "ntia",
    "bsi": "bsi-v1.1",
    "bsi-v1_1": "bsi-v1.1",
    "bsi-v2_0": "bsi-v2.0",
    "openchain-telco": "oct",
}

DEFAULT_PROFILES = ["interlynk", "ntia", "bsi-v1.1"]

# Profiles that only make sense for SPDX documents.
SPDX_ONLY_PROFILES = frozenset({"oct"})


def _build_comprehensive() -> Tuple[List[FeatureSpec], List[CategorySpec]]:
    features = []
    categories = []
    for key, name, weight, description, informational, rows in _CATEGORY_TABLE:
        for f_key, f_name, f_weight, evaluator in rows:
            features.append(FeatureSpec(key=f_key, name=f_name, weight=f_weight, evaluator=evaluator))
        categories.append(CategorySpec(
            key=key,
            name=name,
            weight=weight,
            feature_keys=tuple(row[0] for row in rows),
            description=description,
            informational=informational,
        ))
    return features, categories


def _build_profiles() -> Tuple[List[ProfileFeatureSpec], List[ProfileSpec]]:
    profile_features = [
        ProfileFeatureSpec(key=key, name=name, evaluator=evaluator)
        for key, name, evaluator in _PROFILE_FEATURE_TABLE
    ]
    profiles = [
        ProfileSpec(
            key=key,
            name=name,
            description=description,
            items=tuple(
                ProfileItem(key=f_key, required=required, name=f_name, description=f_desc)
                for f_key, required, f_name, f_desc in rows
            ),
        )
        for key, name, description, rows in _PROFILE_TABLE
    ]
    return profile_features, profiles


def build_default_catalog() -> Catalog:
    """
    Build the catalog holding every built-in rule.

    Returns:
        A fresh, immutable Catalog. Callers typically build it once and
        share it between scoring runs.
    """
    features, categories = _build_comprehensive()
    profile_features, profiles = _build_profiles()
    return Catalog(
        features=features,
        categories=categories,
        profile_features=profile_features,
        profiles=profiles,
        category_aliases=CATEGORY_ALIASES,
        feature_aliases=FEATURE_ALIASES,
        profile_aliases=PROFILE_ALIASES,
        default_profiles=DEFAULT_PROFILES,
    )
