"""Feature evaluators, one strategy class per rule."""

from .base import NotApplicableEvaluator, PerComponentEvaluator
from .bsi import (
    CompWithDependencyRelationships,
    CompWithDownloadURL,
    CompWithSourceCodeHash,
    SBOMBomLinks,
    SBOMBuildLifecycle,
    SBOMVulnerabilities,
    SpecVersionCompliance,
)
from .completeness import (
    CompWithDependencies,
    CompWithPurpose,
    CompWithSourceCode,
    CompWithSupplier,
    SBOMCompletenessDeclared,
    SBOMPrimaryComponent,
)
from .identification import CompWithLocalID, CompWithName, CompWithVersion
from .integrity import (
    CompWithAnyChecksum,
    CompWithSHA256Plus,
    CompWithStrongChecksums,
    CompWithWeakChecksums,
    SBOMSignature,
)
from .licensing import (
    CompWithConcludedLicenses,
    CompWithDeclaredLicenses,
    CompWithLicenses,
    CompWithoutDeprecatedLicenses,
    CompWithoutRestrictiveLicenses,
    CompWithValidLicenses,
    SBOMDataLicense,
)
from .ntia import SBOMCreator, SBOMDependencyRelationships, SBOMMachineFormat
from .oct import (
    CompWithCopyright,
    CompWithFileAnalyzed,
    CompWithSpdxID,
    DocumentFieldPresent,
    SBOMCreatorOrganization,
)
from .provenance import (
    SBOMAuthors,
    SBOMCreationTimestamp,
    SBOMLifecycle,
    SBOMNamespace,
    SBOMSupplier,
    SBOMToolVersion,
)
from .structural import SBOMFileFormat, SBOMSchemaValid, SBOMSpecDeclared, SBOMSpecVersion
from .vulnerability import CompWithCPE, CompWithPURL, CompWithUniqueID

__all__ = [
    # Base
    "NotApplicableEvaluator",
    "PerComponentEvaluator",
    # Identification
    "CompWithLocalID",
    "CompWithName",
    "CompWithVersion",
    # Provenance
    "SBOMAuthors",
    "SBOMCreationTimestamp",
    "SBOMLifecycle",
    "SBOMNamespace",
    "SBOMSupplier",
    "SBOMToolVersion",
    # Integrity
    "CompWithAnyChecksum",
    "CompWithSHA256Plus",
    "CompWithStrongChecksums",
    "CompWithWeakChecksums",
    "SBOMSignature",
    # Completeness
    "CompWithDependencies",
    "CompWithPurpose",
    "CompWithSourceCode",
    "CompWithSupplier",
    "SBOMCompletenessDeclared",
    "SBOMPrimaryComponent",
    # Licensing
    "CompWithConcludedLicenses",
    "CompWithDeclaredLicenses",
    "CompWithLicenses",
    "CompWithoutDeprecatedLicenses",
    "CompWithoutRestrictiveLicenses",
    "CompWithValidLicenses",
    "SBOMDataLicense",
    # Vulnerability
    "CompWithCPE",
    "CompWithPURL",
    "CompWithUniqueID",
    # Structural
    "SBOMFileFormat",
    "SBOMSchemaValid",
    "SBOMSpecDeclared",
    "SBOMSpecVersion",
    # Profile checks
    "CompWithCopyright",
    "CompWithDependencyRelationships",
    "CompWithDownloadURL",
    "CompWithFileAnalyzed",
    "CompWithSourceCodeHash",
    "CompWithSpdxID",
    "DocumentFieldPresent",
    "SBOMBomLinks",
    "SBOMBuildLifecycle",
    "SBOMCreator",
    "SBOMCreatorOrganization",
    "SBOMDependencyRelationships",
    "SBOMMachineFormat",
    "SBOMVulnerabilities",
    "SpecVersionCompliance",
]
