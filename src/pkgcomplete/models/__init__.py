from __future__ import annotations

from pkgcomplete.models.lookup import NamespaceFailure, PackageInfo, PackageMatch, PrefetchReport
from pkgcomplete.models.record import (
    ABSENT,
    UNKNOWN,
    Absent,
    FieldValue,
    PackageRecord,
    Present,
    Unknown,
    from_optional,
)
from pkgcomplete.models.registry import (
    PackageSummary,
    PackageVersionDescription,
    PackageVersions,
    RegistryTarget,
)

__all__ = [
    # record
    "PackageRecord",
    "FieldValue",
    "Unknown",
    "Absent",
    "Present",
    "UNKNOWN",
    "ABSENT",
    "from_optional",
    # registry
    "RegistryTarget",
    "PackageSummary",
    "PackageVersions",
    "PackageVersionDescription",
    # lookup
    "PackageMatch",
    "PackageInfo",
    "NamespaceFailure",
    "PrefetchReport",
]
