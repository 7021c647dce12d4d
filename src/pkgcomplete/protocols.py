from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from pkgcomplete.models.registry import (
        PackageSummary,
        PackageVersionDescription,
        PackageVersions,
    )


class RegistryClientProtocol(Protocol):
    """Read-only registry operations, bound to one domain and repository.

    Implementations raise ``RegistryError`` on any failure.
    """

    async def list_packages(
        self,
        namespace: str | None = None,
        prefix: str | None = None,
    ) -> list[PackageSummary]: ...

    async def list_versions(self, namespace: str | None, name: str) -> PackageVersions: ...

    async def describe_version(
        self,
        namespace: str | None,
        name: str,
        version: str,
    ) -> PackageVersionDescription: ...
