from __future__ import annotations

from pydantic import BaseModel

from pkgcomplete.names import join_package_name


class RegistryTarget(BaseModel):
    """The single repository every registry call is scoped to."""

    domain: str
    repository: str
    domain_owner: str | None = None
    region: str | None = None


class PackageSummary(BaseModel):
    """Single item returned by a package listing. Names only, no version."""

    namespace: str | None = None  # without the leading "@"
    name: str

    @property
    def full_name(self) -> str:
        return join_package_name(self.namespace, self.name)


class PackageVersions(BaseModel):
    latest_version: str | None = None


class PackageVersionDescription(BaseModel):
    summary: str | None = None
    homepage: str | None = None
