from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

if TYPE_CHECKING:
    from pkgcomplete.models.record import PackageRecord


class PackageMatch(BaseModel):
    """Single result returned by search_by_prefix."""

    name: str
    latest_version: str | None = None


class PackageInfo(BaseModel):
    """Hover/detail information returned by resolve_full_info."""

    name: str
    description: str | None = None
    homepage: str | None = None
    latest_version: str | None = None

    @classmethod
    def from_record(cls, record: PackageRecord) -> PackageInfo:
        return cls(
            name=record.name,
            description=record.description.or_none(),
            homepage=record.homepage.or_none(),
            latest_version=record.latest_version,
        )


class NamespaceFailure(BaseModel):
    namespace: str
    code: str  # ErrorCode value, or "UNEXPECTED" for non-registry exceptions
    message: str


class PrefetchReport(BaseModel):
    """Outcome of one bulk prefetch run. Failures are non-fatal."""

    started: bool
    namespaces: list[str] = []
    packages_found: int = 0
    failures: list[NamespaceFailure] = []

    @property
    def partial(self) -> bool:
        return bool(self.failures)
