"""Per-request lookup logic: answer from the record store or go to the registry.

Every answer is read back out of the store after merging, so data learned by earlier
calls (a version from a listing, a description from a hover) is never dropped.

Registry failures never propagate out of this module. They are logged and the call
degrades to ``None`` or an empty list, since a failed suggestion must not break the
editor.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from pkgcomplete.models.lookup import PackageInfo, PackageMatch
from pkgcomplete.models.record import PackageRecord, from_optional
from pkgcomplete.names import is_valid_package_name, parse_query, split_package_name
from pkgcomplete.readiness import DEFAULT_READY_TIMEOUT_SECONDS

if TYPE_CHECKING:
    from pkgcomplete.protocols import RegistryClientProtocol
    from pkgcomplete.readiness import Readiness
    from pkgcomplete.store import RecordStore

log = structlog.get_logger()


def _to_match(record: PackageRecord) -> PackageMatch:
    return PackageMatch(name=record.name, latest_version=record.latest_version)


class LookupResolver:
    def __init__(
        self,
        store: RecordStore,
        readiness: Readiness,
        registry: RegistryClientProtocol,
        ready_timeout: float = DEFAULT_READY_TIMEOUT_SECONDS,
    ) -> None:
        self._store = store
        self._readiness = readiness
        self._registry = registry
        self._ready_timeout = ready_timeout

    async def _await_ready(self, wait: bool) -> None:
        if wait:
            await self._readiness.wait_for_ready(self._ready_timeout)

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    async def search_by_prefix(self, query: str, *, wait: bool = True) -> list[PackageMatch]:
        """Packages whose full name contains ``query``. Order is unspecified."""
        await self._await_ready(wait)

        if self._readiness.is_ready:
            return [_to_match(r) for r in self._store.search(query)]

        parsed = parse_query(query)
        log.debug(
            "registry_search", query=query, namespace=parsed.namespace, prefix=parsed.prefix
        )
        try:
            summaries = await self._registry.list_packages(
                namespace=parsed.namespace, prefix=parsed.prefix
            )
        except Exception:
            log.warning("registry_search_failed", query=query, exc_info=True)
            return []

        self._store.merge_all(PackageRecord(name=s.full_name) for s in summaries)
        return [_to_match(r) for r in self._store.search(query)]

    # ------------------------------------------------------------------
    # Version
    # ------------------------------------------------------------------

    async def resolve_latest_version(self, name: str, *, wait: bool = True) -> str | None:
        if not is_valid_package_name(name):
            return None

        await self._await_ready(wait)

        if not self._readiness.is_disabled:
            cached = self._store.get(name)
            if cached is not None and cached.latest_version:
                return cached.latest_version

        namespace, package = split_package_name(name)
        try:
            versions = await self._registry.list_versions(namespace, package)
        except Exception:
            log.warning("registry_version_failed", package=name, exc_info=True)
            return None

        if not versions.latest_version:
            log.info("registry_version_missing", package=name)
            return None

        self._store.merge(PackageRecord(name=name, latest_version=versions.latest_version))
        record = self._store.get(name)
        return record.latest_version if record is not None else None

    # ------------------------------------------------------------------
    # Full info
    # ------------------------------------------------------------------

    async def resolve_full_info(self, name: str, *, wait: bool = True) -> PackageInfo | None:
        """Description, homepage and latest version for ``name``.

        Once a record is fully formed (version set, description and homepage each
        present or confirmed absent) and the cache is ready, no registry call is made.
        """
        if not is_valid_package_name(name):
            return None

        await self._await_ready(wait)

        if self._readiness.is_ready:
            cached = self._store.get(name)
            if cached is not None and cached.is_fully_formed:
                return PackageInfo.from_record(cached)

        namespace, package = split_package_name(name)
        try:
            versions = await self._registry.list_versions(namespace, package)
            version = versions.latest_version
            if not version:
                log.info("registry_version_missing", package=name)
                return None
            details = await self._registry.describe_version(namespace, package, version)
        except Exception:
            log.warning("registry_info_failed", package=name, exc_info=True)
            return None

        self._store.merge(
            PackageRecord(
                name=name,
                latest_version=version,
                description=from_optional(details.summary),
                homepage=from_optional(details.homepage),
            )
        )
        record = self._store.get(name)
        return PackageInfo.from_record(record) if record is not None else None
