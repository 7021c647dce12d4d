"""Package cache: the object an editor session holds for completion lookups.

A ``PackageCache`` owns one record store, one readiness state machine, the bulk
prefetch orchestrator and the lookup resolver, all wired to the same registry client.
Sessions construct their own instance; nothing here is module-global.

Disabled mode skips bulk prefetch and makes every lookup go to the registry. The
store is still written through in that mode so records are combined across calls and
survive a later re-enable.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from pkgcomplete.prefetch import PrefetchOrchestrator
from pkgcomplete.readiness import DEFAULT_READY_TIMEOUT_SECONDS, Readiness
from pkgcomplete.resolver import LookupResolver
from pkgcomplete.store import RecordStore

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pkgcomplete.config import Settings
    from pkgcomplete.models.lookup import PackageInfo, PackageMatch, PrefetchReport
    from pkgcomplete.models.record import PackageRecord
    from pkgcomplete.protocols import RegistryClientProtocol
    from pkgcomplete.readiness import ReadinessState

log = structlog.get_logger()


class PackageCache:
    def __init__(
        self,
        registry: RegistryClientProtocol,
        namespaces: Sequence[str] = (),
        ready_timeout: float = DEFAULT_READY_TIMEOUT_SECONDS,
    ) -> None:
        self.store = RecordStore()
        self.readiness = Readiness()
        self.namespaces = list(namespaces)
        self._prefetcher = PrefetchOrchestrator(self.store, self.readiness, registry)
        self._resolver = LookupResolver(self.store, self.readiness, registry, ready_timeout)

    @classmethod
    def from_settings(cls, settings: Settings, registry: RegistryClientProtocol) -> PackageCache:
        cache = cls(
            registry,
            namespaces=settings.cache.namespaces,
            ready_timeout=settings.cache.ready_timeout_seconds,
        )
        cache.set_cache_mode(settings.cache.enabled)
        return cache

    @property
    def state(self) -> ReadinessState:
        return self.readiness.state

    def get(self, name: str) -> PackageRecord | None:
        return self.store.get(name)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def set_cache_mode(self, enabled: bool) -> None:
        """Enable or disable bulk prefetching. Enabling does not start a prefetch."""
        if enabled:
            self.readiness.enable()
        else:
            self.readiness.disable()
        log.info("cache_mode_set", enabled=enabled, state=self.readiness.state.value)

    def reset_cache(self) -> None:
        """Drop every record. Readiness is left as is."""
        self.store.reset()

    async def init_prefetch(
        self,
        namespaces: Sequence[str] | None = None,
        force: bool = False,
    ) -> PrefetchReport:
        """Prefetch all names in ``namespaces`` (default: the configured ones)."""
        if namespaces is None:
            namespaces = self.namespaces
        return await self._prefetcher.run(namespaces, force=force)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    async def search_by_prefix(self, query: str, *, wait: bool = True) -> list[PackageMatch]:
        return await self._resolver.search_by_prefix(query, wait=wait)

    async def resolve_latest_version(self, name: str, *, wait: bool = True) -> str | None:
        return await self._resolver.resolve_latest_version(name, wait=wait)

    async def resolve_full_info(self, name: str, *, wait: bool = True) -> PackageInfo | None:
        return await self._resolver.resolve_full_info(name, wait=wait)
