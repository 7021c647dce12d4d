"""Bulk prefetch of package names for the configured namespaces.

Namespaces are listed one after another. A namespace whose listing fails is logged
and recorded in the report; the run still finishes and the cache becomes ready with
whatever was collected. A run that is cancelled still settles the machine, and a
run overtaken by a newer one stops writing and leaves readiness to the newer run.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from pkgcomplete.errors import PkgCompleteError
from pkgcomplete.models.lookup import NamespaceFailure, PrefetchReport
from pkgcomplete.models.record import PackageRecord
from pkgcomplete.readiness import ReadinessState

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pkgcomplete.protocols import RegistryClientProtocol
    from pkgcomplete.readiness import Readiness
    from pkgcomplete.store import RecordStore

log = structlog.get_logger()


class PrefetchOrchestrator:
    def __init__(
        self,
        store: RecordStore,
        readiness: Readiness,
        registry: RegistryClientProtocol,
    ) -> None:
        self._store = store
        self._readiness = readiness
        self._registry = registry

    def _should_skip(self, force: bool) -> str | None:
        state = self._readiness.state
        if state is ReadinessState.DISABLED:
            return "disabled"
        if state is ReadinessState.INPROC:
            return "in_progress"
        if state is ReadinessState.READY and not force:
            return "already_ready"
        return None

    async def run(self, namespaces: Sequence[str], force: bool = False) -> PrefetchReport:
        reason = self._should_skip(force)
        if reason is not None:
            log.info("prefetch_skipped", reason=reason, force=force)
            return PrefetchReport(started=False, namespaces=list(namespaces))

        generation = self._readiness.start()
        self._store.reset()
        log.info("prefetch_started", namespaces=list(namespaces), force=force)

        failures: list[NamespaceFailure] = []
        found = 0
        try:
            for namespace in namespaces:
                scope = namespace.removeprefix("@")
                try:
                    summaries = await self._registry.list_packages(namespace=scope)
                except Exception as exc:
                    log.warning("prefetch_namespace_failed", namespace=namespace, exc_info=True)
                    code = exc.code.value if isinstance(exc, PkgCompleteError) else "UNEXPECTED"
                    failures.append(
                        NamespaceFailure(namespace=namespace, code=code, message=str(exc))
                    )
                    continue

                if not self._is_current(generation):
                    break
                self._store.merge_all(PackageRecord(name=s.full_name) for s in summaries)
                found += len(summaries)
                log.debug(
                    "prefetch_namespace_loaded", namespace=namespace, packages=len(summaries)
                )
        finally:
            # Also runs on cancellation so the machine never stays in inproc.
            self._settle(generation)

        report = PrefetchReport(
            started=True,
            namespaces=list(namespaces),
            packages_found=found,
            failures=failures,
        )
        log.info(
            "prefetch_complete",
            packages=report.packages_found,
            failed_namespaces=[f.namespace for f in failures],
        )
        return report

    def _is_current(self, generation: int) -> bool:
        if self._readiness.generation == generation:
            return True
        log.info(
            "prefetch_superseded",
            generation=generation,
            current=self._readiness.generation,
        )
        return False

    def _settle(self, generation: int) -> None:
        if self._readiness.generation != generation:
            return
        if self._readiness.state is not ReadinessState.INPROC:
            # Disabled while the listing calls were in flight.
            log.info("prefetch_state_changed", state=self._readiness.state.value)
            return
        self._readiness.complete()
