"""Composition root: build one session's AppState and tear it down again."""

from __future__ import annotations

import asyncio
import contextlib
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import structlog

from pkgcomplete.cache import PackageCache
from pkgcomplete.config import Settings
from pkgcomplete.logging_config import configure_logging
from pkgcomplete.registry import RegistryClient, build_http_client
from pkgcomplete.state import AppState

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    import httpx

    from pkgcomplete.protocols import RegistryClientProtocol

log = structlog.get_logger()


@asynccontextmanager
async def app_lifespan(
    settings: Settings | None = None,
    *,
    auth: httpx.Auth | None = None,
    registry: RegistryClientProtocol | None = None,
) -> AsyncIterator[AppState]:
    """Wire settings, registry client and cache; start the initial prefetch.

    Pass ``registry`` to use an already built client (the http client is then not
    created or closed here). The prefetch runs in the background; lookups made while
    it runs wait for it with the configured bound.
    """
    if settings is None:
        settings = Settings()
    configure_logging(settings.logging)

    http_client: httpx.AsyncClient | None = None
    if registry is None:
        target = settings.registry.target()
        http_client = build_http_client(settings.registry, auth)
        registry = RegistryClient(
            http_client,
            target,
            package_format=settings.registry.format,
            page_size=settings.registry.page_size,
        )

    cache = PackageCache.from_settings(settings, registry)
    state = AppState(settings=settings, cache=cache, registry=registry, http_client=http_client)

    if not cache.readiness.is_disabled:
        state.prefetch_task = asyncio.create_task(cache.init_prefetch())
    log.info(
        "session_started",
        cache_enabled=settings.cache.enabled,
        namespaces=settings.cache.namespaces,
    )

    try:
        yield state
    finally:
        task = state.prefetch_task
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        if http_client is not None:
            await http_client.aclose()
        log.info("session_closed")
