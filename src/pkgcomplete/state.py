"""Application state container.

AppState is created once per editor session by ``app_lifespan`` and handed to the
completion/hover glue, which only ever talks to ``state.cache``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import asyncio

    import httpx

    from pkgcomplete.cache import PackageCache
    from pkgcomplete.config import Settings
    from pkgcomplete.models.lookup import PrefetchReport
    from pkgcomplete.protocols import RegistryClientProtocol


@dataclass
class AppState:
    """Holds all shared runtime state for one session."""

    settings: Settings
    cache: PackageCache
    registry: RegistryClientProtocol
    http_client: httpx.AsyncClient | None = None
    prefetch_task: asyncio.Task[PrefetchReport] | None = None
