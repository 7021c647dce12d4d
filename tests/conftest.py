"""Shared fixtures: an in-memory registry stub and a cache wired to it."""

from __future__ import annotations

import asyncio

import pytest

from pkgcomplete.cache import PackageCache
from pkgcomplete.errors import ErrorCode, RegistryError
from pkgcomplete.models.registry import PackageSummary, PackageVersionDescription, PackageVersions
from pkgcomplete.names import join_package_name, split_package_name


class StubRegistry:
    """RegistryClientProtocol backed by dicts, recording every call.

    ``fail_with`` makes every call raise; ``failing_namespaces`` makes listings for
    those namespaces raise; ``listing_gate`` holds listings open until it is set.
    """

    def __init__(
        self,
        packages: list[str] | None = None,
        versions: dict[str, str] | None = None,
        descriptions: dict[str, PackageVersionDescription] | None = None,
    ) -> None:
        self.packages = list(packages or [])
        self.versions = dict(versions or {})
        self.descriptions = dict(descriptions or {})
        self.calls: list[tuple[str, tuple[object, ...]]] = []
        self.fail_with: Exception | None = None
        self.failing_namespaces: set[str] = set()
        self.listing_gate: asyncio.Event | None = None

    def calls_to(self, operation: str) -> int:
        return sum(1 for name, _ in self.calls if name == operation)

    def _check(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    async def list_packages(
        self,
        namespace: str | None = None,
        prefix: str | None = None,
    ) -> list[PackageSummary]:
        self.calls.append(("list_packages", (namespace, prefix)))
        if self.listing_gate is not None:
            await self.listing_gate.wait()
        self._check()
        if namespace in self.failing_namespaces:
            raise RegistryError(
                ErrorCode.REGISTRY_UNAVAILABLE, f"listing {namespace} failed", recoverable=True
            )

        results = []
        for full_name in self.packages:
            ns, name = split_package_name(full_name)
            if namespace is not None and ns != namespace:
                continue
            if prefix is not None and not name.startswith(prefix):
                continue
            results.append(PackageSummary(namespace=ns, name=name))
        return results

    async def list_versions(self, namespace: str | None, name: str) -> PackageVersions:
        self.calls.append(("list_versions", (namespace, name)))
        self._check()
        return PackageVersions(latest_version=self.versions.get(join_package_name(namespace, name)))

    async def describe_version(
        self,
        namespace: str | None,
        name: str,
        version: str,
    ) -> PackageVersionDescription:
        self.calls.append(("describe_version", (namespace, name, version)))
        self._check()
        return self.descriptions.get(
            join_package_name(namespace, name), PackageVersionDescription()
        )


@pytest.fixture()
def registry() -> StubRegistry:
    return StubRegistry(
        packages=["@scope1/foo", "@scope1/bar", "@scope2/foo-utils", "plain-pkg"],
        versions={
            "@scope1/foo": "1.4.0",
            "@scope1/bar": "0.2.0",
            "pkg-a": "3.0.0",
            "pkg-x": "2.3.1",
            "pkg-y": "5.0.0",
        },
        descriptions={
            "@scope1/foo": PackageVersionDescription(
                summary="Foo helpers", homepage="https://example.com/foo"
            ),
            "pkg-a": PackageVersionDescription(
                summary="Package A", homepage="https://example.com/a"
            ),
            "pkg-y": PackageVersionDescription(summary="Package Y"),
        },
    )


@pytest.fixture()
def cache(registry: StubRegistry) -> PackageCache:
    """Cache with a short readiness bound so timeouts stay fast."""
    return PackageCache(registry, namespaces=["@scope1"], ready_timeout=0.2)


@pytest.fixture()
async def ready_cache(cache: PackageCache) -> PackageCache:
    """Cache whose bulk prefetch has completed with no namespaces (empty store)."""
    await cache.init_prefetch([])
    return cache

