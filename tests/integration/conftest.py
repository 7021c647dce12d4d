"""Integration test fixtures.

Provides settings pointing at a respx-mocked CodeArtifact endpoint. The real
RegistryClient, httpx client and PackageCache are wired by ``app_lifespan``.
"""

from __future__ import annotations

from collections.abc import Iterator

import httpx
import pytest
import respx
import structlog

from pkgcomplete.config import Settings

REGISTRY_URL = "https://acme-123456789012.d.codeartifact.us-east-2.amazonaws.com/npm/shared/"
ENDPOINT = "https://codeartifact.us-east-2.amazonaws.com"

_PACKAGES = {
    "scope1": [
        {"namespace": "scope1", "package": "foo"},
        {"namespace": "scope1", "package": "bar"},
    ],
}
_VERSIONS = {("scope1", "foo"): "1.4.0", ("scope1", "bar"): "0.2.0"}
_DETAILS = {
    ("scope1", "foo"): {"summary": "Foo helpers", "homePage": "https://example.com/foo"},
    ("scope1", "bar"): {"summary": "Bar tools"},
}


def _list_packages(request: httpx.Request) -> httpx.Response:
    namespace = request.url.params.get("namespace")
    return httpx.Response(200, json={"packages": _PACKAGES.get(namespace, [])})


def _list_versions(request: httpx.Request) -> httpx.Response:
    key = (request.url.params.get("namespace"), request.url.params["package"])
    if key not in _VERSIONS:
        return httpx.Response(404, json={"message": "not found"})
    return httpx.Response(200, json={"defaultDisplayVersion": _VERSIONS[key]})


def _describe_version(request: httpx.Request) -> httpx.Response:
    key = (request.url.params.get("namespace"), request.url.params["package"])
    details = {"version": request.url.params["version"], **_DETAILS[key]}
    return httpx.Response(200, json={"packageVersion": details})


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    yield
    structlog.reset_defaults()


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        registry={"url": REGISTRY_URL, "token": "test-token"},
        cache={"namespaces": ["@scope1"], "ready_timeout_seconds": 5},
        logging={"level": "WARNING"},
    )


@pytest.fixture()
def registry_api() -> Iterator[respx.MockRouter]:
    """Mocked registry endpoint with routes named after the operation they serve."""
    with respx.mock(base_url=ENDPOINT, assert_all_called=False) as router:
        router.post("/v1/packages", name="list_packages").mock(side_effect=_list_packages)
        router.post("/v1/package/versions", name="list_versions").mock(
            side_effect=_list_versions
        )
        router.get("/v1/package/version", name="describe_version").mock(
            side_effect=_describe_version
        )
        yield router
