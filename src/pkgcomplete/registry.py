"""CodeArtifact-style registry client over httpx.

Implements ``RegistryClientProtocol`` against the CodeArtifact REST API. The client is
bound to one ``RegistryTarget``; every failure is raised as ``RegistryError``. There is
no retry or backoff here: a throttled call surfaces as ``REGISTRY_RATE_LIMITED`` and the
caller decides what to do.

Authentication is supplied by the caller, either as an ``httpx.Auth`` instance (for
example a SigV4 signer) or as a bearer token from settings.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx
import structlog
from pydantic import ValidationError

from pkgcomplete.errors import ConfigError, ErrorCode, RegistryError
from pkgcomplete.models.registry import PackageSummary, PackageVersionDescription, PackageVersions

if TYPE_CHECKING:
    from pkgcomplete.config import RegistrySettings
    from pkgcomplete.models.registry import RegistryTarget

log = structlog.get_logger()

_STATUS_ERRORS: dict[int, tuple[ErrorCode, bool]] = {
    401: (ErrorCode.REGISTRY_AUTH_FAILED, False),
    403: (ErrorCode.REGISTRY_AUTH_FAILED, False),
    404: (ErrorCode.PACKAGE_NOT_FOUND, False),
    429: (ErrorCode.REGISTRY_RATE_LIMITED, True),
}


def build_http_client(
    settings: RegistrySettings,
    auth: httpx.Auth | None = None,
) -> httpx.AsyncClient:
    """Create the shared httpx client for registry calls."""
    if not settings.endpoint_url:
        raise ConfigError("registry endpoint_url or region must be configured")

    headers = {"Accept": "application/json"}
    if settings.token:
        headers["Authorization"] = f"Bearer {settings.token}"

    return httpx.AsyncClient(
        base_url=settings.endpoint_url,
        headers=headers,
        auth=auth,
        timeout=httpx.Timeout(settings.timeout_seconds),
    )


class RegistryClient:
    """Registry operations scoped to a single domain/repository."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        target: RegistryTarget,
        package_format: str = "npm",
        page_size: int = 100,
    ) -> None:
        self._client = client
        self._target = target
        self._format = package_format
        self._page_size = page_size

    def _params(self, **extra: str | int | None) -> dict[str, str | int]:
        params: dict[str, str | int | None] = {
            "domain": self._target.domain,
            "domain-owner": self._target.domain_owner,
            "repository": self._target.repository,
            "format": self._format,
            **extra,
        }
        return {k: v for k, v in params.items() if v is not None}

    async def _request(self, method: str, path: str, params: dict[str, Any]) -> dict[str, Any]:
        try:
            response = await self._client.request(method, path, params=params)
        except httpx.HTTPError as exc:
            raise RegistryError(
                ErrorCode.REGISTRY_UNAVAILABLE,
                f"Registry request {path} failed: {exc}",
                recoverable=True,
            ) from exc

        status = response.status_code
        if status >= 400:
            code, recoverable = _STATUS_ERRORS.get(
                status, (ErrorCode.REGISTRY_UNAVAILABLE, status >= 500)
            )
            raise RegistryError(
                code, f"Registry request {path} returned HTTP {status}", recoverable=recoverable
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise RegistryError(
                ErrorCode.REGISTRY_BAD_RESPONSE, f"Registry request {path} returned invalid JSON"
            ) from exc
        if not isinstance(payload, dict):
            raise RegistryError(
                ErrorCode.REGISTRY_BAD_RESPONSE, f"Registry request {path} returned {payload!r}"
            )
        return payload

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    async def list_packages(
        self,
        namespace: str | None = None,
        prefix: str | None = None,
    ) -> list[PackageSummary]:
        """All packages matching namespace/prefix, following ``nextToken`` pages."""
        results: list[PackageSummary] = []
        next_token: str | None = None
        seen_tokens: set[str] = set()

        while True:
            params = self._params(
                namespace=namespace,
                **{
                    "package-prefix": prefix,
                    "max-results": self._page_size,
                    "next-token": next_token,
                },
            )
            payload = await self._request("POST", "/v1/packages", params)
            try:
                results.extend(
                    PackageSummary(namespace=item.get("namespace"), name=item["package"])
                    for item in payload.get("packages") or []
                )
            except (KeyError, AttributeError, ValidationError) as exc:
                raise RegistryError(
                    ErrorCode.REGISTRY_BAD_RESPONSE, f"Malformed package listing: {exc}"
                ) from exc

            next_token = payload.get("nextToken")
            if not next_token:
                break
            if next_token in seen_tokens:
                log.warning("registry_next_token_repeated", namespace=namespace, token=next_token)
                break
            seen_tokens.add(next_token)

        log.debug("registry_list_packages", namespace=namespace, prefix=prefix, count=len(results))
        return results

    # ------------------------------------------------------------------
    # Versions
    # ------------------------------------------------------------------

    async def list_versions(self, namespace: str | None, name: str) -> PackageVersions:
        params = self._params(
            namespace=namespace,
            package=name,
            **{"max-results": 1, "sort-by": "PUBLISHED_TIME"},
        )
        payload = await self._request("POST", "/v1/package/versions", params)

        latest = payload.get("defaultDisplayVersion")
        if not latest:
            versions = payload.get("versions") or []
            if versions and isinstance(versions[0], dict):
                latest = versions[0].get("version")

        log.debug("registry_list_versions", namespace=namespace, package=name, latest=latest)
        return PackageVersions(latest_version=latest or None)

    async def describe_version(
        self,
        namespace: str | None,
        name: str,
        version: str,
    ) -> PackageVersionDescription:
        params = self._params(namespace=namespace, package=name, version=version)
        payload = await self._request("GET", "/v1/package/version", params)

        details = payload.get("packageVersion") or {}
        if not isinstance(details, dict):
            raise RegistryError(
                ErrorCode.REGISTRY_BAD_RESPONSE, f"Malformed package version: {details!r}"
            )
        return PackageVersionDescription(
            summary=details.get("summary") or None,
            homepage=details.get("homePage") or None,
        )
