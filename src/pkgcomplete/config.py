"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Environment variables  (PKGCOMPLETE__CACHE__ENABLED=false)
  2. pkgcomplete.yaml       (searched in cwd, then the platform config dir)
  3. Hardcoded defaults

The config file is optional. Without a registry URL or explicit domain/repository
the cache still loads, but ``RegistrySettings.target()`` raises ``ConfigError``.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, ConfigDict, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from pkgcomplete.errors import ConfigError
from pkgcomplete.models.registry import RegistryTarget

_DEFAULT_CONFIG_DIR = platformdirs.user_config_dir("pkgcomplete")

# https://<domain>-<owner>.d.codeartifact.<region>.amazonaws.com/npm/<repository>/
_CODEARTIFACT_URL_RE = re.compile(
    r"^https?://(.+)-(\d+)\.d\.codeartifact\.(.+)\.amazonaws\.com/npm/([^/]+)/?$"
)


def _find_config_file() -> str | None:
    """Return the path of the first pkgcomplete.yaml found, or None."""
    candidates = [
        Path("pkgcomplete.yaml"),
        Path(_DEFAULT_CONFIG_DIR) / "pkgcomplete.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


def parse_registry_url(url: str) -> RegistryTarget | None:
    """Extract domain, owner, region and repository from a CodeArtifact npm URL."""
    match = _CODEARTIFACT_URL_RE.match(url)
    if match is None:
        return None
    domain, domain_owner, region, repository = match.groups()
    return RegistryTarget(
        domain=domain,
        domain_owner=domain_owner,
        region=region,
        repository=repository,
    )


class RegistrySettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    url: str | None = None
    domain: str | None = None
    domain_owner: str | None = None
    region: str | None = None
    repository: str | None = None
    format: str = "npm"
    endpoint_url: str | None = None
    token: str | None = None
    timeout_seconds: float = 10.0
    page_size: int = 100

    @model_validator(mode="after")
    def _fill_from_url(self) -> RegistrySettings:
        # Explicit fields win over values parsed from the URL.
        if self.url:
            parsed = parse_registry_url(self.url)
            if parsed is not None:
                self.domain = self.domain or parsed.domain
                self.domain_owner = self.domain_owner or parsed.domain_owner
                self.region = self.region or parsed.region
                self.repository = self.repository or parsed.repository
        if self.endpoint_url is None and self.region:
            self.endpoint_url = f"https://codeartifact.{self.region}.amazonaws.com"
        return self

    def target(self) -> RegistryTarget:
        if not self.domain or not self.repository:
            raise ConfigError("registry domain and repository must be configured")
        return RegistryTarget(
            domain=self.domain,
            repository=self.repository,
            domain_owner=self.domain_owner,
            region=self.region,
        )


class CacheSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    enabled: bool = True
    namespaces: list[str] = []  # e.g. ["@acme", "@acme-internal"]
    ready_timeout_seconds: float = 30.0


class LoggingSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: PKGCOMPLETE__CACHE__ENABLED=false
        env_prefix="PKGCOMPLETE__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    registry: RegistrySettings = RegistrySettings()
    cache: CacheSettings = CacheSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # dotenv and file secrets intentionally excluded
        )
