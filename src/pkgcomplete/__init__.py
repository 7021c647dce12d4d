"""Registry-backed package name, version and info lookups for editor completion."""

from __future__ import annotations

__version__ = "0.1.0"
