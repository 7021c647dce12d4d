"""Unit-specific fixtures (no I/O)."""

from __future__ import annotations

import pytest

from pkgcomplete.readiness import Readiness
from pkgcomplete.store import RecordStore


@pytest.fixture()
def store() -> RecordStore:
    return RecordStore()


@pytest.fixture()
def readiness() -> Readiness:
    return Readiness()
