from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class Unknown(BaseModel):
    """Field never looked up."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["unknown"] = "unknown"

    @property
    def is_known(self) -> bool:
        return False

    def or_none(self) -> str | None:
        return None


class Absent(BaseModel):
    """Field looked up; the registry had nothing for it."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["absent"] = "absent"

    @property
    def is_known(self) -> bool:
        return True

    def or_none(self) -> str | None:
        return None


class Present(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["present"] = "present"
    value: str

    @property
    def is_known(self) -> bool:
        return True

    def or_none(self) -> str | None:
        return self.value


FieldValue = Annotated[Unknown | Absent | Present, Field(discriminator="kind")]

UNKNOWN = Unknown()
ABSENT = Absent()


def from_optional(value: str | None) -> Absent | Present:
    """Map a registry value onto a known field state (empty counts as absent)."""
    if not value:
        return ABSENT
    return Present(value=value)


class PackageRecord(BaseModel):
    """Everything known about one package, possibly only partially.

    The same model is used as the partial update passed to ``RecordStore.merge``:
    ``UNKNOWN`` fields and an empty ``latest_version`` mean "not mentioned".
    """

    model_config = ConfigDict(frozen=True)

    name: str
    description: FieldValue = UNKNOWN
    homepage: FieldValue = UNKNOWN
    latest_version: str | None = None  # None: not fetched yet

    @property
    def is_fully_formed(self) -> bool:
        return bool(self.latest_version) and self.homepage.is_known and self.description.is_known
