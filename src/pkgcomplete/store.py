"""In-memory package record store.

The store is both a cache and the place where partial results are combined. A
package listing yields names only, a version lookup yields the latest version, and a
version description yields summary and homepage. Each result is merged into the
record for that package, so later callers see everything learned so far.

Merge rule: a field in the incoming record overwrites the stored one only when it is
known (``Absent`` or ``Present``; a non-empty version). ``Unknown`` fields and a
missing version leave the stored value alone, so a known field never reverts to
unknown. Records are frozen; merging replaces the stored instance.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from pkgcomplete.models.record import PackageRecord

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

log = structlog.get_logger()


class RecordStore:
    """Mapping of package name -> PackageRecord with field-level merging."""

    def __init__(self) -> None:
        self._records: dict[str, PackageRecord] = {}

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, name: object) -> bool:
        return name in self._records

    def __iter__(self) -> Iterator[PackageRecord]:
        return iter(list(self._records.values()))

    def merge(self, record: PackageRecord) -> None:
        existing = self._records.get(record.name)
        if existing is None:
            existing = PackageRecord(name=record.name)

        update: dict[str, object] = {}
        if record.description.is_known:
            update["description"] = record.description
        if record.homepage.is_known:
            update["homepage"] = record.homepage
        if record.latest_version:
            update["latest_version"] = record.latest_version

        merged = existing.model_copy(update=update) if update else existing
        self._records[record.name] = merged
        log.debug("record_merged", name=record.name, fields=sorted(update))

    def merge_all(self, records: Iterable[PackageRecord]) -> None:
        for record in records:
            self.merge(record)

    def get(self, name: str) -> PackageRecord | None:
        return self._records.get(name)

    def search(self, substring: str) -> list[PackageRecord]:
        """All records whose name contains ``substring``."""
        return [record for name, record in self._records.items() if substring in name]

    def reset(self) -> None:
        count = len(self._records)
        self._records.clear()
        log.info("record_store_reset", cleared=count)
