"""Per-kind name <-> ID lookup tables, lazily refreshed from the control plane.

Each entity kind owns an independent partition guarded by its own lock. The
only mutation is a full snapshot replace performed while holding that lock, so
readers observe either the old list or the new one, never a mix.

A lookup that misses triggers exactly one download of that kind followed by a
single retry. Hits are served from the snapshot without revalidation: a rename
on the control plane stays invisible until a lookup for the new name misses.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from netris_reconciler.domain.errors import RemoteCallError
from netris_reconciler.domain.model import EntityKind

if TYPE_CHECKING:
    from collections.abc import Callable

    from netris_reconciler.domain.model import Identified
    from netris_reconciler.domain.ports.remote import RemoteClient

log = getLogger(__name__)


@dataclass(slots=True)
class _Partition:
    lock: threading.Lock = field(default_factory=threading.Lock)
    entries: tuple[Identified, ...] = ()
    downloads: int = 0


class ResolutionCache:
    """Shared, process-wide cache service; construct once and inject."""

    def __init__(self, remote: RemoteClient) -> None:
        self._remote = remote
        self._partitions: dict[EntityKind, _Partition] = {kind: _Partition() for kind in EntityKind}

    def find_by_name(self, kind: EntityKind, name: str) -> Identified | None:
        return self._find(kind, lambda entry: entry.name == name)

    def find_by_id(self, kind: EntityKind, entity_id: int) -> Identified | None:
        return self._find(kind, lambda entry: entry.id == entity_id)

    def get_all(self, kind: EntityKind) -> tuple[Identified, ...]:
        """Return the current snapshot of ``kind`` without refreshing it."""

        partition = self._partitions[kind]
        with partition.lock:
            return partition.entries

    def download(self, kind: EntityKind) -> None:
        """Replace the snapshot of ``kind`` with a fresh list from the control plane."""

        partition = self._partitions[kind]
        with partition.lock:
            self._download_locked(kind, partition)

    def download_count(self, kind: EntityKind) -> int:
        partition = self._partitions[kind]
        with partition.lock:
            return partition.downloads

    def _find(
        self, kind: EntityKind, predicate: Callable[[Identified], bool]
    ) -> Identified | None:
        partition = self._partitions[kind]
        with partition.lock:
            found = _first(partition.entries, predicate)
            if found is not None:
                return found
            try:
                self._download_locked(kind, partition)
            except RemoteCallError as exc:
                log.warning("Refreshing %s cache failed, keeping previous snapshot: %s", kind, exc)
                return None
            return _first(partition.entries, predicate)

    def _download_locked(self, kind: EntityKind, partition: _Partition) -> None:
        entries = tuple(self._remote.list(kind))
        partition.entries = entries
        partition.downloads += 1
        log.debug("Downloaded %s %s entries", len(entries), kind)


def _first(
    entries: tuple[Identified, ...], predicate: Callable[[Identified], bool]
) -> Identified | None:
    for entry in entries:
        if predicate(entry):
            return entry
    return None
