"""Extension catalog - read-only lookup of offered extensions."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Iterable, Iterator

from ..extension.types import CatalogEntry, UpdateServiceError

logger = logging.getLogger(__name__)


class ExtensionNotFoundError(UpdateServiceError, LookupError):
    """Raised when an identifier is not in the catalog."""

    def __init__(self, identifier: str):
        super().__init__(f"No extension found with id '{identifier}'")
        self.identifier = identifier


def _index_entries(entries: Iterable[CatalogEntry]) -> dict[str, CatalogEntry]:
    index: dict[str, CatalogEntry] = {}
    for entry in entries:
        if entry.identifier in index:
            raise ValueError(f"Duplicate extension id in catalog: {entry.identifier}")
        index[entry.identifier] = entry
    return index


@dataclass
class ExtensionCatalog:
    """
    Catalog of extensions offered for update.

    Request handling never mutates the catalog. Reads go through a single
    dict reference, so they need no lock; reload builds a complete new table
    and swaps the reference (see atomic_replace), so a lookup sees either
    the old table or the new one, never a mix.
    """
    _entries: dict[str, CatalogEntry] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    @classmethod
    def from_entries(cls, entries: Iterable[CatalogEntry]) -> ExtensionCatalog:
        """Build a catalog, rejecting duplicate identifiers."""
        return cls(_entries=_index_entries(entries))

    def lookup(self, identifier: str) -> CatalogEntry:
        """
        Look up an extension by identifier.

        Raises:
            ExtensionNotFoundError: If the identifier is unknown
        """
        entry = self._entries.get(identifier)
        if entry is None:
            raise ExtensionNotFoundError(identifier)
        return entry

    def get(self, identifier: str) -> CatalogEntry | None:
        """Get an entry by identifier, or None."""
        return self._entries.get(identifier)

    def contains(self, identifier: str) -> bool:
        return identifier in self._entries

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(list(self._entries.values()))

    def all_entries(self) -> list[CatalogEntry]:
        """Get all entries in catalog order."""
        return list(self._entries.values())

    def atomic_replace(self, entries: Iterable[CatalogEntry]) -> None:
        """
        Atomically replace all entries with a new set.

        This is for reload - build the new table, then swap.
        """
        new_entries = _index_entries(entries)
        with self._lock:
            self._entries = new_entries
        logger.info(f"Catalog replaced: {len(new_entries)} extensions")

    @property
    def stats(self) -> dict[str, int]:
        entries = self._entries
        return {
            "extensions": len(entries),
            "blacklisted": sum(1 for e in entries.values() if e.blacklisted),
        }
