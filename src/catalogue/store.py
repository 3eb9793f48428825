"""Catalogue store: the ordered, append-only list of listed data products.

Entries live in process memory only. Growth comes from the seed listings and
from normalized uploads; nothing is ever updated or removed. Entry ids are
unique per store: an appended entry whose id is already listed is skipped,
so the first listing under an id always wins.
"""

from collections.abc import Iterable

import structlog
from shared.entries import CatalogEntry

logger = structlog.get_logger(__name__)


class CatalogStore:
    def __init__(self, entries: Iterable[CatalogEntry] = ()) -> None:
        self._entries: list[CatalogEntry] = []
        self._by_id: dict[str, CatalogEntry] = {}
        self.append(entries)

    def append(self, entries: Iterable[CatalogEntry]) -> list[CatalogEntry]:
        """Append entries in order and return the ones actually listed."""
        appended = []
        for entry in entries:
            if entry.id in self._by_id:
                logger.warning("Skipping catalogue entry with duplicate id", entry_id=entry.id, name=entry.name)
                continue
            self._entries.append(entry)
            self._by_id[entry.id] = entry
            appended.append(entry)

        if appended:
            logger.info("Catalogue entries appended", count=len(appended), total=len(self._entries))
        return appended

    def all(self) -> list[CatalogEntry]:
        return list(self._entries)

    def get(self, entry_id: str) -> CatalogEntry | None:
        return self._by_id.get(str(entry_id))

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, entry_id: object) -> bool:
        return entry_id in self._by_id

    # -------------------------------------------------------------------
    # Browsing
    # -------------------------------------------------------------------
    def search(self, term: str = "", category: str | None = None, format: str | None = None) -> list[CatalogEntry]:
        """Entries whose name or description contains ``term`` (any case).

        ``category`` and ``format`` are exact-match filters; ``None`` means
        no filtering on that label.
        """
        needle = term.lower()
        return [
            entry
            for entry in self._entries
            if (needle in entry.name.lower() or needle in entry.description.lower())
            and (category is None or entry.category == category)
            and (format is None or entry.format == format)
        ]

    def categories(self) -> list[str]:
        """Distinct categories in first-listed order."""
        return list(dict.fromkeys(entry.category for entry in self._entries))

    def formats(self) -> list[str]:
        """Distinct formats in first-listed order."""
        return list(dict.fromkeys(entry.format for entry in self._entries))
