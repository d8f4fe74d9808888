"""
Entry store service.

Holds the ordered collection of daily entries in memory and persists the
whole collection to the key/value store on every mutation.
"""

import logging
from collections.abc import Iterable
from datetime import date

from pydantic import TypeAdapter, ValidationError

from fittrack.domain.entry import Entry, EntryDraft
from fittrack.infrastructure.kv_store import KeyValueStore
from fittrack.utils.clock import Clock
from fittrack.utils.exceptions import StorageError

logger = logging.getLogger(__name__)

DEFAULT_ENTRIES_KEY = "fittrack_entries"

_ENTRY_LIST = TypeAdapter(list[Entry])


def sort_entries(entries: Iterable[Entry]) -> list[Entry]:
    """Return entries ordered by date, most recent first."""
    return sorted(entries, key=lambda e: e.date, reverse=True)


class EntryStore:
    """
    Ordered collection of daily entries, one per date.

    The collection is loaded from the key/value store at construction.
    Each mutation builds the new collection, persists it, and only then
    replaces the in-memory copy.
    """

    def __init__(
        self,
        kv_store: KeyValueStore,
        clock: Clock | None = None,
        key: str = DEFAULT_ENTRIES_KEY,
    ) -> None:
        """
        Initialize entry store.

        Args:
            kv_store: Byte-level persistence.
            clock: Source of created_at/updated_at timestamps.
            key: Storage key of the entries record.
        """
        self.kv_store = kv_store
        self.clock = clock or Clock()
        self.key = key
        self._entries: list[Entry] = self._load()

    def _load(self) -> list[Entry]:
        raw = self.kv_store.get(self.key)
        if raw is None:
            return []

        try:
            entries = _ENTRY_LIST.validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Stored entries are unreadable, starting empty: {e}")
            return []

        logger.debug(f"Loaded {len(entries)} entries")
        return sort_entries(entries)

    def _persist(self, entries: list[Entry]) -> None:
        if not self.kv_store.set(self.key, _ENTRY_LIST.dump_json(entries)):
            raise StorageError(f"Failed to persist entries under key '{self.key}'")
        self._entries = entries

    def all(self) -> list[Entry]:
        """Return the collection, most recent first."""
        return self._entries

    def find_by_date(self, day: date) -> Entry | None:
        """Return the entry recorded for day, if any."""
        return next((e for e in self._entries if e.date == day), None)

    def upsert(self, draft: EntryDraft) -> Entry:
        """
        Create or update the entry for the draft's date.

        An existing entry keeps its id and created_at; every other field is
        replaced by the draft.

        Args:
            draft: Field values for the day.

        Returns:
            The saved entry.

        Raises:
            StorageError: If the collection could not be persisted.
        """
        now = self.clock.now()
        existing = self.find_by_date(draft.date)
        # an Entry passed back in carries its own id and timestamps
        values = draft.model_dump(include=set(EntryDraft.model_fields))

        if existing is not None:
            entry = Entry(
                **values,
                id=existing.id,
                created_at=existing.created_at,
                updated_at=now,
            )
            others = [e for e in self._entries if e.id != existing.id]
            logger.info(f"Updating entry for {draft.date}")
        else:
            entry = Entry(**values, created_at=now, updated_at=now)
            others = list(self._entries)
            logger.info(f"Creating entry for {draft.date}")

        self._persist(sort_entries([*others, entry]))
        return entry

    def delete_by_id(self, entry_id: str) -> bool:
        """
        Delete the entry with the given id.

        Returns:
            True if an entry was removed, False if none matched.
        """
        remaining = [e for e in self._entries if e.id != entry_id]
        removed = len(remaining) != len(self._entries)
        if removed:
            logger.info(f"Deleting entry {entry_id}")
        else:
            logger.debug(f"No entry with id {entry_id}")

        self._persist(remaining)
        return removed

    def replace_all(self, entries: Iterable[Entry]) -> None:
        """
        Replace the whole collection.

        Entries sharing a date collapse to the first one given.
        """
        unique: dict[date, Entry] = {}
        for entry in entries:
            if entry.date in unique:
                logger.warning(f"Dropping duplicate entry for {entry.date}")
                continue
            unique[entry.date] = entry

        self._persist(sort_entries(unique.values()))
        logger.info(f"Replaced collection with {len(unique)} entries")

    def clear(self) -> None:
        """Remove the persisted record and empty the collection."""
        self.kv_store.delete(self.key)
        self._entries = []
