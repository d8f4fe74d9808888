"""
Import/export service.

Exports the whole ledger as one JSON document and imports such documents
back. Importing replaces the entry collection wholesale; it does not merge
per date.
"""

import json
import logging
from typing import Any

from pydantic import TypeAdapter, ValidationError

from fittrack.domain.entry import Entry, ExportDocument, Settings
from fittrack.services.entry_store import EntryStore
from fittrack.services.settings_store import SettingsStore
from fittrack.utils.clock import Clock
from fittrack.utils.exceptions import StorageError

logger = logging.getLogger(__name__)

_ENTRY_LIST = TypeAdapter(list[Entry])


class TransferService:
    """Service for exporting, importing and resetting the ledger."""

    def __init__(
        self,
        entry_store: EntryStore,
        settings_store: SettingsStore,
        clock: Clock | None = None,
    ) -> None:
        self.entry_store = entry_store
        self.settings_store = settings_store
        self.clock = clock or Clock()

    def export_document(self) -> ExportDocument:
        """Snapshot every entry and the settings, stamped with the export time."""
        return ExportDocument(
            entries=list(self.entry_store.all()),
            settings=self.settings_store.get(),
            exported_at=self.clock.now(),
        )

    def export_json(self) -> str:
        """Serialize the export document as indented JSON."""
        document = self.export_document()
        logger.info(f"Exporting {len(document.entries)} entries")
        return document.model_dump_json(indent=2)

    def _parse_entries(self, section: Any) -> list[Entry] | None:
        if not isinstance(section, list):
            logger.warning("Import document has no entry list, keeping current entries")
            return None
        try:
            return _ENTRY_LIST.validate_python(section)
        except ValidationError as e:
            logger.warning(f"Skipping malformed entries section: {e}")
            return None

    def _parse_settings(self, section: Any) -> Settings | None:
        if not isinstance(section, dict):
            logger.warning("Import document has no settings object, keeping current settings")
            return None
        try:
            # Absent fields take the defaults, not the live values.
            return Settings.model_validate(section)
        except ValidationError as e:
            logger.warning(f"Skipping malformed settings section: {e}")
            return None

    def import_json(self, text: str | bytes) -> bool:
        """
        Import an exported document.

        The entries section, when present and well formed, replaces the
        whole collection. The settings section, when present and well formed,
        is laid over the default settings. A malformed section is skipped.

        Args:
            text: JSON document.

        Returns:
            False if the document could not be parsed; nothing is changed then.

        Raises:
            StorageError: If a section could not be persisted. Entries already
                replaced are restored before the error propagates.
        """
        try:
            data = json.loads(text)
        except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as e:
            logger.error(f"Import failed: {e}")
            return False

        if not isinstance(data, dict):
            logger.error(f"Import failed: expected a JSON object, got {type(data).__name__}")
            return False

        entries = self._parse_entries(data["entries"]) if "entries" in data else None
        settings = self._parse_settings(data["settings"]) if "settings" in data else None

        previous_entries = list(self.entry_store.all())
        if entries is not None:
            self.entry_store.replace_all(entries)
        if settings is not None:
            try:
                self.settings_store.save(settings)
            except StorageError:
                if entries is not None:
                    logger.error("Settings could not be saved, restoring previous entries")
                    self.entry_store.replace_all(previous_entries)
                raise

        logger.info(
            f"Imported document (entries: {'replaced' if entries is not None else 'unchanged'}, "
            f"settings: {'replaced' if settings is not None else 'unchanged'})"
        )
        return True

    def reset(self) -> None:
        """Delete all entries and settings. There is no undo."""
        self.entry_store.clear()
        self.settings_store.clear()
        logger.warning("All data reset")
