"""Unit tests for the entry and settings stores."""

import json
from datetime import date, timedelta

import pytest

from conftest import TODAY, FixedClock, make_draft
from fittrack.domain.entry import Settings, WeightUnit
from fittrack.infrastructure.kv_store import MemoryKeyValueStore
from fittrack.services.entry_store import DEFAULT_ENTRIES_KEY, EntryStore
from fittrack.services.settings_store import DEFAULT_SETTINGS_KEY, SettingsStore
from fittrack.utils.exceptions import StorageError


class FailingKeyValueStore(MemoryKeyValueStore):
    """Store whose writes always fail."""

    def set(self, key: str, data: bytes) -> bool:
        return False


def test_upsert_creates_entry(entry_store: EntryStore, clock: FixedClock) -> None:
    """Test that the first save for a date assigns id and timestamps."""
    entry = entry_store.upsert(make_draft(TODAY, weight_kg=75.5, steps=8000))

    if not entry.id:
        raise AssertionError("Expected an id to be assigned")
    if entry.created_at != clock.now() or entry.updated_at != clock.now():
        raise AssertionError("Expected created_at and updated_at to equal now")
    if entry.weight_kg != 75.5 or entry.steps != 8000:
        raise AssertionError(f"Unexpected field values: {entry}")
    if entry_store.all() != [entry]:
        raise AssertionError("Expected the collection to hold the new entry")


def test_upsert_updates_in_place(entry_store: EntryStore, clock: FixedClock) -> None:
    """Test that a second save for a date keeps id and created_at and replaces fields."""
    first = entry_store.upsert(make_draft(TODAY, weight_kg=75.5, notes="morning"))
    clock.advance(hours=2)
    second = entry_store.upsert(make_draft(TODAY, steps=9000))

    if second.id != first.id:
        raise AssertionError("Expected id to be preserved")
    if second.created_at != first.created_at:
        raise AssertionError("Expected created_at to be preserved")
    if second.updated_at != clock.now():
        raise AssertionError("Expected updated_at to be refreshed")
    if second.weight_kg is not None or second.notes != "":
        raise AssertionError("Expected fields missing from the draft to be replaced")
    if len(entry_store.all()) != 1:
        raise AssertionError(f"Expected 1 entry, got {len(entry_store.all())}")


def test_upsert_accepts_edited_entry(entry_store: EntryStore, clock: FixedClock) -> None:
    """Test that a loaded entry can be edited and saved back."""
    first = entry_store.upsert(make_draft(TODAY, weight_kg=70.0))
    clock.advance(hours=1)

    saved = entry_store.upsert(first.model_copy(update={"weight_kg": 71.0}))

    if saved.id != first.id or saved.created_at != first.created_at:
        raise AssertionError("Expected id and created_at to be preserved")
    if saved.updated_at != clock.now() or saved.weight_kg != 71.0:
        raise AssertionError(f"Unexpected saved entry: {saved}")
    if entry_store.all() != [saved]:
        raise AssertionError(f"Expected one entry, got {entry_store.all()}")


def test_upsert_keeps_one_entry_per_date_sorted_descending(entry_store: EntryStore) -> None:
    """Test uniqueness per date and descending order after every upsert."""
    days = [TODAY - timedelta(days=n) for n in (3, 0, 5, 1)]
    for day in days:
        entry_store.upsert(make_draft(day))
    entry_store.upsert(make_draft(days[0], steps=100))

    stored_dates = [e.date for e in entry_store.all()]

    if stored_dates != sorted(set(days), reverse=True):
        raise AssertionError(f"Unexpected order: {stored_dates}")


def test_upsert_persists_full_collection(
    entry_store: EntryStore, kv_store: MemoryKeyValueStore
) -> None:
    """Test that every upsert writes the whole collection."""
    entry_store.upsert(make_draft(TODAY, weight_kg=70.0))
    entry_store.upsert(make_draft(TODAY - timedelta(days=1), weight_kg=71.0))

    stored = json.loads(kv_store.get(DEFAULT_ENTRIES_KEY))

    if [item["date"] for item in stored] != ["2024-01-17", "2024-01-16"]:
        raise AssertionError(f"Unexpected persisted dates: {stored}")


def test_find_by_date(entry_store: EntryStore) -> None:
    """Test lookup by date, including a date with no entry."""
    entry = entry_store.upsert(make_draft(TODAY, steps=5000))

    if entry_store.find_by_date(TODAY) != entry:
        raise AssertionError("Expected to find the entry")
    if entry_store.find_by_date(date(2020, 1, 1)) is not None:
        raise AssertionError("Expected None for a date without an entry")


def test_delete_by_id(entry_store: EntryStore, kv_store: MemoryKeyValueStore) -> None:
    """Test deletion, and that an unknown id is a no-op."""
    keep = entry_store.upsert(make_draft(TODAY))
    drop = entry_store.upsert(make_draft(TODAY - timedelta(days=1)))

    if not entry_store.delete_by_id(drop.id):
        raise AssertionError("Expected delete to report a removal")
    if entry_store.delete_by_id("no-such-id"):
        raise AssertionError("Expected delete of unknown id to report nothing removed")
    if entry_store.all() != [keep]:
        raise AssertionError(f"Unexpected remaining entries: {entry_store.all()}")

    reloaded = EntryStore(kv_store)
    if [e.id for e in reloaded.all()] != [keep.id]:
        raise AssertionError("Expected the deletion to be persisted")


def test_load_from_snapshot(kv_store: MemoryKeyValueStore, clock: FixedClock) -> None:
    """Test that a new store loads and sorts the persisted collection."""
    writer = EntryStore(kv_store, clock)
    writer.upsert(make_draft(TODAY - timedelta(days=2), weight_kg=70.0))
    writer.upsert(make_draft(TODAY, weight_kg=71.0))

    reader = EntryStore(kv_store, clock)

    if [e.weight_kg for e in reader.all()] != [71.0, 70.0]:
        raise AssertionError(f"Unexpected loaded entries: {reader.all()}")


def test_corrupt_snapshot_degrades_to_empty() -> None:
    """Test that an unreadable entries record yields an empty collection."""
    kv_store = MemoryKeyValueStore({DEFAULT_ENTRIES_KEY: b"{not json"})

    store = EntryStore(kv_store)

    if store.all() != []:
        raise AssertionError("Expected an empty collection")


def test_failed_write_leaves_memory_unchanged(clock: FixedClock) -> None:
    """Test that a refused write raises and does not alter the collection."""
    store = EntryStore(FailingKeyValueStore(), clock)

    with pytest.raises(StorageError):
        store.upsert(make_draft(TODAY))

    if store.all() != []:
        raise AssertionError("Expected the collection to stay empty")


def test_replace_all_collapses_duplicate_dates(entry_store: EntryStore) -> None:
    """Test that replace_all keeps the first entry given for each date."""
    first = entry_store.upsert(make_draft(TODAY, steps=1)).model_copy(update={"id": "a"})
    dup = first.model_copy(update={"id": "b", "steps": 2})
    older = first.model_copy(update={"id": "c", "date": TODAY - timedelta(days=1)})

    entry_store.replace_all([older, first, dup])

    if [e.id for e in entry_store.all()] != ["a", "c"]:
        raise AssertionError(f"Unexpected ids: {[e.id for e in entry_store.all()]}")


def test_settings_defaults_when_absent(settings_store: SettingsStore) -> None:
    """Test that missing settings load as defaults."""
    settings = settings_store.get()

    if settings != Settings(step_goal=10000, protein_target=6, weight_unit=WeightUnit.KG):
        raise AssertionError(f"Unexpected defaults: {settings}")


def test_settings_partial_record_overlays_defaults() -> None:
    """Test that a stored record missing fields is filled from defaults."""
    kv_store = MemoryKeyValueStore({DEFAULT_SETTINGS_KEY: b'{"weight_unit": "lb"}'})

    settings = SettingsStore(kv_store).get()

    if settings.weight_unit != WeightUnit.LB or settings.step_goal != 10000:
        raise AssertionError(f"Unexpected settings: {settings}")


def test_settings_invalid_field_keeps_valid_ones() -> None:
    """Test that one invalid stored field does not reset the other fields."""
    kv_store = MemoryKeyValueStore(
        {DEFAULT_SETTINGS_KEY: b'{"step_goal": 12000, "weight_unit": "stone", "protein_target": 0}'}
    )

    settings = SettingsStore(kv_store).get()

    if settings.step_goal != 12000:
        raise AssertionError(f"Expected the valid step goal to survive, got {settings.step_goal}")
    if settings.weight_unit != WeightUnit.KG or settings.protein_target != 6:
        raise AssertionError(f"Expected defaults for invalid fields, got {settings}")


def test_settings_corrupt_record_degrades_to_defaults() -> None:
    """Test that an unreadable settings record yields defaults."""
    kv_store = MemoryKeyValueStore({DEFAULT_SETTINGS_KEY: b"[1, 2"})

    if SettingsStore(kv_store).get() != Settings():
        raise AssertionError("Expected default settings")


def test_settings_save_round_trip(
    settings_store: SettingsStore, kv_store: MemoryKeyValueStore
) -> None:
    """Test that saved settings survive a reload."""
    settings_store.save(Settings(step_goal=8000, protein_target=5, weight_unit=WeightUnit.LB))

    reloaded = SettingsStore(kv_store).get()

    if reloaded.step_goal != 8000 or reloaded.weight_unit != WeightUnit.LB:
        raise AssertionError(f"Unexpected reloaded settings: {reloaded}")
