"""Shared fixtures for the FitTrack tests."""

from datetime import date, datetime, timedelta

import pytest
import pytz

from fittrack.domain.entry import EntryDraft, ProteinPalms
from fittrack.infrastructure.kv_store import MemoryKeyValueStore
from fittrack.services.aggregation import AggregationService
from fittrack.services.entry_store import EntryStore
from fittrack.services.settings_store import SettingsStore
from fittrack.services.transfer import TransferService
from fittrack.utils.clock import Clock

# A Wednesday
TODAY = date(2024, 1, 17)


class FixedClock(Clock):
    """Clock frozen at a given instant."""

    def __init__(self, now: datetime) -> None:
        super().__init__("UTC")
        self._now = now

    def now(self) -> datetime:
        return self._now

    def advance(self, **kwargs: float) -> None:
        self._now = self._now + timedelta(**kwargs)


def make_draft(day: date, **fields) -> EntryDraft:
    """Build a draft for day; protein may be given as a (b, l, d) tuple."""
    protein = fields.pop("protein", None)
    if protein is not None:
        fields["protein_palms"] = ProteinPalms(
            breakfast=protein[0], lunch=protein[1], dinner=protein[2]
        )
    return EntryDraft(date=day, **fields)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(pytz.UTC.localize(datetime(2024, 1, 17, 9, 30, 0)))


@pytest.fixture
def kv_store() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def entry_store(kv_store: MemoryKeyValueStore, clock: FixedClock) -> EntryStore:
    return EntryStore(kv_store, clock)


@pytest.fixture
def settings_store(kv_store: MemoryKeyValueStore) -> SettingsStore:
    return SettingsStore(kv_store)


@pytest.fixture
def aggregation(entry_store: EntryStore, clock: FixedClock) -> AggregationService:
    return AggregationService(entry_store, clock)


@pytest.fixture
def transfer(
    entry_store: EntryStore, settings_store: SettingsStore, clock: FixedClock
) -> TransferService:
    return TransferService(entry_store, settings_store, clock)
