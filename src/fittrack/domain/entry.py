"""
Daily entry and settings domain models.

An entry is one calendar day's recorded data. Measurements are stored in
canonical units (kilograms, centimetres); conversion to display units lives
in fittrack.domain.units.
"""

import uuid
from datetime import date as DateType
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, PositiveInt

WORKOUT_PRESETS: tuple[str, ...] = ("Pushups", "Split Squats", "Rows", "Stepper")


class WeightUnit(str, Enum):
    """Unit system toggle. Also decides the length unit (cm or in)."""

    KG = "kg"
    LB = "lb"


class ProteinPalms(BaseModel):
    """Protein portions, in palms, per meal slot."""

    breakfast: int = Field(0, ge=0)
    lunch: int = Field(0, ge=0)
    dinner: int = Field(0, ge=0)

    @property
    def total(self) -> int:
        """Sum of the three meal slots."""
        return self.breakfast + self.lunch + self.dinner


class EntryDraft(BaseModel):
    """Field values for one day, before the store assigns identity and timestamps."""

    date: DateType = Field(description="Calendar day of the entry (ISO, no timezone)")
    weight_kg: float | None = Field(None, description="Weight in kilograms")
    waist_cm: float | None = Field(None, description="Waist circumference in centimetres")
    steps: int | None = Field(None, ge=0, description="Step count")
    workout: bool = False
    workout_notes: str = ""
    protein_palms: ProteinPalms = Field(default_factory=ProteinPalms)
    notes: str = ""


class Entry(EntryDraft):
    """
    A stored daily entry.

    The store guarantees at most one entry per date; the entry itself does not.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_draft(self) -> EntryDraft:
        """Return the editable fields of this entry as a draft."""
        return EntryDraft(**self.model_dump(include=set(EntryDraft.model_fields)))

    def to_record(self) -> dict[str, Any]:
        """
        Flatten the entry into a single-level record for tabular output.

        Returns:
            Dictionary with protein palms split into one column per meal slot.
        """
        data = self.model_dump(mode="json", exclude={"protein_palms"})
        data["protein_breakfast"] = self.protein_palms.breakfast
        data["protein_lunch"] = self.protein_palms.lunch
        data["protein_dinner"] = self.protein_palms.dinner
        data["protein_total"] = self.protein_palms.total
        return data


class Settings(BaseModel):
    """User settings singleton. Absent fields fall back to the defaults."""

    step_goal: PositiveInt = 10000
    protein_target: PositiveInt = 6
    weight_unit: WeightUnit = WeightUnit.KG


class ExportDocument(BaseModel):
    """Portable snapshot of the whole ledger."""

    entries: list[Entry]
    settings: Settings
    exported_at: datetime


def append_workout_preset(notes: str, preset: str) -> str:
    """
    Append a workout preset to existing workout notes.

    Args:
        notes: Current workout notes.
        preset: Preset name to append.

    Returns:
        The preset alone when notes are empty, otherwise "notes, preset".
    """
    notes = notes.strip()
    return f"{notes}, {preset}" if notes else preset
