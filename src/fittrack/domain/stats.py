"""
Aggregation result models.

"No data" is always None; a computed 0 is a real value.
"""

from datetime import date as DateType

from pydantic import BaseModel, Field

WINDOW_DAYS = 7


class RollingAverage(BaseModel):
    """Mean weight over the 7 calendar days ending on a given date."""

    end_date: DateType
    value: float | None = Field(None, description="Mean weight in kilograms, None if no data")
    count: int = Field(0, ge=0, description="Weight measurements found in the window")
    is_insufficient: bool = Field(
        False, description="True when exactly one measurement backs the value"
    )

    @property
    def has_data(self) -> bool:
        return self.value is not None

    @property
    def coverage_label(self) -> str:
        """Measurements against the full window, e.g. "1/7"."""
        return f"{self.count}/{WINDOW_DAYS}"


class WeeklySummary(BaseModel):
    """Statistics for a 7-day span starting on week_start."""

    week_start: DateType
    week_end: DateType
    avg_weight_kg: float | None = None
    weight_change_kg: float | None = Field(
        None, description="Change against the previous 7-day span, None unless both have data"
    )
    workouts_completed: int = 0
    avg_protein: float = Field(0.0, description="Palms per day with protein logged")
    adherence_pct: float = Field(0.0, description="Days with any entry, out of 7, as a percentage")
    days_with_entries: int = 0


class DailyStats(BaseModel):
    """Progress of a single day against the user's goals."""

    total_protein: int = 0
    protein_progress: float = Field(0.0, ge=0, le=100)
    steps_progress: float = Field(0.0, ge=0, le=100)
    has_workout: bool = False


class WeightPoint(BaseModel):
    """One day of the weight trend chart."""

    date: DateType
    label: str
    weight_kg: float | None = None
    rolling_avg_kg: float | None = None


class StepsPoint(BaseModel):
    """One Monday-anchored week of the steps chart."""

    week_start: DateType
    label: str
    steps: int = 0
