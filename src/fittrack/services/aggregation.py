"""
Aggregation service for time-windowed statistics.

Computes rolling weight averages, weekly summaries, daily goal progress,
and the chart series from the entries held by an EntryStore. Every
computation re-scans the store; no state is carried between calls.
"""

import logging
from datetime import date, timedelta

from fittrack.domain.entry import Entry, Settings
from fittrack.domain.stats import (
    WINDOW_DAYS,
    DailyStats,
    RollingAverage,
    StepsPoint,
    WeeklySummary,
    WeightPoint,
)
from fittrack.services.entry_store import EntryStore
from fittrack.utils.clock import Clock

logger = logging.getLogger(__name__)


def week_start_for(day: date) -> date:
    """Return the Monday of the week containing day."""
    return day - timedelta(days=day.weekday())


def chart_label(day: date) -> str:
    """Short chart label, e.g. "Jan 15"."""
    return f"{day:%b} {day.day}"


def _mean(values: list[float]) -> float | None:
    if not values:
        return None
    return sum(values) / len(values)


class AggregationService:
    """
    Service deriving statistics from the entry store.

    Absent measurements are skipped in sums and counts, never read as zero.
    The two exceptions are average protein (0 when no day has protein) and
    the weekly steps series (absent steps add nothing).
    """

    def __init__(self, store: EntryStore, clock: Clock | None = None) -> None:
        """
        Initialize aggregation service.

        Args:
            store: Entry store to read from.
            clock: Source of "today" for the chart series.
        """
        self.store = store
        self.clock = clock or Clock()

    def _entries_between(self, start: date, end: date) -> list[Entry]:
        return [e for e in self.store.all() if start <= e.date <= end]

    def _weights_between(self, start: date, end: date) -> list[float]:
        return [
            e.weight_kg for e in self._entries_between(start, end) if e.weight_kg is not None
        ]

    def rolling_average(self, day: date) -> RollingAverage:
        """
        Calculate the 7-day rolling weight average ending on day.

        The window is [day - 6, day], both ends inclusive.

        Args:
            day: Last day of the window.

        Returns:
            RollingAverage with value None when the window has no weights,
            and is_insufficient set when exactly one weight backs the value.
        """
        weights = self._weights_between(day - timedelta(days=WINDOW_DAYS - 1), day)
        count = len(weights)

        return RollingAverage(
            end_date=day,
            value=_mean(weights),
            count=count,
            is_insufficient=count == 1,
        )

    def weekly_summary(self, week_start: date) -> WeeklySummary:
        """
        Summarize the 7-day span starting on week_start.

        Args:
            week_start: First day of the span (normally a Monday).

        Returns:
            WeeklySummary for [week_start, week_start + 6].
        """
        week_end = week_start + timedelta(days=WINDOW_DAYS - 1)
        entries = self._entries_between(week_start, week_end)

        avg_weight = _mean([e.weight_kg for e in entries if e.weight_kg is not None])
        prev_avg_weight = _mean(
            self._weights_between(
                week_start - timedelta(days=WINDOW_DAYS),
                week_end - timedelta(days=WINDOW_DAYS),
            )
        )
        weight_change = (
            avg_weight - prev_avg_weight
            if avg_weight is not None and prev_avg_weight is not None
            else None
        )

        # Every day's total counts toward the sum; only days with protein count as days.
        protein_sum = sum(e.protein_palms.total for e in entries)
        protein_days = sum(1 for e in entries if e.protein_palms.total > 0)
        avg_protein = protein_sum / protein_days if protein_days > 0 else 0.0

        return WeeklySummary(
            week_start=week_start,
            week_end=week_end,
            avg_weight_kg=avg_weight,
            weight_change_kg=weight_change,
            workouts_completed=sum(1 for e in entries if e.workout),
            avg_protein=avg_protein,
            adherence_pct=len(entries) / WINDOW_DAYS * 100,
            days_with_entries=len(entries),
        )

    def current_week_summary(self) -> WeeklySummary:
        """Summarize the Monday-anchored week containing today."""
        return self.weekly_summary(week_start_for(self.clock.today()))

    @staticmethod
    def daily_stats(entry: Entry | None, settings: Settings) -> DailyStats:
        """
        Calculate one day's progress against the user's goals.

        Args:
            entry: The day's entry, or None when nothing was recorded.
            settings: Goals to measure against.

        Returns:
            DailyStats with progress percentages capped at 100.
        """
        if entry is None:
            return DailyStats()

        total_protein = entry.protein_palms.total
        protein_progress = min(total_protein / settings.protein_target * 100, 100.0)
        steps_progress = (
            min(entry.steps / settings.step_goal * 100, 100.0) if entry.steps is not None else 0.0
        )

        return DailyStats(
            total_protein=total_protein,
            protein_progress=protein_progress,
            steps_progress=steps_progress,
            has_workout=entry.workout,
        )

    def weight_series(self, days: int = 30) -> list[WeightPoint]:
        """
        Build the weight trend series for the last days days, ending today.

        Args:
            days: Number of consecutive days, oldest first.

        Returns:
            One WeightPoint per day with the day's weight and rolling average.
        """
        if days < 0:
            raise ValueError(f"days must be non-negative, got {days}")

        today = self.clock.today()
        points: list[WeightPoint] = []

        for offset in range(days - 1, -1, -1):
            day = today - timedelta(days=offset)
            entry = self.store.find_by_date(day)
            rolling = self.rolling_average(day)
            points.append(
                WeightPoint(
                    date=day,
                    label=chart_label(day),
                    weight_kg=entry.weight_kg if entry is not None else None,
                    rolling_avg_kg=rolling.value,
                )
            )

        logger.debug(f"Built weight series of {len(points)} days ending {today}")
        return points

    def weekly_steps_series(self, weeks: int = 4) -> list[StepsPoint]:
        """
        Build the weekly steps series for the most recent Monday-anchored weeks.

        Args:
            weeks: Number of weeks, oldest first; the last is the current week.

        Returns:
            One StepsPoint per week with the sum of recorded steps.
        """
        if weeks < 0:
            raise ValueError(f"weeks must be non-negative, got {weeks}")

        current_week = week_start_for(self.clock.today())
        points: list[StepsPoint] = []

        for offset in range(weeks - 1, -1, -1):
            start = current_week - timedelta(weeks=offset)
            entries = self._entries_between(start, start + timedelta(days=WINDOW_DAYS - 1))
            points.append(
                StepsPoint(
                    week_start=start,
                    label=chart_label(start),
                    steps=sum(e.steps or 0 for e in entries),
                )
            )

        return points
