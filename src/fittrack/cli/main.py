"""
Command-line interface for FitTrack.

Provides commands for logging days, reviewing statistics, and moving data
in and out of the local ledger.
"""

import random
from dataclasses import dataclass
from datetime import date
from pathlib import Path

import typer

from fittrack.domain.entry import (
    WORKOUT_PRESETS,
    Entry,
    EntryDraft,
    ProteinPalms,
    WeightUnit,
    append_workout_preset,
)
from fittrack.domain.units import (
    NO_DATA,
    display_to_cm,
    display_to_kg,
    format_waist,
    format_weight,
    kg_to_display,
)
from fittrack.infrastructure.kv_store import FileKeyValueStore
from fittrack.services.aggregation import AggregationService, week_start_for
from fittrack.services.entry_store import EntryStore
from fittrack.services.output import OutputService
from fittrack.services.seed import seed_demo_entries
from fittrack.services.settings_store import SettingsStore
from fittrack.services.transfer import TransferService
from fittrack.services.validators import validate_draft
from fittrack.utils.clock import Clock, parse_date
from fittrack.utils.exceptions import FitTrackError, ValidationError
from fittrack.utils.logging_config import get_logger, setup_logging
from fittrack.utils.parameters import ParameterLoader

app = typer.Typer(help="FitTrack - Personal daily-metrics tracker")

logger = get_logger(__name__)

CONFIG_OPTION = typer.Option("config/config.yaml", help="Path to configuration file")


@dataclass
class Ledger:
    """Services wired to one storage directory."""

    params: ParameterLoader
    clock: Clock
    entries: EntryStore
    settings: SettingsStore
    aggregation: AggregationService
    transfer: TransferService


def init_config(config_path: str = "config/config.yaml") -> ParameterLoader:
    """
    Initialize configuration and logging.

    Args:
        config_path: Path to configuration file.

    Returns:
        Parameter loader instance.
    """
    param_loader = ParameterLoader(config_path)
    setup_logging(param_loader.get_logging_config(), "fittrack")
    return param_loader


def open_ledger(config_path: str) -> Ledger:
    """Load configuration and build the services over the configured store."""
    params = init_config(config_path)
    storage = params.get_storage_config()

    clock = Clock(params.get_clock_config().timezone)
    kv_store = FileKeyValueStore(storage.dir)
    entries = EntryStore(kv_store, clock, key=storage.entries_key)
    settings = SettingsStore(kv_store, key=storage.settings_key)

    return Ledger(
        params=params,
        clock=clock,
        entries=entries,
        settings=settings,
        aggregation=AggregationService(entries, clock),
        transfer=TransferService(entries, settings, clock),
    )


def _fail(action: str, error: Exception) -> typer.Exit:
    logger.error(f"{action} failed: {error}")
    typer.echo(f"Error: {error}", err=True)
    return typer.Exit(code=1)


def _parse_day(value: str, clock: Clock) -> date:
    try:
        return parse_date(value, clock)
    except ValueError as e:
        raise ValidationError(str(e)) from e


def _echo_entry(entry: Entry, unit: WeightUnit) -> None:
    typer.echo(f"{entry.date.isoformat()}  (id {entry.id})")
    typer.echo(f"  Weight:   {format_weight(entry.weight_kg, unit)}")
    typer.echo(f"  Waist:    {format_waist(entry.waist_cm, unit)}")
    typer.echo(f"  Steps:    {entry.steps if entry.steps is not None else NO_DATA}")
    workout = "yes" if entry.workout else "no"
    if entry.workout and entry.workout_notes:
        workout = f"yes ({entry.workout_notes})"
    typer.echo(f"  Workout:  {workout}")
    palms = entry.protein_palms
    typer.echo(
        f"  Protein:  {palms.total} palms "
        f"(B {palms.breakfast} / L {palms.lunch} / D {palms.dinner})"
    )
    if entry.notes:
        typer.echo(f"  Notes:    {entry.notes}")


@app.command()
def log(
    day: str = typer.Argument("today", help="Date to record (YYYY-MM-DD or 'today')"),
    weight: float | None = typer.Option(None, help="Weight in the configured unit"),
    waist: float | None = typer.Option(None, help="Waist in cm, or inches when unit is lb"),
    steps: int | None = typer.Option(None, help="Step count"),
    workout: bool | None = typer.Option(None, "--workout/--no-workout", help="Workout completed"),
    workout_notes: str | None = typer.Option(None, help="Workout description"),
    preset: list[str] = typer.Option([], help=f"Append a workout preset: {', '.join(WORKOUT_PRESETS)}"),
    breakfast: int | None = typer.Option(None, min=0, help="Protein palms at breakfast"),
    lunch: int | None = typer.Option(None, min=0, help="Protein palms at lunch"),
    dinner: int | None = typer.Option(None, min=0, help="Protein palms at dinner"),
    notes: str | None = typer.Option(None, help="Daily notes"),
    config_path: str = CONFIG_OPTION,
) -> None:
    """
    Record or update the entry for a day.

    Options left out keep the values already recorded for that day.
    """
    try:
        ledger = open_ledger(config_path)
        unit = ledger.settings.get().weight_unit
        target = _parse_day(day, ledger.clock)

        result = validate_draft({"weight": weight, "steps": steps}, unit)
        if not result.valid:
            raise ValidationError(result.message)

        unknown = [p for p in preset if p not in WORKOUT_PRESETS]
        if unknown:
            raise ValidationError(f"Unknown workout preset: {', '.join(unknown)}")

        existing = ledger.entries.find_by_date(target)
        values = existing.to_draft().model_dump() if existing else {"date": target}

        if weight is not None:
            values["weight_kg"] = display_to_kg(weight, unit)
        if waist is not None:
            values["waist_cm"] = display_to_cm(waist, unit)
        if steps is not None:
            values["steps"] = steps
        if workout is not None:
            values["workout"] = workout
        if workout_notes is not None:
            values["workout_notes"] = workout_notes
        for name in preset:
            values["workout"] = True
            values["workout_notes"] = append_workout_preset(values.get("workout_notes", ""), name)

        palms = ProteinPalms.model_validate(values.get("protein_palms", {}))
        values["protein_palms"] = ProteinPalms(
            breakfast=palms.breakfast if breakfast is None else breakfast,
            lunch=palms.lunch if lunch is None else lunch,
            dinner=palms.dinner if dinner is None else dinner,
        )
        if notes is not None:
            values["notes"] = notes

        entry = ledger.entries.upsert(EntryDraft.model_validate(values))

        typer.echo("Saved entry")
        _echo_entry(entry, unit)

    except FitTrackError as e:
        raise _fail("Log", e) from e


@app.command()
def show(
    day: str = typer.Argument("today", help="Date to show (YYYY-MM-DD or 'today')"),
    config_path: str = CONFIG_OPTION,
) -> None:
    """Show a day's entry with goal progress and the 7-day average."""
    try:
        ledger = open_ledger(config_path)
        settings = ledger.settings.get()
        target = _parse_day(day, ledger.clock)

        entry = ledger.entries.find_by_date(target)
        if entry is None:
            typer.echo(f"{target.isoformat()}: no entry")
        else:
            _echo_entry(entry, settings.weight_unit)

        stats = ledger.aggregation.daily_stats(entry, settings)
        typer.echo(
            f"  Protein progress: {stats.total_protein}/{settings.protein_target} "
            f"({stats.protein_progress:.0f}%)"
        )
        typer.echo(f"  Steps progress:   {stats.steps_progress:.0f}% of {settings.step_goal:,}")

        rolling = ledger.aggregation.rolling_average(target)
        line = f"  7-day average:    {format_weight(rolling.value, settings.weight_unit)}"
        if rolling.has_data:
            line += f" ({rolling.coverage_label} days)"
        if rolling.is_insufficient:
            line += " - insufficient data"
        typer.echo(line)

    except FitTrackError as e:
        raise _fail("Show", e) from e


@app.command("list")
def list_entries(
    limit: int = typer.Option(10, min=1, help="Number of most recent entries"),
    config_path: str = CONFIG_OPTION,
) -> None:
    """List the most recent entries."""
    try:
        ledger = open_ledger(config_path)
        unit = ledger.settings.get().weight_unit
        entries = ledger.entries.all()[:limit]

        if not entries:
            typer.echo("No entries recorded")
            return

        for entry in entries:
            steps = f"{entry.steps:,}" if entry.steps is not None else NO_DATA
            typer.echo(
                f"{entry.date.isoformat()}  {format_weight(entry.weight_kg, unit):>10}  "
                f"{steps:>7} steps  {'W' if entry.workout else '-'}  "
                f"{entry.protein_palms.total} palms  {entry.id}"
            )

    except FitTrackError as e:
        raise _fail("List", e) from e


@app.command()
def delete(
    entry_id: str = typer.Argument(..., help="Id of the entry to delete"),
    config_path: str = CONFIG_OPTION,
) -> None:
    """Delete an entry by id."""
    try:
        ledger = open_ledger(config_path)
        if ledger.entries.delete_by_id(entry_id):
            typer.echo(f"Deleted entry {entry_id}")
        else:
            typer.echo(f"No entry with id {entry_id}")

    except FitTrackError as e:
        raise _fail("Delete", e) from e


@app.command()
def summary(
    week: str = typer.Option("today", help="Any date inside the week to summarize"),
    config_path: str = CONFIG_OPTION,
) -> None:
    """Summarize a Monday-to-Sunday week."""
    try:
        ledger = open_ledger(config_path)
        unit = ledger.settings.get().weight_unit
        week_start = week_start_for(_parse_day(week, ledger.clock))
        stats = ledger.aggregation.weekly_summary(week_start)

        typer.echo(f"Week of {stats.week_start:%b} {stats.week_start.day}, {stats.week_start.year}")
        typer.echo(f"  Average weight: {format_weight(stats.avg_weight_kg, unit)}")
        if stats.weight_change_kg is not None:
            change = kg_to_display(stats.weight_change_kg, unit)
            sign = "+" if change > 0 else ""
            typer.echo(f"  Change:         {sign}{change:.1f} {unit.value} vs last week")
        typer.echo(f"  Workouts:       {stats.workouts_completed}")
        typer.echo(f"  Avg protein:    {stats.avg_protein:.1f} palms")
        typer.echo(f"  Adherence:      {stats.adherence_pct:.0f}% ({stats.days_with_entries}/7 days)")

    except FitTrackError as e:
        raise _fail("Summary", e) from e


@app.command()
def trend(
    days: int | None = typer.Option(None, min=1, help="Days in the weight series"),
    weeks: int | None = typer.Option(None, min=1, help="Weeks in the steps series"),
    config_path: str = CONFIG_OPTION,
) -> None:
    """Print the weight trend and weekly steps series."""
    try:
        ledger = open_ledger(config_path)
        unit = ledger.settings.get().weight_unit
        charts = ledger.params.get_chart_config()

        typer.echo("Date     Weight      7-day avg")
        for point in ledger.aggregation.weight_series(days or charts.days):
            typer.echo(
                f"{point.label:<8} {format_weight(point.weight_kg, unit):>10}  "
                f"{format_weight(point.rolling_avg_kg, unit):>10}"
            )

        typer.echo("\nWeek of   Steps")
        for week_point in ledger.aggregation.weekly_steps_series(weeks or charts.weeks):
            typer.echo(f"{week_point.label:<8} {week_point.steps:>8,}")

    except FitTrackError as e:
        raise _fail("Trend", e) from e


@app.command()
def settings(
    step_goal: int | None = typer.Option(None, min=1, help="Daily step goal"),
    protein_target: int | None = typer.Option(None, min=1, help="Daily protein palms target"),
    unit: WeightUnit | None = typer.Option(None, help="Weight unit (kg or lb)"),
    config_path: str = CONFIG_OPTION,
) -> None:
    """Show settings, or update the ones given."""
    try:
        ledger = open_ledger(config_path)
        current = ledger.settings.get()

        updates = {
            name: value
            for name, value in (
                ("step_goal", step_goal),
                ("protein_target", protein_target),
                ("weight_unit", unit),
            )
            if value is not None
        }
        if updates:
            current = current.model_copy(update=updates)
            ledger.settings.save(current)
            typer.echo("Settings saved")

        typer.echo(f"  Step goal:      {current.step_goal:,}")
        typer.echo(f"  Protein target: {current.protein_target} palms")
        typer.echo(f"  Weight unit:    {current.weight_unit.value}")

    except FitTrackError as e:
        raise _fail("Settings", e) from e


@app.command("export")
def export_data(
    output_file: str | None = typer.Option(
        None, help="Write to this file instead of the configured export file"
    ),
    stdout: bool = typer.Option(False, "--stdout", help="Print the document instead"),
    config_path: str = CONFIG_OPTION,
) -> None:
    """Export all entries and settings as JSON."""
    try:
        ledger = open_ledger(config_path)
        document = ledger.transfer.export_json()

        if stdout:
            typer.echo(document)
            return

        output_service = OutputService(ledger.params.get_output_config())
        path = output_service.write_export(document, output_file)
        typer.echo(f"Exported {len(ledger.entries.all())} entries to {path}")

    except FitTrackError as e:
        raise _fail("Export", e) from e


@app.command("import")
def import_data(
    input_file: str = typer.Argument(..., help="Exported JSON document"),
    config_path: str = CONFIG_OPTION,
) -> None:
    """
    Import an exported document.

    Entries in the document replace all current entries.
    """
    try:
        ledger = open_ledger(config_path)
        path = Path(input_file)
        if not path.exists():
            raise ValidationError(f"Import file not found: {path}")

        if not ledger.transfer.import_json(path.read_bytes()):
            raise ValidationError("Failed to import data. Please check the JSON format.")

        typer.echo(f"Data imported successfully ({len(ledger.entries.all())} entries)")

    except FitTrackError as e:
        raise _fail("Import", e) from e


@app.command()
def reset(
    yes: bool = typer.Option(False, "--yes", help="Confirm deleting all data"),
    config_path: str = CONFIG_OPTION,
) -> None:
    """Delete all entries and restore default settings."""
    try:
        if not yes:
            raise ValidationError("Refusing to reset without --yes; this cannot be undone")

        ledger = open_ledger(config_path)
        ledger.transfer.reset()
        typer.echo("All data has been reset")

    except FitTrackError as e:
        raise _fail("Reset", e) from e


@app.command()
def seed(
    days: int = typer.Option(14, min=1, help="Days of demo data"),
    random_seed: int | None = typer.Option(None, help="Seed for repeatable demo data"),
    config_path: str = CONFIG_OPTION,
) -> None:
    """Fill an empty ledger with demo data."""
    try:
        ledger = open_ledger(config_path)
        written = seed_demo_entries(ledger.entries, ledger.clock, days, random.Random(random_seed))

        if written:
            typer.echo(f"Seeded {written} days of demo data")
        else:
            typer.echo("Ledger already has entries; nothing seeded")

    except FitTrackError as e:
        raise _fail("Seed", e) from e


@app.command()
def csv(
    config_path: str = CONFIG_OPTION,
) -> None:
    """Write entries and chart series as CSV files."""
    try:
        ledger = open_ledger(config_path)
        charts = ledger.params.get_chart_config()
        output_service = OutputService(ledger.params.get_output_config())

        entries_path = output_service.write_entries_csv(ledger.entries.all())
        weight_path, steps_path = output_service.write_series_csv(
            ledger.aggregation.weight_series(charts.days),
            ledger.aggregation.weekly_steps_series(charts.weeks),
        )

        typer.echo(f"Wrote {entries_path}")
        typer.echo(f"Wrote {weight_path}")
        typer.echo(f"Wrote {steps_path}")

    except FitTrackError as e:
        raise _fail("CSV", e) from e


if __name__ == "__main__":
    app()
