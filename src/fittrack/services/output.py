"""
Output service for writing ledger data to files.

Writes the entry collection and the chart series as CSV, and export
documents as JSON.
"""

import logging
from pathlib import Path

import pandas as pd

from fittrack.domain.entry import Entry
from fittrack.domain.stats import StepsPoint, WeightPoint
from fittrack.utils.parameters import OutputConfig

logger = logging.getLogger(__name__)

ENTRY_COLUMNS = [
    "date",
    "weight_kg",
    "waist_cm",
    "steps",
    "workout",
    "workout_notes",
    "protein_breakfast",
    "protein_lunch",
    "protein_dinner",
    "protein_total",
    "notes",
    "id",
    "created_at",
    "updated_at",
]


class OutputService:
    """
    Service for writing data to output files.

    Missing measurements are written as empty cells, never as 0.
    """

    def __init__(self, config: OutputConfig) -> None:
        """
        Initialize output service.

        Args:
            config: Output configuration.
        """
        self.config = config
        self.output_dir = Path(config.dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def write_entries_csv(self, entries: list[Entry]) -> Path:
        """
        Write entries to CSV, one row per day, oldest first.

        Args:
            entries: Entries to write.

        Returns:
            Path of the written file.
        """
        csv_path = self.output_dir / self.config.files.entries_csv

        df = pd.DataFrame([e.to_record() for e in entries], columns=ENTRY_COLUMNS)
        df = df.sort_values("date")
        # keep step counts integral despite missing values
        df["steps"] = pd.to_numeric(df["steps"]).astype("Int64")

        df.to_csv(csv_path, index=False, encoding="utf-8")
        logger.info(f"Wrote {len(df)} entries to {csv_path}")
        return csv_path

    def write_series_csv(
        self,
        weight_points: list[WeightPoint],
        steps_points: list[StepsPoint],
    ) -> tuple[Path, Path]:
        """
        Write the weight and weekly steps chart series to CSV.

        Args:
            weight_points: Daily weight trend series.
            steps_points: Weekly steps series.

        Returns:
            Paths of the weight and steps files.
        """
        weight_path = self.output_dir / self.config.files.weight_series_csv
        steps_path = self.output_dir / self.config.files.steps_series_csv

        weight_df = pd.DataFrame(
            [p.model_dump(mode="json") for p in weight_points],
            columns=["date", "label", "weight_kg", "rolling_avg_kg"],
        )
        weight_df["rolling_avg_kg"] = pd.to_numeric(weight_df["rolling_avg_kg"]).round(2)
        weight_df.to_csv(weight_path, index=False, encoding="utf-8")

        steps_df = pd.DataFrame(
            [p.model_dump(mode="json") for p in steps_points],
            columns=["week_start", "label", "steps"],
        )
        steps_df.to_csv(steps_path, index=False, encoding="utf-8")

        logger.info(f"Wrote chart series to {weight_path} and {steps_path}")
        return weight_path, steps_path

    def write_export(self, document_json: str, target: str | Path | None = None) -> Path:
        """
        Write an export document to a JSON file.

        Args:
            document_json: Serialized export document.
            target: Destination path; defaults to the configured export file
                inside the output directory.

        Returns:
            Path of the written file.
        """
        if target is None:
            export_path = self.output_dir / self.config.files.export_json
        else:
            export_path = Path(target)
            export_path.parent.mkdir(parents=True, exist_ok=True)

        with open(export_path, "w", encoding="utf-8") as f:
            f.write(document_json)

        logger.info(f"Wrote export to {export_path}")
        return export_path
