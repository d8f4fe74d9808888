"""
Demo data generation.

Fills an empty ledger with two weeks of plausible entries so the summaries
and charts have something to show.
"""

import logging
import random
from datetime import timedelta

from fittrack.domain.entry import WORKOUT_PRESETS, EntryDraft, ProteinPalms
from fittrack.services.entry_store import EntryStore
from fittrack.utils.clock import Clock

logger = logging.getLogger(__name__)

START_WEIGHT_KG = 75.0
START_WAIST_CM = 85.0


def seed_demo_entries(
    store: EntryStore,
    clock: Clock | None = None,
    days: int = 14,
    rng: random.Random | None = None,
) -> int:
    """
    Write demo entries for the last days days, ending today.

    Does nothing when the store already holds entries.

    Args:
        store: Entry store to fill.
        clock: Source of "today".
        days: Number of days to generate.
        rng: Random generator; pass a seeded one for repeatable data.

    Returns:
        Number of entries written.
    """
    if store.all():
        logger.info("Store already has entries, skipping demo data")
        return 0

    clock = clock or Clock()
    rng = rng or random.Random()
    today = clock.today()
    base_weight = START_WEIGHT_KG

    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)

        # slow downward drift with daily noise
        base_weight -= rng.random() * 0.1 - 0.03
        weight = round(base_weight + rng.uniform(-0.3, 0.3), 1) if rng.random() > 0.15 else None
        steps = rng.randint(6000, 15000) if rng.random() > 0.1 else None
        workout = rng.random() > 0.4
        waist = round(START_WAIST_CM - (days - offset) * 0.05, 1) if offset % 7 == 0 else None

        store.upsert(
            EntryDraft(
                date=day,
                weight_kg=weight,
                waist_cm=waist,
                steps=steps,
                workout=workout,
                workout_notes=", ".join(rng.sample(WORKOUT_PRESETS, 2)) if workout else "",
                protein_palms=ProteinPalms(
                    breakfast=rng.randint(0, 2),
                    lunch=rng.randint(0, 2),
                    dinner=rng.randint(0, 2),
                ),
            )
        )

    logger.info(f"Seeded {days} days of demo data ending {today}")
    return days
