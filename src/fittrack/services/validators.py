"""
Range validation for user-entered numeric fields.

Only weight and steps are range-checked. Waist, protein palms and notes are
free-form.
"""

from typing import Any

from pydantic import BaseModel

from fittrack.domain.entry import WeightUnit
from fittrack.domain.units import display_to_kg, kg_to_display

MIN_WEIGHT_KG = 20
MAX_WEIGHT_KG = 300
MIN_STEPS = 0
MAX_STEPS = 100000


class ValidationResult(BaseModel):
    """Outcome of a validation check."""

    valid: bool
    message: str | None = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(valid=True)

    @classmethod
    def fail(cls, message: str) -> "ValidationResult":
        return cls(valid=False, message=message)


def validate_weight(value: float, unit: WeightUnit) -> ValidationResult:
    """
    Check a weight, entered in the display unit, against [20, 300] kg.

    Args:
        value: Weight as entered.
        unit: Unit the weight was entered in.

    Returns:
        ValidationResult; on failure the message states the bounds in the
        entered unit.
    """
    value_kg = display_to_kg(value, unit)
    if MIN_WEIGHT_KG <= value_kg <= MAX_WEIGHT_KG:
        return ValidationResult.ok()

    unit = WeightUnit(unit)
    low = round(kg_to_display(MIN_WEIGHT_KG, unit))
    high = round(kg_to_display(MAX_WEIGHT_KG, unit))
    return ValidationResult.fail(f"Weight should be between {low} and {high} {unit.value}")


def validate_steps(value: int) -> ValidationResult:
    """Check a step count against [0, 100000]."""
    if MIN_STEPS <= value <= MAX_STEPS:
        return ValidationResult.ok()
    return ValidationResult.fail(f"Steps should be between {MIN_STEPS} and {MAX_STEPS:,}")


def validate_draft(values: dict[str, Any], unit: WeightUnit) -> ValidationResult:
    """
    Run every applicable field check on raw form values.

    Args:
        values: Field values as entered; "weight" is in the display unit.
        unit: Display weight unit.

    Returns:
        The first failing result, or a passing result.
    """
    weight = values.get("weight")
    if weight is not None:
        result = validate_weight(weight, unit)
        if not result.valid:
            return result

    steps = values.get("steps")
    if steps is not None:
        result = validate_steps(steps)
        if not result.valid:
            return result

    return ValidationResult.ok()
