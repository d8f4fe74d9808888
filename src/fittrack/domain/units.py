"""
Unit conversion and display formatting.

Kilograms and centimetres are canonical. The length display unit follows the
weight unit: pounds pair with inches, kilograms with centimetres.
"""

from fittrack.domain.entry import WeightUnit

KG_TO_LB = 2.20462
CM_PER_INCH = 2.54
NO_DATA = "—"


def kg_to_display(kg: float, unit: WeightUnit) -> float:
    """Convert kilograms to the display weight unit."""
    return kg * KG_TO_LB if unit == WeightUnit.LB else kg


def display_to_kg(value: float, unit: WeightUnit) -> float:
    """Convert a weight in the display unit back to kilograms."""
    return value / KG_TO_LB if unit == WeightUnit.LB else value


def cm_to_display(cm: float, unit: WeightUnit) -> float:
    """Convert centimetres to the length unit paired with the weight unit."""
    return cm / CM_PER_INCH if unit == WeightUnit.LB else cm


def display_to_cm(value: float, unit: WeightUnit) -> float:
    """Convert a length in the paired display unit back to centimetres."""
    return value * CM_PER_INCH if unit == WeightUnit.LB else value


def length_unit_label(unit: WeightUnit) -> str:
    return "in" if unit == WeightUnit.LB else "cm"


def format_weight(kg: float | None, unit: WeightUnit) -> str:
    """
    Format a canonical weight for display.

    Args:
        kg: Weight in kilograms, or None.
        unit: Display weight unit.

    Returns:
        e.g. "75.0 kg" or "165.3 lb"; NO_DATA when the weight is absent.
    """
    if kg is None:
        return NO_DATA
    return f"{kg_to_display(kg, unit):.1f} {WeightUnit(unit).value}"


def format_waist(cm: float | None, unit: WeightUnit) -> str:
    """
    Format a canonical waist measurement for display.

    Args:
        cm: Waist in centimetres, or None.
        unit: Display weight unit (selects cm or in).

    Returns:
        e.g. "85.0 cm" or "33.5 in"; NO_DATA when the measurement is absent.
    """
    if cm is None:
        return NO_DATA
    return f"{cm_to_display(cm, unit):.1f} {length_unit_label(unit)}"
