"""Weight unit conversion and plate-increment rounding."""

import math

from .config import KG_PER_LB, LB_PER_KG, PLATE_INCREMENT
from .models import WeightUnit


def convert_weight(weight: float, from_unit: WeightUnit, to_unit: WeightUnit) -> float:
    """
    Convert a weight between kg and lbs.

    Args:
        weight: Value in ``from_unit``
        from_unit: "kg" or "lbs"
        to_unit: "kg" or "lbs"

    Returns:
        Value in ``to_unit``
    """
    if from_unit == to_unit:
        return weight
    if from_unit == "lbs" and to_unit == "kg":
        return weight * KG_PER_LB
    if from_unit == "kg" and to_unit == "lbs":
        return weight * LB_PER_KG
    raise ValueError(f"Unsupported conversion {from_unit!r} -> {to_unit!r}")


def round_to_increment(weight: float, unit: WeightUnit = "kg") -> float:
    """
    Round to the nearest loadable increment (1 kg or 2.5 lbs).

    Halves round up, so 20.5 kg becomes 21 kg.

    Args:
        weight: Raw weight
        unit: Unit the weight is expressed in

    Returns:
        Rounded weight
    """
    if unit not in PLATE_INCREMENT:
        raise ValueError(f"Unknown weight unit: {unit!r}")
    increment = PLATE_INCREMENT[unit]
    return round(math.floor(weight / increment + 0.5) * increment, 2)
