"""Unit conversion for serving amounts and body measurements.

All converters are pure and total over finite, non-negative reals. Negative
or non-finite input raises InvalidArgumentError; nothing is clamped.

Mass and volume are bridged with a density of 1 (1 ml ≈ 1 g). This is an
approximation that holds for water-like beverages, not for every liquid.
"""
import math
import re
from dataclasses import dataclass
from typing import Dict, Tuple

from src.data_layer.exceptions import UnsupportedUnitError
from src.data_layer.models import FoodItem, ServingUnit, UnitSystem
from src.data_layer.validators import require_non_negative

OZ_TO_GRAMS = 28.3495  # 1 oz = 28.3495 g
FL_OZ_TO_ML = 29.5735  # 1 fl oz = 29.5735 ml
ML_TO_GRAMS = 1.0  # Water density
LB_TO_KG = 0.453592
INCH_TO_CM = 2.54
INCHES_PER_FOOT = 12

MASS_DIMENSION = "mass"

# Units that convert to grams (volume via ML_TO_GRAMS)
UNIT_TO_GRAMS: Dict[ServingUnit, float] = {
    ServingUnit.G: 1.0,
    ServingUnit.ML: ML_TO_GRAMS,
    ServingUnit.OZ: OZ_TO_GRAMS,
    ServingUnit.FL_OZ: FL_OZ_TO_ML * ML_TO_GRAMS,
    ServingUnit.CUP: 236.588 * ML_TO_GRAMS,  # US customary cup
    ServingUnit.TBSP: 14.7868 * ML_TO_GRAMS,
    ServingUnit.TSP: 4.92892 * ML_TO_GRAMS,
}

# Count units have no mass; each is its own dimension
COUNT_UNITS = (ServingUnit.PIECE, ServingUnit.SLICE, ServingUnit.SERVING)

VOLUME_UNITS = (
    ServingUnit.ML,
    ServingUnit.FL_OZ,
    ServingUnit.CUP,
    ServingUnit.TBSP,
    ServingUnit.TSP,
)

LIQUID_NAME_PATTERN = re.compile(
    r"beer|soda|juice|water|milk|coffee|tea|wine|drink|beverage|smoothie|"
    r"shake|cola|sprite|pepsi|coke|lemonade|energy drink",
    re.IGNORECASE,
)


def ounces_to_grams(oz: float) -> float:
    return require_non_negative("oz", oz) * OZ_TO_GRAMS


def grams_to_ounces(grams: float) -> float:
    return require_non_negative("grams", grams) / OZ_TO_GRAMS


def fl_oz_to_milliliters(fl_oz: float) -> float:
    return require_non_negative("fl_oz", fl_oz) * FL_OZ_TO_ML


def milliliters_to_fl_oz(ml: float) -> float:
    return require_non_negative("ml", ml) / FL_OZ_TO_ML


def milliliters_to_grams(ml: float) -> float:
    """Approximate grams for a volume, assuming the density of water."""
    return require_non_negative("ml", ml) * ML_TO_GRAMS


def grams_to_milliliters(grams: float) -> float:
    """Approximate volume for a mass, assuming the density of water."""
    return require_non_negative("grams", grams) / ML_TO_GRAMS


def pounds_to_kg(lb: float) -> float:
    return require_non_negative("lb", lb) * LB_TO_KG


def kg_to_pounds(kg: float) -> float:
    return require_non_negative("kg", kg) / LB_TO_KG


def feet_inches_to_cm(feet: float, inches: float = 0.0) -> float:
    feet = require_non_negative("feet", feet)
    inches = require_non_negative("inches", inches)
    return (feet * INCHES_PER_FOOT + inches) * INCH_TO_CM


def cm_to_feet_inches(cm: float, normalize: bool = True) -> Tuple[int, int]:
    """Convert centimeters to whole feet and rounded inches.

    Rounding the remainder can produce 12 inches (e.g. 182.8 cm gives
    5 ft 11.97 in). With normalize=True that rolls over into the next foot;
    normalize=False returns the raw pair.

    Args:
        cm: Height in centimeters
        normalize: Roll a rounded 12 inches into an extra foot

    Returns:
        (feet, inches) tuple
    """
    total_inches = require_non_negative("cm", cm) / INCH_TO_CM
    feet = int(math.floor(total_inches / INCHES_PER_FOOT))
    inches = int(math.floor(total_inches % INCHES_PER_FOOT + 0.5))
    if normalize and inches == INCHES_PER_FOOT:
        return feet + 1, 0
    return feet, inches


@dataclass(frozen=True)
class CanonicalAmount:
    """An amount expressed in the canonical unit of its dimension.

    Mass and volume share the "mass" dimension (grams, density 1). Count
    units keep their own dimension and value.
    """

    value: float
    dimension: str


def to_canonical_amount(amount: float, unit) -> CanonicalAmount:
    """Normalize an amount in any serving unit to its canonical unit.

    Args:
        amount: Non-negative amount
        unit: ServingUnit or unit string

    Returns:
        CanonicalAmount (grams for mass/volume, raw count otherwise)

    Raises:
        InvalidArgumentError: If amount is negative or non-finite
        UnsupportedUnitError: If unit is not recognized
    """
    amount = require_non_negative("amount", amount)
    serving_unit = ServingUnit.parse(unit)
    if serving_unit in UNIT_TO_GRAMS:
        return CanonicalAmount(amount * UNIT_TO_GRAMS[serving_unit], MASS_DIMENSION)
    return CanonicalAmount(amount, serving_unit.value)


def to_grams(amount: float, unit) -> float:
    """Convert a mass or volume amount to grams.

    Raises:
        UnsupportedUnitError: For count units, which have no mass
    """
    canonical = to_canonical_amount(amount, unit)
    if canonical.dimension != MASS_DIMENSION:
        raise UnsupportedUnitError(
            unit=str(canonical.dimension),
            message="Count units require an explicit serving weight in grams",
        )
    return canonical.value


def storage_amount(amount: float, unit) -> Tuple[float, ServingUnit]:
    """Return the (amount, unit) pair a serving is stored as.

    Fluid ounces are stored as milliliters; every other unit is kept.
    """
    serving_unit = ServingUnit.parse(unit)
    if serving_unit is ServingUnit.FL_OZ:
        return fl_oz_to_milliliters(amount), ServingUnit.ML
    return require_non_negative("amount", amount), serving_unit


def is_liquid_food(name: str) -> bool:
    """Guess from the food name whether it is usually measured by volume."""
    return bool(LIQUID_NAME_PATTERN.search(name or ""))


def default_measurement_unit(food: FoodItem) -> ServingUnit:
    """Pick the unit an entry editor should start with for this food.

    Stored ml stays ml, ounces of a liquid become fluid ounces, other
    liquids default to ml and everything else to grams.
    """
    liquid = is_liquid_food(food.name)
    if food.serving_unit is ServingUnit.ML:
        return ServingUnit.ML
    if food.serving_unit is ServingUnit.OZ:
        return ServingUnit.FL_OZ if liquid else ServingUnit.OZ
    if liquid:
        return ServingUnit.ML
    return ServingUnit.G


def format_weight(weight_kg: float, unit_system: UnitSystem) -> str:
    if unit_system is UnitSystem.IMPERIAL:
        return f"{kg_to_pounds(weight_kg):.1f} lb"
    return f"{require_non_negative('weight_kg', weight_kg):.1f} kg"


def format_height(height_cm: float, unit_system: UnitSystem) -> str:
    if unit_system is UnitSystem.IMPERIAL:
        feet, inches = cm_to_feet_inches(height_cm)
        return f"{feet} ft {inches} in"
    return f"{require_non_negative('height_cm', height_cm):.0f} cm"
