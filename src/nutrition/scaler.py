"""Nutrition scaling by serving amount and serving count.

Nutrition for a logged quantity is derived from a reference serving:

    scale_factor = target_amount / reference_amount
    per_serving  = round(reference × scale_factor)
    total        = round(per_serving × servings)

Rounding happens at BOTH steps. Logged entries store per_serving and the
app shows total, so existing data depends on the double rounding; a
single-rounding mode is available behind a flag.

Rounding is per field: calories and milligram fields to the nearest
integer, gram fields to the nearest 0.1, halves rounded up.

Reverse scaling (estimate_base_nutrition) recovers an approximate per-100 g
baseline from an already-scaled entry. It is lossy: the stored values were
rounded, so the estimate carries less precision than the source data.
"""
import logging
import math
from dataclasses import dataclass, fields, replace
from typing import Optional

from src.data_layer.exceptions import UnsupportedUnitError
from src.data_layer.models import FoodEntry, FoodItem, MealType, NutritionFacts
from src.data_layer.validators import (
    parse_enum,
    require_non_negative,
    require_positive,
)
from src.nutrition.units import MASS_DIMENSION, storage_amount, to_canonical_amount

logger = logging.getLogger(__name__)

BASE_AMOUNT_GRAMS = 100.0

# Fields rounded to whole numbers; everything else goes to one decimal
WHOLE_NUMBER_FIELDS = ("calories", "sodium_mg", "cholesterol_mg")


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (0.5 → 1, 2.5 → 3)."""
    return int(math.floor(value + 0.5))


def round_to_tenth(value: float) -> float:
    """Round to one decimal place with halves going up."""
    return math.floor(value * 10 + 0.5) / 10


def round_nutrition(facts: NutritionFacts) -> NutritionFacts:
    """Apply per-field display rounding; unknown optional fields stay None."""
    rounded = {}
    for f in fields(facts):
        value = getattr(facts, f.name)
        if value is None:
            rounded[f.name] = None
        elif f.name in WHOLE_NUMBER_FIELDS:
            rounded[f.name] = round_half_up(value)
        else:
            rounded[f.name] = round_to_tenth(value)
    return NutritionFacts(**rounded)


def multiply_nutrition(facts: NutritionFacts, factor: float) -> NutritionFacts:
    """Multiply every known field by factor without rounding."""
    factor = require_non_negative("factor", factor)
    scaled = {}
    for f in fields(facts):
        value = getattr(facts, f.name)
        scaled[f.name] = None if value is None else value * factor
    return NutritionFacts(**scaled)


@dataclass
class ScaledNutrition:
    """Result of NutritionScaler.scale().

    Attributes:
        per_serving: Rounded nutrition for one serving of the target amount
        total: Rounded nutrition for all servings
        scale_factor: target_amount / reference_amount
        servings: Servings count applied to per_serving
    """

    per_serving: NutritionFacts
    total: NutritionFacts
    scale_factor: float
    servings: float


@dataclass
class BaseEstimate:
    """Nutrition recovered for a reference amount of an entry's food.

    is_estimate is True when the values were reverse-scaled from rounded
    entry data and should be displayed as approximate.
    """

    nutrition: NutritionFacts
    base_amount: float
    is_estimate: bool


def estimate_base_nutrition(
    entry: FoodEntry, base_amount: float = BASE_AMOUNT_GRAMS
) -> BaseEstimate:
    """Recover approximate per-base-amount nutrition from a logged entry.

    An entry logged with exactly one serving whose serving weight differs
    from the base amount is assumed to hold nutrition already scaled to that
    serving, and is scaled back by base_amount / serving_grams. Any other
    entry is assumed to already hold base nutrition.

    Args:
        entry: Logged entry
        base_amount: Reference amount in grams (default 100)

    Returns:
        BaseEstimate; never raises for the lossy case
    """
    food = entry.food_item
    serving = to_canonical_amount(food.serving_size, food.serving_unit)
    serving_grams = serving.value
    was_scaled = (
        serving.dimension == MASS_DIMENSION
        and entry.servings == 1
        and serving_grams != base_amount
    )

    if was_scaled and serving_grams > 0:
        logger.info(
            "Reverse-scaling entry %s from %.2f to %.0f (estimate)",
            entry.id,
            serving_grams,
            base_amount,
        )
        return BaseEstimate(
            nutrition=multiply_nutrition(food.nutrition, base_amount / serving_grams),
            base_amount=base_amount,
            is_estimate=True,
        )

    return BaseEstimate(
        nutrition=food.nutrition, base_amount=base_amount, is_estimate=False
    )


class NutritionScaler:
    """Scales reference nutrition to logged quantities.

    Usage:
        scaler = NutritionScaler()

        # 150 g of an apple declared per 100 g, one serving
        result = scaler.scale(apple_facts, reference_amount=100.0,
                              target_amount=150.0, servings=1)
        result.total.calories  # 78
    """

    def __init__(self, single_rounding: bool = False):
        """Initialize scaler.

        Args:
            single_rounding: Round totals once from unrounded values instead
                of rounding per serving and again per total
        """
        self.single_rounding = single_rounding

    def scale(
        self,
        reference: NutritionFacts,
        reference_amount: float,
        target_amount: float,
        servings: float = 1.0,
    ) -> ScaledNutrition:
        """Scale reference nutrition to target_amount × servings.

        Args:
            reference: Nutrition for reference_amount (canonical unit)
            reference_amount: Amount the reference nutrition is declared for
            target_amount: Amount per serving actually consumed (same unit)
            servings: Number of servings of target_amount

        Returns:
            ScaledNutrition with per-serving and total nutrition

        Raises:
            InvalidArgumentError: If reference_amount is zero, any amount is
                negative or non-finite, or servings is negative
        """
        reference_amount = require_positive("reference_amount", reference_amount)
        target_amount = require_non_negative("target_amount", target_amount)
        servings = require_non_negative("servings", servings)

        if target_amount == 0:
            zero = NutritionFacts.zero()
            return ScaledNutrition(
                per_serving=zero, total=zero, scale_factor=0.0, servings=servings
            )

        scale_factor = target_amount / reference_amount
        unrounded = multiply_nutrition(reference, scale_factor)
        per_serving = round_nutrition(unrounded)

        if self.single_rounding:
            total = round_nutrition(multiply_nutrition(unrounded, servings))
        else:
            total = round_nutrition(multiply_nutrition(per_serving, servings))

        logger.debug(
            "Scaled nutrition by %.4f × %s servings: %s kcal",
            scale_factor,
            servings,
            total.calories,
        )
        return ScaledNutrition(
            per_serving=per_serving,
            total=total,
            scale_factor=scale_factor,
            servings=servings,
        )

    def scale_food(
        self, food: FoodItem, amount: float, unit, servings: float = 1.0
    ) -> ScaledNutrition:
        """Scale a food's declared serving to amount in any compatible unit.

        Raises:
            UnsupportedUnitError: If unit and the food's serving unit are in
                different dimensions (e.g. grams vs pieces)
        """
        reference = to_canonical_amount(food.serving_size, food.serving_unit)
        target = to_canonical_amount(amount, unit)
        if reference.dimension != target.dimension:
            raise UnsupportedUnitError(
                unit=str(unit),
                message=(
                    f"Cannot scale '{food.name}' declared per "
                    f"{food.serving_unit.value} to {target.dimension}"
                ),
            )
        return self.scale(food.nutrition, reference.value, target.value, servings)

    def scale_servings(self, facts: NutritionFacts, servings: float) -> NutritionFacts:
        """Multiply nutrition by a servings count and round once."""
        return round_nutrition(
            multiply_nutrition(facts, require_non_negative("servings", servings))
        )

    def rescale_entry(
        self,
        entry: FoodEntry,
        amount: float,
        unit,
        servings: float,
        meal_type: Optional[MealType] = None,
        notes: Optional[str] = None,
    ) -> FoodEntry:
        """Edit an entry's serving amount, unit and count.

        The entry's base nutrition is recovered (possibly as an estimate),
        scaled to the new serving and embedded in a new FoodItem snapshot.
        Fluid ounces are stored as milliliters. The original entry and any
        catalog item it came from are left unchanged.

        Args:
            entry: Entry being edited
            amount: New serving amount
            unit: Unit of amount (mass or volume)
            servings: New number of servings
            meal_type: Optional new meal type
            notes: Optional new notes (None keeps the current notes)

        Returns:
            New FoodEntry with the same id

        Raises:
            InvalidArgumentError: If amount or servings is not positive
            UnsupportedUnitError: If unit is a count unit, or the entry
                was logged in one
        """
        amount = require_positive("amount", amount)
        servings = require_positive("servings", servings)
        target = to_canonical_amount(amount, unit)
        if target.dimension != MASS_DIMENSION:
            raise UnsupportedUnitError(
                unit=str(unit),
                message="Entries can only be re-measured by weight or volume",
            )
        serving = to_canonical_amount(
            entry.food_item.serving_size, entry.food_item.serving_unit
        )
        if serving.dimension != MASS_DIMENSION:
            raise UnsupportedUnitError(
                unit=entry.food_item.serving_unit.value,
                message=(
                    f"Entries logged per {serving.dimension} cannot be "
                    "re-measured by weight or volume"
                ),
            )

        base = estimate_base_nutrition(entry)
        scaled = self.scale(base.nutrition, base.base_amount, target.value, servings)

        stored_amount, stored_unit = storage_amount(amount, unit)
        food_item = replace(
            entry.food_item,
            serving_size=stored_amount,
            serving_unit=stored_unit,
            nutrition=scaled.per_serving,
        )
        return replace(
            entry,
            food_item=food_item,
            servings=servings,
            meal_type=(
                entry.meal_type
                if meal_type is None
                else parse_enum(MealType, meal_type, "meal_type")
            ),
            notes=entry.notes if notes is None else (notes or None),
        )

