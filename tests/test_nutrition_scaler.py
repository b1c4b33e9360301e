"""Tests for nutrition scaling by serving amount and serving count.

Per-serving values are rounded, then rounded again after multiplying by the
servings count. The tests pin that double rounding down exactly.
"""

import math
from datetime import date

import pytest

from src.data_layer.exceptions import InvalidArgumentError, UnsupportedUnitError
from src.data_layer.models import (
    FoodEntry,
    FoodItem,
    MealType,
    NutritionFacts,
    ServingUnit,
)
from src.nutrition.scaler import (
    NutritionScaler,
    ScaledNutrition,
    estimate_base_nutrition,
    multiply_nutrition,
    round_half_up,
    round_nutrition,
    round_to_tenth,
)


@pytest.fixture
def scaler():
    """Create scaler instance."""
    return NutritionScaler()


@pytest.fixture
def apple_per_100g():
    """Apple nutrition per 100 g."""
    return NutritionFacts(calories=52, protein_g=0.3, carbs_g=14.0, fat_g=0.2)


@pytest.fixture
def apple(apple_per_100g):
    return FoodItem(
        id="apple",
        name="Apple",
        serving_size=100,
        serving_unit=ServingUnit.G,
        nutrition=apple_per_100g,
    )


def make_entry(food: FoodItem, servings: float = 1.0) -> FoodEntry:
    return FoodEntry(
        id="entry-1",
        food_item=food,
        servings=servings,
        meal_type=MealType.SNACK,
        date=date(2024, 3, 4),
        notes="after gym",
    )


class TestRounding:
    """Tests for the rounding helpers."""

    def test_round_half_up(self):
        assert round_half_up(0.5) == 1
        assert round_half_up(2.5) == 3
        assert round_half_up(2.49) == 2

    def test_round_to_tenth(self):
        assert round_to_tenth(1.25) == 1.3
        assert round_to_tenth(1.24) == 1.2

    def test_round_nutrition_per_field(self):
        facts = NutritionFacts(
            calories=77.5,
            protein_g=1.26,
            carbs_g=20.04,
            fat_g=0.35,
            sodium_mg=12.5,
            cholesterol_mg=3.4,
        )
        rounded = round_nutrition(facts)

        assert rounded.calories == 78
        assert rounded.protein_g == 1.3
        assert rounded.carbs_g == 20.0
        assert rounded.sodium_mg == 13
        assert rounded.cholesterol_mg == 3
        assert rounded.fiber_g is None

    def test_multiply_keeps_unknown_fields_unknown(self):
        facts = NutritionFacts(calories=100, protein_g=1.0, carbs_g=2.0, fat_g=3.0)
        scaled = multiply_nutrition(facts, 2)

        assert scaled.calories == 200
        assert scaled.sugar_g is None


class TestNutritionScaler:
    """Tests for NutritionScaler.scale()."""

    def test_apple_end_to_end(self, scaler, apple_per_100g):
        """150 g of apple at 52 kcal/100 g is round(round(52 × 1.5) × 1) = 78."""
        result = scaler.scale(apple_per_100g, 100.0, 150.0, servings=1)

        assert isinstance(result, ScaledNutrition)
        assert result.scale_factor == 1.5
        assert result.total.calories == 78
        assert result.total.carbs_g == 21.0
        assert result.total.fat_g == 0.3

    def test_scale_factor_one_returns_rounded_input(self, scaler):
        facts = NutritionFacts(
            calories=123.4,
            protein_g=5.55,
            carbs_g=10.0,
            fat_g=2.04,
            fiber_g=1.0,
            sodium_mg=200.6,
        )
        result = scaler.scale(facts, 100.0, 100.0)

        assert result.per_serving == round_nutrition(facts)
        assert result.total == round_nutrition(facts)

    def test_double_rounding_is_preserved(self, scaler):
        """calories = round(round(45 × 0.25) × 2) = round(11 × 2) = 22, not 23."""
        facts = NutritionFacts(calories=45, protein_g=0.0, carbs_g=0.0, fat_g=0.0)
        result = scaler.scale(facts, 100.0, 25.0, servings=2)

        assert result.per_serving.calories == 11
        assert result.total.calories == 22

    def test_single_rounding_flag(self):
        facts = NutritionFacts(calories=45, protein_g=0.0, carbs_g=0.0, fat_g=0.0)
        result = NutritionScaler(single_rounding=True).scale(facts, 100.0, 25.0, servings=2)

        assert result.per_serving.calories == 11
        assert result.total.calories == 23

    def test_double_rounding_on_gram_fields(self, scaler):
        facts = NutritionFacts(calories=50, protein_g=10.0, carbs_g=0.0, fat_g=0.0)
        result = scaler.scale(facts, 100.0, 25.0, servings=4)

        assert result.per_serving.protein_g == 2.5
        assert result.total.protein_g == 10.0
        # 12.5 rounds up to 13 per serving, 13 × 4 = 52
        assert result.total.calories == 52

    def test_zero_target_yields_zero_nutrition(self, scaler, apple_per_100g):
        result = scaler.scale(apple_per_100g, 100.0, 0.0, servings=3)

        assert result.total.calories == 0
        assert result.total.protein_g == 0.0
        assert result.scale_factor == 0.0

    def test_zero_reference_amount_rejected(self, scaler, apple_per_100g):
        with pytest.raises(InvalidArgumentError, match="reference_amount"):
            scaler.scale(apple_per_100g, 0.0, 150.0)

    @pytest.mark.parametrize(
        "reference_amount, target_amount, servings",
        [
            (100.0, -1.0, 1.0),
            (-100.0, 50.0, 1.0),
            (100.0, 50.0, -2.0),
            (100.0, float("nan"), 1.0),
            (float("inf"), 50.0, 1.0),
        ],
    )
    def test_invalid_amounts_rejected(
        self, scaler, apple_per_100g, reference_amount, target_amount, servings
    ):
        with pytest.raises(InvalidArgumentError):
            scaler.scale(apple_per_100g, reference_amount, target_amount, servings)


class TestScaleFood:
    """Tests for scaling a catalog food by amount and unit."""

    def test_scale_in_ounces(self, scaler, apple):
        # 1 oz = 28.3495 g → 52 × 0.283495 = 14.74
        result = scaler.scale_food(apple, 1, "oz")
        assert result.total.calories == 15

    def test_scale_count_unit(self, scaler):
        bread = FoodItem(
            id="bread",
            name="Bread",
            serving_size=1,
            serving_unit=ServingUnit.SLICE,
            nutrition=NutritionFacts(calories=81, protein_g=4.0, carbs_g=13.8, fat_g=1.1),
        )
        result = scaler.scale_food(bread, 2, "slice", servings=1)

        assert result.total.calories == 162
        assert result.total.carbs_g == 27.6

    def test_mismatched_dimension_rejected(self, scaler, apple):
        with pytest.raises(UnsupportedUnitError):
            scaler.scale_food(apple, 2, "piece")

    def test_scale_servings(self, scaler, apple_per_100g):
        total = scaler.scale_servings(apple_per_100g, 2)

        assert total.calories == 104
        assert total.carbs_g == 28.0
        assert total.fat_g == 0.4


class TestReverseScaling:
    """Tests for recovering per-100 g baselines from logged entries."""

    def test_scaled_entry_reverse_scaled(self, apple):
        logged = FoodItem(
            id="apple",
            name="Apple",
            serving_size=150,
            serving_unit=ServingUnit.G,
            nutrition=NutritionFacts(calories=78, protein_g=0.5, carbs_g=21.0, fat_g=0.3),
        )
        estimate = estimate_base_nutrition(make_entry(logged))

        assert estimate.is_estimate
        assert estimate.base_amount == 100.0
        assert math.isclose(estimate.nutrition.calories, 52.0)
        assert math.isclose(estimate.nutrition.carbs_g, 14.0)

    def test_multiple_servings_not_reverse_scaled(self):
        logged = FoodItem(
            id="apple",
            name="Apple",
            serving_size=150,
            serving_unit=ServingUnit.G,
            nutrition=NutritionFacts(calories=78, protein_g=0.5, carbs_g=21.0, fat_g=0.3),
        )
        estimate = estimate_base_nutrition(make_entry(logged, servings=2))

        assert not estimate.is_estimate
        assert estimate.nutrition.calories == 78

    def test_standard_serving_not_reverse_scaled(self, apple):
        estimate = estimate_base_nutrition(make_entry(apple))

        assert not estimate.is_estimate
        assert estimate.nutrition == apple.nutrition

    def test_ounce_serving_converted_before_reverse_scaling(self):
        logged = FoodItem(
            id="steak",
            name="Steak",
            serving_size=4,
            serving_unit=ServingUnit.OZ,
            nutrition=NutritionFacts(calories=306, protein_g=29.5, carbs_g=0.0, fat_g=20.0),
        )
        estimate = estimate_base_nutrition(make_entry(logged))

        # 4 oz = 113.398 g
        assert math.isclose(estimate.nutrition.calories, 306 * 100 / 113.398)

    def test_count_unit_serving_not_reverse_scaled(self):
        banana = FoodItem(
            id="banana",
            name="Banana",
            serving_size=1,
            serving_unit=ServingUnit.PIECE,
            nutrition=NutritionFacts(calories=105, protein_g=1.3, carbs_g=27.0, fat_g=0.4),
        )
        estimate = estimate_base_nutrition(make_entry(banana))

        assert not estimate.is_estimate
        assert estimate.nutrition.calories == 105


class TestRescaleEntry:
    """Tests for editing an entry's serving."""

    @pytest.fixture
    def logged_apple(self):
        return FoodItem(
            id="apple",
            name="Apple",
            serving_size=150,
            serving_unit=ServingUnit.G,
            nutrition=NutritionFacts(calories=78, protein_g=0.5, carbs_g=21.0, fat_g=0.3),
        )

    def test_rescale_to_new_amount_and_servings(self, scaler, logged_apple):
        entry = make_entry(logged_apple)
        edited = scaler.rescale_entry(entry, 200, "g", servings=2)

        assert edited.id == entry.id
        assert edited.servings == 2
        assert edited.food_item.serving_size == 200
        assert edited.food_item.serving_unit is ServingUnit.G
        # base ≈ 52 kcal/100 g → 104 per 200 g serving
        assert edited.food_item.nutrition.calories == 104
        assert edited.food_item.nutrition.carbs_g == 28.0
        assert edited.notes == "after gym"
        assert edited.meal_type is MealType.SNACK

    def test_rescale_does_not_touch_original(self, scaler, logged_apple):
        entry = make_entry(logged_apple)
        scaler.rescale_entry(entry, 50, "g", servings=1)

        assert entry.food_item is logged_apple
        assert entry.food_item.nutrition.calories == 78
        assert entry.food_item.serving_size == 150

    def test_rescale_does_not_touch_catalog_item(self, scaler, apple):
        entry = make_entry(apple, servings=2)
        edited = scaler.rescale_entry(entry, 150, "g", servings=1)

        assert edited.food_item.nutrition.calories == 78
        assert apple.nutrition.calories == 52
        assert apple.serving_size == 100

    def test_fl_oz_stored_as_ml(self, scaler):
        milk = FoodItem(
            id="milk",
            name="Whole Milk",
            serving_size=250,
            serving_unit=ServingUnit.ML,
            nutrition=NutritionFacts(calories=153, protein_g=8.0, carbs_g=12.0, fat_g=8.3),
        )
        edited = scaler.rescale_entry(make_entry(milk), 8, "fl oz", servings=1)

        assert edited.food_item.serving_unit is ServingUnit.ML
        assert math.isclose(edited.food_item.serving_size, 236.588)
        # 61.2 kcal/100 ml × 2.36588 = 144.8
        assert edited.food_item.nutrition.calories == 145

    def test_meal_type_and_notes_updated(self, scaler, logged_apple):
        edited = scaler.rescale_entry(
            make_entry(logged_apple), 150, "g", servings=1, meal_type="dinner", notes=""
        )

        assert edited.meal_type is MealType.DINNER
        assert edited.notes is None

    def test_count_unit_rejected(self, scaler, logged_apple):
        with pytest.raises(UnsupportedUnitError):
            scaler.rescale_entry(make_entry(logged_apple), 1, "piece", servings=1)

    def test_entry_logged_per_piece_cannot_be_weighed(self, scaler):
        banana = FoodItem(
            id="banana",
            name="Banana",
            serving_size=1,
            serving_unit=ServingUnit.PIECE,
            nutrition=NutritionFacts(calories=105, protein_g=1.3, carbs_g=27.0, fat_g=0.4),
        )
        entry = make_entry(banana)

        with pytest.raises(UnsupportedUnitError, match="piece"):
            scaler.rescale_entry(entry, 120, "g", servings=1)
        assert entry.food_item.nutrition.calories == 105

    @pytest.mark.parametrize("amount, servings", [(0, 1), (100, 0), (-5, 1)])
    def test_non_positive_rejected(self, scaler, logged_apple, amount, servings):
        with pytest.raises(InvalidArgumentError):
            scaler.rescale_entry(make_entry(logged_apple), amount, "g", servings=servings)
