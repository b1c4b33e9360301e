"""Calorie calculator using the Mifflin-St Jeor equation.

Pipeline, in order: BMR → TDEE → goal adjustment → safety clamp. Each step
rounds its own result, so the order matters for the displayed numbers.
Results are estimates, not clinical guidance.
"""
import logging
from typing import Dict, Optional, Tuple

from src.data_layer.models import (
    ActivityLevel,
    CalorieCalculatorResult,
    Gender,
    GoalType,
    MacroBreakdown,
    MacroShare,
    NutritionFacts,
    UserProfile,
)
from src.data_layer.validators import parse_enum, require_non_negative, require_positive
from src.nutrition.scaler import round_half_up

logger = logging.getLogger(__name__)

ACTIVITY_MULTIPLIERS: Dict[ActivityLevel, float] = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHTLY_ACTIVE: 1.375,
    ActivityLevel.MODERATELY_ACTIVE: 1.55,
    ActivityLevel.VERY_ACTIVE: 1.725,
    ActivityLevel.EXTRA_ACTIVE: 1.9,
}

# Goal → (calories per day, description)
GOAL_ADJUSTMENTS: Dict[GoalType, Tuple[int, str]] = {
    GoalType.LOSE_WEIGHT: (-500, "Lose ~0.5 kg (1 lb) per week"),
    GoalType.MAINTAIN_WEIGHT: (0, "Maintain current weight"),
    GoalType.GAIN_WEIGHT: (400, "Gain ~0.3-0.5 kg per week (lean)"),
}

# Mifflin-St Jeor sex constants; "other" is the mean of male and female
GENDER_OFFSETS: Dict[Gender, int] = {
    Gender.MALE: 5,
    Gender.FEMALE: -161,
    Gender.OTHER: -78,
}

MINIMUM_CALORIES_FEMALE = 1200
MINIMUM_CALORIES_DEFAULT = 1500
MAXIMUM_CALORIES = 5000

# Goal → (protein, fat, carbs) share of calories
MACRO_RATIOS: Dict[GoalType, Tuple[float, float, float]] = {
    GoalType.LOSE_WEIGHT: (0.30, 0.25, 0.45),  # Higher protein for muscle preservation
    GoalType.GAIN_WEIGHT: (0.25, 0.25, 0.50),  # Higher carbs for energy
    GoalType.MAINTAIN_WEIGHT: (0.25, 0.30, 0.45),
}

CALORIES_PER_GRAM_PROTEIN = 4
CALORIES_PER_GRAM_CARBS = 4
CALORIES_PER_GRAM_FAT = 9


def calculate_bmr(weight_kg: float, height_cm: float, age: float, gender) -> int:
    """Calculate Basal Metabolic Rate (Mifflin-St Jeor).

    base = 10 × weight_kg + 6.25 × height_cm − 5 × age, then +5 (male),
    −161 (female) or −78 (other), rounded.

    Raises:
        InvalidArgumentError: If a measurement is not positive or gender is unknown
    """
    weight_kg = require_positive("weight_kg", weight_kg)
    height_cm = require_positive("height_cm", height_cm)
    age = require_positive("age", age)
    gender = parse_enum(Gender, gender, "gender")

    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    return round_half_up(base + GENDER_OFFSETS[gender])


def calculate_tdee(bmr: float, activity_level) -> int:
    """Calculate Total Daily Energy Expenditure: round(BMR × multiplier)."""
    bmr = require_non_negative("bmr", bmr)
    activity_level = parse_enum(ActivityLevel, activity_level, "activity_level")
    return round_half_up(bmr * ACTIVITY_MULTIPLIERS[activity_level])


def clamp_calories(calories: float, gender) -> int:
    """Raise calories to the gender floor and cap them at the ceiling."""
    gender = parse_enum(Gender, gender, "gender")
    minimum = (
        MINIMUM_CALORIES_FEMALE if gender is Gender.FEMALE else MINIMUM_CALORIES_DEFAULT
    )
    if calories < minimum:
        calories = minimum
    if calories > MAXIMUM_CALORIES:
        calories = MAXIMUM_CALORIES
    return round_half_up(calories)


def calculate_recommended_calories(
    weight_kg: float,
    height_cm: float,
    age: float,
    gender,
    activity_level,
    goal_type,
) -> CalorieCalculatorResult:
    """Calculate recommended daily calories from biometrics and goals.

    Args:
        weight_kg: Body weight in kilograms
        height_cm: Height in centimeters
        age: Age in years
        gender: Gender member or value
        activity_level: ActivityLevel member or value
        goal_type: GoalType member or value

    Returns:
        CalorieCalculatorResult

    Raises:
        InvalidArgumentError: If any input is missing or out of range
    """
    gender = parse_enum(Gender, gender, "gender")
    goal_type = parse_enum(GoalType, goal_type, "goal_type")

    bmr = calculate_bmr(weight_kg, height_cm, age, gender)
    tdee = calculate_tdee(bmr, activity_level)
    adjustment, description = GOAL_ADJUSTMENTS[goal_type]
    recommended = clamp_calories(tdee + adjustment, gender)

    logger.debug(
        "BMR %s, TDEE %s, adjustment %+d, recommended %s",
        bmr,
        tdee,
        adjustment,
        recommended,
    )
    return CalorieCalculatorResult(
        bmr=bmr,
        tdee=tdee,
        recommended_calories=recommended,
        deficit=adjustment,
        goal_description=description,
    )


def can_calculate(profile: UserProfile) -> bool:
    """Check whether the profile has the biometrics needed for a BMR."""
    return bool(
        profile.weight_kg
        and profile.weight_kg > 0
        and profile.height_cm
        and profile.height_cm > 0
        and profile.age
        and profile.age > 0
        and profile.gender
    )


def recommend_for_profile(profile: UserProfile) -> Optional[CalorieCalculatorResult]:
    """Return a recommendation, or None when the profile is incomplete.

    None means "no recommendation available"; no defaults are guessed for
    missing biometrics, activity level or goal.
    """
    if not can_calculate(profile):
        return None
    if profile.activity_level is None or profile.goal_type is None:
        return None
    return calculate_recommended_calories(
        weight_kg=profile.weight_kg,
        height_cm=profile.height_cm,
        age=profile.age,
        gender=profile.gender,
        activity_level=profile.activity_level,
        goal_type=profile.goal_type,
    )


def calculate_recommended_macros(calorie_goal: float, goal_type) -> Dict[str, int]:
    """Split a calorie goal into protein/carbs/fat grams for the goal type.

    Returns:
        Dictionary with "protein", "carbs" and "fat" grams
    """
    calorie_goal = require_non_negative("calorie_goal", calorie_goal)
    goal_type = parse_enum(GoalType, goal_type, "goal_type")
    protein_ratio, fat_ratio, carb_ratio = MACRO_RATIOS[goal_type]
    return {
        "protein": round_half_up(calorie_goal * protein_ratio / CALORIES_PER_GRAM_PROTEIN),
        "carbs": round_half_up(calorie_goal * carb_ratio / CALORIES_PER_GRAM_CARBS),
        "fat": round_half_up(calorie_goal * fat_ratio / CALORIES_PER_GRAM_FAT),
    }


def calculate_macro_breakdown(nutrition: NutritionFacts) -> MacroBreakdown:
    """Calculate each macro's share of the calories it contributes."""
    protein_cals = nutrition.protein_g * CALORIES_PER_GRAM_PROTEIN
    carb_cals = nutrition.carbs_g * CALORIES_PER_GRAM_CARBS
    fat_cals = nutrition.fat_g * CALORIES_PER_GRAM_FAT
    total_cals = protein_cals + carb_cals + fat_cals

    def share(grams: float, calories: float) -> MacroShare:
        percentage = round_half_up(calories / total_cals * 100) if total_cals > 0 else 0
        return MacroShare(grams=grams, percentage=percentage, calories=calories)

    return MacroBreakdown(
        protein=share(nutrition.protein_g, protein_cals),
        carbohydrates=share(nutrition.carbs_g, carb_cals),
        fat=share(nutrition.fat_g, fat_cals),
    )


class CalorieCalculator:
    """Object facade over the calculator functions.

    Holds no state; exists so callers can inject a calculator the same way
    they inject a NutritionScaler.
    """

    activity_multipliers = ACTIVITY_MULTIPLIERS
    goal_adjustments = GOAL_ADJUSTMENTS

    def calculate_bmr(self, weight_kg, height_cm, age, gender) -> int:
        return calculate_bmr(weight_kg, height_cm, age, gender)

    def calculate_tdee(self, bmr, activity_level) -> int:
        return calculate_tdee(bmr, activity_level)

    def calculate(self, weight_kg, height_cm, age, gender, activity_level, goal_type):
        return calculate_recommended_calories(
            weight_kg, height_cm, age, gender, activity_level, goal_type
        )

    def can_calculate(self, profile: UserProfile) -> bool:
        return can_calculate(profile)

    def recommend(self, profile: UserProfile) -> Optional[CalorieCalculatorResult]:
        return recommend_for_profile(profile)
