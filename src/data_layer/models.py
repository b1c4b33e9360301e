"""Data models for the calorie tracking core."""
from dataclasses import dataclass, field, fields
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import uuid4

from src.data_layer.exceptions import UnsupportedUnitError
from src.data_layer.validators import require_non_negative, require_positive


class ServingUnit(Enum):
    """Units a food serving can be declared in."""

    G = "g"
    ML = "ml"
    OZ = "oz"
    FL_OZ = "fl_oz"
    CUP = "cup"
    TBSP = "tbsp"
    TSP = "tsp"
    PIECE = "piece"
    SLICE = "slice"
    SERVING = "serving"

    @classmethod
    def parse(cls, unit) -> "ServingUnit":
        """Convert a unit string (or alias) to a ServingUnit.

        Args:
            unit: ServingUnit member or string such as "g", "fl oz", "grams"

        Returns:
            ServingUnit member

        Raises:
            UnsupportedUnitError: If the unit is not recognized
        """
        if isinstance(unit, cls):
            return unit
        key = str(unit).strip().lower()
        key = UNIT_ALIASES.get(key, key)
        for member in cls:
            if member.value == key:
                return member
        raise UnsupportedUnitError(
            unit=str(unit),
            message=f"Supported units: {[member.value for member in cls]}",
        )


# Unit aliases → canonical ServingUnit value
UNIT_ALIASES: Dict[str, str] = {
    "gram": "g",
    "grams": "g",
    "milliliter": "ml",
    "milliliters": "ml",
    "ounce": "oz",
    "ounces": "oz",
    "fl oz": "fl_oz",
    "fl. oz": "fl_oz",
    "floz": "fl_oz",
    "fluid ounce": "fl_oz",
    "fluid ounces": "fl_oz",
    "cups": "cup",
    "tablespoon": "tbsp",
    "tablespoons": "tbsp",
    "teaspoon": "tsp",
    "teaspoons": "tsp",
    "pieces": "piece",
    "slices": "slice",
    "servings": "serving",
}


class MealType(Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


class Gender(Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class ActivityLevel(Enum):
    """Activity levels used for the TDEE multiplier lookup."""

    SEDENTARY = "sedentary"  # Little or no exercise
    LIGHTLY_ACTIVE = "lightly_active"  # Light exercise 1-3 days/week
    MODERATELY_ACTIVE = "moderately_active"  # Moderate exercise 3-5 days/week
    VERY_ACTIVE = "very_active"  # Hard exercise 6-7 days/week
    EXTRA_ACTIVE = "extra_active"  # Very hard exercise, physical job


class GoalType(Enum):
    LOSE_WEIGHT = "lose_weight"
    MAINTAIN_WEIGHT = "maintain_weight"
    GAIN_WEIGHT = "gain_weight"


class UnitSystem(Enum):
    METRIC = "metric"
    IMPERIAL = "imperial"


# Serialized key → NutritionFacts field. Accepts both snake_case and the
# camelCase keys used by exported logs.
NUTRITION_KEYS: Dict[str, str] = {
    "calories": "calories",
    "protein": "protein_g",
    "protein_g": "protein_g",
    "carbohydrates": "carbs_g",
    "carbs": "carbs_g",
    "carbs_g": "carbs_g",
    "fat": "fat_g",
    "fat_g": "fat_g",
    "fiber": "fiber_g",
    "fiber_g": "fiber_g",
    "sugar": "sugar_g",
    "sugar_g": "sugar_g",
    "sodium": "sodium_mg",
    "sodium_mg": "sodium_mg",
    "cholesterol": "cholesterol_mg",
    "cholesterol_mg": "cholesterol_mg",
    "saturatedFat": "saturated_fat_g",
    "saturated_fat_g": "saturated_fat_g",
    "transFat": "trans_fat_g",
    "trans_fat_g": "trans_fat_g",
}


@dataclass(frozen=True)
class NutritionFacts:
    """Nutrition for one reference serving.

    Rounded values carry whole-number calories; reverse-scaled estimates
    may carry fractional calories. Optional fields are None when unknown.
    """

    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    fiber_g: Optional[float] = None
    sugar_g: Optional[float] = None
    sodium_mg: Optional[float] = None
    cholesterol_mg: Optional[float] = None
    saturated_fat_g: Optional[float] = None
    trans_fat_g: Optional[float] = None

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None and f.default is None:
                continue
            require_non_negative(f.name, value)

    @classmethod
    def zero(cls) -> "NutritionFacts":
        """Return all-zero nutrition (optional fields included)."""
        return cls(
            calories=0,
            protein_g=0.0,
            carbs_g=0.0,
            fat_g=0.0,
            fiber_g=0.0,
            sugar_g=0.0,
            sodium_mg=0,
            cholesterol_mg=0,
            saturated_fat_g=0.0,
            trans_fat_g=0.0,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NutritionFacts":
        """Build NutritionFacts from a serialized dictionary.

        Args:
            data: Mapping with snake_case or camelCase nutrition keys

        Returns:
            NutritionFacts instance (unknown keys are ignored)
        """
        values: Dict[str, Any] = {}
        for key, value in data.items():
            field_name = NUTRITION_KEYS.get(key)
            if field_name is not None and value is not None:
                values[field_name] = value
        values.setdefault("calories", 0)
        values.setdefault("protein_g", 0.0)
        values.setdefault("carbs_g", 0.0)
        values.setdefault("fat_g", 0.0)
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a dictionary, omitting unknown optional fields."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


@dataclass(frozen=True)
class FoodItem:
    """A food with nutrition declared for one serving of serving_size units."""

    id: str
    name: str
    serving_size: float
    serving_unit: ServingUnit
    nutrition: NutritionFacts
    brand: Optional[str] = None
    is_custom: bool = False  # False for items from an external food database
    barcode: Optional[str] = None

    def __post_init__(self):
        require_positive("serving_size", self.serving_size)


@dataclass(frozen=True)
class FoodEntry:
    """A logged consumption event.

    food_item is a snapshot owned by this entry; editing an entry produces a
    new entry with a new snapshot and never touches the catalog item.
    """

    food_item: FoodItem
    servings: float  # Count of the food item's serving
    meal_type: MealType
    date: date
    id: str = field(default_factory=lambda: uuid4().hex)
    timestamp: datetime = field(default_factory=datetime.now)
    notes: Optional[str] = None

    def __post_init__(self):
        require_positive("servings", self.servings)


@dataclass
class DailyLog:
    """Entries for one date plus their totals (a derived view)."""

    date: date
    entries: List[FoodEntry]
    totals: NutritionFacts


@dataclass
class UserProfile:
    """Biometric data and goals for the single user."""

    age: Optional[int] = None
    weight_kg: Optional[float] = None
    height_cm: Optional[float] = None
    gender: Optional[Gender] = None
    activity_level: Optional[ActivityLevel] = None
    goal_type: Optional[GoalType] = None
    daily_calorie_goal: int = 2000
    daily_protein_g: Optional[float] = None
    daily_carbs_g: Optional[float] = None
    daily_fat_g: Optional[float] = None
    unit_system: UnitSystem = UnitSystem.METRIC


@dataclass
class DailySummary:
    """One day of a weekly summary."""

    date: date
    total_calories: float
    calorie_goal: int  # Snapshot of the goal when the summary was built
    total_protein: float
    total_carbs: float
    total_fat: float
    meals_logged: int
    is_goal_met: bool


@dataclass
class StreakInfo:
    current_streak: int
    longest_streak: int
    total_days_logged: int


@dataclass
class CalorieCalculatorResult:
    """Output of the BMR → TDEE → goal pipeline."""

    bmr: int  # Basal Metabolic Rate
    tdee: int  # Total Daily Energy Expenditure (maintenance)
    recommended_calories: int  # Adjusted for goal and clamped
    deficit: int  # Signed calorie adjustment from TDEE
    goal_description: str


@dataclass
class MacroShare:
    grams: float
    percentage: int
    calories: float


@dataclass
class MacroBreakdown:
    """Share of calories contributed by each macronutrient."""

    protein: MacroShare
    carbohydrates: MacroShare
    fat: MacroShare
