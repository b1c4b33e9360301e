"""User profile loader for loading biometrics and goals from YAML."""
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict

import yaml

from src.data_layer.models import (
    ActivityLevel,
    CalorieCalculatorResult,
    Gender,
    GoalType,
    UnitSystem,
    UserProfile,
)
from src.data_layer.validators import parse_enum, require_positive
from src.nutrition.calculator import calculate_recommended_macros
from src.nutrition.units import feet_inches_to_cm, pounds_to_kg

logger = logging.getLogger(__name__)

PROFILE_FIELDS = (
    "age",
    "weight_kg",
    "height_cm",
    "gender",
    "activity_level",
    "goal_type",
    "daily_calorie_goal",
    "daily_protein_g",
    "daily_carbs_g",
    "daily_fat_g",
    "unit_system",
)


class UserProfileLoader:
    """Loader for user profile configuration from YAML.

    Body metrics may be given in metric (weight_kg, height_cm) or imperial
    (weight_lb, height_ft + height_in) form; imperial values are converted
    to kg/cm on load.
    """

    def __init__(self, yaml_path: str):
        """Initialize user profile loader from YAML file.

        Args:
            yaml_path: Path to YAML file containing user profile
        """
        self.yaml_path = Path(yaml_path)

    def load(self) -> UserProfile:
        """Load user profile from YAML file.

        Returns:
            UserProfile object

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            InvalidArgumentError: If a value is out of range
        """
        with open(self.yaml_path, "r") as f:
            data = yaml.safe_load(f) or {}

        profile = profile_from_dict(data)
        logger.info("Loaded user profile from %s", self.yaml_path)
        return profile


def profile_from_dict(data: Dict[str, Any]) -> UserProfile:
    """Build a UserProfile from a parsed YAML/JSON mapping."""
    body = data.get("body", {}) or {}
    goals = data.get("goals", {}) or {}

    weight_kg = body.get("weight_kg")
    if weight_kg is None and body.get("weight_lb") is not None:
        weight_kg = pounds_to_kg(float(body["weight_lb"]))

    height_cm = body.get("height_cm")
    if height_cm is None and body.get("height_ft") is not None:
        height_cm = feet_inches_to_cm(
            float(body["height_ft"]), float(body.get("height_in", 0))
        )

    values: Dict[str, Any] = {
        "age": body.get("age"),
        "weight_kg": weight_kg,
        "height_cm": height_cm,
        "gender": body.get("gender"),
        "activity_level": goals.get("activity_level"),
        "goal_type": goals.get("goal_type"),
        "daily_protein_g": goals.get("daily_protein_g"),
        "daily_carbs_g": goals.get("daily_carbs_g"),
        "daily_fat_g": goals.get("daily_fat_g"),
        "unit_system": data.get("unit_system", UnitSystem.METRIC.value),
    }
    if goals.get("daily_calorie_goal") is not None:
        values["daily_calorie_goal"] = goals["daily_calorie_goal"]

    return update_profile(UserProfile(), **values)


def update_profile(profile: UserProfile, **changes) -> UserProfile:
    """Return a copy of profile with the given fields changed.

    Enum fields accept members or their string values; numeric fields are
    validated. A None value clears an optional field.

    Raises:
        InvalidArgumentError: If a value is invalid
        TypeError: If a field name is unknown
    """
    unknown = set(changes) - set(PROFILE_FIELDS)
    if unknown:
        raise TypeError(f"Unknown profile fields: {sorted(unknown)}")

    cleaned: Dict[str, Any] = {}
    for name, value in changes.items():
        if value is None:
            if name in ("daily_calorie_goal", "unit_system"):
                continue
            cleaned[name] = None
        elif name == "gender":
            cleaned[name] = parse_enum(Gender, value, name)
        elif name == "activity_level":
            cleaned[name] = parse_enum(ActivityLevel, value, name)
        elif name == "goal_type":
            cleaned[name] = parse_enum(GoalType, value, name)
        elif name == "unit_system":
            cleaned[name] = parse_enum(UnitSystem, value, name)
        elif name in ("age", "daily_calorie_goal"):
            cleaned[name] = int(require_positive(name, value))
        else:
            cleaned[name] = require_positive(name, value)
    return replace(profile, **cleaned)


def adopt_recommendation(
    profile: UserProfile,
    result: CalorieCalculatorResult,
    include_macros: bool = True,
) -> UserProfile:
    """Adopt a calculator recommendation as the profile's goals.

    Args:
        profile: Current profile
        result: Recommendation to adopt
        include_macros: Also set macro goals from the goal-type ratios

    Returns:
        Updated copy of the profile
    """
    changes: Dict[str, Any] = {"daily_calorie_goal": result.recommended_calories}
    if include_macros and profile.goal_type is not None:
        macros = calculate_recommended_macros(
            result.recommended_calories, profile.goal_type
        )
        changes.update(
            daily_protein_g=macros["protein"],
            daily_carbs_g=macros["carbs"],
            daily_fat_g=macros["fat"],
        )
    return update_profile(profile, **changes)
