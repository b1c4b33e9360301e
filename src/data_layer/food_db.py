"""Food catalog for loading food items from JSON."""
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from src.data_layer.exceptions import FoodNotFoundError
from src.data_layer.models import FoodItem, NutritionFacts, ServingUnit

logger = logging.getLogger(__name__)


def food_item_from_dict(data: Dict[str, Any]) -> FoodItem:
    """Build a FoodItem from a serialized dictionary.

    Accepts snake_case keys and the camelCase keys of exported logs
    (servingSize, servingUnit, isCustom).

    Raises:
        KeyError: If id, name or nutrition is missing
        InvalidArgumentError: If serving size or nutrition values are invalid
        UnsupportedUnitError: If the serving unit is unknown
    """
    serving_size = data.get("serving_size", data.get("servingSize", 100))
    serving_unit = data.get("serving_unit", data.get("servingUnit", "g"))
    return FoodItem(
        id=str(data["id"]),
        name=str(data["name"]),
        serving_size=float(serving_size),
        serving_unit=ServingUnit.parse(serving_unit),
        nutrition=NutritionFacts.from_dict(data["nutrition"]),
        brand=data.get("brand"),
        is_custom=bool(data.get("is_custom", data.get("isCustom", False))),
        barcode=data.get("barcode"),
    )


def food_item_to_dict(food: FoodItem) -> Dict[str, Any]:
    data = {
        "id": food.id,
        "name": food.name,
        "serving_size": food.serving_size,
        "serving_unit": food.serving_unit.value,
        "nutrition": food.nutrition.to_dict(),
        "is_custom": food.is_custom,
    }
    if food.brand is not None:
        data["brand"] = food.brand
    if food.barcode is not None:
        data["barcode"] = food.barcode
    return data


class FoodDB:
    """Catalog of food items loaded from a JSON file with a "foods" list."""

    def __init__(self, json_path: str):
        """Initialize food catalog from JSON file.

        Args:
            json_path: Path to JSON file containing food data
        """
        self.json_path = Path(json_path)
        self._foods: Dict[str, FoodItem] = {}
        self._load_foods()

    def _load_foods(self):
        """Load food items from JSON file."""
        with open(self.json_path, "r") as f:
            data = json.load(f)

        for food_data in data.get("foods", []):
            food = food_item_from_dict(food_data)
            self._foods[food.id] = food
        logger.info("Loaded %d foods from %s", len(self._foods), self.json_path)

    def get_all_foods(self) -> List[FoodItem]:
        return list(self._foods.values())

    def get_food(self, food_id: str) -> FoodItem:
        """Get a food by identifier.

        Raises:
            FoodNotFoundError: If no food has this identifier
        """
        food = self._foods.get(food_id)
        if food is None:
            raise FoodNotFoundError(food_id)
        return food

    def find_by_name(self, name: str) -> Optional[FoodItem]:
        """Find a food by name (case-insensitive).

        Args:
            name: Food name to search for

        Returns:
            FoodItem if found, None otherwise
        """
        name_lower = name.strip().lower()
        for food in self._foods.values():
            if food.name.lower() == name_lower:
                return food
        return None
