"""Entry log for loading logged food entries from JSON.

The log is an in-memory snapshot of the user's entries. Mutations only
touch this snapshot and return the recomputed DailyLog for the affected
date; callers that persist it must serialize writes per date.
"""
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from src.data_layer.exceptions import EntryNotFoundError, InvalidArgumentError
from src.data_layer.food_db import food_item_from_dict, food_item_to_dict
from src.data_layer.models import DailyLog, FoodEntry, MealType
from src.data_layer.validators import parse_enum, require_positive
from src.nutrition.aggregator import NutritionAggregator
from src.nutrition.dates import DateLike, parse_date

logger = logging.getLogger(__name__)


def entry_from_dict(data: Dict[str, Any]) -> FoodEntry:
    """Build a FoodEntry (with its own FoodItem snapshot) from a dictionary."""
    food_data = data.get("food_item", data.get("foodItem"))
    if food_data is None:
        raise KeyError("food_item")
    timestamp = data.get("timestamp")
    values = {
        "food_item": food_item_from_dict(food_data),
        "servings": require_positive("servings", data["servings"]),
        "meal_type": parse_enum(
            MealType, data.get("meal_type", data.get("mealType")), "meal_type"
        ),
        "date": parse_date(data["date"]),
        "notes": data.get("notes"),
    }
    if data.get("id") is not None:
        values["id"] = str(data["id"])
    if timestamp:
        try:
            values["timestamp"] = datetime.fromisoformat(
                str(timestamp).replace("Z", "+00:00")
            )
        except ValueError:
            raise InvalidArgumentError(
                "timestamp", timestamp, "expected an ISO date-time"
            ) from None
    return FoodEntry(**values)


def entry_to_dict(entry: FoodEntry) -> Dict[str, Any]:
    data = {
        "id": entry.id,
        "food_item": food_item_to_dict(entry.food_item),
        "servings": entry.servings,
        "meal_type": entry.meal_type.value,
        "date": entry.date.isoformat(),
        "timestamp": entry.timestamp.isoformat(),
    }
    if entry.notes:
        data["notes"] = entry.notes
    return data


class EntryDB:
    """Logged food entries loaded from a JSON file with an "entries" list."""

    def __init__(self, json_path: Optional[str] = None):
        """Initialize entry log, optionally from a JSON file.

        Args:
            json_path: Path to JSON file containing entries (None for empty)
        """
        self.json_path = Path(json_path) if json_path else None
        self._entries: List[FoodEntry] = []
        if self.json_path is not None:
            self._load_entries()

    def _load_entries(self):
        """Load entries from JSON file."""
        with open(self.json_path, "r") as f:
            data = json.load(f)

        self._entries = [entry_from_dict(item) for item in data.get("entries", [])]
        logger.info("Loaded %d entries from %s", len(self._entries), self.json_path)

    def get_all_entries(self) -> List[FoodEntry]:
        return self._entries.copy()

    def get_entry(self, entry_id: str) -> FoodEntry:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        raise EntryNotFoundError(entry_id)

    def get_entries_for_date(self, day: DateLike) -> List[FoodEntry]:
        day = parse_date(day)
        return [entry for entry in self._entries if entry.date == day]

    def get_entries_in_range(self, start: DateLike, end: DateLike) -> List[FoodEntry]:
        """Get entries dated from start to end, both inclusive."""
        start = parse_date(start)
        end = parse_date(end)
        return [entry for entry in self._entries if start <= entry.date <= end]

    def add_entry(self, entry: FoodEntry) -> DailyLog:
        """Add an entry and return the recomputed log for its date."""
        self._entries.append(entry)
        return self.get_daily_log(entry.date)

    def replace_entry(self, entry: FoodEntry) -> DailyLog:
        """Replace the entry with the same id and return its date's log.

        If the edit moved the entry to another date, the caller should also
        refresh the log for the old date.

        Raises:
            EntryNotFoundError: If no entry has this id
        """
        for index, existing in enumerate(self._entries):
            if existing.id == entry.id:
                self._entries[index] = entry
                return self.get_daily_log(entry.date)
        raise EntryNotFoundError(entry.id)

    def remove_entry(self, entry_id: str) -> DailyLog:
        """Remove an entry and return the recomputed log for its date."""
        entry = self.get_entry(entry_id)
        self._entries = [e for e in self._entries if e.id != entry_id]
        return self.get_daily_log(entry.date)

    def get_daily_log(self, day: DateLike) -> DailyLog:
        return NutritionAggregator.build_daily_log(self._entries, day)

    def save(self, json_path: Optional[str] = None):
        """Write all entries back to JSON."""
        path = Path(json_path) if json_path else self.json_path
        if path is None:
            raise ValueError("No path to save entries to")
        with open(path, "w") as f:
            json.dump({"entries": [entry_to_dict(e) for e in self._entries]}, f, indent=2)
