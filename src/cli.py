#!/usr/bin/env python3
"""Command-line interface for the calorie tracking core."""

import argparse
import json
import os
import sys
from datetime import date
from pathlib import Path

from src.app_logging import configure_logging
from src.data_layer.entry_db import EntryDB
from src.data_layer.exceptions import (
    FoodNotFoundError,
    InvalidArgumentError,
    UnsupportedUnitError,
)
from src.data_layer.food_db import FoodDB
from src.data_layer.models import UnitSystem
from src.data_layer.user_profile import UserProfileLoader
from src.nutrition.aggregator import NutritionAggregator
from src.nutrition.calculator import CalorieCalculator
from src.nutrition.dates import parse_date
from src.nutrition.scaler import NutritionScaler
from src.nutrition import units
from src.output.formatters import (
    format_calorie_breakdown,
    format_calorie_result_json,
    format_daily_totals_json,
    format_entry_string,
    format_nutrition_breakdown,
    format_scaled_json,
    format_weekly_report_json_string,
    format_weekly_report_markdown,
)

DATA_DIR_ENV_VAR = "CALORIE_CORE_DATA_DIR"


def default_path(filename: str) -> str:
    """Resolve a data file under $CALORIE_CORE_DATA_DIR (default: data/)."""
    return str(Path(os.environ.get(DATA_DIR_ENV_VAR, "data")) / filename)


def require_file(path_str: str, label: str) -> Path:
    path = Path(path_str)
    if not path.exists():
        print(f"Error: {label} file not found: {path}", file=sys.stderr)
        if label == "User profile":
            print(
                f"Hint: Copy config/user_profile.yaml.example to {path} and customize it",
                file=sys.stderr,
            )
        sys.exit(1)
    return path


def cmd_recommend(args) -> int:
    profile_path = require_file(args.profile, "User profile")
    profile = UserProfileLoader(str(profile_path)).load()

    result = CalorieCalculator().recommend(profile)
    if result is None:
        print(
            "No recommendation available: profile needs age, weight, height, "
            "gender, activity level and goal",
            file=sys.stderr,
        )
        return 2

    if args.output == "json":
        print(json.dumps(format_calorie_result_json(result), indent=2))
    else:
        print(
            f"Profile: {units.format_weight(profile.weight_kg, profile.unit_system)}, "
            f"{units.format_height(profile.height_cm, profile.unit_system)}"
        )
        print(format_calorie_breakdown(result))
        print(f"Recommended: {result.recommended_calories:,} cal/day")
    return 0


def cmd_scale(args) -> int:
    foods_path = require_file(args.foods, "Foods")
    food_db = FoodDB(str(foods_path))
    food = food_db.find_by_name(args.food) or food_db.get_food(args.food)

    scaler = NutritionScaler(single_rounding=args.single_rounding)
    scaled = scaler.scale_food(food, args.amount, args.unit, args.servings)

    if args.output == "json":
        print(json.dumps(format_scaled_json(scaled), indent=2))
    else:
        print(f"# {food.name}\n")
        print("## Per Serving")
        print(format_nutrition_breakdown(scaled.per_serving))
        print("\n## Total")
        print(format_nutrition_breakdown(scaled.total))
    return 0


def cmd_summary(args) -> int:
    entries_path = require_file(args.entries, "Entries")
    entry_db = EntryDB(str(entries_path))

    calorie_goal = args.goal
    if calorie_goal is None:
        profile_path = Path(args.profile)
        if profile_path.exists():
            calorie_goal = UserProfileLoader(str(profile_path)).load().daily_calorie_goal
        else:
            calorie_goal = 2000

    end_date = parse_date(args.date) if args.date else date.today()
    print(f"Summarizing week ending {end_date.isoformat()}...", file=sys.stderr)
    report = NutritionAggregator.summarize_week(
        entry_db.get_all_entries(), end_date, calorie_goal
    )

    if args.output == "json":
        print(format_weekly_report_json_string(report))
    else:
        print(format_weekly_report_markdown(report))
    return 0


def cmd_day(args) -> int:
    entries_path = require_file(args.entries, "Entries")
    day = parse_date(args.date) if args.date else date.today()
    log = EntryDB(str(entries_path)).get_daily_log(day)

    if args.output == "json":
        output = {"date": day.isoformat(), "totals": format_daily_totals_json(log.totals)}
        print(json.dumps(output, indent=2))
        return 0

    print(f"# {day.isoformat()}\n")
    for entry in log.entries:
        print(f"- {entry.meal_type.value.capitalize()}: {format_entry_string(entry)}")
    if not log.entries:
        print("No entries logged.")
    print("\n## Totals")
    print(format_nutrition_breakdown(NutritionAggregator.round_for_display(log.totals)))
    return 0


def cmd_convert(args) -> int:
    kind = args.kind
    if kind == "height":
        if args.to == UnitSystem.IMPERIAL.value:
            feet, inches = units.cm_to_feet_inches(args.value, normalize=not args.raw)
            print(f"{feet} ft {inches} in")
        else:
            print(f"{units.feet_inches_to_cm(args.value, args.inches):.1f} cm")
    elif kind == "weight":
        if args.to == UnitSystem.IMPERIAL.value:
            print(f"{units.kg_to_pounds(args.value):.1f} lb")
        else:
            print(f"{units.pounds_to_kg(args.value):.1f} kg")
    else:
        canonical = units.to_canonical_amount(args.value, args.unit)
        label = "g" if canonical.dimension == units.MASS_DIMENSION else canonical.dimension
        print(f"{canonical.value:.1f} {label}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Calorie recommendations, nutrition scaling and weekly summaries"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Logging level (default: $CALORIE_CORE_LOG_LEVEL or INFO)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    recommend = subparsers.add_parser("recommend", help="Recommend daily calories")
    recommend.add_argument(
        "--profile",
        type=str,
        default="config/user_profile.yaml",
        help="Path to user profile YAML file (default: config/user_profile.yaml)",
    )
    recommend.add_argument("--output", choices=["text", "json"], default="text")
    recommend.set_defaults(func=cmd_recommend)

    scale = subparsers.add_parser("scale", help="Scale a catalog food to an amount")
    scale.add_argument("food", help="Food name or id")
    scale.add_argument("amount", type=float, help="Amount per serving")
    scale.add_argument("--unit", default="g", help="Unit of amount (default: g)")
    scale.add_argument("--servings", type=float, default=1.0)
    scale.add_argument(
        "--foods",
        type=str,
        default=default_path("foods.json"),
        help="Path to foods JSON file (default: data/foods.json)",
    )
    scale.add_argument(
        "--single-rounding",
        action="store_true",
        help="Round totals once instead of per serving and per total",
    )
    scale.add_argument("--output", choices=["markdown", "json"], default="markdown")
    scale.set_defaults(func=cmd_scale)

    summary = subparsers.add_parser("summary", help="Weekly summary and streaks")
    summary.add_argument(
        "--entries",
        type=str,
        default=default_path("entries.json"),
        help="Path to entries JSON file (default: data/entries.json)",
    )
    summary.add_argument(
        "--profile",
        type=str,
        default="config/user_profile.yaml",
        help="Profile supplying the calorie goal when --goal is not given",
    )
    summary.add_argument("--goal", type=int, default=None, help="Daily calorie goal")
    summary.add_argument("--date", type=str, help="Last day of the week (YYYY-MM-DD)")
    summary.add_argument("--output", choices=["markdown", "json"], default="markdown")
    summary.set_defaults(func=cmd_summary)

    day = subparsers.add_parser("day", help="Entries and totals for one day")
    day.add_argument(
        "--entries",
        type=str,
        default=default_path("entries.json"),
        help="Path to entries JSON file (default: data/entries.json)",
    )
    day.add_argument("--date", type=str, help="Day to show (YYYY-MM-DD, default: today)")
    day.add_argument("--output", choices=["markdown", "json"], default="markdown")
    day.set_defaults(func=cmd_day)

    convert = subparsers.add_parser("convert", help="Convert units")
    convert.add_argument("kind", choices=["height", "weight", "amount"])
    convert.add_argument("value", type=float)
    convert.add_argument("--inches", type=float, default=0.0, help="Inches for height")
    convert.add_argument(
        "--to", choices=[s.value for s in UnitSystem], default=UnitSystem.METRIC.value
    )
    convert.add_argument("--unit", default="g", help="Unit of amount")
    convert.add_argument(
        "--raw", action="store_true", help="Do not roll 12 inches into a foot"
    )
    convert.set_defaults(func=cmd_convert)

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        exit_code = args.func(args)
    except (InvalidArgumentError, UnsupportedUnitError, FoodNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
