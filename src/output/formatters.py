"""Formatters for calculator results, nutrition and weekly reports (JSON and Markdown)."""

import json
from typing import Any, Dict

from src.data_layer.models import (
    CalorieCalculatorResult,
    DailySummary,
    FoodEntry,
    NutritionFacts,
)
from src.nutrition.aggregator import NutritionAggregator, WeeklyReport
from src.nutrition.scaler import ScaledNutrition, round_half_up, round_to_tenth


def format_amount(amount: float) -> str:
    """Format an amount without a trailing .0 (e.g. 150, 1.5)."""
    if amount == int(amount):
        return str(int(amount))
    return f"{amount:.2f}".rstrip("0").rstrip(".")


def format_calorie_breakdown(result: CalorieCalculatorResult) -> str:
    """Format a calculator result as the multi-line breakdown shown to users.

    Args:
        result: CalorieCalculatorResult

    Returns:
        Lines for BMR, TDEE, goal and signed adjustment
    """
    if result.deficit > 0:
        marker, sign = "➕", "+"
    elif result.deficit < 0:
        marker, sign = "➖", ""
    else:
        marker, sign = "⚖️", ""
    lines = [
        f"🔬 BMR (Base Metabolism): {result.bmr:,} cal",
        f"🏃 TDEE (Maintenance): {result.tdee:,} cal",
        f"🎯 Goal: {result.goal_description}",
        f"{marker} Adjustment: {sign}{result.deficit} cal",
    ]
    return "\n".join(lines)


def format_nutrition_breakdown(nutrition: NutritionFacts, indent: str = "") -> str:
    """Format nutrition as a readable Markdown breakdown.

    Args:
        nutrition: NutritionFacts (rounded or full precision)
        indent: Optional indentation prefix

    Returns:
        Formatted string with calories, macros and known optional fields
    """
    lines = [
        f"{indent}**Calories:** {round_half_up(nutrition.calories)} kcal",
        f"{indent}**Protein:** {nutrition.protein_g:.1f}g",
        f"{indent}**Carbs:** {nutrition.carbs_g:.1f}g",
        f"{indent}**Fat:** {nutrition.fat_g:.1f}g",
    ]
    if nutrition.fiber_g is not None:
        lines.append(f"{indent}**Fiber:** {nutrition.fiber_g:.1f}g")
    if nutrition.sugar_g is not None:
        lines.append(f"{indent}**Sugar:** {nutrition.sugar_g:.1f}g")
    if nutrition.sodium_mg is not None:
        lines.append(f"{indent}**Sodium:** {round_half_up(nutrition.sodium_mg)}mg")
    return "\n".join(lines)


def format_entry_string(entry: FoodEntry) -> str:
    """Format an entry as a string (e.g., "2 × 150 g Apple")."""
    food = entry.food_item
    unit = "fl oz" if food.serving_unit.value == "fl_oz" else food.serving_unit.value
    serving = f"{format_amount(food.serving_size)} {unit} {food.name}"
    if entry.servings == 1:
        return serving
    return f"{format_amount(entry.servings)} × {serving}"


def format_summary_row(summary: DailySummary) -> str:
    status = "✅" if summary.is_goal_met else ("➖" if summary.meals_logged == 0 else "⚠️")
    return (
        f"| {summary.date.strftime('%a %b %d')} "
        f"| {round_half_up(summary.total_calories)} / {summary.calorie_goal} "
        f"| {round_to_tenth(summary.total_protein):.1f} "
        f"| {round_to_tenth(summary.total_carbs):.1f} "
        f"| {round_to_tenth(summary.total_fat):.1f} "
        f"| {summary.meals_logged} | {status} |"
    )


def format_weekly_report_markdown(report: WeeklyReport) -> str:
    """Format a WeeklyReport as Markdown.

    Args:
        report: WeeklyReport from NutritionAggregator.summarize_week

    Returns:
        Markdown with a per-day table, streaks and weekly averages
    """
    lines = []
    first, last = report.summaries[0].date, report.summaries[-1].date
    lines.append(f"# Weekly Summary ({first.isoformat()} to {last.isoformat()})\n")

    lines.append("| Day | Calories | Protein (g) | Carbs (g) | Fat (g) | Meals | Goal |")
    lines.append("|-----|----------|-------------|-----------|---------|-------|------|")
    for summary in report.summaries:
        lines.append(format_summary_row(summary))
    lines.append("")

    lines.append("## Streaks")
    lines.append(f"**Current Streak:** {report.streaks.current_streak} days")
    lines.append(f"**Longest Streak:** {report.streaks.longest_streak} days")
    lines.append(f"**Days Logged:** {report.streaks.total_days_logged}")
    lines.append("")

    lines.append("## Averages")
    lines.append(f"**Average Calories:** {report.average_calories} kcal/day")
    lines.append(f"**Days On Goal:** {report.days_on_goal} / {len(report.summaries)}")
    for macro, calories in report.average_macro_calories.items():
        lines.append(f"- {macro.capitalize()}: {round_half_up(calories)} kcal/day")
    lines.append("")

    return "\n".join(lines)


def format_nutrition_json(nutrition: NutritionFacts) -> Dict[str, Any]:
    return nutrition.to_dict()


def format_scaled_json(scaled: ScaledNutrition) -> Dict[str, Any]:
    return {
        "scale_factor": scaled.scale_factor,
        "servings": scaled.servings,
        "per_serving": format_nutrition_json(scaled.per_serving),
        "total": format_nutrition_json(scaled.total),
    }


def format_calorie_result_json(result: CalorieCalculatorResult) -> Dict[str, Any]:
    return {
        "bmr": result.bmr,
        "tdee": result.tdee,
        "recommended_calories": result.recommended_calories,
        "deficit": result.deficit,
        "goal_description": result.goal_description,
    }


def format_weekly_report_json(report: WeeklyReport) -> Dict[str, Any]:
    """Format a WeeklyReport as JSON (for API usage).

    Totals are rounded once here, for display.

    Args:
        report: WeeklyReport

    Returns:
        Dictionary ready for JSON serialization
    """
    days_json = []
    for summary in report.summaries:
        days_json.append({
            "date": summary.date.isoformat(),
            "total_calories": round_half_up(summary.total_calories),
            "calorie_goal": summary.calorie_goal,
            "total_protein": round_to_tenth(summary.total_protein),
            "total_carbs": round_to_tenth(summary.total_carbs),
            "total_fat": round_to_tenth(summary.total_fat),
            "meals_logged": summary.meals_logged,
            "is_goal_met": summary.is_goal_met,
        })

    return {
        "days": days_json,
        "streaks": {
            "current_streak": report.streaks.current_streak,
            "longest_streak": report.streaks.longest_streak,
            "total_days_logged": report.streaks.total_days_logged,
        },
        "average_calories": report.average_calories,
        "days_on_goal": report.days_on_goal,
        "average_macro_calories": {
            macro: round(calories, 1)
            for macro, calories in report.average_macro_calories.items()
        },
    }


def format_daily_totals_json(totals: NutritionFacts) -> Dict[str, Any]:
    """Round full-precision daily totals for display and serialize them."""
    return NutritionAggregator.round_for_display(totals).to_dict()


def format_weekly_report_json_string(report: WeeklyReport, indent: int = 2) -> str:
    """Format a WeeklyReport as a JSON string.

    Args:
        report: WeeklyReport
        indent: JSON indentation (default: 2)

    Returns:
        JSON string
    """
    return json.dumps(format_weekly_report_json(report), indent=indent)
