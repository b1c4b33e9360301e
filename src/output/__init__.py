"""Output formatting for calculator results and weekly reports."""

from src.output.formatters import (
    format_calorie_breakdown,
    format_nutrition_breakdown,
    format_weekly_report_json,
    format_weekly_report_markdown,
)

__all__ = [
    "format_calorie_breakdown",
    "format_nutrition_breakdown",
    "format_weekly_report_json",
    "format_weekly_report_markdown",
]
