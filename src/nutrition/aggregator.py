"""Nutrition aggregator for daily totals, weekly summaries and streaks."""
import logging
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional

from src.data_layer.models import (
    DailyLog,
    DailySummary,
    FoodEntry,
    NutritionFacts,
    StreakInfo,
)
from src.data_layer.validators import require_positive
from src.nutrition.calculator import (
    CALORIES_PER_GRAM_CARBS,
    CALORIES_PER_GRAM_FAT,
    CALORIES_PER_GRAM_PROTEIN,
)
from src.nutrition.dates import DateLike, add_days, date_range, parse_date
from src.nutrition.scaler import round_half_up, round_to_tenth

logger = logging.getLogger(__name__)

WEEK_DAYS = 7

# Fields summed into daily totals
TOTAL_FIELDS = (
    "calories",
    "protein_g",
    "carbs_g",
    "fat_g",
    "fiber_g",
    "sugar_g",
    "sodium_mg",
)


@dataclass
class WeeklyReport:
    """Weekly summary rows plus the statistics derived from them."""

    summaries: List[DailySummary]
    streaks: StreakInfo
    average_calories: int
    days_on_goal: int
    average_macro_calories: Dict[str, float]


def is_goal_met(total_calories: float, calorie_goal: float) -> bool:
    """A day meets its goal only if something was eaten and the goal held.

    Zero-intake days never count, even though 0 <= goal.
    """
    return 0 < total_calories <= calorie_goal


def compute_streaks(summaries: List[DailySummary]) -> StreakInfo:
    """Compute streak statistics over summaries ordered oldest → newest.

    current_streak counts logged days backwards from the most recent day and
    stops at the first unlogged day (0 if the most recent day is unlogged).
    longest_streak is the longest run of logged days anywhere in the window.
    total_days_logged counts logged days regardless of runs.
    """
    current_streak = 0
    longest_streak = 0
    run = 0
    total_days = 0
    in_current_run = True

    for summary in reversed(summaries):
        if summary.meals_logged > 0:
            run += 1
            total_days += 1
            if in_current_run:
                current_streak = run
        else:
            in_current_run = False
            longest_streak = max(longest_streak, run)
            run = 0

    longest_streak = max(longest_streak, run)
    return StreakInfo(
        current_streak=current_streak,
        longest_streak=longest_streak,
        total_days_logged=total_days,
    )


class NutritionAggregator:
    """Aggregator for combining nutrition from logged entries."""

    @staticmethod
    def sum_entries(entries: Iterable[FoodEntry]) -> NutritionFacts:
        """Sum nutrition × servings over entries in full precision.

        Missing optional fields count as zero. No rounding is applied; use
        round_for_display() on the result.
        """
        totals = {name: 0.0 for name in TOTAL_FIELDS}
        for entry in entries:
            nutrition = entry.food_item.nutrition
            for name in TOTAL_FIELDS:
                totals[name] += (getattr(nutrition, name) or 0) * entry.servings
        return NutritionFacts(**totals)

    @staticmethod
    def entries_for_date(entries: Iterable[FoodEntry], day: DateLike) -> List[FoodEntry]:
        day = parse_date(day)
        return [entry for entry in entries if entry.date == day]

    @classmethod
    def daily_totals(cls, entries: Iterable[FoodEntry], day: DateLike) -> NutritionFacts:
        """Full-precision totals for the entries dated day."""
        return cls.sum_entries(cls.entries_for_date(entries, day))

    @classmethod
    def build_daily_log(cls, entries: Iterable[FoodEntry], day: DateLike) -> DailyLog:
        """Build the daily log view for day from the full entry collection."""
        day = parse_date(day)
        day_entries = cls.entries_for_date(entries, day)
        return DailyLog(date=day, entries=day_entries, totals=cls.sum_entries(day_entries))

    @staticmethod
    def round_for_display(totals: NutritionFacts) -> NutritionFacts:
        """Round totals once for display: integer calories/sodium, 0.1 g macros."""
        return NutritionFacts(
            calories=round_half_up(totals.calories),
            protein_g=round_to_tenth(totals.protein_g),
            carbs_g=round_to_tenth(totals.carbs_g),
            fat_g=round_to_tenth(totals.fat_g),
            fiber_g=None if totals.fiber_g is None else round_to_tenth(totals.fiber_g),
            sugar_g=None if totals.sugar_g is None else round_to_tenth(totals.sugar_g),
            sodium_mg=None if totals.sodium_mg is None else round_half_up(totals.sodium_mg),
        )

    @classmethod
    def build_weekly_summary(
        cls,
        entries: Iterable[FoodEntry],
        end_date: DateLike,
        calorie_goal: int,
        days: int = WEEK_DAYS,
    ) -> List[DailySummary]:
        """Build one DailySummary per day for the window ending at end_date.

        Args:
            entries: Entry collection (entries outside the window are ignored)
            end_date: Last day of the window (inclusive)
            calorie_goal: Goal snapshot applied to every day
            days: Window length

        Returns:
            Summaries ordered oldest → newest; empty days have zero totals
        """
        calorie_goal = int(require_positive("calorie_goal", calorie_goal))
        days = int(require_positive("days", days))
        end = parse_date(end_date)
        start = add_days(end, -(days - 1))

        by_date: Dict[date, List[FoodEntry]] = {}
        for entry in entries:
            if start <= entry.date <= end:
                by_date.setdefault(entry.date, []).append(entry)

        summaries = []
        for day in date_range(start, end):
            day_entries = by_date.get(day, [])
            totals = cls.sum_entries(day_entries)
            summaries.append(
                DailySummary(
                    date=day,
                    total_calories=totals.calories,
                    calorie_goal=calorie_goal,
                    total_protein=totals.protein_g,
                    total_carbs=totals.carbs_g,
                    total_fat=totals.fat_g,
                    meals_logged=len(day_entries),
                    is_goal_met=is_goal_met(totals.calories, calorie_goal),
                )
            )
        return summaries

    @staticmethod
    def compute_streaks(summaries: List[DailySummary]) -> StreakInfo:
        return compute_streaks(summaries)

    @staticmethod
    def average_calories(summaries: List[DailySummary]) -> int:
        if not summaries:
            return 0
        return round_half_up(sum(s.total_calories for s in summaries) / len(summaries))

    @staticmethod
    def average_macro_calories(
        summaries: List[DailySummary], days: Optional[int] = None
    ) -> Dict[str, float]:
        """Average daily calories from each macro over the window."""
        divisor = days or len(summaries) or 1
        return {
            "protein": sum(s.total_protein * CALORIES_PER_GRAM_PROTEIN for s in summaries)
            / divisor,
            "carbs": sum(s.total_carbs * CALORIES_PER_GRAM_CARBS for s in summaries)
            / divisor,
            "fat": sum(s.total_fat * CALORIES_PER_GRAM_FAT for s in summaries) / divisor,
        }

    @classmethod
    def summarize_week(
        cls,
        entries: Iterable[FoodEntry],
        end_date: DateLike,
        calorie_goal: int,
    ) -> WeeklyReport:
        """Build the weekly dashboard report for the 7 days ending at end_date."""
        summaries = cls.build_weekly_summary(entries, end_date, calorie_goal)
        streaks = compute_streaks(summaries)
        logger.debug(
            "Week ending %s: %s days logged, current streak %s",
            summaries[-1].date,
            streaks.total_days_logged,
            streaks.current_streak,
        )
        return WeeklyReport(
            summaries=summaries,
            streaks=streaks,
            average_calories=cls.average_calories(summaries),
            days_on_goal=sum(1 for s in summaries if s.is_goal_met),
            average_macro_calories=cls.average_macro_calories(summaries, WEEK_DAYS),
        )
