"""FastAPI server exposing the calorie calculator, scaler and weekly summaries."""

from datetime import date
from typing import Any, Dict, List, Optional

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from src.app_logging import configure_logging
from src.data_layer.entry_db import entry_from_dict, entry_to_dict
from src.data_layer.exceptions import InvalidArgumentError, UnsupportedUnitError
from src.data_layer.food_db import food_item_from_dict
from src.data_layer.models import UserProfile
from src.data_layer.user_profile import update_profile
from src.nutrition.aggregator import NutritionAggregator
from src.nutrition.calculator import CalorieCalculator
from src.nutrition.scaler import NutritionScaler
from src.nutrition.units import cm_to_feet_inches, default_measurement_unit
from src.output.formatters import (
    format_calorie_result_json,
    format_scaled_json,
    format_weekly_report_json,
)

app = FastAPI(title="Calorie Tracker Core API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Local development
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

calculator = CalorieCalculator()


class RecommendationRequest(BaseModel):
    age: Optional[int] = None
    weight_kg: Optional[float] = None
    height_cm: Optional[float] = None
    gender: Optional[str] = None
    activity_level: Optional[str] = None
    goal_type: Optional[str] = None


class ScaleRequest(BaseModel):
    food: Dict[str, Any]
    amount: float
    unit: str = "g"
    servings: float = 1.0
    single_rounding: bool = False


class RescaleEntryRequest(BaseModel):
    entry: Dict[str, Any]
    amount: float
    unit: Optional[str] = None  # Defaults to the food's usual measurement unit
    servings: float = 1.0
    meal_type: Optional[str] = None
    notes: Optional[str] = None


class WeeklySummaryRequest(BaseModel):
    entries: List[Dict[str, Any]] = Field(default_factory=list)
    end_date: date
    calorie_goal: int = 2000


@app.exception_handler(InvalidArgumentError)
@app.exception_handler(UnsupportedUnitError)
async def invalid_input_handler(request: Request, exc: ValueError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.post("/api/recommendation")
def recommend(request: RecommendationRequest) -> Dict[str, Any]:
    """Return a calorie recommendation, or available=False for incomplete input."""
    profile = update_profile(UserProfile(), **request.model_dump())
    result = calculator.recommend(profile)
    if result is None:
        return {"available": False}
    return {"available": True, **format_calorie_result_json(result)}


@app.post("/api/scale")
def scale(request: ScaleRequest) -> Dict[str, Any]:
    try:
        food = food_item_from_dict(request.food)
    except KeyError as exc:
        raise HTTPException(status_code=422, detail=f"Missing food field {exc}") from exc
    scaler = NutritionScaler(single_rounding=request.single_rounding)
    scaled = scaler.scale_food(food, request.amount, request.unit, request.servings)
    return format_scaled_json(scaled)


@app.post("/api/weekly-summary")
def weekly_summary(request: WeeklySummaryRequest) -> Dict[str, Any]:
    try:
        entries = [entry_from_dict(item) for item in request.entries]
    except KeyError as exc:
        raise HTTPException(status_code=422, detail=f"Missing entry field {exc}") from exc
    report = NutritionAggregator.summarize_week(
        entries, request.end_date, request.calorie_goal
    )
    return format_weekly_report_json(report)


@app.post("/api/entries/rescale")
def rescale_entry(request: RescaleEntryRequest) -> Dict[str, Any]:
    """Edit a logged entry's serving and return the new entry snapshot."""
    try:
        entry = entry_from_dict(request.entry)
    except KeyError as exc:
        raise HTTPException(status_code=422, detail=f"Missing entry field {exc}") from exc
    edited = NutritionScaler().rescale_entry(
        entry,
        request.amount,
        request.unit or default_measurement_unit(entry.food_item),
        request.servings,
        meal_type=request.meal_type,
        notes=request.notes,
    )
    return entry_to_dict(edited)


@app.get("/api/convert/height")
def convert_height(cm: float, normalize: bool = True) -> Dict[str, int]:
    feet, inches = cm_to_feet_inches(cm, normalize=normalize)
    return {"feet": feet, "inches": inches}


if __name__ == "__main__":
    configure_logging()
    uvicorn.run(app, host="0.0.0.0", port=8000)
