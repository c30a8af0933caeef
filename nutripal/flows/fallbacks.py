# -*- coding: utf-8 -*-
"""Flows: rule-based answers used when every API key is rate limited."""

from __future__ import annotations

import math

from .models import (
    CurateMealSuggestionsInput,
    CurateMealSuggestionsOutput,
    GenerateDailyPlanInput,
    GenerateDailyPlanOutput,
    Macros,
    MealRecommendation,
    Suggestion,
)

DEFAULT_DAILY_CALORIES = 2000.0
FALLBACK_REASONING = (
    "Rule-based optimization: matched on calorie proximity and profile constraints during AI downtime."
)

# (share of daily calories, name, time)
_MENU = {
    "breakfast": (0.25, "Oatmeal with Fruits", "08:00 AM"),
    "lunch": (0.40, "Grilled Chicken Salad", "12:30 PM"),
    "dinner": (0.35, "Steamed Fish with Greens", "07:00 PM"),
}


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _fallback_meal(request: GenerateDailyPlanInput, name: str, calories: int, time: str) -> MealRecommendation:
    return MealRecommendation(
        name=name,
        calories=calories,
        time=time,
        macros=Macros(
            protein=_round_half_up(calories * (request.protein_percent / 100) / 4),
            carbs=_round_half_up(calories * (request.carbs_percent / 100) / 4),
            fat=_round_half_up(calories * (request.fat_percent / 100) / 9),
        ),
        description="Synthesized from biometric rules (AI fallback active).",
        swap_suggestion="Alternative healthy source",
        ingredients=["Fresh ingredients", "Lean protein"],
    )


def rule_based_menu(request: GenerateDailyPlanInput) -> GenerateDailyPlanOutput:
    meals = {
        slot: _fallback_meal(request, name, _round_half_up(request.calorie_target * share), time)
        for slot, (share, name, time) in _MENU.items()
    }
    return GenerateDailyPlanOutput(**meals, source="rule_based")


def rule_based_suggestions(request: CurateMealSuggestionsInput) -> CurateMealSuggestionsOutput:
    profile = request.user_profile
    target = (profile.calorie_target or DEFAULT_DAILY_CALORIES) / 3
    allergy = (profile.allergies or "").strip().lower()
    wanted = {r.lower() for r in profile.dietary_restrictions}

    candidates = []
    for item in request.scraped_database:
        if allergy and allergy in item.name.lower():
            continue
        if wanted and not wanted.intersection(tag.lower() for tag in item.tags):
            continue
        candidates.append(item)

    # sorted() is stable, so equally close items keep database order.
    ranked = sorted(candidates, key=lambda item: abs(item.calories - target))
    top = [
        Suggestion(**item.model_dump(), reasoning=FALLBACK_REASONING)
        for item in ranked[:3]
    ]
    return CurateMealSuggestionsOutput(top_matches=top, source="rule_based")
