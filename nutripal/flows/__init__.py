# -*- coding: utf-8 -*-
"""AI flows: meal analysis, recipes, diet plans and delivery curation."""

from .service import (
    analyze_meal,
    analyze_text_meal,
    curate_meal_suggestions,
    generate_daily_plan,
    generate_recipe,
    personalized_diet_plans,
)

__all__ = [
    "analyze_meal",
    "analyze_text_meal",
    "curate_meal_suggestions",
    "generate_daily_plan",
    "generate_recipe",
    "personalized_diet_plans",
]
