# -*- coding: utf-8 -*-
"""Flows: prompt templates."""

from __future__ import annotations

from typing import List, Optional

from .models import (
    AnalyzeMealInput,
    AnalyzeTextMealInput,
    CurateMealSuggestionsInput,
    GenerateDailyPlanInput,
    GenerateRecipeInput,
    PersonalizedDietPlansInput,
)

SYSTEM_PROMPT = (
    "You are NutriPal, an expert AI nutritionist. Return STRICT JSON only. "
    "Do NOT wrap in markdown or code fences. "
    "Use double quotes for all keys/strings and no trailing commas. "
    "If unsure, give your best conservative estimate; do NOT invent allergies or conditions."
)

_ANALYSIS_SCHEMA = (
    '  "calories": number,\n'
    '  "macros": {"protein": number, "carbs": number, "fat": number},\n'
    '  "health_score": number (0-100),\n'
    '  "description": "string",\n'
    '  "ingredients": ["string"],\n'
    '  "expert_insight": "string (max 180 chars)",\n'
    '  "allergen_warning": "string|null"\n'
)

_MEAL_SCHEMA = (
    "{\n"
    '    "name": "string",\n'
    '    "calories": number,\n'
    '    "time": "string, e.g. 08:00 AM",\n'
    '    "macros": {"protein": number, "carbs": number, "fat": number},\n'
    '    "description": "string (max 150 chars)",\n'
    '    "swap_suggestion": "string",\n'
    '    "ingredients": ["string"]\n'
    "  }"
)


def _or(value: Optional[str], default: str) -> str:
    if value is None:
        return default
    value = value.strip()
    return value or default


def _join(values: List[str], default: str = "None") -> str:
    cleaned = [v.strip() for v in values if v and v.strip()]
    return ", ".join(cleaned) if cleaned else default


def _profile_block(goal, allergies: Optional[str], restrictions: List[str]) -> str:
    goal_str = goal.value if goal is not None else "General Maintenance"
    return (
        f"- Goal: {goal_str}\n"
        f"- Allergies: {_or(allergies, 'None provided')}\n"
        f"- Dietary Markers/Restrictions: {_join(restrictions)}\n"
    )


def analyze_meal_prompt(request: AnalyzeMealInput) -> str:
    description = _or(request.description, "")
    hint = f'4. Use this description to refine the analysis: "{description}"\n' if description else ""
    return (
        "Analyze the attached meal photo and provide a detailed nutritional breakdown.\n"
        "\n"
        "User's Profile:\n"
        f"{_profile_block(request.user_goal, request.user_allergies, request.user_restrictions)}"
        "\n"
        "Requirements:\n"
        "1. Estimate portion sizes, kcal, protein, carbs and fat.\n"
        "2. ALLERGY & DIETARY AUDIT: identify the ingredients and check them against the allergies and markers.\n"
        "   If a direct conflict exists, describe it in allergen_warning; otherwise allergen_warning MUST be null.\n"
        "3. expert_insight MUST be extremely concise: target 120 characters, never more than 180.\n"
        f"{hint}"
        "\n"
        "Output JSON schema (STRICT):\n"
        "{\n"
        '  "name": "string",\n'
        f"{_ANALYSIS_SCHEMA}"
        "}\n"
    )


def analyze_text_meal_prompt(request: AnalyzeTextMealInput) -> str:
    return (
        "Analyze the following meal description and provide a full nutritional and culinary breakdown.\n"
        "\n"
        f'Meal: "{request.meal_name.strip()}"\n'
        "User's Profile:\n"
        f"{_profile_block(request.user_goal, request.user_allergies, request.user_restrictions)}"
        "\n"
        "Requirements:\n"
        "1. Provide accurate estimates for calories and macros.\n"
        "2. Identify the main ingredients.\n"
        "3. If any ingredient conflicts with the allergies or restrictions, give a clear warning in "
        "allergen_warning; otherwise leave it null.\n"
        "4. Give clear step-by-step cooking instructions.\n"
        "5. expert_insight must be encouraging and explain how the meal supports the goal.\n"
        "\n"
        "Output JSON schema (STRICT):\n"
        "{\n"
        f"{_ANALYSIS_SCHEMA.rstrip()},\n"
        '  "instructions": ["string"]\n'
        "}\n"
    )


def generate_recipe_prompt(request: GenerateRecipeInput) -> str:
    return (
        "You are also an experienced chef.\n"
        f'Generate a healthy, delicious and easy-to-follow recipe for: "{request.meal_name.strip()}".\n'
        f"Consider these dietary restrictions: {_join(request.dietary_restrictions)}.\n"
        "\n"
        "Structure the recipe text with these section headers in bold:\n"
        "1. **HEALTH BENEFIT**\n"
        "2. **INGREDIENTS** (bullet points)\n"
        "3. **INSTRUCTIONS** (numbered steps)\n"
        "4. **PREP & COOK TIME**\n"
        "Keep the tone professional yet encouraging and avoid long paragraphs.\n"
        "\n"
        'Output JSON schema (STRICT): {"recipe": "string"}\n'
    )


def personalized_diet_plans_prompt(request: PersonalizedDietPlansInput) -> str:
    return (
        "A user gives you their dietary needs and the ingredients they have available.\n"
        "1. Recommend personalized meals based on both.\n"
        "2. Give a simple recipe (ingredients and instructions) for each recommended meal.\n"
        "3. Suggest healthier alternatives, focusing on organic products and readily available substitutes.\n"
        "\n"
        f"Dietary Needs: {request.dietary_needs.strip()}\n"
        f"Available Ingredients: {request.available_ingredients.strip()}\n"
        "\n"
        "Output JSON schema (STRICT):\n"
        "{\n"
        '  "meal_recommendations": ["string"],\n'
        '  "recipes": ["string"],\n'
        '  "healthier_alternatives": ["string"]\n'
        "}\n"
    )


def _fmt_number(value: float) -> str:
    return f"{value:g}"


def generate_daily_plan_prompt(request: GenerateDailyPlanInput) -> str:
    return (
        "Synthesize a 3-meal plan for one day.\n"
        "\n"
        "TARGETS:\n"
        f"- Energy: {_fmt_number(request.calorie_target)} kcal\n"
        f"- Macros: {_fmt_number(request.protein_percent)}% P, "
        f"{_fmt_number(request.carbs_percent)}% C, {_fmt_number(request.fat_percent)}% F\n"
        f"- Diet: {_or(request.diet_type, 'Standard')}\n"
        f"- Exclude: {_or(request.allergies, 'None')}\n"
        "\n"
        "RULES:\n"
        "1. The sum of the meal calories must be within 5% of the target.\n"
        "2. description MUST be concise (target 120 characters, max 150).\n"
        "3. Never include excluded ingredients.\n"
        "\n"
        "Output JSON schema (STRICT):\n"
        "{\n"
        f'  "breakfast": {_MEAL_SCHEMA},\n'
        f'  "lunch": {_MEAL_SCHEMA},\n'
        f'  "dinner": {_MEAL_SCHEMA}\n'
        "}\n"
    )


def curate_meal_suggestions_prompt(request: CurateMealSuggestionsInput) -> str:
    profile = request.user_profile
    target = _fmt_number(profile.calorie_target) if profile.calorie_target else "Unknown"
    lines = [
        f"- ID: {item.id}, Name: {item.name}, Restaurant: {item.restaurant}, Price: {item.price}, "
        f"Platform: {item.platform.value}, Kcal: {_fmt_number(item.calories)}, "
        f"Health: {_fmt_number(item.health_score)}, Tags: {_join(item.tags, '-')}"
        for item in request.scraped_database
    ]
    database = "\n".join(lines) if lines else "(empty)"
    return (
        "Rank the delivery items below for this user.\n"
        "\n"
        "User:\n"
        f"- BMI: {_or(profile.bmi_category, 'Standard')}\n"
        f"- Constraints: {_join(profile.dietary_restrictions)}\n"
        f"- Allergies: {_or(profile.allergies, 'None')}\n"
        f"- Daily target: {target} kcal\n"
        "\n"
        "DATABASE OF ITEMS:\n"
        f"{database}\n"
        "\n"
        "RULES:\n"
        "1. Hard exclusion of anything conflicting with the allergies.\n"
        "2. Reward matches on the constraints.\n"
        "3. reasoning MUST be extremely concise (target 120 characters, max 150).\n"
        "4. Return at most 3 items, copied verbatim from the database, best first.\n"
        "\n"
        "Output JSON schema (STRICT):\n"
        "{\n"
        '  "top_matches": [\n'
        "    {\n"
        '      "id": "string", "name": "string", "restaurant": "string", "price": "string",\n'
        '      "platform": "GrabFood|GoFood", "calories": number,\n'
        '      "macros": {"protein": number, "carbs": number, "fat": number},\n'
        '      "health_score": number, "tags": ["string"], "reasoning": "string"\n'
        "    }\n"
        "  ]\n"
        "}\n"
    )
