# -*- coding: utf-8 -*-
"""Flows: Pydantic models."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

EXPERT_INSIGHT_MAX = 200
REASONING_MAX = 200


def _as_str_list(value: object) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        s = value.strip()
        return [s] if s else []
    if isinstance(value, list):
        out: List[str] = []
        for item in value:
            if item is None:
                continue
            s = str(item).strip()
            if s:
                out.append(s)
        return out
    s = str(value).strip()
    return [s] if s else []


def _truncate(value: object, limit: int) -> object:
    if isinstance(value, str):
        value = value.strip()
        if len(value) > limit:
            return value[: limit - 1].rstrip() + "…"
    return value


class Goal(str, Enum):
    maintenance = "Maintenance"
    weight_loss = "Weight Loss"
    weight_gain = "Weight Gain"


class Macros(BaseModel):
    protein: float = Field(0.0, ge=0, description="Protein in grams")
    carbs: float = Field(0.0, ge=0, description="Carbohydrates in grams")
    fat: float = Field(0.0, ge=0, description="Fat in grams")


class _NutritionAnalysis(BaseModel):
    calories: float = Field(..., ge=0, description="Estimated total calories in kcal")
    macros: Macros
    health_score: float = Field(
        ...,
        ge=0,
        le=100,
        validation_alias=AliasChoices("health_score", "healthScore"),
        description="0-100 based on nutritional quality",
    )
    description: str = ""
    ingredients: List[str] = []
    expert_insight: str = Field(
        "",
        max_length=EXPERT_INSIGHT_MAX,
        validation_alias=AliasChoices("expert_insight", "expertInsight"),
    )
    allergen_warning: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("allergen_warning", "allergenWarning"),
        description="Only set when a direct conflict with allergies/restrictions is found",
    )

    @field_validator("health_score", mode="before")
    @classmethod
    def _clamp_score(cls, value: object) -> object:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return max(0.0, min(100.0, float(value)))
        return value

    @field_validator("ingredients", mode="before")
    @classmethod
    def _coerce_ingredients(cls, value: object) -> List[str]:
        return _as_str_list(value)

    @field_validator("expert_insight", mode="before")
    @classmethod
    def _limit_insight(cls, value: object) -> object:
        """Models routinely overshoot the length limit; trim rather than fail."""
        if value is None:
            return ""
        return _truncate(value, EXPERT_INSIGHT_MAX)

    @field_validator("allergen_warning", mode="before")
    @classmethod
    def _empty_warning_is_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class AnalyzeMealInput(BaseModel):
    photo_data_uri: str = Field(..., min_length=16, description="Meal photo as a base64 data URI")
    description: Optional[str] = Field(None, max_length=2000)
    user_goal: Optional[Goal] = None
    user_allergies: Optional[str] = Field(None, description="Comma separated")
    user_restrictions: List[str] = Field(default_factory=list, description="e.g. Diabetes, Vegan")


class AnalyzeMealOutput(_NutritionAnalysis):
    name: str = Field(..., min_length=1, description="Identified meal name")


class AnalyzeTextMealInput(BaseModel):
    meal_name: str = Field(..., min_length=1, max_length=500)
    user_goal: Optional[Goal] = None
    user_allergies: Optional[str] = None
    user_restrictions: List[str] = Field(default_factory=list)


class AnalyzeTextMealOutput(_NutritionAnalysis):
    instructions: List[str] = []

    @field_validator("instructions", mode="before")
    @classmethod
    def _coerce_instructions(cls, value: object) -> List[str]:
        return _as_str_list(value)


class GenerateRecipeInput(BaseModel):
    meal_name: str = Field(..., min_length=1, max_length=500)
    dietary_restrictions: List[str] = Field(default_factory=list)


class GenerateRecipeOutput(BaseModel):
    recipe: str = Field(..., min_length=1)


class PersonalizedDietPlansInput(BaseModel):
    dietary_needs: str = Field(..., min_length=1, description="e.g. vegetarian, gluten-free")
    available_ingredients: str = Field(..., min_length=1, description="Comma separated")


class PersonalizedDietPlansOutput(BaseModel):
    meal_recommendations: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("meal_recommendations", "mealRecommendations"),
    )
    recipes: List[str] = Field(default_factory=list)
    healthier_alternatives: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("healthier_alternatives", "healthierAlternatives"),
    )

    @field_validator("meal_recommendations", "recipes", "healthier_alternatives", mode="before")
    @classmethod
    def _coerce_lists(cls, value: object) -> List[str]:
        return _as_str_list(value)


class GenerateDailyPlanInput(BaseModel):
    calorie_target: float = Field(..., gt=0, description="Daily energy target in kcal")
    protein_percent: float = Field(..., ge=0, le=100)
    carbs_percent: float = Field(..., ge=0, le=100)
    fat_percent: float = Field(..., ge=0, le=100)
    diet_type: Optional[str] = None
    allergies: Optional[str] = None


class MealRecommendation(BaseModel):
    name: str = Field(..., min_length=1)
    calories: float = Field(..., ge=0)
    time: str
    macros: Macros
    description: str = ""
    swap_suggestion: str = Field(
        "",
        validation_alias=AliasChoices("swap_suggestion", "swapSuggestion"),
        description="An alternative meal",
    )
    ingredients: List[str] = []

    @field_validator("ingredients", mode="before")
    @classmethod
    def _coerce_ingredients(cls, value: object) -> List[str]:
        return _as_str_list(value)


class GenerateDailyPlanOutput(BaseModel):
    breakfast: MealRecommendation
    lunch: MealRecommendation
    dinner: MealRecommendation
    source: str = Field("ai", description="ai | rule_based")


class Platform(str, Enum):
    grabfood = "GrabFood"
    gofood = "GoFood"


class DeliveryItem(BaseModel):
    id: str
    name: str
    restaurant: str
    price: str
    platform: Platform
    calories: float = Field(..., ge=0)
    macros: Macros
    health_score: float = Field(..., validation_alias=AliasChoices("health_score", "healthScore"))
    tags: List[str] = []


class UserProfile(BaseModel):
    bmi_category: Optional[str] = None
    dietary_restrictions: List[str] = Field(default_factory=list)
    allergies: Optional[str] = None
    calorie_target: Optional[float] = Field(None, gt=0)

    @field_validator("dietary_restrictions", mode="before")
    @classmethod
    def _drop_blank_restrictions(cls, value: object) -> List[str]:
        return _as_str_list(value)


class CurateMealSuggestionsInput(BaseModel):
    user_profile: UserProfile
    scraped_database: List[DeliveryItem] = Field(
        default_factory=list, description="Scraped delivery items to rank"
    )


class Suggestion(DeliveryItem):
    reasoning: str = Field("", max_length=REASONING_MAX)

    @field_validator("reasoning", mode="before")
    @classmethod
    def _limit_reasoning(cls, value: object) -> object:
        if value is None:
            return ""
        return _truncate(value, REASONING_MAX)


class CurateMealSuggestionsOutput(BaseModel):
    top_matches: List[Suggestion] = Field(
        default_factory=list,
        validation_alias=AliasChoices("top_matches", "topMatches"),
    )
    source: str = Field("ai", description="ai | rule_based")
