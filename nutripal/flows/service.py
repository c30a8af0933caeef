# -*- coding: utf-8 -*-
"""Flows: AI features of the app, each executed through key rotation."""

from __future__ import annotations

import logging
from typing import Any, Dict, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..genai import ErrorKind, GeminiClient, RotationExecutor, classify
from . import prompts
from .fallbacks import rule_based_menu, rule_based_suggestions
from .models import (
    AnalyzeMealInput,
    AnalyzeMealOutput,
    AnalyzeTextMealInput,
    AnalyzeTextMealOutput,
    CurateMealSuggestionsInput,
    CurateMealSuggestionsOutput,
    GenerateDailyPlanInput,
    GenerateDailyPlanOutput,
    GenerateRecipeInput,
    GenerateRecipeOutput,
    PersonalizedDietPlansInput,
    PersonalizedDietPlansOutput,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _validate(model: Type[M], data: Dict[str, Any], what: str) -> M:
    """Validate model output; a malformed answer is fatal, not a quota issue."""
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        logger.warning("model output failed validation for %s: %d invalid field(s)", model.__name__, exc.error_count())
        raise ValueError(f"AI failed to {what}") from exc


async def _generate(
    executor: RotationExecutor[GeminiClient],
    model: Type[M],
    prompt: str,
    what: str,
    *,
    images: tuple[str, ...] = (),
) -> M:
    async def work(client: GeminiClient) -> M:
        data = await client.generate_json(prompt, system=prompts.SYSTEM_PROMPT, images=images)
        return _validate(model, data, what)

    return await executor.run(work)


async def analyze_meal(executor: RotationExecutor[GeminiClient], request: AnalyzeMealInput) -> AnalyzeMealOutput:
    """Estimate nutrition from a meal photo and audit it against the user's allergies."""
    return await _generate(
        executor,
        AnalyzeMealOutput,
        prompts.analyze_meal_prompt(request),
        "analyze the meal",
        images=(request.photo_data_uri,),
    )


async def analyze_text_meal(
    executor: RotationExecutor[GeminiClient], request: AnalyzeTextMealInput
) -> AnalyzeTextMealOutput:
    return await _generate(
        executor,
        AnalyzeTextMealOutput,
        prompts.analyze_text_meal_prompt(request),
        "analyze the meal",
    )


async def generate_recipe(executor: RotationExecutor[GeminiClient], request: GenerateRecipeInput) -> GenerateRecipeOutput:
    return await _generate(
        executor,
        GenerateRecipeOutput,
        prompts.generate_recipe_prompt(request),
        "generate a recipe",
    )


async def personalized_diet_plans(
    executor: RotationExecutor[GeminiClient], request: PersonalizedDietPlansInput
) -> PersonalizedDietPlansOutput:
    return await _generate(
        executor,
        PersonalizedDietPlansOutput,
        prompts.personalized_diet_plans_prompt(request),
        "generate personalized diet plan",
    )


async def generate_daily_plan(
    executor: RotationExecutor[GeminiClient], request: GenerateDailyPlanInput
) -> GenerateDailyPlanOutput:
    """Plan breakfast, lunch and dinner; falls back to a rule-based menu on quota exhaustion."""
    try:
        plan = await _generate(
            executor,
            GenerateDailyPlanOutput,
            prompts.generate_daily_plan_prompt(request),
            "generate daily plan",
        )
    except Exception as exc:
        if classify(exc) is not ErrorKind.retryable:
            raise
        logger.warning("AI quota exceeded, using rule-based menu fallback: %s", exc)
        return rule_based_menu(request)
    plan.source = "ai"
    return plan


async def curate_meal_suggestions(
    executor: RotationExecutor[GeminiClient], request: CurateMealSuggestionsInput
) -> CurateMealSuggestionsOutput:
    """Rank scraped delivery items for the user; rule-based ranking on quota exhaustion."""
    try:
        result = await _generate(
            executor,
            CurateMealSuggestionsOutput,
            prompts.curate_meal_suggestions_prompt(request),
            "filter delivery data",
        )
    except Exception as exc:
        if classify(exc) is not ErrorKind.retryable:
            raise
        logger.warning("AI quota exceeded, using rule-based delivery fallback: %s", exc)
        return rule_based_suggestions(request)
    result.top_matches = result.top_matches[:3]
    result.source = "ai"
    return result
