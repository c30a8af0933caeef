# -*- coding: utf-8 -*-
"""Flows: API endpoints."""

from __future__ import annotations

import base64
from typing import Awaitable, Callable, TypeVar

from fastapi import APIRouter, Depends, HTTPException, Request

from ..config import Settings
from ..genai import ErrorKind, GeminiClient, NoCredentialsConfigured, RotationExecutor, classify
from ..genai.parsing import split_data_url
from . import service
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

router = APIRouter(prefix="/api/ai", tags=["AI"])

InT = TypeVar("InT")
OutT = TypeVar("OutT")


def get_executor(request: Request) -> RotationExecutor[GeminiClient]:
    return request.app.state.executor


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def _call(
    flow: Callable[[RotationExecutor[GeminiClient], InT], Awaitable[OutT]],
    executor: RotationExecutor[GeminiClient],
    payload: InT,
) -> OutT:
    try:
        return await flow(executor, payload)
    except NoCredentialsConfigured as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except Exception as exc:
        if classify(exc) is ErrorKind.retryable:
            raise HTTPException(status_code=429, detail=f"AI quota exceeded: {exc}") from exc
        if isinstance(exc, ValueError):
            raise HTTPException(status_code=500, detail=f"AI output error: {exc}") from exc
        raise HTTPException(status_code=502, detail=f"AI call failed: {exc}") from exc


def _check_photo_or_400(photo_data_uri: str, max_bytes: int) -> None:
    try:
        _, payload = split_data_url(photo_data_uri)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    size = len(base64.b64decode(payload))
    if size > max_bytes:
        raise HTTPException(status_code=400, detail=f"Image too large: {size} bytes > {max_bytes}")


@router.post("/meal/analyze", response_model=AnalyzeMealOutput, summary="Analyze a meal photo")
async def analyze_meal(
    request: AnalyzeMealInput,
    executor: RotationExecutor[GeminiClient] = Depends(get_executor),
    settings: Settings = Depends(get_settings),
):
    _check_photo_or_400(request.photo_data_uri, settings.max_image_bytes)
    return await _call(service.analyze_meal, executor, request)


@router.post("/meal/analyze-text", response_model=AnalyzeTextMealOutput, summary="Analyze a meal description")
async def analyze_text_meal(
    request: AnalyzeTextMealInput,
    executor: RotationExecutor[GeminiClient] = Depends(get_executor),
):
    return await _call(service.analyze_text_meal, executor, request)


@router.post("/recipe", response_model=GenerateRecipeOutput, summary="Generate a recipe")
async def generate_recipe(
    request: GenerateRecipeInput,
    executor: RotationExecutor[GeminiClient] = Depends(get_executor),
):
    return await _call(service.generate_recipe, executor, request)


@router.post("/diet-plans", response_model=PersonalizedDietPlansOutput, summary="Personalized diet plans")
async def personalized_diet_plans(
    request: PersonalizedDietPlansInput,
    executor: RotationExecutor[GeminiClient] = Depends(get_executor),
):
    return await _call(service.personalized_diet_plans, executor, request)


@router.post("/daily-plan", response_model=GenerateDailyPlanOutput, summary="Daily 3-meal plan")
async def generate_daily_plan(
    request: GenerateDailyPlanInput,
    executor: RotationExecutor[GeminiClient] = Depends(get_executor),
):
    return await _call(service.generate_daily_plan, executor, request)


@router.post("/suggestions", response_model=CurateMealSuggestionsOutput, summary="Curate delivery suggestions")
async def curate_meal_suggestions(
    request: CurateMealSuggestionsInput,
    executor: RotationExecutor[GeminiClient] = Depends(get_executor),
):
    return await _call(service.curate_meal_suggestions, executor, request)
