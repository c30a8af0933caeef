# -*- coding: utf-8 -*-
"""
NutriPal AI API

Meal photo/text analysis, recipes, daily plans and delivery curation backed by
Gemini with API key rotation.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings, settings as default_settings
from .flows.api import router as ai_router
from .genai import GeminiClient, RotationExecutor, build_executor


def create_app(
    settings: Settings | None = None,
    executor: RotationExecutor[GeminiClient] | None = None,
) -> FastAPI:
    settings = settings or default_settings

    app = FastAPI(
        title="NutriPal AI",
        description="Personalized nutrition flows on Gemini with API key rotation",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    # Built once here rather than per request; the pool is shared read-only.
    app.state.executor = executor if executor is not None else build_executor(settings)
    app.include_router(ai_router)

    @app.get("/api/health")
    def health() -> dict:
        return {"ok": True, "keys": len(app.state.executor.pool)}

    return app


app = create_app()
