from __future__ import annotations

import os
from typing import List


def _split_keys(raw: str | None) -> List[str]:
    if not raw:
        return []
    return [key.strip() for key in raw.split(",") if key.strip()]


def _load_gemini_keys() -> List[str]:
    keys: List[str] = _split_keys(os.environ.get("GEMINI_API_KEYS"))
    for n in range(1, 10):
        keys.extend(_split_keys(os.environ.get(f"GEMINI_API_KEY_{n}")))
    if not keys:
        keys = _split_keys(os.environ.get("GEMINI_API_KEY") or os.environ.get("GOOGLE_API_KEY"))

    seen: set[str] = set()
    ordered: List[str] = []
    for key in keys:
        if key in seen:
            continue
        seen.add(key)
        ordered.append(key)
    return ordered


class Settings:
    """Centralized configuration for the NutriPal AI backend."""

    def __init__(self) -> None:
        # Trial order for key rotation is the order listed here.
        self.gemini_api_keys: List[str] = _load_gemini_keys()
        self.gemini_model: str = os.environ.get("GEMINI_MODEL", "gemini-2.5-flash")
        self.gemini_base_url: str = os.environ.get(
            "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
        )
        self.gemini_timeout: float = float(os.environ.get("GEMINI_TIMEOUT") or "60")
        self.gemini_temperature: float = float(os.environ.get("GEMINI_TEMPERATURE") or "0.4")
        self.gemini_max_output_tokens: int = int(
            os.environ.get("GEMINI_MAX_OUTPUT_TOKENS") or "2048"
        )
        self.max_image_bytes: int = int(os.environ.get("NUTRIPAL_MAX_IMAGE_BYTES") or "4000000")

        cors = os.environ.get("NUTRIPAL_CORS_ORIGINS", "*")
        if cors.strip() == "*":
            self.cors_origins: List[str] = ["*"]
        else:
            self.cors_origins = [
                origin.strip() for origin in cors.split(",") if origin.strip()
            ]


settings = Settings()
