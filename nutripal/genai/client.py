# -*- coding: utf-8 -*-
"""GenAI: Gemini `generateContent` client bound to a single API key."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional

import httpx

from ..config import Settings
from .credentials import mask
from .errors import GenerationError
from .parsing import parse_model_json, split_data_url

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeminiSettings:
    base_url: str
    model: str
    timeout: float
    temperature: float
    max_output_tokens: int


def resolve_gemini_settings(settings: Settings) -> GeminiSettings:
    return GeminiSettings(
        base_url=settings.gemini_base_url.rstrip("/"),
        model=settings.gemini_model,
        timeout=settings.gemini_timeout,
        temperature=settings.gemini_temperature,
        max_output_tokens=settings.gemini_max_output_tokens,
    )


def _extract_error_message(resp: httpx.Response) -> str:
    """Pull the human-readable message out of a Google API error body."""
    raw = resp.text or ""
    try:
        data = resp.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        err = data.get("error")
        if isinstance(err, dict):
            message = err.get("message")
            status = err.get("status")
            if isinstance(message, str) and message.strip():
                if isinstance(status, str) and status:
                    return f"{status}: {message.strip()}"
                return message.strip()
        if isinstance(data.get("message"), str):
            return data["message"]
    snippet = raw.replace("\n", " ").strip()[:200]
    return snippet or resp.reason_phrase or f"HTTP {resp.status_code}"


def _extract_text(data: object) -> str:
    if not isinstance(data, dict):
        return ""
    out: List[str] = []
    candidates = data.get("candidates")
    if not isinstance(candidates, list):
        return ""
    for candidate in candidates:
        if not isinstance(candidate, dict):
            continue
        content = candidate.get("content")
        if not isinstance(content, dict):
            continue
        parts = content.get("parts")
        if not isinstance(parts, list):
            continue
        for part in parts:
            if isinstance(part, dict) and isinstance(part.get("text"), str):
                out.append(part["text"])
        if out:
            break
    return "".join(out)


def _block_reason(data: object) -> Optional[str]:
    if not isinstance(data, dict):
        return None
    feedback = data.get("promptFeedback")
    if isinstance(feedback, dict):
        reason = feedback.get("blockReason")
        if isinstance(reason, str) and reason:
            return reason
    return None


class GeminiClient:
    """Talks to one Gemini model with exactly one API key.

    Instances are cheap and are built fresh for every rotation attempt.
    """

    def __init__(
        self,
        api_key: str,
        cfg: GeminiSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._cfg = cfg
        self._transport = transport

    @property
    def model(self) -> str:
        return self._cfg.model

    def __repr__(self) -> str:
        return f"GeminiClient(model={self._cfg.model!r}, key={mask(self._api_key)})"

    def _build_payload(
        self,
        prompt: str,
        *,
        system: str | None,
        images: Iterable[str],
        json_output: bool,
    ) -> Dict[str, Any]:
        parts: List[Dict[str, Any]] = [{"text": prompt}]
        for data_url in images:
            mime, data = split_data_url(data_url)
            parts.append({"inline_data": {"mime_type": mime, "data": data}})

        generation_config: Dict[str, Any] = {
            "temperature": self._cfg.temperature,
            "maxOutputTokens": self._cfg.max_output_tokens,
        }
        if json_output:
            generation_config["responseMimeType"] = "application/json"

        payload: Dict[str, Any] = {
            "contents": [{"role": "user", "parts": parts}],
            "generationConfig": generation_config,
        }
        if system:
            payload["systemInstruction"] = {"parts": [{"text": system}]}
        return payload

    async def generate_text(
        self,
        prompt: str,
        *,
        system: str | None = None,
        images: Iterable[str] = (),
        json_output: bool = False,
    ) -> str:
        url = f"{self._cfg.base_url}/models/{self._cfg.model}:generateContent"
        payload = self._build_payload(prompt, system=system, images=images, json_output=json_output)
        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": self._api_key,
        }

        async with httpx.AsyncClient(
            timeout=self._cfg.timeout,
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            resp = await client.post(url, headers=headers, json=payload)

        if resp.status_code >= 400:
            raise GenerationError(_extract_error_message(resp), status=resp.status_code)

        try:
            data = resp.json()
        except ValueError as exc:
            logger.warning("gemini returned a non-JSON body: %s", json.dumps((resp.text or "")[:200]))
            raise GenerationError("Gemini returned a non-JSON response") from exc

        text = _extract_text(data)
        if not text.strip():
            reason = _block_reason(data)
            if reason:
                raise GenerationError(f"AI request blocked: {reason}")
            raise GenerationError("AI returned an empty response")
        return text

    async def generate_json(
        self,
        prompt: str,
        *,
        system: str | None = None,
        images: Iterable[str] = (),
    ) -> Dict[str, Any]:
        text = await self.generate_text(prompt, system=system, images=images, json_output=True)
        try:
            return parse_model_json(text)
        except ValueError:
            logger.warning("gemini output parse failed (%d chars): %s", len(text), json.dumps(text[:200]))
            raise


def gemini_client_factory(
    settings: Settings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Callable[[str], GeminiClient]:
    cfg = resolve_gemini_settings(settings)

    def build(api_key: str) -> GeminiClient:
        return GeminiClient(api_key, cfg, transport=transport)

    return build
