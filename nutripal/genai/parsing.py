# -*- coding: utf-8 -*-
"""GenAI: parsing of model JSON output and image data URIs."""

from __future__ import annotations

import base64
import binascii
import json
import logging
import re
from typing import Any, Dict, Tuple

logger = logging.getLogger(__name__)

_DATA_URL_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?:;[\w-]+=[^;,]*)*;base64,(?P<data>.*)$", re.DOTALL)
_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)

_decoder = json.JSONDecoder()


def parse_model_json(content: str) -> Dict[str, Any]:
    """Return the first JSON object in model output.

    JSON mode normally yields a bare object; a fenced block or a short prose
    preamble is tolerated. Raises ValueError with a fixed message otherwise,
    so decoder positions never leak into error classification.
    """
    text = _FENCE_RE.sub("", content.strip())
    last_error: ValueError | None = None

    try:
        parsed = json.loads(text)
        if isinstance(parsed, dict):
            return parsed
    except ValueError as exc:
        last_error = exc

    start = text.find("{")
    while start != -1:
        try:
            parsed, _ = _decoder.raw_decode(text, start)
            if isinstance(parsed, dict):
                return parsed
        except ValueError as exc:
            last_error = exc
        start = text.find("{", start + 1)

    logger.debug("model output is not a JSON object: %s", last_error or "no object found")
    raise ValueError("Failed to parse model JSON") from last_error


def split_data_url(data_url: str) -> Tuple[str, str]:
    """Split a base64 data URI into (mime type, base64 payload)."""
    match = _DATA_URL_RE.match(data_url.strip())
    if not match:
        raise ValueError("Image must be a base64 data URI (data:<mime>;base64,<data>)")
    mime = match.group("mime") or "application/octet-stream"
    payload = re.sub(r"\s+", "", match.group("data"))
    try:
        base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError("Image payload is not valid base64") from exc
    return mime, payload
