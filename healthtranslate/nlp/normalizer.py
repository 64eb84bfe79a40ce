# healthtranslate/nlp/normalizer.py
from __future__ import annotations

import json
import re
from typing import Any, Optional

from healthtranslate.contracts import Failed, Outcome, Succeeded, TranslationResult
from healthtranslate.errors import MalformedReply

# Reasoning models (e.g. DeepSeek R1) prepend a <think> block to the payload.
_THINK_BLOCK = re.compile(r"<think>.*?</think>", flags=re.DOTALL)
_FENCE = re.compile(r"```(?:json)?", flags=re.IGNORECASE)

_FIELDS = (("correctedText", "corrected_text"), ("translatedText", "translated_text"))


def strip_artifacts(raw: str) -> str:
    text = _THINK_BLOCK.sub("", raw)
    text = _FENCE.sub("", text)
    return text.strip()


def _snippet(text: str, max_len: int = 120) -> str:
    text = text.strip()
    if len(text) > max_len:
        return text[: max_len - 3].rstrip() + "..."
    return text


def _field(payload: dict[str, Any], key: str) -> str:
    value = payload.get(key)
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def normalize_reply(raw: Optional[str]) -> Outcome:
    """
    Turn a raw completion reply into a TranslationResult.

    A missing body yields an empty result (no update). Anything that is not a
    JSON object once reasoning blocks and code fences are removed becomes
    Failed(MalformedReply); the parser's own exception never escapes.
    """
    if not raw:
        return Succeeded(TranslationResult())

    body = strip_artifacts(raw)
    try:
        payload = json.loads(body)
    except (ValueError, RecursionError):
        # RecursionError: pathologically nested arrays/objects.
        return Failed(MalformedReply(_snippet(body or raw)))
    if not isinstance(payload, dict):
        return Failed(MalformedReply(_snippet(body)))

    values = {attr: _field(payload, key) for key, attr in _FIELDS}
    return Succeeded(TranslationResult(**values))
