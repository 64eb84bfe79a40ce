from __future__ import annotations

import logging
import os
import time
from typing import Any, Optional

from .base import Translator
from healthtranslate.contracts import TranslationRequest
from healthtranslate.errors import AuthenticationMissing, TranslationEndpointError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_MODEL = "deepseek/deepseek-r1-0528:free"
API_KEY_ENV = "OPENROUTER_API_KEY"

_DEFAULT_HEADERS = {
    "HTTP-Referer": "http://localhost",
    "X-Title": "Healthcare Translation App",
}

SYSTEM_PROMPT_TEMPLATE = """You are an expert medical translator assistant.
The input text is a transcript from a voice interface and may contain speech recognition errors, especially with medical terminology.

Your tasks:
1. Analyze the text and correct any obvious phonetic errors related to medical terms.
2. Translate the corrected text into {target_language}.
3. Maintain a professional, empathetic tone suitable for healthcare settings.

Return the output strictly as a JSON object with the following keys:
- "correctedText": The text after fixing medical terms (in the source language).
- "translatedText": The final translation in {target_language}.

Return only the JSON object, with no explanation before or after it.
"""


def build_system_prompt(target_language: str) -> str:
    return SYSTEM_PROMPT_TEMPLATE.format(target_language=target_language)


def build_messages(req: TranslationRequest) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": build_system_prompt(req.target_language_name)},
        {"role": "user", "content": req.source_text},
    ]


class OpenRouterTranslator(Translator):
    """
    Medical correction + translation through an OpenAI-compatible chat
    completion endpoint (OpenRouter by default). One call per request,
    no automatic retry.
    """

    def __init__(
        self,
        *,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        timeout_sec: Optional[float] = None,
        api_key_env: str = API_KEY_ENV,
        client: Any = None,
    ) -> None:
        self.model = model
        self.base_url = base_url
        self.timeout_sec = timeout_sec
        self.api_key_env = api_key_env
        self._client = client
        self._client_key: Optional[str] = None

    @property
    def name(self) -> str:
        return "openrouter"

    def _get_client(self, api_key: str) -> Any:
        if self._client is not None and self._client_key in (None, api_key):
            return self._client

        from openai import OpenAI

        self._client = OpenAI(
            base_url=self.base_url,
            api_key=api_key,
            default_headers=_DEFAULT_HEADERS,
            timeout=self.timeout_sec,
            max_retries=0,
        )
        self._client_key = api_key
        return self._client

    def translate(self, req: TranslationRequest) -> Optional[str]:
        # The key is read per call so a missing key fails the request, not startup.
        api_key = os.getenv(self.api_key_env, "").strip()
        if not api_key:
            raise AuthenticationMissing(self.api_key_env)

        import openai

        client = self._get_client(api_key)
        t0 = time.perf_counter()
        try:
            completion = client.chat.completions.create(
                model=self.model,
                messages=build_messages(req),
                response_format={"type": "json_object"},
            )
        except openai.OpenAIError as e:
            logger.warning(
                "completion_call_failed",
                extra={"seq": req.seq, "error_type": type(e).__name__, "detail": str(e)},
            )
            raise TranslationEndpointError(f"{type(e).__name__}: {e}") from e

        logger.info(
            "completion_call_done",
            extra={"seq": req.seq, "model": self.model, "ms": round((time.perf_counter() - t0) * 1000.0, 2)},
        )
        choices = getattr(completion, "choices", None) or []
        if not choices:
            return None
        return choices[0].message.content
