from __future__ import annotations
import os
from typing import Any, Optional
from .base import Translator
from .openrouter import DEFAULT_BASE_URL, DEFAULT_MODEL, OpenRouterTranslator
from .stub import StubTranslator

def get_translator(provider: str | None = None, *, model: Optional[str] = None,
                   base_url: Optional[str] = None, timeout_sec: Optional[float] = None,
                   client: Any = None) -> Translator:
    provider = (provider or os.getenv("HEALTHTRANSLATE_TRANSLATOR", "openrouter")).lower().strip()

    if provider == "stub":
        return StubTranslator()
    if provider in ("openrouter", "openai"):
        return OpenRouterTranslator(
            model=model or DEFAULT_MODEL,
            base_url=base_url or DEFAULT_BASE_URL,
            timeout_sec=timeout_sec,
            client=client,
        )

    raise ValueError(f"Unknown translator provider: {provider}")
