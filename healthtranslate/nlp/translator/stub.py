from __future__ import annotations
import json
from typing import Optional
from .base import Translator
from healthtranslate.contracts import TranslationRequest

class StubTranslator(Translator):
    @property
    def name(self) -> str:
        return "stub"

    def translate(self, req: TranslationRequest) -> Optional[str]:
        # Deterministic, test-friendly; fenced like a real model reply
        payload = {
            "correctedText": req.source_text,
            "translatedText": f"[{req.target_language_name}] {req.source_text}",
        }
        return "```json\n" + json.dumps(payload, ensure_ascii=False) + "\n```"
