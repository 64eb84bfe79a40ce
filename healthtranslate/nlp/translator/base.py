from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Optional
from healthtranslate.contracts import TranslationRequest

class Translator(ABC):
    @property
    @abstractmethod
    def name(self) -> str: ...

    @abstractmethod
    def translate(self, req: TranslationRequest) -> Optional[str]:
        """Return the raw completion reply; raise TranslationEndpointError on transport failure."""
