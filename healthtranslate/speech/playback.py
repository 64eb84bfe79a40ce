from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Voice:
    name: str
    language_tag: str
    handle: Any = None


class SynthesisCapability(ABC):
    @abstractmethod
    def voices(self) -> List[Voice]: ...

    @abstractmethod
    def speak(self, text: str, voice: Optional[Voice]) -> None:
        """Start playback; voice=None means the engine's default voice."""

    @abstractmethod
    def cancel(self) -> None: ...


def select_voice(voices: Sequence[Voice], language_tag: str) -> Optional[Voice]:
    for voice in voices:
        if voice.language_tag == language_tag:
            return voice
    return None


class PlaybackTrigger:
    """Reads translated text aloud. One utterance at a time, no queue."""

    def __init__(self, synth: Optional[SynthesisCapability]) -> None:
        self.synth = synth
        self._voices: List[Voice] = []
        self.refresh_voices()

    @property
    def voices(self) -> List[Voice]:
        return list(self._voices)

    @property
    def language_tags(self) -> List[str]:
        seen: list[str] = []
        for voice in self._voices:
            if voice.language_tag not in seen:
                seen.append(voice.language_tag)
        return seen

    def refresh_voices(self) -> List[Voice]:
        # The engine's catalog may only be ready some time after startup.
        self._voices = list(self.synth.voices()) if self.synth is not None else []
        logger.info("voices_refreshed", extra={"count": len(self._voices)})
        return self.voices

    def speak(self, text: str, language_tag: str) -> Optional[Voice]:
        if not text or self.synth is None:
            return None
        voice = select_voice(self._voices, language_tag)
        self.synth.cancel()
        self.synth.speak(text, voice)
        logger.info(
            "playback_started",
            extra={"language": language_tag, "voice": voice.name if voice else "default", "chars": len(text)},
        )
        return voice
