from __future__ import annotations

from typing import List, Optional

import pytest

from healthtranslate.capture.base import CaptureCapability, CaptureListener
from healthtranslate.contracts import CaptureConfig, TranslationRequest
from healthtranslate.speech.playback import SynthesisCapability, Voice


class FakeCapture(CaptureCapability):
    def __init__(self) -> None:
        self.configs: List[CaptureConfig] = []
        self.listeners: List[CaptureListener] = []
        self.stop_calls = 0

    @property
    def listener(self) -> CaptureListener:
        return self.listeners[-1]

    def start(self, config: CaptureConfig, listener: CaptureListener) -> None:
        self.configs.append(config)
        self.listeners.append(listener)

    def stop(self) -> None:
        self.stop_calls += 1


class RecordingDispatch:
    """Collects requests; tests deliver completions by hand."""

    def __init__(self) -> None:
        self.requests: List[TranslationRequest] = []

    def __call__(self, req: TranslationRequest) -> None:
        self.requests.append(req)


class FakeSynth(SynthesisCapability):
    def __init__(self, voices: Optional[List[Voice]] = None) -> None:
        self._voices = list(voices or [])
        self.calls: List[tuple] = []
        self.voice_queries = 0

    def set_voices(self, voices: List[Voice]) -> None:
        self._voices = list(voices)

    def voices(self) -> List[Voice]:
        self.voice_queries += 1
        return list(self._voices)

    def speak(self, text: str, voice: Optional[Voice]) -> None:
        self.calls.append(("speak", text, voice))

    def cancel(self) -> None:
        self.calls.append(("cancel",))


@pytest.fixture
def capture() -> FakeCapture:
    return FakeCapture()


@pytest.fixture
def dispatch() -> RecordingDispatch:
    return RecordingDispatch()


@pytest.fixture
def synth() -> FakeSynth:
    return FakeSynth(
        [
            Voice(name="Samantha", language_tag="en-US"),
            Voice(name="Monica", language_tag="es-ES"),
            Voice(name="Paulina", language_tag="es-MX"),
        ]
    )
