from __future__ import annotations

import logging
from typing import Callable, List, Optional

from PyQt6 import QtCore
from PyQt6.QtTextToSpeech import QTextToSpeech

from healthtranslate.speech.playback import SynthesisCapability, Voice

logger = logging.getLogger(__name__)


def locale_tag(locale: QtCore.QLocale) -> str:
    # QLocale.name() is "es_ES"; voices are matched on BCP-47 style "es-ES".
    return locale.name().replace("_", "-")


class QtSpeechSynthesis(SynthesisCapability):
    """
    Synthesis on the platform speech engine via QtTextToSpeech.
    The voice catalog is enumerated per locale once the engine is Ready.
    """

    def __init__(self, engine_name: Optional[str] = None) -> None:
        self.engine = QTextToSpeech(engine_name) if engine_name else QTextToSpeech()
        self._default_locale = self.engine.locale()
        self._default_voice = self.engine.voice()

    def on_ready(self, callback: Callable[[], None]) -> None:
        def _on_state(state: QTextToSpeech.State) -> None:
            if state == QTextToSpeech.State.Ready:
                callback()
            elif state == QTextToSpeech.State.Error:
                logger.warning("tts_engine_error", extra={"detail": self.engine.errorString()})

        self.engine.stateChanged.connect(_on_state)

    def voices(self) -> List[Voice]:
        out: List[Voice] = []
        for locale in self.engine.availableLocales():
            self.engine.setLocale(locale)
            for qvoice in self.engine.availableVoices():
                out.append(Voice(name=qvoice.name(), language_tag=locale_tag(qvoice.locale()), handle=qvoice))
        self.engine.setLocale(self._default_locale)
        self.engine.setVoice(self._default_voice)
        return out

    def speak(self, text: str, voice: Optional[Voice]) -> None:
        if voice is not None and voice.handle is not None:
            self.engine.setVoice(voice.handle)
        else:
            self.engine.setLocale(self._default_locale)
            self.engine.setVoice(self._default_voice)
        self.engine.say(text)

    def cancel(self) -> None:
        if self.engine.state() in (QTextToSpeech.State.Speaking, QTextToSpeech.State.Paused):
            self.engine.stop()
