from __future__ import annotations

import os
import tempfile
import wave
from typing import List, Optional

from healthtranslate.contracts import ASRSegment
from healthtranslate.languages import primary_subtag

_WHISPER_SR = 16000

# Nudges the decoder toward clinical vocabulary; the LLM step still corrects.
MEDICAL_PROMPT = "Clinical conversation between a clinician and a patient about symptoms, medications and dosages."


def _write_pcm16_wav(path: str, pcm16: bytes, sample_rate: int, channels: int) -> None:
    with wave.open(path, "wb") as wf:
        wf.setnchannels(channels)
        wf.setsampwidth(2)
        wf.setframerate(sample_rate)
        wf.writeframes(pcm16)


def _pcm16_to_float32(pcm16: bytes, channels: int):
    import numpy as np

    audio = np.frombuffer(pcm16, dtype=np.int16).astype(np.float32) / 32768.0
    if channels > 1:
        audio = audio.reshape(-1, channels).mean(axis=1)
    return audio


def whisper_language(tag: Optional[str]) -> Optional[str]:
    """'en-US' -> 'en'; None/'' means auto-detect."""
    code = primary_subtag(tag or "")
    return code or None


class FasterWhisperPCM16Transcriber:
    def __init__(
        self,
        *,
        model_size: str = "base",
        device: str = "cpu",
        compute_type: str = "int8",
        language: Optional[str] = "en",
        beam_size: int = 1,
        initial_prompt: Optional[str] = MEDICAL_PROMPT,
    ) -> None:
        self.model_size = model_size
        self.device = device
        self.compute_type = compute_type
        self.language = language
        self.beam_size = beam_size
        self.initial_prompt = initial_prompt
        self._model = None

    def set_language(self, language_tag: Optional[str]) -> None:
        self.language = whisper_language(language_tag)

    def _get_model(self):
        if self._model is None:
            from faster_whisper import WhisperModel

            self._model = WhisperModel(
                self.model_size,
                device=self.device,
                compute_type=self.compute_type,
            )
        return self._model

    def _run(self, audio) -> List[tuple[float, float, str]]:
        segments, _info = self._get_model().transcribe(
            audio,
            language=self.language,
            beam_size=self.beam_size,
            vad_filter=False,
            condition_on_previous_text=False,
            initial_prompt=self.initial_prompt,
        )
        return [(float(s.start), float(s.end), (s.text or "").strip()) for s in segments]

    def transcribe_utterance(
        self,
        pcm16: bytes,
        sample_rate: int,
        channels: int,
        utter_t0: float,
    ) -> List[ASRSegment]:
        if not pcm16:
            return []

        if sample_rate == _WHISPER_SR:
            raw = self._run(_pcm16_to_float32(pcm16, channels))
        else:
            # Let faster-whisper decode and resample other rates from a file.
            fd, tmp_path = tempfile.mkstemp(suffix=".wav", prefix="healthtranslate_utter_")
            os.close(fd)
            try:
                _write_pcm16_wav(tmp_path, pcm16, sample_rate=sample_rate, channels=channels)
                raw = self._run(tmp_path)
            finally:
                try:
                    os.remove(tmp_path)
                except OSError:
                    pass

        return [
            ASRSegment(text=text, t0=utter_t0 + start, t1=utter_t0 + end, is_final=True)
            for start, end, text in raw
            if text
        ]
