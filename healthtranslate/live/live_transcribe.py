from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional, Protocol

from healthtranslate.audio.vad import EnergyVAD, SilenceClock, pcm16_rms
from healthtranslate.contracts import ASRSegment, AudioChunk

logger = logging.getLogger(__name__)


class UtteranceTranscriber(Protocol):
    def transcribe_utterance(
        self, pcm16: bytes, sample_rate: int, channels: int, utter_t0: float
    ) -> list[ASRSegment]:
        ...


def _duration_from_pcm16(pcm16_len: int, sample_rate: int, channels: int) -> float:
    bytes_per_second = sample_rate * channels * 2
    if bytes_per_second <= 0:
        return 0.0
    return pcm16_len / float(bytes_per_second)


class LiveUtteranceTranscriber:
    """
    Cut a chunk stream into utterances with an energy VAD and transcribe
    each one. on_text(text, is_final) receives the utterance text: interim
    passes over the still-growing utterance (is_final=False) and one final
    pass when it closes.

    run() returns why it stopped: "stream_end" or "idle" (no speech for
    idle_end_sec).
    """

    def __init__(
        self,
        *,
        chunk_iter: Iterable[AudioChunk],
        transcriber: UtteranceTranscriber,
        vad: EnergyVAD,
        on_text: Callable[[str, bool], None],
        silence_chunks_to_finalize: int = 2,
        min_utter_sec: float = 0.6,
        max_utter_sec: float | None = None,
        interim_every_chunks: int | None = None,
        idle_end_sec: float | None = None,
    ) -> None:
        if silence_chunks_to_finalize <= 0:
            raise ValueError("silence_chunks_to_finalize must be > 0")
        if min_utter_sec < 0:
            raise ValueError("min_utter_sec must be >= 0")
        if max_utter_sec is not None and max_utter_sec <= 0:
            raise ValueError("max_utter_sec must be > 0 when set")
        if interim_every_chunks is not None and interim_every_chunks <= 0:
            raise ValueError("interim_every_chunks must be > 0 when set")

        self.chunk_iter = chunk_iter
        self.transcriber = transcriber
        self.vad = vad
        self.on_text = on_text
        self.silence_chunks_to_finalize = int(silence_chunks_to_finalize)
        self.min_utter_sec = float(min_utter_sec)
        self.max_utter_sec = float(max_utter_sec) if max_utter_sec is not None else None
        self.interim_every_chunks = interim_every_chunks
        self.clock = SilenceClock(idle_end_sec)

    def _transcribe(self, parts: list[bytes], sr: int, ch: int, t0: float, *, final: bool, reason: str) -> None:
        pcm16 = b"".join(parts)
        utter_sec = _duration_from_pcm16(len(pcm16), sr, ch)
        if final and utter_sec < self.min_utter_sec:
            logger.debug("utterance_skipped_short", extra={"reason": reason, "t0": t0, "dur": round(utter_sec, 2)})
            return

        segments = self.transcriber.transcribe_utterance(pcm16, sample_rate=sr, channels=ch, utter_t0=t0)
        text = " ".join((seg.text or "").strip() for seg in segments).strip()
        logger.debug(
            "utterance_transcribed",
            extra={"reason": reason, "final": final, "t0": t0, "dur": round(utter_sec, 2), "segments": len(segments)},
        )
        if text:
            self.on_text(text, final)

    def run(self) -> str:
        parts: list[bytes] = []
        utter_t0 = 0.0
        utter_sr = 0
        utter_ch = 0
        trailing_silence = 0
        speech_chunks = 0

        for chunk in self.chunk_iter:
            is_speech = self.vad.is_speech(chunk.pcm16)
            self.clock.update(is_speech, chunk.duration)
            logger.debug(
                "chunk",
                extra={"t0": chunk.start_time, "rms": round(pcm16_rms(chunk.pcm16), 1), "speech": is_speech},
            )

            if is_speech:
                if not parts:
                    utter_t0 = float(chunk.start_time)
                    utter_sr = int(chunk.sample_rate)
                    utter_ch = int(chunk.channels)
                    speech_chunks = 0
                parts.append(chunk.pcm16)
                speech_chunks += 1
                trailing_silence = 0

                utter_sec = _duration_from_pcm16(sum(len(p) for p in parts), utter_sr, utter_ch)
                if self.max_utter_sec is not None and utter_sec >= self.max_utter_sec:
                    self._transcribe(parts, utter_sr, utter_ch, utter_t0, final=True, reason="max_utter_sec")
                    parts = []
                elif self.interim_every_chunks and speech_chunks % self.interim_every_chunks == 0:
                    self._transcribe(parts, utter_sr, utter_ch, utter_t0, final=False, reason="interim")
                continue

            if parts:
                trailing_silence += 1
                if trailing_silence >= self.silence_chunks_to_finalize:
                    self._transcribe(parts, utter_sr, utter_ch, utter_t0, final=True, reason="silence")
                    parts = []
                    trailing_silence = 0

            if not parts and self.clock.expired:
                return "idle"

        if parts:
            self._transcribe(parts, utter_sr, utter_ch, utter_t0, final=True, reason="stream_end")
        return "stream_end"
