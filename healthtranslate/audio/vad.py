from __future__ import annotations

import math
from array import array


def pcm16_rms(pcm16: bytes) -> float:
    """Return RMS energy for little-endian int16 PCM bytes."""
    samples = array("h")
    samples.frombytes(pcm16[: len(pcm16) - (len(pcm16) % 2)])
    if not samples:
        return 0.0
    return math.sqrt(sum(float(v) * float(v) for v in samples) / len(samples))


class EnergyVAD:
    def __init__(self, rms_threshold: float = 250.0) -> None:
        if rms_threshold < 0:
            raise ValueError("rms_threshold must be >= 0")
        self.rms_threshold = float(rms_threshold)

    def is_speech(self, pcm16: bytes) -> bool:
        return pcm16_rms(pcm16) >= self.rms_threshold


class SilenceClock:
    """
    Seconds of audio since speech was last heard. Drives the capture's
    natural end: a session with no speech for `idle_end_sec` ends itself.
    """

    def __init__(self, idle_end_sec: float | None) -> None:
        if idle_end_sec is not None and idle_end_sec <= 0:
            raise ValueError("idle_end_sec must be > 0 when set")
        self.idle_end_sec = idle_end_sec
        self.silent_sec = 0.0

    def update(self, is_speech: bool, duration: float) -> None:
        self.silent_sec = 0.0 if is_speech else self.silent_sec + float(duration)

    @property
    def expired(self) -> bool:
        return self.idle_end_sec is not None and self.silent_sec >= self.idle_end_sec
