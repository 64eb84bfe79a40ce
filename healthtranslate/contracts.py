from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Union


class RequestStatus(str, Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    DISCARDED = "discarded"


@dataclass
class TranslationRequest:
    seq: int
    source_text: str
    target_language_name: str
    status: RequestStatus = RequestStatus.PENDING


@dataclass(frozen=True)
class TranslationResult:
    corrected_text: str = ""
    translated_text: str = ""


@dataclass(frozen=True)
class Succeeded:
    result: TranslationResult


@dataclass(frozen=True)
class Failed:
    cause: Exception


# Normalizer / request outcome: callers must branch on the tag.
Outcome = Union[Succeeded, Failed]


@dataclass(frozen=True)
class CaptureConfig:
    language: str
    continuous: bool = True
    interim_results: bool = True


@dataclass(frozen=True)
class ASRSegment:
    text: str
    t0: float
    t1: float
    is_final: bool = True


@dataclass(frozen=True)
class AudioChunk:
    """
    Raw PCM16 audio chunk captured from a live source (e.g., microphone).
    pcm16: little-endian signed 16-bit PCM bytes (interleaved if channels > 1).
    """
    pcm16: bytes
    sample_rate: int
    channels: int
    start_time: float  # seconds since stream start
    duration: float    # seconds
