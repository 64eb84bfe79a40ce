from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from healthtranslate.app.runtime import ThreadDispatcher
from healthtranslate.asr.faster_whisper_pcm16 import FasterWhisperPCM16Transcriber, whisper_language
from healthtranslate.audio.mic import SoundDeviceMicSource
from healthtranslate.audio.vad import EnergyVAD
from healthtranslate.capture.whisper_capture import WhisperCapture
from healthtranslate.nlp.translator.base import Translator
from healthtranslate.nlp.translator.factory import get_translator
from healthtranslate.ui.bridge import EventBus


@dataclass(frozen=True)
class AppServices:
    bus: EventBus
    capture: Optional[WhisperCapture]
    translator: Translator
    dispatch: ThreadDispatcher


def build_capture(args: Any, bus: EventBus) -> Optional[WhisperCapture]:
    """None when this machine has no usable microphone; dictation is then disabled."""
    if not WhisperCapture.is_supported(args.device):
        return None
    mic = SoundDeviceMicSource(
        chunk_seconds=float(args.chunk_sec),
        sample_rate=int(args.sr),
        channels=int(args.channels),
        device=args.device,
    )
    transcriber = FasterWhisperPCM16Transcriber(
        model_size=str(args.model),
        language=whisper_language(str(args.source_language)),
    )
    return WhisperCapture(
        mic=mic,
        transcriber=transcriber,
        vad=EnergyVAD(rms_threshold=float(args.rms_th)),
        bus=bus,
        silence_chunks=max(1, int(args.silence_chunks)),
        min_utter_sec=max(0.0, float(args.min_utter_sec)),
        max_utter_sec=None if args.max_utter_sec is None else float(args.max_utter_sec),
        interim_every_chunks=max(1, int(args.interim_every_chunks)),
        idle_end_sec=None if args.idle_end_sec is None else float(args.idle_end_sec),
    )


def build_app_services(args: Any, logger: logging.Logger | None = None) -> AppServices:
    bus = EventBus()
    translator = get_translator(
        str(args.translator),
        model=str(args.llm_model),
        base_url=str(args.llm_base_url),
        timeout_sec=None if args.llm_timeout_sec is None else float(args.llm_timeout_sec),
    )
    return AppServices(
        bus=bus,
        capture=build_capture(args, bus),
        translator=translator,
        dispatch=ThreadDispatcher(translator, bus, logger=logger),
    )
