from __future__ import annotations

import logging
import threading
from typing import Optional

from healthtranslate.asr.faster_whisper_pcm16 import FasterWhisperPCM16Transcriber
from healthtranslate.audio.mic import MicError, SoundDeviceMicSource
from healthtranslate.audio.vad import EnergyVAD
from healthtranslate.capture.base import CaptureCapability, CaptureListener
from healthtranslate.contracts import CaptureConfig
from healthtranslate.errors import CaptureError
from healthtranslate.live.live_transcribe import LiveUtteranceTranscriber
from healthtranslate.ui.bridge import CaptureEndedEvent, CaptureFailedEvent, EventBus, TranscriptEvent

logger = logging.getLogger(__name__)


class WhisperCapture(CaptureCapability):
    """
    Continuous dictation from the microphone with faster-whisper.

    A worker thread reads the mic, cuts utterances with the energy VAD and
    pushes cumulative transcript snapshots onto the event bus; the UI thread
    drains the bus and forwards events to the listener.
    """

    def __init__(
        self,
        *,
        mic: SoundDeviceMicSource,
        transcriber: FasterWhisperPCM16Transcriber,
        vad: EnergyVAD,
        bus: EventBus,
        silence_chunks: int = 2,
        min_utter_sec: float = 0.6,
        max_utter_sec: Optional[float] = None,
        interim_every_chunks: int = 2,
        idle_end_sec: Optional[float] = None,
    ) -> None:
        self.mic = mic
        self.transcriber = transcriber
        self.vad = vad
        self.bus = bus
        self.silence_chunks = int(silence_chunks)
        self.min_utter_sec = float(min_utter_sec)
        self.max_utter_sec = max_utter_sec
        self.interim_every_chunks = int(interim_every_chunks)
        self.idle_end_sec = idle_end_sec
        self._thread: Optional[threading.Thread] = None
        self._stop_event: Optional[threading.Event] = None

    @staticmethod
    def is_supported(device: Optional[int] = None) -> bool:
        return SoundDeviceMicSource.has_input_device(device)

    def start(self, config: CaptureConfig, listener: CaptureListener) -> None:
        previous = self._thread
        if previous is not None and previous.is_alive():
            # The stopped worker still holds the mic and the transcriber.
            logger.info("capture_start_refused", extra={"reason": "previous_session_stopping"})
            raise CaptureError("previous session still stopping")

        self.transcriber.set_language(config.language)
        stop_event = threading.Event()
        self._stop_event = stop_event
        self._thread = threading.Thread(
            target=self._run,
            args=(config, listener, stop_event),
            name="healthtranslate-capture-worker",
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        if self._stop_event is not None:
            self._stop_event.set()

    def _run(self, config: CaptureConfig, listener: CaptureListener, stop_event: threading.Event) -> None:
        committed: list[str] = []
        ended_naturally = False

        def _on_text(text: str, is_final: bool) -> None:
            nonlocal ended_naturally
            if stop_event.is_set():
                return
            snapshot = " ".join(committed + [text])
            if is_final:
                committed.append(text)
            if is_final or config.interim_results:
                self.bus.push(TranscriptEvent(listener=listener, text=snapshot))
            if is_final and not config.continuous:
                ended_naturally = True
                stop_event.set()

        runner = LiveUtteranceTranscriber(
            chunk_iter=self.mic.chunks(stop_event),
            transcriber=self.transcriber,
            vad=self.vad,
            on_text=_on_text,
            silence_chunks_to_finalize=self.silence_chunks,
            min_utter_sec=self.min_utter_sec,
            max_utter_sec=self.max_utter_sec,
            interim_every_chunks=self.interim_every_chunks if config.interim_results else None,
            idle_end_sec=self.idle_end_sec,
        )
        logger.info("capture_worker_start", extra={"language": config.language})

        try:
            reason = runner.run()
        except MicError as e:
            logger.warning("capture_mic_error", extra={"detail": str(e)})
            self.bus.push(CaptureFailedEvent(listener=listener, reason=str(e)))
            return
        except Exception as e:
            logger.exception("capture_worker_crash")
            self.bus.push(CaptureFailedEvent(listener=listener, reason=f"{type(e).__name__}: {e}"))
            return

        logger.info("capture_worker_stop", extra={"reason": reason, "utterances": len(committed)})
        if ended_naturally or not stop_event.is_set():
            self.bus.push(CaptureEndedEvent(listener=listener))
