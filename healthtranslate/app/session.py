from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from healthtranslate.app.diagnostics import hint_for_error, summarize_exception
from healthtranslate.app.state import StatusState, StatusTracker
from healthtranslate.capture.base import CaptureCapability
from healthtranslate.contracts import RequestStatus, TranslationRequest, TranslationResult
from healthtranslate.errors import AlreadyRecording, CaptureError, CaptureUnavailable, HealthTranslateError
from healthtranslate.languages import language_name, pick_default
from healthtranslate.pipeline.orchestrator import Dispatch, TranslationOrchestrator
from healthtranslate.pipeline.recording import RecordingSessionController, StopReason
from healthtranslate.speech.playback import PlaybackTrigger
from healthtranslate.ui.bridge import CompletionEvent

logger = logging.getLogger(__name__)


class TranslatorSession:
    """
    UI-facing state for one window: input text, selected languages, the
    displayed translation and the status line, wired to the recording
    controller, the request orchestrator and playback.

    Qt-free; the window calls these methods and re-renders on on_change.
    """

    def __init__(
        self,
        *,
        capture: Optional[CaptureCapability],
        dispatch: Dispatch,
        playback: PlaybackTrigger,
        source_language: str = "en-US",
        target_language: str = "es-ES",
        max_input_chars: int = 2000,
        on_change: Optional[Callable[[], None]] = None,
    ) -> None:
        self.input_text = ""
        self.corrected_text = ""
        self.translated_text = ""
        self.source_language = source_language
        self.target_language = target_language
        self.max_input_chars = int(max_input_chars)
        self.status = StatusTracker()
        self.last_hint: str | None = None
        self.on_change = on_change
        self.playback = playback

        self.recorder = RecordingSessionController(
            capture,
            read_input=lambda: self.input_text,
            write_input=self._write_input,
            on_stopped=self._on_recording_stopped,
            on_capture_error=self._on_capture_error,
        )
        self.orchestrator = TranslationOrchestrator(
            dispatch,
            read_input=lambda: self.input_text,
            target_language_name=lambda: language_name(self.target_language),
            on_result=self._on_result,
            on_failed=self._on_failed,
        )

    # -- queries ---------------------------------------------------------

    @property
    def can_record(self) -> bool:
        return self.recorder.available

    @property
    def is_recording(self) -> bool:
        return self.recorder.is_active

    @property
    def is_loading(self) -> bool:
        return self.orchestrator.is_loading

    @property
    def can_translate(self) -> bool:
        return bool(self.input_text) and not self.is_loading

    @property
    def char_count_text(self) -> str:
        return f"{len(self.input_text)}/{self.max_input_chars}"

    @property
    def corrected_caption(self) -> str:
        """Shown above the translation when the model changed the source text."""
        if not self.corrected_text or self.corrected_text.strip() == self.input_text.strip():
            return ""
        return f"Corrected: {self.corrected_text}"

    # -- commands --------------------------------------------------------

    def set_input_text(self, text: str) -> None:
        self.input_text = text or ""
        self._notify()

    def set_source_language(self, tag: str) -> None:
        self.source_language = tag
        self._notify()

    def set_target_language(self, tag: str) -> None:
        self.target_language = tag
        self._notify()

    def apply_language_catalog(self, tags: Sequence[str]) -> None:
        """Keep the selected languages valid once the voice catalog is known."""
        self.source_language = pick_default(tags, self.source_language, "en") or self.source_language
        self.target_language = pick_default(tags, self.target_language, "es") or self.target_language
        self._notify()

    def start_recording(self) -> None:
        self.recorder.start(self.source_language)
        self.status.set_recording()
        self._notify()

    def stop_recording(self) -> None:
        self.recorder.stop()

    def toggle_recording(self) -> bool:
        """Mic button. Returns False when dictation could not start."""
        if self.recorder.is_active:
            self.stop_recording()
            return True
        try:
            self.start_recording()
        except (CaptureUnavailable, AlreadyRecording, CaptureError) as e:
            self._report(e)
            return False
        return True

    def translate(self) -> Optional[TranslationRequest]:
        req = self.orchestrator.submit()
        if req is not None:
            self.status.set_translating()
            self._notify()
        return req

    def speak(self) -> None:
        self.playback.speak(self.translated_text, self.target_language)

    def handle_completion(self, event: CompletionEvent) -> RequestStatus:
        status = self.orchestrator.complete(event.seq, event.outcome)
        if status == RequestStatus.SUCCEEDED:
            self.status.set_succeeded()
        if status != RequestStatus.DISCARDED:
            self._notify()
        return status

    # -- callbacks -------------------------------------------------------

    def _write_input(self, text: str) -> None:
        self.input_text = text
        self._notify()

    def _on_recording_stopped(self, reason: StopReason) -> None:
        self.status.set_idle()
        if self.orchestrator.observe_recording_stopped(reason) is not None:
            self.status.set_translating()
        self._notify()

    def _on_capture_error(self, err: CaptureError) -> None:
        self._report(err)

    def _on_result(self, result: TranslationResult) -> None:
        self.corrected_text = result.corrected_text
        self.translated_text = result.translated_text
        self.last_hint = None

    def _on_failed(self, err: HealthTranslateError) -> None:
        self._report(err)

    def _report(self, err: HealthTranslateError) -> None:
        summary = summarize_exception(str(err))
        self.last_hint = hint_for_error(err)
        # A translation kicked off by the stop transition keeps its own status.
        if self.status.state != StatusState.TRANSLATING or not self.is_loading:
            self.status.set_failed(summary)
        logger.info("status_error", extra={"error_type": type(err).__name__, "detail": summary})
        self._notify()

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change()
