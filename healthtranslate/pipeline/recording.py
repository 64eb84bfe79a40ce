from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional

from healthtranslate.capture.base import CaptureCapability
from healthtranslate.contracts import CaptureConfig
from healthtranslate.errors import AlreadyRecording, CaptureError, CaptureUnavailable
from healthtranslate.pipeline.accumulator import TranscriptAccumulator

logger = logging.getLogger(__name__)


class RecordingState(str, Enum):
    UNAVAILABLE = "unavailable"
    INACTIVE = "inactive"
    ACTIVE = "active"


class StopReason(str, Enum):
    REQUESTED = "requested"
    ERROR = "error"
    ENDED = "ended"


class _SessionListener:
    """Routes capability events to the controller, tagged with their session id."""

    def __init__(self, controller: "RecordingSessionController", session_id: int) -> None:
        self._controller = controller
        self._session_id = session_id

    def on_transcript(self, text: str) -> None:
        self._controller._handle_transcript(self._session_id, text)  # noqa: SLF001

    def on_error(self, reason: str) -> None:
        self._controller._handle_error(self._session_id, reason)  # noqa: SLF001

    def on_end(self) -> None:
        self._controller._handle_end(self._session_id)  # noqa: SLF001


class RecordingSessionController:
    """
    State machine around a capture capability.

      INACTIVE --start()--> ACTIVE
      ACTIVE --stop() | error | natural end--> INACTIVE

    Every ACTIVE->INACTIVE transition is reported exactly once through
    on_stopped. Events from a session that has already settled are dropped.
    """

    def __init__(
        self,
        capability: Optional[CaptureCapability],
        *,
        read_input: Callable[[], str],
        write_input: Callable[[str], None],
        on_stopped: Optional[Callable[[StopReason], None]] = None,
        on_capture_error: Optional[Callable[[CaptureError], None]] = None,
        accumulator: Optional[TranscriptAccumulator] = None,
    ) -> None:
        self.capability = capability
        self.read_input = read_input
        self.write_input = write_input
        self.on_stopped = on_stopped
        self.on_capture_error = on_capture_error
        self.accumulator = accumulator or TranscriptAccumulator()
        self.state = RecordingState.INACTIVE if capability is not None else RecordingState.UNAVAILABLE
        self._session_seq = 0
        self._live_session: Optional[int] = None

    @property
    def available(self) -> bool:
        return self.capability is not None

    @property
    def is_active(self) -> bool:
        return self.state == RecordingState.ACTIVE

    def start(self, language_tag: str) -> None:
        if self.capability is None:
            raise CaptureUnavailable()
        if self.state == RecordingState.ACTIVE:
            raise AlreadyRecording()

        self._session_seq += 1
        session_id = self._session_seq
        config = CaptureConfig(language=language_tag, continuous=True, interim_results=True)
        # May raise CaptureError (e.g. previous session still stopping); state stays INACTIVE.
        self.capability.start(config, _SessionListener(self, session_id))
        self.accumulator.begin(self.read_input())
        self._live_session = session_id
        self.state = RecordingState.ACTIVE
        logger.info("recording_started", extra={"session": session_id, "language": language_tag})

    def stop(self) -> None:
        if self.state != RecordingState.ACTIVE:
            return
        if self.capability is not None:
            self.capability.stop()
        self._settle(StopReason.REQUESTED)

    def _settle(self, reason: StopReason) -> None:
        session_id = self._live_session
        self._live_session = None
        self.state = RecordingState.INACTIVE
        self.accumulator.end()
        logger.info("recording_stopped", extra={"session": session_id, "reason": reason.value})
        if self.on_stopped is not None:
            self.on_stopped(reason)

    def _is_live(self, session_id: int) -> bool:
        return self.state == RecordingState.ACTIVE and session_id == self._live_session

    def _handle_transcript(self, session_id: int, text: str) -> None:
        if not self._is_live(session_id) or not text:
            return
        self.write_input(self.accumulator.replace(text))

    def _handle_error(self, session_id: int, reason: str) -> None:
        if not self._is_live(session_id):
            return
        logger.warning("recording_capture_error", extra={"session": session_id, "reason": reason})
        self._settle(StopReason.ERROR)
        if self.on_capture_error is not None:
            self.on_capture_error(CaptureError(reason))

    def _handle_end(self, session_id: int) -> None:
        if not self._is_live(session_id):
            return
        self._settle(StopReason.ENDED)
