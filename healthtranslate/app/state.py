from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class StatusState(str, Enum):
    IDLE = "idle"
    RECORDING = "recording"
    TRANSLATING = "translating"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class StatusTracker:
    """Transient status indicator shown under the translation panel."""

    state: StatusState = StatusState.IDLE
    last_error: str | None = None

    def set_recording(self) -> None:
        self.state = StatusState.RECORDING
        self.last_error = None

    def set_translating(self) -> None:
        self.state = StatusState.TRANSLATING
        self.last_error = None

    def set_succeeded(self) -> None:
        if self.state == StatusState.TRANSLATING:
            self.state = StatusState.SUCCEEDED

    def set_failed(self, detail: str) -> None:
        self.state = StatusState.FAILED
        self.last_error = detail

    def set_idle(self) -> None:
        if self.state == StatusState.RECORDING:
            self.state = StatusState.IDLE
