from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Protocol

from healthtranslate.contracts import CaptureConfig


class CaptureListener(Protocol):
    def on_transcript(self, text: str) -> None:
        """Full cumulative transcript for the session so far."""
        ...

    def on_error(self, reason: str) -> None:
        ...

    def on_end(self) -> None:
        ...


class CaptureCapability(ABC):
    """
    Continuous speech-to-text producer. After start() it reports transcript
    snapshots to the listener until stop() is called, it errors out, or it
    ends on its own (e.g. long silence).

    start() raises CaptureError while a previously stopped session has not
    yet released its resources.
    """

    @abstractmethod
    def start(self, config: CaptureConfig, listener: CaptureListener) -> None: ...

    @abstractmethod
    def stop(self) -> None: ...
