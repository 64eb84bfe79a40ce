from __future__ import annotations

from dataclasses import dataclass


def compose_input(base_text: str, snapshot: str) -> str:
    prefix = f"{base_text} " if base_text else ""
    return f"{prefix}{snapshot}"


@dataclass
class UtteranceSession:
    base_text: str = ""
    live_transcript: str = ""
    is_active: bool = False

    @property
    def displayed_input(self) -> str:
        return compose_input(self.base_text, self.live_transcript)


class TranscriptAccumulator:
    """
    Merge the capture's cumulative transcript with the text that was already
    in the input box when recording began.

    Each snapshot replaces the previous one; the capture reports the whole
    transcript per event, never deltas.
    """

    def __init__(self) -> None:
        self.session = UtteranceSession()

    def begin(self, base_text: str) -> None:
        self.session = UtteranceSession(base_text=base_text or "", is_active=True)

    def replace(self, snapshot: str) -> str:
        self.session.live_transcript = snapshot
        return self.session.displayed_input

    def end(self) -> None:
        self.session.is_active = False

    @property
    def displayed_input(self) -> str:
        return self.session.displayed_input
