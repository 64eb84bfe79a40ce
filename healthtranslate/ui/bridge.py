from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Optional, Union

from healthtranslate.capture.base import CaptureListener
from healthtranslate.contracts import Outcome


@dataclass(frozen=True)
class TranscriptEvent:
    listener: CaptureListener
    text: str


@dataclass(frozen=True)
class CaptureFailedEvent:
    listener: CaptureListener
    reason: str


@dataclass(frozen=True)
class CaptureEndedEvent:
    listener: CaptureListener


@dataclass(frozen=True)
class CompletionEvent:
    seq: int
    outcome: Outcome


BusEvent = Union[TranscriptEvent, CaptureFailedEvent, CaptureEndedEvent, CompletionEvent]


class EventBus:
    """
    Thread-safe handoff from worker threads -> UI thread.
    Workers push events. UI polls (non-blocking) and dispatches them.

    Nothing is dropped except superseded transcript snapshots: a snapshot
    pushed right behind another from the same listener replaces it, since
    each snapshot carries the whole transcript.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._items: Deque[Any] = deque()

    def push(self, event: BusEvent) -> None:
        with self._lock:
            if (
                isinstance(event, TranscriptEvent)
                and self._items
                and isinstance(self._items[-1], TranscriptEvent)
                and self._items[-1].listener is event.listener
            ):
                self._items[-1] = event
                return
            self._items.append(event)

    def pop(self) -> Optional[BusEvent]:
        with self._lock:
            if not self._items:
                return None
            return self._items.popleft()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
