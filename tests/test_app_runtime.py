from __future__ import annotations

import time

from healthtranslate.app.runtime import ThreadDispatcher, drain_event_bus
from healthtranslate.contracts import Failed, Succeeded, TranslationRequest, TranslationResult
from healthtranslate.errors import TranslationEndpointError
from healthtranslate.nlp.translator.base import Translator
from healthtranslate.nlp.translator.stub import StubTranslator
from healthtranslate.ui.bridge import (
    CaptureEndedEvent,
    CaptureFailedEvent,
    CompletionEvent,
    EventBus,
    TranscriptEvent,
)


class _Listener:
    def __init__(self) -> None:
        self.events: list[tuple] = []

    def on_transcript(self, text: str) -> None:
        self.events.append(("transcript", text))

    def on_error(self, reason: str) -> None:
        self.events.append(("error", reason))

    def on_end(self) -> None:
        self.events.append(("end",))


def _wait_for(bus: EventBus, count: int, timeout: float = 5.0) -> None:
    deadline = time.monotonic() + timeout
    while len(bus) < count and time.monotonic() < deadline:
        time.sleep(0.01)


def test_bus_coalesces_back_to_back_snapshots() -> None:
    bus = EventBus()
    listener = _Listener()
    bus.push(TranscriptEvent(listener, "the"))
    bus.push(TranscriptEvent(listener, "the patient"))
    bus.push(CaptureEndedEvent(listener))
    bus.push(TranscriptEvent(listener, "late"))
    assert len(bus) == 3

    drained = drain_event_bus(bus, lambda e: None, max_items=10)
    assert drained == 3
    assert listener.events == [("transcript", "the patient"), ("end",), ("transcript", "late")]


def test_bus_keeps_snapshots_from_different_listeners() -> None:
    bus = EventBus()
    a, b = _Listener(), _Listener()
    bus.push(TranscriptEvent(a, "one"))
    bus.push(TranscriptEvent(b, "two"))
    assert len(bus) == 2


def test_drain_respects_max_items_and_routes_completions() -> None:
    bus = EventBus()
    listener = _Listener()
    completions: list[CompletionEvent] = []
    bus.push(CaptureFailedEvent(listener, "mic unplugged"))
    bus.push(CompletionEvent(1, Succeeded(TranslationResult())))
    bus.push(CompletionEvent(2, Succeeded(TranslationResult())))

    assert drain_event_bus(bus, completions.append, max_items=2) == 2
    assert listener.events == [("error", "mic unplugged")]
    assert [c.seq for c in completions] == [1]
    assert bus.pop() is not None
    assert bus.pop() is None


def test_thread_dispatcher_posts_completion() -> None:
    bus = EventBus()
    dispatch = ThreadDispatcher(StubTranslator(), bus)
    dispatch(TranslationRequest(seq=7, source_text="fever", target_language_name="Spanish"))
    _wait_for(bus, 1)

    event = bus.pop()
    assert isinstance(event, CompletionEvent)
    assert event.seq == 7
    assert isinstance(event.outcome, Succeeded)
    assert event.outcome.result.translated_text == "[Spanish] fever"


class _CrashingTranslator(Translator):
    @property
    def name(self) -> str:
        return "crash"

    def translate(self, req: TranslationRequest):
        raise KeyError("unexpected")


def test_thread_dispatcher_converts_crash_to_failure() -> None:
    bus = EventBus()
    ThreadDispatcher(_CrashingTranslator(), bus)(TranslationRequest(1, "x", "Spanish"))
    _wait_for(bus, 1)

    event = bus.pop()
    assert isinstance(event, CompletionEvent)
    assert isinstance(event.outcome, Failed)
    assert isinstance(event.outcome.cause, TranslationEndpointError)
