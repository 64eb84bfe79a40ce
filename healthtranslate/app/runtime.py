from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable

from healthtranslate.contracts import Failed, TranslationRequest
from healthtranslate.errors import TranslationEndpointError
from healthtranslate.nlp.translator.base import Translator
from healthtranslate.pipeline.orchestrator import run_request
from healthtranslate.ui.bridge import (
    BusEvent,
    CaptureEndedEvent,
    CaptureFailedEvent,
    CompletionEvent,
    EventBus,
    TranscriptEvent,
)


def _log_event(logger: logging.Logger | None, level: int, event: str, **fields: Any) -> None:
    if logger is None:
        return
    logger.log(level, event, extra=fields)


class ThreadDispatcher:
    """
    Runs each translation request on its own daemon thread and posts the
    outcome back on the bus. Superseded requests are left to finish; the
    orchestrator drops their replies by sequence number.
    """

    def __init__(self, translator: Translator, bus: EventBus, logger: logging.Logger | None = None) -> None:
        self.translator = translator
        self.bus = bus
        self.logger = logger

    def _work(self, req: TranslationRequest) -> None:
        t0 = time.perf_counter()
        try:
            outcome = run_request(self.translator, req)
        except Exception as e:
            # Thread boundary: anything unexpected still ends the request.
            if self.logger is not None:
                self.logger.exception("translate_worker_crash", extra={"seq": req.seq})
            outcome = Failed(TranslationEndpointError(f"{type(e).__name__}: {e}"))
        _log_event(
            self.logger,
            logging.INFO,
            "translate_worker_done",
            seq=req.seq,
            ok=not isinstance(outcome, Failed),
            ms=round((time.perf_counter() - t0) * 1000.0, 2),
        )
        self.bus.push(CompletionEvent(seq=req.seq, outcome=outcome))

    def __call__(self, req: TranslationRequest) -> None:
        threading.Thread(
            target=self._work,
            args=(req,),
            name=f"healthtranslate-translate-{req.seq}",
            daemon=True,
        ).start()


def route_event(event: BusEvent, on_completion: Callable[[CompletionEvent], None]) -> None:
    if isinstance(event, TranscriptEvent):
        event.listener.on_transcript(event.text)
    elif isinstance(event, CaptureFailedEvent):
        event.listener.on_error(event.reason)
    elif isinstance(event, CaptureEndedEvent):
        event.listener.on_end()
    elif isinstance(event, CompletionEvent):
        on_completion(event)


def drain_event_bus(bus: EventBus, on_completion: Callable[[CompletionEvent], None], max_items: int) -> int:
    drained = 0
    while drained < max_items:
        event = bus.pop()
        if event is None:
            break
        route_event(event, on_completion)
        drained += 1
    return drained
