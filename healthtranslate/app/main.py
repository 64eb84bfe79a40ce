from __future__ import annotations

import signal
import sys

from dotenv import load_dotenv

from healthtranslate.app.config import resolve_args
from healthtranslate.app.logging_setup import setup_app_logger
from healthtranslate.app.runtime import drain_event_bus
from healthtranslate.app.services import build_app_services
from healthtranslate.app.session import TranslatorSession
from healthtranslate.audio.mic import SoundDeviceMicSource
from healthtranslate.languages import language_options
from healthtranslate.speech.playback import PlaybackTrigger


def main(argv: list[str] | None = None) -> int:
    load_dotenv()  # OPENROUTER_API_KEY may live in .env; read per request, not here
    args = resolve_args(argv)
    logger, _log_dir, log_path = setup_app_logger(debug=bool(args.debug))
    logger.info("app_start", extra={"config_path": str(getattr(args, "config", "")), "argv": argv or []})

    if args.list_devices:
        print(SoundDeviceMicSource.list_devices())
        return 0

    from PyQt6 import QtCore, QtWidgets
    from healthtranslate.app.main_window_qt import MainWindow
    from healthtranslate.speech.tts_qt import QtSpeechSynthesis

    app = QtWidgets.QApplication(sys.argv)
    services = build_app_services(args, logger=logger)
    if services.capture is None:
        logger.warning("capture_unavailable", extra={"device": args.device})

    synth = QtSpeechSynthesis()
    playback = PlaybackTrigger(synth)
    window = MainWindow()

    session = TranslatorSession(
        capture=services.capture,
        dispatch=services.dispatch,
        playback=playback,
        source_language=str(args.source_language),
        target_language=str(args.target_language),
        max_input_chars=int(args.max_input_chars),
        on_change=lambda: window.render(session),
    )

    def _show_languages() -> None:
        tags = playback.language_tags
        window.set_language_options(language_options(tags))
        session.apply_language_catalog(tags)

    def _on_engine_ready() -> None:
        playback.refresh_voices()
        _show_languages()

    # PlaybackTrigger already read the catalog once; re-read only when the engine reports ready.
    synth.on_ready(_on_engine_ready)
    _show_languages()

    window.record_requested.connect(session.toggle_recording)
    window.translate_requested.connect(session.translate)
    window.speak_requested.connect(session.speak)
    window.input_edited.connect(session.set_input_text)
    window.source_language_changed.connect(session.set_source_language)
    window.target_language_changed.connect(session.set_target_language)

    timer = QtCore.QTimer()
    timer.timeout.connect(
        lambda: drain_event_bus(
            services.bus,
            session.handle_completion,
            max(1, int(args.max_updates_per_tick)),
        )
    )
    timer.start(max(10, int(args.poll_ms)))

    def _on_about_to_quit() -> None:
        logger.info("app_quit")
        session.stop_recording()
        synth.cancel()

    app.aboutToQuit.connect(_on_about_to_quit)
    signal.signal(signal.SIGINT, lambda *_: app.quit())

    window.render(session)
    window.show()

    print("HealthTranslate ready. Press Dictate to speak, or type and press Translate.")
    print(f"Logs: {log_path}")
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
