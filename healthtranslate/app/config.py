from __future__ import annotations

import argparse
import copy
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir

from healthtranslate.nlp.translator.openrouter import DEFAULT_BASE_URL, DEFAULT_MODEL

APP_NAME = "HealthTranslate"

DEFAULTS: dict[str, Any] = {
    "list_devices": False,
    "device": None,
    "sr": 16000,
    "channels": 1,
    "chunk_sec": 0.5,
    "rms_th": 250.0,
    "silence_chunks": 2,
    "min_utter_sec": 0.6,
    "max_utter_sec": 12.0,
    "interim_every_chunks": 2,
    "idle_end_sec": 8.0,
    "model": "base",
    "source_language": "en-US",
    "target_language": "es-ES",
    "translator": "openrouter",
    "llm_model": DEFAULT_MODEL,
    "llm_base_url": DEFAULT_BASE_URL,
    "llm_timeout_sec": 60.0,
    "poll_ms": 50,
    "max_updates_per_tick": 20,
    "max_input_chars": 2000,
    "debug": False,
}
CONFIG_KEYS: tuple[str, ...] = tuple(DEFAULTS.keys())


@dataclass(frozen=True)
class AppPaths:
    config_dir: Path
    config_path: Path


def app_paths() -> AppPaths:
    config_dir = Path(user_config_dir(APP_NAME, APP_NAME))
    return AppPaths(config_dir=config_dir, config_path=config_dir / "config.json")


def _load_json_dict(path: Path) -> dict[str, Any]:
    # Accept UTF-8 with or without BOM for Windows-edited config files.
    with path.open("r", encoding="utf-8-sig") as f:
        loaded = json.load(f)
    if not isinstance(loaded, dict):
        raise ValueError(f"config must be a JSON object: {path}")
    return loaded


def _write_json_dict(path: Path, payload: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)
        f.write("\n")


def _known_only(payload: dict[str, Any]) -> dict[str, Any]:
    return {key: payload[key] for key in CONFIG_KEYS if key in payload}


def load_default_config() -> dict[str, Any]:
    return copy.deepcopy(DEFAULTS)


def ensure_user_config_exists(defaults: dict[str, Any] | None = None) -> Path:
    paths = app_paths()
    if paths.config_path.exists():
        return paths.config_path
    _write_json_dict(paths.config_path, defaults or load_default_config())
    return paths.config_path


def load_user_config(config_path: str | None = None) -> tuple[dict[str, Any], Path]:
    defaults = load_default_config()
    if config_path:
        chosen = Path(config_path)
        if not chosen.exists():
            raise SystemExit(f"Config file not found: {chosen}")
    else:
        chosen = ensure_user_config_exists(defaults)
    merged = dict(defaults)
    merged.update(_known_only(_load_json_dict(chosen)))
    return merged, chosen


def save_user_config(values: dict[str, Any], config_path: str | None = None) -> Path:
    """Merge known keys into the config file. The API key is never written here."""
    if config_path:
        path = Path(config_path)
        existing = _known_only(_load_json_dict(path)) if path.exists() else {}
    else:
        path = ensure_user_config_exists()
        existing = _known_only(_load_json_dict(path))
    merged = load_default_config()
    merged.update(existing)
    merged.update(_known_only(values))
    _write_json_dict(path, merged)
    return path


def parser_with_defaults(defaults: dict[str, Any]) -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="healthtranslate")
    p.add_argument("--config", default=None, help="JSON config path (CLI flags override config)")
    p.add_argument("--list-devices", action="store_true", help="print audio devices and exit")
    p.add_argument("--device", type=int, default=defaults["device"], help="sounddevice input device id")
    p.add_argument("--sr", type=int, default=defaults["sr"], help="sample rate (Hz)")
    p.add_argument("--channels", type=int, default=defaults["channels"], help="input channels")
    p.add_argument("--chunk-sec", type=float, default=defaults["chunk_sec"], help="mic chunk size in seconds")
    p.add_argument("--rms-th", type=float, default=defaults["rms_th"], help="RMS threshold for speech VAD")
    p.add_argument(
        "--silence-chunks",
        type=int,
        default=defaults["silence_chunks"],
        help="close an utterance after this many non-speech chunks",
    )
    p.add_argument(
        "--min-utter-sec",
        type=float,
        default=defaults["min_utter_sec"],
        help="ignore utterances shorter than this",
    )
    p.add_argument(
        "--max-utter-sec",
        type=float,
        default=defaults["max_utter_sec"],
        help="force an utterance to close while continuously speaking (seconds)",
    )
    p.add_argument(
        "--interim-every-chunks",
        type=int,
        default=defaults["interim_every_chunks"],
        help="re-transcribe the open utterance every N speech chunks for live text",
    )
    p.add_argument(
        "--idle-end-sec",
        type=float,
        default=defaults["idle_end_sec"],
        help="end dictation on its own after this much silence",
    )
    p.add_argument("--model", default=defaults["model"], help="faster-whisper model size")
    p.add_argument("--source-language", default=defaults["source_language"], help="dictation language tag")
    p.add_argument("--target-language", default=defaults["target_language"], help="translation language tag")
    p.add_argument(
        "--translator",
        default=defaults["translator"],
        choices=["openrouter", "stub"],
        help="completion backend",
    )
    p.add_argument("--llm-model", default=defaults["llm_model"], help="chat completion model id")
    p.add_argument("--llm-base-url", default=defaults["llm_base_url"], help="OpenAI-compatible API base URL")
    p.add_argument(
        "--llm-timeout-sec",
        type=float,
        default=defaults["llm_timeout_sec"],
        help="HTTP timeout for one completion call",
    )
    p.add_argument("--poll-ms", type=int, default=defaults["poll_ms"], help="UI event poll interval (ms)")
    p.add_argument(
        "--max-updates-per-tick",
        type=int,
        default=defaults["max_updates_per_tick"],
        help="max bus events to apply per UI timer tick",
    )
    p.add_argument(
        "--max-input-chars",
        type=int,
        default=defaults["max_input_chars"],
        help="character budget shown under the input box",
    )
    p.add_argument("--debug", action="store_true", help="log chunk RMS and speech decisions")
    return p


def resolve_args(argv: list[str] | None = None) -> argparse.Namespace:
    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument("--config", default=None)
    pre_args, _ = pre.parse_known_args(argv)
    defaults, _ = load_user_config(config_path=pre_args.config)
    args = parser_with_defaults(defaults).parse_args(argv)
    if defaults.get("list_devices"):
        args.list_devices = True
    if defaults.get("debug"):
        args.debug = True
    return args
