from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

# English display names keyed by ISO 639-1 primary subtag.
LANGUAGE_NAMES: dict[str, str] = {
    "af": "Afrikaans",
    "ar": "Arabic",
    "bg": "Bulgarian",
    "bn": "Bangla",
    "ca": "Catalan",
    "cs": "Czech",
    "cy": "Welsh",
    "da": "Danish",
    "de": "German",
    "el": "Greek",
    "en": "English",
    "es": "Spanish",
    "et": "Estonian",
    "fa": "Persian",
    "fi": "Finnish",
    "fil": "Filipino",
    "fr": "French",
    "gu": "Gujarati",
    "he": "Hebrew",
    "hi": "Hindi",
    "hr": "Croatian",
    "ht": "Haitian Creole",
    "hu": "Hungarian",
    "id": "Indonesian",
    "it": "Italian",
    "ja": "Japanese",
    "kn": "Kannada",
    "ko": "Korean",
    "lt": "Lithuanian",
    "lv": "Latvian",
    "ml": "Malayalam",
    "mr": "Marathi",
    "ms": "Malay",
    "nb": "Norwegian Bokmål",
    "nl": "Dutch",
    "pa": "Punjabi",
    "pl": "Polish",
    "pt": "Portuguese",
    "ro": "Romanian",
    "ru": "Russian",
    "sk": "Slovak",
    "sl": "Slovenian",
    "so": "Somali",
    "sr": "Serbian",
    "sv": "Swedish",
    "sw": "Swahili",
    "ta": "Tamil",
    "te": "Telugu",
    "th": "Thai",
    "tl": "Tagalog",
    "tr": "Turkish",
    "uk": "Ukrainian",
    "ur": "Urdu",
    "vi": "Vietnamese",
    "zh": "Chinese",
}


def primary_subtag(tag: str) -> str:
    return (tag or "").replace("_", "-").split("-")[0].lower()


def language_name(tag: str) -> str:
    """'es-ES' -> 'Spanish'. Unknown codes fall back to the tag itself."""
    return LANGUAGE_NAMES.get(primary_subtag(tag), tag)


def language_options(tags: Iterable[str]) -> List[Tuple[str, str]]:
    unique = sorted({t for t in tags if t})
    options = []
    for tag in unique:
        name = LANGUAGE_NAMES.get(primary_subtag(tag))
        options.append((tag, f"{name} ({tag})" if name else tag))
    return sorted(options, key=lambda opt: opt[1])


def pick_default(tags: Sequence[str], current: Optional[str], prefix: str) -> Optional[str]:
    """Keep `current` if offered, else the first tag starting with `prefix`, else the first tag."""
    if not tags:
        return current
    if current in tags:
        return current
    for tag in tags:
        if tag.startswith(prefix):
            return tag
    return tags[0]
