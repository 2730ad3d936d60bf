"""Language code <-> display name lookup used by the translation spreadsheet."""

from typing import Dict, Mapping, Optional

LANGUAGE_NAMES: Dict[str, str] = {
    "af": "Afrikaans",
    "am": "Amharic",
    "ar": "Arabic",
    "bn": "Bengali",
    "de": "German",
    "el": "Greek",
    "en": "English",
    "es": "Spanish",
    "fa": "Persian",
    "fr": "French",
    "ha": "Hausa",
    "hi": "Hindi",
    "id": "Indonesian",
    "it": "Italian",
    "ja": "Japanese",
    "km": "Khmer",
    "ko": "Korean",
    "lo": "Lao",
    "mg": "Malagasy",
    "ms": "Malay",
    "my": "Burmese",
    "ne": "Nepali",
    "nl": "Dutch",
    "pt": "Portuguese",
    "ru": "Russian",
    "rw": "Kinyarwanda",
    "so": "Somali",
    "sw": "Swahili",
    "th": "Thai",
    "tl": "Tagalog",
    "tr": "Turkish",
    "uk": "Ukrainian",
    "ur": "Urdu",
    "vi": "Vietnamese",
    "yo": "Yoruba",
    "zh": "Chinese",
    "zu": "Zulu",
}


def _names(overrides: Optional[Mapping[str, str]]) -> Dict[str, str]:
    if not overrides:
        return LANGUAGE_NAMES
    return {**LANGUAGE_NAMES, **overrides}


def language_name(code: str, overrides: Optional[Mapping[str, str]] = None) -> str:
    """Display name of a language code; unknown codes are their own name."""
    return _names(overrides).get(code, code)


def language_code(name: str, overrides: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """
    Inverse of language_name(), case-insensitive.

    A bare code is accepted too, so spreadsheets written with codes as
    headers still map back.
    """
    wanted = name.strip().lower()
    names = _names(overrides)
    for code, display in names.items():
        if display.lower() == wanted:
            return code
    if wanted in names:
        return wanted
    return None
