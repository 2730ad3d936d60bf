from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

import yaml

from qesm.model import Mode


class ConfigError(ValueError):
    """Raised when a settings file has the wrong shape."""
    pass


def _env_str(key: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(key)
    if v is None:
        return default
    v = v.strip()
    return v if v else default


def _env_bool(key: str, default: bool) -> bool:
    v = _env_str(key)
    if v is None:
        return default
    return v.lower() in {"1", "true", "yes", "y", "on"}


def _modes(values) -> Tuple[str, ...]:
    # Validates against Mode, keeps the plain string values.
    return tuple(Mode(v.strip()).value for v in values if v.strip())


@dataclass(frozen=True)
class EditorSettings:
    # New questionnaires
    default_language: str = "en"
    default_modes: Tuple[str, ...] = ("sms", "ivr")

    # Translation spreadsheet headers (code -> display name overrides)
    language_names: Dict[str, str] = field(default_factory=dict)

    # Logging
    log_level: str = "INFO"
    log_json: bool = False


def load_settings(path: Optional[Union[str, Path]] = None) -> EditorSettings:
    """
    Build settings from an optional YAML file, then environment overrides.

    Environment:
        QESM_DEFAULT_LANGUAGE, QESM_DEFAULT_MODES (comma-separated),
        QESM_LOG_LEVEL, QESM_LOG_JSON

    Raises:
        FileNotFoundError: If `path` doesn't exist
        ConfigError: If the file is not a YAML mapping
    """
    raw: Dict = {}
    if path is not None:
        p = Path(path)
        if not p.exists():
            raise FileNotFoundError(f"Settings file not found: {p}")
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
        if not isinstance(raw, dict):
            raise ConfigError(f"Settings file must contain a mapping: {p}")

    default_language = _env_str("QESM_DEFAULT_LANGUAGE", raw.get("default_language", "en"))

    modes_env = _env_str("QESM_DEFAULT_MODES")
    try:
        if modes_env is not None:
            default_modes = _modes(modes_env.split(","))
        else:
            default_modes = _modes(raw.get("default_modes", ["sms", "ivr"]))
    except ValueError as e:
        raise ConfigError(f"Invalid default modes: {e}")

    language_names = raw.get("language_names") or {}
    if not isinstance(language_names, dict):
        raise ConfigError("language_names must be a mapping of code to name")

    return EditorSettings(
        default_language=default_language,
        default_modes=default_modes,
        language_names={str(k): str(v) for k, v in language_names.items()},
        log_level=_env_str("QESM_LOG_LEVEL", str(raw.get("log_level", "INFO"))),
        log_json=_env_bool("QESM_LOG_JSON", bool(raw.get("log_json", False))),
    )
