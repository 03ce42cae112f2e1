"""Configuration for lingo-drill commands.

Settings live in ``lingo.toml`` inside the workspace ``config/`` directory.
Values from the file are merged over built-in defaults; unknown keys and
wrongly typed values raise :class:`~lingo_drill.core.config.ConfigError`.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import httpx

from .core.config import (
    ConfigError,
    load_toml,
    merge_defaults,
    optional_string,
    require_bool,
    require_float_range,
    require_positive_int,
    require_string,
    write_toml_template,
)
from .core.workspace import WorkspaceLayout
from .speech.config import (
    DEFAULT_API_BASE,
    DEFAULT_MODEL_ID,
    DEFAULT_VOICE_ID,
    SpeechConfig,
    VoiceSettings,
    resolve_api_key,
)

__all__ = [
    "CONFIG_PATH_ENV",
    "CONFIG_FILENAME",
    "AppConfig",
    "QuizConfig",
    "FallbackVoiceConfig",
    "GenerationConfig",
    "LoggingConfig",
    "config_template",
    "load_config",
    "resolve_config_path",
    "write_template",
]

CONFIG_PATH_ENV = "LINGO_DRILL_CONFIG"
CONFIG_FILENAME = "lingo.toml"


@dataclass(frozen=True)
class QuizConfig:
    time_limit_seconds: int
    show_explanations: bool


@dataclass(frozen=True)
class FallbackVoiceConfig:
    rate: int
    voice: Optional[str]


@dataclass(frozen=True)
class GenerationConfig:
    model: str
    temperature: float
    max_tokens: int


@dataclass(frozen=True)
class LoggingConfig:
    level: str
    verbose: bool


@dataclass(frozen=True)
class AppConfig:
    quiz: QuizConfig
    speech: SpeechConfig
    fallback_voice: FallbackVoiceConfig
    generation: GenerationConfig
    logging: LoggingConfig


def _build_quiz(section: Mapping[str, Any]) -> QuizConfig:
    return QuizConfig(
        time_limit_seconds=require_positive_int(
            section.get("time_limit_seconds"), field="quiz.time_limit_seconds"
        ),
        show_explanations=require_bool(
            section.get("show_explanations"), field="quiz.show_explanations"
        ),
    )


def _build_voice_settings(section: Mapping[str, Any]) -> VoiceSettings:
    def unit(name: str) -> float:
        return require_float_range(
            section.get(name),
            field=f"speech.voice_settings.{name}",
            min_value=0.0,
            max_value=1.0,
        )

    return VoiceSettings(
        stability=unit("stability"),
        similarity_boost=unit("similarity_boost"),
        style=unit("style"),
        use_speaker_boost=require_bool(
            section.get("use_speaker_boost"),
            field="speech.voice_settings.use_speaker_boost",
        ),
    )


def _build_speech(
    section: Mapping[str, Any], env: Mapping[str, str] | None
) -> SpeechConfig:
    configured_key = optional_string(
        section.get("api_key"), field="speech.api_key"
    )
    timeout = require_positive_int(
        section.get("request_timeout_seconds"),
        field="speech.request_timeout_seconds",
    )
    voice_settings = section.get("voice_settings")
    if not isinstance(voice_settings, Mapping):
        raise ConfigError("speech.voice_settings table is required.")
    return SpeechConfig(
        api_key=resolve_api_key(configured_key, env=env),
        voice_id=require_string(section.get("voice_id"), field="speech.voice_id"),
        model_id=require_string(section.get("model_id"), field="speech.model_id"),
        api_base=_require_http_url(
            section.get("api_base"), field="speech.api_base"
        ),
        request_timeout_seconds=float(timeout),
        voice_settings=_build_voice_settings(voice_settings),
    )


def _require_http_url(value: Any, *, field: str) -> str:
    text = require_string(value, field=field)
    try:
        url = httpx.URL(text)
    except httpx.InvalidURL as exc:
        raise ConfigError(f"'{field}' is not a valid URL: {exc}") from exc
    if url.scheme not in {"http", "https"} or not url.host:
        raise ConfigError(f"'{field}' must be an http(s) URL.")
    return text


def _build_fallback(section: Mapping[str, Any]) -> FallbackVoiceConfig:
    return FallbackVoiceConfig(
        rate=require_positive_int(
            section.get("rate"), field="speech.fallback.rate"
        ),
        voice=optional_string(
            section.get("voice"), field="speech.fallback.voice"
        ),
    )


def _build_generation(section: Mapping[str, Any]) -> GenerationConfig:
    return GenerationConfig(
        model=require_string(section.get("model"), field="generation.model"),
        temperature=require_float_range(
            section.get("temperature"),
            field="generation.temperature",
            min_value=0.0,
            max_value=2.0,
        ),
        max_tokens=require_positive_int(
            section.get("max_tokens"), field="generation.max_tokens"
        ),
    )


def _build_logging(section: Mapping[str, Any]) -> LoggingConfig:
    level = require_string(section.get("level"), field="logging.level").upper()
    if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        raise ConfigError(
            "logging.level must be one of "
            "DEBUG, INFO, WARNING, ERROR, CRITICAL."
        )
    verbose = require_bool(section.get("verbose"), field="logging.verbose")
    return LoggingConfig(level=level, verbose=verbose)


def _build_config(
    tree: Mapping[str, Any], env: Mapping[str, str] | None
) -> AppConfig:
    speech_section = tree["speech"]
    return AppConfig(
        quiz=_build_quiz(tree["quiz"]),
        speech=_build_speech(speech_section, env),
        fallback_voice=_build_fallback(speech_section["fallback"]),
        generation=_build_generation(tree["generation"]),
        logging=_build_logging(tree["logging"]),
    )


def resolve_config_path(
    layout: WorkspaceLayout,
    *,
    explicit_path: Optional[Path] = None,
    env: Mapping[str, str] | None = None,
) -> Path:
    env_map = os.environ if env is None else env
    if explicit_path is not None:
        return explicit_path.expanduser().resolve()
    override = env_map.get(CONFIG_PATH_ENV)
    if override:
        return Path(override).expanduser().resolve()
    return layout.path_for("config") / CONFIG_FILENAME


def load_config(
    layout: WorkspaceLayout,
    *,
    explicit_path: Optional[Path] = None,
    env: Mapping[str, str] | None = None,
) -> AppConfig:
    """Load settings, falling back to defaults when no file exists.

    A missing file is only an error when it was requested explicitly through
    ``explicit_path`` or ``LINGO_DRILL_CONFIG``.
    """
    path = resolve_config_path(layout, explicit_path=explicit_path, env=env)
    env_map = os.environ if env is None else env
    requested = explicit_path is not None or bool(env_map.get(CONFIG_PATH_ENV))
    tree = copy.deepcopy(_DEFAULTS)
    if path.exists() or requested:
        merge_defaults(tree, load_toml(path))
    return _build_config(tree, env)


def default_tree() -> Dict[str, Any]:
    return copy.deepcopy(_DEFAULTS)


def config_template() -> str:
    return _CONFIG_TEMPLATE.strip() + "\n"


def write_template(
    path: Path, *, overwrite: bool = False, mode: int = 0o600
) -> Path:
    return write_toml_template(
        path, template=config_template(), overwrite=overwrite, mode=mode
    )


_DEFAULTS: Dict[str, Any] = {
    "quiz": {
        "time_limit_seconds": 30,
        "show_explanations": True,
    },
    "speech": {
        "api_key": None,
        "voice_id": DEFAULT_VOICE_ID,
        "model_id": DEFAULT_MODEL_ID,
        "api_base": DEFAULT_API_BASE,
        "request_timeout_seconds": 30,
        "voice_settings": {
            "stability": 0.5,
            "similarity_boost": 0.5,
            "style": 0.0,
            "use_speaker_boost": True,
        },
        "fallback": {
            "rate": 160,
            "voice": None,
        },
    },
    "generation": {
        "model": "gpt-4o-mini",
        "temperature": 0.2,
        "max_tokens": 1500,
    },
    "logging": {
        "level": "INFO",
        "verbose": False,
    },
}


_CONFIG_TEMPLATE = f"""
# lingo-drill configuration

[quiz]
# Seconds allowed per question
time_limit_seconds = 30
# Show the explanation after each answer
show_explanations = true

[speech]
# Leave unset to read ELEVENLABS_API_KEY from the environment or .env.
# Without a key every phrase is spoken by the local fallback voice.
# api_key = "..."
voice_id = "{DEFAULT_VOICE_ID}"
model_id = "{DEFAULT_MODEL_ID}"
api_base = "{DEFAULT_API_BASE}"
request_timeout_seconds = 30

[speech.voice_settings]
stability = 0.5
similarity_boost = 0.5
style = 0.0
use_speaker_boost = true

[speech.fallback]
# Words per minute for the offline voice
rate = 160
# Platform voice id or name (see your OS speech settings)
# voice = "english"

[generation]
# OpenAI chat model used to write quizzes and flashcards
model = "gpt-4o-mini"
temperature = 0.2
max_tokens = 1500

[logging]
level = "INFO"
verbose = false
"""
