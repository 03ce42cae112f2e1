"""Text-to-speech provider configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv

__all__ = [
    "API_KEY_ENV",
    "DEFAULT_API_BASE",
    "DEFAULT_MODEL_ID",
    "DEFAULT_VOICE_ID",
    "SpeechConfig",
    "VoiceSettings",
    "resolve_api_key",
]

API_KEY_ENV = "ELEVENLABS_API_KEY"
DEFAULT_API_BASE = "https://api.elevenlabs.io/v1"
# Provider id of the stock "Rachel" voice.
DEFAULT_VOICE_ID = "21m00Tcm4TlvDq8ikWAM"
DEFAULT_MODEL_ID = "eleven_monolingual_v1"


@dataclass(frozen=True)
class VoiceSettings:
    stability: float = 0.5
    similarity_boost: float = 0.5
    style: float = 0.0
    use_speaker_boost: bool = True

    def to_payload(self) -> Dict[str, Any]:
        return {
            "stability": self.stability,
            "similarity_boost": self.similarity_boost,
            "style": self.style,
            "use_speaker_boost": self.use_speaker_boost,
        }


@dataclass(frozen=True)
class SpeechConfig:
    """Immutable provider settings.

    A client reads one of these at the start of every call, so replacing the
    client's config never changes a request that is already in flight.
    """

    api_key: Optional[str] = None
    voice_id: str = DEFAULT_VOICE_ID
    model_id: str = DEFAULT_MODEL_ID
    api_base: str = DEFAULT_API_BASE
    request_timeout_seconds: float = 30.0
    voice_settings: VoiceSettings = field(default_factory=VoiceSettings)

    @property
    def remote_enabled(self) -> bool:
        return bool(self.api_key and self.api_key.strip())

    def with_api_key(self, api_key: Optional[str]) -> "SpeechConfig":
        return replace(self, api_key=api_key)


def resolve_api_key(
    configured: Optional[str] = None,
    *,
    env: Mapping[str, str] | None = None,
) -> Optional[str]:
    """Return the configured key, else ``ELEVENLABS_API_KEY`` from the env.

    ``.env`` files are loaded only when reading the real process environment.
    """
    if configured and configured.strip():
        return configured.strip()
    if env is None:
        load_dotenv()
        env = os.environ
    value = (env.get(API_KEY_ENV) or "").strip()
    return value or None
