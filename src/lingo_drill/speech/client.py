"""Remote text-to-speech client with a local fallback voice.

``SpeechClient.speak`` never fails because of the provider: transport errors,
non-success responses, and undecodable audio are logged and the text is
spoken by the local synthesizer instead. There are no retries; the fallback
is the only recovery path.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from .config import SpeechConfig
from .playback import (
    AudioPlayer,
    LocalSynthesizer,
    PydubAudioPlayer,
    Pyttsx3Synthesizer,
)

__all__ = ["SpeechClient", "SpeechProviderError"]

# InvalidURL (a bad api_base) is not an HTTPError subclass.
_FETCH_ERRORS = (httpx.HTTPError, httpx.InvalidURL, ValueError)


class SpeechProviderError(RuntimeError):
    """Raised internally when the provider returns an unusable response."""


class SpeechClient:
    """Speak text through the configured provider.

    The caller constructs and owns the client. Every operation snapshots the
    current :class:`SpeechConfig` when it starts; :meth:`configure` only
    affects calls made afterwards.
    """

    def __init__(
        self,
        config: Optional[SpeechConfig] = None,
        *,
        player: Optional[AudioPlayer] = None,
        fallback: Optional[LocalSynthesizer] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._config = config or SpeechConfig()
        self._player = player or PydubAudioPlayer()
        self._fallback = fallback or Pyttsx3Synthesizer()
        self._transport = transport
        self._logger = logger or logging.getLogger(__name__)

    @property
    def config(self) -> SpeechConfig:
        return self._config

    def configure(self, config: SpeechConfig) -> None:
        self._config = config

    def is_remote_enabled(self) -> bool:
        return self._config.remote_enabled

    async def speak(
        self,
        text: str,
        voice_id: Optional[str] = None,
        model_id: Optional[str] = None,
    ) -> None:
        """Speak ``text`` and return once playback has finished.

        Raises ``ValueError`` for empty text; provider failures never escape.
        """
        if not isinstance(text, str) or not text.strip():
            raise ValueError("text to speak must be a non-empty string")
        config = self._config

        if not config.remote_enabled:
            self._logger.debug("Remote speech disabled; using local voice")
            await self._fallback.speak(text)
            return

        try:
            audio = await self._synthesize(
                config,
                text,
                voice_id or config.voice_id,
                model_id or config.model_id,
            )
            await self._player.play(audio)
        except Exception as exc:  # any provider or playback failure
            self._logger.warning(
                "Remote speech failed, falling back to local voice: %s",
                exc,
                extra={"voice_id": voice_id or config.voice_id},
            )
            await self._fallback.speak(text)

    async def list_voices(self) -> List[Dict[str, Any]]:
        """Return the provider's voices, or ``[]`` when unavailable."""
        config = self._config
        if not config.remote_enabled:
            return []
        try:
            data = await self._get_json(config, "/voices")
        except _FETCH_ERRORS as exc:
            self._logger.warning("Failed to fetch voices: %s", exc)
            return []
        voices = data.get("voices") if isinstance(data, dict) else None
        if not isinstance(voices, list):
            return []
        return [voice for voice in voices if isinstance(voice, dict)]

    async def remaining_quota(self) -> int:
        """Return characters left in the subscription, ``0`` when unknown."""
        config = self._config
        if not config.remote_enabled:
            return 0
        try:
            data = await self._get_json(config, "/user")
        except _FETCH_ERRORS as exc:
            self._logger.warning("Failed to fetch usage: %s", exc)
            return 0
        subscription = data.get("subscription") if isinstance(data, dict) else None
        if not isinstance(subscription, dict):
            return 0
        limit = subscription.get("character_limit")
        used = subscription.get("character_count")
        if not isinstance(limit, int) or not isinstance(used, int):
            return 0
        return max(0, limit - used)

    async def _synthesize(
        self,
        config: SpeechConfig,
        text: str,
        voice_id: str,
        model_id: str,
    ) -> bytes:
        payload = {
            "text": text,
            "model_id": model_id,
            "voice_settings": config.voice_settings.to_payload(),
        }
        async with self._http(config) as http:
            response = await http.post(
                f"/text-to-speech/{voice_id}",
                json=payload,
                headers={"Accept": "audio/mpeg"},
            )
            response.raise_for_status()
            audio = response.content
        if not audio:
            raise SpeechProviderError("provider returned an empty audio body")
        self._logger.debug(
            "Synthesized speech",
            extra={"voice_id": voice_id, "model_id": model_id, "bytes": len(audio)},
        )
        return audio

    async def _get_json(self, config: SpeechConfig, path: str) -> Any:
        async with self._http(config) as http:
            response = await http.get(path)
            response.raise_for_status()
            return response.json()

    def _http(self, config: SpeechConfig) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=config.api_base,
            headers={"xi-api-key": config.api_key or ""},
            timeout=config.request_timeout_seconds,
            transport=self._transport,
        )
