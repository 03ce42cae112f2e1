"""Audio output backends used by :class:`~lingo_drill.speech.client.SpeechClient`.

Both backends block while sound is playing, so their async entry points run
the blocking work in a worker thread and resolve only when playback ends.
"""

from __future__ import annotations

import asyncio
import io
import logging
from typing import Optional, Protocol

import pyttsx3
from pydub import AudioSegment
from pydub.playback import play

__all__ = [
    "AudioPlayer",
    "LocalSynthesizer",
    "PydubAudioPlayer",
    "Pyttsx3Synthesizer",
]

logger = logging.getLogger(__name__)


class AudioPlayer(Protocol):
    """Plays an encoded audio payload to completion."""

    async def play(self, audio: bytes) -> None:
        """Raise on decode or device errors."""


class LocalSynthesizer(Protocol):
    """Speaks text without any network access."""

    async def speak(self, text: str) -> None:
        """Must not raise; failures are logged and swallowed."""


class PydubAudioPlayer:
    """Decode provider audio with pydub/ffmpeg and play it."""

    def __init__(self, audio_format: str = "mp3") -> None:
        self._format = audio_format

    async def play(self, audio: bytes) -> None:
        await asyncio.to_thread(self._play_blocking, audio)

    def _play_blocking(self, audio: bytes) -> None:
        segment = AudioSegment.from_file(io.BytesIO(audio), format=self._format)
        play(segment)


class Pyttsx3Synthesizer:
    """Offline speech through the platform engine wrapped by pyttsx3."""

    def __init__(self, *, rate: int = 160, voice: Optional[str] = None) -> None:
        self._rate = rate
        self._voice = voice

    async def speak(self, text: str) -> None:
        try:
            await asyncio.to_thread(self._speak_blocking, text)
        except Exception as exc:  # engine/driver errors vary by platform
            logger.warning("Local speech synthesis failed: %s", exc)

    def _speak_blocking(self, text: str) -> None:
        engine = pyttsx3.init()
        try:
            engine.setProperty("rate", self._rate)
            if self._voice:
                engine.setProperty("voice", self._voice)
            engine.say(text)
            engine.runAndWait()
        finally:
            engine.stop()
