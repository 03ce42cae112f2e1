"""Text-to-speech with a remote provider and a local fallback voice."""

from .client import SpeechClient, SpeechProviderError
from .config import SpeechConfig, VoiceSettings, resolve_api_key
from .playback import (
    AudioPlayer,
    LocalSynthesizer,
    PydubAudioPlayer,
    Pyttsx3Synthesizer,
)

__all__ = [
    "SpeechClient",
    "SpeechProviderError",
    "SpeechConfig",
    "VoiceSettings",
    "resolve_api_key",
    "AudioPlayer",
    "LocalSynthesizer",
    "PydubAudioPlayer",
    "Pyttsx3Synthesizer",
]
