from __future__ import annotations

import asyncio
import json
import logging

import httpx
import pytest

from fakes import RecordingPlayer, RecordingSynthesizer
from lingo_drill.speech import SpeechClient, SpeechConfig, VoiceSettings

AUDIO = b"ID3-fake-mp3"


class Recorder:
    """MockTransport handler that records requests and replays a response."""

    def __init__(self, response=None, error=None):  # noqa: ANN001
        self.requests: list[httpx.Request] = []
        self._response = response or httpx.Response(200, content=AUDIO)
        self._error = error

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._error is not None:
            raise self._error
        return self._response


def make_client(config=None, *, handler=None, player=None):  # noqa: ANN001
    handler = handler or Recorder()
    synth = RecordingSynthesizer()
    client = SpeechClient(
        config if config is not None else SpeechConfig(api_key="xi-test"),
        player=player or RecordingPlayer(),
        fallback=synth,
        transport=httpx.MockTransport(handler),
    )
    return client, handler, synth


def test_without_key_speaks_locally_and_sends_nothing():
    client, handler, synth = make_client(SpeechConfig(api_key=None))

    asyncio.run(client.speak("hello"))

    assert client.is_remote_enabled() is False
    assert handler.requests == []
    assert synth.spoken == ["hello"]


def test_blank_key_counts_as_disabled():
    client, _, _ = make_client(SpeechConfig(api_key="   "))

    assert client.is_remote_enabled() is False


def test_remote_request_shape_and_playback():
    settings = VoiceSettings(stability=0.3, similarity_boost=0.8, style=0.1)
    player = RecordingPlayer()
    client, handler, synth = make_client(
        SpeechConfig(api_key="xi-test", voice_settings=settings), player=player
    )

    asyncio.run(client.speak("hola"))

    assert player.played == [AUDIO]
    assert synth.spoken == []
    request = handler.requests[0]
    assert request.method == "POST"
    assert request.url.path == "/v1/text-to-speech/21m00Tcm4TlvDq8ikWAM"
    assert request.headers["xi-api-key"] == "xi-test"
    assert request.headers["accept"] == "audio/mpeg"
    body = json.loads(request.content)
    assert body == {
        "text": "hola",
        "model_id": "eleven_monolingual_v1",
        "voice_settings": {
            "stability": 0.3,
            "similarity_boost": 0.8,
            "style": 0.1,
            "use_speaker_boost": True,
        },
    }


def test_per_call_voice_and_model_override():
    client, handler, _ = make_client()

    asyncio.run(client.speak("hola", voice_id="voice-2", model_id="model-2"))

    request = handler.requests[0]
    assert request.url.path.endswith("/text-to-speech/voice-2")
    assert json.loads(request.content)["model_id"] == "model-2"


def test_server_error_falls_back(caplog):
    handler = Recorder(httpx.Response(500, text="boom"))
    player = RecordingPlayer()
    client, _, synth = make_client(handler=handler, player=player)

    with caplog.at_level(logging.WARNING):
        asyncio.run(client.speak("hello"))

    assert synth.spoken == ["hello"]
    assert player.played == []
    assert "falling back" in caplog.text


def test_transport_error_falls_back():
    handler = Recorder(error=httpx.ConnectError("offline"))
    client, _, synth = make_client(handler=handler)

    asyncio.run(client.speak("hello"))

    assert synth.spoken == ["hello"]


def test_empty_audio_falls_back():
    handler = Recorder(httpx.Response(200, content=b""))
    client, _, synth = make_client(handler=handler)

    asyncio.run(client.speak("hello"))

    assert synth.spoken == ["hello"]


def test_playback_failure_falls_back():
    player = RecordingPlayer(error=RuntimeError("no audio device"))
    client, _, synth = make_client(player=player)

    asyncio.run(client.speak("hello"))

    assert synth.spoken == ["hello"]


@pytest.mark.parametrize("text", ["", "   "])
def test_empty_text_is_rejected(text):
    client, handler, synth = make_client()

    with pytest.raises(ValueError):
        asyncio.run(client.speak(text))
    assert handler.requests == []
    assert synth.spoken == []


def test_configure_applies_to_later_calls_only():
    holder: dict[str, SpeechClient] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        # Reconfigure while the first request is in flight.
        holder["client"].configure(SpeechConfig(api_key=None))
        return httpx.Response(200, content=AUDIO)

    player = RecordingPlayer()
    client, _, synth = make_client(handler=handler, player=player)
    holder["client"] = client

    asyncio.run(client.speak("first"))
    asyncio.run(client.speak("second"))

    assert player.played == [AUDIO]
    assert synth.spoken == ["second"]
    assert client.config.api_key is None


def test_list_voices_filters_entries():
    payload = {
        "voices": [
            {"voice_id": "a", "name": "Rachel"},
            "junk",
            {"voice_id": "b", "name": "Adam"},
        ]
    }
    client, handler, _ = make_client(handler=Recorder(httpx.Response(200, json=payload)))

    voices = asyncio.run(client.list_voices())

    assert [voice["voice_id"] for voice in voices] == ["a", "b"]
    assert handler.requests[0].url.path == "/v1/voices"
    assert handler.requests[0].headers["xi-api-key"] == "xi-test"


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(401, json={"detail": "bad key"}),
        httpx.Response(200, text="not json"),
        httpx.Response(200, json={"voices": "nope"}),
    ],
)
def test_list_voices_failures_return_empty(response):
    client, _, _ = make_client(handler=Recorder(response))

    assert asyncio.run(client.list_voices()) == []


def test_list_voices_without_key_sends_nothing():
    client, handler, _ = make_client(SpeechConfig())

    assert asyncio.run(client.list_voices()) == []
    assert handler.requests == []


def test_remaining_quota_subtracts_usage():
    payload = {"subscription": {"character_limit": 10000, "character_count": 2500}}
    client, handler, _ = make_client(handler=Recorder(httpx.Response(200, json=payload)))

    assert asyncio.run(client.remaining_quota()) == 7500
    assert handler.requests[0].url.path == "/v1/user"


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, json={"subscription": {"character_limit": 10, "character_count": 25}}),
        httpx.Response(200, json={"subscription": {"character_limit": "10"}}),
        httpx.Response(200, json={}),
        httpx.Response(503),
    ],
)
def test_remaining_quota_degrades_to_zero(response):
    client, _, _ = make_client(handler=Recorder(response))

    assert asyncio.run(client.remaining_quota()) == 0


def test_remaining_quota_network_error():
    client, _, _ = make_client(handler=Recorder(error=httpx.ReadTimeout("slow")))

    assert asyncio.run(client.remaining_quota()) == 0


def test_malformed_api_base_degrades_gracefully():
    config = SpeechConfig(api_key="xi-test", api_base="http://[::1")
    client, handler, synth = make_client(config)

    assert asyncio.run(client.remaining_quota()) == 0
    assert asyncio.run(client.list_voices()) == []
    asyncio.run(client.speak("hi"))

    assert handler.requests == []
    assert synth.spoken == ["hi"]
