from __future__ import annotations

import pytest
from openai import OpenAIError

from fakes import FakeOpenAI
from lingo_drill.core import ai


def test_load_client_requires_key(monkeypatch):
    monkeypatch.setattr(ai, "load_dotenv", lambda: None)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)

    with pytest.raises(RuntimeError, match="OPENAI_API_KEY"):
        ai.load_client()


def test_load_client_builds_openai(monkeypatch):
    created = {}

    class _Client:
        def __init__(self, api_key):  # noqa: ANN001
            created["api_key"] = api_key

    monkeypatch.setattr(ai, "load_dotenv", lambda: None)
    monkeypatch.setattr(ai, "OpenAI", _Client)
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

    client = ai.load_client()

    assert isinstance(client, _Client)
    assert created == {"api_key": "sk-test"}


def test_chat_completion_content_passes_prompts():
    client = FakeOpenAI("  hello  ")

    content = ai.chat_completion_content(
        client,
        model="m",
        system_prompt="sys",
        user_prompt="user",
        temperature=0.1,
        max_tokens=10,
    )

    assert content == "hello"
    call = client.completions.calls[0]
    assert call["model"] == "m"
    assert call["messages"][0] == {"role": "system", "content": "sys"}
    assert call["messages"][1] == {"role": "user", "content": "user"}
    assert call["max_tokens"] == 10


def test_chat_completion_content_returns_empty_on_error():
    client = FakeOpenAI(error=OpenAIError("boom"))

    content = ai.chat_completion_content(
        client,
        model="m",
        system_prompt="s",
        user_prompt="u",
        temperature=0.0,
        max_tokens=5,
    )

    assert content == ""


def test_chat_completion_content_handles_none_message():
    client = FakeOpenAI(None)

    assert (
        ai.chat_completion_content(
            client,
            model="m",
            system_prompt="s",
            user_prompt="u",
            temperature=0.0,
            max_tokens=5,
        )
        == ""
    )


@pytest.mark.parametrize(
    "content, expected",
    [
        ('[{"a": 1}]', [{"a": 1}]),
        ('Here you go:\n```json\n[1, 2]\n```', [1, 2]),
        ("```\n[3]\n```", [3]),
        ('{"a": 1}', []),
        ("not json", []),
        ("", []),
    ],
)
def test_extract_json_array(content, expected):
    assert ai.extract_json_array(content) == expected
