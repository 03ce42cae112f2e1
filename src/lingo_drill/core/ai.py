"""OpenAI client loading and small chat-completion helpers."""

from __future__ import annotations

import json
import logging
import os
import re
from typing import Any, List, Optional

from dotenv import load_dotenv
from openai import OpenAI, OpenAIError

__all__ = [
    "load_client",
    "chat_completion_content",
    "extract_json_array",
]

logger = logging.getLogger(__name__)

_FENCED_JSON = re.compile(r"```(?:json)?\s*(.+?)```", re.DOTALL)


def load_client() -> OpenAI:
    """Initialize an OpenAI client using environment-derived credentials."""
    load_dotenv()
    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        raise RuntimeError(
            "OPENAI_API_KEY not found in environment. Set it or add to .env"
        )
    return OpenAI(api_key=api_key)


def chat_completion_content(
    client: Any,
    *,
    model: str,
    system_prompt: str,
    user_prompt: str,
    temperature: float,
    max_tokens: int,
) -> str:
    """Return the first completion's text, or ``""`` when the call fails."""
    try:
        resp = client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=temperature,
            max_tokens=max_tokens,
        )
    except OpenAIError as exc:
        logger.warning("Chat completion failed: %s", exc)
        return ""
    raw_content = resp.choices[0].message.content
    return (raw_content or "").strip()


def extract_json_array(content: str) -> List[Any]:
    """Parse a JSON array from model output, tolerating Markdown fences."""
    if not content:
        return []
    fenced = _FENCED_JSON.search(content)
    payload: Optional[str] = fenced.group(1) if fenced else content
    try:
        data = json.loads(payload)
    except json.JSONDecodeError:
        logger.warning("Model output was not valid JSON.")
        return []
    return data if isinstance(data, list) else []
