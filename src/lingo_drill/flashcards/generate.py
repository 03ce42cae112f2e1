"""Generate flashcard sets with an OpenAI chat model."""

from __future__ import annotations

import logging
from typing import Any, List

from ..core.ai import chat_completion_content, extract_json_array
from ..quiz.generate import validate_request
from .deck import Flashcard
from .loader import flashcard_from_dict

__all__ = ["generate_flashcard_set"]

logger = logging.getLogger(__name__)

MIN_CARDS = 5
MAX_CARDS = 20

_SYSTEM_PROMPT = (
    "You write vocabulary flashcards for language learners. Reply with JSON "
    "only."
)


def _build_prompt(topic: str, difficulty: str, count: int, language: str) -> str:
    schema = (
        '[{"id": "card1", "front": str, "back": str, "pronunciation": str, '
        f'"example": str, "difficulty": "{difficulty}", '
        '"partOfSpeech": "noun|verb|adjective|phrase|..."}]'
    )
    return (
        f"Create a set of {count} {language} flashcards on the topic "
        f'"{topic}" at {difficulty} level.\n\n'
        f"Return ONLY a JSON array with this structure:\n{schema}\n\n"
        "front is the word or phrase, back a clear definition, and example "
        "a sentence that uses it."
    )


def generate_flashcard_set(
    topic: str,
    difficulty: str = "beginner",
    count: int = 10,
    *,
    client: Any,
    language: str = "English",
    model: str = "gpt-4o-mini",
    temperature: float = 0.2,
    max_tokens: int = 1500,
) -> List[Flashcard]:
    """Return up to ``count`` validated cards; invalid items are dropped."""
    topic, level = validate_request(
        topic, difficulty, count, min_count=MIN_CARDS, max_count=MAX_CARDS
    )
    content = chat_completion_content(
        client,
        model=model,
        system_prompt=_SYSTEM_PROMPT,
        user_prompt=_build_prompt(topic, level, count, language),
        temperature=temperature,
        max_tokens=max_tokens,
    )
    cards: List[Flashcard] = []
    seen: set[str] = set()
    for idx, item in enumerate(extract_json_array(content)):
        if len(cards) >= count:
            break
        if not isinstance(item, dict):
            continue
        record = dict(item)
        if not record.get("id") or str(record["id"]) in seen:
            record["id"] = _unused_id(seen, idx)
        try:
            card = flashcard_from_dict(record, idx)
        except ValueError as exc:
            logger.debug("Skipping generated flashcard #%d: %s", idx + 1, exc)
            continue
        seen.add(card.id)
        cards.append(card)
    logger.info(
        "Generated %d/%d flashcards",
        len(cards),
        count,
        extra={"topic": topic, "difficulty": level},
    )
    return cards


def _unused_id(seen: set[str], idx: int) -> str:
    candidate = f"card{idx + 1}"
    suffix = 1
    while candidate in seen:
        suffix += 1
        candidate = f"card{idx + 1}-{suffix}"
    return candidate
