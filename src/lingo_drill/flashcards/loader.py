"""Load flashcards from JSON/JSONL records."""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Mapping, Optional

from ..core.files import read_records
from .deck import Flashcard

__all__ = ["flashcard_from_dict", "flashcard_to_dict", "load_flashcards"]


def _optional(data: Mapping[str, Any], *keys: str) -> Optional[str]:
    for key in keys:
        value = data.get(key)
        if value is not None and str(value).strip():
            return str(value).strip()
    return None


def flashcard_from_dict(data: Mapping[str, Any], index: int = 0) -> Flashcard:
    """Accept snake_case records and the camelCase ``partOfSpeech`` variant."""
    difficulty = _optional(data, "difficulty")
    return Flashcard(
        id=str(data.get("id") or f"card{index + 1}"),
        front=str(data.get("front", "")).strip(),
        back=str(data.get("back", "")).strip(),
        pronunciation=_optional(data, "pronunciation"),
        example=_optional(data, "example"),
        difficulty=difficulty.lower() if difficulty else None,
        part_of_speech=_optional(data, "part_of_speech", "partOfSpeech"),
    )


def flashcard_to_dict(card: Flashcard) -> dict[str, object]:
    payload: dict[str, object] = {
        "id": card.id,
        "front": card.front,
        "back": card.back,
    }
    for key in ("pronunciation", "example", "difficulty", "part_of_speech"):
        value = getattr(card, key)
        if value:
            payload[key] = value
    return payload


def load_flashcards(path: Path) -> List[Flashcard]:
    cards = [
        flashcard_from_dict(record, idx)
        for idx, record in enumerate(read_records(path))
    ]
    seen: set[str] = set()
    for card in cards:
        if card.id in seen:
            raise ValueError(f"duplicate flashcard id {card.id!r}")
        seen.add(card.id)
    return cards
