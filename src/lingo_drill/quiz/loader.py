"""Build :class:`Question` objects from stored or generated records."""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence

from ..core.files import read_records
from .models import Question

__all__ = [
    "question_from_dict",
    "question_to_dict",
    "questions_from_records",
    "load_questions",
]


def question_from_dict(data: Mapping[str, Any], index: int = 0) -> Question:
    """Normalize a question record.

    Both the stored shape (``prompt``, ``options``, ``correct_option_index``,
    ``speakable_text``) and the shape language models are asked to emit
    (``question``, ``options``, ``correctAnswer``, ``audioText``) are
    accepted. A letter answer such as ``"B"`` maps onto the option index.
    Raises ``ValueError`` when the record cannot form a valid question.
    """
    prompt = _first_text(data, "prompt", "question", "stem")
    if not prompt:
        raise ValueError(f"question #{index + 1} has no prompt text")
    options = _options(data.get("options", data.get("choices")))
    raw_answer = _first_present(
        data, "correct_option_index", "correctAnswer", "answer"
    )
    return Question(
        id=str(data.get("id") or f"q{index + 1}"),
        prompt=prompt,
        options=tuple(options),
        correct_option_index=_answer_index(raw_answer, options),
        explanation=_first_text(data, "explanation") or None,
        speakable_text=_first_text(data, "speakable_text", "audioText") or None,
    )


def question_to_dict(question: Question) -> dict[str, object]:
    payload: dict[str, object] = {
        "id": question.id,
        "prompt": question.prompt,
        "options": list(question.options),
        "correct_option_index": question.correct_option_index,
    }
    if question.explanation:
        payload["explanation"] = question.explanation
    if question.speakable_text:
        payload["speakable_text"] = question.speakable_text
    return payload


def questions_from_records(
    records: Sequence[Mapping[str, Any]],
) -> List[Question]:
    questions = [
        question_from_dict(record, idx) for idx, record in enumerate(records)
    ]
    seen: set[str] = set()
    for question in questions:
        if question.id in seen:
            raise ValueError(f"duplicate question id {question.id!r}")
        seen.add(question.id)
    return questions


def load_questions(path: Path) -> List[Question]:
    """Load and validate every question stored at ``path``."""
    return questions_from_records(read_records(path))


def _first_present(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


def _first_text(data: Mapping[str, Any], *keys: str) -> str:
    value = _first_present(data, *keys)
    return str(value).strip() if value is not None else ""


def _options(raw: Any) -> List[str]:
    if not isinstance(raw, list):
        raise ValueError("options must be a list")
    options: List[str] = []
    for item in raw:
        text = item.get("text", "") if isinstance(item, Mapping) else item
        options.append(str(text).strip())
    if any(not option for option in options):
        raise ValueError("option text must be non-empty")
    return options


def _answer_index(raw: Any, options: List[str]) -> int:
    if isinstance(raw, bool):
        raise ValueError("correct answer must be an index, letter, or option")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        candidate = raw.strip()
        if candidate.isdigit():
            return int(candidate)
        letter: Optional[int] = None
        if len(candidate) == 1 and candidate.isalpha():
            letter = ord(candidate.upper()) - ord("A")
        if letter is not None and 0 <= letter < len(options):
            return letter
        for idx, option in enumerate(options):
            if option.casefold() == candidate.casefold():
                return idx
    raise ValueError(f"cannot resolve correct answer {raw!r}")
