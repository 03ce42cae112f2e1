"""Generate vocabulary quizzes with an OpenAI chat model."""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Tuple

from ..core.ai import chat_completion_content, extract_json_array
from .loader import question_from_dict
from .models import Question

__all__ = [
    "DIFFICULTIES",
    "generate_vocabulary_quiz",
    "validate_request",
]

logger = logging.getLogger(__name__)

DIFFICULTIES = ("beginner", "intermediate", "advanced")
MIN_QUESTIONS = 5
MAX_QUESTIONS = 15

_SYSTEM_PROMPT = (
    "You write multiple-choice vocabulary quizzes for language learners. "
    "Reply with JSON only."
)


def _build_prompt(topic: str, difficulty: str, count: int, language: str) -> str:
    schema = (
        '[{"id": "q1", "question": str, "options": [str, str, str, str], '
        '"correctAnswer": int, "explanation": str, "audioText": str}]'
    )
    return (
        f"Create a {count}-question {language} vocabulary quiz on "
        f'"{topic}" at {difficulty} level.\n\n'
        f"Return ONLY a JSON array with this structure:\n{schema}\n\n"
        "correctAnswer is the zero-based index into options. audioText is "
        "the word or phrase a learner should hear spoken. Mix definition, "
        f"usage, and context questions suited to {difficulty} learners."
    )


def validate_request(
    topic: str,
    difficulty: str,
    count: int,
    *,
    min_count: int = MIN_QUESTIONS,
    max_count: int = MAX_QUESTIONS,
) -> Tuple[str, str]:
    topic = (topic or "").strip()
    if not topic:
        raise ValueError("topic must be a non-empty string")
    level = (difficulty or "").strip().lower()
    if level not in DIFFICULTIES:
        raise ValueError(
            f"difficulty must be one of {', '.join(DIFFICULTIES)}"
        )
    if not min_count <= count <= max_count:
        raise ValueError(f"count must be between {min_count} and {max_count}")
    return topic, level


def generate_vocabulary_quiz(
    topic: str,
    difficulty: str = "beginner",
    count: int = 8,
    *,
    client: Any,
    language: str = "English",
    model: str = "gpt-4o-mini",
    temperature: float = 0.2,
    max_tokens: int = 1500,
) -> List[Question]:
    """Ask the model for ``count`` questions and keep the ones that validate.

    Returns at most ``count`` questions; malformed items are skipped and an
    unusable response yields an empty list.
    """
    topic, level = validate_request(topic, difficulty, count)
    content = chat_completion_content(
        client,
        model=model,
        system_prompt=_SYSTEM_PROMPT,
        user_prompt=_build_prompt(topic, level, count, language),
        temperature=temperature,
        max_tokens=max_tokens,
    )
    questions: List[Question] = []
    seen: set[str] = set()
    for idx, item in enumerate(extract_json_array(content)):
        if len(questions) >= count:
            break
        question = _coerce(item, idx)
        if question is None:
            continue
        if question.id in seen:
            # Models reuse ids like "q1"; keep the question with a fresh one.
            question = question_from_dict(
                {**item, "id": f"q{len(questions) + 1}-{idx}"}, idx
            )
        seen.add(question.id)
        questions.append(question)
    logger.info(
        "Generated %d/%d quiz questions",
        len(questions),
        count,
        extra={"topic": topic, "difficulty": level},
    )
    return questions


def _coerce(item: Any, idx: int) -> Optional[Question]:
    if not isinstance(item, dict):
        return None
    try:
        return question_from_dict(item, idx)
    except ValueError as exc:
        logger.debug("Skipping generated question #%d: %s", idx + 1, exc)
        return None
