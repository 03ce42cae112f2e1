"""Immutable quiz data structures."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

__all__ = [
    "Question",
    "AnswerRecord",
    "QuizResult",
    "SessionState",
    "score_percentage",
]


class SessionState(str, Enum):
    IN_PROGRESS = "in_progress"
    QUESTION_LOCKED = "question_locked"
    COMPLETE = "complete"


@dataclass(frozen=True)
class Question:
    """A multiple-choice question with exactly one correct option."""

    id: str
    prompt: str
    options: Tuple[str, ...]
    correct_option_index: int
    explanation: Optional[str] = None
    speakable_text: Optional[str] = None

    def __post_init__(self) -> None:
        # Accept any sequence from callers but store a tuple.
        object.__setattr__(self, "options", tuple(self.options))
        if not isinstance(self.id, str) or not self.id.strip():
            raise ValueError("question id must be a non-empty string")
        if len(self.options) < 2:
            raise ValueError(
                f"question {self.id!r} needs at least two options"
            )
        index = self.correct_option_index
        if isinstance(index, bool) or not isinstance(index, int):
            raise ValueError(
                f"question {self.id!r} correct_option_index must be an int"
            )
        if not 0 <= index < len(self.options):
            raise ValueError(
                f"question {self.id!r} correct_option_index {index} is out "
                f"of range for {len(self.options)} options"
            )

    def is_correct(self, option_index: Optional[int]) -> bool:
        return option_index is not None and option_index == self.correct_option_index

    @property
    def correct_option(self) -> str:
        return self.options[self.correct_option_index]


@dataclass(frozen=True)
class AnswerRecord:
    """The finalized outcome for one question.

    ``selected_option_index`` is ``None`` when the question timed out.
    """

    question_id: str
    selected_option_index: Optional[int]
    is_correct: bool
    elapsed_seconds: int

    @property
    def timed_out(self) -> bool:
        return self.selected_option_index is None

    def to_dict(self) -> dict[str, object]:
        return {
            "question_id": self.question_id,
            "selected_option_index": self.selected_option_index,
            "is_correct": self.is_correct,
            "elapsed_seconds": self.elapsed_seconds,
        }


@dataclass(frozen=True)
class QuizResult:
    """Final score and per-question records of a completed session."""

    score: int
    records: Tuple[AnswerRecord, ...]

    @property
    def total_questions(self) -> int:
        return len(self.records)

    @property
    def correct_count(self) -> int:
        return sum(1 for record in self.records if record.is_correct)

    @property
    def incorrect_count(self) -> int:
        return self.total_questions - self.correct_count

    @property
    def average_elapsed_seconds(self) -> int:
        if not self.records:
            return 0
        total = sum(record.elapsed_seconds for record in self.records)
        return _divide_half_up(total, len(self.records))

    def to_dict(self) -> dict[str, object]:
        return {
            "score": self.score,
            "correct": self.correct_count,
            "total": self.total_questions,
            "records": [record.to_dict() for record in self.records],
        }


def score_percentage(correct: int, total: int) -> int:
    """Return ``100 * correct / total`` rounded half up to an int."""
    if total <= 0:
        raise ValueError("total must be positive")
    return _divide_half_up(100 * correct, total)


def _divide_half_up(numerator: int, denominator: int) -> int:
    # Integer arithmetic avoids float error and round()'s half-to-even rule.
    return (2 * numerator + denominator) // (2 * denominator)
