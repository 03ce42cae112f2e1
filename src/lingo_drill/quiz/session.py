"""Timed multiple-choice quiz state machine.

A :class:`QuizSession` walks an ordered list of questions. Each question is
finalized exactly once, either by :meth:`QuizSession.select_answer` or by
:meth:`QuizSession.expire_current_question`, and then stays locked until the
caller invokes :meth:`QuizSession.advance`.

Selecting an option finalizes the question immediately; there is no separate
submit step. A UI that wants a "submit" affordance should hold the tentative
choice itself and call ``select_answer`` when the user confirms.

The session never runs its own timer. It reads an injectable clock to measure
elapsed time, and the caller is responsible for calling
``expire_current_question`` once its own countdown reaches zero. This keeps the
machine deterministic under test.
"""

from __future__ import annotations

import time
from collections.abc import Sequence
from typing import Callable, Optional

from .errors import (
    InvalidAnswerIndexError,
    InvalidStateTransitionError,
    NotCompleteError,
    QuestionAlreadyLockedError,
)
from .models import (
    AnswerRecord,
    Question,
    QuizResult,
    SessionState,
    score_percentage,
)

__all__ = ["Clock", "QuizSession"]

Clock = Callable[[], float]


class QuizSession:
    """Drive one attempt at an ordered sequence of questions."""

    def __init__(
        self,
        questions: Sequence[Question],
        time_budget_seconds: int,
        *,
        clock: Clock = time.monotonic,
    ) -> None:
        if not questions:
            raise ValueError("a quiz session needs at least one question")
        if (
            isinstance(time_budget_seconds, bool)
            or not isinstance(time_budget_seconds, int)
            or time_budget_seconds <= 0
        ):
            raise ValueError("time_budget_seconds must be a positive integer")
        ids = [question.id for question in questions]
        if len(set(ids)) != len(ids):
            raise ValueError("question ids must be unique within a session")

        self._questions: tuple[Question, ...] = tuple(questions)
        self._time_budget = time_budget_seconds
        self._clock = clock
        self._index = 0
        self._records: list[AnswerRecord] = []
        self._state = SessionState.IN_PROGRESS
        self._started_at = clock()
        self._score: Optional[int] = None

    @property
    def questions(self) -> tuple[Question, ...]:
        return self._questions

    @property
    def time_budget_seconds(self) -> int:
        return self._time_budget

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def records(self) -> tuple[AnswerRecord, ...]:
        return tuple(self._records)

    @property
    def total_questions(self) -> int:
        return len(self._questions)

    @property
    def is_complete(self) -> bool:
        return self._state is SessionState.COMPLETE

    @property
    def current_question(self) -> Optional[Question]:
        """The active or locked question, ``None`` once complete."""
        if self.is_complete:
            return None
        return self._questions[self._index]

    @property
    def pending_record(self) -> Optional[AnswerRecord]:
        """The record of the locked question awaiting ``advance``."""
        if self._state is SessionState.QUESTION_LOCKED:
            return self._records[-1]
        return None

    def elapsed_seconds(self) -> int:
        """Whole seconds since the current question became active, capped."""
        raw = self._clock() - self._started_at
        return max(0, min(self._time_budget, int(raw)))

    def time_remaining(self) -> int:
        if self._state is not SessionState.IN_PROGRESS:
            return 0
        return self._time_budget - self.elapsed_seconds()

    def is_time_up(self) -> bool:
        """True when the active question has used its whole budget."""
        return (
            self._state is SessionState.IN_PROGRESS
            and self._clock() - self._started_at >= self._time_budget
        )

    def select_answer(self, option_index: int) -> AnswerRecord:
        """Finalize the current question with ``option_index``.

        Raises:
            QuestionAlreadyLockedError: the question was already finalized.
            InvalidStateTransitionError: the session is complete.
            InvalidAnswerIndexError: the index is not one of the options.
        """
        self._require_open("select_answer")
        question = self._questions[self._index]
        if (
            isinstance(option_index, bool)
            or not isinstance(option_index, int)
            or not 0 <= option_index < len(question.options)
        ):
            raise InvalidAnswerIndexError(
                f"option {option_index!r} is not valid for question "
                f"{question.id!r} with {len(question.options)} options"
            )
        return self._finalize(
            AnswerRecord(
                question_id=question.id,
                selected_option_index=option_index,
                is_correct=question.is_correct(option_index),
                elapsed_seconds=self.elapsed_seconds(),
            )
        )

    def expire_current_question(self) -> AnswerRecord:
        """Finalize the current question as unanswered after a timeout."""
        self._require_open("expire_current_question")
        question = self._questions[self._index]
        return self._finalize(
            AnswerRecord(
                question_id=question.id,
                selected_option_index=None,
                is_correct=False,
                elapsed_seconds=self._time_budget,
            )
        )

    def advance(self) -> SessionState:
        """Move past the locked question and return the new state."""
        if self._state is not SessionState.QUESTION_LOCKED:
            raise InvalidStateTransitionError(
                f"advance() requires a locked question; state is "
                f"{self._state.value}"
            )
        self._index += 1
        if self._index == len(self._questions):
            correct = sum(1 for record in self._records if record.is_correct)
            self._score = score_percentage(correct, len(self._questions))
            self._state = SessionState.COMPLETE
        else:
            self._state = SessionState.IN_PROGRESS
            self._started_at = self._clock()
        return self._state

    def get_result(self) -> QuizResult:
        if self._state is not SessionState.COMPLETE or self._score is None:
            raise NotCompleteError(
                f"quiz is not complete ({self._index} of "
                f"{len(self._questions)} questions done)"
            )
        return QuizResult(score=self._score, records=tuple(self._records))

    def _require_open(self, operation: str) -> None:
        if self._state is SessionState.QUESTION_LOCKED:
            raise QuestionAlreadyLockedError(
                f"question {self._questions[self._index].id!r} is already "
                "finalized"
            )
        if self._state is not SessionState.IN_PROGRESS:
            raise InvalidStateTransitionError(
                f"{operation}() is not allowed once the quiz is complete"
            )

    def _finalize(self, record: AnswerRecord) -> AnswerRecord:
        self._records.append(record)
        self._state = SessionState.QUESTION_LOCKED
        return record
