"""Exceptions raised by :class:`~lingo_drill.quiz.session.QuizSession`.

All of them signal caller misuse (normally a UI bug) and are never raised for
conditions the session could recover from on its own.
"""

from __future__ import annotations

__all__ = [
    "QuizError",
    "InvalidAnswerIndexError",
    "QuestionAlreadyLockedError",
    "InvalidStateTransitionError",
    "NotCompleteError",
]


class QuizError(RuntimeError):
    """Base class for quiz session misuse."""


class InvalidAnswerIndexError(QuizError):
    """The selected option index is outside the current question's options."""


class QuestionAlreadyLockedError(QuizError):
    """The current question was already finalized by a selection or timeout."""


class InvalidStateTransitionError(QuizError):
    """The operation is not allowed in the session's current state."""


class NotCompleteError(QuizError):
    """Results were requested before the last question was advanced past."""
