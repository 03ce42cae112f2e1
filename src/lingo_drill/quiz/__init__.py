from .errors import (
    InvalidAnswerIndexError,
    InvalidStateTransitionError,
    NotCompleteError,
    QuestionAlreadyLockedError,
    QuizError,
)
from .generate import generate_vocabulary_quiz
from .loader import load_questions, question_from_dict, question_to_dict
from .models import AnswerRecord, Question, QuizResult, SessionState
from .runner import QuizRunOutcome, run_quiz
from .session import QuizSession

__all__ = [
    "QuizSession",
    "SessionState",
    "Question",
    "AnswerRecord",
    "QuizResult",
    "QuizError",
    "InvalidAnswerIndexError",
    "QuestionAlreadyLockedError",
    "InvalidStateTransitionError",
    "NotCompleteError",
    "load_questions",
    "question_from_dict",
    "question_to_dict",
    "generate_vocabulary_quiz",
    "run_quiz",
    "QuizRunOutcome",
]
