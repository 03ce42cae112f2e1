from __future__ import annotations

import dataclasses

import pytest

from lingo_drill.quiz.models import (
    AnswerRecord,
    Question,
    QuizResult,
    score_percentage,
)


def test_question_normalizes_options_to_tuple():
    question = Question("q1", "Pick", ["a", "b"], 1)

    assert question.options == ("a", "b")
    assert question.correct_option == "b"
    assert question.is_correct(1) is True
    assert question.is_correct(0) is False
    assert question.is_correct(None) is False


def test_question_is_immutable():
    question = Question("q1", "Pick", ("a", "b"), 0)

    with pytest.raises(dataclasses.FrozenInstanceError):
        question.prompt = "changed"  # type: ignore[misc]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"id": "", "options": ("a", "b"), "correct_option_index": 0},
        {"id": "q", "options": ("only",), "correct_option_index": 0},
        {"id": "q", "options": ("a", "b"), "correct_option_index": 2},
        {"id": "q", "options": ("a", "b"), "correct_option_index": -1},
        {"id": "q", "options": ("a", "b"), "correct_option_index": True},
    ],
)
def test_question_validation(kwargs):
    with pytest.raises(ValueError):
        Question(prompt="Pick", **kwargs)


@pytest.mark.parametrize(
    "correct, total, expected",
    [(2, 3, 67), (1, 3, 33), (1, 2, 50), (1, 8, 13), (0, 4, 0), (5, 5, 100)],
)
def test_score_rounds_half_up(correct, total, expected):
    assert score_percentage(correct, total) == expected


def test_score_requires_questions():
    with pytest.raises(ValueError):
        score_percentage(0, 0)


def test_quiz_result_summary_fields():
    records = (
        AnswerRecord("q1", 0, True, 3),
        AnswerRecord("q2", None, False, 10),
    )
    result = QuizResult(score=50, records=records)

    assert result.total_questions == 2
    assert result.correct_count == 1
    assert result.incorrect_count == 1
    assert result.average_elapsed_seconds == 7
    assert result.to_dict() == {
        "score": 50,
        "correct": 1,
        "total": 2,
        "records": [
            {
                "question_id": "q1",
                "selected_option_index": 0,
                "is_correct": True,
                "elapsed_seconds": 3,
            },
            {
                "question_id": "q2",
                "selected_option_index": None,
                "is_correct": False,
                "elapsed_seconds": 10,
            },
        ],
    }
