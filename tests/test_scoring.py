import pytest

from live_quiz.core.models import Answer, Question, QuestionType
from live_quiz.core.services.scoring import (
    compute_participant_stats,
    is_answer_correct,
    round_half_up,
    score_answer,
)


def _question(question_type=QuestionType.MCQ, correct="Paris", marks=10, time_limit=30, qid=1):
    return Question(
        id=qid,
        quiz_id=1,
        question_number=qid,
        type=question_type,
        question="Capital of France?",
        correct_answer=correct,
        options=["Paris", "Rome"] if question_type == QuestionType.MCQ else None,
        marks=marks,
        time_limit=time_limit,
    )


def _answer(question_id, is_correct, time_spent, aid=1):
    return Answer(
        id=aid,
        participant_id=1,
        question_id=question_id,
        answer="x",
        is_correct=is_correct,
        time_spent=time_spent,
    )


@pytest.mark.parametrize("time_spent, expected", [(0, 10), (15, 5), (30, 0), (45, 0)])
def test_points_decay_with_time_spent(time_spent, expected):
    scored = score_answer(_question(), "Paris", time_spent, default_time_per_question=60)
    assert scored.is_correct
    assert scored.points == expected


def test_incorrect_answer_scores_nothing_even_when_instant():
    scored = score_answer(_question(), "Rome", 0, default_time_per_question=30)
    assert scored.is_correct is False
    assert scored.points == 0


def test_unanswered_submission_scores_nothing():
    assert score_answer(_question(), "", 5, default_time_per_question=30).points == 0


def test_missing_time_limit_falls_back_to_quiz_default():
    question = _question(time_limit=None)
    assert score_answer(question, "Paris", 10, default_time_per_question=20).points == 5


def test_fill_answers_ignore_case_and_surrounding_whitespace():
    question = _question(QuestionType.FILL, correct="Paris")
    assert is_answer_correct(question, " paris ")
    assert not is_answer_correct(question, "pari")


def test_choice_answers_require_exact_match():
    assert not is_answer_correct(_question(), "paris")
    true_false = _question(QuestionType.TRUE_FALSE, correct="True")
    assert is_answer_correct(true_false, "True")
    assert not is_answer_correct(true_false, "true")


def test_rounding_is_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(0.5) == 1
    assert round_half_up(66.6) == 67
    question = _question(marks=5, time_limit=10)
    # 5 * (1 - 5/10) = 2.5
    assert score_answer(question, "Paris", 5, default_time_per_question=30).points == 3


def test_stats_are_recomputed_from_full_history():
    questions = {1: _question(qid=1), 2: _question(qid=2, marks=20)}
    answers = [
        _answer(1, True, 15, aid=1),
        _answer(2, True, 0, aid=2),
        _answer(3, False, 4, aid=3),
    ]

    stats = compute_participant_stats(answers, questions, default_time_per_question=30)

    assert stats.score == 5 + 20
    assert stats.accuracy == 67
    assert stats.average_response_time == 6


def test_stats_for_empty_history_are_zero():
    stats = compute_participant_stats([], {}, default_time_per_question=30)
    assert (stats.score, stats.accuracy, stats.average_response_time) == (0, 0, 0)


def test_answers_to_deleted_questions_earn_no_points():
    stats = compute_participant_stats([_answer(7, True, 0)], {}, default_time_per_question=30)
    assert stats.score == 0
    assert stats.accuracy == 100
