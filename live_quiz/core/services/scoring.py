"""Answer correctness, time-decay points and participant aggregates."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
import math

from live_quiz.core.models import Answer, Question, QuestionType


@dataclass(slots=True)
class ScoredAnswer:
    is_correct: bool
    points: int


@dataclass(slots=True)
class ParticipantStats:
    """Aggregates recomputed from a participant's full answer history."""

    score: int
    accuracy: int
    average_response_time: int


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values, unlike ``round``."""
    return int(math.floor(value + 0.5))


def effective_time_limit(question: Question, default_time_per_question: int) -> int:
    if question.time_limit:
        return question.time_limit
    return default_time_per_question


def is_answer_correct(question: Question, submitted: str) -> bool:
    if question.type == QuestionType.FILL:
        return submitted.strip().lower() == question.correct_answer.strip().lower()
    return submitted == question.correct_answer


def points_for(
    question: Question,
    time_spent: float,
    default_time_per_question: int,
) -> int:
    """Marks scaled by how much of the time limit was left when answering."""
    max_time = effective_time_limit(question, default_time_per_question)
    if max_time <= 0:
        return 0
    bonus_fraction = max(0.0, 1 - time_spent / max_time)
    return round_half_up(question.marks * bonus_fraction)


def score_answer(
    question: Question,
    submitted: str,
    time_spent: float,
    default_time_per_question: int,
) -> ScoredAnswer:
    is_correct = is_answer_correct(question, submitted)
    if not is_correct:
        return ScoredAnswer(is_correct=False, points=0)
    return ScoredAnswer(
        is_correct=True,
        points=points_for(question, time_spent, default_time_per_question),
    )


def compute_participant_stats(
    answers: Iterable[Answer],
    questions_by_id: Mapping[int, Question],
    default_time_per_question: int,
) -> ParticipantStats:
    """Recompute score, accuracy and average time from scratch.

    Correctness is taken from the stored answer. Answers whose question has
    since been deleted still count towards accuracy and timing but earn nothing.
    """
    history = list(answers)
    if not history:
        return ParticipantStats(score=0, accuracy=0, average_response_time=0)

    score = 0
    for answer in history:
        if not answer.is_correct:
            continue
        question = questions_by_id.get(answer.question_id)
        if question is None:
            continue
        score += points_for(question, answer.time_spent, default_time_per_question)

    correct_count = sum(1 for answer in history if answer.is_correct)
    total_time = sum(answer.time_spent for answer in history)
    return ParticipantStats(
        score=score,
        accuracy=round_half_up(100 * correct_count / len(history)),
        average_response_time=round_half_up(total_time / len(history)),
    )
