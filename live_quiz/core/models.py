"""Domain models for the live quiz server."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class QuizStatus(str, Enum):
    """Lifecycle states of a quiz."""

    DRAFT = "draft"
    WAITING = "waiting"
    ACTIVE = "active"
    COMPLETED = "completed"


class QuestionType(str, Enum):
    MCQ = "MCQ"
    FILL = "Fill"
    TRUE_FALSE = "TrueFalse"


class TimerType(str, Enum):
    """Whether every question uses the quiz default or carries its own limit."""

    SAME = "same"
    DIFFERENT = "different"


@dataclass(slots=True)
class Quiz:
    """A timed quiz authored by the admin."""

    id: int
    title: str
    duration: int  # minutes
    start_date: str
    start_time: str
    status: QuizStatus = QuizStatus.DRAFT
    current_question: int = 0  # 0 means not started
    default_time_per_question: int = 30
    timer_type: TimerType = TimerType.SAME
    created_at: datetime | None = None
    question_started_at: datetime | None = None


@dataclass(slots=True)
class Question:
    """A single question of a quiz, sequenced by ``question_number``."""

    id: int
    quiz_id: int
    question_number: int
    type: QuestionType
    question: str
    correct_answer: str
    options: list[str] | None = None
    marks: int = 10
    time_limit: int | None = None


@dataclass(slots=True)
class Participant:
    """Someone registered against a quiz with their running statistics."""

    id: int
    quiz_id: int
    name: str
    email: str
    phone: str
    score: int = 0
    accuracy: int = 0
    average_response_time: int = 0
    current_question: int = 0  # number of answers submitted
    registered_at: datetime | None = None


@dataclass(slots=True)
class Answer:
    """An immutable answer submission."""

    id: int
    participant_id: int
    question_id: int
    answer: str
    is_correct: bool
    time_spent: int  # seconds
    submitted_at: datetime | None = None


@dataclass(slots=True)
class LeaderboardEntry:
    id: int
    name: str
    email: str
    score: int
    accuracy: int
    average_response_time: int
    rank: int


@dataclass(slots=True)
class QuizWithQuestions:
    quiz: Quiz
    questions: list[Question]
    participant_count: int


@dataclass(slots=True)
class ParticipantWithAnswers:
    participant: Participant
    answers: list[Answer]
    rank: int


@dataclass(slots=True)
class CurrentQuestionView:
    """What a participant polls while the quiz is running."""

    quiz_id: int
    status: QuizStatus
    current_question: int  # question number being shown, 0 before start
    position: int  # 1-based place of that question in reveal order
    total_questions: int
    question: Question | None = None
    time_limit: int | None = None
    question_started_at: datetime | None = None
    remaining_seconds: int | None = None
