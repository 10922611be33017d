"""Request and response schemas for the quiz API (camelCase on the wire)."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from live_quiz.constants.quiz_constants import DEFAULT_MARKS, DEFAULT_TIME_PER_QUESTION_SECONDS
from live_quiz.core.models import QuestionType, QuizStatus, TimerType


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# --- Payloads ---


class QuizCreatePayload(CamelModel):
    """Payload schema for creating a quiz."""

    title: str = Field(min_length=1)
    duration: int = Field(gt=0)
    start_date: str = Field(min_length=1)
    start_time: str = Field(min_length=1)
    default_time_per_question: int = Field(default=DEFAULT_TIME_PER_QUESTION_SECONDS, gt=0)
    timer_type: TimerType = TimerType.SAME


class QuizUpdatePayload(CamelModel):
    """Authoring fields an admin may patch; lifecycle fields go through actions."""

    title: str | None = Field(default=None, min_length=1)
    duration: int | None = Field(default=None, gt=0)
    start_date: str | None = Field(default=None, min_length=1)
    start_time: str | None = Field(default=None, min_length=1)
    default_time_per_question: int | None = Field(default=None, gt=0)
    timer_type: TimerType | None = None


class QuestionCreatePayload(CamelModel):
    quiz_id: int
    question_number: int | None = Field(default=None, gt=0)
    type: QuestionType
    question: str = Field(min_length=1)
    options: list[str] | None = None
    correct_answer: str = Field(min_length=1)
    marks: int = Field(default=DEFAULT_MARKS, gt=0)
    time_limit: int | None = Field(default=None, gt=0)


class QuestionUpdatePayload(CamelModel):
    question_number: int | None = Field(default=None, gt=0)
    type: QuestionType | None = None
    question: str | None = Field(default=None, min_length=1)
    options: list[str] | None = None
    correct_answer: str | None = Field(default=None, min_length=1)
    marks: int | None = Field(default=None, gt=0)
    time_limit: int | None = Field(default=None, gt=0)


class QuestionImportPayload(CamelModel):
    text: str = Field(min_length=1)


class ParticipantCreatePayload(CamelModel):
    quiz_id: int
    name: str = Field(min_length=1)
    email: EmailStr
    phone: str = Field(min_length=1)


class ParticipantUpdatePayload(CamelModel):
    name: str | None = Field(default=None, min_length=1)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, min_length=1)


class AnswerCreatePayload(CamelModel):
    """An empty ``answer`` is how clients auto-submit when time runs out."""

    participant_id: int
    question_id: int
    answer: str
    time_spent: int = Field(ge=0)


# --- Responses ---


class QuizOut(CamelModel):
    id: int
    title: str
    duration: int
    start_date: str
    start_time: str
    status: QuizStatus
    current_question: int
    default_time_per_question: int
    timer_type: TimerType
    created_at: datetime | None = None
    question_started_at: datetime | None = None


class QuestionOut(CamelModel):
    id: int
    quiz_id: int
    question_number: int
    type: QuestionType
    question: str
    options: list[str] | None = None
    correct_answer: str
    marks: int
    time_limit: int | None = None


class QuizDetailOut(QuizOut):
    questions: list[QuestionOut]
    participant_count: int


class PublicQuestionOut(CamelModel):
    """A question as shown to participants while it is live: no answer key."""

    id: int
    question_number: int
    type: QuestionType
    question: str
    question_html: str
    options: list[str] | None = None
    options_html: list[str] | None = None
    marks: int


class CurrentQuestionOut(CamelModel):
    quiz_id: int
    status: QuizStatus
    current_question: int
    position: int
    total_questions: int
    question: PublicQuestionOut | None = None
    time_limit: int | None = None
    question_started_at: datetime | None = None
    remaining_seconds: int | None = None


class ParticipantOut(CamelModel):
    id: int
    quiz_id: int
    name: str
    email: str
    phone: str
    score: int
    accuracy: int
    average_response_time: int
    current_question: int
    registered_at: datetime | None = None


class AnswerOut(CamelModel):
    id: int
    participant_id: int
    question_id: int
    answer: str
    is_correct: bool
    time_spent: int
    submitted_at: datetime | None = None


class ParticipantDetailOut(ParticipantOut):
    answers: list[AnswerOut]
    rank: int


class LeaderboardEntryOut(CamelModel):
    id: int
    name: str
    email: str
    score: int
    accuracy: int
    average_response_time: int
    rank: int


class JoinLinkOut(CamelModel):
    url: str
    qr_data: str
    qr_code_data_url: str = Field(alias="qrCodeDataURL")
    # Duplicate of qr_code_data_url for clients reading ``image``.
    image: str


class MessageOut(CamelModel):
    message: str
