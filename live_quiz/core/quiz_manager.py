"""Business logic for quizzes shared between the API handlers and timers."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
import logging
import math
from threading import Lock
from typing import Any

from live_quiz.constants.quiz_constants import (
    DEFAULT_MARKS,
    DEFAULT_TIME_PER_QUESTION_SECONDS,
    TRUE_FALSE_ANSWERS,
)
from live_quiz.core.errors import (
    ConflictError,
    DuplicateAnswerError,
    DuplicateRegistrationError,
    InvalidQuestionError,
    NotFoundError,
)
from live_quiz.core.models import (
    Answer,
    CurrentQuestionView,
    LeaderboardEntry,
    Participant,
    ParticipantWithAnswers,
    Question,
    QuestionType,
    Quiz,
    QuizStatus,
    QuizWithQuestions,
    TimerType,
)
from live_quiz.core.question_exporter import serialize_questions
from live_quiz.core.question_importer import ImportedQuestion, parse_questions
from live_quiz.core.services.entity_store import EntityStore, utc_now
from live_quiz.core.services.lobby_manager import LobbyManager
from live_quiz.core.services.quiz_progression import QuizProgression
from live_quiz.core.services.scoreboard import rank_of, rank_participants
from live_quiz.core.services.scoring import (
    compute_participant_stats,
    effective_time_limit,
    score_answer,
)
from live_quiz.core.timers import ThreadingTimerScheduler, TimerScheduler

logger = logging.getLogger(__name__)


class QuizManager:
    """Facade over the entity store, lobby, progression and scoring services.

    Every public method runs under one lock so that request handlers on the
    server's thread pool and timer threads never interleave mutations.
    """

    def __init__(
        self,
        store: EntityStore | None = None,
        scheduler: TimerScheduler | None = None,
    ) -> None:
        self._lock = Lock()
        self._store = store or EntityStore()
        self._scheduler = scheduler or ThreadingTimerScheduler()
        self._lobby = LobbyManager(self._store)
        self._progression = QuizProgression(self._store, self._scheduler, self._lock)

    # --- Quizzes ---

    def create_quiz(
        self,
        title: str,
        duration: int,
        start_date: str,
        start_time: str,
        default_time_per_question: int = DEFAULT_TIME_PER_QUESTION_SECONDS,
        timer_type: TimerType = TimerType.SAME,
    ) -> Quiz:
        with self._lock:
            quiz = self._store.quizzes.create(
                title=title.strip(),
                duration=duration,
                start_date=start_date,
                start_time=start_time,
                default_time_per_question=default_time_per_question,
                timer_type=timer_type,
            )
            logger.info("Created quiz %s (%s)", quiz.id, quiz.title)
            return quiz

    def list_quizzes(self) -> list[Quiz]:
        with self._lock:
            return self._store.all_quizzes()

    def get_quiz(self, quiz_id: int) -> Quiz:
        with self._lock:
            return self._require_quiz(quiz_id)

    def get_quiz_with_questions(self, quiz_id: int) -> QuizWithQuestions:
        with self._lock:
            quiz = self._require_quiz(quiz_id)
            return QuizWithQuestions(
                quiz=quiz,
                questions=self._store.quiz_questions(quiz_id),
                participant_count=len(self._store.quiz_participants(quiz_id)),
            )

    def update_quiz(self, quiz_id: int, updates: Mapping[str, Any]) -> Quiz:
        with self._lock:
            quiz = self._store.quizzes.update(quiz_id, updates)
            if quiz is None:
                raise NotFoundError("Quiz", quiz_id)
            return quiz

    # --- Progression ---

    def start_quiz(self, quiz_id: int) -> Quiz:
        with self._lock:
            return self._progression.start(quiz_id)

    def next_question(self, quiz_id: int) -> Quiz:
        """Advance immediately; the newly shown question gets a fresh timer."""
        with self._lock:
            return self._progression.advance(quiz_id)

    def end_quiz(self, quiz_id: int) -> Quiz:
        with self._lock:
            return self._progression.complete(quiz_id)

    def get_current_question_view(self, quiz_id: int) -> CurrentQuestionView:
        with self._lock:
            quiz = self._require_quiz(quiz_id)
            questions = self._store.quiz_questions(quiz_id)
            question = self._progression.current_question(quiz)
            view = CurrentQuestionView(
                quiz_id=quiz.id,
                status=quiz.status,
                current_question=quiz.current_question,
                position=0,
                total_questions=len(questions),
                question_started_at=quiz.question_started_at,
            )
            if question is None or quiz.status != QuizStatus.ACTIVE:
                return view
            view.question = question
            view.position = next(
                index for index, q in enumerate(questions, start=1) if q.id == question.id
            )
            view.time_limit = effective_time_limit(question, quiz.default_time_per_question)
            view.remaining_seconds = _remaining_seconds(
                quiz.question_started_at, view.time_limit, utc_now()
            )
            return view

    # --- Questions ---

    def add_question(
        self,
        quiz_id: int,
        question_type: QuestionType,
        question: str,
        correct_answer: str,
        question_number: int | None = None,
        options: list[str] | None = None,
        marks: int = DEFAULT_MARKS,
        time_limit: int | None = None,
    ) -> Question:
        with self._lock:
            self._require_quiz(quiz_id)
            return self._create_question(
                quiz_id,
                ImportedQuestion(
                    type=question_type,
                    question=question,
                    correct_answer=correct_answer,
                    options=options,
                    marks=marks,
                    time_limit=time_limit,
                ),
                question_number,
            )

    def list_questions(self, quiz_id: int) -> list[Question]:
        with self._lock:
            return self._store.quiz_questions(quiz_id)

    def get_question(self, question_id: int) -> Question:
        with self._lock:
            return self._require_question(question_id)

    def update_question(self, question_id: int, updates: Mapping[str, Any]) -> Question:
        with self._lock:
            existing = self._require_question(question_id)
            number = updates.get("question_number")
            if number is not None and number != existing.question_number:
                self._ensure_number_free(existing.quiz_id, number)
            merged = {
                "type": existing.type,
                "question": existing.question,
                "correct_answer": existing.correct_answer,
                "options": existing.options,
                **updates,
            }
            merged.update(
                _validated_content(
                    merged["type"],
                    merged["question"],
                    merged["correct_answer"],
                    merged["options"],
                )
            )
            updated = self._store.questions.update(question_id, merged)
            if updated is None:
                raise NotFoundError("Question", question_id)
            return updated

    def delete_question(self, question_id: int) -> bool:
        with self._lock:
            deleted = self._store.questions.delete(question_id)
            if deleted:
                logger.info("Deleted question %s", question_id)
            return deleted

    def import_questions(self, quiz_id: int, text: str) -> list[Question]:
        """Append every question from the text format, numbered after existing ones."""
        imported = parse_questions(text)
        with self._lock:
            self._require_quiz(quiz_id)
            for item in imported:
                _validated_content(item.type, item.question, item.correct_answer, item.options)
            created = [self._create_question(quiz_id, item, None) for item in imported]
            logger.info("Imported %d question(s) into quiz %s", len(created), quiz_id)
            return created

    def export_questions(self, quiz_id: int) -> str:
        with self._lock:
            self._require_quiz(quiz_id)
            return serialize_questions(self._store.quiz_questions(quiz_id))

    # --- Participants ---

    def register_participant(self, quiz_id: int, name: str, email: str, phone: str) -> Participant:
        with self._lock:
            return self._lobby.register_participant(quiz_id, name, email, phone)

    def list_participants(self, quiz_id: int) -> list[Participant]:
        with self._lock:
            return self._lobby.get_participants(quiz_id)

    def get_participant_with_answers(self, participant_id: int) -> ParticipantWithAnswers:
        with self._lock:
            participant = self._require_participant(participant_id)
            return ParticipantWithAnswers(
                participant=participant,
                answers=self._store.participant_answers(participant_id),
                rank=rank_of(participant_id, self._store.quiz_participants(participant.quiz_id)),
            )

    def update_participant(self, participant_id: int, updates: Mapping[str, Any]) -> Participant:
        with self._lock:
            existing = self._require_participant(participant_id)
            email = updates.get("email")
            if email is not None:
                clash = self._store.participant_by_email(existing.quiz_id, email)
                if clash is not None and clash.id != participant_id:
                    raise DuplicateRegistrationError("Participant already registered")
            participant = self._store.participants.update(participant_id, updates)
            if participant is None:
                raise NotFoundError("Participant", participant_id)
            return participant

    def get_participant_answers(self, participant_id: int) -> list[Answer]:
        with self._lock:
            return self._store.participant_answers(participant_id)

    # --- Answers & leaderboard ---

    def submit_answer(
        self,
        participant_id: int,
        question_id: int,
        answer: str,
        time_spent: int,
    ) -> Answer:
        """Record an answer, rescore the participant and maybe finish the quiz."""
        with self._lock:
            participant = self._require_participant(participant_id)
            question = self._require_question(question_id)
            if question.quiz_id != participant.quiz_id:
                raise InvalidQuestionError("Question does not belong to the participant's quiz")
            history = self._store.participant_answers(participant_id)
            if any(previous.question_id == question_id for previous in history):
                raise DuplicateAnswerError("Question already answered")

            quiz = self._require_quiz(participant.quiz_id)
            scored = score_answer(question, answer, time_spent, quiz.default_time_per_question)
            recorded = self._store.answers.create(
                participant_id=participant_id,
                question_id=question_id,
                answer=answer,
                is_correct=scored.is_correct,
                time_spent=time_spent,
            )

            questions_by_id = {q.id: q for q in self._store.quiz_questions(quiz.id)}
            stats = compute_participant_stats(
                self._store.participant_answers(participant_id),
                questions_by_id,
                quiz.default_time_per_question,
            )
            self._store.participants.update(
                participant_id,
                {
                    "score": stats.score,
                    "accuracy": stats.accuracy,
                    "average_response_time": stats.average_response_time,
                    "current_question": participant.current_question + 1,
                },
            )
            logger.info(
                "Participant %s answered question %s (correct=%s, +%d)",
                participant_id,
                question_id,
                scored.is_correct,
                scored.points,
            )
            self._progression.complete_if_all_finished(quiz.id)
            return recorded

    def get_leaderboard(self, quiz_id: int, limit: int | None = None) -> list[LeaderboardEntry]:
        with self._lock:
            entries = rank_participants(self._store.quiz_participants(quiz_id))
        return entries if limit is None else entries[:limit]

    def shutdown(self) -> None:
        self._scheduler.shutdown()

    # --- Helpers (lock held) ---

    def _create_question(
        self,
        quiz_id: int,
        item: ImportedQuestion,
        question_number: int | None,
    ) -> Question:
        content = _validated_content(item.type, item.question, item.correct_answer, item.options)
        if question_number is None:
            existing = self._store.quiz_questions(quiz_id)
            question_number = existing[-1].question_number + 1 if existing else 1
        else:
            self._ensure_number_free(quiz_id, question_number)
        return self._store.questions.create(
            quiz_id=quiz_id,
            question_number=question_number,
            marks=item.marks,
            time_limit=item.time_limit,
            **content,
        )

    def _ensure_number_free(self, quiz_id: int, question_number: int) -> None:
        if any(q.question_number == question_number for q in self._store.quiz_questions(quiz_id)):
            raise ConflictError(f"Question number {question_number} already exists in this quiz")

    def _require_quiz(self, quiz_id: int) -> Quiz:
        quiz = self._store.quizzes.get(quiz_id)
        if quiz is None:
            raise NotFoundError("Quiz", quiz_id)
        return quiz

    def _require_question(self, question_id: int) -> Question:
        question = self._store.questions.get(question_id)
        if question is None:
            raise NotFoundError("Question", question_id)
        return question

    def _require_participant(self, participant_id: int) -> Participant:
        participant = self._store.participants.get(participant_id)
        if participant is None:
            raise NotFoundError("Participant", participant_id)
        return participant


def _validated_content(
    question_type: QuestionType,
    text: str,
    correct_answer: str,
    options: list[str] | None,
) -> dict[str, Any]:
    """Normalize question text, answer and options for the given type."""
    question_type = QuestionType(question_type)
    cleaned_text = text.strip()
    if not cleaned_text:
        raise InvalidQuestionError("Question text must not be empty.")
    correct_answer = correct_answer.strip()
    if not correct_answer:
        raise InvalidQuestionError("Correct answer must not be empty.")

    if question_type == QuestionType.MCQ:
        cleaned_options = [option.strip() for option in options or []]
        if len(cleaned_options) < 2:
            raise InvalidQuestionError("Multiple-choice questions need at least two options.")
        if any(not option for option in cleaned_options):
            raise InvalidQuestionError("Option text cannot be empty.")
        if correct_answer not in cleaned_options:
            raise InvalidQuestionError("Correct answer must be one of the options.")
        return {
            "type": question_type,
            "question": cleaned_text,
            "correct_answer": correct_answer,
            "options": cleaned_options,
        }

    if question_type == QuestionType.TRUE_FALSE and correct_answer not in TRUE_FALSE_ANSWERS:
        raise InvalidQuestionError("True/false answers must be 'True' or 'False'.")
    return {
        "type": question_type,
        "question": cleaned_text,
        "correct_answer": correct_answer,
        "options": None,
    }


def _remaining_seconds(started_at: datetime | None, time_limit: int, now: datetime) -> int | None:
    if started_at is None:
        return None
    elapsed = (now - started_at).total_seconds()
    return max(0, math.ceil(time_limit - elapsed))
