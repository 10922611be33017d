"""Lifecycle state machine and self-re-arming question timer for quizzes."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractContextManager
import logging

from live_quiz.core.errors import InvalidQuizStateError, NotFoundError
from live_quiz.core.models import Question, Quiz, QuizStatus
from live_quiz.core.services.entity_store import EntityStore, utc_now
from live_quiz.core.services.scoring import effective_time_limit
from live_quiz.core.timers import TimerScheduler

logger = logging.getLogger(__name__)


class QuizProgression:
    """Moves a quiz through draft -> waiting -> active -> completed.

    ``current_question`` holds the question number on display. Advancing picks
    the next larger question number, so gaps in numbering are skipped over.
    Every timer captures the question number it was armed for and only acts if
    the quiz is still active and still showing that question; any other timer
    for the quiz becomes a no-op.

    Public methods expect the caller to hold ``lock``. Timer callbacks acquire
    it themselves.
    """

    def __init__(
        self,
        store: EntityStore,
        scheduler: TimerScheduler,
        lock: AbstractContextManager,
    ) -> None:
        self._store = store
        self._scheduler = scheduler
        self._lock = lock

    def start(self, quiz_id: int) -> Quiz:
        quiz = self._require_quiz(quiz_id)
        if quiz.status not in (QuizStatus.DRAFT, QuizStatus.WAITING):
            raise InvalidQuizStateError(f"Quiz cannot be started while {quiz.status.value}")
        questions = self._store.quiz_questions(quiz_id)
        if not questions:
            raise InvalidQuizStateError("Quiz has no questions")

        first = questions[0]
        quiz = self._store.quizzes.update(
            quiz_id,
            {
                "status": QuizStatus.ACTIVE,
                "current_question": first.question_number,
                "question_started_at": utc_now(),
            },
        )
        logger.info("Quiz %s started with %d question(s)", quiz_id, len(questions))
        self._arm_timer(quiz, first)
        return quiz

    def advance(self, quiz_id: int) -> Quiz:
        """Reveal the next question, or complete the quiz after the last one.

        Inactive quizzes are returned unchanged.
        """
        quiz = self._require_quiz(quiz_id)
        if quiz.status != QuizStatus.ACTIVE:
            logger.debug("Quiz %s is %s; advance ignored", quiz_id, quiz.status.value)
            return quiz

        following = self._question_after(quiz_id, quiz.current_question)
        if following is None:
            return self.complete(quiz_id, reason="last question finished")

        quiz = self._store.quizzes.update(
            quiz_id,
            {
                "current_question": following.question_number,
                "question_started_at": utc_now(),
            },
        )
        logger.info("Quiz %s advanced to question %d", quiz_id, following.question_number)
        self._arm_timer(quiz, following)
        return quiz

    def complete(self, quiz_id: int, reason: str = "ended by admin") -> Quiz:
        quiz = self._require_quiz(quiz_id)
        if quiz.status == QuizStatus.COMPLETED:
            return quiz
        quiz = self._store.quizzes.update(quiz_id, {"status": QuizStatus.COMPLETED})
        logger.info("Quiz %s completed (%s)", quiz_id, reason)
        return quiz

    def complete_if_all_finished(self, quiz_id: int) -> bool:
        """Complete an active quiz once every participant answered every question."""
        quiz = self._require_quiz(quiz_id)
        if quiz.status != QuizStatus.ACTIVE:
            return False
        question_count = self._store.question_count(quiz_id)
        participants = self._store.quiz_participants(quiz_id)
        if not participants or question_count == 0:
            return False
        if all(p.current_question >= question_count for p in participants):
            self.complete(quiz_id, reason="all participants finished")
            return True
        return False

    def current_question(self, quiz: Quiz) -> Question | None:
        if quiz.current_question <= 0:
            return None
        for question in self._store.quiz_questions(quiz.id):
            if question.question_number == quiz.current_question:
                return question
        return None

    def _question_after(self, quiz_id: int, question_number: int) -> Question | None:
        for question in self._store.quiz_questions(quiz_id):
            if question.question_number > question_number:
                return question
        return None

    def _arm_timer(self, quiz: Quiz, question: Question) -> None:
        delay = effective_time_limit(question, quiz.default_time_per_question)
        expected = question.question_number
        self._scheduler.schedule(delay, self._timer_callback(quiz.id, expected))
        logger.debug("Armed %ss timer for quiz %s question %d", delay, quiz.id, expected)

    def _timer_callback(self, quiz_id: int, expected_question: int) -> Callable[[], None]:
        def fire() -> None:
            with self._lock:
                quiz = self._store.quizzes.get(quiz_id)
                if (
                    quiz is None
                    or quiz.status != QuizStatus.ACTIVE
                    or quiz.current_question != expected_question
                ):
                    logger.debug(
                        "Stale timer for quiz %s question %d ignored", quiz_id, expected_question
                    )
                    return
                self.advance(quiz_id)

        return fire

    def _require_quiz(self, quiz_id: int) -> Quiz:
        quiz = self._store.quizzes.get(quiz_id)
        if quiz is None:
            raise NotFoundError("Quiz", quiz_id)
        return quiz
