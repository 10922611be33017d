"""Service for registering participants against a quiz."""

from __future__ import annotations

import logging

from live_quiz.core.errors import DuplicateRegistrationError, NotFoundError
from live_quiz.core.models import Participant, QuizStatus
from live_quiz.core.services.entity_store import EntityStore

logger = logging.getLogger(__name__)


class LobbyManager:
    """Manages the waiting room: registration and the draft -> waiting step."""

    def __init__(self, store: EntityStore) -> None:
        self._store = store

    def register_participant(
        self,
        quiz_id: int,
        name: str,
        email: str,
        phone: str,
    ) -> Participant:
        """Register a participant; an email can join a given quiz only once."""
        quiz = self._store.quizzes.get(quiz_id)
        if quiz is None:
            raise NotFoundError("Quiz", quiz_id)
        if self._store.participant_by_email(quiz_id, email) is not None:
            raise DuplicateRegistrationError("Participant already registered")

        participant = self._store.participants.create(
            quiz_id=quiz_id,
            name=name.strip(),
            email=email.strip(),
            phone=phone.strip(),
        )
        logger.info("Participant %s joined quiz %s", participant.id, quiz_id)

        if quiz.status == QuizStatus.DRAFT:
            self._store.quizzes.update(quiz_id, {"status": QuizStatus.WAITING})
            logger.info("Quiz %s is now waiting for the admin to start", quiz_id)
        return participant

    def get_participants(self, quiz_id: int) -> list[Participant]:
        """Participants of a quiz in registration order."""
        return self._store.quiz_participants(quiz_id)
