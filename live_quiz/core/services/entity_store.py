"""Keyed storage for quizzes, questions, participants and answers."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import replace
from datetime import datetime, timezone
from itertools import count
from threading import Lock
from typing import Any, Generic, Protocol, TypeVar

from live_quiz.core.models import Answer, Participant, Question, Quiz, QuizStatus

T = TypeVar("T")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Repository(Protocol[T]):
    """CRUD-by-id contract every backing store has to satisfy."""

    def create(self, **fields: Any) -> T: ...

    def get(self, entity_id: int) -> T | None: ...

    def update(self, entity_id: int, updates: Mapping[str, Any]) -> T | None: ...

    def delete(self, entity_id: int) -> bool: ...

    def list(self, predicate: Callable[[T], bool] | None = None) -> list[T]: ...


class InMemoryRepository(Generic[T]):
    """Dictionary-backed repository handing out increasing integer ids.

    Records are never mutated in place: ``update`` stores a patched copy, so a
    record handed to a caller stays a consistent snapshot.
    """

    def __init__(
        self,
        factory: Callable[..., T],
        defaults: Callable[[], dict[str, Any]] | None = None,
    ) -> None:
        self._factory = factory
        self._defaults = defaults or dict
        self._records: dict[int, T] = {}
        self._ids = count(1)
        self._lock = Lock()

    def create(self, **fields: Any) -> T:
        with self._lock:
            entity_id = next(self._ids)
            record = self._factory(id=entity_id, **{**self._defaults(), **fields})
            self._records[entity_id] = record
            return record

    def get(self, entity_id: int) -> T | None:
        return self._records.get(entity_id)

    def update(self, entity_id: int, updates: Mapping[str, Any]) -> T | None:
        with self._lock:
            existing = self._records.get(entity_id)
            if existing is None:
                return None
            patch = {key: value for key, value in updates.items() if key != "id"}
            updated = replace(existing, **patch)
            self._records[entity_id] = updated
            return updated

    def delete(self, entity_id: int) -> bool:
        with self._lock:
            return self._records.pop(entity_id, None) is not None

    def list(self, predicate: Callable[[T], bool] | None = None) -> list[T]:
        records = list(self._records.values())
        if predicate is None:
            return records
        return [record for record in records if predicate(record)]


def _quiz_defaults() -> dict[str, Any]:
    return {
        "status": QuizStatus.DRAFT,
        "current_question": 0,
        "created_at": utc_now(),
        "question_started_at": None,
    }


def _participant_defaults() -> dict[str, Any]:
    return {
        "score": 0,
        "accuracy": 0,
        "average_response_time": 0,
        "current_question": 0,
        "registered_at": utc_now(),
    }


def _answer_defaults() -> dict[str, Any]:
    return {"submitted_at": utc_now()}


class EntityStore:
    """Groups the four repositories and the filtered queries built on them."""

    def __init__(
        self,
        quizzes: Repository[Quiz] | None = None,
        questions: Repository[Question] | None = None,
        participants: Repository[Participant] | None = None,
        answers: Repository[Answer] | None = None,
    ) -> None:
        self.quizzes: Repository[Quiz] = quizzes or InMemoryRepository(Quiz, _quiz_defaults)
        self.questions: Repository[Question] = questions or InMemoryRepository(Question)
        self.participants: Repository[Participant] = participants or InMemoryRepository(
            Participant, _participant_defaults
        )
        self.answers: Repository[Answer] = answers or InMemoryRepository(Answer, _answer_defaults)

    # --- Quizzes ---

    def all_quizzes(self) -> list[Quiz]:
        return sorted(self.quizzes.list(), key=lambda quiz: quiz.id)

    # --- Questions ---

    def quiz_questions(self, quiz_id: int) -> list[Question]:
        """Questions of a quiz in reveal order (question number, then id)."""
        questions = self.questions.list(lambda q: q.quiz_id == quiz_id)
        return sorted(questions, key=lambda q: (q.question_number, q.id))

    def question_count(self, quiz_id: int) -> int:
        return len(self.questions.list(lambda q: q.quiz_id == quiz_id))

    # --- Participants ---

    def quiz_participants(self, quiz_id: int) -> list[Participant]:
        participants = self.participants.list(lambda p: p.quiz_id == quiz_id)
        return sorted(participants, key=lambda p: p.id)

    def participant_by_email(self, quiz_id: int, email: str) -> Participant | None:
        wanted = _normalize_email(email)
        matches = self.participants.list(
            lambda p: p.quiz_id == quiz_id and _normalize_email(p.email) == wanted
        )
        return matches[0] if matches else None

    # --- Answers ---

    def participant_answers(self, participant_id: int) -> list[Answer]:
        answers = self.answers.list(lambda a: a.participant_id == participant_id)
        return sorted(answers, key=lambda a: a.id)

    def question_answers(self, question_id: int) -> list[Answer]:
        answers = self.answers.list(lambda a: a.question_id == question_id)
        return sorted(answers, key=lambda a: a.id)


def _normalize_email(email: str) -> str:
    return email.strip().lower()
