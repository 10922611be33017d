from __future__ import annotations

from collections.abc import Callable

import pytest
from fastapi.testclient import TestClient

from live_quiz.core.models import QuestionType
from live_quiz.core.quiz_manager import QuizManager
from live_quiz.server.api_server import create_api_app


class ManualScheduler:
    """Collects timers so tests decide when (and whether) they fire."""

    def __init__(self) -> None:
        self.pending: list[tuple[float, Callable[[], None]]] = []
        self.closed = False

    def schedule(self, delay_seconds: float, callback: Callable[[], None]) -> None:
        if not self.closed:
            self.pending.append((delay_seconds, callback))

    def shutdown(self) -> None:
        self.closed = True
        self.pending.clear()

    def fire_next(self) -> float:
        delay, callback = self.pending.pop(0)
        callback()
        return delay

    def fire_all(self, limit: int = 100) -> float:
        elapsed = 0.0
        for _ in range(limit):
            if not self.pending:
                break
            elapsed += self.fire_next()
        return elapsed


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def manager(scheduler: ManualScheduler) -> QuizManager:
    return QuizManager(scheduler=scheduler)


@pytest.fixture
def make_quiz(manager: QuizManager):
    """Create a quiz with one MCQ per time limit given, numbered 1..n, answer "Yes"."""

    def _make(*limits: int | None, default_time: int = 30):
        quiz = manager.create_quiz(
            title="General Knowledge",
            duration=30,
            start_date="2026-10-18",
            start_time="10:00",
            default_time_per_question=default_time,
        )
        for index, limit in enumerate(limits, start=1):
            manager.add_question(
                quiz_id=quiz.id,
                question_type=QuestionType.MCQ,
                question=f"Question {index}?",
                correct_answer="Yes",
                question_number=index,
                options=["Yes", "No"],
                marks=10,
                time_limit=limit,
            )
        return quiz

    return _make


@pytest.fixture
def client(manager: QuizManager):
    app = create_api_app(manager, public_host="quiz.example.com")
    with TestClient(app) as test_client:
        yield test_client
