from live_quiz.core.models import QuestionType, QuizStatus
from live_quiz.core.services.entity_store import EntityStore


def _quiz(store: EntityStore, title: str = "Quiz"):
    return store.quizzes.create(
        title=title,
        duration=20,
        start_date="2026-10-18",
        start_time="09:00",
    )


def _question(store: EntityStore, quiz_id: int, number: int):
    return store.questions.create(
        quiz_id=quiz_id,
        question_number=number,
        type=QuestionType.FILL,
        question=f"Q{number}",
        correct_answer="a",
    )


def test_create_assigns_increasing_ids_and_defaults():
    store = EntityStore()
    first = _quiz(store, "One")
    second = _quiz(store, "Two")

    assert (first.id, second.id) == (1, 2)
    assert first.status == QuizStatus.DRAFT
    assert first.current_question == 0
    assert first.created_at is not None

    participant = store.participants.create(quiz_id=first.id, name="Ada", email="ada@x.io", phone="1")
    assert participant.id == 1
    assert (participant.score, participant.accuracy, participant.average_response_time) == (0, 0, 0)
    assert participant.current_question == 0
    assert participant.registered_at is not None


def test_update_merges_patch_and_keeps_other_fields():
    store = EntityStore()
    quiz = _quiz(store, "Before")

    updated = store.quizzes.update(quiz.id, {"title": "After"})

    assert updated.title == "After"
    assert updated.duration == 20
    assert store.quizzes.get(quiz.id).title == "After"
    assert quiz.title == "Before"


def test_update_unknown_id_returns_none():
    store = EntityStore()
    assert store.quizzes.update(99, {"title": "x"}) is None


def test_delete_reports_whether_record_existed():
    store = EntityStore()
    quiz = _quiz(store)
    question = _question(store, quiz.id, 1)

    assert store.questions.delete(question.id) is True
    assert store.questions.delete(question.id) is False
    assert store.questions.get(question.id) is None


def test_quiz_questions_are_ordered_by_question_number():
    store = EntityStore()
    quiz = _quiz(store)
    other = _quiz(store)
    _question(store, quiz.id, 3)
    _question(store, quiz.id, 1)
    _question(store, other.id, 2)

    numbers = [q.question_number for q in store.quiz_questions(quiz.id)]

    assert numbers == [1, 3]
    assert store.question_count(quiz.id) == 2


def test_participant_lookup_by_email_is_scoped_to_quiz():
    store = EntityStore()
    quiz = _quiz(store)
    other = _quiz(store)
    store.participants.create(quiz_id=quiz.id, name="Ada", email="Ada@Example.com", phone="1")

    assert store.participant_by_email(quiz.id, " ada@example.com ") is not None
    assert store.participant_by_email(other.id, "ada@example.com") is None


def test_answers_filter_by_participant_and_question():
    store = EntityStore()
    for participant_id, question_id in [(1, 1), (1, 2), (2, 1)]:
        store.answers.create(
            participant_id=participant_id,
            question_id=question_id,
            answer="a",
            is_correct=True,
            time_spent=3,
        )

    assert [a.question_id for a in store.participant_answers(1)] == [1, 2]
    assert [a.participant_id for a in store.question_answers(1)] == [1, 2]
    assert all(a.submitted_at is not None for a in store.participant_answers(1))
