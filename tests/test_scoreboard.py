from live_quiz.core.models import Participant
from live_quiz.core.services.scoreboard import rank_of, rank_participants


def _participant(pid, score, accuracy, avg_time):
    return Participant(
        id=pid,
        quiz_id=1,
        name=f"P{pid}",
        email=f"p{pid}@example.com",
        phone="000",
        score=score,
        accuracy=accuracy,
        average_response_time=avg_time,
    )


def test_ranks_by_score_then_accuracy():
    participants = [
        _participant(1, 50, 90, 5),
        _participant(2, 80, 70, 5),
        _participant(3, 80, 95, 5),
    ]

    ranked = rank_participants(participants)

    assert [(e.score, e.accuracy) for e in ranked] == [(80, 95), (80, 70), (50, 90)]
    assert [e.id for e in ranked] == [3, 2, 1]
    assert [e.rank for e in ranked] == [1, 2, 3]


def test_faster_average_time_breaks_score_and_accuracy_ties():
    ranked = rank_participants([_participant(1, 40, 80, 9), _participant(2, 40, 80, 4)])
    assert [e.id for e in ranked] == [2, 1]


def test_full_ties_fall_back_to_registration_order_with_distinct_ranks():
    ranked = rank_participants([_participant(5, 10, 50, 3), _participant(2, 10, 50, 3)])
    assert [(e.id, e.rank) for e in ranked] == [(2, 1), (5, 2)]


def test_rank_of_missing_participant_is_zero():
    participants = [_participant(1, 10, 10, 1)]
    assert rank_of(1, participants) == 1
    assert rank_of(42, participants) == 0


def test_empty_leaderboard():
    assert rank_participants([]) == []
