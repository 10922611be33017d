"""Leaderboard ranking for quiz participants."""

from __future__ import annotations

from collections.abc import Iterable

from live_quiz.core.models import LeaderboardEntry, Participant


def _sort_key(participant: Participant) -> tuple[int, int, int, int]:
    return (
        -participant.score,
        -participant.accuracy,
        participant.average_response_time,
        participant.id,
    )


def rank_participants(participants: Iterable[Participant]) -> list[LeaderboardEntry]:
    """Return participants ordered best first with 1-based, unshared ranks.

    Score and accuracy rank descending, average response time ascending. Exact
    ties fall back to registration order (lower id first).
    """
    ordered = sorted(participants, key=_sort_key)
    return [
        LeaderboardEntry(
            id=participant.id,
            name=participant.name,
            email=participant.email,
            score=participant.score,
            accuracy=participant.accuracy,
            average_response_time=participant.average_response_time,
            rank=position,
        )
        for position, participant in enumerate(ordered, start=1)
    ]


def rank_of(participant_id: int, participants: Iterable[Participant]) -> int:
    """Rank of one participant among ``participants``, or 0 if absent."""
    for entry in rank_participants(participants):
        if entry.id == participant_id:
            return entry.rank
    return 0

