"""Domain errors raised by the quiz manager and translated by the API layer."""

from __future__ import annotations


class QuizError(Exception):
    """Base class for domain failures with a client-facing message."""


class NotFoundError(QuizError, LookupError):
    """Raised when an operation addresses an id that does not exist."""

    def __init__(self, kind: str, entity_id: int) -> None:
        super().__init__(f"{kind} not found")
        self.kind = kind
        self.entity_id = entity_id


class ConflictError(QuizError):
    """Raised when a request is well-formed but clashes with current state."""


class DuplicateRegistrationError(ConflictError):
    """Raised when an email is already registered for the quiz."""


class DuplicateAnswerError(ConflictError):
    """Raised when a participant answers the same question twice."""


class InvalidQuizStateError(ConflictError):
    """Raised when a lifecycle action is not allowed from the current status."""


class InvalidQuestionError(QuizError, ValueError):
    """Raised when a question definition is inconsistent with its type."""
