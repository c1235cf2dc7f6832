"""Error types raised by the quiz engine.

Callers distinguish failures by class (or by the ``kind`` attribute once the
error has been serialized); the message text is kept stable because clients
match on it.
"""

from __future__ import annotations


class QuizServiceError(Exception):
    """Base class for all engine failures."""

    kind: str = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(QuizServiceError):
    """Raised when caller input is malformed or breaks a quiz rule."""

    kind = "validation"


class NotFoundError(QuizServiceError):
    """Raised when a referenced quiz or question does not exist."""

    kind = "not_found"


class EmptyQuizError(NotFoundError):
    """Raised when questions are requested from a quiz that has none yet."""
