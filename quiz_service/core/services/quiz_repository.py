"""Service for storing quizzes in process memory."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime
import logging
from threading import RLock
from typing import Any

from quiz_service.constants.quiz_constants import QUIZ_TITLE_MAX_LENGTH, QUIZ_TITLE_MIN_LENGTH
from quiz_service.core.errors import NotFoundError, ValidationError
from quiz_service.core.models import Quiz, utc_now

logger = logging.getLogger(__name__)


class QuizRepository:
    """Owns every quiz; keyed by id, iterated in insertion order.

    One coarse lock guards the table and the question lists of the quizzes it
    holds. Callers that mutate a quiz obtained from ``get`` do so inside
    ``transaction()``.
    """

    def __init__(self, clock: Callable[[], datetime] = utc_now) -> None:
        self._quizzes: dict[str, Quiz] = {}
        self._lock = RLock()
        self._clock = clock

    @contextmanager
    def transaction(self) -> Iterator[datetime]:
        """Hold the table lock and yield the timestamp for this mutation."""
        with self._lock:
            yield self._clock()

    def create(self, title: Any) -> Quiz:
        trimmed = self._validate_new_title(title)
        with self.transaction() as now:
            quiz = Quiz(title=trimmed, created_at=now)
            self._quizzes[quiz.id] = quiz
        logger.info("Created quiz %s (%r)", quiz.id, quiz.title)
        return quiz

    def get(self, quiz_id: Any) -> Quiz:
        self._validate_quiz_id(quiz_id)
        with self._lock:
            quiz = self._quizzes.get(quiz_id)
        if quiz is None:
            raise NotFoundError("Quiz not found")
        return quiz

    def list_summaries(self) -> list[dict[str, Any]]:
        with self._lock:
            return [quiz.summary() for quiz in self._quizzes.values()]

    def delete(self, quiz_id: Any) -> bool:
        with self._lock:
            quiz = self.get(quiz_id)
            # Questions and options are owned by the quiz and go with it.
            del self._quizzes[quiz.id]
        logger.info("Deleted quiz %s", quiz_id)
        return True

    def update_title(self, quiz_id: Any, new_title: Any) -> Quiz:
        with self.transaction() as now:
            quiz = self.get(quiz_id)
            if not new_title or not isinstance(new_title, str):
                raise ValidationError("New title must be a non-empty string")
            trimmed = new_title.strip()
            if not trimmed:
                raise ValidationError("Quiz title cannot be empty")
            if len(trimmed) > QUIZ_TITLE_MAX_LENGTH:
                raise ValidationError(
                    f"Quiz title cannot exceed {QUIZ_TITLE_MAX_LENGTH} characters"
                )
            quiz.rename(trimmed, now)
        return quiz

    def count(self) -> int:
        with self._lock:
            return len(self._quizzes)

    def clear(self) -> None:
        with self._lock:
            self._quizzes.clear()

    @staticmethod
    def _validate_new_title(title: Any) -> str:
        if title is None:
            raise ValidationError("Quiz title is required")
        if not isinstance(title, str):
            raise ValidationError("Quiz title must be a string")

        trimmed = title.strip()
        if not trimmed:
            raise ValidationError("Quiz title is required")
        if len(trimmed) < QUIZ_TITLE_MIN_LENGTH:
            raise ValidationError(
                f"Quiz title must be at least {QUIZ_TITLE_MIN_LENGTH} characters long"
            )
        if len(trimmed) > QUIZ_TITLE_MAX_LENGTH:
            raise ValidationError(f"Quiz title cannot exceed {QUIZ_TITLE_MAX_LENGTH} characters")
        return trimmed

    @staticmethod
    def _validate_quiz_id(quiz_id: Any) -> None:
        if not quiz_id:
            raise ValidationError("Quiz ID is required")
        if not isinstance(quiz_id, str):
            raise ValidationError("Quiz ID must be a string")
