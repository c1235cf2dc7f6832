from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from quiz_service.core.quiz_manager import QuizManager
from quiz_service.core.services.quiz_repository import QuizRepository


class SteppingClock:
    """Deterministic clock that advances one second per reading."""

    def __init__(self) -> None:
        self.current = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


@pytest.fixture
def clock() -> SteppingClock:
    return SteppingClock()


@pytest.fixture
def manager(clock: SteppingClock) -> QuizManager:
    return QuizManager(repository=QuizRepository(clock=clock))


def _option_id(question, text: str) -> str:
    return next(option.id for option in question.options if option.text == text)


@pytest.fixture
def option_id():
    """Look up an option id on a question by its text."""
    return _option_id


@pytest.fixture
def math_quiz(manager: QuizManager):
    """Quiz with one single-choice and one multiple-choice question."""
    quiz = manager.create_quiz("Math Quiz")
    q1 = manager.add_question(
        quiz.id,
        {
            "text": "What is 2+2?",
            "type": "single_choice",
            "options": [
                {"text": "3", "isCorrect": False},
                {"text": "4", "isCorrect": True},
                {"text": "5", "isCorrect": False},
            ],
        },
    )
    q2 = manager.add_question(
        quiz.id,
        {
            "text": "Select primes",
            "type": "multiple_choice",
            "options": [
                {"text": "2", "isCorrect": True},
                {"text": "3", "isCorrect": True},
                {"text": "4", "isCorrect": False},
            ],
        },
    )
    return quiz, q1, q2
