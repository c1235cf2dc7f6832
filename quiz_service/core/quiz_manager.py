"""Business logic for quizzes shared by the API layer and tests."""

from __future__ import annotations

import logging
import time
from typing import Any

from quiz_service.core.errors import EmptyQuizError, NotFoundError
from quiz_service.core.models import Question, Quiz
from quiz_service.core.payloads import parse_question_payload
from quiz_service.core.services.quiz_repository import QuizRepository
from quiz_service.core.services.statistics import QuizStatistics, compute_quiz_statistics
from quiz_service.core.services.submission import SubmissionResult, score_submission

logger = logging.getLogger(__name__)


class QuizManager:
    """Facade over the quiz repository, question validation and scoring."""

    def __init__(self, repository: QuizRepository | None = None) -> None:
        self._repository = repository or QuizRepository()
        self._started_at = time.monotonic()

    # --- Quiz lifecycle ---

    def create_quiz(self, title: Any) -> Quiz:
        return self._repository.create(title)

    def get_quiz(self, quiz_id: Any) -> Quiz:
        return self._repository.get(quiz_id)

    def get_all_quizzes(self) -> list[dict[str, Any]]:
        return self._repository.list_summaries()

    def update_quiz_title(self, quiz_id: Any, new_title: Any) -> Quiz:
        return self._repository.update_title(quiz_id, new_title)

    def delete_quiz(self, quiz_id: Any) -> bool:
        return self._repository.delete(quiz_id)

    def get_quiz_count(self) -> int:
        return self._repository.count()

    def clear_all(self) -> None:
        self._repository.clear()

    # --- Questions ---

    def add_question(self, quiz_id: Any, question_data: Any) -> Question:
        """Validate a question payload and append it to the quiz.

        The question is assembled and checked off to the side; the quiz only
        sees it once every rule has passed.
        """
        quiz = self._repository.get(quiz_id)
        draft = parse_question_payload(question_data)
        question = draft.build()
        question.validate()

        with self._repository.transaction() as now:
            # The quiz may have been deleted while the question was validated.
            quiz = self._repository.get(quiz.id)
            question.created_at = now
            quiz.add_question(question, now)
        logger.info(
            "Added %s question %s to quiz %s", question.type.value, question.id, quiz.id
        )
        return question

    def remove_question(self, quiz_id: Any, question_id: Any) -> bool:
        with self._repository.transaction() as now:
            quiz = self._repository.get(quiz_id)
            if not quiz.remove_question(question_id, now):
                raise NotFoundError("Question not found")
        return True

    def get_quiz_questions(self, quiz_id: Any) -> list[dict[str, Any]]:
        """Return the answer-free projection of a quiz's questions."""
        with self._repository.transaction():
            quiz = self._repository.get(quiz_id)
            if not quiz.questions:
                raise EmptyQuizError("Quiz has no questions yet")
            return quiz.get_questions_without_answers()

    # --- Taking a quiz ---

    def submit_quiz_answers(self, quiz_id: Any, answers: Any) -> SubmissionResult:
        with self._repository.transaction() as now:
            quiz = self._repository.get(quiz_id)
            return score_submission(quiz, answers, submitted_at=now)

    # --- Statistics & health ---

    def get_quiz_stats(self, quiz_id: Any) -> QuizStatistics:
        with self._repository.transaction():
            quiz = self._repository.get(quiz_id)
            return compute_quiz_statistics(quiz)

    def get_uptime_seconds(self) -> float:
        return time.monotonic() - self._started_at
