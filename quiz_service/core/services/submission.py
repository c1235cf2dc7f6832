"""Scoring of submitted answers against a quiz's questions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
import logging
from typing import Any

from quiz_service.core.errors import ValidationError
from quiz_service.core.models import Question, QuestionType, Quiz, isoformat
from quiz_service.core.payloads import AnswerDraft, parse_answers_payload
from quiz_service.core.services.statistics import ScoreSummary, summarize_score

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class QuestionResult:
    """Per-question outcome returned to the quiz-taker."""

    question_id: str
    question_text: str
    question_type: QuestionType
    selected_option_ids: list[Any]
    correct_option_ids: list[str]
    is_correct: bool
    selected_options: list[dict[str, str]]
    correct_options: list[dict[str, str]]

    def to_dict(self) -> dict[str, Any]:
        return {
            "questionId": self.question_id,
            "questionText": self.question_text,
            "questionType": self.question_type.value,
            "selectedOptionIds": list(self.selected_option_ids),
            "correctOptionIds": list(self.correct_option_ids),
            "isCorrect": self.is_correct,
            "selectedOptions": list(self.selected_options),
            "correctOptions": list(self.correct_options),
        }


@dataclass(slots=True)
class SubmissionResult:
    summary: ScoreSummary
    results: list[QuestionResult]
    submitted_at: datetime

    def to_dict(self) -> dict[str, Any]:
        payload = self.summary.to_dict()
        payload["results"] = [result.to_dict() for result in self.results]
        payload["submittedAt"] = isoformat(self.submitted_at)
        return payload


def resolve_options(question: Question, option_ids: list[Any]) -> list[dict[str, str]]:
    """Map ids to ``{id, text}`` pairs, skipping ids that no longer resolve."""
    resolved: list[dict[str, str]] = []
    for option_id in option_ids:
        option = question.find_option(option_id)
        if option is not None:
            resolved.append(option.to_reference())
    return resolved


def evaluate_answer(question: Question, answer: AnswerDraft) -> QuestionResult:
    valid_ids = {option.id for option in question.options}
    for option_id in answer.selected_option_ids:
        if not isinstance(option_id, str) or option_id not in valid_ids:
            raise ValidationError(f"Invalid option ID: {option_id} for question {question.id}")

    selected = list(answer.selected_option_ids)
    correct_ids = question.get_correct_option_ids()
    return QuestionResult(
        question_id=question.id,
        question_text=question.text,
        question_type=question.type,
        selected_option_ids=selected,
        correct_option_ids=correct_ids,
        is_correct=question.is_answer_correct(selected),
        selected_options=resolve_options(question, selected),
        correct_options=resolve_options(question, correct_ids),
    )


def score_submission(quiz: Quiz, answers: Any, submitted_at: datetime) -> SubmissionResult:
    """Validate and score a whole submission.

    Nothing is returned unless every answer passes validation, so callers
    never see a partially scored result.
    """
    if not quiz.questions:
        raise ValidationError("Quiz has no questions")

    drafts = parse_answers_payload(answers, [question.id for question in quiz.questions])

    results: list[QuestionResult] = []
    for draft in drafts:
        question = quiz.find_question_by_id(draft.question_id)
        if question is None:
            # parse_answers_payload already rejected unknown ids
            raise ValidationError(f"Question {draft.question_id} not found in this quiz")
        results.append(evaluate_answer(question, draft))

    summary = summarize_score([result.is_correct for result in results], len(quiz.questions))
    logger.info(
        "Scored submission for quiz %s: %s/%s (%s%%, grade %s)",
        quiz.id,
        summary.score,
        summary.total,
        summary.percentage,
        summary.grade,
    )
    return SubmissionResult(summary=summary, results=results, submitted_at=submitted_at)
