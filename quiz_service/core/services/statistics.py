"""Score aggregation, letter grades and per-quiz statistics."""

from __future__ import annotations

from dataclasses import dataclass, field
import math
from typing import Any

from quiz_service.constants.quiz_constants import FAILING_GRADE, GRADE_BANDS, PASS_PERCENTAGE
from quiz_service.core.models import Quiz, QuestionType


def round_half_up(value: float, digits: int = 0) -> float:
    """Round non-negative values the way quiz-takers expect (0.5 goes up)."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def calculate_grade(percentage: int) -> str:
    for threshold, grade in GRADE_BANDS:
        if percentage >= threshold:
            return grade
    return FAILING_GRADE


@dataclass(slots=True)
class ScoreSummary:
    """Aggregate outcome of one submission."""

    score: int
    total: int
    percentage: int
    answered_count: int
    unanswered_count: int
    passed: bool
    grade: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "total": self.total,
            "percentage": self.percentage,
            "answeredCount": self.answered_count,
            "unansweredCount": self.unanswered_count,
            "passed": self.passed,
            "grade": self.grade,
        }


def summarize_score(correct_flags: list[bool], total_questions: int) -> ScoreSummary:
    """Aggregate per-question correctness against the quiz's full question count."""
    correct_count = sum(1 for flag in correct_flags if flag)
    percentage = (
        int(round_half_up(correct_count / total_questions * 100)) if total_questions > 0 else 0
    )
    return ScoreSummary(
        score=correct_count,
        total=total_questions,
        percentage=percentage,
        answered_count=len(correct_flags),
        unanswered_count=total_questions - len(correct_flags),
        passed=percentage >= PASS_PERCENTAGE,
        grade=calculate_grade(percentage),
    )


@dataclass(slots=True)
class QuizStatistics:
    """Structural counts for a quiz's question set."""

    total_questions: int = 0
    question_types: dict[str, int] = field(
        default_factory=lambda: {question_type.value: 0 for question_type in QuestionType}
    )
    total_options: int = 0
    average_options_per_question: float = 0
    total_correct_answers: int = 0
    average_correct_answers_per_question: float = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalQuestions": self.total_questions,
            "questionTypes": dict(self.question_types),
            "totalOptions": self.total_options,
            "averageOptionsPerQuestion": self.average_options_per_question,
            "totalCorrectAnswers": self.total_correct_answers,
            "averageCorrectAnswersPerQuestion": self.average_correct_answers_per_question,
        }


def compute_quiz_statistics(quiz: Quiz) -> QuizStatistics:
    stats = QuizStatistics(total_questions=len(quiz.questions))
    for question in quiz.questions:
        stats.question_types[question.type.value] += 1
        stats.total_options += len(question.options)
        stats.total_correct_answers += len(question.get_correct_option_ids())

    if stats.total_questions > 0:
        stats.average_options_per_question = round_half_up(
            stats.total_options / stats.total_questions, 1
        )
        stats.average_correct_answers_per_question = round_half_up(
            stats.total_correct_answers / stats.total_questions, 1
        )
    return stats
