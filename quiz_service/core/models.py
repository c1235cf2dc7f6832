"""Domain models for the quiz service."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import uuid4

from quiz_service.constants.quiz_constants import TEXT_QUESTION_MAX_LENGTH
from quiz_service.core.errors import ValidationError
from quiz_service.core.markdown_math_renderer import render_question_text


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid4())


def isoformat(moment: datetime) -> str:
    """Serialize a timestamp as UTC ISO-8601."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat()


class QuestionType(str, Enum):
    """Closed set of supported question kinds."""

    SINGLE_CHOICE = "single_choice"
    MULTIPLE_CHOICE = "multiple_choice"
    TEXT = "text"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


@dataclass(frozen=True, slots=True)
class Option:
    """One selectable choice belonging to a question."""

    id: str
    text: str
    is_correct: bool = False

    @classmethod
    def create(cls, text: Any, is_correct: bool = False) -> Option:
        if not text or not isinstance(text, str):
            raise ValidationError("Option text must be a non-empty string")
        trimmed = text.strip()
        if not trimmed:
            raise ValidationError("Option text cannot be empty after trimming")
        return cls(id=new_id(), text=trimmed, is_correct=bool(is_correct))

    def to_reference(self) -> dict[str, str]:
        return {"id": self.id, "text": self.text}

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "text": self.text, "isCorrect": self.is_correct}


@dataclass(slots=True)
class Question:
    """A prompt of a fixed type with options, some of them marked correct."""

    text: str
    type: QuestionType = QuestionType.SINGLE_CHOICE
    id: str = field(default_factory=new_id)
    options: list[Option] = field(default_factory=list)
    created_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        self.text = self.text.strip()
        self.type = QuestionType(self.type)

    def add_option(self, text: Any, is_correct: bool = False) -> Option:
        option = Option.create(text, is_correct)
        self.options.append(option)
        return option

    def find_option(self, option_id: Any) -> Option | None:
        return next((option for option in self.options if option.id == option_id), None)

    def get_correct_option_ids(self) -> list[str]:
        return [option.id for option in self.options if option.is_correct]

    def is_answer_correct(self, selected_option_ids: Any) -> bool:
        """Decide whether the selection satisfies this question.

        Malformed selections are judged incorrect instead of raising, so a
        quiz-taker never sees the difference between a wrong and a broken
        answer.
        """
        if not isinstance(selected_option_ids, (list, tuple)):
            return False

        selected: list[Any] = []
        for option_id in selected_option_ids:
            if option_id and option_id not in selected:
                selected.append(option_id)

        correct_ids = self.get_correct_option_ids()
        if not correct_ids:
            return False
        if not selected:
            return False

        known_ids = [option.id for option in self.options]
        if any(option_id not in known_ids for option_id in selected):
            return False

        evaluate = _ANSWER_EVALUATORS.get(self.type)
        if evaluate is None:
            return False
        return evaluate(selected, correct_ids)

    def validate(self) -> None:
        """Check the answer key against the rules for this question type."""
        if not self.text:
            raise ValidationError("Question text cannot be empty")
        if not self.options:
            raise ValidationError("At least one option is required")

        correct_options = [option for option in self.options if option.is_correct]
        if not correct_options:
            raise ValidationError("At least one correct answer is required")

        check = _STRUCTURE_VALIDATORS.get(self.type)
        if check is None:
            raise ValidationError(f"Invalid question type: {self.type}")
        check(self, correct_options)

    def public_view(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "textHtml": render_question_text(self.text),
            "type": self.type.value,
            "options": [option.to_reference() for option in self.options],
        }

    def metadata(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "type": self.type.value,
            "optionCount": len(self.options),
            "createdAt": isoformat(self.created_at),
        }

    def full_details(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "type": self.type.value,
            "options": [option.to_dict() for option in self.options],
            "correctOptionIds": self.get_correct_option_ids(),
            "createdAt": isoformat(self.created_at),
        }


def _single_choice_correct(selected: list[str], correct: list[str]) -> bool:
    return len(selected) == 1 and selected[0] in correct


def _multiple_choice_correct(selected: list[str], correct: list[str]) -> bool:
    if len(selected) != len(correct):
        return False
    return all(option_id in correct for option_id in selected) and all(
        option_id in selected for option_id in correct
    )


def _text_correct(selected: list[str], correct: list[str]) -> bool:
    # Any one of the accepted answers is enough.
    return any(option_id in correct for option_id in selected)


def _validate_single_choice(question: Question, correct_options: list[Option]) -> None:
    if len(correct_options) != 1:
        raise ValidationError("Single choice questions can only have one correct answer")
    if len(question.options) < 2:
        raise ValidationError("Single choice questions must have at least 2 options")


def _validate_multiple_choice(question: Question, correct_options: list[Option]) -> None:
    if len(correct_options) < 2:
        raise ValidationError("Multiple choice questions must have at least 2 correct answers")
    if len(correct_options) == len(question.options):
        raise ValidationError("Multiple choice questions must have at least one incorrect option")
    if len(question.options) < 3:
        raise ValidationError("Multiple choice questions must have at least 3 options")


def _validate_text(question: Question, correct_options: list[Option]) -> None:
    if len(question.text) > TEXT_QUESTION_MAX_LENGTH:
        raise ValidationError(
            f"Text-based question cannot exceed {TEXT_QUESTION_MAX_LENGTH} characters"
        )


# Both tables must cover every QuestionType member.
_ANSWER_EVALUATORS = {
    QuestionType.SINGLE_CHOICE: _single_choice_correct,
    QuestionType.MULTIPLE_CHOICE: _multiple_choice_correct,
    QuestionType.TEXT: _text_correct,
}

_STRUCTURE_VALIDATORS = {
    QuestionType.SINGLE_CHOICE: _validate_single_choice,
    QuestionType.MULTIPLE_CHOICE: _validate_multiple_choice,
    QuestionType.TEXT: _validate_text,
}


@dataclass(slots=True)
class Quiz:
    """A named, ordered collection of questions."""

    title: str
    id: str = field(default_factory=new_id)
    questions: list[Question] = field(default_factory=list)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        self.title = self.title.strip()
        if self.updated_at is None:
            self.updated_at = self.created_at

    def touch(self, moment: datetime) -> None:
        """Advance ``updated_at``; it never moves backwards."""
        if self.updated_at is None or moment > self.updated_at:
            self.updated_at = moment

    def add_question(self, question: Question, moment: datetime) -> None:
        if not isinstance(question, Question):
            raise ValidationError("Invalid question object")
        self.questions.append(question)
        self.touch(moment)

    def find_question_by_id(self, question_id: Any) -> Question | None:
        return next((question for question in self.questions if question.id == question_id), None)

    def remove_question(self, question_id: Any, moment: datetime) -> bool:
        index = next(
            (i for i, question in enumerate(self.questions) if question.id == question_id), -1
        )
        if index == -1:
            return False
        self.questions.pop(index)
        self.touch(moment)
        return True

    def rename(self, title: str, moment: datetime) -> None:
        self.title = title
        self.touch(moment)

    def get_questions_without_answers(self) -> list[dict[str, Any]]:
        return [question.public_view() for question in self.questions]

    def summary(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "questionCount": len(self.questions),
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at or self.created_at),
        }

    def full_details(self) -> dict[str, Any]:
        details = self.summary()
        details["questions"] = [question.full_details() for question in self.questions]
        return details
