"""Input structures for question creation and answer submission.

Raw JSON-ish data is converted into explicit drafts in a single ordered pass.
The first rule that fails is reported, and the messages are part of the
public contract.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from quiz_service.constants.quiz_constants import (
    MAX_OPTIONS_PER_QUESTION,
    OPTION_TEXT_MAX_LENGTH,
    QUESTION_TEXT_MAX_LENGTH,
    TEXT_QUESTION_MAX_LENGTH,
)
from quiz_service.core.errors import ValidationError
from quiz_service.core.models import Question, QuestionType


@dataclass(frozen=True, slots=True)
class OptionDraft:
    text: str
    is_correct: bool = False


@dataclass(frozen=True, slots=True)
class QuestionDraft:
    text: str
    type: QuestionType
    options: tuple[OptionDraft, ...]

    def build(self) -> Question:
        """Create an unattached question carrying freshly generated ids."""
        question = Question(text=self.text, type=self.type)
        for option in self.options:
            question.add_option(option.text, option.is_correct)
        return question


@dataclass(frozen=True, slots=True)
class AnswerDraft:
    question_id: str
    selected_option_ids: tuple[Any, ...]


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def parse_question_payload(payload: Any) -> QuestionDraft:
    """Validate a question-creation payload and return its draft."""
    if not payload or not isinstance(payload, dict):
        raise ValidationError("Question data is required")

    raw_text = payload.get("text")
    if not raw_text or not isinstance(raw_text, str):
        raise ValidationError("Question text is required and must be a string")

    text = raw_text.strip()
    if not text:
        raise ValidationError("Question text cannot be empty")

    raw_type = payload.get("type")
    if raw_type == QuestionType.TEXT.value and len(text) > TEXT_QUESTION_MAX_LENGTH:
        raise ValidationError(
            f"Text-based question cannot exceed {TEXT_QUESTION_MAX_LENGTH} characters"
        )
    if len(text) > QUESTION_TEXT_MAX_LENGTH:
        raise ValidationError(
            f"Question text cannot exceed {QUESTION_TEXT_MAX_LENGTH} characters"
        )

    if not raw_type:
        raise ValidationError("Question type is required")
    if raw_type not in QuestionType.values():
        raise ValidationError(
            f'Invalid question type: "{raw_type}". '
            f"Must be one of: {', '.join(QuestionType.values())}"
        )

    options = _parse_options(payload.get("options"))
    return QuestionDraft(text=text, type=QuestionType(raw_type), options=options)


def _parse_options(raw_options: Any) -> tuple[OptionDraft, ...]:
    if not _is_sequence(raw_options):
        raise ValidationError("Options must be an array")
    if len(raw_options) == 0:
        raise ValidationError("At least one option is required")
    if len(raw_options) > MAX_OPTIONS_PER_QUESTION:
        raise ValidationError(
            f"Question cannot have more than {MAX_OPTIONS_PER_QUESTION} options"
        )

    seen_texts: set[str] = set()
    drafts: list[OptionDraft] = []
    for position, raw_option in enumerate(raw_options, start=1):
        if not raw_option or not isinstance(raw_option, dict):
            raise ValidationError(f"Option {position} must be an object")

        raw_text = raw_option.get("text")
        if not raw_text or not isinstance(raw_text, str):
            raise ValidationError(f"Option {position} must have text")

        text = raw_text.strip()
        if not text:
            raise ValidationError(f"Option {position} text cannot be empty")
        if len(text) > OPTION_TEXT_MAX_LENGTH:
            raise ValidationError(
                f"Option {position} text cannot exceed {OPTION_TEXT_MAX_LENGTH} characters"
            )

        folded = text.lower()
        if folded in seen_texts:
            raise ValidationError(f'Duplicate option text found: "{text}"')
        seen_texts.add(folded)

        is_correct = raw_option.get("isCorrect", False)
        if "isCorrect" in raw_option and not isinstance(is_correct, bool):
            raise ValidationError(f"Option {position} isCorrect must be a boolean")

        drafts.append(OptionDraft(text=text, is_correct=bool(is_correct)))
    return tuple(drafts)


def parse_answers_payload(answers: Any, question_ids: list[str]) -> list[AnswerDraft]:
    """Check the submission envelope against the quiz's question ids.

    Option ids are not looked at here; they are checked per question while
    scoring.
    """
    if not _is_sequence(answers):
        raise ValidationError("Answers must be an array")
    if len(answers) == 0:
        raise ValidationError("At least one answer must be provided")
    if len(answers) > len(question_ids):
        raise ValidationError("Number of answers exceeds number of questions")

    known_ids = set(question_ids)
    answered_ids: set[str] = set()
    drafts: list[AnswerDraft] = []
    for position, answer in enumerate(answers, start=1):
        if not answer or not isinstance(answer, dict):
            raise ValidationError(f"Answer {position} must be an object")

        question_id = answer.get("questionId")
        if not question_id:
            raise ValidationError(f"Answer {position} is missing questionId")
        if not isinstance(question_id, str) or question_id not in known_ids:
            raise ValidationError(f"Question {question_id} not found in this quiz")
        if question_id in answered_ids:
            raise ValidationError(f"Duplicate answer for question {question_id}")
        answered_ids.add(question_id)

        selected = answer.get("selectedOptionIds")
        if not _is_sequence(selected):
            raise ValidationError(
                f"Answer {position} must have selectedOptionIds as an array"
            )
        if len(selected) == 0:
            raise ValidationError(f"Answer {position} must have at least one selected option")

        drafts.append(AnswerDraft(question_id=question_id, selected_option_ids=tuple(selected)))
    return drafts
