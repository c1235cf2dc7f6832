from __future__ import annotations

import itertools

import pytest

from quiz_service.core.errors import EmptyQuizError, NotFoundError, ValidationError


class TestCreateQuiz:
    def test_creates_quiz_with_trimmed_title(self, manager):
        quiz = manager.create_quiz("  Spaced Title  ")
        assert quiz.title == "Spaced Title"
        assert quiz.questions == []
        assert quiz.created_at == quiz.updated_at

    @pytest.mark.parametrize(
        "title, message",
        [
            (None, "Quiz title is required"),
            ("", "Quiz title is required"),
            ("   ", "Quiz title is required"),
            (123, "Quiz title must be a string"),
            ({}, "Quiz title must be a string"),
            ("ab", "Quiz title must be at least 3 characters long"),
            ("a" * 201, "Quiz title cannot exceed 200 characters"),
        ],
    )
    def test_rejects_bad_titles(self, manager, title, message):
        with pytest.raises(ValidationError) as excinfo:
            manager.create_quiz(title)
        assert str(excinfo.value) == message
        assert manager.get_quiz_count() == 0


class TestRepositoryOperations:
    def test_get_quiz_errors(self, manager):
        with pytest.raises(ValidationError, match="Quiz ID is required"):
            manager.get_quiz("")
        with pytest.raises(ValidationError, match="Quiz ID must be a string"):
            manager.get_quiz(42)
        with pytest.raises(NotFoundError, match="Quiz not found"):
            manager.get_quiz("missing")

    def test_list_in_creation_order(self, manager):
        titles = ["First quiz", "Second quiz", "Third quiz"]
        for title in titles:
            manager.create_quiz(title)
        summaries = manager.get_all_quizzes()
        assert [summary["title"] for summary in summaries] == titles
        assert set(summaries[0]) == {"id", "title", "questionCount", "createdAt", "updatedAt"}

    def test_delete_cascades(self, manager, math_quiz):
        quiz, _, _ = math_quiz
        assert manager.delete_quiz(quiz.id) is True
        assert manager.get_quiz_count() == 0
        with pytest.raises(NotFoundError):
            manager.get_quiz_questions(quiz.id)
        with pytest.raises(NotFoundError, match="Quiz not found"):
            manager.delete_quiz(quiz.id)

    def test_update_title(self, manager):
        quiz = manager.create_quiz("Old title")
        before = quiz.updated_at
        updated = manager.update_quiz_title(quiz.id, "  New title ")
        assert updated.title == "New title"
        assert updated.updated_at > before

    @pytest.mark.parametrize(
        "title, message",
        [
            (None, "New title must be a non-empty string"),
            (5, "New title must be a non-empty string"),
            ("   ", "Quiz title cannot be empty"),
            ("b" * 201, "Quiz title cannot exceed 200 characters"),
        ],
    )
    def test_update_title_rejects_bad_titles(self, manager, title, message):
        quiz = manager.create_quiz("Old title")
        with pytest.raises(ValidationError) as excinfo:
            manager.update_quiz_title(quiz.id, title)
        assert str(excinfo.value) == message
        assert manager.get_quiz(quiz.id).title == "Old title"

    def test_clear_all(self, manager):
        manager.create_quiz("One quiz")
        manager.create_quiz("Two quiz")
        manager.clear_all()
        assert manager.get_all_quizzes() == []


class TestQuestions:
    def test_add_question_advances_updated_at(self, manager, math_quiz):
        quiz, q1, q2 = math_quiz
        assert quiz.updated_at == q2.created_at
        assert quiz.updated_at > quiz.created_at
        assert [question.id for question in quiz.questions] == [q1.id, q2.id]

    def test_add_question_metadata(self, math_quiz):
        _, q1, _ = math_quiz
        metadata = q1.metadata()
        assert metadata["text"] == "What is 2+2?"
        assert metadata["type"] == "single_choice"
        assert metadata["optionCount"] == 3

    def test_failed_add_leaves_quiz_untouched(self, manager, math_quiz):
        quiz, _, _ = math_quiz
        stamp = quiz.updated_at
        with pytest.raises(
            ValidationError,
            match="Multiple choice questions must have at least one incorrect option",
        ):
            manager.add_question(
                quiz.id,
                {
                    "text": "All correct",
                    "type": "multiple_choice",
                    "options": [
                        {"text": "a", "isCorrect": True},
                        {"text": "b", "isCorrect": True},
                        {"text": "c", "isCorrect": True},
                    ],
                },
            )
        assert len(quiz.questions) == 2
        assert quiz.updated_at == stamp

    def test_add_question_to_missing_quiz(self, manager):
        with pytest.raises(NotFoundError, match="Quiz not found"):
            manager.add_question("missing", {"text": "Q", "type": "text", "options": [{"text": "a", "isCorrect": True}]})

    def test_questions_projection_hides_answers(self, manager, math_quiz):
        quiz, q1, q2 = math_quiz
        questions = manager.get_quiz_questions(quiz.id)
        assert [question["id"] for question in questions] == [q1.id, q2.id]
        for question in questions:
            assert "isCorrect" not in question
            for option in question["options"]:
                assert "isCorrect" not in option

    def test_questions_of_empty_quiz(self, manager):
        quiz = manager.create_quiz("Empty quiz")
        with pytest.raises(EmptyQuizError, match="Quiz has no questions yet"):
            manager.get_quiz_questions(quiz.id)

    def test_remove_question(self, manager, math_quiz):
        quiz, q1, q2 = math_quiz
        stamp = quiz.updated_at
        assert manager.remove_question(quiz.id, q1.id) is True
        assert [question.id for question in quiz.questions] == [q2.id]
        assert quiz.updated_at > stamp
        with pytest.raises(NotFoundError, match="Question not found"):
            manager.remove_question(quiz.id, q1.id)


class TestSubmission:
    def test_perfect_score(self, manager, math_quiz, option_id):
        quiz, q1, q2 = math_quiz
        result = manager.submit_quiz_answers(
            quiz.id,
            [
                {"questionId": q1.id, "selectedOptionIds": [option_id(q1, "4")]},
                {"questionId": q2.id, "selectedOptionIds": [option_id(q2, "2"), option_id(q2, "3")]},
            ],
        )
        summary = result.summary
        assert (summary.score, summary.total, summary.percentage) == (2, 2, 100)
        assert summary.grade == "A"
        assert summary.passed is True
        assert all(entry.is_correct for entry in result.results)

    def test_partial_submission(self, manager, math_quiz, option_id):
        quiz, q1, _ = math_quiz
        result = manager.submit_quiz_answers(
            quiz.id, [{"questionId": q1.id, "selectedOptionIds": [option_id(q1, "5")]}]
        )
        assert result.results[0].is_correct is False
        assert result.summary.unanswered_count == 1
        assert result.summary.answered_count == 1
        assert result.summary.score == 0

    def test_result_details(self, manager, math_quiz, option_id):
        quiz, q1, _ = math_quiz
        selected = option_id(q1, "5")
        payload = manager.submit_quiz_answers(
            quiz.id, [{"questionId": q1.id, "selectedOptionIds": [selected]}]
        ).to_dict()
        entry = payload["results"][0]
        assert entry["questionText"] == "What is 2+2?"
        assert entry["questionType"] == "single_choice"
        assert entry["selectedOptionIds"] == [selected]
        assert entry["correctOptionIds"] == [option_id(q1, "4")]
        assert entry["selectedOptions"] == [{"id": selected, "text": "5"}]
        assert entry["correctOptions"] == [{"id": option_id(q1, "4"), "text": "4"}]
        assert payload["submittedAt"]

    def test_empty_answers(self, manager, math_quiz):
        quiz, _, _ = math_quiz
        with pytest.raises(ValidationError, match="At least one answer must be provided"):
            manager.submit_quiz_answers(quiz.id, [])

    def test_duplicate_question(self, manager, math_quiz, option_id):
        quiz, q1, _ = math_quiz
        answer = {"questionId": q1.id, "selectedOptionIds": [option_id(q1, "4")]}
        with pytest.raises(ValidationError, match=f"Duplicate answer for question {q1.id}"):
            manager.submit_quiz_answers(quiz.id, [answer, dict(answer)])

    def test_unknown_option_aborts_whole_submission(self, manager, math_quiz, option_id):
        quiz, q1, q2 = math_quiz
        with pytest.raises(ValidationError, match=f"Invalid option ID: bogus for question {q2.id}"):
            manager.submit_quiz_answers(
                quiz.id,
                [
                    {"questionId": q1.id, "selectedOptionIds": [option_id(q1, "4")]},
                    {"questionId": q2.id, "selectedOptionIds": [option_id(q2, "2"), "bogus"]},
                ],
            )

    def test_quiz_without_questions(self, manager):
        quiz = manager.create_quiz("Empty quiz")
        with pytest.raises(ValidationError, match="Quiz has no questions"):
            manager.submit_quiz_answers(quiz.id, [{"questionId": "x", "selectedOptionIds": ["y"]}])

    def test_missing_quiz(self, manager):
        with pytest.raises(NotFoundError, match="Quiz not found"):
            manager.submit_quiz_answers("missing", [])

    def test_duplicate_selected_ids_do_not_change_outcome(self, manager, math_quiz, option_id):
        quiz, q1, _ = math_quiz
        correct = option_id(q1, "4")
        result = manager.submit_quiz_answers(
            quiz.id, [{"questionId": q1.id, "selectedOptionIds": [correct, correct]}]
        )
        assert result.results[0].is_correct is True

    def test_score_is_independent_of_answer_order(self, manager, option_id):
        quiz = manager.create_quiz("Ordering quiz")
        answers = []
        for index in range(4):
            question = manager.add_question(
                quiz.id,
                {
                    "text": f"Question {index}",
                    "type": "single_choice",
                    "options": [{"text": "right", "isCorrect": True}, {"text": "wrong"}],
                },
            )
            choice = "right" if index % 2 == 0 else "wrong"
            answers.append({"questionId": question.id, "selectedOptionIds": [option_id(question, choice)]})

        outcomes = {
            (summary.score, summary.percentage, summary.grade)
            for summary in (
                manager.submit_quiz_answers(quiz.id, list(order)).summary
                for order in itertools.permutations(answers)
            )
        }
        assert outcomes == {(2, 50, "F")}

    def test_submission_does_not_mutate_quiz(self, manager, math_quiz, option_id):
        quiz, q1, _ = math_quiz
        stamp = quiz.updated_at
        manager.submit_quiz_answers(quiz.id, [{"questionId": q1.id, "selectedOptionIds": [option_id(q1, "4")]}])
        assert quiz.updated_at == stamp


class TestStatsAndHealth:
    def test_quiz_stats(self, manager, math_quiz):
        quiz, _, _ = math_quiz
        stats = manager.get_quiz_stats(quiz.id)
        assert stats.total_questions == 2
        assert stats.total_options == 6
        assert stats.average_options_per_question == 3.0
        assert stats.total_correct_answers == 3
        assert stats.average_correct_answers_per_question == 1.5

    def test_uptime_is_non_negative(self, manager):
        assert manager.get_uptime_seconds() >= 0
