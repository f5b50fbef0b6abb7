"""Tests for question data models."""

import pytest
from pydantic import ValidationError

from certprep.models import ExamRequest, Question, QuestionType, letters_for


def build_question(**overrides):
    fields = {
        "question_text": "What is a custom object?",
        "options": ["A table", "A report", "A flow", "A user"],
        "correct_option_letter": "A",
        "explanation": "Custom objects store org-specific data.",
    }
    fields.update(overrides)
    return Question(**fields)


class TestQuestion:
    """Tests for Question validation."""

    def test_valid_question(self):
        question = build_question()
        assert question.question_type == QuestionType.MULTIPLE_CHOICE
        assert question.options[0] == "A table"

    def test_blank_text_rejected(self):
        with pytest.raises(ValidationError):
            build_question(question_text="   ")

    def test_letter_out_of_range_rejected(self):
        with pytest.raises(ValidationError, match="out of range"):
            build_question(options=["Yes", "No"], correct_option_letter="C")

    def test_letter_pattern_enforced(self):
        with pytest.raises(ValidationError):
            build_question(correct_option_letter="E")

    def test_too_many_options_rejected(self):
        with pytest.raises(ValidationError):
            build_question(options=["1", "2", "3", "4", "5"])

    def test_true_false_requires_canonical_options(self):
        with pytest.raises(ValidationError, match="True/False"):
            build_question(
                question_type=QuestionType.TRUE_FALSE,
                options=["Yes", "No"],
                correct_option_letter="A",
            )

    def test_true_false_valid(self):
        question = build_question(
            question_type="true-false",
            options=["True", "False"],
            correct_option_letter="B",
        )
        assert question.options == ["True", "False"]

    def test_serializes_type_as_string(self):
        data = build_question().model_dump(mode="json")
        assert data["question_type"] == "multiple-choice"


class TestExamRequest:
    """Tests for ExamRequest."""

    def test_count_must_be_positive(self):
        with pytest.raises(ValidationError):
            ExamRequest(certification_name="Salesforce AI Agentforce", target_question_count=0)

    def test_frozen(self):
        request = ExamRequest(certification_name="X", target_question_count=5)
        with pytest.raises(ValidationError):
            request.target_question_count = 6


def test_letters_for():
    assert letters_for(2) == ["A", "B"]
    assert letters_for(4) == ["A", "B", "C", "D"]
