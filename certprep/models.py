"""Data models for generated exam questions."""

import enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

OPTION_LETTERS = ["A", "B", "C", "D"]
TRUE_FALSE_OPTIONS = ["True", "False"]


class QuestionType(str, enum.Enum):
    """Types of exam questions."""

    MULTIPLE_CHOICE = "multiple-choice"
    TRUE_FALSE = "true-false"


def letters_for(option_count: int) -> List[str]:
    """Return the answer-letter alphabet for a given number of options."""
    return OPTION_LETTERS[:option_count]


class Question(BaseModel):
    """A normalized exam question ready to be handed to the quiz layer."""

    question_type: QuestionType = Field(
        default=QuestionType.MULTIPLE_CHOICE, description="Question format"
    )
    question_text: str = Field(..., min_length=1, description="The question text")
    options: List[str] = Field(
        ..., min_length=2, max_length=4, description="Answer options in display order"
    )
    correct_option_letter: str = Field(
        ..., pattern="^[A-D]$", description="Letter of the correct option"
    )
    explanation: str = Field(..., min_length=1, description="Why the answer is correct")
    original_provider_answer: Optional[str] = Field(
        None, description="Raw answer string returned by the provider"
    )
    source_provider: Optional[str] = Field(
        None, description="Provider that generated the question"
    )

    @field_validator("question_text", "explanation")
    @classmethod
    def validate_non_blank(cls, v: str) -> str:
        """Reject whitespace-only text."""
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    @model_validator(mode="after")
    def validate_answer_letter(self) -> "Question":
        """Ensure the correct letter points at a real option."""
        if self.correct_option_letter not in letters_for(len(self.options)):
            raise ValueError(
                f"correct_option_letter {self.correct_option_letter!r} is out of "
                f"range for {len(self.options)} options"
            )
        if (
            self.question_type == QuestionType.TRUE_FALSE
            and self.options != TRUE_FALSE_OPTIONS
        ):
            raise ValueError("true-false questions must use the options True/False")
        return self

class ExamRequest(BaseModel):
    """Request-scoped parameters of one generation run."""

    model_config = ConfigDict(frozen=True)

    certification_name: str = Field(..., min_length=1)
    target_question_count: int = Field(..., ge=1)
