"""Certification exam-prep question generation service."""

from certprep.exceptions import (
    BatchGenerationError,
    BelowThresholdError,
    GenerationError,
    InsufficientQuestionsError,
    NoQuestionsGeneratedError,
)
from certprep.generation import (
    GenerationPolicy,
    GenerationRun,
    QuestionGenerator,
    generate_questions,
)
from certprep.models import ExamRequest, Question, QuestionType
from certprep.providers import LLMProviderError

__version__ = "0.1.0"

__all__ = [
    "BatchGenerationError",
    "BelowThresholdError",
    "ExamRequest",
    "GenerationError",
    "GenerationPolicy",
    "GenerationRun",
    "InsufficientQuestionsError",
    "LLMProviderError",
    "NoQuestionsGeneratedError",
    "Question",
    "QuestionGenerator",
    "QuestionType",
    "generate_questions",
]
