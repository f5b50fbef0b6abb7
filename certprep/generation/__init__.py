"""Question generation pipeline."""

from .accumulator import QuestionPool
from .backoff import BackoffPolicy
from .batch_generator import BatchGenerator
from .failover import FailoverOrchestrator
from .generator import (
    GenerationPolicy,
    GenerationRun,
    QuestionGenerator,
    generate_questions,
)
from .normalizer import normalize_question, normalize_questions
from .prompts import build_generation_prompt
from .response_parser import parse_json_array, parse_question_array, repair_json

__all__ = [
    "BackoffPolicy",
    "BatchGenerator",
    "FailoverOrchestrator",
    "GenerationPolicy",
    "GenerationRun",
    "QuestionGenerator",
    "QuestionPool",
    "build_generation_prompt",
    "generate_questions",
    "normalize_question",
    "normalize_questions",
    "parse_json_array",
    "parse_question_array",
    "repair_json",
]
