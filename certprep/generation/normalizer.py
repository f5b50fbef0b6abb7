"""Normalization of parsed model records into canonical questions."""

import logging
from typing import Any, Iterable, List, Optional

from pydantic import ValidationError

from ..models import (
    OPTION_LETTERS,
    TRUE_FALSE_OPTIONS,
    Question,
    QuestionType,
    letters_for,
)
from ..text_utils import strip_option_prefix

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("question", "options", "answer", "explanation")
MIN_OPTIONS = 2
MAX_OPTIONS = len(OPTION_LETTERS)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


def _true_false_letter(answer: str) -> str:
    answer_lower = answer.strip().lower()
    if answer_lower in ("true", "a"):
        return "A"
    if answer_lower in ("false", "b"):
        return "B"
    return "A"


def _clean_options(raw_options: List[Any]) -> List[str]:
    cleaned = [
        strip_option_prefix(option) if isinstance(option, str) else ""
        for option in raw_options
    ]
    return [option for option in cleaned if option]


def normalize_question(
    raw: Any, index: int, source_provider: Optional[str] = None
) -> Optional[Question]:
    """Map one parsed record onto the canonical Question shape.

    Never raises: unusable records are logged and ``None`` is returned so a
    batch can yield fewer questions than requested.

    Args:
        raw: One element of the parsed JSON array
        index: Position of the element in the array (for diagnostics)
        source_provider: Provider name stamped onto the question

    Returns:
        The normalized question, or None if the record was rejected
    """
    position = index + 1

    if not isinstance(raw, dict):
        logger.warning(f"Question {position} is not an object, skipping")
        return None

    missing = [name for name in REQUIRED_FIELDS if _is_blank(raw.get(name))]
    if missing:
        logger.warning(
            f"Question {position} has missing required fields {missing}, skipping"
        )
        return None

    question_text = raw["question"]
    explanation = raw["explanation"]
    answer = raw["answer"]
    if not all(isinstance(v, str) for v in (question_text, explanation, answer)):
        logger.warning(f"Question {position} has non-text fields, skipping")
        return None

    if raw.get("questionType") == QuestionType.TRUE_FALSE.value:
        question_type = QuestionType.TRUE_FALSE
        options = list(TRUE_FALSE_OPTIONS)
        letter = _true_false_letter(answer)
    else:
        question_type = QuestionType.MULTIPLE_CHOICE
        if not isinstance(raw["options"], list):
            logger.warning(f"Question {position} has invalid options format, skipping")
            return None

        options = _clean_options(raw["options"])[:MAX_OPTIONS]
        if len(options) < MIN_OPTIONS:
            logger.warning(
                f"Question {position} has only {len(options)} options, skipping"
            )
            return None

        while len(options) < MAX_OPTIONS:
            options.append(f"Option {OPTION_LETTERS[len(options)]}")

        letter = answer.strip().upper()
        if letter not in letters_for(len(options)):
            logger.warning(
                f"Question {position} has invalid answer {letter!r}, defaulting to A"
            )
            letter = "A"

    try:
        return Question(
            question_type=question_type,
            question_text=question_text.strip(),
            options=options,
            correct_option_letter=letter,
            explanation=explanation.strip(),
            original_provider_answer=answer,
            source_provider=source_provider,
        )
    except ValidationError as e:
        logger.warning(f"Question {position} failed validation: {e}")
        return None


def normalize_questions(
    records: Iterable[Any], source_provider: Optional[str] = None
) -> List[Question]:
    """Normalize a parsed array, dropping rejected records."""
    questions = []
    for index, raw in enumerate(records):
        question = normalize_question(raw, index, source_provider=source_provider)
        if question is not None:
            questions.append(question)
    return questions
