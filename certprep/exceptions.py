"""Exception hierarchy for question generation.

Batch-level errors are transient: the failover layer logs them and moves on
to the next provider. Run-level errors surface to the caller.
"""

import math
from typing import Optional


class GenerationError(Exception):
    """Base class for all question generation errors."""


class BatchGenerationError(GenerationError):
    """A single batch request failed and produced no usable questions.

    Attributes:
        provider: Name of the provider the batch was sent to
    """

    def __init__(self, message: str, provider: Optional[str] = None):
        self.provider = provider
        super().__init__(message)


class BatchTimeoutError(BatchGenerationError):
    """The provider did not answer within the batch timeout."""

    def __init__(self, provider: str, timeout: float):
        self.timeout = timeout
        super().__init__(f"{provider} timed out after {timeout}s", provider=provider)


class EmptyResponseError(BatchGenerationError):
    """The provider answered but the response carried no generated text."""


class ResponseParseError(BatchGenerationError):
    """The generated text could not be recovered into a JSON array."""


class NoValidQuestionsError(BatchGenerationError):
    """The response parsed but no record survived normalization."""


class InsufficientQuestionsError(GenerationError):
    """A generation run ended without enough questions to build an exam.

    Attributes:
        generated: Number of unique questions collected
        target: Number of questions requested
    """

    def __init__(self, message: str, generated: int, target: int):
        self.generated = generated
        self.target = target
        super().__init__(message)


class NoQuestionsGeneratedError(InsufficientQuestionsError):
    """Every provider failed on every batch of every attempt."""


class BelowThresholdError(InsufficientQuestionsError):
    """Questions were generated but fewer than the acceptance threshold."""

    @property
    def percentage(self) -> int:
        return yield_percentage(self.generated, self.target)


def yield_percentage(generated: int, target: int) -> int:
    """Percentage of the target achieved, rounded half up."""
    if target <= 0:
        return 0
    return math.floor(generated * 100 / target + 0.5)
