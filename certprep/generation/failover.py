"""Provider failover for a single batch."""

import logging
from typing import Any, Dict, List, Optional, Sequence

from ..error_classifier import ErrorCategory
from ..exceptions import BatchGenerationError, BatchTimeoutError
from ..models import Question
from ..providers.base import BaseLLMProvider, LLMProviderError
from ..reporting.run_summary import RunSummary
from .batch_generator import BatchGenerator

logger = logging.getLogger(__name__)


def _failure_category(error: BatchGenerationError) -> str:
    if isinstance(error, LLMProviderError):
        return error.classified_error.category.value
    if isinstance(error, BatchTimeoutError):
        return ErrorCategory.NETWORK_ERROR.value
    return "invalid_response"


class FailoverOrchestrator:
    """Tries providers in priority order until one yields questions.

    Providers without credentials are skipped without counting as failures.
    Transient errors move on to the next provider; fatal configuration errors
    (model not recognized) propagate and abort the run.
    """

    def __init__(
        self,
        providers: Sequence[BaseLLMProvider],
        batch_generator: BatchGenerator,
        certification_name: str,
        summary: Optional[RunSummary] = None,
    ):
        """Initialize the orchestrator.

        Args:
            providers: Providers in priority order (first = tried first)
            batch_generator: Generator issuing the actual calls
            certification_name: Exam the questions are for
            summary: Run summary receiving per-provider outcomes
        """
        self.providers = list(providers)
        self.batch_generator = batch_generator
        self.certification_name = certification_name
        self.summary = summary

    async def generate_batch(
        self,
        batch_size: int,
        batch_number: int = 1,
        attempt_number: int = 1,
    ) -> List[Question]:
        """Generate one batch, failing over across providers.

        Args:
            batch_size: Questions requested for this batch
            batch_number: Batch index within the attempt, for logging
            attempt_number: Attempt index within the run, for logging

        Returns:
            Questions from the first provider that produced any, or an empty
            list if every provider failed or was skipped

        Raises:
            LLMProviderError: If a provider reports a fatal configuration error
        """
        for provider in self.providers:
            log_context = self._log_context(provider, batch_number, attempt_number)

            if not provider.has_credential:
                logger.warning(
                    f"{provider.name} API key not configured, skipping", extra=log_context
                )
                if self.summary is not None:
                    self.summary.record_provider_skipped(provider.name)
                continue

            try:
                questions = await self.batch_generator.generate_batch(
                    provider=provider,
                    certification_name=self.certification_name,
                    batch_size=batch_size,
                    batch_number=batch_number,
                    attempt_number=attempt_number,
                )
            except LLMProviderError as e:
                if e.is_fatal:
                    logger.error(f"CRITICAL: {e}", extra=log_context)
                    if self.summary is not None:
                        self.summary.record_provider_failure(
                            provider.name, e.classified_error.category.value
                        )
                    raise
                self._record_failure(provider, e, log_context)
                continue
            except BatchGenerationError as e:
                self._record_failure(provider, e, log_context)
                continue

            if questions:
                if self.summary is not None:
                    self.summary.record_provider_success(provider.name, len(questions))
                return questions

            logger.warning(
                f"{provider.name} returned no questions, trying next provider",
                extra=log_context,
            )
            if self.summary is not None:
                self.summary.record_provider_failure(provider.name, "invalid_response")

        logger.error(
            f"All providers failed for batch {batch_number}",
            extra={
                "attempt": attempt_number,
                "batch": batch_number,
                "certification": self.certification_name,
            },
        )
        return []

    def _log_context(
        self, provider: BaseLLMProvider, batch_number: int, attempt_number: int
    ) -> Dict[str, Any]:
        return {
            "provider": provider.name,
            "attempt": attempt_number,
            "batch": batch_number,
            "certification": self.certification_name,
        }

    def _record_failure(
        self,
        provider: BaseLLMProvider,
        error: BatchGenerationError,
        log_context: Dict[str, Any],
    ) -> None:
        logger.warning(
            f"{provider.name} failed ({type(error).__name__}: {error}), "
            f"trying next provider...",
            extra=log_context,
        )
        if self.summary is not None:
            self.summary.record_provider_failure(provider.name, _failure_category(error))
