"""Question generation functionality.

This module implements the top-level generator: it requests batches across
providers and attempts, merging them into a per-run deduplicated pool until
the requested count is reached or the attempt budget runs out.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

import httpx

from ..config import Settings
from ..config import settings as default_settings
from ..exam_catalog import ExamCatalogLoader, get_exam_catalog
from ..exceptions import (
    BelowThresholdError,
    NoQuestionsGeneratedError,
    yield_percentage,
)
from ..models import ExamRequest, Question
from ..providers import build_providers
from ..providers.base import BaseLLMProvider
from ..reporting.run_summary import RunSummary
from .accumulator import QuestionPool
from .backoff import BackoffPolicy
from .batch_generator import (
    DEFAULT_BATCH_TIMEOUT_SECONDS,
    DEFAULT_MAX_BATCH_SIZE,
    BatchGenerator,
)
from .failover import FailoverOrchestrator

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_ACCEPTANCE_THRESHOLD = 0.8


@dataclass(frozen=True)
class GenerationPolicy:
    """Tunable limits of a generation run.

    Attributes:
        max_batch_size: Upper bound on questions requested per provider call
        max_attempts: Number of passes over the remaining shortfall
        acceptance_threshold: Minimum fraction of the target for success
        batch_timeout_seconds: Time allowed for one provider call
    """

    max_batch_size: int = DEFAULT_MAX_BATCH_SIZE
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    acceptance_threshold: float = DEFAULT_ACCEPTANCE_THRESHOLD
    batch_timeout_seconds: float = DEFAULT_BATCH_TIMEOUT_SECONDS

    def __post_init__(self) -> None:
        if self.max_batch_size < 1:
            raise ValueError("max_batch_size must be at least 1")
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if not 0.0 <= self.acceptance_threshold <= 1.0:
            raise ValueError("acceptance_threshold must be between 0 and 1")

    @classmethod
    def from_settings(cls, settings: Settings) -> "GenerationPolicy":
        return cls(
            max_batch_size=settings.max_batch_size,
            max_attempts=settings.max_attempts,
            acceptance_threshold=settings.acceptance_threshold,
            batch_timeout_seconds=settings.batch_timeout_seconds,
        )

    def minimum_acceptable(self, target: int) -> int:
        """Smallest question count that satisfies the acceptance threshold."""
        return math.ceil(round(self.acceptance_threshold * target, 9))


@dataclass
class GenerationRun:
    """Outcome of one generation run."""

    questions: List[Question]
    summary: RunSummary


def backoff_from_settings(settings: Settings, base_delay: float) -> BackoffPolicy:
    return BackoffPolicy(
        base_delay=base_delay,
        strategy=settings.backoff_strategy,
        max_delay=settings.max_delay_seconds,
    )


class QuestionGenerator:
    """Accumulates exam questions across batches, providers and attempts.

    Each call to :meth:`run` owns its own pool, so a generator instance can
    serve repeated or concurrent runs without them sharing state.
    """

    def __init__(
        self,
        providers: Optional[Sequence[BaseLLMProvider]] = None,
        settings: Optional[Settings] = None,
        policy: Optional[GenerationPolicy] = None,
        batch_backoff: Optional[BackoffPolicy] = None,
        attempt_backoff: Optional[BackoffPolicy] = None,
        client: Optional[httpx.AsyncClient] = None,
        catalog: Optional[ExamCatalogLoader] = None,
    ):
        """Initialize the question generator.

        Args:
            providers: Providers in priority order (built from settings if None)
            settings: Application settings (global settings if None)
            policy: Batch size, attempt and threshold limits (from settings if None)
            batch_backoff: Delay policy between batches (from settings if None)
            attempt_backoff: Delay policy between attempts (from settings if None)
            client: Shared HTTP client (a client per run is created if None)
            catalog: Exam catalog for prompts (global catalog, loaded now, if None)

        Raises:
            ValueError: If no provider is given or configured
        """
        self.settings = settings or default_settings
        self.providers: List[BaseLLMProvider] = list(
            providers if providers is not None else build_providers(self.settings)
        )
        if not self.providers:
            raise ValueError("At least one LLM provider must be configured")

        self.policy = policy or GenerationPolicy.from_settings(self.settings)
        self.batch_backoff = batch_backoff or backoff_from_settings(
            self.settings, self.settings.batch_delay_seconds
        )
        self.attempt_backoff = attempt_backoff or backoff_from_settings(
            self.settings, self.settings.attempt_delay_seconds
        )
        self._client = client
        # The catalog file is read before any run starts
        self._catalog = catalog or get_exam_catalog()

        if not self.get_available_providers():
            logger.warning(
                "No provider has a configured API key; generation will fail"
            )

    def get_available_providers(self) -> List[str]:
        """Names of providers with a configured credential, in priority order."""
        return [p.name for p in self.providers if p.has_credential]

    async def generate_questions(
        self, certification_name: str, target_count: int
    ) -> List[Question]:
        """Generate exactly ``target_count`` questions or raise.

        Raises:
            NoQuestionsGeneratedError: If no provider produced anything
            BelowThresholdError: If the yield is below the acceptance threshold
            LLMProviderError: If a provider reports a fatal configuration error
        """
        request = ExamRequest(
            certification_name=certification_name,
            target_question_count=target_count,
        )
        run = await self.run(request)
        return run.questions

    async def run(self, request: ExamRequest) -> GenerationRun:
        """Execute one generation run.

        Args:
            request: Exam and number of questions requested

        Returns:
            The final question list (truncated to the target) and run summary
        """
        if self._client is not None:
            return await self._run(request, self._client)

        # asyncio.wait_for enforces the batch timeout; keep httpx's own limit in step
        async with httpx.AsyncClient(timeout=self.policy.batch_timeout_seconds) as client:
            return await self._run(request, client)

    async def _run(self, request: ExamRequest, client: httpx.AsyncClient) -> GenerationRun:
        target = request.target_question_count
        max_batch_size = self.policy.max_batch_size
        max_attempts = self.policy.max_attempts

        logger.info(f"Starting question generation for {request.certification_name}")
        logger.info(
            f"Target: {target} questions, batch size: {max_batch_size}, "
            f"provider order: {' -> '.join(p.name for p in self.providers)}, "
            f"configured: {self.get_available_providers() or 'none'}",
            extra={"certification": request.certification_name},
        )

        summary = RunSummary(
            certification_name=request.certification_name,
            questions_requested=target,
        )
        summary.start_run()

        pool = QuestionPool()
        orchestrator = FailoverOrchestrator(
            providers=self.providers,
            batch_generator=BatchGenerator(
                client=client,
                max_batch_size=max_batch_size,
                timeout_seconds=self.policy.batch_timeout_seconds,
                catalog=self._catalog,
            ),
            certification_name=request.certification_name,
            summary=summary,
        )

        try:
            attempt = 0
            while attempt < max_attempts and len(pool) < target:
                attempt += 1
                summary.attempts = attempt
                await self._run_attempt(orchestrator, pool, target, attempt, summary)

                if len(pool) >= target:
                    break
                if attempt < max_attempts:
                    logger.info(
                        f"Attempt {attempt} ended at {len(pool)}/{target}, "
                        f"retrying after delay"
                    )
                    await self.attempt_backoff.wait(attempt - 1)
        finally:
            summary.end_run()

        return self._finalize(pool, target, summary)

    async def _run_attempt(
        self,
        orchestrator: FailoverOrchestrator,
        pool: QuestionPool,
        target: int,
        attempt: int,
        summary: RunSummary,
    ) -> None:
        """Request enough batches to cover the current shortfall once."""
        max_batch_size = self.policy.max_batch_size
        still_needed = pool.shortfall(target)
        num_batches = math.ceil(still_needed / max_batch_size)

        logger.info(
            f"ATTEMPT {attempt}/{self.policy.max_attempts}: "
            f"have {len(pool)}/{target}, need {still_needed}, {num_batches} batches"
        )

        for index in range(num_batches):
            remaining = pool.shortfall(target)
            if remaining <= 0:
                break

            batch_size = min(max_batch_size, remaining)
            batch = await orchestrator.generate_batch(
                batch_size=batch_size,
                batch_number=index + 1,
                attempt_number=attempt,
            )
            added = pool.add_all(batch)
            summary.record_batch(received=len(batch), added=added)

            if batch:
                logger.info(
                    f"Accumulator: {len(pool)}/{target} questions "
                    f"(+{added}, {len(batch) - added} duplicates)"
                )
            else:
                logger.error(f"All providers failed for batch {index + 1}, skipping")

            if len(pool) >= target:
                logger.info(f"Target reached at {len(pool)} questions")
                break

            if index < num_batches - 1:
                await self.batch_backoff.wait(index)

    def _finalize(
        self, pool: QuestionPool, target: int, summary: RunSummary
    ) -> GenerationRun:
        if len(pool) == 0:
            logger.error(f"No questions generated after {summary.attempts} attempts")
            raise NoQuestionsGeneratedError(
                "Failed to generate any questions. "
                "Please check your API keys and try again.",
                generated=0,
                target=target,
            )

        final_questions = pool.take(target)
        summary.questions_returned = len(final_questions)
        percentage = yield_percentage(len(final_questions), target)

        logger.info(
            f"Generation complete: {len(final_questions)}/{target} questions "
            f"in {summary.attempts} attempts "
            f"({summary.questions_per_attempt:.1f} questions per attempt)"
        )

        if len(final_questions) < self.policy.minimum_acceptable(target):
            logger.error(
                f"Only generated {len(final_questions)}/{target} questions "
                f"({percentage}%), below acceptance threshold"
            )
            raise BelowThresholdError(
                f"Only generated {len(final_questions)}/{target} questions "
                f"({percentage}%). Please try again.",
                generated=len(final_questions),
                target=target,
            )

        if len(final_questions) < target:
            logger.warning(
                f"Generated {len(final_questions)}/{target} questions ({percentage}%)"
            )

        return GenerationRun(questions=final_questions, summary=summary)


async def generate_questions(
    certification_name: str,
    target_count: int,
    settings: Optional[Settings] = None,
) -> List[Question]:
    """Generate questions for an exam using providers configured in settings.

    Args:
        certification_name: Exam name from the catalog
        target_count: Number of questions required

    Returns:
        Exactly ``target_count`` questions, or at least the acceptance
        threshold of them when providers under-deliver

    Raises:
        NoQuestionsGeneratedError: If no provider produced anything
        BelowThresholdError: If the yield is below the acceptance threshold
        LLMProviderError: If a provider reports a fatal configuration error
    """
    generator = QuestionGenerator(settings=settings)
    return await generator.generate_questions(certification_name, target_count)
