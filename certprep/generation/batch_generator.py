"""Single-batch question generation against one provider.

A batch is one bounded-size request sent to one provider. It either yields
a non-empty list of normalized questions or raises a BatchGenerationError
subclass describing why it did not.
"""

import asyncio
import logging
import time
from typing import Any, List, Optional

import httpx

from ..exam_catalog import ExamCatalogLoader
from ..exceptions import (
    BatchTimeoutError,
    EmptyResponseError,
    NoValidQuestionsError,
    ResponseParseError,
)
from ..models import Question
from ..providers.base import BaseLLMProvider, ProviderRequest
from .normalizer import normalize_questions
from .prompts import build_generation_prompt
from .response_parser import parse_question_array

logger = logging.getLogger(__name__)

DEFAULT_MAX_BATCH_SIZE = 12
DEFAULT_BATCH_TIMEOUT_SECONDS = 60.0
ERROR_BODY_PREVIEW_CHARS = 200


class BatchGenerator:
    """Issues one generation request per call, bounded by a timeout."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        max_batch_size: int = DEFAULT_MAX_BATCH_SIZE,
        timeout_seconds: float = DEFAULT_BATCH_TIMEOUT_SECONDS,
        catalog: Optional[ExamCatalogLoader] = None,
    ):
        """Initialize the batch generator.

        Args:
            client: HTTP client used for provider calls
            max_batch_size: Upper bound on questions requested per call
            timeout_seconds: Time allowed for one provider call
            catalog: Exam catalog for prompt construction (global if None)
        """
        if max_batch_size < 1:
            raise ValueError("max_batch_size must be at least 1")
        self._client = client
        self.max_batch_size = max_batch_size
        self.timeout_seconds = timeout_seconds
        self._catalog = catalog

    def clamp_batch_size(self, batch_size: int) -> int:
        return max(1, min(batch_size, self.max_batch_size))

    async def generate_batch(
        self,
        provider: BaseLLMProvider,
        certification_name: str,
        batch_size: int,
        batch_number: int = 1,
        attempt_number: int = 1,
    ) -> List[Question]:
        """Generate up to ``batch_size`` questions with a single provider call.

        Args:
            provider: Provider to call
            certification_name: Exam the questions are for
            batch_size: Questions requested (clamped to max_batch_size)
            batch_number: Batch index within the attempt, for logging
            attempt_number: Attempt index within the run, for logging

        Returns:
            Non-empty list of normalized questions

        Raises:
            BatchTimeoutError: If the call exceeds the timeout
            LLMProviderError: On HTTP or transport errors (classified)
            EmptyResponseError: If the reply carries no generated text
            ResponseParseError: If the text cannot be recovered into an array
            NoValidQuestionsError: If no record survives normalization
        """
        size = self.clamp_batch_size(batch_size)
        label = provider.name.upper()
        log_context = {
            "provider": provider.name,
            "attempt": attempt_number,
            "batch": batch_number,
            "certification": certification_name,
        }

        logger.info(
            f"[{label}] Attempt {attempt_number}, Batch {batch_number}: "
            f"Requesting {size} questions...",
            extra=log_context,
        )

        prompt = build_generation_prompt(certification_name, size, catalog=self._catalog)
        request = provider.build_request(prompt)

        start_time = time.perf_counter()
        try:
            payload = await asyncio.wait_for(
                self._send(provider, request), timeout=self.timeout_seconds
            )
        except asyncio.TimeoutError:
            logger.warning(
                f"[{label}] Timeout after {self.timeout_seconds}s "
                f"(attempt {attempt_number}, batch {batch_number})",
                extra=log_context,
            )
            raise BatchTimeoutError(provider.name, self.timeout_seconds) from None
        latency = time.perf_counter() - start_time

        text = provider.extract_text(payload)
        if not isinstance(text, str) or not text.strip():
            raise EmptyResponseError(
                f"Empty API response (got {type(text).__name__})",
                provider=provider.name,
            )

        try:
            records = parse_question_array(text)
        except ResponseParseError as e:
            e.provider = provider.name
            raise

        questions = normalize_questions(records, source_provider=provider.name)

        logger.info(
            f"[{label}] Attempt {attempt_number}, Batch {batch_number}: "
            f"Got {len(questions)}/{size} valid questions in {latency:.2f}s",
            extra=log_context,
        )

        if not questions:
            raise NoValidQuestionsError(
                f"No valid questions in response ({len(records)} records parsed)",
                provider=provider.name,
            )
        return questions

    async def _send(self, provider: BaseLLMProvider, request: ProviderRequest) -> Any:
        """POST the request and decode the JSON envelope."""
        try:
            response = await self._client.post(
                request.url, headers=request.headers, json=request.body
            )
        except httpx.TimeoutException as e:
            # httpx timeout errors have an empty message
            logger.warning(
                f"[{provider.name.upper()}] HTTP timeout ({type(e).__name__})",
                extra={"provider": provider.name},
            )
            raise BatchTimeoutError(provider.name, self.timeout_seconds) from e
        except httpx.HTTPError as e:
            raise provider.classify_error(e) from e

        if response.is_error:
            detail = response.text[:ERROR_BODY_PREVIEW_CHARS]
            error = httpx.HTTPStatusError(
                f"API error ({response.status_code}): {detail}",
                request=response.request,
                response=response,
            )
            classified = provider.classify_error(error, status_code=response.status_code)
            logger.error(
                f"[{provider.name.upper()}] {classified}", extra={"provider": provider.name}
            )
            raise classified from None

        try:
            return response.json()
        except ValueError as e:
            raise EmptyResponseError(
                f"Response body is not JSON: {e}", provider=provider.name
            ) from e
