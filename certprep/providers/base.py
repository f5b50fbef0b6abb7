"""Base class for LLM providers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..error_classifier import ClassifiedError, ErrorClassifier
from ..exceptions import BatchGenerationError

DEFAULT_TEMPERATURE = 0.5
DEFAULT_MAX_TOKENS = 3072


class LLMProviderError(BatchGenerationError):
    """Exception raised for provider API failures, with classification.

    Attributes:
        classified_error: The classified error with category and severity
        original_exception: The original exception that was raised, if any
    """

    def __init__(
        self,
        classified_error: ClassifiedError,
        original_exception: Optional[Exception] = None,
    ):
        """Initialize LLM provider error.

        Args:
            classified_error: The classified error
            original_exception: The original exception
        """
        self.classified_error = classified_error
        self.original_exception = original_exception
        super().__init__(str(classified_error), provider=classified_error.provider)

    @property
    def is_fatal(self) -> bool:
        """Whether the whole generation run should be aborted."""
        return self.classified_error.is_fatal


@dataclass(frozen=True)
class ProviderRequest:
    """Transport-level description of one provider call."""

    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Dict[str, Any] = field(default_factory=dict)


class BaseLLMProvider(ABC):
    """Abstract base class for LLM provider integrations.

    A provider only describes protocol differences: where to send a prompt,
    how to shape the payload and where the generated text sits in the reply.
    It performs no I/O itself.
    """

    provider_name: Optional[str] = None
    default_model: str = ""

    def __init__(
        self,
        api_key: Optional[str],
        model: Optional[str] = None,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ):
        """
        Initialize the LLM provider.

        Args:
            api_key: API key for the provider (empty/None = not configured)
            model: Model identifier to use (provider default when omitted)
            temperature: Sampling temperature sent with every request
            max_tokens: Maximum number of tokens to generate
        """
        self.api_key = api_key or ""
        self.model = model or self.default_model
        self.temperature = temperature
        self.max_tokens = max_tokens

    @property
    def name(self) -> str:
        return self.get_provider_name()

    @property
    def has_credential(self) -> bool:
        """Whether an API key is configured for this provider."""
        return bool(self.api_key.strip())

    def get_provider_name(self) -> str:
        """
        Get the name of this provider.

        Returns:
            Provider name (e.g., "gemini", "deepseek", "moonshot")
        """
        if self.provider_name:
            return self.provider_name
        return self.__class__.__name__.replace("Provider", "").lower()

    @abstractmethod
    def build_request(self, prompt: str) -> ProviderRequest:
        """
        Describe the HTTP request that sends ``prompt`` to this provider.

        Args:
            prompt: The fully-formed prompt

        Returns:
            URL, headers (including auth) and JSON body for the call
        """
        pass

    @abstractmethod
    def extract_text(self, response: Any) -> Optional[str]:
        """
        Pull the generated text out of the provider's decoded JSON reply.

        Args:
            response: Decoded JSON response body

        Returns:
            The generated text, or None if the envelope holds none
        """
        pass

    def classify_error(
        self, error: Exception, status_code: Optional[int] = None
    ) -> LLMProviderError:
        """Classify and wrap an API error.

        Args:
            error: The exception describing the failure
            status_code: HTTP status of the failed response, if any

        Returns:
            LLMProviderError with classified error
        """
        classified = ErrorClassifier.classify_error(
            error=error,
            provider=self.get_provider_name(),
            status_code=status_code,
        )
        return LLMProviderError(
            classified_error=classified,
            original_exception=error,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(model={self.model!r})"
