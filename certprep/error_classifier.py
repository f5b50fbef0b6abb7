"""Error classification for LLM API failures.

This module classifies the failures a provider call can produce so the
failover layer can tell transient unavailability (try the next provider)
from misconfiguration (abort the whole generation run).
"""

import re
from enum import Enum
from typing import Optional


class ErrorCategory(Enum):
    """Categories of API errors."""

    BILLING_QUOTA = "billing_quota"  # Insufficient funds, quota exceeded
    RATE_LIMIT = "rate_limit"  # Rate limit/throttling errors
    AUTHENTICATION = "authentication"  # API key invalid or expired
    INVALID_REQUEST = "invalid_request"  # Malformed request or invalid parameters
    SERVER_ERROR = "server_error"  # Provider server errors (5xx)
    NETWORK_ERROR = "network_error"  # Connection/timeout errors
    MODEL_ERROR = "model_error"  # Model not found or unavailable
    UNKNOWN = "unknown"  # Unclassified errors


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    CRITICAL = "critical"  # Requires immediate attention (e.g., misconfiguration)
    HIGH = "high"  # Important but not blocking (e.g., rate limits)
    MEDIUM = "medium"  # Should be addressed (e.g., invalid requests)
    LOW = "low"  # Informational (e.g., temporary network issues)


# Categories that mean retrying elsewhere cannot help
FATAL_CATEGORIES = frozenset({ErrorCategory.MODEL_ERROR})


class ClassifiedError:
    """A classified API error with category and severity."""

    def __init__(
        self,
        category: ErrorCategory,
        severity: ErrorSeverity,
        provider: str,
        original_error: str,
        message: str,
        is_retryable: bool = False,
        status_code: Optional[int] = None,
    ):
        """Initialize classified error.

        Args:
            category: Error category
            severity: Error severity level
            provider: LLM provider name (gemini, deepseek, etc.)
            original_error: Original error message/type
            message: Human-readable error message
            is_retryable: Whether the error is transient and retryable
            status_code: HTTP status code, when the error came from a response
        """
        self.category = category
        self.severity = severity
        self.provider = provider
        self.original_error = original_error
        self.message = message
        self.is_retryable = is_retryable
        self.status_code = status_code

    @property
    def is_fatal(self) -> bool:
        """Whether this error should abort the entire generation run."""
        return self.category in FATAL_CATEGORIES

    def __str__(self) -> str:
        """String representation of classified error."""
        return (
            f"[{self.severity.value.upper()}] {self.provider}: "
            f"{self.category.value} - {self.message}"
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for logging/serialization."""
        return {
            "category": self.category.value,
            "severity": self.severity.value,
            "provider": self.provider,
            "original_error": self.original_error,
            "message": self.message,
            "is_retryable": self.is_retryable,
            "status_code": self.status_code,
        }


class ErrorClassifier:
    """Classifies API errors from the supported LLM providers."""

    # Patterns for billing/quota errors
    BILLING_PATTERNS = [
        r"insufficient.*funds",
        r"quota.*exceeded",
        r"billing.*issue",
        r"insufficient.*quota",
        r"credit.*balance",
        r"payment.*required",
        r"account.*suspended",
    ]

    # Patterns for rate limit errors
    RATE_LIMIT_PATTERNS = [
        r"rate.*limit",
        r"too.*many.*requests",
        r"throttl",
        r"requests.*per.*minute",
        r"resource.*exhausted",
    ]

    # Patterns for authentication errors
    AUTH_PATTERNS = [
        r"invalid.*api.*key",
        r"api.*key.*not.*valid",
        r"authentication.*failed",
        r"unauthorized",
        r"api.*key.*expired",
        r"invalid.*credentials",
    ]

    # Patterns for model errors
    MODEL_PATTERNS = [
        r"model.*not.*found",
        r"not.*found",
        r"invalid.*model",
        r"model.*unavailable",
        r"model.*deprecated",
        r"no.*such.*model",
    ]

    # Patterns for server errors
    SERVER_ERROR_PATTERNS = [
        r"internal.*server.*error",
        r"service.*unavailable",
        r"server.*error",
        r"upstream.*error",
        r"overloaded",
    ]

    # Patterns for network errors
    NETWORK_PATTERNS = [
        r"connection.*error",
        r"timeout",
        r"timed.*out",
        r"network.*error",
        r"connection.*refused",
        r"connection.*reset",
        r"dns.*error",
    ]

    @staticmethod
    def classify_error(
        error: Exception,
        provider: str,
        status_code: Optional[int] = None,
    ) -> ClassifiedError:
        """Classify an API error.

        A 404 or a "not found" message is a fatal model error whatever the
        status. Otherwise the HTTP status code, when known, takes precedence
        over the message text, and message patterns cover transport errors
        and bodies that explain a generic status.

        Args:
            error: The exception that was raised
            provider: Provider name (gemini, deepseek, moonshot)
            status_code: HTTP status code of the failed response, if any

        Returns:
            ClassifiedError with category and severity
        """
        error_str = str(error).lower()
        error_type = type(error).__name__

        if status_code == 404 or "not found" in error_str:
            category = ErrorCategory.MODEL_ERROR
        else:
            category = ErrorClassifier._category_for_status(status_code)
        if category is None:
            category = ErrorClassifier._category_for_message(error_str)

        return ErrorClassifier._build(
            category=category,
            provider=provider,
            error_type=error_type,
            error_str=str(error),
            status_code=status_code,
        )

    @staticmethod
    def _category_for_status(status_code: Optional[int]) -> Optional[ErrorCategory]:
        """Map an HTTP status code to a category, if it is decisive."""
        if status_code is None:
            return None
        if status_code == 404:
            return ErrorCategory.MODEL_ERROR
        if status_code == 402:
            return ErrorCategory.BILLING_QUOTA
        if status_code in (401, 403):
            return ErrorCategory.AUTHENTICATION
        if status_code == 429:
            return ErrorCategory.RATE_LIMIT
        if status_code in (408, 504):
            return ErrorCategory.NETWORK_ERROR
        if status_code >= 500:
            return ErrorCategory.SERVER_ERROR
        # 400 and other 4xx: let the body decide (e.g. "model not found")
        return None

    @staticmethod
    def _category_for_message(error_str: str) -> ErrorCategory:
        """Map an error message to a category using the regex tables."""
        if ErrorClassifier._match_patterns(error_str, ErrorClassifier.BILLING_PATTERNS):
            return ErrorCategory.BILLING_QUOTA
        if ErrorClassifier._match_patterns(error_str, ErrorClassifier.AUTH_PATTERNS):
            return ErrorCategory.AUTHENTICATION
        if ErrorClassifier._match_patterns(
            error_str, ErrorClassifier.RATE_LIMIT_PATTERNS
        ):
            return ErrorCategory.RATE_LIMIT
        if ErrorClassifier._match_patterns(error_str, ErrorClassifier.MODEL_PATTERNS):
            return ErrorCategory.MODEL_ERROR
        if ErrorClassifier._match_patterns(
            error_str, ErrorClassifier.SERVER_ERROR_PATTERNS
        ):
            return ErrorCategory.SERVER_ERROR
        if ErrorClassifier._match_patterns(error_str, ErrorClassifier.NETWORK_PATTERNS):
            return ErrorCategory.NETWORK_ERROR
        if "invalid" in error_str or "bad request" in error_str:
            return ErrorCategory.INVALID_REQUEST
        return ErrorCategory.UNKNOWN

    @staticmethod
    def _build(
        category: ErrorCategory,
        provider: str,
        error_type: str,
        error_str: str,
        status_code: Optional[int],
    ) -> ClassifiedError:
        """Attach severity, message and retryability to a category."""
        if category == ErrorCategory.BILLING_QUOTA:
            severity = ErrorSeverity.CRITICAL
            message = (
                f"Billing or quota issue detected. Please check your {provider} "
                f"account balance and usage limits."
            )
            retryable = False
        elif category == ErrorCategory.AUTHENTICATION:
            severity = ErrorSeverity.CRITICAL
            message = (
                f"Authentication failed. Please verify your {provider} API key "
                f"is valid and has not expired."
            )
            retryable = False
        elif category == ErrorCategory.RATE_LIMIT:
            severity = ErrorSeverity.HIGH
            message = f"Rate limit exceeded for {provider}. Consider reducing request frequency."
            retryable = True
        elif category == ErrorCategory.MODEL_ERROR:
            severity = ErrorSeverity.CRITICAL
            message = (
                f"Model not recognized by {provider}. Check the "
                f"{provider.upper()}_MODEL_NAME setting."
            )
            retryable = False
        elif category == ErrorCategory.SERVER_ERROR:
            severity = ErrorSeverity.MEDIUM
            message = f"{provider} server error. This may be temporary."
            retryable = True
        elif category == ErrorCategory.NETWORK_ERROR:
            severity = ErrorSeverity.LOW
            message = "Network connectivity issue. This may be temporary."
            retryable = True
        elif category == ErrorCategory.INVALID_REQUEST:
            severity = ErrorSeverity.MEDIUM
            message = f"Invalid request to {provider}. Check request parameters."
            retryable = False
        else:
            severity = ErrorSeverity.MEDIUM
            message = f"Unclassified error from {provider}: {error_str[:100]}"
            retryable = False

        return ClassifiedError(
            category=category,
            severity=severity,
            provider=provider,
            original_error=error_type,
            message=message,
            is_retryable=retryable,
            status_code=status_code,
        )

    @staticmethod
    def _match_patterns(text: str, patterns: list[str]) -> bool:
        """Check if text matches any of the given regex patterns.

        Args:
            text: Text to search
            patterns: List of regex patterns

        Returns:
            True if any pattern matches
        """
        for pattern in patterns:
            if re.search(pattern, text, re.IGNORECASE):
                return True
        return False
