"""Lightweight summary of a question generation run.

Collects counters while the generator runs so the CLI and callers can see
how a run went: attempts, batch outcomes, duplicates and per-provider
results.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional


@dataclass
class ProviderStats:
    """Outcome counters for one provider."""

    calls: int = 0
    successes: int = 0
    failures: int = 0
    skipped: int = 0
    questions: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "calls": self.calls,
            "successes": self.successes,
            "failures": self.failures,
            "skipped": self.skipped,
            "questions": self.questions,
        }


@dataclass
class RunSummary:
    """Plain data container describing one generation run."""

    certification_name: str = ""
    questions_requested: int = 0

    # Execution timing
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    # Progress
    attempts: int = 0
    batches_requested: int = 0
    batches_succeeded: int = 0
    batches_failed: int = 0
    questions_received: int = 0
    duplicates_discarded: int = 0
    questions_returned: int = 0

    # Providers and errors
    providers: Dict[str, ProviderStats] = field(default_factory=dict)
    errors_by_category: Dict[str, int] = field(default_factory=dict)

    def start_run(self) -> None:
        """Mark the start of a generation run."""
        self.start_time = datetime.now(timezone.utc)

    def end_run(self) -> None:
        """Mark the end of a generation run."""
        self.end_time = datetime.now(timezone.utc)

    def _provider(self, provider: str) -> ProviderStats:
        if provider not in self.providers:
            self.providers[provider] = ProviderStats()
        return self.providers[provider]

    def record_provider_skipped(self, provider: str) -> None:
        self._provider(provider).skipped += 1

    def record_provider_success(self, provider: str, question_count: int) -> None:
        stats = self._provider(provider)
        stats.calls += 1
        stats.successes += 1
        stats.questions += question_count

    def record_provider_failure(self, provider: str, category: str) -> None:
        stats = self._provider(provider)
        stats.calls += 1
        stats.failures += 1
        self.errors_by_category[category] = self.errors_by_category.get(category, 0) + 1

    def record_batch(self, received: int, added: int) -> None:
        """Record the merge of one batch into the pool."""
        self.batches_requested += 1
        if received > 0:
            self.batches_succeeded += 1
        else:
            self.batches_failed += 1
        self.questions_received += received
        self.duplicates_discarded += received - added

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.start_time is None or self.end_time is None:
            return None
        return (self.end_time - self.start_time).total_seconds()

    @property
    def questions_per_attempt(self) -> float:
        if self.attempts == 0:
            return 0.0
        return self.questions_returned / self.attempts

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "certification_name": self.certification_name,
            "questions_requested": self.questions_requested,
            "questions_returned": self.questions_returned,
            "start_time": self.start_time.isoformat() if self.start_time else None,
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "duration_seconds": self.duration_seconds,
            "attempts": self.attempts,
            "batches_requested": self.batches_requested,
            "batches_succeeded": self.batches_succeeded,
            "batches_failed": self.batches_failed,
            "questions_received": self.questions_received,
            "duplicates_discarded": self.duplicates_discarded,
            "questions_per_attempt": round(self.questions_per_attempt, 1),
            "providers": {
                name: stats.to_dict() for name, stats in self.providers.items()
            },
            "errors_by_category": dict(self.errors_by_category),
        }
