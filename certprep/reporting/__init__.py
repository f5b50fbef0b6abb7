"""Run reporting."""

from .run_summary import ProviderStats, RunSummary

__all__ = ["ProviderStats", "RunSummary"]
