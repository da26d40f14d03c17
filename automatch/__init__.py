"""AutoMatch - buyer preference to ticket inventory matching engine."""

from .errors import AutoMatchError, MatchingError, PreferenceValidationError, SchedulerBusyError
from .pipeline import BatchScheduler, MatchRanker

__all__ = [
    "AutoMatchError",
    "MatchingError",
    "PreferenceValidationError",
    "SchedulerBusyError",
    "BatchScheduler",
    "MatchRanker",
]
