"""
Exceptions raised by the matching engine.
"""


class AutoMatchError(Exception):
    """Base class for matching engine errors."""


class PreferenceValidationError(AutoMatchError, ValueError):
    """A buyer preference was rejected before candidate selection."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class MatchingError(AutoMatchError):
    """A collaborator failed while finding matches for a single preference."""


class SchedulerBusyError(AutoMatchError):
    """A batch run was triggered while another one is still running."""
