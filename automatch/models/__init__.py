"""
Pydantic models for AutoMatch.
All data contracts are defined here for strict validation.
"""

from .listing import EventInfo, SectionInfo, SellerInfo, Listing
from .preferences import BuyerPreference, parse_preference
from .filters import CandidateFilters
from .matching import (
    ConfidenceTier,
    MatchCriteria,
    MatchResult,
    MatchSummary,
    MatchNotification,
    summarize_matches,
)
from .batch import PreferenceOutcome, ScoreStats, BatchRunResult

__all__ = [
    # Listing
    "EventInfo",
    "SectionInfo",
    "SellerInfo",
    "Listing",
    # Preferences
    "BuyerPreference",
    "parse_preference",
    # Filters
    "CandidateFilters",
    # Matching
    "ConfidenceTier",
    "MatchCriteria",
    "MatchResult",
    "MatchSummary",
    "MatchNotification",
    "summarize_matches",
    # Batch
    "PreferenceOutcome",
    "ScoreStats",
    "BatchRunResult",
]
