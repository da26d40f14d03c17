"""Matching pipeline modules."""

from .filter import CandidateSelector, build_candidate_filters
from .scoring import ScoringEngine
from .ranker import MatchRanker
from .scheduler import BatchScheduler, SchedulerState

__all__ = [
    "CandidateSelector",
    "build_candidate_filters",
    "ScoringEngine",
    "MatchRanker",
    "BatchScheduler",
    "SchedulerState",
]
