"""
Catalog store interface consumed by the matching engine.
"""
from abc import ABC, abstractmethod
from datetime import datetime

from ..models.filters import CandidateFilters
from ..models.listing import Listing
from ..models.matching import MatchResult
from ..models.preferences import BuyerPreference, RejectedPreference


class CatalogStore(ABC):
    """Durable storage of preferences and listings."""

    @abstractmethod
    def find_candidate_listings(self, filters: CandidateFilters) -> list[Listing]:
        """Return at most `filters.limit` listings passing every hard filter."""

    @abstractmethod
    def get_active_preferences(self) -> list[BuyerPreference]:
        """Return preferences that are active and have notifications enabled."""

    @abstractmethod
    def update_preference_last_run(self, preference_id: str, timestamp: datetime) -> None:
        """Record when a preference was last matched."""

    def save_match_results(self, matches: list[MatchResult]) -> int:
        """Persist emitted matches as buyer history. Stores without history keep nothing."""
        return 0

    def get_rejected_preferences(self) -> list[RejectedPreference]:
        """Stored preferences the last `get_active_preferences` call could not load."""
        return []
