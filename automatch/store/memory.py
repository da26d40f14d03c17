"""
In-memory catalog store for tests and local runs.
"""
import threading
import uuid
from datetime import datetime
from typing import Iterable, Optional

from ..models.filters import CandidateFilters
from ..models.listing import Listing
from ..models.matching import MatchResult
from ..models.preferences import BuyerPreference

from .base import CatalogStore


class InMemoryCatalogStore(CatalogStore):
    """
    Keeps listings, preferences and match history in process memory.
    Listings are returned in insertion order.
    """

    def __init__(
        self,
        listings: Optional[Iterable[Listing]] = None,
        preferences: Optional[Iterable[BuyerPreference]] = None,
    ):
        self._lock = threading.Lock()
        self._listings: dict[str, Listing] = {}
        self._preferences: dict[str, BuyerPreference] = {}
        self._history: list[MatchResult] = []

        for listing in listings or []:
            self.add_listing(listing)
        for preference in preferences or []:
            self.create_preference(preference)

    # === Listings ===

    def add_listing(self, listing: Listing) -> None:
        with self._lock:
            self._listings[listing.listing_id] = listing

    def find_candidate_listings(self, filters: CandidateFilters) -> list[Listing]:
        with self._lock:
            listings = list(self._listings.values())
        return [listing for listing in listings if filters.accepts(listing)][: filters.limit]

    # === Preferences ===

    def create_preference(self, preference: BuyerPreference) -> BuyerPreference:
        """Store a preference, assigning an id when it has none."""
        if preference.preference_id is None:
            preference = preference.model_copy(update={"preference_id": str(uuid.uuid4())})
        with self._lock:
            self._preferences[preference.preference_id] = preference
        return preference

    def get_preference(self, preference_id: str) -> Optional[BuyerPreference]:
        with self._lock:
            return self._preferences.get(preference_id)

    def get_active_preferences(self) -> list[BuyerPreference]:
        with self._lock:
            return [
                p for p in self._preferences.values()
                if p.is_active and p.notification_enabled
            ]

    def update_preference_last_run(self, preference_id: str, timestamp: datetime) -> None:
        with self._lock:
            if preference_id not in self._preferences:
                raise KeyError(f"Unknown preference: {preference_id}")
            current = self._preferences[preference_id]
            self._preferences[preference_id] = current.model_copy(
                update={"last_match_run": timestamp}
            )

    def deactivate_preference(self, preference_id: str) -> bool:
        """Soft-delete a preference. Returns False when it does not exist."""
        with self._lock:
            current = self._preferences.get(preference_id)
            if current is None:
                return False
            self._preferences[preference_id] = current.model_copy(update={"is_active": False})
            return True

    # === Match history ===

    def save_match_results(self, matches: list[MatchResult]) -> int:
        with self._lock:
            self._history.extend(matches)
        return len(matches)

    def get_match_history(self, buyer_id: str) -> list[MatchResult]:
        with self._lock:
            return [m for m in self._history if m.buyer_id == buyer_id]
