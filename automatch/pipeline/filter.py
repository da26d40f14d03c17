"""
Candidate selection - hard filters applied before any scoring.
"""
import logging

from ..models.filters import CandidateFilters
from ..models.listing import Listing
from ..models.preferences import BuyerPreference
from ..store.base import CatalogStore


logger = logging.getLogger(__name__)


def build_candidate_filters(preference: BuyerPreference, limit: int = 50) -> CandidateFilters:
    """Translate a preference into store-level hard filters."""
    return CandidateFilters(
        event_id=preference.event_id,
        min_price=preference.price_floor,
        max_price=preference.max_price,
        min_quantity=preference.min_quantity,
        sections=list(preference.preferred_sections),
        limit=limit,
    )


class CandidateSelector:
    """
    Pulls the bounded candidate pool for a preference from the catalog store.
    """

    def __init__(self, store: CatalogStore, max_candidates: int = 50):
        self.store = store
        self.max_candidates = max_candidates

    def select(self, preference: BuyerPreference) -> list[Listing]:
        """
        Fetch candidates for a preference.

        Args:
            preference: Validated buyer preference

        Returns:
            At most `max_candidates` listings, all passing the hard filters
        """
        filters = build_candidate_filters(preference, limit=self.max_candidates)
        listings = self.store.find_candidate_listings(filters)

        candidates = [listing for listing in listings if filters.accepts(listing)]
        if len(candidates) < len(listings):
            logger.warning(
                f"Store returned {len(listings) - len(candidates)} listings failing hard filters"
            )

        candidates = candidates[: self.max_candidates]
        logger.info(f"Selected {len(candidates)} candidates for buyer {preference.user_id}")
        return candidates
