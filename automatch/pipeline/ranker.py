"""
Match ranker - runs candidate selection, scoring and classification for one buyer.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Union

from ..config import MatchingConfig, get_config
from ..errors import MatchingError
from ..models.listing import Listing
from ..models.matching import MatchResult
from ..models.preferences import BuyerPreference, parse_preference
from ..store.base import CatalogStore

from .confidence import classify_confidence, is_auto_approve_eligible, recommended_price
from .filter import CandidateSelector
from .reasons import generate_match_reasons
from .scoring import ScoringEngine


logger = logging.getLogger(__name__)


def _rank_key(match: MatchResult, price: float) -> tuple:
    # Highest score first; equal scores fall back to cheaper, then lower listing id
    return (-match.match_score, price, match.listing_id)


class MatchRanker:
    """
    Finds and ranks listings for a buyer preference.
    Holds no per-run state, so one instance can serve concurrent callers.
    """

    def __init__(self, store: CatalogStore, config: Optional[MatchingConfig] = None):
        self.config = config or get_config().matching
        self.selector = CandidateSelector(store, max_candidates=self.config.candidate_limit)
        self.scorer = ScoringEngine(self.config.weights)

    def score_listing(
        self,
        listing: Listing,
        preference: BuyerPreference,
        now: Optional[datetime] = None,
    ) -> Optional[MatchResult]:
        """
        Score a single listing.

        Returns:
            MatchResult, or None when the overall score is below the LOW threshold
        """
        criteria = self.scorer.score(listing, preference, now=now)
        confidence = classify_confidence(criteria.overall_score, self.config.thresholds)
        if confidence is None:
            return None

        return MatchResult(
            listing_id=listing.listing_id,
            seller_id=listing.seller_id,
            buyer_id=preference.user_id,
            event_id=listing.event_id,
            match_score=criteria.overall_score,
            match_criteria=criteria,
            recommended_price=recommended_price(
                listing.price, criteria.overall_score, preference, self.config.thresholds
            ),
            confidence=confidence,
            reasons=generate_match_reasons(criteria, listing, preference),
            auto_approve_eligible=is_auto_approve_eligible(criteria, preference, self.config),
        )

    def rank(
        self,
        listings: list[Listing],
        preference: BuyerPreference,
        now: Optional[datetime] = None,
    ) -> list[MatchResult]:
        """
        Score, filter and sort a candidate pool.

        Args:
            listings: Candidate listings
            preference: Buyer preference
            now: Evaluation instant (defaults to current UTC time)

        Returns:
            Up to `top_k` matches, best first
        """
        now = now or datetime.now(timezone.utc)
        scored = []

        for listing in listings:
            match = self.score_listing(listing, preference, now=now)
            if match is not None:
                scored.append((match, listing.price))

        scored.sort(key=lambda x: _rank_key(x[0], x[1]))
        return [match for match, _ in scored[: self.config.top_k]]

    def find_matches(
        self,
        preference: Union[BuyerPreference, Mapping[str, Any]],
        now: Optional[datetime] = None,
    ) -> list[MatchResult]:
        """
        Find the best matches for a buyer preference.

        Args:
            preference: Preference model or raw mapping (validated first)
            now: Evaluation instant (defaults to current UTC time)

        Returns:
            Up to `top_k` matches, best first. Empty when nothing qualifies.

        Raises:
            PreferenceValidationError: Invalid preference
            MatchingError: The catalog store failed
        """
        if not isinstance(preference, BuyerPreference):
            preference = parse_preference(preference)

        logger.info(f"Starting AutoMatch for buyer: {preference.user_id}")

        try:
            candidates = self.selector.select(preference)
        except Exception as e:
            logger.error(f"Candidate selection failed for buyer {preference.user_id}: {e}")
            raise MatchingError("Failed to find matches") from e

        matches = self.rank(candidates, preference, now=now)

        logger.info(f"Found {len(matches)} matches for buyer: {preference.user_id}")
        return matches
