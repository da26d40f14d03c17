"""
Scoring engine - five deterministic factor scores and their weighted total.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from ..config import ScoringWeights
from ..models.listing import Listing
from ..models.matching import MatchCriteria
from ..models.preferences import BuyerPreference


logger = logging.getLogger(__name__)


SECONDS_PER_DAY = 60 * 60 * 24
# Account age is counted in 30-day months
SECONDS_PER_MONTH = SECONDS_PER_DAY * 30

# Optimal price band as fractions of the buyer's max price
OPTIMAL_BAND_LOW = 0.70
OPTIMAL_BAND_HIGH = 0.90

NEUTRAL_SCORE = 0.7

# (minimum total sales, bonus), checked top-down
SALES_BONUS_STEPS = [(50, 0.2), (20, 0.15), (10, 0.1), (5, 0.05)]
# (minimum account age in months, bonus), checked top-down
ACCOUNT_AGE_BONUS_STEPS = [(12, 0.2), (6, 0.15), (3, 0.1), (1, 0.05)]


def _as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def price_fit(listing: Listing, preference: BuyerPreference) -> float:
    """Score how the asking price sits inside the buyer's budget."""
    price = listing.price
    max_price = preference.max_price
    min_price = preference.price_floor

    if price > max_price:
        return 0.0
    if price < min_price:
        return 0.5  # Under the buyer's floor, still acceptable

    band_low = max_price * OPTIMAL_BAND_LOW
    band_high = max_price * OPTIMAL_BAND_HIGH

    if band_low <= price <= band_high:
        return 1.0
    if price < band_low:
        # 0.8 at a price of zero up to 1.0 at the band's lower edge
        return 0.8 + (price / band_low) * 0.2
    # 1.0 at the band's upper edge down to 0.6 at max price
    return 1.0 - ((price - band_high) / (max_price - band_high)) * 0.4


def section_fit(listing: Listing, preference: BuyerPreference) -> float:
    """Score the listing's section against the buyer's preferred sections."""
    if not preference.preferred_sections:
        return NEUTRAL_SCORE

    name = listing.section.name.lower()
    preferred = [s.lower() for s in preference.preferred_sections]

    if name in preferred:
        return 1.0

    # Partial match, e.g. "Section A" vs "A"
    for candidate in preferred:
        if candidate in name or name in candidate:
            return 0.8

    return 0.3


def quantity_fit(listing: Listing, preference: BuyerPreference) -> float:
    """Score available tickets against the wanted quantity."""
    available = listing.available_quantity

    if available >= preference.max_quantity:
        return 1.0
    if available >= preference.min_quantity:
        return 0.6 + (available / preference.max_quantity) * 0.4
    return 0.2


def timing_fit(listing: Listing, preference: BuyerPreference) -> float:
    """Score the event date against the buyer's target date."""
    if preference.event_date is None:
        return NEUTRAL_SCORE

    delta = _as_utc(listing.event.event_date) - _as_utc(preference.event_date)
    days = abs(delta.total_seconds()) / SECONDS_PER_DAY

    if days == 0:
        return 1.0
    if days <= 1:
        return 0.9
    if days <= 7:
        return 0.7
    if days <= 30:
        return 0.5
    return 0.2


def seller_trust_fit(
    listing: Listing,
    preference: BuyerPreference,
    now: Optional[datetime] = None,
) -> float:
    """
    Score seller reliability from rating, sales history and account age.

    Args:
        listing: Candidate listing, carrying the seller snapshot
        preference: Unused; kept so every factor shares one signature
        now: Evaluation instant for account age (defaults to current UTC time)
    """
    seller = listing.seller
    score = 0.5

    if seller.rating and seller.rating > 0:
        score += (seller.rating / 5) * 0.3

    for min_sales, bonus in SALES_BONUS_STEPS:
        if seller.total_sales >= min_sales:
            score += bonus
            break

    if seller.member_since is not None:
        now = _as_utc(now or datetime.now(timezone.utc))
        age_seconds = (now - _as_utc(seller.member_since)).total_seconds()
        age_months = int(age_seconds // SECONDS_PER_MONTH)
        for min_months, bonus in ACCOUNT_AGE_BONUS_STEPS:
            if age_months >= min_months:
                score += bonus
                break

    return min(score, 1.0)


class ScoringEngine:
    """
    Combines the factor scores with a fixed weight set.
    All scores are 0-1, higher is better.
    """

    def __init__(self, weights: Optional[ScoringWeights] = None):
        self.weights = weights or ScoringWeights()

    def combine(
        self,
        price: float,
        section: float,
        quantity: float,
        timing: float,
        seller: float,
    ) -> float:
        """Weighted total; terms are added in a fixed order for reproducible floats."""
        w = self.weights
        total = (
            price * w.price
            + section * w.section
            + quantity * w.quantity
            + timing * w.timing
            + seller * w.seller
        )
        return max(0.0, min(1.0, total))

    def score(
        self,
        listing: Listing,
        preference: BuyerPreference,
        now: Optional[datetime] = None,
    ) -> MatchCriteria:
        """
        Calculate the full factor breakdown for a listing.

        Args:
            listing: The listing to score
            preference: Buyer preference to score against
            now: Evaluation instant shared across one ranking run

        Returns:
            MatchCriteria with all five factors and the overall score
        """
        price = price_fit(listing, preference)
        section = section_fit(listing, preference)
        quantity = quantity_fit(listing, preference)
        timing = timing_fit(listing, preference)
        seller = seller_trust_fit(listing, preference, now=now)

        return MatchCriteria(
            price_match=price,
            section_match=section,
            quantity_match=quantity,
            time_match=timing,
            seller_rating=seller,
            overall_score=self.combine(price, section, quantity, timing, seller),
        )
