"""
Confidence tiers, auto-approval and recommended price for a scored match.
"""
from typing import Optional

from ..config import ConfidenceThresholds, MatchingConfig
from ..models.matching import ConfidenceTier, MatchCriteria
from ..models.preferences import BuyerPreference


def classify_confidence(
    overall_score: float,
    thresholds: ConfidenceThresholds,
) -> Optional[ConfidenceTier]:
    """
    Map an overall score to its tier.

    Returns:
        "HIGH", "MEDIUM" or "LOW", or None when the score is below the LOW
        threshold and the match must be dropped
    """
    if overall_score >= thresholds.high:
        return "HIGH"
    if overall_score >= thresholds.medium:
        return "MEDIUM"
    if overall_score >= thresholds.low:
        return "LOW"
    return None


def is_auto_approve_eligible(
    criteria: MatchCriteria,
    preference: BuyerPreference,
    config: MatchingConfig,
) -> bool:
    """Whether the buyer's purchase may skip manual review. Stricter than HIGH confidence."""
    return (
        preference.instant_buy_enabled
        and criteria.overall_score >= config.thresholds.high
        and criteria.price_match >= config.auto_approve_min_price_fit
        and criteria.seller_rating >= config.auto_approve_min_seller_fit
    )


def recommended_price(
    listing_price: float,
    overall_score: float,
    preference: BuyerPreference,
    thresholds: ConfidenceThresholds,
) -> float:
    """
    Suggest a transaction price.

    High-confidence matches keep the asking price. Weaker matches leave room to
    negotiate, floored at the buyer's minimum price when one is set.
    """
    if overall_score >= thresholds.high:
        price = listing_price
    elif overall_score >= thresholds.medium:
        floor = preference.min_price if preference.min_price is not None else listing_price * 0.8
        price = max(listing_price * 0.95, floor)
    else:
        floor = preference.min_price if preference.min_price is not None else listing_price * 0.7
        price = max(listing_price * 0.90, floor)
    return round(price, 2)
