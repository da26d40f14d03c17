"""
Tests for Pydantic models and configuration.
"""
from decimal import Decimal

import pytest
from pydantic import ValidationError

from automatch.config import ConfidenceThresholds, MatchingConfig, ScoringWeights
from automatch.errors import PreferenceValidationError
from automatch.models.listing import EventInfo, Listing, SectionInfo, SellerInfo
from automatch.models.matching import MatchCriteria, MatchResult, summarize_matches
from automatch.models.preferences import BuyerPreference, parse_preference
from automatch.pipeline.reasons import build_match_notification


def result(listing_id: str, score: float, confidence: str, auto: bool = False) -> MatchResult:
    return MatchResult(
        listing_id=listing_id,
        seller_id="seller-1",
        buyer_id="buyer-1",
        event_id="evt-1",
        match_score=score,
        match_criteria=MatchCriteria(
            price_match=1.0,
            section_match=0.7,
            quantity_match=1.0,
            time_match=0.7,
            seller_rating=1.0,
            overall_score=score,
        ),
        recommended_price=80,
        confidence=confidence,
        auto_approve_eligible=auto,
    )


class TestPreferenceModels:
    """Tests for preference models."""

    def test_defaults(self):
        prefs = BuyerPreference(user_id="buyer-1", max_price=150, max_quantity=2)

        assert prefs.min_quantity == 1
        assert prefs.min_price is None
        assert prefs.price_floor == 0.0
        assert prefs.preferred_sections == []
        assert prefs.notification_enabled is True
        assert prefs.instant_buy_enabled is False
        assert prefs.is_active is True

    def test_null_lists_from_store(self):
        prefs = BuyerPreference(
            user_id="buyer-1", max_price=150, max_quantity=2,
            preferred_sections=None, keywords=None, min_quantity=None,
        )

        assert prefs.preferred_sections == []
        assert prefs.keywords == []
        assert prefs.min_quantity == 1

    def test_max_price_required_positive(self):
        with pytest.raises(PreferenceValidationError) as exc_info:
            parse_preference({"user_id": "buyer-1", "max_price": -5, "max_quantity": 1})

        assert exc_info.value.reason.startswith("max_price")

    def test_missing_max_price(self):
        with pytest.raises(PreferenceValidationError):
            parse_preference({"user_id": "buyer-1", "max_quantity": 1})

    def test_min_price_above_max(self):
        with pytest.raises(PreferenceValidationError) as exc_info:
            parse_preference({"user_id": "buyer-1", "max_price": 100, "min_price": 120, "max_quantity": 1})

        assert "min_price cannot exceed max_price" in exc_info.value.reason

    def test_min_quantity_above_max(self):
        with pytest.raises(PreferenceValidationError) as exc_info:
            parse_preference({"user_id": "buyer-1", "max_price": 100, "max_quantity": 2, "min_quantity": 3})

        assert "min_quantity cannot exceed max_quantity" in exc_info.value.reason

    def test_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_preference({"user_id": "", "max_price": 100, "max_quantity": 1})


class TestListingModels:
    """Tests for listing models."""

    def test_decimal_price(self, now):
        listing = Listing(
            listing_id="lst-1",
            event=EventInfo(event_id="evt-1", event_date=now),
            section=SectionInfo(name="A"),
            price=Decimal("79.90"),
            available_quantity=2,
            seller=SellerInfo(seller_id="seller-1"),
        )

        assert listing.price == pytest.approx(79.9)
        assert listing.event_id == "evt-1"
        assert listing.seller_id == "seller-1"
        assert listing.is_available

    def test_rating_bounds(self):
        with pytest.raises(ValueError):
            SellerInfo(seller_id="seller-1", rating=5.5)

    def test_sold_listing_unavailable(self, make_listing):
        assert not make_listing(status="SOLD").is_available
        assert not make_listing(available_quantity=0).is_available


class TestConfigModels:
    """Tests for matching configuration."""

    def test_default_values(self):
        config = MatchingConfig()

        assert config.weights.price == 0.35
        assert config.weights.section == 0.25
        assert config.weights.quantity == 0.20
        assert config.weights.timing == 0.10
        assert config.weights.seller == 0.10
        assert config.thresholds.high == 0.85
        assert config.candidate_limit == 50
        assert config.top_k == 10

    def test_weights_must_sum_to_one(self):
        with pytest.raises(ValueError):
            ScoringWeights(price=0.5)

    def test_thresholds_must_be_ordered(self):
        with pytest.raises(ValueError):
            ConfidenceThresholds(high=0.5, medium=0.6, low=0.4)

    def test_immutable(self):
        config = MatchingConfig()
        with pytest.raises(ValidationError):
            config.top_k = 20


class TestMatchModels:
    """Tests for match summaries and notifications."""

    def test_summarize(self):
        matches = [
            result("a", 0.9, "HIGH", auto=True),
            result("b", 0.88, "HIGH"),
            result("c", 0.7, "MEDIUM"),
        ]

        summary = summarize_matches(matches)

        assert summary.total_found == 3
        assert summary.high_confidence_matches == 2
        assert summary.auto_approve_eligible == 1

    def test_notification_for_high_match(self):
        matches = [result(str(i), 0.9, "HIGH") for i in range(5)]

        notification = build_match_notification("buyer-1", matches)

        assert notification.message == "Found 5 ticket matches for you! Top match: 9.0/10 confidence score."
        assert notification.match_count == 5
        assert [m.listing_id for m in notification.matches] == ["0", "1", "2"]

    def test_notification_for_medium_match(self):
        notification = build_match_notification("buyer-1", [result("a", 0.7, "MEDIUM")])

        assert notification.message == "Found 1 ticket matches for you! Best match has a 7.0/10 confidence score."
        assert notification.top_match_id == "a"

    def test_notification_needs_matches(self):
        with pytest.raises(ValueError):
            build_match_notification("buyer-1", [])
