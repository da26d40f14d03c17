"""
Tests for candidate filtering.
"""
from unittest.mock import MagicMock

import pytest

from automatch.models.filters import CandidateFilters
from automatch.pipeline.filter import CandidateSelector, build_candidate_filters
from automatch.store.memory import InMemoryCatalogStore


class TestCandidateFilters:
    """Tests for the hard filter predicate."""

    @pytest.fixture
    def filters(self) -> CandidateFilters:
        return CandidateFilters(event_id="evt-1", min_price=50, max_price=100, min_quantity=2)

    def test_accepts_matching_listing(self, filters, make_listing):
        assert filters.accepts(make_listing(price=80, available_quantity=2))

    def test_price_bounds_inclusive(self, filters, make_listing):
        assert filters.accepts(make_listing(price=50))
        assert filters.accepts(make_listing(price=100))
        assert not filters.accepts(make_listing(price=101))
        assert not filters.accepts(make_listing(price=49.99))

    def test_rejects_inactive_or_sold_out(self, filters, make_listing):
        assert not filters.accepts(make_listing(status="SOLD"))
        assert not filters.accepts(make_listing(available_quantity=0))

    def test_rejects_other_event(self, filters, make_listing):
        assert not filters.accepts(make_listing(event_id="evt-2"))

    def test_rejects_too_few_tickets(self, filters, make_listing):
        assert not filters.accepts(make_listing(available_quantity=1))

    def test_section_whitelist_is_exact(self, make_listing):
        """Case and partial names only count during scoring, not filtering."""
        filters = CandidateFilters(max_price=100, sections=["Section A"])

        assert filters.accepts(make_listing(section="Section A"))
        assert not filters.accepts(make_listing(section="section a"))
        assert not filters.accepts(make_listing(section="A"))

    def test_any_event_when_unset(self, make_listing):
        filters = CandidateFilters(max_price=100)
        assert filters.accepts(make_listing(event_id="evt-99"))


class TestBuildCandidateFilters:
    """Tests for preference to filter translation."""

    def test_min_price_defaults_to_zero(self, make_preference):
        filters = build_candidate_filters(make_preference(min_price=None))
        assert filters.min_price == 0.0
        assert filters.max_price == 100

    def test_carries_preference_constraints(self, make_preference):
        prefs = make_preference(event_id="evt-7", preferred_sections=["A", "B"], min_quantity=2, max_quantity=4)
        filters = build_candidate_filters(prefs, limit=25)

        assert filters.event_id == "evt-7"
        assert filters.sections == ["A", "B"]
        assert filters.min_quantity == 2
        assert filters.min_price == 50
        assert filters.limit == 25


class TestCandidateSelector:
    """Tests for CandidateSelector."""

    def test_pool_capped(self, make_listing, make_preference):
        store = InMemoryCatalogStore(
            listings=[make_listing(listing_id=f"lst-{i:02d}") for i in range(80)]
        )
        selector = CandidateSelector(store, max_candidates=50)

        assert len(selector.select(make_preference())) == 50

    def test_drops_listings_the_store_should_have_filtered(self, make_listing, make_preference):
        """An over-budget listing never enters the pool, even from a sloppy store."""
        store = MagicMock()
        store.find_candidate_listings.return_value = [
            make_listing(listing_id="ok", price=80),
            make_listing(listing_id="too-expensive", price=101),
        ]
        selector = CandidateSelector(store)

        candidates = selector.select(make_preference())

        assert [c.listing_id for c in candidates] == ["ok"]

    def test_caps_store_results(self, make_listing, make_preference):
        store = MagicMock()
        store.find_candidate_listings.return_value = [
            make_listing(listing_id=f"lst-{i}") for i in range(8)
        ]
        selector = CandidateSelector(store, max_candidates=5)

        assert len(selector.select(make_preference())) == 5
        filters = store.find_candidate_listings.call_args.args[0]
        assert filters.limit == 5

    def test_empty_pool(self, make_preference):
        selector = CandidateSelector(InMemoryCatalogStore())
        assert selector.select(make_preference()) == []
