"""
Shared fixtures for AutoMatch tests.
"""
from datetime import datetime, timedelta, timezone

import pytest

from automatch.models.listing import EventInfo, Listing, SectionInfo, SellerInfo
from automatch.models.preferences import BuyerPreference


NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)
EVENT_DATE = datetime(2026, 7, 15, 20, 0, tzinfo=timezone.utc)


def build_listing(
    listing_id: str = "lst-1",
    price: float = 80,
    available_quantity: int = 2,
    section: str = "A",
    event_id: str = "evt-1",
    event_date: datetime = EVENT_DATE,
    status: str = "ACTIVE",
    seller_id: str = "seller-1",
    rating: float = 5,
    total_sales: int = 60,
    member_since: datetime = NOW - timedelta(days=730),
) -> Listing:
    return Listing(
        listing_id=listing_id,
        event=EventInfo(event_id=event_id, name="Test Concert", venue="Arena", event_date=event_date),
        section=SectionInfo(section_id=f"sec-{section}", name=section),
        price=price,
        available_quantity=available_quantity,
        status=status,
        seller=SellerInfo(
            seller_id=seller_id,
            first_name="Sam",
            rating=rating,
            total_sales=total_sales,
            member_since=member_since,
        ),
    )


def build_preference(**overrides) -> BuyerPreference:
    data = {
        "user_id": "buyer-1",
        "max_price": 100,
        "min_price": 50,
        "max_quantity": 2,
        "min_quantity": 1,
    }
    data.update(overrides)
    return BuyerPreference(**data)


@pytest.fixture
def make_listing():
    """Factory for listings; defaults score HIGH against `make_preference()`."""
    return build_listing


@pytest.fixture
def make_preference():
    """Factory for preferences with a 50-100 budget for 1-2 tickets."""
    return build_preference


@pytest.fixture
def now() -> datetime:
    return NOW
