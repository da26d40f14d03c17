"""
Listing models - sale-side ticket inventory as read from the catalog store.
"""
from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator


ListingStatus = Literal["ACTIVE", "SOLD", "EXPIRED", "CANCELLED"]


class EventInfo(BaseModel):
    """The event a listing sells tickets for."""
    event_id: str
    name: Optional[str] = None
    venue: Optional[str] = None
    event_date: datetime
    category: Optional[str] = None


class SectionInfo(BaseModel):
    """Venue section the tickets are in."""
    section_id: Optional[str] = None
    name: str


class SellerInfo(BaseModel):
    """Seller reputation data used for trust scoring."""
    seller_id: str
    first_name: Optional[str] = None
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    total_sales: int = Field(default=0, ge=0)
    member_since: Optional[datetime] = None


class Listing(BaseModel):
    """
    A ticket listing.
    Read-only to the matching engine; status transitions belong to the store.
    """
    listing_id: str
    event: EventInfo
    section: SectionInfo
    price: float = Field(ge=0)
    available_quantity: int = Field(ge=0)
    status: ListingStatus = "ACTIVE"
    seller: SellerInfo

    @field_validator("price", mode="before")
    @classmethod
    def parse_price(cls, v: Any) -> Any:
        """Accept Decimal and numeric strings from database drivers."""
        if v is None or isinstance(v, (int, float)):
            return v
        try:
            return float(v)
        except (TypeError, ValueError):
            return v

    @property
    def event_id(self) -> str:
        return self.event.event_id

    @property
    def seller_id(self) -> str:
        return self.seller.seller_id

    @property
    def is_available(self) -> bool:
        """Active and with tickets left."""
        return self.status == "ACTIVE" and self.available_quantity > 0
