"""
Candidate filter model - the hard constraints handed to the catalog store.
"""
from typing import Optional

from pydantic import BaseModel, Field

from .listing import Listing


class CandidateFilters(BaseModel):
    """
    Hard filters a listing must pass before it is scored.
    Status ACTIVE and available quantity > 0 always apply.
    """
    event_id: Optional[str] = None
    min_price: float = Field(default=0.0, ge=0)
    max_price: float = Field(gt=0)
    min_quantity: int = Field(default=1, ge=1)
    sections: list[str] = Field(
        default_factory=list,
        description="Exact, case-sensitive section names; empty means any",
    )
    limit: int = Field(default=50, ge=1)

    def accepts(self, listing: Listing) -> bool:
        """
        Check one listing against the hard filters.
        Section names compare exactly; fuzzy section matching happens in scoring.
        """
        if not listing.is_available:
            return False

        if self.event_id and listing.event_id != self.event_id:
            return False

        if not (self.min_price <= listing.price <= self.max_price):
            return False

        if listing.available_quantity < self.min_quantity:
            return False

        if self.sections and listing.section.name not in self.sections:
            return False

        return True
