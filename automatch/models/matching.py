"""
Matching models - factor breakdowns, ranked match results and notifications.
"""
from typing import Literal

from pydantic import BaseModel, Field


ConfidenceTier = Literal["HIGH", "MEDIUM", "LOW"]


class MatchCriteria(BaseModel):
    """Per-factor scores for one (listing, preference) pair."""
    price_match: float = Field(ge=0, le=1)
    section_match: float = Field(ge=0, le=1)
    quantity_match: float = Field(ge=0, le=1)
    time_match: float = Field(ge=0, le=1)
    seller_rating: float = Field(ge=0, le=1, description="Seller-trust factor")
    overall_score: float = Field(ge=0, le=1, description="Weighted combination")


class MatchResult(BaseModel):
    """A scored listing offered to a buyer."""
    listing_id: str
    seller_id: str
    buyer_id: str
    event_id: str
    match_score: float = Field(ge=0, le=1)
    match_criteria: MatchCriteria
    recommended_price: float = Field(ge=0)
    confidence: ConfidenceTier
    reasons: list[str] = Field(default_factory=list)
    auto_approve_eligible: bool = False


class MatchSummary(BaseModel):
    """Counts a caller shows next to a result list."""
    total_found: int
    high_confidence_matches: int
    auto_approve_eligible: int


class MatchNotification(BaseModel):
    """Summary event sent to a buyer after a batch run."""
    buyer_id: str
    title: str
    message: str
    match_count: int = Field(description="Matches found, before trimming to the top few")
    top_match_id: str
    matches: list[MatchResult] = Field(description="Best matches, highest first")


def summarize_matches(matches: list[MatchResult]) -> MatchSummary:
    """Count results by confidence and auto-approval."""
    return MatchSummary(
        total_found=len(matches),
        high_confidence_matches=sum(1 for m in matches if m.confidence == "HIGH"),
        auto_approve_eligible=sum(1 for m in matches if m.auto_approve_eligible),
    )
