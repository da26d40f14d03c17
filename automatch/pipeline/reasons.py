"""
Human-readable match explanations and buyer notification text.
Display only; nothing here affects ranking.
"""
from ..models.listing import Listing
from ..models.matching import MatchCriteria, MatchNotification, MatchResult
from ..models.preferences import BuyerPreference


NOTIFICATION_TITLE = "New Ticket Matches Found!"
EXPERIENCED_SELLER_SALES = 20


def _money(amount: float) -> str:
    """Format a price without a trailing .0 for whole amounts."""
    if float(amount).is_integer():
        return f"${int(amount)}"
    return f"${amount:.2f}"


def generate_match_reasons(
    criteria: MatchCriteria,
    listing: Listing,
    preference: BuyerPreference,
) -> list[str]:
    """Build the reasons shown next to a match, in a fixed order."""
    reasons = []

    if criteria.price_match >= 0.8:
        reasons.append(f"Great price match within your budget of {_money(preference.max_price)}")
    elif criteria.price_match >= 0.6:
        reasons.append(f"Good value at {_money(listing.price)}")

    if criteria.section_match >= 0.8:
        reasons.append(f"Matches your preferred section: {listing.section.name}")

    if criteria.quantity_match >= 0.8:
        reasons.append(f"Has {listing.available_quantity} tickets available")

    if criteria.seller_rating >= 0.8 and listing.seller.rating:
        reasons.append(f"Highly rated seller ({listing.seller.rating:g}/5 stars)")

    if criteria.time_match >= 0.8:
        reasons.append("Event date matches your preferences")

    if listing.seller.total_sales >= EXPERIENCED_SELLER_SALES:
        reasons.append(
            f"Experienced seller with {listing.seller.total_sales} successful sales"
        )

    return reasons


def build_match_notification(
    buyer_id: str,
    matches: list[MatchResult],
    top_n: int = 3,
) -> MatchNotification:
    """
    Summarize ranked matches for a buyer.

    Args:
        buyer_id: Recipient
        matches: Ranked matches, best first; must not be empty
        top_n: How many matches the notification carries
    """
    if not matches:
        raise ValueError("Cannot build a notification without matches")

    top_match = matches[0]
    # Shown on a 0-10 scale
    shown_score = f"{top_match.match_score * 10:.1f}/10"

    message = f"Found {len(matches)} ticket matches for you! "
    if top_match.confidence == "HIGH":
        message += f"Top match: {shown_score} confidence score."
    else:
        message += f"Best match has a {shown_score} confidence score."

    return MatchNotification(
        buyer_id=buyer_id,
        title=NOTIFICATION_TITLE,
        message=message,
        match_count=len(matches),
        top_match_id=top_match.listing_id,
        matches=matches[:top_n],
    )
