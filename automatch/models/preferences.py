"""
Preferences models - a buyer's standing matching criteria.
"""
from datetime import datetime
from typing import Any, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from ..errors import PreferenceValidationError


class BuyerPreference(BaseModel):
    """
    A buyer's matching criteria.
    Created and edited by the buyer, soft-deactivated instead of deleted.
    """
    user_id: str = Field(min_length=1, description="Owning buyer")
    preference_id: Optional[str] = Field(default=None, description="Store record id")
    event_id: Optional[str] = None

    # Price bounds
    max_price: float = Field(gt=0)
    min_price: Optional[float] = Field(default=None, ge=0)

    # Section whitelist, in buyer order
    preferred_sections: list[str] = Field(default_factory=list)

    # Quantity bounds
    max_quantity: int = Field(ge=1)
    min_quantity: int = Field(default=1, ge=1)

    # Hints
    event_date: Optional[datetime] = None
    venue: Optional[str] = None
    category: Optional[str] = None
    keywords: list[str] = Field(default_factory=list)

    # Flags
    instant_buy_enabled: bool = False
    notification_enabled: bool = True
    is_active: bool = True

    last_match_run: Optional[datetime] = None

    @field_validator("preferred_sections", "keywords", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        """Stores hand back NULL for empty lists."""
        return [] if v is None else v

    @field_validator("min_quantity", mode="before")
    @classmethod
    def default_min_quantity(cls, v: Any) -> Any:
        return 1 if v is None else v

    @model_validator(mode="after")
    def check_bounds(self) -> "BuyerPreference":
        if self.min_price is not None and self.min_price > self.max_price:
            raise ValueError("min_price cannot exceed max_price")
        if self.min_quantity > self.max_quantity:
            raise ValueError("min_quantity cannot exceed max_quantity")
        return self

    @property
    def price_floor(self) -> float:
        """Lower price bound used by the store filter."""
        return self.min_price if self.min_price is not None else 0.0


def parse_preference(data: Mapping[str, Any]) -> BuyerPreference:
    """
    Validate raw preference data.

    Raises:
        PreferenceValidationError: with the first validation problem as reason
    """
    if not isinstance(data, Mapping):
        raise PreferenceValidationError("preference must be a mapping")

    try:
        return BuyerPreference.model_validate(dict(data))
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        reason = f"{location}: {first['msg']}" if location else first["msg"]
        raise PreferenceValidationError(reason) from e


class RejectedPreference(BaseModel):
    """A stored preference that could not be loaded for matching."""
    preference_id: Optional[str] = None
    user_id: str = ""
    reason: str
