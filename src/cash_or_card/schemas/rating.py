# src/cash_or_card/schemas/rating.py
"""Rating-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class RatingCreate(BaseModel):
    """Schema for rating a restaurant; the range is enforced by the service."""

    rating: int
    comment: str | None = None


class RatingResponse(BaseModel):
    """Schema for a rating returned by the API."""

    id: int
    restaurant_id: int
    user_id: int
    rating: int
    comment: str | None
    created_at: datetime
    updated_at: datetime
    username: str | None = None

    model_config = ConfigDict(from_attributes=True)
