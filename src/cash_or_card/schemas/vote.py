# src/cash_or_card/schemas/vote.py
"""Vote-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class VoteCreate(BaseModel):
    """Schema for casting a vote on a fact."""

    # Left as a plain string so an unknown value surfaces as a 400 from the engine.
    vote_type: str | None = Field(None, description="'upvote' or 'downvote'")


class VoteResponse(BaseModel):
    """Schema for the caller's current vote on a fact."""

    id: int
    fact_id: int
    user_id: int
    vote_type: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
