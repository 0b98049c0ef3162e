# src/cash_or_card/schemas/fact.py
"""Fact-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from cash_or_card.models.fact import PaymentType


class PaymentMethodPayload(BaseModel):
    """Proposal body for a payment acceptance fact."""

    model_config = ConfigDict(extra="forbid")

    payment_type: PaymentType = Field(..., description="Payment method being claimed")
    is_accepted: bool = Field(..., description="Whether the restaurant accepts it")


class CashDiscountPayload(BaseModel):
    """Proposal body for a cash discount fact."""

    model_config = ConfigDict(extra="forbid")

    discount_percentage: float = Field(..., ge=0, le=100)
    description: str | None = Field(None, max_length=1000)


class PaymentMethodPatch(BaseModel):
    """Fields of a payment method that may be edited after submission."""

    model_config = ConfigDict(extra="forbid")

    is_accepted: bool | None = None


class CashDiscountPatch(BaseModel):
    """Fields of a cash discount that may be edited after submission."""

    model_config = ConfigDict(extra="forbid")

    discount_percentage: float | None = Field(None, ge=0, le=100)
    description: str | None = Field(None, max_length=1000)
    is_active: bool | None = None


class PaymentMethodCreate(BaseModel):
    """Request body for submitting a payment method claim.

    Range and enum checks happen in the consensus engine so that HTTP callers
    and in-process callers get the same ``ValidationError``.
    """

    restaurant_id: int
    payment_type: str
    is_accepted: bool


class CashDiscountCreate(BaseModel):
    """Request body for submitting a cash discount claim."""

    restaurant_id: int
    discount_percentage: float
    description: str | None = None


class FactResponse(BaseModel):
    """Attributes common to every fact returned by the API."""

    id: int
    restaurant_id: int
    submitted_by: int | None
    is_verified: bool
    verified_by: int | None
    verified_at: datetime | None
    upvotes: int
    downvotes: int
    confidence_score: float
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PaymentMethodResponse(FactResponse):
    """Schema for payment method facts returned by the API."""

    payment_type: str
    is_accepted: bool


class CashDiscountResponse(FactResponse):
    """Schema for cash discount facts returned by the API."""

    discount_percentage: float
    description: str | None
    is_active: bool
