# src/cash_or_card/schemas/moderation.py
"""Moderation-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .fact import CashDiscountResponse, PaymentMethodResponse


class RestaurantSummary(BaseModel):
    """Restaurant fields shown in the admin queue."""

    id: int
    name: str
    address: str
    city: str | None
    category: str | None
    submitted_by: int | None
    is_verified: bool
    verified_by: int | None
    verified_at: datetime | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PendingPaymentMethod(PaymentMethodResponse):
    """Unverified payment method with display fields for moderators."""

    restaurant_name: str
    submitted_by_username: str | None = None


class PendingCashDiscount(CashDiscountResponse):
    """Unverified cash discount with display fields for moderators."""

    restaurant_name: str
    submitted_by_username: str | None = None


class PendingQueue(BaseModel):
    """Everything awaiting an admin decision, newest first."""

    model_config = ConfigDict(populate_by_name=True)

    restaurants: list[RestaurantSummary] = Field(default_factory=list)
    payment_methods: list[PendingPaymentMethod] = Field(
        default_factory=list,
        alias="paymentMethods",
    )
    cash_discounts: list[PendingCashDiscount] = Field(
        default_factory=list,
        alias="cashDiscounts",
    )


class RejectResponse(BaseModel):
    """Outcome of rejecting a fact."""

    deleted: bool
