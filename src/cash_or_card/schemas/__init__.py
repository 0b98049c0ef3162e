"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .fact import (
    CashDiscountCreate,
    CashDiscountPatch,
    CashDiscountPayload,
    CashDiscountResponse,
    PaymentMethodCreate,
    PaymentMethodPatch,
    PaymentMethodPayload,
    PaymentMethodResponse,
)
from .moderation import PendingQueue, RejectResponse, RestaurantSummary
from .rating import RatingCreate, RatingResponse
from .vote import VoteCreate, VoteResponse

__all__ = [
    "CashDiscountCreate", "CashDiscountPatch", "CashDiscountPayload", "CashDiscountResponse",
    "PaymentMethodCreate", "PaymentMethodPatch", "PaymentMethodPayload", "PaymentMethodResponse",
    "PendingQueue", "RejectResponse", "RestaurantSummary",
    "RatingCreate", "RatingResponse",
    "VoteCreate", "VoteResponse",
]
