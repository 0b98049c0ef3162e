# src/cash_or_card/models/__init__.py
"""SQLAlchemy models for the Cash or Card service."""

from .fact import (
    CashDiscount,
    Fact,
    FactKind,
    PaymentMethod,
    PaymentType,
    fact_model_for,
)
from .rating import Rating
from .restaurant import Restaurant
from .user import User, UserRole
from .vote import CashDiscountVote, PaymentMethodVote, Vote, VoteType, vote_model_for

__all__ = [
    "CashDiscount", "PaymentMethod", "Fact", "FactKind", "PaymentType", "fact_model_for",
    "CashDiscountVote", "PaymentMethodVote", "Vote", "VoteType", "vote_model_for",
    "Rating",
    "Restaurant",
    "User", "UserRole",
]
