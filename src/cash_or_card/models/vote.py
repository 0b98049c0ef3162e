# src/cash_or_card/models/vote.py
"""Models capturing per-user votes on facts."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from cash_or_card.db.session import Base
from cash_or_card.db.time import utcnow

from .fact import FactKind


class VoteType(StrEnum):
    """Direction of a vote."""

    UPVOTE = "upvote"
    DOWNVOTE = "downvote"


class VoteMixin:
    """Columns shared by the per-kind vote ledgers."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    vote_type: Mapped[str] = mapped_column(String(10), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
    )


class PaymentMethodVote(VoteMixin, Base):
    """Vote on a payment method claim."""

    __tablename__ = "payment_method_votes"
    __table_args__ = (
        # One vote per user per fact; re-voting updates the row.
        UniqueConstraint("payment_method_id", "user_id", name="uq_payment_method_votes_user"),
        CheckConstraint(
            "vote_type IN ('upvote', 'downvote')",
            name="ck_payment_method_votes_type",
        ),
    )

    fact_id: Mapped[int] = mapped_column(
        "payment_method_id",
        Integer,
        ForeignKey("payment_methods.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )


class CashDiscountVote(VoteMixin, Base):
    """Vote on a cash discount claim."""

    __tablename__ = "cash_discount_votes"
    __table_args__ = (
        UniqueConstraint("cash_discount_id", "user_id", name="uq_cash_discount_votes_user"),
        CheckConstraint(
            "vote_type IN ('upvote', 'downvote')",
            name="ck_cash_discount_votes_type",
        ),
    )

    fact_id: Mapped[int] = mapped_column(
        "cash_discount_id",
        Integer,
        ForeignKey("cash_discounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )


Vote = PaymentMethodVote | CashDiscountVote

VOTE_MODELS: dict[FactKind, type[PaymentMethodVote] | type[CashDiscountVote]] = {
    FactKind.PAYMENT_METHOD: PaymentMethodVote,
    FactKind.CASH_DISCOUNT: CashDiscountVote,
}


def vote_model_for(kind: FactKind | str) -> type[PaymentMethodVote] | type[CashDiscountVote]:
    """Return the ORM class holding the vote ledger for ``kind``."""
    return VOTE_MODELS[FactKind(kind)]
