# src/cash_or_card/models/fact.py
"""Models for crowd-submitted facts about restaurants."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from cash_or_card.db.session import Base
from cash_or_card.db.time import utcnow


class FactKind(StrEnum):
    """Kinds of fact; the values double as URL slugs."""

    PAYMENT_METHOD = "payment-method"
    CASH_DISCOUNT = "cash-discount"


class PaymentType(StrEnum):
    """Payment methods a restaurant may accept."""

    CASH = "cash"
    DEBIT = "debit"
    VISA = "visa"
    MASTERCARD = "mastercard"
    AMEX = "amex"
    DISCOVER = "discover"
    OTHER = "other"


class FactMixin:
    """Columns shared by every fact kind: attribution, verification, tally."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    restaurant_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("restaurants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    submitted_by: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    verified_by: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    verified_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Denormalized from the vote ledger; rewritten on every vote.
    upvotes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    downvotes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    confidence_score: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
    )


class PaymentMethod(FactMixin, Base):
    """Claim that a restaurant does or does not accept a payment type.

    At most one verified row may exist per (restaurant_id, payment_type);
    any number of unverified proposals may compete with it.
    """

    __tablename__ = "payment_methods"
    __table_args__ = (
        CheckConstraint(
            "payment_type IN ('cash', 'debit', 'visa', 'mastercard', 'amex', 'discover', 'other')",
            name="ck_payment_methods_payment_type",
        ),
        CheckConstraint("upvotes >= 0 AND downvotes >= 0", name="ck_payment_methods_tally"),
        Index("ix_payment_methods_slot", "restaurant_id", "payment_type"),
        # Store-level backstop for the single-verified invariant.
        Index(
            "uq_payment_methods_verified_slot",
            "restaurant_id",
            "payment_type",
            unique=True,
            sqlite_where=text("is_verified = 1"),
            postgresql_where=text("is_verified"),
        ),
    )

    kind = FactKind.PAYMENT_METHOD

    payment_type: Mapped[str] = mapped_column(String(20), nullable=False)
    is_accepted: Mapped[bool] = mapped_column(Boolean, nullable=False)


class CashDiscount(FactMixin, Base):
    """Claim that paying cash earns a discount at a restaurant."""

    __tablename__ = "cash_discounts"
    __table_args__ = (
        CheckConstraint(
            "discount_percentage >= 0 AND discount_percentage <= 100",
            name="ck_cash_discounts_percentage",
        ),
        CheckConstraint("upvotes >= 0 AND downvotes >= 0", name="ck_cash_discounts_tally"),
    )

    kind = FactKind.CASH_DISCOUNT

    discount_percentage: Mapped[float] = mapped_column(
        Numeric(5, 2, asdecimal=False),
        nullable=False,
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Soft-delete flag; inactive discounts drop out of public listings.
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


Fact = PaymentMethod | CashDiscount

FACT_MODELS: dict[FactKind, type[PaymentMethod] | type[CashDiscount]] = {
    FactKind.PAYMENT_METHOD: PaymentMethod,
    FactKind.CASH_DISCOUNT: CashDiscount,
}


def fact_model_for(kind: FactKind | str) -> type[PaymentMethod] | type[CashDiscount]:
    """Return the ORM class storing facts of ``kind``."""
    return FACT_MODELS[FactKind(kind)]
