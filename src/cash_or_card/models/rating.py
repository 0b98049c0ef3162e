# src/cash_or_card/models/rating.py
"""Star ratings left by users on restaurants."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    SmallInteger,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from cash_or_card.db.session import Base
from cash_or_card.db.time import utcnow


class Rating(Base):
    """One rating per (restaurant, user); a second rating replaces the first."""

    __tablename__ = "restaurant_ratings"
    __table_args__ = (
        UniqueConstraint("restaurant_id", "user_id", name="uq_restaurant_ratings_user"),
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_restaurant_ratings_range"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    restaurant_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("restaurants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    rating: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
    )
