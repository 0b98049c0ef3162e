# src/cash_or_card/models/user.py
"""SQLAlchemy models for directory users."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from sqlalchemy import CheckConstraint, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from cash_or_card.db.session import Base
from cash_or_card.db.time import utcnow


class UserRole(StrEnum):
    """Roles recognised by the authorization layer."""

    GUEST = "guest"
    USER = "user"
    ADMIN = "admin"


class User(Base):
    """A directory account.

    Credentials and sessions live outside this service; only the identity
    and role needed for authorization and attribution are kept here.
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('guest', 'user', 'admin')", name="ck_users_role"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=UserRole.USER.value)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    @property
    def is_admin(self) -> bool:
        """Return True for administrators."""
        return self.role == UserRole.ADMIN

    @property
    def is_registered(self) -> bool:
        """Return True for any non-guest account."""
        return self.role != UserRole.GUEST
