"""Data access helpers for working with facts (the fact store)."""
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from cash_or_card.core.errors import NotFoundError, ValidationError, validate_payload
from cash_or_card.models import (
    CashDiscount,
    Fact,
    FactKind,
    PaymentMethod,
    Restaurant,
    User,
    fact_model_for,
)
from cash_or_card.schemas.fact import CashDiscountPatch, PaymentMethodPatch

__all__ = ["FactRepository", "PATCH_SCHEMAS"]

PATCH_SCHEMAS: dict[FactKind, type[PaymentMethodPatch] | type[CashDiscountPatch]] = {
    FactKind.PAYMENT_METHOD: PaymentMethodPatch,
    FactKind.CASH_DISCOUNT: CashDiscountPatch,
}
_NULLABLE_PATCH_FIELDS = frozenset({"description"})


class FactRepository:
    """Thin wrapper around database access for fact entities.

    Nothing is cached between calls: every method reads the session, and the
    caller owns the surrounding transaction.
    """

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get(self, kind: FactKind, fact_id: int) -> Fact:
        """Return a fact by identifier or raise ``NotFoundError``."""
        model = fact_model_for(kind)
        fact = self.session.execute(
            select(model)
            .where(model.id == fact_id)
            .execution_options(populate_existing=True)
        ).scalars().first()
        if fact is None:
            raise NotFoundError(f"{_label(kind)} not found")
        return fact

    def create(self, kind: FactKind, **fields: object) -> Fact:
        """Insert a new fact and flush so constraint violations surface here."""
        fact = fact_model_for(kind)(**fields)
        self.session.add(fact)
        self.session.flush()
        return fact

    def list_by_restaurant(self, restaurant_id: int, kind: FactKind) -> list[Fact]:
        """Return a restaurant's facts of one kind, most trusted first.

        Inactive cash discounts are left out.
        """
        model = fact_model_for(kind)
        stmt = select(model).where(model.restaurant_id == restaurant_id)
        if model is CashDiscount:
            stmt = stmt.where(CashDiscount.is_active.is_(True))
        stmt = stmt.order_by(model.confidence_score.desc(), model.id.asc())
        return list(self.session.execute(stmt).scalars())

    def find_pending_proposal(
        self,
        restaurant_id: int,
        payment_type: str,
    ) -> PaymentMethod | None:
        """Return the oldest unverified proposal for a payment slot, locked."""
        stmt = (
            select(PaymentMethod)
            .where(
                PaymentMethod.restaurant_id == restaurant_id,
                PaymentMethod.payment_type == payment_type,
                PaymentMethod.is_verified.is_(False),
            )
            .order_by(PaymentMethod.id.asc())
            .limit(1)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return self.session.execute(stmt).scalars().first()

    def find_verified_siblings(
        self,
        restaurant_id: int,
        payment_type: str,
        exclude_id: int,
    ) -> list[PaymentMethod]:
        """Return verified facts sharing a payment slot, other than ``exclude_id``."""
        stmt = (
            select(PaymentMethod)
            .where(
                PaymentMethod.restaurant_id == restaurant_id,
                PaymentMethod.payment_type == payment_type,
                PaymentMethod.is_verified.is_(True),
                PaymentMethod.id != exclude_id,
            )
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return list(self.session.execute(stmt).scalars())

    def list_pending(self, kind: FactKind) -> list[tuple[Fact, str, str | None]]:
        """Return unverified facts with restaurant name and submitter username."""
        model = fact_model_for(kind)
        stmt = (
            select(model, Restaurant.name, User.username)
            .join(Restaurant, model.restaurant_id == Restaurant.id)
            .outerjoin(User, model.submitted_by == User.id)
            .where(model.is_verified.is_(False))
            .order_by(model.created_at.desc(), model.id.desc())
        )
        return [(row[0], row[1], row[2]) for row in self.session.execute(stmt)]

    def update(
        self,
        kind: FactKind,
        fact_id: int,
        patch: PaymentMethodPatch | CashDiscountPatch | dict[str, object],
    ) -> Fact:
        """Apply an allow-listed partial update.

        Args:
            kind: Kind of the fact being edited.
            fact_id: Identifier of the fact.
            patch: Typed patch, or a mapping validated against the kind's patch schema.

        Raises:
            ValidationError: If the patch names a field outside the allow-list,
                carries an out-of-range value, or sets nothing.
            NotFoundError: If the fact does not exist.
        """
        patch = validate_payload(PATCH_SCHEMAS[kind], patch)

        changes = patch.model_dump(exclude_unset=True)
        if not changes:
            raise ValidationError("No valid fields to update")

        for field, value in changes.items():
            if value is None and field not in _NULLABLE_PATCH_FIELDS:
                raise ValidationError(f"{field} cannot be null")

        fact = self.get(kind, fact_id)
        for field, value in changes.items():
            setattr(fact, field, value)
        self.session.flush()
        return fact

    def delete(self, kind: FactKind, fact_id: int) -> bool:
        """Hard-delete a fact; its votes go with it through the cascade.

        Returns:
            True if a row was removed, False if none matched.
        """
        fact = self.session.get(fact_model_for(kind), fact_id)
        if fact is None:
            return False
        self.session.delete(fact)
        self.session.flush()
        return True


def _label(kind: FactKind) -> str:
    return "Payment method" if kind == FactKind.PAYMENT_METHOD else "Cash discount"

