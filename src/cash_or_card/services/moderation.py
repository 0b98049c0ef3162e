"""Moderation services for Cash or Card.

Admins promote proposals to verified facts or reject them outright. Scores
never change verification state; only these transitions do.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from cash_or_card.core.errors import NotFoundError
from cash_or_card.db.locks import lock_row, lock_slot
from cash_or_card.db.time import utcnow
from cash_or_card.models import Fact, FactKind, PaymentMethod, Restaurant, fact_model_for
from cash_or_card.repositories.fact_repo import FactRepository
from cash_or_card.schemas.fact import CashDiscountResponse, PaymentMethodResponse
from cash_or_card.schemas.moderation import (
    PendingCashDiscount,
    PendingPaymentMethod,
    PendingQueue,
    RestaurantSummary,
)
from cash_or_card.services.consensus import PAYMENT_SLOT_NAMESPACE, parse_kind
from cash_or_card.services.transactions import run_in_transaction

__all__ = ["ModerationGateway"]

logger = logging.getLogger(__name__)


class ModerationGateway:
    """Service handling admin verification state transitions.

    State machine per fact: unverified -> verified (approve), and
    unverified/verified -> deleted (reject).
    """

    def __init__(self, db: Session, *, max_attempts: int | None = None) -> None:
        self.db = db
        self.max_attempts = max_attempts
        self.facts = FactRepository(db)

    def approve(self, kind: FactKind | str, fact_id: int, admin_id: int) -> Fact:
        """Mark a fact verified, evicting any verified sibling of the same payment type.

        For payment methods the transaction first serializes on the
        (restaurant, payment type) key, so two competing proposals approved at
        the same time cannot both end up verified.

        Args:
            kind: Fact kind.
            fact_id: Identifier of the proposal to promote.
            admin_id: Identifier of the approving admin.

        Returns:
            The verified fact.

        Raises:
            NotFoundError: If the fact does not exist.
        """
        parsed_kind = parse_kind(kind)
        evicted: list[int] = []

        def _approve(db: Session) -> Fact:
            evicted.clear()
            model = fact_model_for(parsed_kind)
            if model is PaymentMethod:
                target = self.facts.get(parsed_kind, fact_id)
                lock_slot(db, PAYMENT_SLOT_NAMESPACE, target.restaurant_id, target.payment_type)
            fact = lock_row(db, model, fact_id)
            if fact is None:
                raise NotFoundError("Item not found")

            if isinstance(fact, PaymentMethod):
                siblings = self.facts.find_verified_siblings(
                    fact.restaurant_id,
                    fact.payment_type,
                    exclude_id=fact.id,
                )
                for sibling in siblings:
                    evicted.append(sibling.id)
                    db.delete(sibling)
                # Evictions must reach the store before the partial unique index sees the promotion.
                db.flush()

            fact.is_verified = True
            fact.verified_by = admin_id
            fact.verified_at = utcnow()
            db.flush()
            return fact

        fact = run_in_transaction(
            self.db,
            _approve,
            name="approve",
            max_attempts=self.max_attempts,
        )
        if evicted:
            logger.info(
                "Admin %s approved %s %s, evicting verified %s",
                admin_id,
                parsed_kind.value,
                fact_id,
                evicted,
            )
        else:
            logger.info("Admin %s approved %s %s", admin_id, parsed_kind.value, fact_id)
        return fact

    def reject(self, kind: FactKind | str, fact_id: int) -> bool:
        """Delete a fact and its votes.

        Raises:
            NotFoundError: If no fact with ``fact_id`` exists.
        """
        parsed_kind = parse_kind(kind)

        def _reject(db: Session) -> bool:
            if not self.facts.delete(parsed_kind, fact_id):
                raise NotFoundError("Item not found")
            return True

        deleted = run_in_transaction(
            self.db,
            _reject,
            name="reject",
            max_attempts=self.max_attempts,
        )
        logger.info("Rejected %s %s", parsed_kind.value, fact_id)
        return deleted

    def approve_restaurant(self, restaurant_id: int, admin_id: int) -> Restaurant:
        """Mark a user-submitted restaurant as verified."""

        def _approve(db: Session) -> Restaurant:
            restaurant = lock_row(db, Restaurant, restaurant_id)
            if restaurant is None:
                raise NotFoundError("Item not found")
            restaurant.is_verified = True
            restaurant.verified_by = admin_id
            restaurant.verified_at = utcnow()
            db.flush()
            return restaurant

        restaurant = run_in_transaction(
            self.db,
            _approve,
            name="approve restaurant",
            max_attempts=self.max_attempts,
        )
        logger.info("Admin %s approved restaurant %s", admin_id, restaurant_id)
        return restaurant

    def list_pending(self) -> PendingQueue:
        """Return unverified restaurants and facts, newest first."""
        restaurants = self.db.execute(
            select(Restaurant)
            .where(Restaurant.is_verified.is_(False))
            .order_by(Restaurant.created_at.desc(), Restaurant.id.desc())
        ).scalars()

        payment_methods = [
            PendingPaymentMethod(
                **PaymentMethodResponse.model_validate(fact).model_dump(),
                restaurant_name=restaurant_name,
                submitted_by_username=username,
            )
            for fact, restaurant_name, username in self.facts.list_pending(FactKind.PAYMENT_METHOD)
        ]
        cash_discounts = [
            PendingCashDiscount(
                **CashDiscountResponse.model_validate(fact).model_dump(),
                restaurant_name=restaurant_name,
                submitted_by_username=username,
            )
            for fact, restaurant_name, username in self.facts.list_pending(FactKind.CASH_DISCOUNT)
        ]
        return PendingQueue(
            restaurants=[RestaurantSummary.model_validate(row) for row in restaurants],
            payment_methods=payment_methods,
            cash_discounts=cash_discounts,
        )
