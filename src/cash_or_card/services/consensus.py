"""Consensus engine: submissions, votes and tally/score maintenance."""

from __future__ import annotations

import logging

from pydantic import BaseModel
from sqlalchemy.orm import Session

from cash_or_card.core.errors import NotFoundError, ValidationError, validate_payload
from cash_or_card.db.locks import lock_row, lock_slot
from cash_or_card.db.time import utcnow
from cash_or_card.models import (
    Fact,
    FactKind,
    PaymentMethod,
    Vote,
    VoteType,
    fact_model_for,
)
from cash_or_card.repositories.fact_repo import FactRepository
from cash_or_card.repositories.vote_repo import Tally, VoteLedger, parse_vote_type
from cash_or_card.schemas.fact import (
    CashDiscountPatch,
    CashDiscountPayload,
    PaymentMethodPatch,
    PaymentMethodPayload,
)
from cash_or_card.services.scoring import ConfidenceScorer, get_scorer
from cash_or_card.services.transactions import run_in_transaction

__all__ = ["ConsensusEngine", "PAYMENT_SLOT_NAMESPACE", "parse_kind"]

logger = logging.getLogger(__name__)

# Advisory-lock namespace for (restaurant_id, payment_type) keys.
PAYMENT_SLOT_NAMESPACE = "payment_methods"


def parse_kind(kind: FactKind | str) -> FactKind:
    """Return ``kind`` as a ``FactKind`` or raise ``ValidationError``."""
    try:
        return FactKind(kind)
    except ValueError:
        raise ValidationError(f"Invalid fact kind: {kind}") from None


class ConsensusEngine:
    """Accepts fact submissions and votes for registered users.

    Every mutating call runs as a single transaction on the given session:
    the ledger write, the tally recount, the score and the persisted counters
    either all commit or all roll back.
    """

    def __init__(
        self,
        db: Session,
        scorer: ConfidenceScorer | None = None,
        *,
        max_attempts: int | None = None,
    ) -> None:
        self.db = db
        self.scorer = scorer or get_scorer()
        self.max_attempts = max_attempts
        self.facts = FactRepository(db)
        self.ledger = VoteLedger(db)

    def submit(
        self,
        restaurant_id: int,
        kind: FactKind | str,
        payload: BaseModel | dict[str, object],
        submitted_by: int,
    ) -> Fact:
        """Submit a fact about a restaurant.

        A payment method claim refines an existing unverified proposal for the
        same (restaurant, payment type) in place; otherwise a new proposal is
        created, even when a verified fact for that type exists. Cash
        discounts always create a new proposal. New proposals carry the
        submitter's own upvote.

        Args:
            restaurant_id: Restaurant the claim is about.
            kind: Fact kind.
            payload: Kind-specific body, validated before any write.
            submitted_by: Identifier of the submitting user.

        Returns:
            The created or refined fact.

        Raises:
            ValidationError: If the payload is malformed or out of range.
            NotFoundError: If the restaurant or user does not exist.
        """
        parsed_kind = parse_kind(kind)
        if parsed_kind == FactKind.PAYMENT_METHOD:
            body = validate_payload(PaymentMethodPayload, payload)
            fact = run_in_transaction(
                self.db,
                lambda db: self._submit_payment_method(restaurant_id, body, submitted_by),
                name="submit payment method",
                max_attempts=self.max_attempts,
            )
        else:
            discount = validate_payload(CashDiscountPayload, payload)
            fact = run_in_transaction(
                self.db,
                lambda db: self._create_seeded(
                    FactKind.CASH_DISCOUNT,
                    submitted_by,
                    restaurant_id=restaurant_id,
                    discount_percentage=discount.discount_percentage,
                    description=discount.description,
                ),
                name="submit cash discount",
                max_attempts=self.max_attempts,
            )

        logger.info(
            "User %s submitted %s %s for restaurant %s",
            submitted_by,
            parsed_kind.value,
            fact.id,
            restaurant_id,
        )
        return fact

    def vote(
        self,
        kind: FactKind | str,
        fact_id: int,
        user_id: int,
        vote_type: str | VoteType | None,
    ) -> Fact:
        """Record a user's vote and persist the recounted tally and score.

        The fact row is locked for the duration of the transaction so that
        concurrent votes on the same fact recount one after another.

        Raises:
            ValidationError: If ``vote_type`` is missing or unknown.
            NotFoundError: If the fact does not exist.
        """
        parsed_kind = parse_kind(kind)
        parsed_vote = parse_vote_type(vote_type)

        def _vote(db: Session) -> Fact:
            fact = lock_row(db, fact_model_for(parsed_kind), fact_id)
            if fact is None:
                raise NotFoundError(f"Fact {fact_id} not found")
            tally = self.ledger.cast_vote(parsed_kind, fact_id, user_id, parsed_vote)
            self._apply_tally(fact, tally)
            return fact

        fact = run_in_transaction(
            self.db,
            _vote,
            name="vote",
            max_attempts=self.max_attempts,
        )
        logger.info(
            "User %s %s %s %s (now %d/%d, score %.3f)",
            user_id,
            parsed_vote.value,
            parsed_kind.value,
            fact_id,
            fact.upvotes,
            fact.downvotes,
            fact.confidence_score,
        )
        return fact

    def get_user_vote(self, kind: FactKind | str, fact_id: int, user_id: int) -> Vote | None:
        """Return the user's current vote on a fact, or None."""
        return self.ledger.get_user_vote(parse_kind(kind), fact_id, user_id)

    def update_fact(
        self,
        kind: FactKind | str,
        fact_id: int,
        patch: PaymentMethodPatch | CashDiscountPatch | dict[str, object],
    ) -> Fact:
        """Apply an allow-listed edit to a fact."""
        parsed_kind = parse_kind(kind)
        fact = run_in_transaction(
            self.db,
            lambda db: self.facts.update(parsed_kind, fact_id, patch),
            name="update fact",
            max_attempts=self.max_attempts,
        )
        logger.info("Updated %s %s", parsed_kind.value, fact_id)
        return fact

    def list_by_restaurant(self, restaurant_id: int, kind: FactKind | str) -> list[Fact]:
        """Return a restaurant's facts of one kind ordered by confidence."""
        return self.facts.list_by_restaurant(restaurant_id, parse_kind(kind))

    def _submit_payment_method(
        self,
        restaurant_id: int,
        body: PaymentMethodPayload,
        submitted_by: int,
    ) -> PaymentMethod:
        payment_type = body.payment_type.value
        lock_slot(self.db, PAYMENT_SLOT_NAMESPACE, restaurant_id, payment_type)

        pending = self.facts.find_pending_proposal(restaurant_id, payment_type)
        if pending is not None:
            pending.is_accepted = body.is_accepted
            pending.updated_at = utcnow()
            self.db.flush()
            logger.info(
                "Refined pending %s proposal %s for restaurant %s",
                payment_type,
                pending.id,
                restaurant_id,
            )
            return pending

        fact = self._create_seeded(
            FactKind.PAYMENT_METHOD,
            submitted_by,
            restaurant_id=restaurant_id,
            payment_type=payment_type,
            is_accepted=body.is_accepted,
        )
        return fact

    def _create_seeded(self, kind: FactKind, submitted_by: int, **fields: object) -> Fact:
        fact = self.facts.create(kind, submitted_by=submitted_by, is_verified=False, **fields)
        # The submitter's implicit upvote is a real ledger row so tallies match it.
        tally = self.ledger.cast_vote(kind, fact.id, submitted_by, VoteType.UPVOTE)
        self._apply_tally(fact, tally)
        return fact

    def _apply_tally(self, fact: Fact, tally: Tally) -> None:
        fact.upvotes = tally.upvotes
        fact.downvotes = tally.downvotes
        fact.confidence_score = self.scorer.score(tally.upvotes, tally.downvotes)
        self.db.flush()

