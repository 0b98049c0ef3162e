"""The vote ledger: per-user votes on facts and the tallies derived from them."""
from __future__ import annotations

import logging
from typing import NamedTuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from cash_or_card.core.errors import NotFoundError, ValidationError
from cash_or_card.models import FactKind, Vote, VoteType, fact_model_for, vote_model_for

__all__ = ["Tally", "VoteLedger", "parse_vote_type"]

logger = logging.getLogger(__name__)


class Tally(NamedTuple):
    """Upvote and downvote counts for one fact."""

    upvotes: int
    downvotes: int


def parse_vote_type(vote_type: str | VoteType | None) -> VoteType:
    """Return ``vote_type`` as a ``VoteType`` or raise ``ValidationError``."""
    try:
        return VoteType(vote_type)
    except ValueError:
        raise ValidationError("Valid vote_type (upvote/downvote) is required") from None


class VoteLedger:
    """Records one vote per user per fact and recounts tallies from the rows.

    Tallies are always recomputed with a grouped count rather than adjusted
    incrementally, so the counters stored on a fact cannot drift from the
    ledger.
    """

    def __init__(self, session: Session) -> None:
        """Initialize the ledger with a SQLAlchemy session."""
        self.session = session

    def get_user_vote(self, kind: FactKind, fact_id: int, user_id: int) -> Vote | None:
        """Return the vote ``user_id`` cast on a fact, if any."""
        model = vote_model_for(kind)
        return self.session.execute(
            select(model).where(model.fact_id == fact_id, model.user_id == user_id)
        ).scalars().first()

    def cast_vote(
        self,
        kind: FactKind,
        fact_id: int,
        user_id: int,
        vote_type: str | VoteType,
    ) -> Tally:
        """Insert or update the caller's vote and return the fresh tally.

        Re-casting the same vote type leaves the ledger untouched; casting the
        other type flips the existing row in place.

        Args:
            kind: Kind of the fact voted on.
            fact_id: Identifier of the fact.
            user_id: Identifier of the voter.
            vote_type: ``"upvote"`` or ``"downvote"``.

        Returns:
            The recounted tally for the fact.

        Raises:
            ValidationError: If ``vote_type`` is not a known vote type.
            NotFoundError: If the fact does not exist.
        """
        parsed = parse_vote_type(vote_type)
        fact_model = fact_model_for(kind)
        exists = self.session.execute(
            select(fact_model.id).where(fact_model.id == fact_id)
        ).first()
        if exists is None:
            raise NotFoundError("Fact not found")

        existing = self.get_user_vote(kind, fact_id, user_id)
        if existing is None:
            self.session.add(
                vote_model_for(kind)(fact_id=fact_id, user_id=user_id, vote_type=parsed.value)
            )
        elif existing.vote_type != parsed:
            logger.debug(
                "User %s changed %s vote on fact %s to %s",
                user_id,
                kind.value,
                fact_id,
                parsed.value,
            )
            existing.vote_type = parsed.value
        self.session.flush()
        return self.tally(kind, fact_id)

    def tally(self, kind: FactKind, fact_id: int) -> Tally:
        """Count the ledger rows for a fact grouped by vote type."""
        model = vote_model_for(kind)
        rows = self.session.execute(
            select(model.vote_type, func.count())
            .where(model.fact_id == fact_id)
            .group_by(model.vote_type)
        ).all()
        counts = {vote_type: count for vote_type, count in rows}
        return Tally(
            upvotes=int(counts.get(VoteType.UPVOTE.value, 0)),
            downvotes=int(counts.get(VoteType.DOWNVOTE.value, 0)),
        )
