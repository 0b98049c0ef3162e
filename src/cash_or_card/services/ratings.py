"""Restaurant ratings: one star rating per user per restaurant."""
from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from cash_or_card.core.errors import ValidationError
from cash_or_card.db.time import utcnow
from cash_or_card.models import Rating, User
from cash_or_card.schemas.rating import RatingResponse
from cash_or_card.services.transactions import run_in_transaction

__all__ = ["RatingService", "MIN_RATING", "MAX_RATING"]

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


class RatingService:
    """Upserts and lists restaurant ratings."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def rate(
        self,
        restaurant_id: int,
        user_id: int,
        rating: int,
        comment: str | None = None,
    ) -> Rating:
        """Create or replace the user's rating for a restaurant.

        Raises:
            ValidationError: If ``rating`` is outside 1-5.
            NotFoundError: If the restaurant does not exist.
        """
        if not MIN_RATING <= rating <= MAX_RATING:
            raise ValidationError(f"Rating must be between {MIN_RATING} and {MAX_RATING}")

        def _rate(db: Session) -> Rating:
            existing = self.get_user_rating(restaurant_id, user_id)
            if existing is not None:
                existing.rating = rating
                existing.comment = comment
                existing.updated_at = utcnow()
                db.flush()
                return existing
            created = Rating(
                restaurant_id=restaurant_id,
                user_id=user_id,
                rating=rating,
                comment=comment,
            )
            db.add(created)
            db.flush()
            return created

        result = run_in_transaction(self.db, _rate, name="rate restaurant")
        logger.info("User %s rated restaurant %s: %d", user_id, restaurant_id, rating)
        return result

    def get_user_rating(self, restaurant_id: int, user_id: int) -> Rating | None:
        """Return the user's rating for a restaurant, if any."""
        return self.db.execute(
            select(Rating).where(Rating.restaurant_id == restaurant_id, Rating.user_id == user_id)
        ).scalars().first()

    def list_ratings(
        self,
        restaurant_id: int,
        limit: int = 10,
        offset: int = 0,
    ) -> list[RatingResponse]:
        """Return a page of ratings for a restaurant, newest first, with usernames."""
        rows = self.db.execute(
            select(Rating, User.username)
            .join(User, Rating.user_id == User.id)
            .where(Rating.restaurant_id == restaurant_id)
            .order_by(Rating.created_at.desc(), Rating.id.desc())
            .limit(limit)
            .offset(offset)
        ).all()
        return [
            RatingResponse(
                **RatingResponse.model_validate(rating).model_dump(exclude={"username"}),
                username=username,
            )
            for rating, username in rows
        ]
