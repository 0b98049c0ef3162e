"""Tests for the restaurant rating service."""

import pytest
from sqlalchemy.orm import Session

from cash_or_card.core.errors import NotFoundError, ValidationError
from cash_or_card.models import Restaurant, User
from cash_or_card.services.ratings import RatingService


def test_rate_creates_then_replaces(
    db_session: Session,
    restaurant: Restaurant,
    test_user: User,
) -> None:
    service = RatingService(db_session)

    first = service.rate(restaurant.id, test_user.id, 4, "Great pho")
    second = service.rate(restaurant.id, test_user.id, 2)

    assert second.id == first.id
    assert second.rating == 2
    assert second.comment is None
    assert service.get_user_rating(restaurant.id, test_user.id).rating == 2


@pytest.mark.parametrize("rating", [0, 6, -1])
def test_rate_out_of_range_rejected(
    db_session: Session,
    restaurant: Restaurant,
    test_user: User,
    rating: int,
) -> None:
    with pytest.raises(ValidationError):
        RatingService(db_session).rate(restaurant.id, test_user.id, rating)


def test_rate_unknown_restaurant_raises_not_found(db_session: Session, test_user: User) -> None:
    with pytest.raises(NotFoundError):
        RatingService(db_session).rate(404, test_user.id, 3)


def test_list_ratings_pages_with_usernames(
    db_session: Session,
    restaurant: Restaurant,
    test_user: User,
    other_user: User,
) -> None:
    service = RatingService(db_session)
    service.rate(restaurant.id, test_user.id, 5)
    service.rate(restaurant.id, other_user.id, 3, "Slow service")

    listed = service.list_ratings(restaurant.id)
    assert [(row.username, row.rating) for row in listed] == [("bob", 3), ("alice", 5)]

    page = service.list_ratings(restaurant.id, limit=1, offset=1)
    assert [row.username for row in page] == ["alice"]


def test_get_user_rating_without_rating_is_none(
    db_session: Session,
    restaurant: Restaurant,
    other_user: User,
) -> None:
    assert RatingService(db_session).get_user_rating(restaurant.id, other_user.id) is None
