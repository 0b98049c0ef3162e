"""Restaurant rating endpoints for the Cash or Card API."""

from fastapi import APIRouter, Query, status

from cash_or_card.api.v1.dependencies import RatingsDep, RegisteredUserDep
from cash_or_card.schemas.rating import RatingCreate, RatingResponse

router = APIRouter(prefix="/ratings", tags=["ratings"])


@router.get("/restaurant/{restaurant_id}", response_model=list[RatingResponse])
def list_ratings(
    restaurant_id: int,
    ratings: RatingsDep,
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
) -> list[RatingResponse]:
    """List ratings for a restaurant, newest first."""
    return ratings.list_ratings(restaurant_id, limit=limit, offset=offset)


@router.get("/restaurant/{restaurant_id}/me", response_model=RatingResponse | None)
def get_my_rating(
    restaurant_id: int,
    current_user: RegisteredUserDep,
    ratings: RatingsDep,
) -> RatingResponse | None:
    """Return the caller's rating for a restaurant, or null."""
    rating = ratings.get_user_rating(restaurant_id, current_user.id)
    return RatingResponse.model_validate(rating) if rating is not None else None


@router.post(
    "/restaurant/{restaurant_id}",
    status_code=status.HTTP_201_CREATED,
    response_model=RatingResponse,
)
def rate_restaurant(
    restaurant_id: int,
    body: RatingCreate,
    current_user: RegisteredUserDep,
    ratings: RatingsDep,
) -> RatingResponse:
    """Create or replace the caller's rating for a restaurant."""
    rating = ratings.rate(restaurant_id, current_user.id, body.rating, body.comment)
    return RatingResponse.model_validate(rating)
