"""Cash-discount endpoints for the Cash or Card API."""

from typing import Any

from fastapi import APIRouter, Body, status

from cash_or_card.api.v1.dependencies import ConsensusDep, RegisteredUserDep
from cash_or_card.models import FactKind
from cash_or_card.schemas.fact import CashDiscountCreate, CashDiscountResponse
from cash_or_card.schemas.vote import VoteCreate, VoteResponse

router = APIRouter(prefix="/cash-discounts", tags=["cash-discounts"])


@router.get("/restaurant/{restaurant_id}", response_model=list[CashDiscountResponse])
def list_cash_discounts(restaurant_id: int, engine: ConsensusDep) -> list[CashDiscountResponse]:
    """List a restaurant's active cash discounts, most trusted first."""
    facts = engine.list_by_restaurant(restaurant_id, FactKind.CASH_DISCOUNT)
    return [CashDiscountResponse.model_validate(fact) for fact in facts]


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=CashDiscountResponse)
def submit_cash_discount(
    body: CashDiscountCreate,
    current_user: RegisteredUserDep,
    engine: ConsensusDep,
) -> CashDiscountResponse:
    """Propose a cash discount for a restaurant."""
    fact = engine.submit(
        body.restaurant_id,
        FactKind.CASH_DISCOUNT,
        {"discount_percentage": body.discount_percentage, "description": body.description},
        current_user.id,
    )
    return CashDiscountResponse.model_validate(fact)


@router.put("/{fact_id}", response_model=CashDiscountResponse)
def update_cash_discount(
    fact_id: int,
    current_user: RegisteredUserDep,
    engine: ConsensusDep,
    patch: dict[str, Any] = Body(...),
) -> CashDiscountResponse:
    """Edit the percentage, description or active flag of a cash discount."""
    fact = engine.update_fact(FactKind.CASH_DISCOUNT, fact_id, patch)
    return CashDiscountResponse.model_validate(fact)


@router.post("/{fact_id}/vote", response_model=CashDiscountResponse)
def vote_cash_discount(
    fact_id: int,
    body: VoteCreate,
    current_user: RegisteredUserDep,
    engine: ConsensusDep,
) -> CashDiscountResponse:
    """Upvote or downvote a cash discount."""
    fact = engine.vote(FactKind.CASH_DISCOUNT, fact_id, current_user.id, body.vote_type)
    return CashDiscountResponse.model_validate(fact)


@router.get("/{fact_id}/my-vote", response_model=VoteResponse | None)
def get_my_cash_discount_vote(
    fact_id: int,
    current_user: RegisteredUserDep,
    engine: ConsensusDep,
) -> VoteResponse | None:
    """Return the caller's vote on a cash discount, or null."""
    vote = engine.get_user_vote(FactKind.CASH_DISCOUNT, fact_id, current_user.id)
    return VoteResponse.model_validate(vote) if vote is not None else None
