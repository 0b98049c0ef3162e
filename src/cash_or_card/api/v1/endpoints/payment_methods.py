"""Payment-method endpoints for the Cash or Card API."""

from fastapi import APIRouter, status

from cash_or_card.api.v1.dependencies import ConsensusDep, RegisteredUserDep
from cash_or_card.models import FactKind
from cash_or_card.schemas.fact import PaymentMethodCreate, PaymentMethodResponse
from cash_or_card.schemas.vote import VoteCreate, VoteResponse

router = APIRouter(prefix="/payment-methods", tags=["payment-methods"])


@router.get("/restaurant/{restaurant_id}", response_model=list[PaymentMethodResponse])
def list_payment_methods(restaurant_id: int, engine: ConsensusDep) -> list[PaymentMethodResponse]:
    """List a restaurant's payment method facts, most trusted first."""
    facts = engine.list_by_restaurant(restaurant_id, FactKind.PAYMENT_METHOD)
    return [PaymentMethodResponse.model_validate(fact) for fact in facts]


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=PaymentMethodResponse)
def submit_payment_method(
    body: PaymentMethodCreate,
    current_user: RegisteredUserDep,
    engine: ConsensusDep,
) -> PaymentMethodResponse:
    """Propose whether a restaurant accepts a payment type."""
    fact = engine.submit(
        body.restaurant_id,
        FactKind.PAYMENT_METHOD,
        {"payment_type": body.payment_type, "is_accepted": body.is_accepted},
        current_user.id,
    )
    return PaymentMethodResponse.model_validate(fact)


@router.post("/{fact_id}/vote", response_model=PaymentMethodResponse)
def vote_payment_method(
    fact_id: int,
    body: VoteCreate,
    current_user: RegisteredUserDep,
    engine: ConsensusDep,
) -> PaymentMethodResponse:
    """Upvote or downvote a payment method fact."""
    fact = engine.vote(FactKind.PAYMENT_METHOD, fact_id, current_user.id, body.vote_type)
    return PaymentMethodResponse.model_validate(fact)


@router.get("/{fact_id}/my-vote", response_model=VoteResponse | None)
def get_my_payment_method_vote(
    fact_id: int,
    current_user: RegisteredUserDep,
    engine: ConsensusDep,
) -> VoteResponse | None:
    """Return the caller's vote on a payment method fact, or null."""
    vote = engine.get_user_vote(FactKind.PAYMENT_METHOD, fact_id, current_user.id)
    return VoteResponse.model_validate(vote) if vote is not None else None
