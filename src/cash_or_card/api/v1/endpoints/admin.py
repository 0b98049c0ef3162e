"""Admin moderation endpoints for the Cash or Card API."""

from typing import Any

from fastapi import APIRouter

from cash_or_card.api.v1.dependencies import AdminUserDep, ModerationDep
from cash_or_card.core.errors import ValidationError
from cash_or_card.models import FactKind
from cash_or_card.schemas.fact import CashDiscountResponse, PaymentMethodResponse
from cash_or_card.schemas.moderation import PendingQueue, RejectResponse, RestaurantSummary

router = APIRouter(prefix="/admin", tags=["admin"])

RESTAURANT_KIND = "restaurant"

_RESPONSE_SCHEMAS = {
    FactKind.PAYMENT_METHOD: PaymentMethodResponse,
    FactKind.CASH_DISCOUNT: CashDiscountResponse,
}


@router.get("/pending", response_model=PendingQueue)
def list_pending(admin: AdminUserDep, gateway: ModerationDep) -> PendingQueue:
    """Return restaurants and facts awaiting verification."""
    return gateway.list_pending()


@router.post("/approve/{kind}/{item_id}")
def approve_item(
    kind: str,
    item_id: int,
    admin: AdminUserDep,
    gateway: ModerationDep,
) -> dict[str, Any]:
    """Verify a restaurant or promote a fact, evicting its verified sibling."""
    if kind == RESTAURANT_KIND:
        restaurant = gateway.approve_restaurant(item_id, admin.id)
        return RestaurantSummary.model_validate(restaurant).model_dump(mode="json")

    fact = gateway.approve(kind, item_id, admin.id)
    schema = _RESPONSE_SCHEMAS[fact.kind]
    return schema.model_validate(fact).model_dump(mode="json")


@router.post("/reject/{kind}/{item_id}", response_model=RejectResponse)
def reject_item(
    kind: str,
    item_id: int,
    admin: AdminUserDep,
    gateway: ModerationDep,
) -> RejectResponse:
    """Delete a fact and its votes."""
    if kind == RESTAURANT_KIND:
        raise ValidationError(
            "Restaurants cannot be rejected through moderation; "
            "unverified restaurants stay listed until approved or removed by an operator"
        )
    return RejectResponse(deleted=gateway.reject(kind, item_id))
