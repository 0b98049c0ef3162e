# mypy: ignore-errors
"""Tests for admin moderation endpoints."""

from fastapi import status


def _submit_payment(client, headers, restaurant_id, payment_type="visa", is_accepted=True):
    response = client.post(
        "/api/v1/payment-methods/",
        json={
            "restaurant_id": restaurant_id,
            "payment_type": payment_type,
            "is_accepted": is_accepted,
        },
        headers=headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()


def test_pending_requires_admin(client, auth_token) -> None:
    response = client.get("/api/v1/admin/pending", headers=auth_token)
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_pending_queue_shape(client, auth_token, admin_auth_token, restaurant) -> None:
    fact = _submit_payment(client, auth_token, restaurant.id)
    client.post(
        "/api/v1/cash-discounts/",
        json={"restaurant_id": restaurant.id, "discount_percentage": 5},
        headers=auth_token,
    )

    response = client.get("/api/v1/admin/pending", headers=admin_auth_token)

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert set(body) == {"restaurants", "paymentMethods", "cashDiscounts"}
    assert body["restaurants"][0]["name"] == "Pho Saigon"
    assert body["paymentMethods"][0]["id"] == fact["id"]
    assert body["paymentMethods"][0]["restaurant_name"] == "Pho Saigon"
    assert body["paymentMethods"][0]["submitted_by_username"] == "alice"
    assert len(body["cashDiscounts"]) == 1


def test_approve_replaces_verified_fact(
    client,
    auth_token,
    other_auth_token,
    admin_auth_token,
    restaurant,
) -> None:
    """Approving a contradicting proposal evicts the previously verified fact."""
    original = _submit_payment(client, auth_token, restaurant.id, is_accepted=True)
    approved = client.post(
        f"/api/v1/admin/approve/payment-method/{original['id']}",
        headers=admin_auth_token,
    )
    assert approved.status_code == status.HTTP_200_OK
    assert approved.json()["is_verified"] is True

    proposal = _submit_payment(client, other_auth_token, restaurant.id, is_accepted=False)
    assert proposal["id"] != original["id"]
    listed = client.get(f"/api/v1/payment-methods/restaurant/{restaurant.id}").json()
    assert len(listed) == 2

    response = client.post(
        f"/api/v1/admin/approve/payment-method/{proposal['id']}",
        headers=admin_auth_token,
    )

    assert response.status_code == status.HTTP_200_OK
    listed = client.get(f"/api/v1/payment-methods/restaurant/{restaurant.id}").json()
    assert [(row["id"], row["is_verified"], row["is_accepted"]) for row in listed] == [
        (proposal["id"], True, False)
    ]


def test_approve_restaurant(client, admin_auth_token, restaurant, admin_user) -> None:
    response = client.post(
        f"/api/v1/admin/approve/restaurant/{restaurant.id}",
        headers=admin_auth_token,
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["is_verified"] is True
    assert response.json()["verified_by"] == admin_user.id


def test_approve_unknown_kind(client, admin_auth_token) -> None:
    response = client.post("/api/v1/admin/approve/coupon/1", headers=admin_auth_token)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_approve_requires_admin(client, auth_token, restaurant) -> None:
    fact = _submit_payment(client, auth_token, restaurant.id)
    response = client.post(
        f"/api/v1/admin/approve/payment-method/{fact['id']}",
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_reject_deletes_fact(client, auth_token, admin_auth_token, restaurant) -> None:
    fact = _submit_payment(client, auth_token, restaurant.id)

    response = client.post(
        f"/api/v1/admin/reject/payment-method/{fact['id']}",
        headers=admin_auth_token,
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"deleted": True}
    assert client.get(f"/api/v1/payment-methods/restaurant/{restaurant.id}").json() == []


def test_reject_nonexistent_fact(client, admin_auth_token) -> None:
    response = client.post("/api/v1/admin/reject/cash-discount/99999", headers=admin_auth_token)

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "Item not found"


def test_reject_restaurant_is_refused(client, admin_auth_token, restaurant) -> None:
    """Restaurants are approved through moderation but never deleted by it."""
    response = client.post(
        f"/api/v1/admin/reject/restaurant/{restaurant.id}",
        headers=admin_auth_token,
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "Restaurants cannot be rejected" in response.json()["detail"]
    pending = client.get("/api/v1/admin/pending", headers=admin_auth_token).json()
    assert [row["id"] for row in pending["restaurants"]] == [restaurant.id]
