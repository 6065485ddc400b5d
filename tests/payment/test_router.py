"""Tests for the payment HTTP routes."""

from autosphere.user.models import User


def _payload(listing, amount: float = 215000) -> dict:
    return {
        "item_type": "Purchase",
        "item_id": str(listing.id),
        "amount": amount,
        "method": "Bank Transfer",
        "reference_id": "RCPT-2024-001",
    }


def test_submit_and_reject(login_as, buyer: User, admin: User, listing):
    response = login_as(buyer).post("/payments", json=_payload(listing))
    assert response.status_code == 201
    payment = response.json()
    assert payment["status"] == "Pending"
    assert payment["user_name"] == buyer.full_name

    client = login_as(admin)
    response = client.post(f"/payments/{payment['id']}/reject")
    assert response.json()["status"] == "Rejected"

    response = client.post(f"/payments/{payment['id']}/verify")
    assert response.status_code == 400
    assert response.json() == {
        "type": "payment_already_settled",
        "message": "Payment is already rejected",
        "current": "Rejected",
    }


def test_stats_is_admin_only(login_as, buyer: User, admin: User, listing):
    payment = login_as(buyer).post("/payments", json=_payload(listing, 5000)).json()
    login_as(admin).post(f"/payments/{payment['id']}/verify")

    assert login_as(buyer).get("/payments/stats").status_code == 403
    response = login_as(admin).get("/payments/stats")
    assert response.json() == {"verified_volume": 5000.0, "pending_count": 0}


def test_amount_must_be_positive(login_as, buyer: User, listing):
    response = login_as(buyer).post("/payments", json=_payload(listing, 0))

    assert response.status_code == 422


def test_other_buyer_cannot_read(login_as, buyer: User, other_buyer: User, listing):
    payment = login_as(buyer).post("/payments", json=_payload(listing)).json()

    response = login_as(other_buyer).get(f"/payments/{payment['id']}")

    assert response.status_code == 403
    assert response.json()["reason"] == "not_owner"
    assert login_as(other_buyer).get("/payments").json() == []
