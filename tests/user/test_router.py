"""Tests for the user HTTP routes."""

from unittest.mock import MagicMock

from autosphere.auth.service import FirebaseUser
from autosphere.user.models import User

NEW_ACCOUNT = {
    "email": "Ops@Example.com",
    "password": "securepassword123",
    "first_name": "Olive",
    "last_name": "Ops",
}


def test_get_me_hides_internal_fields(login_as, buyer: User):
    response = login_as(buyer).get("/users/me")

    assert response.status_code == 200
    body = response.json()
    assert body["email"] == buyer.email
    assert "external_id" not in body
    assert "is_suspended" not in body
    assert body["created_at"].endswith("Z")


def test_update_me_ignores_privileged_fields(login_as, buyer: User):
    response = login_as(buyer).patch(
        "/users/me", json={"first_name": "Ada", "role": "admin", "is_verified": True}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["first_name"] == "Ada"
    assert body["role"] == "buyer"
    assert body["is_verified"] is False


def test_update_me_ignores_nulls(login_as, buyer: User):
    response = login_as(buyer).patch(
        "/users/me", json={"first_name": None, "last_name": "Lovelace"}
    )

    assert response.status_code == 200
    assert response.json()["first_name"] == "Buyer"
    assert response.json()["last_name"] == "Lovelace"


def test_security_settings(login_as, buyer: User):
    response = login_as(buyer).patch("/users/me/security", json={"login_alerts": False})

    assert response.json()["security_settings"] == {
        "two_factor_enabled": False,
        "login_alerts": False,
    }


def test_favorites_round_trip(login_as, buyer: User, listing):
    client = login_as(buyer)

    response = client.put(f"/users/me/favorites/{listing.id}")
    assert response.json()["favorites"] == [str(listing.id)]

    favorites = client.get("/users/me/favorites").json()
    assert [item["id"] for item in favorites] == [str(listing.id)]


def test_admin_suspends_user_who_can_still_read(
    login_as, admin: User, buyer: User, listing
):
    response = login_as(admin).post(f"/users/{buyer.id}/suspend")
    assert response.json()["is_suspended"] is True

    client = login_as(buyer)
    assert client.get("/users/me").status_code == 200
    response = client.put(f"/users/me/favorites/{listing.id}")
    assert response.status_code == 403
    assert response.json()["reason"] == "suspended"


def test_role_change(login_as, admin: User, buyer: User):
    response = login_as(admin).put(f"/users/{buyer.id}/role", json={"role": "dealer"})

    assert response.status_code == 200
    assert response.json()["role"] == "dealer"


def test_admin_self_action_is_400(login_as, admin: User):
    response = login_as(admin).post(f"/users/{admin.id}/suspend")

    assert response.status_code == 400


def test_bulk_routes(login_as, admin: User, buyer: User, dealer: User):
    client = login_as(admin)

    assert client.post("/users/suspend-all").json() == {"count": 2}
    assert client.post("/users/restore-all").json() == {"count": 2}


def test_admin_routes_forbidden_for_buyers(login_as, buyer: User, dealer: User):
    client = login_as(buyer)

    assert client.get("/users").status_code == 403
    assert client.get(f"/users/{dealer.id}").status_code == 403
    assert client.post(f"/users/{dealer.id}/verify").status_code == 403


def test_users_require_authentication(login_as):
    assert login_as(None).get("/users/me").status_code == 401


# --- POST /users ---


def test_admin_creates_admin_account(
    login_as, admin: User, mock_firebase_auth: MagicMock
):
    mock_firebase_auth.create_user.return_value = FirebaseUser(uid="uid-ops")

    response = login_as(admin).post("/users", json={**NEW_ACCOUNT, "role": "admin"})

    assert response.status_code == 201
    body = response.json()
    assert body["email"] == "ops@example.com"
    assert body["role"] == "admin"
    assert body["is_verified"] is False
    assert body["verification_override"] is False
    mock_firebase_auth.create_user.assert_called_once_with(
        email="ops@example.com",
        password="securepassword123",
        display_name="Olive Ops",
    )


def test_admin_creates_pre_verified_dealer(
    login_as, admin: User, mock_firebase_auth: MagicMock
):
    mock_firebase_auth.create_user.return_value = FirebaseUser(uid="uid-ops")

    response = login_as(admin).post(
        "/users", json={**NEW_ACCOUNT, "role": "dealer", "is_verified": True}
    )

    assert response.status_code == 201
    body = response.json()
    assert body["is_verified"] is True
    assert body["verification_override"] is True
    assert body["kyc_status"] == "none"


def test_create_user_forbidden_for_non_admins(
    login_as, buyer: User, mock_firebase_auth: MagicMock
):
    response = login_as(buyer).post("/users", json={**NEW_ACCOUNT, "role": "admin"})

    assert response.status_code == 403
    mock_firebase_auth.create_user.assert_not_called()


def test_create_user_duplicate_email_is_409(
    login_as, admin: User, buyer: User, mock_firebase_auth: MagicMock
):
    response = login_as(admin).post(
        "/users", json={**NEW_ACCOUNT, "email": buyer.email.upper()}
    )

    assert response.status_code == 409
    assert response.json()["type"] == "email_exists"
    mock_firebase_auth.create_user.assert_not_called()
