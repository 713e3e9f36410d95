"""
Tests for the /api/auth endpoints and the 401 rejection shapes.
"""
from datetime import timedelta

from fastapi.testclient import TestClient

from app.core.roles import Role, AccountStatus
from app.db.models.user import User
from app.main import create_app
from app.services import account_service
from app.util.time import utcnow

TEST_PASSWORD = "testpass123"


def register_payload(**overrides):
    payload = {
        "email": "jean.dupont@example.com",
        "password": TEST_PASSWORD,
        "first_name": "Jean",
        "last_name": "Dupont",
        "role": "candidate",
    }
    payload.update(overrides)
    return payload


def test_register_creates_pending_account(client, db):
    response = client.post("/api/auth/register", json=register_payload(email="Jean.Dupont@Example.com"))

    assert response.status_code == 201
    data = response.json()
    assert data["user"]["email"] == "jean.dupont@example.com"
    assert data["user"]["role"] == "candidate"
    assert data["user"]["status"] == "pending"
    assert data["token_type"] == "bearer"
    assert data["access_token"]
    assert "password_hash" not in data["user"]

    user = db.query(User).filter(User.email == "jean.dupont@example.com").first()
    assert user is not None
    assert user.password_hash != TEST_PASSWORD


def test_register_token_rejected_until_activation(client, db):
    token = client.post("/api/auth/register", json=register_payload()).json()["access_token"]
    headers = {"Authorization": f"Bearer {token}"}

    response = client.get("/api/auth/profile", headers=headers)
    assert response.status_code == 401
    assert response.json()["detail"]["code"] == "account_unavailable"

    user = account_service.find_account_by_email(db, "jean.dupont@example.com")
    account_service.update_status_and_role(db, user, AccountStatus.ACTIVE)

    assert client.get("/api/auth/profile", headers=headers).status_code == 200


def test_register_duplicate_email(client):
    assert client.post("/api/auth/register", json=register_payload()).status_code == 201
    response = client.post("/api/auth/register", json=register_payload(email="JEAN.DUPONT@example.com"))
    assert response.status_code == 409


def test_register_cannot_pick_privileged_role(client):
    for role in ("admin", "moderator"):
        response = client.post("/api/auth/register", json=register_payload(role=role))
        assert response.status_code == 422


def test_register_password_limits(client):
    assert client.post("/api/auth/register", json=register_payload(password="12345")).status_code == 422
    too_long = "é" * 37  # 74 bytes
    assert client.post("/api/auth/register", json=register_payload(password=too_long)).status_code == 422


def test_register_invalid_email(client):
    assert client.post("/api/auth/register", json=register_payload(email="not-an-email")).status_code == 422


def test_login_success(client, candidate):
    response = client.post("/api/auth/login", json={"email": candidate.email, "password": TEST_PASSWORD})

    assert response.status_code == 200
    data = response.json()
    assert data["access_token"]
    assert data["user"]["id"] == candidate.id

    headers = {"Authorization": f"Bearer {data['access_token']}"}
    assert client.get("/api/auth/profile", headers=headers).status_code == 200


def test_login_wrong_password(client, candidate):
    response = client.post("/api/auth/login", json={"email": candidate.email, "password": "wrongpass"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid email or password"


def test_login_unknown_email_same_message(client):
    response = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": TEST_PASSWORD})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid email or password"


def test_login_inactive_account(client, make_user):
    make_user("gone@example.com", status=AccountStatus.INACTIVE)
    response = client.post("/api/auth/login", json={"email": "gone@example.com", "password": TEST_PASSWORD})
    assert response.status_code == 403


def test_profile_includes_subscription_state(client, candidate, auth_headers, make_subscription):
    response = client.get("/api/auth/profile", headers=auth_headers(candidate))
    assert response.status_code == 200
    assert response.json()["subscription_status"] == "free"
    assert response.json()["subscription_end_date"] is None

    make_subscription(candidate)
    data = client.get("/api/auth/profile", headers=auth_headers(candidate)).json()
    assert data["subscription_status"] == "premium"
    assert data["subscription_end_date"] is not None


def test_profile_shows_expired_subscription(client, candidate, auth_headers, make_subscription):
    make_subscription(candidate, ends_in=timedelta(days=-3))
    data = client.get("/api/auth/profile", headers=auth_headers(candidate)).json()
    assert data["subscription_status"] == "expired"


def test_update_profile(client, customer, auth_headers):
    response = client.put("/api/auth/profile", json={"phone": " 0612345678 "}, headers=auth_headers(customer))
    assert response.status_code == 200
    assert response.json()["phone"] == "0612345678"


def test_update_profile_rejects_blank_name(client, customer, auth_headers):
    response = client.put("/api/auth/profile", json={"first_name": "   "}, headers=auth_headers(customer))
    assert response.status_code == 422

    profile = client.get("/api/auth/profile", headers=auth_headers(customer)).json()
    assert profile["first_name"] == "Test"


def test_update_profile_trims_names(client, customer, auth_headers):
    response = client.put("/api/auth/profile", json={"last_name": "  Martin "}, headers=auth_headers(customer))
    assert response.status_code == 200
    assert response.json()["last_name"] == "Martin"


def test_register_rejects_blank_name(client):
    assert client.post("/api/auth/register", json=register_payload(first_name="  ")).status_code == 422


def test_update_profile_requires_a_field(client, customer, auth_headers):
    assert client.put("/api/auth/profile", json={}, headers=auth_headers(customer)).status_code == 400


def test_change_password(client, customer, auth_headers):
    headers = auth_headers(customer)
    bad = client.put(
        "/api/auth/change-password",
        json={"current_password": "wrongpass", "new_password": "newpass456"},
        headers=headers,
    )
    assert bad.status_code == 400

    ok = client.put(
        "/api/auth/change-password",
        json={"current_password": TEST_PASSWORD, "new_password": "newpass456"},
        headers=headers,
    )
    assert ok.status_code == 200

    login = client.post("/api/auth/login", json={"email": customer.email, "password": "newpass456"})
    assert login.status_code == 200


def test_logout(client, customer, auth_headers):
    assert client.post("/api/auth/logout", headers=auth_headers(customer)).status_code == 200


def test_missing_token(client):
    response = client.get("/api/auth/profile")
    assert response.status_code == 401
    assert response.json()["detail"]["code"] == "unauthenticated"
    assert response.headers["www-authenticate"] == "Bearer"


def test_malformed_token(client):
    response = client.get("/api/auth/profile", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["detail"]["code"] == "token_invalid"


def test_expired_token(client, customer, auth_headers):
    headers = auth_headers(customer, now=utcnow() - timedelta(days=2))
    response = client.get("/api/auth/profile", headers=headers)
    assert response.status_code == 401
    assert response.json()["detail"]["code"] == "token_expired"


def test_role_change_applies_on_next_request(client, db, make_user, auth_headers):
    """A candidate promoted to moderator gets moderator access with the old token."""
    user = make_user("promote@example.com", role=Role.CANDIDATE)
    headers = auth_headers(user)

    assert client.get("/api/recruitment/admin/stats", headers=headers).status_code == 403

    account_service.update_status_and_role(db, user, AccountStatus.ACTIVE, Role.MODERATOR)

    response = client.get("/api/recruitment/admin/stats", headers=headers)
    assert response.status_code == 200


def test_database_failure_is_a_server_error(settings, auth_headers, candidate):
    """Identity lookups that hit a broken database answer 500, never 401/403."""
    broken = create_app(settings)  # no tables created
    response = TestClient(broken).get("/api/auth/profile", headers=auth_headers(candidate))

    assert response.status_code == 500
    assert response.json()["detail"]["code"] == "server_error"
    broken.state.engine.dispose()
