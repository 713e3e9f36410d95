"""
Tests for /api/subscriptions.
"""
from datetime import datetime, timedelta

from app.core.roles import Role


def parse(value):
    return datetime.fromisoformat(value.replace("Z", "+00:00")).replace(tzinfo=None)


def test_subscribe_monthly(client, candidate, auth_headers):
    response = client.post("/api/subscriptions/subscribe", json={"plan": "monthly"}, headers=auth_headers(candidate))

    assert response.status_code == 201
    data = response.json()
    assert data["user_id"] == candidate.id
    assert data["plan"] == "monthly"
    assert data["status"] == "active"
    assert parse(data["ends_at"]) - parse(data["starts_at"]) == timedelta(days=30)


def test_subscribe_unknown_plan(client, candidate, auth_headers):
    response = client.post("/api/subscriptions/subscribe", json={"plan": "yearly"}, headers=auth_headers(candidate))
    assert response.status_code == 422


def test_subscribe_requires_authentication(client):
    assert client.post("/api/subscriptions/subscribe", json={"plan": "monthly"}).status_code == 401


def test_my_subscription_lifecycle(client, candidate, auth_headers):
    headers = auth_headers(candidate)

    assert client.get("/api/subscriptions/me", headers=headers).json() == {
        "status": "free", "starts_at": None, "ends_at": None,
    }

    client.post("/api/subscriptions/subscribe", json={"plan": "quarterly"}, headers=headers)
    assert client.get("/api/subscriptions/me", headers=headers).json()["status"] == "premium"

    assert client.post("/api/subscriptions/cancel", headers=headers).status_code == 204
    data = client.get("/api/subscriptions/me", headers=headers).json()
    assert data["status"] == "free"
    assert data["ends_at"] is not None


def test_subscribing_unlocks_applications(client, candidate, auth_headers):
    headers = auth_headers(candidate)
    payload = {
        "position": "Electricien",
        "experience": 2,
        "education": "BEP",
        "motivation": "Motivé",
        "availability": "2026-11-01",
    }

    assert client.post("/api/recruitment/applications", json=payload, headers=headers).status_code == 403
    client.post("/api/subscriptions/subscribe", json={"plan": "monthly"}, headers=headers)
    assert client.post("/api/recruitment/applications", json=payload, headers=headers).status_code == 201


def test_list_subscriptions_admin_sees_all(client, admin, candidate, customer, make_subscription, auth_headers):
    make_subscription(candidate)
    make_subscription(customer)

    response = client.get("/api/subscriptions", headers=auth_headers(admin))
    assert response.status_code == 200
    assert {s["user_id"] for s in response.json()["subscriptions"]} == {candidate.id, customer.id}


def test_list_subscriptions_partner_sees_own(client, partner, candidate, make_subscription, auth_headers):
    make_subscription(candidate)
    make_subscription(partner)

    response = client.get("/api/subscriptions", headers=auth_headers(partner))
    assert [s["user_id"] for s in response.json()["subscriptions"]] == [partner.id]


def test_list_subscriptions_forbidden_for_others(client, candidate, auth_headers):
    response = client.get("/api/subscriptions", headers=auth_headers(candidate))
    assert response.status_code == 403
    assert response.json()["detail"]["code"] == "forbidden"


def test_subscribers_for_partner_limited_to_own_applicants(
    client, partner, make_user, make_subscription, auth_headers
):
    applicant = make_user("applicant@example.com", role=Role.CANDIDATE)
    bystander = make_user("bystander@example.com", role=Role.CANDIDATE)
    make_subscription(applicant)
    make_subscription(bystander)

    offer = client.post("/api/offers", json={
        "title": "Electricien",
        "description": "Tertiaire",
        "type": "CDD",
        "starts_on": "2026-11-01",
        "ends_on": "2027-01-31",
    }, headers=auth_headers(partner)).json()
    client.post("/api/recruitment/applications", json={
        "offer_id": offer["id"],
        "position": "Electricien",
        "experience": 3,
        "education": "Bac pro",
        "motivation": "Disponible",
        "availability": "2026-11-01",
    }, headers=auth_headers(applicant))

    response = client.get("/api/subscriptions/subscribers", headers=auth_headers(partner))
    assert response.status_code == 200
    assert [s["user_id"] for s in response.json()["subscriptions"]] == [applicant.id]


def test_subscribers_for_admin_lists_every_premium_account(
    client, admin, candidate, customer, make_subscription, auth_headers
):
    make_subscription(candidate)
    make_subscription(customer, ends_in=timedelta(days=-1))

    response = client.get("/api/subscriptions/subscribers", headers=auth_headers(admin))
    assert [s["user_id"] for s in response.json()["subscriptions"]] == [candidate.id]
