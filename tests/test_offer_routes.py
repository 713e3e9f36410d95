"""
Tests for /api/offers: partner ownership and admin override.
"""
from datetime import timedelta

from app.core.roles import Role

OFFER = {
    "title": "Electricien bâtiment",
    "description": "Chantiers résidentiels en Ile-de-France",
    "type": "CDI",
    "starts_on": "2026-11-01",
    "ends_on": "2026-12-31",
}


def create_offer(client, headers, **overrides):
    return client.post("/api/offers", json={**OFFER, **overrides}, headers=headers)


def test_partner_creates_offer(client, partner, auth_headers):
    response = create_offer(client, auth_headers(partner))
    assert response.status_code == 201
    assert response.json()["user_id"] == partner.id
    assert response.json()["title"] == OFFER["title"]


def test_client_cannot_create_offer(client, customer, auth_headers):
    response = create_offer(client, auth_headers(customer))
    assert response.status_code == 403
    assert response.json()["detail"]["code"] == "forbidden"


def test_offer_dates_validated(client, partner, auth_headers):
    response = create_offer(client, auth_headers(partner), starts_on="2026-12-31", ends_on="2026-11-01")
    assert response.status_code == 422


def test_list_only_own_offers(client, partner, make_user, auth_headers):
    rival = make_user("rival@example.com", role=Role.PARTNER)
    create_offer(client, auth_headers(partner), title="Mine")
    create_offer(client, auth_headers(rival), title="Theirs")

    offers = client.get("/api/offers", headers=auth_headers(partner)).json()["offers"]
    assert [o["title"] for o in offers] == ["Mine"]


def test_foreign_offer_looks_missing(client, partner, make_user, auth_headers):
    rival = make_user("rival@example.com", role=Role.PARTNER)
    offer_id = create_offer(client, auth_headers(partner)).json()["id"]

    assert client.get(f"/api/offers/{offer_id}", headers=auth_headers(rival)).status_code == 404
    assert client.put(f"/api/offers/{offer_id}", json={"title": "Hijack"}, headers=auth_headers(rival)).status_code == 404
    assert client.delete(f"/api/offers/{offer_id}", headers=auth_headers(rival)).status_code == 404


def test_admin_reaches_any_offer(client, partner, admin, auth_headers):
    offer_id = create_offer(client, auth_headers(partner)).json()["id"]
    assert client.get(f"/api/offers/{offer_id}", headers=auth_headers(admin)).status_code == 200


def test_update_offer(client, partner, auth_headers):
    offer_id = create_offer(client, auth_headers(partner)).json()["id"]

    response = client.put(f"/api/offers/{offer_id}", json={"title": "Chef de chantier"}, headers=auth_headers(partner))
    assert response.status_code == 200
    assert response.json()["title"] == "Chef de chantier"
    assert response.json()["type"] == "CDI"


def test_update_offer_checks_merged_dates(client, partner, auth_headers):
    offer_id = create_offer(client, auth_headers(partner)).json()["id"]
    response = client.put(f"/api/offers/{offer_id}", json={"ends_on": "2026-10-01"}, headers=auth_headers(partner))
    assert response.status_code == 422


def test_delete_offer_keeps_applications(client, partner, customer, auth_headers):
    offer_id = create_offer(client, auth_headers(partner)).json()["id"]
    application = client.post("/api/recruitment/applications", json={
        "offer_id": offer_id,
        "position": "Electricien",
        "experience": 1,
        "education": "CAP",
        "motivation": "Motivé",
        "availability": "2026-11-01",
    }, headers=auth_headers(customer)).json()

    assert client.delete(f"/api/offers/{offer_id}", headers=auth_headers(partner)).status_code == 200
    assert client.get(f"/api/offers/{offer_id}", headers=auth_headers(partner)).status_code == 404

    kept = client.get(f"/api/recruitment/applications/{application['id']}", headers=auth_headers(customer))
    assert kept.status_code == 200
    assert kept.json()["offer_id"] is None


def test_offer_subscribers(client, partner, make_user, make_subscription, auth_headers):
    paying = make_user("paying@example.com", role=Role.CANDIDATE)
    lapsed = make_user("lapsed@example.com", role=Role.CANDIDATE)
    make_subscription(paying)
    make_subscription(lapsed, ends_in=timedelta(days=10))

    offer_id = create_offer(client, auth_headers(partner)).json()["id"]
    payload = {
        "offer_id": offer_id,
        "position": "Electricien",
        "experience": 1,
        "education": "CAP",
        "motivation": "Motivé",
        "availability": "2026-11-01",
    }
    client.post("/api/recruitment/applications", json=payload, headers=auth_headers(paying))
    client.post("/api/recruitment/applications", json=payload, headers=auth_headers(lapsed))
    client.post("/api/subscriptions/cancel", headers=auth_headers(lapsed))

    response = client.get(f"/api/offers/{offer_id}/subscribers", headers=auth_headers(partner))
    assert response.status_code == 200
    subscribers = {s["candidate_id"]: s["subscription"] for s in response.json()["subscribers"]}
    assert subscribers[paying.id]["status"] == "active"
    assert subscribers[lapsed.id] is None


def test_offer_subscribers_forbidden_for_non_owner(client, partner, make_user, auth_headers):
    rival = make_user("rival@example.com", role=Role.PARTNER)
    offer_id = create_offer(client, auth_headers(partner)).json()["id"]

    response = client.get(f"/api/offers/{offer_id}/subscribers", headers=auth_headers(rival))
    assert response.status_code == 403
    assert response.json()["detail"]["code"] == "forbidden"
