"""
Tests for /api/admin.
"""
from datetime import timedelta
from decimal import Decimal

from app.core.roles import Role, AccountStatus
from app.db.models.job_application import JobApplication
from app.db.models.offer import Offer
from app.db.models.quote import Quote
from app.db.models.subscription import Subscription
from app.util.time import utcnow


def test_admin_routes_forbidden_for_non_admins(client, make_user, auth_headers):
    moderator = make_user("mod@example.com", role=Role.MODERATOR)
    for path in ("/api/admin/dashboard", "/api/admin/users"):
        response = client.get(path, headers=auth_headers(moderator))
        assert response.status_code == 403
        assert response.json()["detail"]["code"] == "forbidden"


def test_list_users_with_filters(client, admin, candidate, make_user, auth_headers):
    make_user("waiting@example.com", status=AccountStatus.PENDING)

    response = client.get("/api/admin/users", headers=auth_headers(admin))
    assert response.status_code == 200
    assert response.json()["pagination"]["total"] == 3

    by_role = client.get("/api/admin/users?role=candidate", headers=auth_headers(admin)).json()
    assert [u["email"] for u in by_role["users"]] == [candidate.email]

    pending = client.get("/api/admin/users?status=pending", headers=auth_headers(admin)).json()
    assert [u["email"] for u in pending["users"]] == ["waiting@example.com"]


def test_activate_pending_account(client, admin, make_user, auth_headers):
    waiting = make_user("waiting@example.com", status=AccountStatus.PENDING)
    headers = auth_headers(waiting)
    assert client.get("/api/auth/profile", headers=headers).json()["detail"]["code"] == "account_unavailable"

    response = client.put(
        f"/api/admin/users/{waiting.id}/status", json={"status": "active"}, headers=auth_headers(admin)
    )
    assert response.status_code == 200
    assert response.json()["status"] == "active"

    assert client.get("/api/auth/profile", headers=headers).status_code == 200


def test_deactivation_revokes_existing_token(client, admin, candidate, auth_headers):
    headers = auth_headers(candidate)
    assert client.get("/api/auth/profile", headers=headers).status_code == 200

    client.put(f"/api/admin/users/{candidate.id}/status", json={"status": "inactive"}, headers=auth_headers(admin))

    response = client.get("/api/auth/profile", headers=headers)
    assert response.status_code == 401
    assert response.json()["detail"]["code"] == "account_unavailable"


def test_change_role(client, admin, candidate, auth_headers):
    response = client.put(
        f"/api/admin/users/{candidate.id}/status",
        json={"status": "active", "role": "moderator"},
        headers=auth_headers(admin),
    )
    assert response.status_code == 200
    assert response.json()["role"] == "moderator"

    stats = client.get("/api/recruitment/admin/stats", headers=auth_headers(candidate))
    assert stats.status_code == 200


def test_update_unknown_user(client, admin, auth_headers):
    response = client.put("/api/admin/users/999/status", json={"status": "active"}, headers=auth_headers(admin))
    assert response.status_code == 404


def test_delete_user_cascades(client, db, admin, partner, candidate, make_subscription, auth_headers):
    make_subscription(candidate)
    make_subscription(partner)
    offer_id = client.post("/api/offers", json={
        "title": "Electricien",
        "description": "Maintenance",
        "type": "Interim",
        "starts_on": "2026-11-01",
        "ends_on": "2026-11-30",
    }, headers=auth_headers(partner)).json()["id"]
    application_id = client.post("/api/recruitment/applications", json={
        "offer_id": offer_id,
        "position": "Electricien",
        "experience": 5,
        "education": "BTS",
        "motivation": "Expérience en maintenance",
        "availability": "2026-11-01",
    }, headers=auth_headers(candidate)).json()["id"]
    partner_id = partner.id

    response = client.delete(f"/api/admin/users/{partner_id}", headers=auth_headers(admin))
    assert response.status_code == 200

    db.expire_all()
    assert db.query(Offer).filter(Offer.user_id == partner_id).count() == 0
    assert db.query(Subscription).filter(Subscription.user_id == partner_id).count() == 0
    application = db.query(JobApplication).filter(JobApplication.id == application_id).one()
    assert application.offer_id is None

    listing = client.get("/api/admin/users", headers=auth_headers(admin)).json()
    assert partner_id not in [u["id"] for u in listing["users"]]


def test_delete_unknown_user(client, admin, auth_headers):
    assert client.delete("/api/admin/users/999", headers=auth_headers(admin)).status_code == 404


def test_dashboard(client, admin, candidate, customer, make_subscription, auth_headers):
    make_subscription(candidate)
    client.post("/api/recruitment/applications", json={
        "position": "Apprenti",
        "experience": 0,
        "education": "CAP",
        "motivation": "Apprendre",
        "availability": "2026-11-01",
    }, headers=auth_headers(candidate))

    response = client.get("/api/admin/dashboard", headers=auth_headers(admin))
    assert response.status_code == 200
    data = response.json()
    assert data["users"]["total"] == 3
    assert data["users"]["candidate"] == 1
    assert data["users"]["active"] == 3
    assert data["applications"]["total"] == 1
    assert data["applications"]["pending"] == 1
    assert data["subscriptions"] == {"total": 1, "premium_accounts": 1}
    assert data["offers"] == 0


# ✅ REPORTS

def submit_application(client, headers):
    return client.post("/api/recruitment/applications", json={
        "position": "Electricien",
        "experience": 3,
        "education": "BTS",
        "motivation": "Chantiers tertiaires",
        "availability": "2026-11-01",
    }, headers=headers)


def submit_quote(client, staff_headers, client_headers, price, quantity=1):
    service_id = client.post("/api/services/catalog", json={
        "name": "Installation",
        "description": "Installation complète",
        "category": "Installation",
        "base_price": price,
    }, headers=staff_headers).json()["id"]
    return client.post("/api/services/quotes", json={
        "services": [{"service_id": service_id, "quantity": quantity}],
        "requested_date": "2026-11-20",
        "site_address": "3 avenue Foch, Paris",
    }, headers=client_headers).json()


def test_applications_report(client, admin, candidate, make_subscription, auth_headers):
    make_subscription(candidate)
    submit_application(client, auth_headers(candidate))
    submit_application(client, auth_headers(candidate))
    headers = auth_headers(admin)
    today = utcnow().date()

    response = client.get("/api/admin/reports/applications", headers=headers)
    assert response.status_code == 200
    assert response.json()["total"] == 2

    same_day = client.get(
        f"/api/admin/reports/applications?date_from={today}&date_to={today}", headers=headers
    ).json()
    assert same_day["total"] == 2

    before = client.get(
        f"/api/admin/reports/applications?date_to={today - timedelta(days=1)}", headers=headers
    ).json()
    assert before == {"applications": [], "total": 0}


def test_quotes_report_revenue(client, admin, customer, auth_headers):
    staff = auth_headers(admin)
    first = submit_quote(client, staff, auth_headers(customer), "120.00", quantity=2)
    submit_quote(client, staff, auth_headers(customer), "2500.00")
    client.put(f"/api/services/admin/quotes/{first['id']}/status", json={"status": "accepted"}, headers=staff)

    response = client.get(f"/api/admin/reports/quotes?date_from={utcnow().date()}", headers=staff)
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    assert Decimal(data["revenue_total"]) == Decimal("2740.00")

    accepted = client.get("/api/admin/reports/quotes?status=accepted", headers=staff).json()
    assert accepted["total"] == 1
    assert Decimal(accepted["revenue_total"]) == Decimal("240.00")

    tomorrow = utcnow().date() + timedelta(days=1)
    empty = client.get(f"/api/admin/reports/quotes?date_from={tomorrow}", headers=staff).json()
    assert empty["total"] == 0
    assert Decimal(empty["revenue_total"]) == Decimal("0")


def test_report_rejects_reversed_range(client, admin, auth_headers):
    response = client.get(
        "/api/admin/reports/quotes?date_from=2026-10-10&date_to=2026-10-01", headers=auth_headers(admin)
    )
    assert response.status_code == 422


def test_reports_are_admin_only(client, make_user, auth_headers):
    moderator = make_user("mod@example.com", role=Role.MODERATOR)
    for path in ("/api/admin/reports/applications", "/api/admin/reports/quotes"):
        response = client.get(path, headers=auth_headers(moderator))
        assert response.status_code == 403
        assert response.json()["detail"]["code"] == "forbidden"


def test_delete_client_removes_quotes(client, db, admin, customer, auth_headers):
    submit_quote(client, auth_headers(admin), auth_headers(customer), "80.00")
    customer_id = customer.id

    assert client.delete(f"/api/admin/users/{customer_id}", headers=auth_headers(admin)).status_code == 200

    db.expire_all()
    assert db.query(Quote).filter(Quote.client_id == customer_id).count() == 0
