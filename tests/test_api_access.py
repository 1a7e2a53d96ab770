from decimal import Decimal

from partner_portal.services.notifications import create_notification
from partner_portal.services.users import create_user
from tests.factories import (
    auth_headers,
    make_campaign,
    make_partner,
    make_program,
    make_super_admin,
    make_transaction,
    make_wallet,
)


def test_missing_permission_is_forbidden(client, seeded):
    partner, _, _ = make_partner(seeded)
    viewer, _ = create_user(seeded, partner_id=partner.id, email="viewer@example.com", name="Vera", role="viewer")

    res = client.get("/api/v1/users", headers=auth_headers(seeded, viewer))

    assert res.status_code == 403
    assert res.json()["detail"] == "Insufficient permissions"


def test_partner_admin_cannot_read_other_partner(client, seeded):
    _, admin, _ = make_partner(seeded)
    other, _, _ = make_partner(seeded, name="Other Org", email="other@example.com")

    res = client.get(f"/api/v1/users?partner_id={other.id}", headers=auth_headers(seeded, admin))

    assert res.status_code == 403


def test_partner_admin_cannot_escalate(client, seeded):
    _, admin, _ = make_partner(seeded)
    res = client.post(
        "/api/v1/users",
        headers=auth_headers(seeded, admin),
        json={"email": "boss@example.com", "name": "Boss", "role": "super_admin"},
    )
    assert res.status_code == 403


def test_partner_admin_creates_user(client, seeded):
    partner, admin, _ = make_partner(seeded)
    res = client.post(
        "/api/v1/users",
        headers=auth_headers(seeded, admin),
        json={"email": "agent@example.com", "name": "Agent", "role": "campaign_manager"},
    )
    assert res.status_code == 201
    body = res.json()
    assert body["user"]["partner_id"] == partner.id
    assert body["password"]
    assert "extension=" in body["login_url"]


def test_portal_error_shape(client, seeded):
    root, _ = make_super_admin(seeded)
    make_partner(seeded)

    res = client.post(
        "/api/v1/partners",
        headers=auth_headers(seeded, root),
        json={"name": "Acme Again", "email": "partner@example.com"},
    )

    assert res.status_code == 409
    assert res.json() == {"detail": "Partner with email partner@example.com already exists", "code": "conflict"}


def test_invalid_permission_ids_report_missing(client, seeded):
    root, _ = make_super_admin(seeded)
    res = client.post(
        "/api/v1/roles",
        headers=auth_headers(seeded, root),
        json={"name": "broken", "display_name": "Broken", "permission_ids": [424242]},
    )
    assert res.status_code == 422
    assert res.json()["code"] == "invalid_permission_reference"
    assert res.json()["invalid_ids"] == [424242]


def test_platform_admin_settles_transaction(client, seeded):
    root, _ = make_super_admin(seeded)
    partner, admin, _ = make_partner(seeded)
    make_wallet(seeded, partner.id)
    make_campaign(seeded, partner.id, make_program(seeded), promo_code="SAVE10", partner_percentage="25")
    transaction = make_transaction(seeded, partner.id, amount="1000.00", campaign_code="SAVE10")

    denied = client.post(f"/api/v1/transactions/{transaction.id}/settle", headers=auth_headers(seeded, admin))
    assert denied.status_code == 403

    res = client.post(f"/api/v1/transactions/{transaction.id}/settle", headers=auth_headers(seeded, root))
    assert res.status_code == 200
    assert Decimal(res.json()["partner_share"]) == Decimal("250.00")

    wallet = client.get("/api/v1/wallet/me", headers=auth_headers(seeded, admin))
    assert wallet.status_code == 200
    assert Decimal(wallet.json()["balance"]) == Decimal("250.00")


def test_wallet_me_missing(client, seeded):
    _, admin, _ = make_partner(seeded)
    res = client.get("/api/v1/wallet/me", headers=auth_headers(seeded, admin))
    assert res.status_code == 404
    assert res.json()["code"] == "wallet_not_found"


def test_timeline_endpoint_returns_requested_days(client, seeded):
    _, admin, _ = make_partner(seeded)
    res = client.get("/api/v1/revenue/timeline?days=7", headers=auth_headers(seeded, admin))
    assert res.status_code == 200
    assert len(res.json()) == 7


def test_health_endpoints(client):
    assert client.get("/healthz").json()["status"] == "ok"


def test_promo_code_lookup_is_case_insensitive(client, seeded):
    partner, admin, _ = make_partner(seeded)
    campaign = make_campaign(seeded, partner.id, make_program(seeded))
    headers = auth_headers(seeded, admin)

    created = client.post("/api/v1/promo-codes", headers=headers, json={"campaign_id": campaign.id, "code": "save10"})
    assert created.status_code == 201
    assert created.json()["code"] == "SAVE10"

    duplicate = client.post("/api/v1/promo-codes", headers=headers, json={"campaign_id": campaign.id, "code": "SAVE10"})
    assert duplicate.status_code == 409

    found = client.get("/api/v1/promo-codes/lookup/Save10", headers=headers)
    assert found.json()["id"] == created.json()["id"]


def test_notification_batch_endpoints(client, seeded):
    partner, admin, _ = make_partner(seeded)
    for title in ("One", "Two"):
        create_notification(seeded, partner_id=partner.id, title=title, message=title)
    headers = auth_headers(seeded, admin)

    assert client.get("/api/v1/notifications/unread-count", headers=headers).json() == {"count": 2}

    result = client.post("/api/v1/notifications/read-all", headers=headers).json()
    assert result["success"] is True
    assert result["count"] == 2
    assert [item["success"] for item in result["items"]] == [True, True]
    assert client.get("/api/v1/notifications/unread-count", headers=headers).json() == {"count": 0}
