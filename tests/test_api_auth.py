from datetime import datetime, timedelta, timezone

from partner_portal.models import AuditLog, UserSession
from partner_portal.services.sessions import create_session
from tests.factories import auth_headers, make_partner


def test_login_me_logout(client, seeded):
    _, admin, password = make_partner(seeded)

    res = client.post("/api/v1/auth/login", json={"identifier": admin.email, "password": password})
    assert res.status_code == 200
    body = res.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["email"] == admin.email
    headers = {"Authorization": f"Bearer {body['token']}"}

    me = client.get("/api/v1/auth/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["id"] == admin.id
    assert seeded.query(AuditLog).filter(AuditLog.action == "auth.login").count() == 1

    out = client.post("/api/v1/auth/logout", headers=headers)
    assert out.json() == {"success": True, "message": None, "error": None}
    assert client.get("/api/v1/auth/me", headers=headers).status_code == 401


def test_login_by_extension(client, seeded):
    _, admin, password = make_partner(seeded)
    res = client.post("/api/v1/auth/login", json={"identifier": admin.extension, "password": password})
    assert res.status_code == 200


def test_login_rejects_bad_password(client, seeded):
    _, admin, _ = make_partner(seeded)
    res = client.post("/api/v1/auth/login", json={"identifier": admin.email, "password": "wrong-password"})
    assert res.status_code == 401
    assert res.json()["detail"] == "Invalid email or password"


def test_me_requires_token(client, seeded):
    assert client.get("/api/v1/auth/me").status_code == 401
    assert client.get("/api/v1/auth/me", headers={"Authorization": "Bearer nope"}).status_code == 401


def test_expired_session_is_rejected(client, seeded):
    _, admin, _ = make_partner(seeded)
    session = create_session(seeded, admin)
    session.expires_at = datetime.now(timezone.utc) - timedelta(minutes=1)
    seeded.commit()

    res = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {session.token}"})

    assert res.status_code == 401
    assert seeded.query(UserSession).count() == 0


def test_logout_without_token_is_soft(client, seeded):
    res = client.post("/api/v1/auth/logout")
    assert res.status_code == 200
    assert res.json()["success"] is False
    assert res.json()["message"] == "Session not found"


def test_change_password_keeps_current_session(client, seeded):
    _, admin, password = make_partner(seeded)
    other = auth_headers(seeded, admin)
    headers = auth_headers(seeded, admin)

    res = client.post(
        "/api/v1/auth/change-password",
        headers=headers,
        json={"current_password": password, "new_password": "NewPassword123!"},
    )

    assert res.status_code == 200
    assert res.json() == {"message": "Password updated successfully"}
    assert client.get("/api/v1/auth/me", headers=headers).status_code == 200
    assert client.get("/api/v1/auth/me", headers=other).status_code == 401


def test_change_password_rejects_wrong_current_password(client, seeded):
    _, admin, _ = make_partner(seeded)
    res = client.post(
        "/api/v1/auth/change-password",
        headers=auth_headers(seeded, admin),
        json={"current_password": "WrongPass!", "new_password": "NewPassword123!"},
    )
    assert res.status_code == 400
    assert res.json() == {"detail": "Current password is incorrect", "code": "validation_error"}


def test_inactive_user_is_forbidden(client, seeded):
    _, admin, _ = make_partner(seeded)
    headers = auth_headers(seeded, admin)
    admin.is_active = False
    seeded.commit()

    assert client.get("/api/v1/auth/me", headers=headers).status_code == 403
