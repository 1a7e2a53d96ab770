import pytest

from partner_portal.core.errors import NotFound, UserAlreadyExists, ValidationFailed
from partner_portal.models import UserSession
from partner_portal.schemas.user import UserUpdate
from partner_portal.services.sessions import create_session
from partner_portal.services.users import (
    authenticate,
    change_password,
    create_user,
    reset_user_password,
    update_user,
)
from tests.factories import make_partner


def test_create_user_copies_role_permissions(seeded):
    partner, _, _ = make_partner(seeded)
    user, password = create_user(
        seeded, partner_id=partner.id, email=" Viewer@Example.com ", name="Vera", role="viewer"
    )

    assert user.email == "viewer@example.com"
    assert user.is_first_login
    assert password
    assert {p.key for p in user.permissions} == {"dashboard.read", "campaigns.read", "programs.read"}


def test_create_user_rejects_duplicate_email(seeded):
    partner, admin, _ = make_partner(seeded)
    with pytest.raises(UserAlreadyExists):
        create_user(seeded, partner_id=partner.id, email=admin.email, name="Copy")


def test_create_user_unknown_role(seeded):
    partner, _, _ = make_partner(seeded)
    with pytest.raises(NotFound):
        create_user(seeded, partner_id=partner.id, email="x@example.com", name="Xavier", role="ghost")


def test_authenticate_by_email_or_extension(seeded):
    _, admin, password = make_partner(seeded)

    assert authenticate(seeded, admin.email.upper(), password).id == admin.id
    assert authenticate(seeded, admin.extension, password).id == admin.id
    assert authenticate(seeded, admin.email, "wrong-password") is None
    assert authenticate(seeded, "nobody@example.com", password) is None


def test_deactivating_user_revokes_sessions(seeded):
    _, admin, _ = make_partner(seeded)
    create_session(seeded, admin)

    update_user(seeded, admin.id, UserUpdate(is_active=False))

    assert not admin.is_active
    assert seeded.query(UserSession).filter(UserSession.user_id == admin.id).count() == 0


def test_role_change_keeps_permissions(seeded):
    _, admin, _ = make_partner(seeded)
    before = {p.key for p in admin.permissions}

    update_user(seeded, admin.id, UserUpdate(role="viewer"))

    assert admin.role == "viewer"
    assert {p.key for p in admin.permissions} == before


def test_reset_password_invalidates_old_password(seeded):
    _, admin, old_password = make_partner(seeded)
    create_session(seeded, admin)

    _, new_password = reset_user_password(seeded, admin.id)

    assert authenticate(seeded, admin.email, old_password) is None
    assert authenticate(seeded, admin.email, new_password).id == admin.id
    assert admin.is_first_login
    assert seeded.query(UserSession).filter(UserSession.user_id == admin.id).count() == 0


def test_change_password_requires_current(seeded):
    _, admin, password = make_partner(seeded)

    with pytest.raises(ValidationFailed):
        change_password(seeded, admin, "not-it", "NewPassword123!")

    change_password(seeded, admin, password, "NewPassword123!")
    assert authenticate(seeded, admin.email, "NewPassword123!").id == admin.id
