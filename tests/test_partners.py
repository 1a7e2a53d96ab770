import pytest

from partner_portal.core.errors import Conflict, UserAlreadyExists
from partner_portal.models import User, UserSession
from partner_portal.schemas.partner import PartnerCreate
from partner_portal.services.partners import (
    create_partner_organization,
    get_partner_details,
    list_partners,
    toggle_partner_status,
)
from partner_portal.services.sessions import create_session
from partner_portal.services.users import create_user
from tests.factories import make_partner, make_super_admin


def test_create_partner_with_admin(seeded):
    partner, admin, password = make_partner(seeded)

    assert admin.partner_id == partner.id
    assert admin.role == "partner_admin"
    assert password
    assert {p.key for p in admin.permissions} == {p.key for p in partner.permissions}
    assert not any(p.key.startswith("all_access.") for p in admin.permissions)


def test_create_partner_duplicate_email(seeded):
    make_partner(seeded)
    with pytest.raises(Conflict):
        create_partner_organization(seeded, PartnerCreate(name="Acme Again", email="partner@example.com"))


def test_admin_email_must_be_free(seeded):
    make_partner(seeded)
    payload = PartnerCreate(name="Beta Org", email="beta@example.com", admin_email="partner@example.com")
    with pytest.raises(UserAlreadyExists):
        create_partner_organization(seeded, payload)


def test_toggle_status_fans_out_to_users(seeded):
    partner, admin, _ = make_partner(seeded)
    create_user(seeded, partner_id=partner.id, email="viewer@example.com", name="Vera")
    create_session(seeded, admin)

    result = toggle_partner_status(seeded, partner.id)

    assert result["is_active"] is False
    assert result["users_affected"] == 2
    assert all(item["success"] for item in result["items"])
    assert seeded.query(User).filter(User.partner_id == partner.id, User.is_active.is_(True)).count() == 0
    assert seeded.query(UserSession).count() == 0

    result = toggle_partner_status(seeded, partner.id)
    assert result["is_active"] is True
    assert seeded.query(User).filter(User.partner_id == partner.id, User.is_active.is_(True)).count() == 2


def test_list_partners_hides_system_partner(seeded):
    make_super_admin(seeded)
    partner, _, _ = make_partner(seeded)

    assert [p["id"] for p in list_partners(seeded)] == [partner.id]
    assert len(list_partners(seeded, include_system=True)) == 2

    details = get_partner_details(seeded, partner.id)
    assert details["users_count"] == 1
    assert details["has_wallet"] is False
