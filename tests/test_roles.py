import pytest

from partner_portal.core.errors import Conflict, PolicyViolation
from partner_portal.models import Role
from partner_portal.schemas.role import RoleCreate, RoleUpdate
from partner_portal.services.permissions import get_permissions, seed_permissions
from partner_portal.services.roles import (
    DEFAULT_ROLES,
    create_role,
    delete_role,
    get_role_by_name,
    seed_default_roles,
    update_role,
)
from partner_portal.services.users import create_user
from tests.factories import make_partner


def _keys(role):
    return {p.key for p in role.permissions}


def test_seed_default_roles_is_idempotent(db):
    seed_permissions(db)
    assert seed_default_roles(db)["created"] == len(DEFAULT_ROLES)
    assert seed_default_roles(db)["created"] == 0
    assert db.query(Role).count() == len(DEFAULT_ROLES)


def test_default_role_permission_sets(seeded):
    assert len(get_role_by_name(seeded, "super_admin").permissions) == len(get_permissions(seeded))

    partner_admin = _keys(get_role_by_name(seeded, "partner_admin"))
    assert "campaigns.admin" in partner_admin
    assert not any(key.startswith("all_access.") for key in partner_admin)

    assert _keys(get_role_by_name(seeded, "viewer")) == {"dashboard.read", "campaigns.read", "programs.read"}


def test_system_role_permissions_are_immutable(seeded):
    viewer = get_role_by_name(seeded, "viewer")
    before = _keys(viewer)
    with pytest.raises(PolicyViolation):
        update_role(seeded, viewer.id, RoleUpdate(permission_ids=[]))
    seeded.refresh(viewer)
    assert _keys(viewer) == before

    updated = update_role(seeded, viewer.id, RoleUpdate(display_name="Read Only"))
    assert updated.display_name == "Read Only"


def test_system_role_cannot_be_deleted(seeded):
    with pytest.raises(PolicyViolation):
        delete_role(seeded, get_role_by_name(seeded, "viewer").id)


def test_create_role_normalizes_name_and_rejects_duplicates(seeded):
    ids = [p.id for p in get_permissions(seeded)[:2]]
    role = create_role(seeded, RoleCreate(name="Field Agent", display_name="Field Agent", permission_ids=ids))
    assert role.name == "field_agent"
    assert not role.is_system_role

    with pytest.raises(Conflict):
        create_role(seeded, RoleCreate(name="field_agent", display_name="Again"))


def test_delete_role_blocked_while_assigned(seeded):
    partner, _, _ = make_partner(seeded)
    role = create_role(seeded, RoleCreate(name="auditor", display_name="Auditor"))
    create_user(seeded, partner_id=partner.id, email="auditor@example.com", name="Audrey", role="auditor")

    with pytest.raises(PolicyViolation) as exc:
        delete_role(seeded, role.id)
    assert exc.value.extra["blocking_users"] == 1


def test_editing_role_does_not_change_existing_users(seeded):
    partner, _, _ = make_partner(seeded)
    read_ids = [p.id for p in get_permissions(seeded) if p.key == "dashboard.read"]
    role = create_role(seeded, RoleCreate(name="reporter", display_name="Reporter", permission_ids=read_ids))
    user, _ = create_user(seeded, partner_id=partner.id, email="reporter@example.com", name="Rita", role="reporter")

    wallet_ids = [p.id for p in get_permissions(seeded) if p.key == "wallet.admin"]
    update_role(seeded, role.id, RoleUpdate(permission_ids=wallet_ids))
    seeded.refresh(user)

    assert {p.key for p in user.permissions} == {"dashboard.read"}
    assert _keys(role) == {"wallet.admin"}
