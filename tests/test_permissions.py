import pytest

from partner_portal.core.errors import InvalidPermissionReference
from partner_portal.models import Permission, PermissionCategory
from partner_portal.services.permissions import (
    PERMISSION_CATALOG,
    get_default_permissions,
    get_permissions,
    has_permission,
    resolve_permission_ids,
    seed_permissions,
)


def test_seed_permissions_is_idempotent(db):
    first = seed_permissions(db)
    second = seed_permissions(db)

    assert first["created"] == len(PERMISSION_CATALOG)
    assert second["created"] == 0
    assert second["existing_count"] == len(PERMISSION_CATALOG)
    assert db.query(Permission).count() == len(PERMISSION_CATALOG)


def test_permission_keys_and_defaults(seeded):
    keys = {p.key for p in get_permissions(seeded)}
    assert "all_access.full" in keys
    assert "campaigns.admin" in keys

    defaults = {p.key for p in get_default_permissions(seeded)}
    assert defaults == {"dashboard.read", "campaigns.read", "programs.read", "settings.read"}


def test_get_permissions_by_category(seeded):
    wallet = get_permissions(seeded, category=PermissionCategory.WALLET)
    assert [p.key for p in wallet] == ["wallet.read", "wallet.write", "wallet.admin"]


def test_has_permission_level_hierarchy():
    assert has_permission({"campaigns.admin"}, "campaigns.read")
    assert has_permission({"campaigns.write"}, "campaigns.write")
    assert not has_permission({"campaigns.read"}, "campaigns.write")
    assert not has_permission({"programs.admin"}, "campaigns.read")
    assert not has_permission(set(), "dashboard.read")


def test_all_access_satisfies_everything():
    assert has_permission({"all_access.admin"}, "wallet.admin")
    assert has_permission({"all_access.full"}, "users.admin")


def test_resolve_permission_ids_rejects_unknown(seeded):
    known = get_permissions(seeded)[0].id
    with pytest.raises(InvalidPermissionReference) as exc:
        resolve_permission_ids(seeded, [known, 99999])
    assert exc.value.extra["invalid_ids"] == [99999]
    assert exc.value.status_code == 422
