"""Permission catalog and the capability check used by every endpoint.

Permission keys look like ``category.level``. A holder of ``campaigns.admin``
also satisfies ``campaigns.write`` and ``campaigns.read``; any
``all_access.*`` key satisfies everything.
"""
import logging
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from partner_portal.core.errors import InvalidPermissionReference
from partner_portal.models import Permission, PermissionCategory, PermissionLevel

logger = logging.getLogger(__name__)

LEVEL_RANK = {
    PermissionLevel.READ.value: 1,
    PermissionLevel.WRITE.value: 2,
    PermissionLevel.ADMIN.value: 3,
    PermissionLevel.FULL.value: 4,
}

ALL_ACCESS_ADMIN = "all_access.admin"

# (category, level, name, description, is_default)
PERMISSION_CATALOG = [
    ("all_access", "full", "Full System Access", "Complete unrestricted access to all system features and data", False),
    ("all_access", "admin", "Administrative Access", "Administrative access to all system features", False),
    ("dashboard", "read", "Dashboard Read", "View dashboard and analytics", True),
    ("dashboard", "write", "Dashboard Write", "Modify dashboard settings and preferences", False),
    ("dashboard", "admin", "Dashboard Admin", "Full control over dashboard configuration", False),
    ("users", "read", "Users Read", "View user profiles and data", False),
    ("users", "write", "Users Write", "Create and update users", False),
    ("users", "admin", "Users Admin", "Full user management including deletion and role assignment", False),
    ("campaigns", "read", "Campaigns Read", "View campaigns and their details", True),
    ("campaigns", "write", "Campaigns Write", "Create and update campaigns", False),
    ("campaigns", "admin", "Campaigns Admin", "Full campaign management including deletion and status changes", False),
    ("programs", "read", "Programs Read", "View programs and curricula", True),
    ("programs", "write", "Programs Write", "Create and update programs", False),
    ("programs", "admin", "Programs Admin", "Full program management including deletion", False),
    ("wallet", "read", "Wallet Read", "View wallet balance and transaction history", False),
    ("wallet", "write", "Wallet Write", "Manage wallet settings and request withdrawals", False),
    ("wallet", "admin", "Wallet Admin", "Full wallet management including all financial operations", False),
    ("settings", "read", "Settings Read", "View system and account settings", True),
    ("settings", "write", "Settings Write", "Modify account and partner settings", False),
    ("settings", "admin", "Settings Admin", "Full control over all system settings", False),
]


def _value(member) -> str:
    return member.value if hasattr(member, "value") else str(member)


def seed_permissions(db: Session) -> dict:
    existing = db.query(Permission).count()
    if existing:
        return {"message": "Permissions already seeded. Skipping.", "existing_count": existing, "created": 0}

    for category, level, name, description, is_default in PERMISSION_CATALOG:
        db.add(
            Permission(
                key=f"{category}.{level}",
                name=name,
                description=description,
                category=PermissionCategory(category),
                level=PermissionLevel(level),
                is_default=is_default,
            )
        )
    db.commit()
    logger.info("Seeded %s permissions", len(PERMISSION_CATALOG))
    return {"message": "Permissions seeded successfully", "existing_count": 0, "created": len(PERMISSION_CATALOG)}


def get_permissions(
    db: Session,
    category: Optional[PermissionCategory] = None,
    is_default: Optional[bool] = None,
) -> list[Permission]:
    query = db.query(Permission)
    if category is not None:
        query = query.filter(Permission.category == category)
    if is_default is not None:
        query = query.filter(Permission.is_default.is_(is_default))
    return query.order_by(Permission.id.asc()).all()


def get_permissions_by_ids(db: Session, permission_ids: Iterable[int]) -> list[Permission]:
    ids = list(dict.fromkeys(permission_ids))
    if not ids:
        return []
    return db.query(Permission).filter(Permission.id.in_(ids)).order_by(Permission.id.asc()).all()


def resolve_permission_ids(db: Session, permission_ids: Iterable[int]) -> list[Permission]:
    """Load permissions by id, rejecting the whole set if any id is unknown."""
    ids = list(dict.fromkeys(permission_ids))
    permissions = get_permissions_by_ids(db, ids)
    if len(permissions) != len(ids):
        found = {p.id for p in permissions}
        missing = [pid for pid in ids if pid not in found]
        raise InvalidPermissionReference("One or more permission IDs are invalid", invalid_ids=missing)
    return permissions


def get_default_permissions(db: Session) -> list[Permission]:
    return get_permissions(db, is_default=True)


def permission_keys(permissions: Iterable[Permission]) -> set[str]:
    return {p.key for p in permissions}


def has_permission(granted: Iterable[str], required: str) -> bool:
    granted = set(granted)
    if any(key.startswith("all_access.") for key in granted):
        return True
    if required in granted:
        return True

    category, _, level = required.partition(".")
    needed = LEVEL_RANK.get(level)
    if needed is None:
        return False
    for key in granted:
        held_category, _, held_level = key.partition(".")
        if held_category == category and LEVEL_RANK.get(held_level, 0) >= needed:
            return True
    return False


def has_all_access(granted: Iterable[str]) -> bool:
    return any(key.startswith("all_access.") for key in granted)


def filter_by_categories(
    permissions: Iterable[Permission],
    categories: Iterable[str],
    levels: Optional[Iterable[str]] = None,
) -> list[Permission]:
    categories = set(categories)
    levels = set(levels) if levels is not None else None
    return [
        p
        for p in permissions
        if _value(p.category) in categories and (levels is None or _value(p.level) in levels)
    ]
