import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from partner_portal.core.errors import Conflict, NotFound, PolicyViolation
from partner_portal.models import Permission, Role, User
from partner_portal.schemas.role import RoleCreate, RoleUpdate
from partner_portal.services.permissions import filter_by_categories, resolve_permission_ids

logger = logging.getLogger(__name__)

SUPER_ADMIN_ROLE = "super_admin"
PARTNER_ADMIN_ROLE = "partner_admin"

_TENANT_CATEGORIES = ["dashboard", "users", "campaigns", "programs", "wallet", "settings"]

# name -> (display_name, description, [(categories, levels or None)])
DEFAULT_ROLES = {
    SUPER_ADMIN_ROLE: (
        "Super Administrator",
        "Unrestricted access to every partner, user, campaign, wallet, program and setting.",
        None,
    ),
    PARTNER_ADMIN_ROLE: (
        "Partner Administrator",
        "Full administrative access to the partner's own users, campaigns, wallet and settings.",
        [(_TENANT_CATEGORIES, None)],
    ),
    "accountant": (
        "Accountant",
        "Financial data including wallet, transactions and revenue reports. Read access to campaigns and programs.",
        [(["wallet"], ["read", "write", "admin"]), (["dashboard", "campaigns", "programs"], ["read"])],
    ),
    "campaign_manager": (
        "Campaign Manager",
        "Creates and manages campaigns. Read access to programs, dashboard and users.",
        [(["campaigns"], ["read", "write", "admin"]), (["programs", "dashboard", "users"], ["read"])],
    ),
    "viewer": (
        "Viewer",
        "Read-only access to dashboard, campaigns and programs.",
        [(["dashboard", "campaigns", "programs"], ["read"])],
    ),
    "super_agent": (
        "Super Agent",
        "Campaign management and user creation.",
        [
            (["campaigns"], ["read", "write", "admin"]),
            (["users"], ["read", "write"]),
            (["dashboard", "programs"], ["read"]),
        ],
    ),
    "master_agent": (
        "Master Agent",
        "Full campaign access with limited user management.",
        [
            (["campaigns"], ["read", "write", "admin"]),
            (["users", "dashboard", "programs"], ["read", "write"]),
            (["wallet"], ["read"]),
        ],
    ),
    "merchant_admin": (
        "Merchant Administrator",
        "Campaigns, programs and financial data for a merchant.",
        [
            (["campaigns"], ["read", "write", "admin"]),
            (["programs", "wallet", "dashboard"], ["read", "write"]),
            (["users"], ["read"]),
        ],
    ),
}


def seed_default_roles(db: Session) -> dict:
    existing = db.query(Role).count()
    if existing:
        return {"message": "Roles already seeded. Skipping.", "existing_count": existing, "created": 0}

    all_permissions = db.query(Permission).order_by(Permission.id.asc()).all()
    for name, (display_name, description, grants) in DEFAULT_ROLES.items():
        if grants is None:
            permissions = list(all_permissions)
        else:
            permissions = []
            for categories, levels in grants:
                permissions.extend(filter_by_categories(all_permissions, categories, levels))
        db.add(
            Role(
                name=name,
                display_name=display_name,
                description=description,
                is_system_role=True,
                is_active=True,
                permissions=list({p.id: p for p in permissions}.values()),
            )
        )
    db.commit()
    logger.info("Seeded %s default roles", len(DEFAULT_ROLES))
    return {"message": "Default roles seeded successfully", "existing_count": 0, "created": len(DEFAULT_ROLES)}


def get_roles(db: Session, is_active: Optional[bool] = None) -> list[Role]:
    query = db.query(Role)
    if is_active is not None:
        query = query.filter(Role.is_active.is_(is_active))
    return query.order_by(Role.id.asc()).all()


def get_role_by_id(db: Session, role_id: int) -> Optional[Role]:
    return db.query(Role).filter(Role.id == role_id).first()


def get_role_by_name(db: Session, name: str) -> Optional[Role]:
    return db.query(Role).filter(Role.name == name).first()


def _require_role(db: Session, role_id: int) -> Role:
    role = get_role_by_id(db, role_id)
    if not role:
        raise NotFound("Role not found")
    return role


def count_users_with_role(db: Session, name: str) -> int:
    return db.query(func.count(User.id)).filter(User.role == name).scalar() or 0


def create_role(db: Session, payload: RoleCreate) -> Role:
    if get_role_by_name(db, payload.name):
        raise Conflict(f'Role with name "{payload.name}" already exists')
    permissions = resolve_permission_ids(db, payload.permission_ids)

    role = Role(
        name=payload.name,
        display_name=payload.display_name.strip(),
        description=payload.description,
        is_system_role=False,
        is_active=payload.is_active,
        permissions=permissions,
    )
    db.add(role)
    db.commit()
    db.refresh(role)
    logger.info("Created role %s with %s permissions", role.name, len(permissions))
    return role


def update_role(db: Session, role_id: int, payload: RoleUpdate) -> Role:
    role = _require_role(db, role_id)
    fields_set = payload.model_fields_set

    permissions = None
    if "permission_ids" in fields_set and payload.permission_ids is not None:
        if role.is_system_role:
            raise PolicyViolation("Cannot modify permissions of system roles. Create a custom role instead.")
        permissions = resolve_permission_ids(db, payload.permission_ids)

    if "display_name" in fields_set and payload.display_name is not None:
        role.display_name = payload.display_name.strip()
    if "description" in fields_set:
        role.description = payload.description
    if "is_active" in fields_set and payload.is_active is not None:
        role.is_active = payload.is_active
    if permissions is not None:
        role.permissions = permissions

    db.commit()
    db.refresh(role)
    return role


def assign_permissions_to_role(db: Session, role_id: int, permission_ids: list[int]) -> Role:
    return update_role(db, role_id, RoleUpdate(permission_ids=permission_ids))


def delete_role(db: Session, role_id: int) -> dict:
    role = _require_role(db, role_id)
    if role.is_system_role:
        raise PolicyViolation("Cannot delete system roles")

    blocking = count_users_with_role(db, role.name)
    if blocking:
        raise PolicyViolation(
            f'Cannot delete role "{role.display_name}". It is assigned to {blocking} user(s).',
            blocking_users=blocking,
        )

    db.delete(role)
    db.commit()
    logger.info("Deleted role %s", role.name)
    return {"success": True, "message": "Role deleted successfully"}
