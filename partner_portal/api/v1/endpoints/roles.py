from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from partner_portal.core.database import get_db
from partner_portal.core.errors import NotFound
from partner_portal.dependencies import require_permission, require_platform_admin
from partner_portal.models import User
from partner_portal.schemas.auth import SoftResult
from partner_portal.schemas.role import RoleCreate, RoleOut, RolePermissionsAssign, RoleUpdate, SeedResult
from partner_portal.services import roles as role_service

router = APIRouter()


@router.get("", response_model=list[RoleOut])
def list_roles(
    is_active: Optional[bool] = None,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("users.read")),
):
    _ = user
    return role_service.get_roles(db, is_active=is_active)


@router.post("/seed", response_model=SeedResult)
def seed_roles(db: Session = Depends(get_db), admin: User = Depends(require_platform_admin)):
    _ = admin
    return role_service.seed_default_roles(db)


@router.get("/by-name/{name}", response_model=RoleOut)
def get_role_by_name(
    name: str,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("users.read")),
):
    _ = user
    role = role_service.get_role_by_name(db, name)
    if not role:
        raise NotFound("Role not found")
    return role


@router.get("/{role_id}", response_model=RoleOut)
def get_role(
    role_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("users.read")),
):
    _ = user
    role = role_service.get_role_by_id(db, role_id)
    if not role:
        raise NotFound("Role not found")
    return role


@router.post("", response_model=RoleOut, status_code=201)
def create_role(payload: RoleCreate, db: Session = Depends(get_db), admin: User = Depends(require_platform_admin)):
    _ = admin
    return role_service.create_role(db, payload)


@router.patch("/{role_id}", response_model=RoleOut)
def update_role(
    role_id: int,
    payload: RoleUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_platform_admin),
):
    _ = admin
    return role_service.update_role(db, role_id, payload)


@router.put("/{role_id}/permissions", response_model=RoleOut)
def assign_permissions(
    role_id: int,
    payload: RolePermissionsAssign,
    db: Session = Depends(get_db),
    admin: User = Depends(require_platform_admin),
):
    _ = admin
    return role_service.assign_permissions_to_role(db, role_id, payload.permission_ids)


@router.delete("/{role_id}", response_model=SoftResult)
def delete_role(role_id: int, db: Session = Depends(get_db), admin: User = Depends(require_platform_admin)):
    _ = admin
    return role_service.delete_role(db, role_id)
