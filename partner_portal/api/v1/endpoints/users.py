from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from partner_portal.core.database import get_db
from partner_portal.dependencies import (
    ensure_partner_access,
    is_platform_user,
    require_permission,
    resolve_partner_id,
    user_permission_keys,
)
from partner_portal.models import User
from partner_portal.schemas.auth import SoftResult
from partner_portal.schemas.user import UserCreate, UserCredentials, UserOut, UserUpdate
from partner_portal.services import users as user_service
from partner_portal.services.email import deliver_credentials
from partner_portal.services.permissions import has_all_access, has_permission, permission_keys, resolve_permission_ids
from partner_portal.services.roles import SUPER_ADMIN_ROLE

router = APIRouter()


def _guard_escalation(db: Session, caller: User, role: Optional[str], permission_ids: Optional[list[int]]) -> None:
    if is_platform_user(caller):
        return
    if role == SUPER_ADMIN_ROLE:
        raise HTTPException(status_code=403, detail="Only platform administrators can assign this role")
    if permission_ids:
        requested = permission_keys(resolve_permission_ids(db, permission_ids))
        if has_all_access(requested):
            raise HTTPException(status_code=403, detail="Only platform administrators can grant all_access permissions")


@router.get("", response_model=list[UserOut])
def list_users(
    partner_id: Optional[int] = None,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("users.read")),
):
    if partner_id is None and is_platform_user(user):
        return user_service.list_users(db)
    return user_service.list_users(db, resolve_partner_id(user, partner_id))


@router.post("", response_model=UserCredentials, status_code=201)
def create_user(
    payload: UserCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("users.write")),
):
    partner_id = resolve_partner_id(user, payload.partner_id)
    _guard_escalation(db, user, payload.role, payload.permission_ids)
    created, password = user_service.create_user(
        db,
        partner_id=partner_id,
        email=payload.email,
        name=payload.name,
        phone=payload.phone,
        role=payload.role,
        permission_ids=payload.permission_ids,
        super_admin=payload.role == SUPER_ADMIN_ROLE,
    )
    deliver_credentials(created.email, created.name, created.extension, password)
    return user_service.credentials_payload(created, password)


@router.get("/{user_id}", response_model=UserOut)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("users.read")),
):
    target = user_service.require_user(db, user_id)
    ensure_partner_access(user, target.partner_id)
    return target


@router.patch("/{user_id}", response_model=UserOut)
def update_user(
    user_id: int,
    payload: UserUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("users.write")),
):
    target = user_service.require_user(db, user_id)
    ensure_partner_access(user, target.partner_id)
    if "permission_ids" in payload.model_fields_set and not has_permission(user_permission_keys(user), "users.admin"):
        raise HTTPException(status_code=403, detail="Insufficient permissions")
    _guard_escalation(db, user, payload.role, payload.permission_ids)
    return user_service.update_user(db, user_id, payload)


@router.delete("/{user_id}", response_model=SoftResult)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("users.admin")),
):
    target = user_service.require_user(db, user_id)
    ensure_partner_access(user, target.partner_id)
    if target.id == user.id:
        raise HTTPException(status_code=400, detail="You cannot delete your own account")
    return user_service.delete_user(db, user_id)


@router.post("/{user_id}/reset-password", response_model=UserCredentials)
def reset_password(
    user_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("users.admin")),
):
    target = user_service.require_user(db, user_id)
    ensure_partner_access(user, target.partner_id)
    target, password = user_service.reset_user_password(db, user_id)
    deliver_credentials(target.email, target.name, target.extension, password)
    return user_service.credentials_payload(target, password)
