from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from partner_portal.core.database import get_db
from partner_portal.dependencies import is_platform_user, require_permission, require_platform_admin, resolve_partner_id
from partner_portal.models import User
from partner_portal.schemas.notification import AuditLogOut
from partner_portal.services.audit import get_audit_logs, get_audit_logs_by_action

router = APIRouter()


@router.get("", response_model=list[AuditLogOut])
def list_audit_logs(
    user_id: Optional[int] = None,
    partner_id: Optional[int] = None,
    limit: int = Query(default=100, ge=1, le=500),
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("settings.admin")),
):
    if partner_id is None and is_platform_user(user):
        return get_audit_logs(db, user_id=user_id, limit=limit)
    return get_audit_logs(db, user_id=user_id, partner_id=resolve_partner_id(user, partner_id), limit=limit)


@router.get("/action/{action}", response_model=list[AuditLogOut])
def list_by_action(
    action: str,
    limit: int = Query(default=100, ge=1, le=500),
    db: Session = Depends(get_db),
    admin: User = Depends(require_platform_admin),
):
    _ = admin
    return get_audit_logs_by_action(db, action, limit=limit)
