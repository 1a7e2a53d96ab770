from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from partner_portal.core.database import get_db
from partner_portal.core.errors import NotFound
from partner_portal.dependencies import require_permission, require_platform_admin, resolve_partner_id
from partner_portal.models import User
from partner_portal.schemas.wallet import WithdrawalLimitCreate, WithdrawalLimitOut, WithdrawalLimitUpdate
from partner_portal.services import withdrawal_limits as limit_service

router = APIRouter()


@router.get("", response_model=list[WithdrawalLimitOut])
def list_limits(
    partner_id: Optional[int] = None,
    db: Session = Depends(get_db),
    admin: User = Depends(require_platform_admin),
):
    _ = admin
    return limit_service.list_limits(db, partner_id=partner_id)


@router.get("/active", response_model=WithdrawalLimitOut)
def active_limit(
    partner_id: Optional[int] = None,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("wallet.read")),
):
    limit = limit_service.get_active_limit(db, resolve_partner_id(user, partner_id))
    if not limit:
        raise NotFound("Withdrawal limits not configured")
    return limit


@router.post("", response_model=WithdrawalLimitOut, status_code=201)
def create_limit(
    payload: WithdrawalLimitCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_platform_admin),
):
    _ = admin
    return limit_service.create_limit(db, payload)


@router.patch("/{limit_id}", response_model=WithdrawalLimitOut)
def update_limit(
    limit_id: int,
    payload: WithdrawalLimitUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_platform_admin),
):
    _ = admin
    return limit_service.update_limit(db, limit_id, payload)
