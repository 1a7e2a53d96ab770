from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from partner_portal.core.database import get_db
from partner_portal.dependencies import is_platform_user, require_permission, resolve_partner_id
from partner_portal.middlewares.rate_limit import limiter
from partner_portal.models import User
from partner_portal.schemas.wallet import AvailabilityResult, WithdrawalOut, WithdrawalRequest
from partner_portal.services import withdrawals as withdrawal_service
from partner_portal.services.audit import create_audit_log

router = APIRouter()


@router.get("/availability", response_model=AvailabilityResult)
def availability(
    amount: Decimal = Query(..., gt=0),
    partner_id: Optional[int] = None,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("wallet.read")),
):
    return withdrawal_service.check_availability(db, resolve_partner_id(user, partner_id), amount)


@router.post("", response_model=WithdrawalOut, status_code=201)
@limiter.limit("5/minute")
def request_withdrawal(
    request: Request,
    payload: WithdrawalRequest,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("wallet.write")),
):
    withdrawal = withdrawal_service.request_withdrawal(
        db,
        partner_id=user.partner_id,
        amount=payload.amount,
        pin=payload.pin,
        user_id=user.id,
        notes=payload.notes,
    )
    create_audit_log(
        db,
        action="withdrawal.request",
        entity_type="withdrawal",
        entity_id=withdrawal.id,
        user_id=user.id,
        partner_id=user.partner_id,
        details=f"reference={withdrawal.reference} amount={withdrawal.amount}",
        ip_address=request.client.host if request.client else None,
    )
    return withdrawal


@router.get("", response_model=list[WithdrawalOut])
def list_withdrawals(
    partner_id: Optional[int] = None,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("wallet.read")),
):
    if partner_id is None and is_platform_user(user):
        return withdrawal_service.list_withdrawals(db)
    return withdrawal_service.list_withdrawals(db, partner_id=resolve_partner_id(user, partner_id))
