from typing import Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from partner_portal.core.database import get_db
from partner_portal.core.errors import WalletNotFound
from partner_portal.dependencies import require_permission, require_platform_admin, resolve_partner_id
from partner_portal.middlewares.rate_limit import limiter
from partner_portal.models import User
from partner_portal.schemas.wallet import (
    BalanceCredit,
    BalanceUpdateResult,
    PinVerifyRequest,
    PinVerifyResult,
    WalletCreate,
    WalletOut,
    WalletUpdate,
)
from partner_portal.services import wallet as wallet_service
from partner_portal.services.audit import create_audit_log

router = APIRouter()


@router.get("", response_model=list[WalletOut])
def list_wallets(db: Session = Depends(get_db), admin: User = Depends(require_platform_admin)):
    _ = admin
    return wallet_service.list_wallets(db)


@router.get("/me", response_model=WalletOut)
def get_my_wallet(
    partner_id: Optional[int] = None,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("wallet.read")),
):
    partner_id = resolve_partner_id(user, partner_id)
    wallet = wallet_service.get_wallet_by_partner(db, partner_id)
    if not wallet:
        raise WalletNotFound(f"Wallet not found for partner {partner_id}")
    return wallet


@router.post("", response_model=WalletOut, status_code=201)
def create_wallet(
    payload: WalletCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("wallet.admin")),
):
    partner_id = resolve_partner_id(user, payload.partner_id)
    return wallet_service.create_wallet(db, payload, partner_id=partner_id)


@router.patch("/me", response_model=WalletOut)
def update_my_wallet(
    payload: WalletUpdate,
    partner_id: Optional[int] = None,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("wallet.admin")),
):
    return wallet_service.update_wallet(db, resolve_partner_id(user, partner_id), payload)


@router.post("/verify-pin", response_model=PinVerifyResult)
@limiter.limit("10/minute")
def verify_pin(
    request: Request,
    payload: PinVerifyRequest,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("wallet.read")),
):
    wallet = wallet_service.get_wallet_by_partner(db, user.partner_id)
    if not wallet:
        return PinVerifyResult(success=False, error="Wallet not found")
    return wallet_service.verify_pin(db, wallet.id, payload.pin)


@router.post("/credit", response_model=BalanceUpdateResult)
def credit_wallet(
    payload: BalanceCredit,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_platform_admin),
):
    result = wallet_service.update_wallet_balance(db, payload.partner_id, payload.amount_to_add)
    create_audit_log(
        db,
        action="wallet.credit",
        entity_type="wallet",
        entity_id=payload.partner_id,
        user_id=admin.id,
        partner_id=payload.partner_id,
        details=f"amount={payload.amount_to_add} new_balance={result['new_balance']}",
        ip_address=request.client.host if request.client else None,
    )
    return result
