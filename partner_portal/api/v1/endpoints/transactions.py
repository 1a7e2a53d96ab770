from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from partner_portal.core.database import get_db
from partner_portal.core.errors import NotFound
from partner_portal.dependencies import ensure_partner_access, is_platform_user, require_permission, require_platform_admin, resolve_partner_id
from partner_portal.models import User
from partner_portal.schemas.revenue import SettlementOut
from partner_portal.schemas.transaction import TransactionCreate, TransactionOut, TransactionUpdate
from partner_portal.services import transactions as transaction_service
from partner_portal.services.settlement import settle_transaction

router = APIRouter()


@router.post("", response_model=TransactionOut, status_code=201)
def create_transaction(
    payload: TransactionCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_platform_admin),
):
    _ = admin
    return transaction_service.create_transaction(db, payload)


@router.get("", response_model=list[TransactionOut])
def list_transactions(
    status: Optional[str] = None,
    partner_id: Optional[int] = None,
    limit: int = Query(default=200, ge=1, le=1000),
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("wallet.read")),
):
    if partner_id is None and is_platform_user(user):
        return transaction_service.list_transactions(db, status=status, limit=limit)
    rows = transaction_service.get_transactions_by_partner(db, resolve_partner_id(user, partner_id), status=status)
    return rows[:limit]


@router.get("/by-mpesa/{mpesa_code}", response_model=TransactionOut)
def get_by_mpesa_code(
    mpesa_code: str,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("wallet.read")),
):
    transaction = transaction_service.get_transaction_by_mpesa_code(db, mpesa_code)
    if not transaction:
        raise NotFound("Transaction not found")
    ensure_partner_access(user, transaction.partner_id)
    return transaction


@router.get("/by-phone/{phone_number}", response_model=list[TransactionOut])
def get_by_phone(
    phone_number: str,
    limit: int = Query(default=10, ge=1, le=100),
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("wallet.read")),
):
    rows = transaction_service.get_recent_transactions_by_phone(db, phone_number, limit=limit)
    if is_platform_user(user):
        return rows
    return [row for row in rows if row.partner_id == user.partner_id]


@router.get("/{transaction_id}", response_model=TransactionOut)
def get_transaction(
    transaction_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("wallet.read")),
):
    transaction = transaction_service.require_transaction(db, transaction_id)
    ensure_partner_access(user, transaction.partner_id)
    return transaction


@router.patch("/{transaction_id}", response_model=TransactionOut)
def update_transaction(
    transaction_id: int,
    payload: TransactionUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_platform_admin),
):
    _ = admin
    return transaction_service.update_transaction(db, transaction_id, payload)


@router.post("/{transaction_id}/settle", response_model=SettlementOut)
def settle(
    transaction_id: int,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_platform_admin),
):
    return settle_transaction(
        db,
        transaction_id,
        user_id=admin.id,
        ip_address=request.client.host if request.client else None,
    )
