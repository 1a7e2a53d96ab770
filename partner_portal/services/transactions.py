from decimal import Decimal
import logging
from typing import Optional

from sqlalchemy.orm import Session

from partner_portal.core import clock
from partner_portal.core.errors import Conflict, NotFound, PolicyViolation
from partner_portal.models import PartnerRevenueLog, Transaction, TransactionStatus
from partner_portal.schemas.transaction import TransactionCreate, TransactionUpdate
from partner_portal.services.partners import require_partner

logger = logging.getLogger(__name__)


def get_transaction(db: Session, transaction_id: int) -> Optional[Transaction]:
    return db.query(Transaction).filter(Transaction.id == transaction_id).first()


def require_transaction(db: Session, transaction_id: int) -> Transaction:
    transaction = get_transaction(db, transaction_id)
    if not transaction:
        raise NotFound("Transaction not found")
    return transaction


def get_transaction_by_mpesa_code(db: Session, mpesa_code: str) -> Optional[Transaction]:
    return db.query(Transaction).filter(Transaction.mpesa_code == mpesa_code.strip()).first()


def list_transactions(db: Session, status: Optional[str] = None, limit: int = 200) -> list[Transaction]:
    query = db.query(Transaction)
    if status:
        query = query.filter(Transaction.status == status)
    return query.order_by(Transaction.id.desc()).limit(limit).all()


def get_transactions_by_partner(db: Session, partner_id: int, status: Optional[str] = None) -> list[Transaction]:
    query = db.query(Transaction).filter(Transaction.partner_id == partner_id)
    if status:
        query = query.filter(Transaction.status == status)
    return query.order_by(Transaction.id.desc()).all()


def get_recent_transactions_by_phone(db: Session, phone_number: str, limit: int = 10) -> list[Transaction]:
    return (
        db.query(Transaction)
        .filter(Transaction.phone_number == phone_number.strip())
        .order_by(Transaction.id.desc())
        .limit(limit)
        .all()
    )


def create_transaction(db: Session, payload: TransactionCreate) -> Transaction:
    require_partner(db, payload.partner_id)
    mpesa_code = payload.mpesa_code.strip()
    if get_transaction_by_mpesa_code(db, mpesa_code):
        raise Conflict(f"Transaction with M-Pesa code {mpesa_code} already exists")

    transaction = Transaction(
        student_name=payload.student_name.strip(),
        phone_number=payload.phone_number.strip(),
        mpesa_code=mpesa_code,
        amount=payload.amount,
        campaign_code=payload.campaign_code,
        partner_id=payload.partner_id,
        status=payload.status,
        verified_at=clock.utcnow() if payload.status == TransactionStatus.SUCCESS.value else None,
    )
    db.add(transaction)
    db.commit()
    db.refresh(transaction)
    logger.info("Recorded transaction id=%s partner_id=%s status=%s", transaction.id, transaction.partner_id, transaction.status)
    return transaction


def update_transaction(db: Session, transaction_id: int, payload: TransactionUpdate) -> Transaction:
    transaction = require_transaction(db, transaction_id)
    fields_set = payload.model_fields_set

    mpesa_code = None
    if "mpesa_code" in fields_set and payload.mpesa_code:
        mpesa_code = payload.mpesa_code.strip()
        other = get_transaction_by_mpesa_code(db, mpesa_code)
        if other and other.id != transaction.id:
            raise Conflict(f"Transaction with M-Pesa code {mpesa_code} already exists")
    if "amount" in fields_set and payload.amount is not None:
        settled = db.query(PartnerRevenueLog.id).filter(PartnerRevenueLog.transaction_id == transaction.id).first()
        if settled and Decimal(payload.amount) != Decimal(transaction.amount):
            raise PolicyViolation("Cannot change the amount of a settled transaction")

    if mpesa_code:
        transaction.mpesa_code = mpesa_code
    if "amount" in fields_set and payload.amount is not None:
        transaction.amount = payload.amount
    if "status" in fields_set and payload.status:
        transaction.status = payload.status
        if payload.status == TransactionStatus.SUCCESS.value and transaction.verified_at is None:
            transaction.verified_at = clock.utcnow()

    db.commit()
    db.refresh(transaction)
    return transaction
