"""Partner wallets.

``update_wallet_balance`` is the only code path that changes ``balance``; it
moves ``lifetime_earnings`` by the same amount in the same write.
"""
from decimal import Decimal
import logging
from typing import Optional

from sqlalchemy.orm import Session

from partner_portal.core import clock
from partner_portal.core.errors import Conflict, NotFound, ValidationFailed, WalletNotFound
from partner_portal.core.security import hash_pin, verify_pin_hash
from partner_portal.models import Wallet, WithdrawalMethod
from partner_portal.schemas.wallet import WalletCreate, WalletUpdate
from partner_portal.services.partners import require_partner

logger = logging.getLogger(__name__)


def _check_method_fields(method: WithdrawalMethod, bank_name: Optional[str], paybill_number: Optional[str]) -> None:
    if method == WithdrawalMethod.BANK and not bank_name:
        raise ValidationFailed("bank_name is required for bank withdrawals")
    if method == WithdrawalMethod.PAYBILL and not paybill_number:
        raise ValidationFailed("paybill_number is required for paybill withdrawals")


def get_wallet_by_partner(db: Session, partner_id: int) -> Optional[Wallet]:
    return db.query(Wallet).filter(Wallet.partner_id == partner_id).first()


def require_wallet(db: Session, wallet_id: int) -> Wallet:
    wallet = db.query(Wallet).filter(Wallet.id == wallet_id).first()
    if not wallet:
        raise NotFound("Wallet not found")
    return wallet


def list_wallets(db: Session) -> list[Wallet]:
    return db.query(Wallet).order_by(Wallet.id.asc()).all()


def create_wallet(db: Session, payload: WalletCreate, *, partner_id: int) -> Wallet:
    require_partner(db, partner_id)
    if get_wallet_by_partner(db, partner_id):
        raise Conflict("Wallet already exists for this partner")
    _check_method_fields(payload.withdrawal_method, payload.bank_name, payload.paybill_number)

    now = clock.utcnow()
    wallet = Wallet(
        partner_id=partner_id,
        account_number=payload.account_number.strip(),
        balance=Decimal("0"),
        pending_balance=Decimal("0"),
        lifetime_earnings=Decimal("0"),
        withdrawal_method=payload.withdrawal_method,
        bank_name=payload.bank_name,
        branch=payload.branch,
        paybill_number=payload.paybill_number if payload.withdrawal_method == WithdrawalMethod.PAYBILL else None,
        beneficiaries=[b.model_dump() for b in payload.beneficiaries],
        pin_hash=hash_pin(payload.pin),
        pin_set_at=now,
        is_setup_complete=True,
    )
    db.add(wallet)
    db.commit()
    db.refresh(wallet)
    logger.info("Created wallet id=%s partner_id=%s", wallet.id, partner_id)
    return wallet


def update_wallet(db: Session, partner_id: int, payload: WalletUpdate) -> Wallet:
    wallet = get_wallet_by_partner(db, partner_id)
    if not wallet:
        raise WalletNotFound(f"Wallet not found for partner {partner_id}")
    changes = payload.model_dump(exclude_unset=True)

    method = changes.get("withdrawal_method") or wallet.withdrawal_method
    bank_name = changes.get("bank_name", wallet.bank_name)
    paybill_number = changes.get("paybill_number", wallet.paybill_number)
    _check_method_fields(method, bank_name, paybill_number)

    if changes.get("account_number"):
        wallet.account_number = changes["account_number"].strip()
    wallet.withdrawal_method = method
    wallet.bank_name = bank_name
    if "branch" in changes:
        wallet.branch = changes["branch"]
    wallet.paybill_number = paybill_number if method == WithdrawalMethod.PAYBILL else None
    if payload.beneficiaries is not None:
        wallet.beneficiaries = [b.model_dump() for b in payload.beneficiaries]
    if payload.pin:
        wallet.pin_hash = hash_pin(payload.pin)
        wallet.pin_set_at = clock.utcnow()

    db.commit()
    db.refresh(wallet)
    return wallet


def update_wallet_balance(db: Session, partner_id: int, amount_to_add: Decimal, *, commit: bool = True) -> dict:
    wallet = (
        db.query(Wallet)
        .filter(Wallet.partner_id == partner_id)
        .with_for_update()
        .first()
    )
    if not wallet:
        raise WalletNotFound(f"Wallet not found for partner {partner_id}")

    amount = Decimal(str(amount_to_add))
    wallet.balance = Decimal(wallet.balance) + amount
    wallet.lifetime_earnings = Decimal(wallet.lifetime_earnings) + amount
    if commit:
        db.commit()
        db.refresh(wallet)
    else:
        db.flush()
    logger.info("Wallet id=%s partner_id=%s credited %s", wallet.id, partner_id, amount)
    return {"success": True, "new_balance": Decimal(wallet.balance)}


def verify_pin(db: Session, wallet_id: int, pin: str) -> dict:
    wallet = db.query(Wallet).filter(Wallet.id == wallet_id).first()
    if not wallet:
        return {"success": False, "error": "Wallet not found"}
    if not verify_pin_hash(pin, wallet.pin_hash):
        return {"success": False, "error": "Invalid PIN"}
    return {"success": True}
