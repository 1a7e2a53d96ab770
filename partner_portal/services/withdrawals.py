"""Withdrawal availability checks and pending withdrawal requests.

Requests are recorded for manual payout. Nothing here moves money or changes
wallet balances.
"""
from datetime import datetime
from decimal import Decimal
import logging
import secrets
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from partner_portal.core import clock
from partner_portal.core.errors import PolicyViolation, ValidationFailed
from partner_portal.core.security import verify_pin_hash
from partner_portal.models import Withdrawal, WithdrawalStatus
from partner_portal.services.notifications import create_notification
from partner_portal.services.wallet import get_wallet_by_partner
from partner_portal.services.withdrawal_limits import get_active_limit

logger = logging.getLogger(__name__)


# Requests that count against daily/monthly limits.
COUNTED_STATUSES = (WithdrawalStatus.PENDING, WithdrawalStatus.PROCESSING, WithdrawalStatus.COMPLETED)

def _money(value) -> str:
    return f"KES {Decimal(value):,.2f}"


def _used_since(db: Session, partner_id: int, since: datetime) -> Decimal:
    total = (
        db.query(func.coalesce(func.sum(Withdrawal.amount), 0))
        .filter(
            Withdrawal.partner_id == partner_id,
            Withdrawal.status.in_(COUNTED_STATUSES),
            Withdrawal.created_at >= since,
        )
        .scalar()
    )
    return Decimal(str(total or 0))


def _failure(error_type: str, reason: str, **extra) -> dict:
    return {"can_withdraw": False, "error_type": error_type, "reason": reason, **extra}


def check_availability(db: Session, partner_id: int, amount: Decimal, now: Optional[datetime] = None) -> dict:
    amount = Decimal(str(amount))
    now = now or clock.utcnow()

    wallet = get_wallet_by_partner(db, partner_id)
    if not wallet:
        return _failure("wallet_not_found", "Wallet not found")
    if not wallet.is_setup_complete:
        return _failure("wallet_incomplete", "Please complete wallet setup first")

    balance = Decimal(wallet.balance)
    limit = get_active_limit(db, partner_id)
    if not limit:
        return _failure("no_limits", "Withdrawal limits not configured. Contact support.", balance=balance)

    context = {"balance": balance, "limit": limit}
    if amount > balance:
        return _failure("insufficient_balance", f"Insufficient balance. Available: {_money(balance)}", **context)
    if amount < Decimal(limit.min_withdrawal_amount):
        return _failure("below_minimum", f"Minimum withdrawal is {_money(limit.min_withdrawal_amount)}", **context)
    if amount > Decimal(limit.max_withdrawal_amount):
        return _failure("exceeds_maximum", f"Maximum withdrawal is {_money(limit.max_withdrawal_amount)}", **context)

    start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
    start_of_month = start_of_day.replace(day=1)
    used_today = _used_since(db, partner_id, start_of_day)
    used_month = _used_since(db, partner_id, start_of_month)
    remaining_daily = Decimal(limit.daily_limit) - used_today
    remaining_monthly = Decimal(limit.monthly_limit) - used_month
    context.update(
        used_today=used_today,
        used_this_month=used_month,
        remaining_daily=remaining_daily,
        remaining_monthly=remaining_monthly,
    )

    if amount > remaining_daily:
        return _failure("daily_limit", f"Daily limit exceeded. Remaining today: {_money(remaining_daily)}", **context)
    if amount > remaining_monthly:
        return _failure(
            "monthly_limit",
            f"Monthly limit exceeded. Remaining this month: {_money(remaining_monthly)}",
            **context,
        )
    return {"can_withdraw": True, "reason": None, "error_type": None, **context}


def request_withdrawal(
    db: Session,
    *,
    partner_id: int,
    amount: Decimal,
    pin: str,
    user_id: Optional[int] = None,
    notes: Optional[str] = None,
) -> Withdrawal:
    wallet = get_wallet_by_partner(db, partner_id)
    if wallet and not verify_pin_hash(pin, wallet.pin_hash):
        raise ValidationFailed("Invalid PIN")

    availability = check_availability(db, partner_id, amount)
    if not availability["can_withdraw"]:
        raise PolicyViolation(availability["reason"], error_type=availability["error_type"])

    withdrawal = Withdrawal(
        partner_id=partner_id,
        wallet_id=wallet.id,
        user_id=user_id,
        amount=Decimal(str(amount)),
        withdrawal_method=wallet.withdrawal_method,
        account_number=wallet.account_number,
        bank_name=wallet.bank_name,
        paybill_number=wallet.paybill_number,
        reference=f"WD-{secrets.token_hex(6).upper()}",
        status=WithdrawalStatus.PENDING,
        notes=notes,
    )
    db.add(withdrawal)
    db.flush()
    create_notification(
        db,
        partner_id=partner_id,
        type="info",
        title="Withdrawal Requested",
        message=f"Withdrawal of {_money(amount)} requested ({withdrawal.reference}).",
        commit=False,
    )
    db.commit()
    db.refresh(withdrawal)
    logger.info("Withdrawal request %s partner_id=%s amount=%s", withdrawal.reference, partner_id, amount)
    return withdrawal


def list_withdrawals(db: Session, partner_id: Optional[int] = None) -> list[Withdrawal]:
    query = db.query(Withdrawal)
    if partner_id is not None:
        query = query.filter(Withdrawal.partner_id == partner_id)
    return query.order_by(Withdrawal.id.desc()).all()
