from decimal import Decimal
import logging
from typing import Optional

from sqlalchemy.orm import Session

from partner_portal.core.errors import NotFound, ValidationFailed
from partner_portal.models import WithdrawalLimit
from partner_portal.schemas.wallet import WithdrawalLimitCreate, WithdrawalLimitUpdate
from partner_portal.services.partners import require_partner

logger = logging.getLogger(__name__)


def _check_bounds(minimum: Decimal, maximum: Decimal, daily: Decimal, monthly: Decimal) -> None:
    if Decimal(minimum) > Decimal(maximum):
        raise ValidationFailed("min_withdrawal_amount must not exceed max_withdrawal_amount")
    if Decimal(daily) > Decimal(monthly):
        raise ValidationFailed("daily_limit must not exceed monthly_limit")


def require_limit(db: Session, limit_id: int) -> WithdrawalLimit:
    limit = db.query(WithdrawalLimit).filter(WithdrawalLimit.id == limit_id).first()
    if not limit:
        raise NotFound("Withdrawal limit not found")
    return limit


def list_limits(db: Session, partner_id: Optional[int] = None) -> list[WithdrawalLimit]:
    query = db.query(WithdrawalLimit)
    if partner_id is not None:
        query = query.filter(WithdrawalLimit.partner_id == partner_id)
    return query.order_by(WithdrawalLimit.id.asc()).all()


def create_limit(db: Session, payload: WithdrawalLimitCreate) -> WithdrawalLimit:
    if payload.partner_id is not None:
        require_partner(db, payload.partner_id)
    _check_bounds(
        payload.min_withdrawal_amount,
        payload.max_withdrawal_amount,
        payload.daily_limit,
        payload.monthly_limit,
    )
    limit = WithdrawalLimit(**payload.model_dump())
    db.add(limit)
    db.commit()
    db.refresh(limit)
    logger.info("Created withdrawal limit id=%s partner_id=%s", limit.id, limit.partner_id)
    return limit


def update_limit(db: Session, limit_id: int, payload: WithdrawalLimitUpdate) -> WithdrawalLimit:
    limit = require_limit(db, limit_id)
    changes = {key: value for key, value in payload.model_dump(exclude_unset=True).items() if value is not None}
    _check_bounds(
        changes.get("min_withdrawal_amount", limit.min_withdrawal_amount),
        changes.get("max_withdrawal_amount", limit.max_withdrawal_amount),
        changes.get("daily_limit", limit.daily_limit),
        changes.get("monthly_limit", limit.monthly_limit),
    )
    for key, value in changes.items():
        setattr(limit, key, value)
    db.commit()
    db.refresh(limit)
    return limit


def get_active_limit(db: Session, partner_id: int) -> Optional[WithdrawalLimit]:
    """Partner-specific active limit, else the active global one.

    The chosen row applies as a whole; fields are never merged across rows.
    """
    partner_limit = (
        db.query(WithdrawalLimit)
        .filter(WithdrawalLimit.partner_id == partner_id, WithdrawalLimit.is_active.is_(True))
        .order_by(WithdrawalLimit.id.desc())
        .first()
    )
    if partner_limit:
        return partner_limit
    return (
        db.query(WithdrawalLimit)
        .filter(WithdrawalLimit.partner_id.is_(None), WithdrawalLimit.is_active.is_(True))
        .order_by(WithdrawalLimit.id.desc())
        .first()
    )
