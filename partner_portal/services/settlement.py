"""Settle a successful payment into partner revenue.

Settling a transaction writes, in one database transaction:

* a redeemed ProgramEnrollment (only when a campaign matched),
* one PartnerRevenueLog row,
* the wallet credit,
* a partner notification and an audit entry.

``transaction_id`` is unique on both enrollments and revenue logs, so a
concurrent duplicate settlement fails on commit instead of crediting twice.
Settling an already settled transaction returns the existing result.
"""
from decimal import Decimal
import logging
import math
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from partner_portal.core.errors import PolicyViolation
from partner_portal.core.security import generate_redeem_code
from partner_portal.models import EnrollmentStatus, Program, Transaction, TransactionStatus
from partner_portal.services.audit import create_audit_log
from partner_portal.services.enrollments import create_enrollment, get_enrollment_by_transaction_id
from partner_portal.services.notifications import create_notification
from partner_portal.services.revenue import (
    FALLBACK_PARTNER_PERCENTAGE,
    compute_partner_share,
    get_revenue_log_by_transaction_id,
    log_revenue,
    match_campaign,
)
from partner_portal.services.transactions import require_transaction
from partner_portal.services.wallet import update_wallet_balance

logger = logging.getLogger(__name__)


def _existing(db: Session, transaction: Transaction) -> Optional[dict]:
    revenue_log = get_revenue_log_by_transaction_id(db, transaction.id)
    if not revenue_log:
        return None
    return {
        "transaction_id": transaction.id,
        "already_settled": True,
        "fallback_applied": revenue_log.campaign_id is None,
        "campaign_id": revenue_log.campaign_id,
        "partner_share": Decimal(revenue_log.amount),
        "gross_amount": Decimal(revenue_log.gross_amount),
        "enrollment": get_enrollment_by_transaction_id(db, transaction.id),
        "revenue_log": revenue_log,
        "new_balance": None,
    }


def settle_transaction(
    db: Session,
    transaction_id: int,
    *,
    user_id: Optional[int] = None,
    ip_address: Optional[str] = None,
) -> dict:
    transaction = require_transaction(db, transaction_id)
    if transaction.status != TransactionStatus.SUCCESS.value:
        raise PolicyViolation(
            f'Only transactions with status "{TransactionStatus.SUCCESS.value}" can be settled',
            status=transaction.status,
        )

    existing = _existing(db, transaction)
    if existing:
        return existing

    gross = Decimal(transaction.amount)
    campaign = match_campaign(db, transaction.partner_id, transaction.campaign_code)
    share = compute_partner_share(gross, campaign)
    if campaign is None:
        logger.warning(
            "No campaign matched code=%r for transaction id=%s partner_id=%s; applying %s%% fallback share",
            transaction.campaign_code,
            transaction.id,
            transaction.partner_id,
            FALLBACK_PARTNER_PERCENTAGE,
        )

    try:
        enrollment = None
        if campaign is not None:
            program = db.query(Program).filter(Program.id == campaign.program_id).first()
            pricing = Decimal(program.pricing) if program and program.pricing else Decimal("0")
            lessons = math.floor(gross / pricing) if pricing > 0 else 0
            enrollment = create_enrollment(
                db,
                program_id=campaign.program_id,
                campaign_id=campaign.id,
                redeem_code=generate_redeem_code(),
                status=EnrollmentStatus.REDEEMED,
                transaction_id=transaction.id,
                meta={
                    "phone": transaction.phone_number,
                    "payment_amount": str(gross),
                    "number_of_lessons_subscribed": lessons,
                },
                commit=False,
            )

        revenue_log = log_revenue(
            db,
            partner_id=transaction.partner_id,
            campaign_id=campaign.id if campaign else None,
            transaction_id=transaction.id,
            amount=share,
            gross_amount=gross,
            commit=False,
        )
        balance = update_wallet_balance(db, transaction.partner_id, share, commit=False)

        create_notification(
            db,
            partner_id=transaction.partner_id,
            type="success",
            title="Payment Received",
            message=f"{transaction.student_name} paid KES {gross:,.2f}. Your share: KES {share:,.2f}.",
            commit=False,
        )
        create_audit_log(
            db,
            action="revenue.fallback_split" if campaign is None else "revenue.settle",
            entity_type="transaction",
            entity_id=transaction.id,
            user_id=user_id,
            partner_id=transaction.partner_id,
            details=f"code={transaction.campaign_code!r} gross={gross} share={share}",
            ip_address=ip_address,
            commit=False,
        )
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info("Transaction id=%s was settled concurrently", transaction_id)
        existing = _existing(db, require_transaction(db, transaction_id))
        if existing:
            return existing
        raise
    except Exception:
        db.rollback()
        raise

    db.refresh(revenue_log)
    if enrollment is not None:
        db.refresh(enrollment)
    logger.info(
        "Settled transaction id=%s partner_id=%s campaign_id=%s share=%s",
        transaction.id,
        transaction.partner_id,
        revenue_log.campaign_id,
        share,
    )
    return {
        "transaction_id": transaction.id,
        "already_settled": False,
        "fallback_applied": campaign is None,
        "campaign_id": revenue_log.campaign_id,
        "partner_share": share,
        "gross_amount": gross,
        "enrollment": enrollment,
        "revenue_log": revenue_log,
        "new_balance": balance["new_balance"],
    }
