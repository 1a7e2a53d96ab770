"""Revenue attribution: campaign matching, split arithmetic and earnings reports.

A transaction is matched to a campaign by comparing ``Transaction.campaign_code``
with ``Campaign.promo_code`` exactly (case-sensitive) among the partner's
campaigns. PromoCode rows are a separate, upper-cased code space and are not
consulted here. When nothing matches, the partner gets a flat 20%.

Aggregates are always recomputed from the revenue log or the transaction
table; no running totals are stored.
"""
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal, ROUND_HALF_UP
import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from partner_portal.core import clock
from partner_portal.core.errors import ValidationFailed
from partner_portal.models import (
    Campaign,
    EnrollmentStatus,
    Partner,
    PartnerRevenueLog,
    ProgramEnrollment,
    Transaction,
    TransactionStatus,
)

logger = logging.getLogger(__name__)

FALLBACK_PARTNER_PERCENTAGE = Decimal("20")
CENT = Decimal("0.01")
MAX_TIMELINE_DAYS = 366


def _quantize(value: Decimal) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def match_campaign(db: Session, partner_id: int, campaign_code: Optional[str]) -> Optional[Campaign]:
    if not campaign_code:
        return None
    return (
        db.query(Campaign)
        .filter(Campaign.partner_id == partner_id, Campaign.promo_code == campaign_code)
        .first()
    )


def partner_percentage_for(campaign: Optional[Campaign]) -> Decimal:
    if campaign is None:
        return FALLBACK_PARTNER_PERCENTAGE
    return Decimal(campaign.partner_percentage)


def compute_partner_share(amount: Decimal, campaign: Optional[Campaign]) -> Decimal:
    return _quantize(Decimal(amount) * partner_percentage_for(campaign) / Decimal("100"))


def log_revenue(
    db: Session,
    *,
    partner_id: int,
    campaign_id: Optional[int],
    transaction_id: int,
    amount: Decimal,
    gross_amount: Decimal,
    commit: bool = True,
) -> PartnerRevenueLog:
    """Append one revenue-log row. Does not touch the transaction or wallet."""
    entry = PartnerRevenueLog(
        partner_id=partner_id,
        campaign_id=campaign_id,
        transaction_id=transaction_id,
        amount=_quantize(amount),
        gross_amount=_quantize(gross_amount),
        split_timestamp=clock.utcnow(),
    )
    db.add(entry)
    if commit:
        db.commit()
        db.refresh(entry)
    else:
        db.flush()
    return entry


def get_revenue_log_by_transaction_id(db: Session, transaction_id: int) -> Optional[PartnerRevenueLog]:
    return db.query(PartnerRevenueLog).filter(PartnerRevenueLog.transaction_id == transaction_id).first()


def get_partner_revenue_logs(db: Session, partner_id: int, limit: int = 200) -> list[PartnerRevenueLog]:
    return (
        db.query(PartnerRevenueLog)
        .filter(PartnerRevenueLog.partner_id == partner_id)
        .order_by(PartnerRevenueLog.id.desc())
        .limit(limit)
        .all()
    )


def _timeline_window(days: int, today: Optional[date]) -> tuple[date, date]:
    if days < 1 or days > MAX_TIMELINE_DAYS:
        raise ValidationFailed(f"days must be between 1 and {MAX_TIMELINE_DAYS}")
    end = today or clock.utcnow().date()
    return end - timedelta(days=days - 1), end


def _empty_series(start: date, days: int) -> dict[date, dict]:
    series = {}
    for offset in range(days):
        day = start + timedelta(days=offset)
        series[day] = {"date": day, "amount": Decimal("0"), "count": 0}
    return series


def get_earnings_timeline(db: Session, partner_id: int, days: int, today: Optional[date] = None) -> list[dict]:
    """Daily partner earnings for the last ``days`` days, oldest first.

    Always returns exactly ``days`` entries ending today (UTC); days with no
    successful transaction have amount 0.
    """
    start, _ = _timeline_window(days, today)
    since = datetime.combine(start, time.min).replace(tzinfo=timezone.utc)

    campaigns = {c.promo_code: c for c in db.query(Campaign).filter(Campaign.partner_id == partner_id).all()}
    transactions = (
        db.query(Transaction)
        .filter(
            Transaction.partner_id == partner_id,
            Transaction.status == TransactionStatus.SUCCESS.value,
            Transaction.created_at >= since,
        )
        .all()
    )

    series = _empty_series(start, days)
    fallbacks = 0
    for transaction in transactions:
        day = clock.as_utc(transaction.created_at).date()
        point = series.get(day)
        if point is None:
            continue
        campaign = campaigns.get(transaction.campaign_code) if transaction.campaign_code else None
        if campaign is None:
            fallbacks += 1
        point["amount"] += compute_partner_share(transaction.amount, campaign)
        point["count"] += 1

    if fallbacks:
        logger.warning(
            "Earnings timeline partner_id=%s used the %s%% fallback for %s transaction(s)",
            partner_id,
            FALLBACK_PARTNER_PERCENTAGE,
            fallbacks,
        )
    return list(series.values())


def get_system_earnings_timeline(db: Session, days: int, today: Optional[date] = None) -> list[dict]:
    start, _ = _timeline_window(days, today)
    since = datetime.combine(start, time.min).replace(tzinfo=timezone.utc)

    series = _empty_series(start, days)
    for point in series.values():
        point["gross_amount"] = Decimal("0")

    logs = db.query(PartnerRevenueLog).filter(PartnerRevenueLog.split_timestamp >= since).all()
    for entry in logs:
        point = series.get(clock.as_utc(entry.split_timestamp).date())
        if point is None:
            continue
        point["amount"] += Decimal(entry.amount)
        point["gross_amount"] += Decimal(entry.gross_amount)
        point["count"] += 1
    return list(series.values())


def _earnings_by_partner(db: Session) -> list[dict]:
    rows = (
        db.query(
            PartnerRevenueLog.partner_id,
            Partner.name,
            func.coalesce(func.sum(PartnerRevenueLog.amount), 0),
            func.coalesce(func.sum(PartnerRevenueLog.gross_amount), 0),
            func.count(PartnerRevenueLog.id),
        )
        .outerjoin(Partner, Partner.id == PartnerRevenueLog.partner_id)
        .group_by(PartnerRevenueLog.partner_id, Partner.name)
        .all()
    )
    return [
        {
            "partner_id": partner_id,
            "partner_name": name,
            "total_earnings": _quantize(Decimal(str(earned))),
            "total_gross": _quantize(Decimal(str(gross))),
            "settlements": count,
        }
        for partner_id, name, earned, gross, count in rows
    ]


def get_partner_earnings_summary(db: Session) -> dict:
    partners = _earnings_by_partner(db)
    total_earnings = sum((p["total_earnings"] for p in partners), Decimal("0"))
    total_revenue = sum((p["total_gross"] for p in partners), Decimal("0"))
    partners.sort(key=lambda p: (-p["total_earnings"], p["partner_id"]))
    return {
        "total_earnings": total_earnings,
        "total_revenue": total_revenue,
        "platform_revenue": total_revenue - total_earnings,
        "settlements": sum(p["settlements"] for p in partners),
        "partners": partners,
    }


def get_top_earning_partners(db: Session, limit: int = 5) -> list[dict]:
    partners = _earnings_by_partner(db)
    partners.sort(key=lambda p: (-p["total_earnings"], p["partner_id"]))
    return partners[:limit]


def get_campaign_earnings(db: Session, partner_id: int) -> list[dict]:
    """Per-campaign performance for a partner, highest earnings first."""
    campaigns = db.query(Campaign).filter(Campaign.partner_id == partner_id).all()
    results = []
    for campaign in campaigns:
        enrollments = (
            db.query(func.count(ProgramEnrollment.id))
            .filter(
                ProgramEnrollment.campaign_id == campaign.id,
                ProgramEnrollment.status == EnrollmentStatus.REDEEMED,
            )
            .scalar()
            or 0
        )
        revenue = (
            db.query(func.coalesce(func.sum(Transaction.amount), 0))
            .filter(
                Transaction.partner_id == partner_id,
                Transaction.campaign_code == campaign.promo_code,
                Transaction.status == TransactionStatus.SUCCESS.value,
            )
            .scalar()
        )
        revenue = _quantize(Decimal(str(revenue or 0)))
        target = campaign.target_signups or 0
        conversion = _quantize(Decimal(enrollments) * 100 / Decimal(target)) if target else Decimal("0.00")
        results.append(
            {
                "campaign_id": campaign.id,
                "campaign_name": campaign.name,
                "promo_code": campaign.promo_code,
                "partner_percentage": Decimal(campaign.partner_percentage),
                "enrollments": enrollments,
                "total_revenue": revenue,
                "partner_earnings": compute_partner_share(revenue, campaign),
                "conversion_rate": conversion,
            }
        )
    results.sort(key=lambda r: (-r["partner_earnings"], r["campaign_id"]))
    return results
