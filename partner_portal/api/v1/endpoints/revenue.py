from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from partner_portal.core.database import get_db
from partner_portal.dependencies import require_permission, require_platform_admin, resolve_partner_id
from partner_portal.models import User
from partner_portal.schemas.revenue import EarningsSummary, PartnerEarnings, RevenueLogCreate, RevenueLogOut, TimelinePoint
from partner_portal.services import revenue as revenue_service

router = APIRouter()


@router.post("/logs", response_model=RevenueLogOut, status_code=201)
def create_revenue_log(
    payload: RevenueLogCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_platform_admin),
):
    _ = admin
    return revenue_service.log_revenue(db, **payload.model_dump())


@router.get("/logs", response_model=list[RevenueLogOut])
def list_revenue_logs(
    partner_id: Optional[int] = None,
    limit: int = Query(default=200, ge=1, le=1000),
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("wallet.read")),
):
    return revenue_service.get_partner_revenue_logs(db, resolve_partner_id(user, partner_id), limit=limit)


@router.get("/timeline", response_model=list[TimelinePoint])
def earnings_timeline(
    days: int = Query(default=30, ge=1, le=revenue_service.MAX_TIMELINE_DAYS),
    partner_id: Optional[int] = None,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("dashboard.read")),
):
    return revenue_service.get_earnings_timeline(db, resolve_partner_id(user, partner_id), days)


@router.get("/system-timeline", response_model=list[TimelinePoint])
def system_timeline(
    days: int = Query(default=30, ge=1, le=revenue_service.MAX_TIMELINE_DAYS),
    db: Session = Depends(get_db),
    admin: User = Depends(require_platform_admin),
):
    _ = admin
    return revenue_service.get_system_earnings_timeline(db, days)


@router.get("/summary", response_model=EarningsSummary)
def earnings_summary(db: Session = Depends(get_db), admin: User = Depends(require_platform_admin)):
    _ = admin
    return revenue_service.get_partner_earnings_summary(db)


@router.get("/top-partners", response_model=list[PartnerEarnings])
def top_partners(
    limit: int = Query(default=5, ge=1, le=100),
    db: Session = Depends(get_db),
    admin: User = Depends(require_platform_admin),
):
    _ = admin
    return revenue_service.get_top_earning_partners(db, limit=limit)
