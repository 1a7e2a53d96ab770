from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from partner_portal.models.enrollment import EnrollmentStatus


class EnrollmentOut(BaseModel):
    id: int
    program_id: int
    campaign_id: int
    user_id: Optional[int] = None
    redeem_code: str
    transaction_id: Optional[int] = None
    status: EnrollmentStatus
    meta: Optional[dict[str, Any]] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class EnrollmentDetail(EnrollmentOut):
    campaign_name: Optional[str] = None
    partner_name: Optional[str] = None


class EnrollmentCreate(BaseModel):
    program_id: int
    campaign_id: int
    redeem_code: str = Field(..., min_length=3, max_length=32)
    status: EnrollmentStatus = EnrollmentStatus.PENDING
    transaction_id: Optional[int] = None
    user_id: Optional[int] = None
    meta: Optional[dict[str, Any]] = None


class EnrollmentStatusUpdate(BaseModel):
    status: EnrollmentStatus


class RevenueLogOut(BaseModel):
    id: int
    partner_id: int
    campaign_id: Optional[int] = None
    transaction_id: int
    amount: Decimal
    gross_amount: Decimal
    split_timestamp: datetime

    model_config = ConfigDict(from_attributes=True)


class RevenueLogCreate(BaseModel):
    partner_id: int
    campaign_id: Optional[int] = None
    transaction_id: int
    amount: Decimal = Field(..., ge=0)
    gross_amount: Decimal = Field(..., ge=0)


class TimelinePoint(BaseModel):
    date: date
    amount: Decimal
    count: int = 0
    gross_amount: Optional[Decimal] = None


class PartnerEarnings(BaseModel):
    partner_id: int
    partner_name: Optional[str] = None
    total_earnings: Decimal
    total_gross: Decimal
    settlements: int


class EarningsSummary(BaseModel):
    total_earnings: Decimal
    total_revenue: Decimal
    platform_revenue: Decimal
    settlements: int
    partners: list[PartnerEarnings] = []


class CampaignEarnings(BaseModel):
    campaign_id: int
    campaign_name: str
    promo_code: str
    partner_percentage: Decimal
    enrollments: int
    total_revenue: Decimal
    partner_earnings: Decimal
    conversion_rate: Decimal


class SettlementOut(BaseModel):
    transaction_id: int
    already_settled: bool
    fallback_applied: bool
    campaign_id: Optional[int] = None
    partner_share: Decimal
    gross_amount: Decimal
    enrollment: Optional[EnrollmentOut] = None
    revenue_log: RevenueLogOut
    new_balance: Optional[Decimal] = None
