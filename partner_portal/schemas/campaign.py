from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from partner_portal.models.campaign import CampaignStatus


class RevenueShare(BaseModel):
    partner_percentage: Decimal = Field(..., ge=0, le=100)
    sqooli_percentage: Decimal = Field(..., ge=0, le=100)


class BundledOffers(BaseModel):
    min_lessons: int = Field(..., ge=1)
    total_price: Decimal = Field(..., ge=0)


class DiscountRule(BaseModel):
    price_per_lesson: Decimal = Field(..., ge=0)
    min_amount: Optional[Decimal] = Field(default=None, ge=0)


class CampaignCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    description: Optional[str] = None
    program_id: int
    # Defaults to the caller's partner.
    partner_id: Optional[int] = None
    promo_code: Optional[str] = Field(default=None, min_length=3, max_length=64)
    target_signups: int = Field(..., ge=1)
    bundled_offers: Optional[BundledOffers] = None
    discount_rule: Optional[DiscountRule] = None
    revenue_share: Optional[RevenueShare] = None
    whatsapp_number: Optional[str] = Field(default=None, max_length=32)


class CampaignStatusUpdate(BaseModel):
    status: CampaignStatus


class CampaignOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    program_id: int
    partner_id: int
    user_id: Optional[int] = None
    promo_code: str
    target_signups: int
    daily_target: int
    bundled_offers: BundledOffers
    discount_rule: DiscountRule
    revenue_projection: Decimal
    revenue_share: RevenueShare
    whatsapp_number: str
    duration_start: date
    duration_end: date
    status: CampaignStatus
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_campaign(cls, campaign) -> "CampaignOut":
        return cls(
            id=campaign.id,
            name=campaign.name,
            description=campaign.description,
            program_id=campaign.program_id,
            partner_id=campaign.partner_id,
            user_id=campaign.user_id,
            promo_code=campaign.promo_code,
            target_signups=campaign.target_signups,
            daily_target=campaign.daily_target,
            bundled_offers=BundledOffers(
                min_lessons=campaign.bundle_min_lessons,
                total_price=campaign.bundle_total_price,
            ),
            discount_rule=DiscountRule(
                price_per_lesson=campaign.price_per_lesson,
                min_amount=campaign.discount_min_amount,
            ),
            revenue_projection=campaign.revenue_projection,
            revenue_share=RevenueShare(
                partner_percentage=campaign.partner_percentage,
                sqooli_percentage=campaign.sqooli_percentage,
            ),
            whatsapp_number=campaign.whatsapp_number,
            duration_start=campaign.duration_start,
            duration_end=campaign.duration_end,
            status=campaign.status,
            created_at=campaign.created_at,
        )


class PromoCodeOut(BaseModel):
    id: int
    campaign_id: int
    code: str
    label: Optional[str] = None
    description: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class PromoCodeCreate(BaseModel):
    campaign_id: int
    code: str = Field(..., min_length=3, max_length=64)
    label: Optional[str] = Field(default=None, max_length=128)
    description: Optional[str] = None


class PromoCodeUpdate(BaseModel):
    label: Optional[str] = Field(default=None, max_length=128)
    description: Optional[str] = None
