import enum
from sqlalchemy import Column, Integer, String, Date, Enum, ForeignKey, Numeric, Text, Index
from sqlalchemy.orm import relationship
from partner_portal.core.database import Base
from partner_portal.models.base import TimestampMixin


class CampaignStatus(str, enum.Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    EXPIRED = "expired"


class Campaign(Base, TimestampMixin):
    __tablename__ = "campaigns"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    program_id = Column(Integer, ForeignKey("programs.id"), nullable=False)
    partner_id = Column(Integer, ForeignKey("partners.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    promo_code = Column(String(64), unique=True, nullable=False, index=True)
    target_signups = Column(Integer, nullable=False)
    daily_target = Column(Integer, nullable=False)
    # bundled_offers
    bundle_min_lessons = Column(Integer, nullable=False)
    bundle_total_price = Column(Numeric(12, 2), nullable=False)
    # discount_rule
    price_per_lesson = Column(Numeric(12, 2), nullable=False)
    discount_min_amount = Column(Numeric(12, 2), nullable=True)
    revenue_projection = Column(Numeric(14, 2), nullable=False)
    # revenue_share
    partner_percentage = Column(Numeric(5, 2), nullable=False)
    sqooli_percentage = Column(Numeric(5, 2), nullable=False)
    whatsapp_number = Column(String(32), nullable=False)
    duration_start = Column(Date, nullable=False)
    duration_end = Column(Date, nullable=False)
    status = Column(Enum(CampaignStatus), nullable=False, default=CampaignStatus.DRAFT)

    partner = relationship("Partner", back_populates="campaigns")
    program = relationship("Program")
    promo_codes = relationship("PromoCode", back_populates="campaign", cascade="all, delete-orphan")


Index("ix_campaigns_partner_id", Campaign.partner_id)
Index("ix_campaigns_program_id", Campaign.program_id)
