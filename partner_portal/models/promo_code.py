from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, Text, Index
from sqlalchemy.orm import relationship
from partner_portal.core.database import Base
from partner_portal.models.base import TimestampMixin


class PromoCode(Base, TimestampMixin):
    __tablename__ = "promo_codes"

    id = Column(Integer, primary_key=True, index=True)
    campaign_id = Column(Integer, ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False)
    # Always stored upper-cased.
    code = Column(String(64), unique=True, nullable=False, index=True)
    label = Column(String(128), nullable=True)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    campaign = relationship("Campaign", back_populates="promo_codes")


Index("ix_promo_codes_campaign_id", PromoCode.campaign_id)
