from sqlalchemy import Column, Integer, Boolean, ForeignKey, Numeric, Index
from partner_portal.core.database import Base
from partner_portal.models.base import TimestampMixin


class WithdrawalLimit(Base, TimestampMixin):
    __tablename__ = "withdrawal_limits"

    id = Column(Integer, primary_key=True, index=True)
    # NULL means the global limit.
    partner_id = Column(Integer, ForeignKey("partners.id"), nullable=True)
    min_withdrawal_amount = Column(Numeric(12, 2), nullable=False)
    max_withdrawal_amount = Column(Numeric(12, 2), nullable=False)
    daily_limit = Column(Numeric(14, 2), nullable=False)
    monthly_limit = Column(Numeric(14, 2), nullable=False)
    processing_days = Column(Integer, default=3, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)


Index("ix_withdrawal_limits_partner_active", WithdrawalLimit.partner_id, WithdrawalLimit.is_active)
