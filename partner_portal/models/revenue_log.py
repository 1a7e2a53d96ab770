from sqlalchemy import Column, Integer, DateTime, ForeignKey, Numeric, Index
from partner_portal.core.database import Base


class PartnerRevenueLog(Base):
    """Append-only ledger of settled splits. Rows are never updated."""

    __tablename__ = "partner_revenue_logs"

    id = Column(Integer, primary_key=True, index=True)
    partner_id = Column(Integer, ForeignKey("partners.id"), nullable=False)
    # NULL when the 20% fallback applied.
    campaign_id = Column(Integer, ForeignKey("campaigns.id"), nullable=True)
    transaction_id = Column(Integer, ForeignKey("transactions.id"), unique=True, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    gross_amount = Column(Numeric(12, 2), nullable=False)
    split_timestamp = Column(DateTime(timezone=True), nullable=False)


Index("ix_partner_revenue_logs_partner_id", PartnerRevenueLog.partner_id)
Index("ix_partner_revenue_logs_campaign_id", PartnerRevenueLog.campaign_id)
