import enum
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Numeric, Index
from partner_portal.core.database import Base
from partner_portal.models.base import TimestampMixin


class TransactionStatus(str, enum.Enum):
    PENDING = "pending"
    SUCCESS = "Success"
    FAILED = "Failed"


class Transaction(Base, TimestampMixin):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)
    student_name = Column(String(255), nullable=False)
    phone_number = Column(String(32), nullable=False)
    mpesa_code = Column(String(64), unique=True, nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    # Free-text match key against Campaign.promo_code.
    campaign_code = Column(String(64), nullable=True)
    partner_id = Column(Integer, ForeignKey("partners.id"), nullable=False)
    # Gateway status string; only "Success" is settlable.
    status = Column(String(32), nullable=False, default=TransactionStatus.PENDING.value)
    verified_at = Column(DateTime(timezone=True), nullable=True)


Index("ix_transactions_partner_status", Transaction.partner_id, Transaction.status)
Index("ix_transactions_phone_number", Transaction.phone_number)
