import enum
from sqlalchemy import Column, Integer, String, Enum, ForeignKey, Numeric, Text, Index
from partner_portal.core.database import Base
from partner_portal.models.base import TimestampMixin
from partner_portal.models.wallet import WithdrawalMethod


class WithdrawalStatus(str, enum.Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class Withdrawal(Base, TimestampMixin):
    __tablename__ = "withdrawals"

    id = Column(Integer, primary_key=True, index=True)
    partner_id = Column(Integer, ForeignKey("partners.id"), nullable=False)
    wallet_id = Column(Integer, ForeignKey("wallets.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    amount = Column(Numeric(12, 2), nullable=False)
    withdrawal_method = Column(Enum(WithdrawalMethod), nullable=False)
    account_number = Column(String(64), nullable=False)
    bank_name = Column(String(128), nullable=True)
    paybill_number = Column(String(32), nullable=True)
    reference = Column(String(64), unique=True, nullable=False, index=True)
    status = Column(Enum(WithdrawalStatus), nullable=False, default=WithdrawalStatus.PENDING)
    notes = Column(Text, nullable=True)


Index("ix_withdrawals_partner_status", Withdrawal.partner_id, Withdrawal.status)
