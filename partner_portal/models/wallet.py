import enum
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum, ForeignKey, JSON, Numeric
from sqlalchemy.orm import relationship
from partner_portal.core.database import Base
from partner_portal.models.base import TimestampMixin


class WithdrawalMethod(str, enum.Enum):
    MPESA = "mpesa"
    BANK = "bank"
    PAYBILL = "paybill"


class Wallet(Base, TimestampMixin):
    __tablename__ = "wallets"

    id = Column(Integer, primary_key=True, index=True)
    partner_id = Column(Integer, ForeignKey("partners.id"), unique=True, nullable=False, index=True)
    account_number = Column(String(64), nullable=False)
    balance = Column(Numeric(14, 2), default=0, nullable=False)
    pending_balance = Column(Numeric(14, 2), default=0, nullable=False)
    lifetime_earnings = Column(Numeric(14, 2), default=0, nullable=False)
    withdrawal_method = Column(Enum(WithdrawalMethod), nullable=False, default=WithdrawalMethod.MPESA)
    bank_name = Column(String(128), nullable=True)
    branch = Column(String(128), nullable=True)
    paybill_number = Column(String(32), nullable=True)
    # [{label, account_number, provider}]
    beneficiaries = Column(JSON, nullable=False, default=list)
    pin_hash = Column(String(255), nullable=False)
    pin_set_at = Column(DateTime(timezone=True), nullable=True)
    is_setup_complete = Column(Boolean, default=False, nullable=False)

    partner = relationship("Partner", back_populates="wallet")
