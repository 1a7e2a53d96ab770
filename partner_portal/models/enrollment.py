import enum
from sqlalchemy import Column, Integer, String, Enum, ForeignKey, JSON, Index
from sqlalchemy.orm import relationship
from partner_portal.core.database import Base
from partner_portal.models.base import TimestampMixin


class EnrollmentStatus(str, enum.Enum):
    PENDING = "pending"
    REDEEMED = "redeemed"
    EXPIRED = "expired"


class ProgramEnrollment(Base, TimestampMixin):
    __tablename__ = "program_enrollments"

    id = Column(Integer, primary_key=True, index=True)
    program_id = Column(Integer, ForeignKey("programs.id"), nullable=False)
    campaign_id = Column(Integer, ForeignKey("campaigns.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    redeem_code = Column(String(32), nullable=False, index=True)
    # Unique: one enrollment per settled transaction.
    transaction_id = Column(Integer, ForeignKey("transactions.id"), unique=True, nullable=True)
    status = Column(Enum(EnrollmentStatus), nullable=False, default=EnrollmentStatus.PENDING)
    meta = Column(JSON, nullable=True)

    campaign = relationship("Campaign")
    program = relationship("Program")


Index("ix_program_enrollments_campaign_id", ProgramEnrollment.campaign_id)
Index("ix_program_enrollments_program_id", ProgramEnrollment.program_id)
