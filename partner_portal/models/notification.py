from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Text, Index, func
from partner_portal.core.database import Base


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    partner_id = Column(Integer, ForeignKey("partners.id"), nullable=False)
    type = Column(String(32), nullable=False, default="info")
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


Index("ix_notifications_partner_read", Notification.partner_id, Notification.is_read)
