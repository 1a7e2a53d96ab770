from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, Index, func
from partner_portal.core.database import Base


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    partner_id = Column(Integer, ForeignKey("partners.id"), nullable=True)
    action = Column(String(64), nullable=False)
    entity_type = Column(String(64), nullable=False)
    entity_id = Column(String(64), nullable=True)
    details = Column(Text, nullable=True)
    ip_address = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


Index("ix_audit_logs_user_id", AuditLog.user_id)
Index("ix_audit_logs_partner_id", AuditLog.partner_id)
Index("ix_audit_logs_action", AuditLog.action)
