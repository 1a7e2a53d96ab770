from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from partner_portal.core.database import Base
from partner_portal.models.base import TimestampMixin
from partner_portal.models.permission import user_permissions


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    partner_id = Column(Integer, ForeignKey("partners.id"), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    phone = Column(String(32), nullable=True)
    # Role name. Informational; authorization reads ``permissions`` only.
    role = Column(String(64), nullable=False)
    extension = Column(String(64), unique=True, nullable=False, index=True)
    is_active = Column(Boolean, default=True, nullable=False)
    is_account_activated = Column(Boolean, default=True, nullable=False)
    is_first_login = Column(Boolean, default=True, nullable=False)
    last_login = Column(DateTime(timezone=True), nullable=True)

    partner = relationship("Partner", back_populates="users")
    permissions = relationship("Permission", secondary=user_permissions, order_by="Permission.id")
    sessions = relationship("UserSession", back_populates="user", cascade="all, delete-orphan")


Index("ix_users_partner_id", User.partner_id)
Index("ix_users_role", User.role)
