from sqlalchemy import Column, Integer, String, Boolean
from sqlalchemy.orm import relationship
from partner_portal.core.database import Base
from partner_portal.models.base import TimestampMixin
from partner_portal.models.permission import partner_permissions


class Partner(Base, TimestampMixin):
    __tablename__ = "partners"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    phone = Column(String(32), nullable=True)
    username = Column(String(128), nullable=True)
    is_first_login = Column(Boolean, default=True, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    permissions = relationship("Permission", secondary=partner_permissions, order_by="Permission.id")
    users = relationship("User", back_populates="partner")
    campaigns = relationship("Campaign", back_populates="partner")
    wallet = relationship("Wallet", back_populates="partner", uselist=False)
    channels = relationship("Channel", back_populates="partner", cascade="all, delete-orphan")
