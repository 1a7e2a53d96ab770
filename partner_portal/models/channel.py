from sqlalchemy import Column, Integer, String, ForeignKey, JSON, Text, Index
from sqlalchemy.orm import relationship
from partner_portal.core.database import Base
from partner_portal.models.base import TimestampMixin


class Channel(Base, TimestampMixin):
    __tablename__ = "channels"

    id = Column(Integer, primary_key=True, index=True)
    partner_id = Column(Integer, ForeignKey("partners.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False)
    code = Column(String(64), unique=True, nullable=False, index=True)
    # Sub-channel labels, e.g. individual branches or agents.
    subchannels = Column(JSON, nullable=False, default=list)
    description = Column(Text, nullable=True)

    partner = relationship("Partner", back_populates="channels")


Index("ix_channels_partner_id", Channel.partner_id)
