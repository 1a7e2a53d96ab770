from sqlalchemy import Column, Integer, String, Boolean, Date, ForeignKey, JSON, Numeric, Text
from sqlalchemy.orm import relationship
from partner_portal.core.database import Base
from partner_portal.models.base import TimestampMixin
from partner_portal.models.curriculum import program_subjects


class Program(Base, TimestampMixin):
    __tablename__ = "programs"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    curriculum_id = Column(Integer, ForeignKey("curricula.id", ondelete="SET NULL"), nullable=True, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    # Price of a single lesson.
    pricing = Column(Numeric(12, 2), nullable=False)
    # {"monday": [{"subject": "Mathematics", "time": "08:00"}], ...}
    timetable = Column(JSON, nullable=False, default=dict)
    is_active = Column(Boolean, default=True, nullable=False)

    curriculum = relationship("Curriculum", back_populates="programs")
    subjects = relationship("Subject", secondary=program_subjects, back_populates="programs", order_by="Subject.name")
