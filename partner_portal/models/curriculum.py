from sqlalchemy import Column, Integer, String, ForeignKey, Table, Text
from sqlalchemy.orm import relationship
from partner_portal.core.database import Base
from partner_portal.models.base import TimestampMixin


program_subjects = Table(
    "program_subjects",
    Base.metadata,
    Column("program_id", Integer, ForeignKey("programs.id", ondelete="CASCADE"), primary_key=True),
    Column("subject_id", Integer, ForeignKey("subjects.id", ondelete="CASCADE"), primary_key=True),
)


class Curriculum(Base, TimestampMixin):
    __tablename__ = "curricula"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False)
    description = Column(Text, nullable=True)

    programs = relationship("Program", back_populates="curriculum")


class Subject(Base, TimestampMixin):
    __tablename__ = "subjects"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(128), unique=True, nullable=False)

    programs = relationship("Program", secondary=program_subjects, back_populates="subjects")
