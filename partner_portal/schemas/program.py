from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from partner_portal.schemas.curriculum import SubjectOut


class TimetableSlot(BaseModel):
    subject: str = Field(..., min_length=1, max_length=128)
    time: str = Field(..., pattern=r"^([01]\d|2[0-3]):[0-5]\d$")


class ProgramOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    curriculum_id: Optional[int] = None
    start_date: date
    end_date: date
    pricing: Decimal
    subjects: list[SubjectOut] = []
    timetable: dict[str, list[TimetableSlot]] = {}
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ProgramCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    description: Optional[str] = None
    curriculum_id: Optional[int] = None
    start_date: date
    end_date: date
    pricing: Decimal = Field(..., gt=0)
    subject_ids: list[int] = []
    # Day name -> slots.
    timetable: dict[str, list[TimetableSlot]] = {}
    is_active: bool = True

    @model_validator(mode="after")
    def check_window(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class ProgramUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=255)
    description: Optional[str] = None
    curriculum_id: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    pricing: Optional[Decimal] = Field(default=None, gt=0)
    subject_ids: Optional[list[int]] = None
    timetable: Optional[dict[str, list[TimetableSlot]]] = None
    is_active: Optional[bool] = None
