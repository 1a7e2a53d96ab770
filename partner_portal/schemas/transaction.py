from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TransactionOut(BaseModel):
    id: int
    student_name: str
    phone_number: str
    mpesa_code: str
    amount: Decimal
    campaign_code: Optional[str] = None
    partner_id: int
    status: str
    verified_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class TransactionCreate(BaseModel):
    student_name: str = Field(..., min_length=1, max_length=255)
    phone_number: str = Field(..., min_length=5, max_length=32)
    mpesa_code: str = Field(..., min_length=4, max_length=64)
    amount: Decimal = Field(..., gt=0)
    campaign_code: Optional[str] = Field(default=None, max_length=64)
    partner_id: int
    status: str = Field(default="pending", max_length=32)


class TransactionUpdate(BaseModel):
    status: Optional[str] = Field(default=None, max_length=32)
    mpesa_code: Optional[str] = Field(default=None, min_length=4, max_length=64)
    amount: Optional[Decimal] = Field(default=None, gt=0)
