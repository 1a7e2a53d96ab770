from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from partner_portal.models.wallet import WithdrawalMethod
from partner_portal.models.withdrawal import WithdrawalStatus

PIN_PATTERN = r"^\d{4,6}$"


class Beneficiary(BaseModel):
    label: str = Field(..., min_length=1, max_length=64)
    account_number: str = Field(..., min_length=3, max_length=64)
    provider: Optional[str] = Field(default=None, max_length=64)


class WalletOut(BaseModel):
    id: int
    partner_id: int
    account_number: str
    balance: Decimal
    pending_balance: Decimal
    lifetime_earnings: Decimal
    withdrawal_method: WithdrawalMethod
    bank_name: Optional[str] = None
    branch: Optional[str] = None
    paybill_number: Optional[str] = None
    beneficiaries: list[Beneficiary] = []
    pin_set_at: Optional[datetime] = None
    is_setup_complete: bool

    model_config = ConfigDict(from_attributes=True)


class WalletCreate(BaseModel):
    # Defaults to the caller's partner.
    partner_id: Optional[int] = None
    account_number: str = Field(..., min_length=3, max_length=64)
    withdrawal_method: WithdrawalMethod = WithdrawalMethod.MPESA
    bank_name: Optional[str] = Field(default=None, max_length=128)
    branch: Optional[str] = Field(default=None, max_length=128)
    paybill_number: Optional[str] = Field(default=None, max_length=32)
    pin: str = Field(..., pattern=PIN_PATTERN)
    beneficiaries: list[Beneficiary] = []


class WalletUpdate(BaseModel):
    account_number: Optional[str] = Field(default=None, min_length=3, max_length=64)
    withdrawal_method: Optional[WithdrawalMethod] = None
    bank_name: Optional[str] = Field(default=None, max_length=128)
    branch: Optional[str] = Field(default=None, max_length=128)
    paybill_number: Optional[str] = Field(default=None, max_length=32)
    pin: Optional[str] = Field(default=None, pattern=PIN_PATTERN)
    beneficiaries: Optional[list[Beneficiary]] = None


class PinVerifyRequest(BaseModel):
    pin: str


class PinVerifyResult(BaseModel):
    success: bool
    error: Optional[str] = None


class BalanceCredit(BaseModel):
    partner_id: int
    amount_to_add: Decimal


class BalanceUpdateResult(BaseModel):
    success: bool
    new_balance: Decimal


class WithdrawalLimitOut(BaseModel):
    id: int
    partner_id: Optional[int] = None
    min_withdrawal_amount: Decimal
    max_withdrawal_amount: Decimal
    daily_limit: Decimal
    monthly_limit: Decimal
    processing_days: int
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class WithdrawalLimitCreate(BaseModel):
    partner_id: Optional[int] = None
    min_withdrawal_amount: Decimal = Field(..., ge=0)
    max_withdrawal_amount: Decimal = Field(..., gt=0)
    daily_limit: Decimal = Field(..., gt=0)
    monthly_limit: Decimal = Field(..., gt=0)
    processing_days: int = Field(default=3, ge=0, le=60)
    is_active: bool = True


class WithdrawalLimitUpdate(BaseModel):
    min_withdrawal_amount: Optional[Decimal] = Field(default=None, ge=0)
    max_withdrawal_amount: Optional[Decimal] = Field(default=None, gt=0)
    daily_limit: Optional[Decimal] = Field(default=None, gt=0)
    monthly_limit: Optional[Decimal] = Field(default=None, gt=0)
    processing_days: Optional[int] = Field(default=None, ge=0, le=60)
    is_active: Optional[bool] = None


class AvailabilityResult(BaseModel):
    can_withdraw: bool
    reason: Optional[str] = None
    error_type: Optional[str] = None
    balance: Optional[Decimal] = None
    limit: Optional[WithdrawalLimitOut] = None
    used_today: Decimal = Decimal("0")
    used_this_month: Decimal = Decimal("0")
    remaining_daily: Optional[Decimal] = None
    remaining_monthly: Optional[Decimal] = None


class WithdrawalRequest(BaseModel):
    amount: Decimal = Field(..., gt=0)
    pin: str
    notes: Optional[str] = Field(default=None, max_length=500)


class WithdrawalOut(BaseModel):
    id: int
    partner_id: int
    wallet_id: int
    user_id: Optional[int] = None
    amount: Decimal
    withdrawal_method: WithdrawalMethod
    account_number: str
    bank_name: Optional[str] = None
    paybill_number: Optional[str] = None
    reference: str
    status: WithdrawalStatus
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
