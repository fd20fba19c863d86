from datetime import date
from typing import Any, Dict, Optional, Union

from pydantic import Field, computed_field, field_validator, model_validator

from fleet_console.domain import status as derived
from fleet_console.schemas.base import ConsoleModel, FormModel, not_blank

Ref = Union[str, Dict[str, Any], None]

MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


class MonthlyFee(ConsoleModel):
    bus_id: Ref = None
    owner_id: Ref = None
    month: Optional[str] = None
    amount: float = 0
    paid_amount: float = 0
    payment_date: Optional[str] = None
    notes: Optional[str] = None
    backend_status: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _move_backend_status(cls, data):
        if isinstance(data, dict) and "status" in data:
            data = dict(data)
            data["backendStatus"] = data.pop("status")
        return data

    @field_validator("amount", "paid_amount", mode="before")
    @classmethod
    def _none_is_zero(cls, v):
        return 0 if v is None else v

    @computed_field(alias="status")
    @property
    def status(self) -> derived.FeeStatus:
        return derived.fee_status(self.amount, self.paid_amount)

    @computed_field(alias="statusLabel")
    @property
    def status_label(self) -> str:
        return self.status.label

    @computed_field(alias="outstanding")
    @property
    def outstanding(self) -> float:
        return derived.outstanding(self.amount, self.paid_amount)

    @computed_field(alias="canDownloadBill")
    @property
    def can_download_bill(self) -> bool:
        return derived.can_download_bill(self.amount, self.paid_amount)

    @property
    def bus_number(self) -> str:
        if isinstance(self.bus_id, dict):
            return str(self.bus_id.get("busNumber") or self.bus_id.get("_id") or "")
        return str(self.bus_id or "")


class MonthlyFeeCreate(FormModel):
    bus_id: str
    owner_id: str
    month: str = Field(..., pattern=MONTH_PATTERN)
    amount: float = Field(..., gt=0, description="Fee amount, must be positive")
    paid_amount: float = Field(0, ge=0)
    status: Optional[derived.FeeStatus] = None
    payment_date: Optional[date] = None
    notes: Optional[str] = None

    @field_validator("bus_id")
    @classmethod
    def _bus_required(cls, v):
        return not_blank(v, "Bus selection is required")

    @field_validator("month")
    @classmethod
    def _month_required(cls, v):
        return not_blank(v, "Month is required")

    @model_validator(mode="after")
    def _check_amounts(self):
        if self.paid_amount > self.amount:
            raise ValueError("Paid amount cannot exceed the fee amount")
        if self.status is derived.FeeStatus.PAID and not self.paid_amount:
            raise ValueError("Paid amount is required when status is paid")
        return self


class MonthlyFeeUpdate(FormModel):
    amount: Optional[float] = Field(None, gt=0)
    paid_amount: Optional[float] = Field(None, ge=0)
    status: Optional[derived.FeeStatus] = None
    payment_date: Optional[date] = None
    notes: Optional[str] = None

    @model_validator(mode="after")
    def _check_amounts(self):
        if self.amount is not None and self.paid_amount is not None and self.paid_amount > self.amount:
            raise ValueError("Paid amount cannot exceed the fee amount")
        if self.status is derived.FeeStatus.PAID and self.paid_amount is not None and not self.paid_amount:
            raise ValueError("Paid amount is required when status is paid")
        return self


class PaymentIn(FormModel):
    paid_amount: float = Field(..., gt=0)
    payment_date: date

    @field_validator("payment_date")
    @classmethod
    def _not_in_future(cls, v):
        if v > date.today():
            raise ValueError("Payment date cannot be in the future")
        return v
