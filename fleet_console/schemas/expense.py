import datetime as dt
from typing import Any, Dict, Optional, Union

from pydantic import Field, field_validator

from fleet_console.schemas.base import ConsoleModel, FormModel, not_blank

Ref = Union[str, Dict[str, Any], None]


class ExpenseType(ConsoleModel):
    bus_id: Ref = None
    expense_name: Optional[str] = None
    description: Optional[str] = None
    is_active: bool = True


class ExpenseTransaction(ConsoleModel):
    expense_type_id: Ref = None
    amount: float = 0
    date: Optional[str] = None
    uploaded_bill: Optional[str] = None
    notes: Optional[str] = None
    is_active: bool = True


class ExpenseTypeCreate(FormModel):
    bus_id: str
    expense_name: str
    description: str
    is_active: bool = True

    @field_validator("expense_name")
    @classmethod
    def _name_required(cls, v):
        return not_blank(v, "Expense name is required")

    @field_validator("description")
    @classmethod
    def _description_required(cls, v):
        return not_blank(v, "Description is required")

    @field_validator("bus_id")
    @classmethod
    def _bus_required(cls, v):
        return not_blank(v, "Please select a bus")


class ExpenseTypeUpdate(FormModel):
    bus_id: Optional[str] = None
    expense_name: Optional[str] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("expense_name", "description", "bus_id")
    @classmethod
    def _not_blank(cls, v, info):
        return not_blank(v, f"{info.field_name} cannot be blank")


def _not_in_future(v: Optional[dt.date]) -> Optional[dt.date]:
    if v is not None and v > dt.date.today():
        raise ValueError("Date cannot be in the future")
    return v


class ExpenseTransactionCreate(FormModel):
    expense_type_id: str
    amount: float = Field(..., gt=0)
    date: dt.date
    uploaded_bill: Optional[str] = None
    notes: Optional[str] = None
    is_active: bool = True

    @field_validator("expense_type_id")
    @classmethod
    def _type_required(cls, v):
        return not_blank(v, "Please select an expense type")

    @field_validator("date")
    @classmethod
    def _date_not_in_future(cls, v):
        return _not_in_future(v)

    def to_backend(self) -> Dict[str, Any]:
        out = super().to_backend()
        # backend stores full timestamps
        out["date"] = dt.datetime.combine(self.date, dt.time.min).isoformat()
        return out


class ExpenseTransactionUpdate(FormModel):
    expense_type_id: Optional[str] = None
    amount: Optional[float] = Field(None, gt=0)
    date: Optional[dt.date] = None
    uploaded_bill: Optional[str] = None
    notes: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("date")
    @classmethod
    def _date_not_in_future(cls, v):
        return _not_in_future(v)
