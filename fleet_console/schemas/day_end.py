from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import field_validator, model_validator

from fleet_console.schemas.base import ConsoleModel, FormModel

Ref = Union[str, Dict[str, Any], None]


class DayEnd(ConsoleModel):
    bus_id: Ref = None
    date: Optional[str] = None
    trip_details: List[Dict[str, Any]] = []
    expenses: List[Dict[str, Any]] = []
    total_revenue: float = 0
    total_expenses: float = 0
    profit: Optional[float] = None
    conductor_id: Ref = None
    notes: Optional[str] = None
    status: Optional[str] = None


class DayEndDecision(FormModel):
    status: Literal["approved", "rejected"]
    notes: Optional[str] = None

    @field_validator("notes")
    @classmethod
    def _strip(cls, v):
        return v.strip() if v is not None else v

    @model_validator(mode="after")
    def _reason_for_rejection(self):
        if self.status == "rejected" and not self.notes:
            raise ValueError("A reason is required to reject a day-end report")
        return self
