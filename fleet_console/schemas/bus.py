from typing import Any, Dict, Optional, Union

from pydantic import Field, field_validator, model_validator

from fleet_console.domain.status import bus_status
from fleet_console.schemas.base import ConsoleModel, FormModel, not_blank

Ref = Union[str, Dict[str, Any], None]


class Bus(ConsoleModel):
    bus_number: Optional[str] = None
    bus_name: Optional[str] = None
    category: Optional[str] = None
    seat_capacity: Optional[int] = None
    owner_id: Ref = None
    conductor_id: Ref = None
    route_id: Ref = None
    status: Optional[str] = None
    is_active: Optional[bool] = None

    @model_validator(mode="after")
    def _derive_status(self):
        self.status = bus_status(self.status, self.is_active)
        return self


class BusCreate(FormModel):
    bus_number: str
    bus_name: str
    category: str
    seat_capacity: int = Field(..., gt=0)
    owner_id: str
    conductor_id: Optional[str] = None
    route_id: Optional[str] = None
    is_active: bool = True

    @field_validator("bus_number", "bus_name", "category", "owner_id")
    @classmethod
    def _required(cls, v, info):
        return not_blank(v, f"{info.field_name} is required")


class BusUpdate(FormModel):
    bus_number: Optional[str] = None
    bus_name: Optional[str] = None
    category: Optional[str] = None
    seat_capacity: Optional[int] = Field(None, gt=0)
    owner_id: Optional[str] = None
    conductor_id: Optional[str] = None
    route_id: Optional[str] = None
    is_active: Optional[bool] = None
