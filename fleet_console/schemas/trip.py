from typing import Any, Dict, Optional, Union

from pydantic import computed_field, model_validator

from fleet_console.domain.status import TripStatus, trip_status
from fleet_console.schemas.base import ConsoleModel

Ref = Union[str, Dict[str, Any], None]


class Trip(ConsoleModel):
    trip_number: Union[int, str, None] = None
    bus_id: Ref = None
    route_id: Ref = None
    direction: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    passenger_count: Optional[int] = None
    total_fare: Optional[float] = None
    cash_in_hand: Optional[float] = None
    date: Optional[str] = None
    # whatever status string the backend stored; display status is derived
    backend_status: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _move_backend_status(cls, data):
        if isinstance(data, dict) and "status" in data:
            data = dict(data)
            data["backendStatus"] = data.pop("status")
        return data

    @computed_field(alias="status")
    @property
    def status(self) -> TripStatus:
        return trip_status(self.end_time)

    @computed_field(alias="statusLabel")
    @property
    def status_label(self) -> str:
        return self.status.label
