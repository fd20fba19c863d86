from typing import Any, Dict, List, Optional, Union

from fleet_console.schemas.base import ConsoleModel

Ref = Union[str, Dict[str, Any], None]


class Ticket(ConsoleModel):
    ticket_id: Optional[str] = None
    route_id: Ref = None
    bus_id: Ref = None
    conductor_id: Ref = None
    date_time: Optional[str] = None
    payment_method: Optional[str] = None
    from_stop: Optional[Dict[str, Any]] = None
    to_stop: Optional[Dict[str, Any]] = None
    passengers: List[Dict[str, Any]] = []
    total_passengers: Optional[int] = None
    fare_paid: Optional[float] = None
    paid_amount: Optional[float] = None
    balance: Optional[float] = None
    trip_number: Union[int, str, None] = None
