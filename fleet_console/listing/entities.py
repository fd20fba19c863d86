"""Per-entity field maps used by the generic filter evaluator."""
from dataclasses import dataclass, field
from typing import Tuple

from fleet_console.domain import status as derived
from fleet_console.listing.filters import FieldRef, get_path, ref_id


@dataclass(frozen=True)
class ListingConfig:
    entity: str
    bus: FieldRef = None
    route: FieldRef = None
    status: FieldRef = None
    category: FieldRef = None
    direction: FieldRef = None
    month: FieldRef = None
    date: FieldRef = None
    search: Tuple[FieldRef, ...] = field(default_factory=tuple)


def _trip_status(record):
    return derived.trip_status(record.get("endTime"))


def _fee_status(record):
    return derived.fee_status(record.get("amount"), record.get("paidAmount"))


def _bus_status(record):
    return derived.bus_status(record.get("status"), record.get("isActive"))


def _active_flag(record):
    flag = record.get("isActive")
    if flag is None:
        return None
    return "active" if flag else "inactive"


def _route_code(record):
    return record.get("code") or record.get("routeNumber")


def _route_name(record):
    return record.get("name") or record.get("routeName")


BUSES = ListingConfig(
    entity="bus",
    bus="_id",
    route="routeId",
    status=_bus_status,
    category="category",
    search=("busNumber", "busName", "registrationNumber"),
)

TRIPS = ListingConfig(
    entity="trip",
    bus="busId",
    route="routeId",
    status=_trip_status,
    direction="direction",
    date=lambda r: r.get("date") or r.get("startTime"),
    search=("tripNumber", "busId.busNumber", "routeId.routeName", "routeId.routeNumber"),
)

MONTHLY_FEES = ListingConfig(
    entity="monthly_fee",
    bus="busId",
    status=_fee_status,
    month="month",
    date="paymentDate",
    search=("busId.busNumber", "busId.busName", "ownerId.username", "month", "notes"),
)

EXPENSE_TYPES = ListingConfig(
    entity="expense_type",
    bus="busId",
    status=_active_flag,
    search=("expenseName", "description", "busId.busNumber"),
)

EXPENSE_TRANSACTIONS = ListingConfig(
    entity="expense_transaction",
    bus=lambda r: get_path(r, "expenseTypeId.busId") or r.get("busId"),
    category=lambda r: ref_id(r.get("expenseTypeId")),
    status=_active_flag,
    date="date",
    search=("notes", "expenseTypeId.expenseName", "expenseTypeId.description"),
)

ROUTES = ListingConfig(
    entity="route",
    route="_id",
    status=_active_flag,
    search=(_route_code, _route_name),
)

ROUTE_SECTIONS = ListingConfig(
    entity="route_section",
    route="routeId",
    category="category",
    status=_active_flag,
    search=("stopId.stopName", "stopId.stopCode", "routeId.routeName", "routeId.routeNumber", "category"),
)

TICKETS = ListingConfig(
    entity="ticket",
    bus="busId",
    route="routeId",
    category="paymentMethod",
    date="dateTime",
    search=("ticketId", "fromStop.stopName", "toStop.stopName"),
)

DAY_ENDS = ListingConfig(
    entity="day_end",
    bus="busId",
    status="status",
    date="date",
    search=("busId.busNumber", "conductorId.username", "notes"),
)

STOPS = ListingConfig(
    entity="stop",
    route="routeId",
    status=_active_flag,
    search=("stopName", "stopCode", "routeId.routeName", "routeId.routeNumber"),
)

SECTIONS = ListingConfig(
    entity="section",
    category="category",
    status=_active_flag,
    search=("sectionNumber", "description", "category"),
)
