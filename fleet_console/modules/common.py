"""Pieces shared by the console pages: query parsing, scoping and rendering."""
import datetime as dt
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from fastapi import HTTPException, Query, status

from fleet_console.auth.deps import check_record_scope, owner_scope, record_bus_id, record_owner_id, scoped_bus_id
from fleet_console.config import settings
from fleet_console.listing.entities import ListingConfig
from fleet_console.listing.fetch import Loader, fetch_page
from fleet_console.listing.filters import FilterSet
from fleet_console.listing.pagination import parse_page_size
from fleet_console.schemas.base import present
from fleet_console.services.api_client import ApiClient
from fleet_console.services.auth import BUS_OWNER, MANAGER, ConsoleUser
from fleet_console.services.bus import BusService
from fleet_console.services.expense import ExpenseTypeService


@dataclass
class ListQuery:
    filters: FilterSet
    page: int
    limit: int


def list_query(
    bus_id: Optional[str] = Query(None, alias="busId"),
    route_id: Optional[str] = Query(None, alias="routeId"),
    status_: Optional[str] = Query(None, alias="status"),
    category: Optional[str] = None,
    direction: Optional[str] = None,
    month: Optional[str] = None,
    day: Optional[dt.date] = Query(None, alias="date"),
    start_date: Optional[dt.date] = Query(None, alias="startDate"),
    end_date: Optional[dt.date] = Query(None, alias="endDate"),
    search: Optional[str] = None,
    sort: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: Optional[str] = Query(None, description="page size; 'all' or 9999 shows everything"),
) -> ListQuery:
    try:
        page_size = parse_page_size(limit, settings.DEFAULT_PAGE_SIZE)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="limit must be a number or 'all'")
    if page_size < 1:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="limit must be at least 1")
    if day is not None:
        start_date = end_date = day
    filters = FilterSet(
        bus_id=bus_id,
        route_id=route_id,
        status=status_,
        category=category,
        direction=direction,
        month=month,
        start_date=start_date,
        end_date=end_date,
        search=search,
        sort=sort,
    )
    return ListQuery(filters=filters, page=page, limit=page_size)


def apply_scope(user: ConsoleUser, query: ListQuery) -> Optional[str]:
    """Restrict ``query`` to what ``user`` may see; returns the owner scope id."""
    query.filters.bus_id = scoped_bus_id(user, query.filters.bus_id)
    return owner_scope(user)


async def render_page(loader: Loader, scope_id: Optional[str], query: ListQuery, config: ListingConfig, model) -> Dict[str, Any]:
    result = await fetch_page(loader, scope_id, query.filters, query.page, query.limit, config)
    result.items = [present(model, record) for record in result.items]
    return result.model_dump(by_alias=True)


async def ensure_in_scope(user: ConsoleUser, record: Mapping[str, Any], api: ApiClient) -> None:
    """Check ``record`` against the caller's scope, fetching the expense type
    or bus when the backend returned them as bare ids."""
    if user.role not in (MANAGER, BUS_OWNER):
        return
    record = dict(record)
    expense_type = record.get("expenseTypeId")
    if isinstance(expense_type, str) and not record.get("busId"):
        record["expenseTypeId"] = await ExpenseTypeService(api).get_by_id(expense_type)
    if user.role == BUS_OWNER and record_owner_id(record) is None:
        bus_id = record_bus_id(record)
        if bus_id:
            bus = await BusService(api).get_by_id(bus_id)
            if record.get("busId"):
                record["busId"] = bus
            else:
                record["expenseTypeId"] = dict(record["expenseTypeId"], busId=bus)
    check_record_scope(user, record)
