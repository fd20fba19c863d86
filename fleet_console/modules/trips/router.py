from fastapi import APIRouter, Depends, status

from fleet_console.auth.deps import STAFF_ROLES, role_required
from fleet_console.listing import entities
from fleet_console.listing.fetch import scoped_loader
from fleet_console.modules.common import ListQuery, apply_scope, ensure_in_scope, list_query, render_page
from fleet_console.schemas.base import present
from fleet_console.schemas.trip import Trip
from fleet_console.services.api_client import ApiClient, get_api_client
from fleet_console.services.auth import SUPER_ADMIN, ConsoleUser
from fleet_console.services.trip import TripService

router = APIRouter(tags=["trips"])


@router.get("/")
async def list_trips(
    query: ListQuery = Depends(list_query),
    user: ConsoleUser = Depends(role_required(STAFF_ROLES)),
    api: ApiClient = Depends(get_api_client),
):
    """Trips with derived Active/Completed status; ``status`` filters on that derived value."""
    scope_id = apply_scope(user, query)
    return await render_page(scoped_loader(TripService(api)), scope_id, query, entities.TRIPS, Trip)


@router.get("/{trip_id}")
async def get_trip(trip_id: str, user: ConsoleUser = Depends(role_required(STAFF_ROLES)), api: ApiClient = Depends(get_api_client)):
    trip = await TripService(api).get_by_id(trip_id)
    await ensure_in_scope(user, trip, api)
    return present(Trip, trip)


async def _scoped_trip_service(trip_id: str, user: ConsoleUser, api: ApiClient) -> TripService:
    svc = TripService(api)
    await ensure_in_scope(user, await svc.get_by_id(trip_id), api)
    return svc


@router.patch("/{trip_id}/start")
async def start_trip(trip_id: str, user: ConsoleUser = Depends(role_required(STAFF_ROLES)), api: ApiClient = Depends(get_api_client)):
    svc = await _scoped_trip_service(trip_id, user, api)
    return present(Trip, await svc.start(trip_id))


@router.patch("/{trip_id}/complete")
async def complete_trip(trip_id: str, user: ConsoleUser = Depends(role_required(STAFF_ROLES)), api: ApiClient = Depends(get_api_client)):
    svc = await _scoped_trip_service(trip_id, user, api)
    return present(Trip, await svc.complete(trip_id))


@router.patch("/{trip_id}/cancel")
async def cancel_trip(trip_id: str, user: ConsoleUser = Depends(role_required(STAFF_ROLES)), api: ApiClient = Depends(get_api_client)):
    svc = await _scoped_trip_service(trip_id, user, api)
    return present(Trip, await svc.cancel(trip_id))


@router.delete("/{trip_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(role_required([SUPER_ADMIN]))])
async def delete_trip(trip_id: str, api: ApiClient = Depends(get_api_client)):
    await TripService(api).delete(trip_id)
