from fastapi import APIRouter, Depends, status

from fleet_console.auth.deps import STAFF_ROLES, role_required
from fleet_console.listing import entities
from fleet_console.modules.common import ListQuery, list_query, render_page
from fleet_console.schemas.base import present
from fleet_console.schemas.stop import Stop, StopCreate, StopUpdate
from fleet_console.services.api_client import ApiClient, get_api_client
from fleet_console.services.auth import SUPER_ADMIN, ConsoleUser
from fleet_console.services.stop import StopService

router = APIRouter(tags=["stops"])

admin_only = [Depends(role_required([SUPER_ADMIN]))]


@router.get("/")
async def list_stops(
    query: ListQuery = Depends(list_query),
    user: ConsoleUser = Depends(role_required(STAFF_ROLES)),
    api: ApiClient = Depends(get_api_client),
):
    """Stops by name or code; ``routeId`` narrows to one route's stops."""
    svc = StopService(api)

    async def loader(_scope, params):
        if query.filters.route_id:
            return await svc.list_by_route(query.filters.route_id)
        return await svc.list(params)

    return await render_page(loader, None, query, entities.STOPS, Stop)


@router.get("/code/{stop_code}")
async def get_stop_by_code(stop_code: str, user: ConsoleUser = Depends(role_required(STAFF_ROLES)), api: ApiClient = Depends(get_api_client)):
    return present(Stop, await StopService(api).get_by_code(stop_code))


@router.get("/{stop_id}")
async def get_stop(stop_id: str, user: ConsoleUser = Depends(role_required(STAFF_ROLES)), api: ApiClient = Depends(get_api_client)):
    return present(Stop, await StopService(api).get_by_id(stop_id))


@router.post("/", status_code=status.HTTP_201_CREATED, dependencies=admin_only)
async def create_stop(payload: StopCreate, api: ApiClient = Depends(get_api_client)):
    return present(Stop, await StopService(api).create(payload.to_backend()))


@router.put("/{stop_id}", dependencies=admin_only)
async def update_stop(stop_id: str, payload: StopUpdate, api: ApiClient = Depends(get_api_client)):
    return present(Stop, await StopService(api).update(stop_id, payload.to_backend()))


@router.delete("/{stop_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=admin_only)
async def delete_stop(stop_id: str, api: ApiClient = Depends(get_api_client)):
    await StopService(api).delete(stop_id)
