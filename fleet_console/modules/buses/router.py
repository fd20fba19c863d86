from fastapi import APIRouter, Depends, status

from fleet_console.auth.deps import STAFF_ROLES, role_required
from fleet_console.listing import entities
from fleet_console.listing.fetch import scoped_loader
from fleet_console.modules.common import ListQuery, ensure_in_scope, list_query, render_page
from fleet_console.schemas.base import present
from fleet_console.schemas.bus import Bus, BusCreate, BusUpdate
from fleet_console.services.api_client import ApiClient, get_api_client
from fleet_console.services.auth import BUS_OWNER, MANAGER, SUPER_ADMIN, ConsoleUser
from fleet_console.services.bus import BusService

router = APIRouter(tags=["buses"])


@router.get("/")
async def list_buses(
    query: ListQuery = Depends(list_query),
    user: ConsoleUser = Depends(role_required([SUPER_ADMIN, BUS_OWNER])),
    api: ApiClient = Depends(get_api_client),
):
    scope_id = user.id if user.role == BUS_OWNER else None
    return await render_page(scoped_loader(BusService(api)), scope_id, query, entities.BUSES, Bus)


@router.get("/assigned")
async def assigned_bus(user: ConsoleUser = Depends(role_required([MANAGER])), api: ApiClient = Depends(get_api_client)):
    return present(Bus, await BusService(api).assigned_bus())


@router.get("/{bus_id}")
async def get_bus(bus_id: str, user: ConsoleUser = Depends(role_required(STAFF_ROLES)), api: ApiClient = Depends(get_api_client)):
    bus = await BusService(api).get_by_id(bus_id)
    # a bus is its own bus record for scoping
    await ensure_in_scope(user, dict(bus, busId=bus_id), api)
    return present(Bus, bus)


@router.post("/", status_code=status.HTTP_201_CREATED, dependencies=[Depends(role_required([SUPER_ADMIN]))])
async def create_bus(payload: BusCreate, api: ApiClient = Depends(get_api_client)):
    return present(Bus, await BusService(api).create(payload.to_backend()))


@router.put("/{bus_id}", dependencies=[Depends(role_required([SUPER_ADMIN]))])
async def update_bus(bus_id: str, payload: BusUpdate, api: ApiClient = Depends(get_api_client)):
    return present(Bus, await BusService(api).update(bus_id, payload.to_backend()))


@router.delete("/{bus_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(role_required([SUPER_ADMIN]))])
async def delete_bus(bus_id: str, api: ApiClient = Depends(get_api_client)):
    await BusService(api).delete(bus_id)
