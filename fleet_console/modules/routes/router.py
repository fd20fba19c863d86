from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from fleet_console.auth.deps import STAFF_ROLES, owner_scope, role_required
from fleet_console.listing import entities
from fleet_console.listing.fetch import scoped_loader
from fleet_console.modules.common import ListQuery, list_query, render_page
from fleet_console.schemas.base import present
from fleet_console.schemas.route import Route, RouteCreate, RouteUpdate
from fleet_console.services.api_client import ApiClient, get_api_client
from fleet_console.services.auth import SUPER_ADMIN, ConsoleUser
from fleet_console.services.route import RouteService

router = APIRouter(tags=["routes"])


@router.get("/")
async def list_routes(
    query: ListQuery = Depends(list_query),
    user: ConsoleUser = Depends(role_required(STAFF_ROLES)),
    api: ApiClient = Depends(get_api_client),
):
    """Bus owners only see routes served by their own buses."""
    return await render_page(scoped_loader(RouteService(api)), owner_scope(user), query, entities.ROUTES, Route)


@router.get("/search")
async def search_routes(
    q: Optional[str] = Query("", description="route number or name fragment"),
    user: ConsoleUser = Depends(role_required(STAFF_ROLES)),
    api: ApiClient = Depends(get_api_client),
):
    """At most ROUTE_SEARCH_LIMIT matches; an empty ``q`` lists every active route (up to 50)."""
    routes = await RouteService(api).search_by_number(q or "")
    return [present(Route, r) for r in routes]


@router.get("/{route_id}")
async def get_route(route_id: str, user: ConsoleUser = Depends(role_required(STAFF_ROLES)), api: ApiClient = Depends(get_api_client)):
    return present(Route, await RouteService(api).get_by_id(route_id))


@router.delete("/{route_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(role_required([SUPER_ADMIN]))])
async def delete_route(route_id: str, api: ApiClient = Depends(get_api_client)):
    await RouteService(api).delete(route_id)


@router.post("/", status_code=status.HTTP_201_CREATED, dependencies=[Depends(role_required([SUPER_ADMIN]))])
async def create_route(payload: RouteCreate, api: ApiClient = Depends(get_api_client)):
    return present(Route, await RouteService(api).create(payload.to_backend()))


@router.put("/{route_id}", dependencies=[Depends(role_required([SUPER_ADMIN]))])
async def update_route(route_id: str, payload: RouteUpdate, api: ApiClient = Depends(get_api_client)):
    return present(Route, await RouteService(api).update(route_id, payload.to_backend()))
