from fastapi import APIRouter, Depends, status

from fleet_console.auth.deps import STAFF_ROLES, role_required
from fleet_console.listing import entities
from fleet_console.modules.common import ListQuery, list_query, render_page
from fleet_console.schemas.base import present
from fleet_console.schemas.route import RouteSection, RouteSectionCreate, RouteSectionUpdate
from fleet_console.services.api_client import ApiClient, get_api_client
from fleet_console.services.auth import SUPER_ADMIN, ConsoleUser
from fleet_console.services.route_section import RouteSectionService

router = APIRouter(tags=["route-sections"])

admin_only = [Depends(role_required([SUPER_ADMIN]))]


@router.get("/")
async def list_route_sections(
    query: ListQuery = Depends(list_query),
    user: ConsoleUser = Depends(role_required(STAFF_ROLES)),
    api: ApiClient = Depends(get_api_client),
):
    svc = RouteSectionService(api)

    async def loader(_scope, params):
        if query.filters.route_id:
            return await svc.list_by_route(query.filters.route_id, params)
        return await svc.list(params)

    return await render_page(loader, None, query, entities.ROUTE_SECTIONS, RouteSection)


@router.get("/{section_id}")
async def get_route_section(section_id: str, user: ConsoleUser = Depends(role_required(STAFF_ROLES)), api: ApiClient = Depends(get_api_client)):
    return present(RouteSection, await RouteSectionService(api).get_by_id(section_id))


@router.post("/", status_code=status.HTTP_201_CREATED, dependencies=admin_only)
async def create_route_section(payload: RouteSectionCreate, api: ApiClient = Depends(get_api_client)):
    return present(RouteSection, await RouteSectionService(api).create(payload.to_backend()))


@router.put("/{section_id}", dependencies=admin_only)
async def update_route_section(section_id: str, payload: RouteSectionUpdate, api: ApiClient = Depends(get_api_client)):
    return present(RouteSection, await RouteSectionService(api).update(section_id, payload.to_backend()))


@router.delete("/{section_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=admin_only)
async def delete_route_section(section_id: str, api: ApiClient = Depends(get_api_client)):
    await RouteSectionService(api).delete(section_id)
