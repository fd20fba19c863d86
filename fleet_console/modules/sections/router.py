from fastapi import APIRouter, Depends, status

from fleet_console.auth.deps import STAFF_ROLES, role_required
from fleet_console.listing import entities
from fleet_console.listing.fetch import scoped_loader
from fleet_console.modules.common import ListQuery, list_query, render_page
from fleet_console.schemas.base import present
from fleet_console.schemas.section import Section, SectionCreate, SectionUpdate
from fleet_console.services.api_client import ApiClient, get_api_client
from fleet_console.services.auth import SUPER_ADMIN, ConsoleUser
from fleet_console.services.section import SectionService

router = APIRouter(tags=["sections"])

admin_only = [Depends(role_required([SUPER_ADMIN]))]


@router.get("/")
async def list_sections(
    query: ListQuery = Depends(list_query),
    user: ConsoleUser = Depends(role_required(STAFF_ROLES)),
    api: ApiClient = Depends(get_api_client),
):
    return await render_page(scoped_loader(SectionService(api)), None, query, entities.SECTIONS, Section)


@router.get("/counts")
async def section_counts(user: ConsoleUser = Depends(role_required(STAFF_ROLES)), api: ApiClient = Depends(get_api_client)):
    return await SectionService(api).counts()


@router.get("/number/{section_number}")
async def get_section_by_number(section_number: int, user: ConsoleUser = Depends(role_required(STAFF_ROLES)), api: ApiClient = Depends(get_api_client)):
    return present(Section, await SectionService(api).get_by_number(section_number))


@router.get("/{section_id}")
async def get_section(section_id: str, user: ConsoleUser = Depends(role_required(STAFF_ROLES)), api: ApiClient = Depends(get_api_client)):
    return present(Section, await SectionService(api).get_by_id(section_id))


@router.post("/", status_code=status.HTTP_201_CREATED, dependencies=admin_only)
async def create_section(payload: SectionCreate, api: ApiClient = Depends(get_api_client)):
    return present(Section, await SectionService(api).create(payload.to_backend()))


@router.put("/{section_id}", dependencies=admin_only)
async def update_section(section_id: str, payload: SectionUpdate, api: ApiClient = Depends(get_api_client)):
    return present(Section, await SectionService(api).update(section_id, payload.to_backend()))


@router.delete("/{section_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=admin_only)
async def delete_section(section_id: str, api: ApiClient = Depends(get_api_client)):
    await SectionService(api).delete(section_id)
