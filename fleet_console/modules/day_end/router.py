import logging

from fastapi import APIRouter, Depends

from fleet_console.auth.deps import STAFF_ROLES, role_required
from fleet_console.listing import entities
from fleet_console.listing.fetch import scoped_loader
from fleet_console.modules.common import ListQuery, apply_scope, ensure_in_scope, list_query, render_page
from fleet_console.schemas.base import present
from fleet_console.schemas.day_end import DayEnd, DayEndDecision
from fleet_console.services.api_client import ApiClient, get_api_client
from fleet_console.services.auth import ConsoleUser
from fleet_console.services.day_end import DayEndService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["day-end"])


@router.get("/")
async def list_day_ends(
    query: ListQuery = Depends(list_query),
    user: ConsoleUser = Depends(role_required(STAFF_ROLES)),
    api: ApiClient = Depends(get_api_client),
):
    scope_id = apply_scope(user, query)
    return await render_page(scoped_loader(DayEndService(api)), scope_id, query, entities.DAY_ENDS, DayEnd)


@router.get("/{day_end_id}")
async def get_day_end(day_end_id: str, user: ConsoleUser = Depends(role_required(STAFF_ROLES)), api: ApiClient = Depends(get_api_client)):
    day_end = await DayEndService(api).get_by_id(day_end_id)
    await ensure_in_scope(user, day_end, api)
    return present(DayEnd, day_end)


@router.patch("/{day_end_id}/status")
async def decide_day_end(
    day_end_id: str,
    payload: DayEndDecision,
    user: ConsoleUser = Depends(role_required(STAFF_ROLES)),
    api: ApiClient = Depends(get_api_client),
):
    svc = DayEndService(api)
    await ensure_in_scope(user, await svc.get_by_id(day_end_id), api)
    updated = await svc.update_status(day_end_id, payload.status, payload.notes)
    logger.info("Day-end %s %s by %s", day_end_id, payload.status, user.id)
    return present(DayEnd, updated)
