from fastapi import APIRouter, Depends, status

from fleet_console.auth.deps import STAFF_ROLES, role_required
from fleet_console.listing import entities
from fleet_console.listing.fetch import scoped_loader
from fleet_console.modules.common import ListQuery, apply_scope, ensure_in_scope, list_query, render_page
from fleet_console.schemas.base import present
from fleet_console.schemas.ticket import Ticket
from fleet_console.services.api_client import ApiClient, get_api_client
from fleet_console.services.auth import SUPER_ADMIN, ConsoleUser
from fleet_console.services.ticket import TicketService
from fleet_console.services.trip import TripService

router = APIRouter(tags=["tickets"])


@router.get("/")
async def list_tickets(
    query: ListQuery = Depends(list_query),
    user: ConsoleUser = Depends(role_required(STAFF_ROLES)),
    api: ApiClient = Depends(get_api_client),
):
    scope_id = apply_scope(user, query)
    return await render_page(scoped_loader(TicketService(api)), scope_id, query, entities.TICKETS, Ticket)


@router.get("/next-id")
async def next_ticket_id(user: ConsoleUser = Depends(role_required(STAFF_ROLES)), api: ApiClient = Depends(get_api_client)):
    return {"nextTicketId": await TicketService(api).next_ticket_id()}


@router.get("/trip/{trip_id}")
async def tickets_for_trip(trip_id: str, user: ConsoleUser = Depends(role_required(STAFF_ROLES)), api: ApiClient = Depends(get_api_client)):
    await ensure_in_scope(user, await TripService(api).get_by_id(trip_id), api)
    return [present(Ticket, t) for t in await TicketService(api).list_for_trip(trip_id)]


@router.get("/{ticket_id}")
async def get_ticket(ticket_id: str, user: ConsoleUser = Depends(role_required(STAFF_ROLES)), api: ApiClient = Depends(get_api_client)):
    ticket = await TicketService(api).get_by_id(ticket_id)
    await ensure_in_scope(user, ticket, api)
    return present(Ticket, ticket)


@router.delete("/{ticket_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(role_required([SUPER_ADMIN]))])
async def delete_ticket(ticket_id: str, api: ApiClient = Depends(get_api_client)):
    await TicketService(api).delete(ticket_id)
