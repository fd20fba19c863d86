from typing import Any, Dict, List

from fleet_console.services.base import ResourceService, unwrap


class TicketService(ResourceService):
    path = "/tickets"

    async def list_for_trip(self, trip_id: str) -> List[Dict[str, Any]]:
        return unwrap(await self.api.get(f"{self.path}/trip/{trip_id}")) or []

    async def next_ticket_id(self) -> str:
        data = unwrap(await self.api.get(f"{self.path}/next-id"))
        return data["nextTicketId"]
