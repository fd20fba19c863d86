from typing import Any, Dict

from fleet_console.services.base import ResourceService, unwrap


class TripService(ResourceService):
    path = "/trips"

    async def start(self, trip_id: str) -> Dict[str, Any]:
        return unwrap(await self.api.patch(f"{self.path}/{trip_id}/start"))

    async def complete(self, trip_id: str) -> Dict[str, Any]:
        return unwrap(await self.api.patch(f"{self.path}/{trip_id}/complete"))

    async def cancel(self, trip_id: str) -> Dict[str, Any]:
        return unwrap(await self.api.patch(f"{self.path}/{trip_id}/cancel"))
