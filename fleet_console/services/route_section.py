from typing import Any, Mapping, Optional

from fleet_console.services.base import ResourceService


class RouteSectionService(ResourceService):
    path = "/route-sections"

    async def list_by_route(self, route_id: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        merged = dict(params or {})
        merged["routeId"] = route_id
        return await self.api.get(self.path, params=merged)
