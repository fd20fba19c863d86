from typing import Any, Dict, List, Mapping, Optional

from fleet_console.services.base import ResourceService, unwrap


class StopService(ResourceService):
    path = "/stops"

    async def list(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        # the backend filters stops on isActive rather than a status string
        merged: Dict[str, Any] = dict(params or {})
        state = merged.pop("status", None)
        if state in ("active", "inactive"):
            merged["isActive"] = state == "active"
        return await self.api.get(self.path, params=merged)

    async def list_by_route(self, route_id: str) -> List[Dict[str, Any]]:
        return unwrap(await self.api.get(f"{self.path}/route/{route_id}")) or []

    async def get_by_code(self, stop_code: str) -> Dict[str, Any]:
        return unwrap(await self.api.get(f"{self.path}/code/{stop_code}"))
