from typing import Any, Dict, List, Mapping, Optional

from fleet_console.services.base import ResourceService, unwrap


class BusService(ResourceService):
    path = "/buses"

    async def list_by_owner(self, owner_id: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self.api.get(f"{self.path}/owner/{owner_id}", params=params)

    async def buses_for_owner(self, owner_id: str) -> List[Dict[str, Any]]:
        return unwrap(await self.list_by_owner(owner_id)) or []

    async def assigned_bus(self) -> Dict[str, Any]:
        """The bus a manager/conductor is assigned to."""
        return unwrap(await self.api.get("/auth/manager/bus"))
