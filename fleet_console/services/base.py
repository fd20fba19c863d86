from typing import Any, Dict, Mapping, Optional

from fleet_console.services.api_client import ApiClient


def unwrap(payload: Any) -> Any:
    """Single-object responses come back as ``{"data": {...}}``."""
    if isinstance(payload, dict) and "data" in payload:
        return payload["data"]
    return payload


class ResourceService:
    """CRUD over one backend collection.

    List calls return the raw payload (paginated envelope or bare list) so the
    listing layer can normalize it; single-object calls return the unwrapped
    record.
    """

    path: str = ""
    owner_param: str = "ownerId"

    def __init__(self, api: ApiClient):
        self.api = api

    async def list(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self.api.get(self.path, params=params)

    async def list_by_owner(self, owner_id: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        merged: Dict[str, Any] = dict(params or {})
        merged[self.owner_param] = owner_id
        return await self.api.get(self.path, params=merged)

    async def get_by_id(self, item_id: str) -> Dict[str, Any]:
        return unwrap(await self.api.get(f"{self.path}/{item_id}"))

    async def create(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        return unwrap(await self.api.post(self.path, json=dict(payload)))

    async def update(self, item_id: str, payload: Mapping[str, Any]) -> Dict[str, Any]:
        return unwrap(await self.api.put(f"{self.path}/{item_id}", json=dict(payload)))

    async def delete(self, item_id: str) -> None:
        await self.api.delete(f"{self.path}/{item_id}")
