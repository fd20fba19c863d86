"""Routes, with the backend's field names mapped to the console's.

The backend stores ``routeName``/``routeNumber``/``startPoint``/``endPoint``;
everything above this module sees ``name``/``code``/``startLocation``/``endLocation``.
"""
from typing import Any, Dict, List, Mapping, Optional

from fleet_console.config import settings
from fleet_console.listing.filters import ref_id
from fleet_console.services.base import ResourceService, unwrap
from fleet_console.services.bus import BusService

# console name -> backend name
FIELD_MAP = {
    "name": "routeName",
    "code": "routeNumber",
    "startLocation": "startPoint",
    "endLocation": "endPoint",
}
PASSTHROUGH = ("_id", "distance", "estimatedDuration", "isActive", "description", "createdAt", "updatedAt")


def from_backend(route: Mapping[str, Any]) -> Dict[str, Any]:
    out = {key: route.get(backend) for key, backend in FIELD_MAP.items()}
    for key in PASSTHROUGH:
        out[key] = route.get(key)
    return out


def to_backend(route: Mapping[str, Any]) -> Dict[str, Any]:
    """Only fields present in ``route`` are sent, so partial updates stay partial."""
    out = {}
    for key, value in route.items():
        if value is None:
            continue
        out[FIELD_MAP.get(key, key)] = value
    return out


def _mapped(payload: Any) -> Any:
    if isinstance(payload, list):
        return [from_backend(r) for r in payload]
    if isinstance(payload, dict) and isinstance(payload.get("data"), list):
        out = dict(payload)
        out["data"] = [from_backend(r) for r in payload["data"]]
        return out
    return payload


def search_routes(routes: List[Dict[str, Any]], term: str, limit: int) -> List[Dict[str, Any]]:
    """Case-insensitive substring match on route code or name, at most ``limit`` hits.

    A blank term is not a search: every route passed in is returned, unlimited.
    """
    needle = (term or "").strip().lower()
    if not needle:
        return routes
    hits = [
        r for r in routes
        if needle in (r.get("code") or "").lower() or needle in (r.get("name") or "").lower()
    ]
    return hits[:limit]


class RouteService(ResourceService):
    path = "/routes"

    async def list(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        return _mapped(await self.api.get(self.path, params=params))

    async def get_by_id(self, item_id: str) -> Dict[str, Any]:
        return from_backend(await super().get_by_id(item_id))

    async def create(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        return from_backend(await super().create(to_backend(payload)))

    async def update(self, item_id: str, payload: Mapping[str, Any]) -> Dict[str, Any]:
        return from_backend(await super().update(item_id, to_backend(payload)))

    async def active_routes(self, limit: int) -> List[Dict[str, Any]]:
        payload = await self.api.get(self.path, params={"limit": limit, "isActive": True})
        return [from_backend(r) for r in (unwrap(payload) or [])]

    async def search_by_number(self, term: str = "") -> List[Dict[str, Any]]:
        routes = await self.active_routes(limit=50)
        return search_routes(routes, term, settings.ROUTE_SEARCH_LIMIT)

    async def list_by_owner(self, owner_id: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        """Routes served by any of the owner's buses."""
        buses = await BusService(self.api).buses_for_owner(owner_id)
        route_ids = {ref_id(b.get("routeId")) for b in buses} - {None}
        if not route_ids:
            return []
        routes = await self.active_routes(limit=100)
        return [r for r in routes if r.get("_id") in route_ids]
