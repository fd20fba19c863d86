from typing import Any, Dict, Optional

from fleet_console.services.base import ResourceService, unwrap


class DayEndService(ResourceService):
    path = "/day-end"

    async def update_status(self, day_end_id: str, status: str, notes: Optional[str] = None) -> Dict[str, Any]:
        """Approve or reject a submitted day-end report."""
        payload = {"status": status, "notes": notes}
        return unwrap(await self.api.patch(f"{self.path}/{day_end_id}/status", json=payload))
