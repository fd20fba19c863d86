from typing import Any, Dict, Mapping, Optional

from fleet_console.services.base import ResourceService, unwrap


class ExpenseTypeService(ResourceService):
    path = "/expense-types"

    async def list_by_bus(self, bus_id: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self.api.get(f"{self.path}/bus/{bus_id}", params=params)


class ExpenseTransactionService(ResourceService):
    path = "/expense-transactions"

    async def list_by_type(self, expense_type_id: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self.api.get(f"{self.path}/type/{expense_type_id}", params=params)

    async def list_by_date_range(self, start_date: str, end_date: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        merged = dict(params or {})
        merged.update(startDate=start_date, endDate=end_date)
        return await self.api.get(f"{self.path}/date-range", params=merged)

    async def summary(self, params: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        return unwrap(await self.api.get(f"{self.path}/summary", params=params))
