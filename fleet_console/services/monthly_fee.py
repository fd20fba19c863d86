from datetime import date
from typing import Any, Dict, Optional, Union

from fleet_console.services.base import ResourceService, unwrap


def bill_filename(bus_number: str, month: str) -> str:
    return f"MonthlyFee_{bus_number}_{month}.pdf"


class MonthlyFeeService(ResourceService):
    path = "/monthly-fees"

    async def mark_as_paid(self, fee_id: str, paid_amount: float, payment_date: Optional[Union[date, str]] = None) -> Dict[str, Any]:
        payment_date = payment_date or date.today()
        if isinstance(payment_date, date):
            payment_date = payment_date.isoformat()
        payload = {"paidAmount": paid_amount, "paymentDate": payment_date}
        return unwrap(await self.api.patch(f"{self.path}/{fee_id}/mark-paid", json=payload))

    async def generate_bill(self, fee_id: str) -> bytes:
        return await self.api.get_bytes(f"{self.path}/{fee_id}/bill")
