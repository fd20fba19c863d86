"""Statuses the console derives from record fields instead of trusting a stored flag.

Every page that shows a trip or a monthly fee goes through these helpers so the
mapping lives in one place.
"""
from enum import Enum
from typing import Any, Optional, Union

Number = Union[int, float]


class TripStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"

    @property
    def label(self) -> str:
        return _TRIP_LABELS[self]


_TRIP_LABELS = {
    TripStatus.ACTIVE: "Active",
    TripStatus.COMPLETED: "Completed",
}


class FeeStatus(str, Enum):
    PAID = "paid"
    PARTIAL = "partial"
    UNPAID = "unpaid"

    @property
    def label(self) -> str:
        return _FEE_LABELS[self]


_FEE_LABELS = {
    FeeStatus.PAID: "Paid",
    FeeStatus.PARTIAL: "Partially Paid",
    FeeStatus.UNPAID: "Unpaid",
}


def trip_status(end_time: Optional[Any]) -> TripStatus:
    """A trip without an end time is still running."""
    if end_time is None or end_time == "":
        return TripStatus.ACTIVE
    return TripStatus.COMPLETED


def fee_status(amount: Optional[Number], paid_amount: Optional[Number]) -> FeeStatus:
    amount = amount or 0
    paid_amount = paid_amount or 0
    # a fee with no amount set has nothing settled yet
    if amount <= 0 and paid_amount <= 0:
        return FeeStatus.UNPAID
    if paid_amount >= amount:
        return FeeStatus.PAID
    if paid_amount > 0:
        return FeeStatus.PARTIAL
    return FeeStatus.UNPAID


def outstanding(amount: Optional[Number], paid_amount: Optional[Number]) -> Number:
    return max((amount or 0) - (paid_amount or 0), 0)


def can_download_bill(amount: Optional[Number], paid_amount: Optional[Number]) -> bool:
    return (amount or 0) > 0 and fee_status(amount, paid_amount) is FeeStatus.PAID


def bus_status(status: Optional[str], is_active: Optional[bool]) -> str:
    """Buses report either a status string or an isActive flag."""
    if status:
        return status
    if is_active is None:
        return "active"
    return "active" if is_active else "inactive"
