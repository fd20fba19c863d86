import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from fleet_console.auth.deps import STAFF_ROLES, role_required
from fleet_console.listing import entities
from fleet_console.listing.fetch import scoped_loader
from fleet_console.modules.common import ListQuery, apply_scope, ensure_in_scope, list_query, render_page
from fleet_console.schemas.base import present
from fleet_console.schemas.monthly_fee import MonthlyFee, MonthlyFeeCreate, MonthlyFeeUpdate, PaymentIn
from fleet_console.services.api_client import ApiClient, get_api_client
from fleet_console.services.auth import SUPER_ADMIN, ConsoleUser
from fleet_console.services.monthly_fee import MonthlyFeeService, bill_filename
from fleet_console.validation import FormError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["monthly-fees"])


@router.get("/")
async def list_monthly_fees(
    query: ListQuery = Depends(list_query),
    user: ConsoleUser = Depends(role_required(STAFF_ROLES)),
    api: ApiClient = Depends(get_api_client),
):
    scope_id = apply_scope(user, query)
    return await render_page(scoped_loader(MonthlyFeeService(api)), scope_id, query, entities.MONTHLY_FEES, MonthlyFee)


@router.get("/{fee_id}")
async def get_monthly_fee(fee_id: str, user: ConsoleUser = Depends(role_required(STAFF_ROLES)), api: ApiClient = Depends(get_api_client)):
    fee = await MonthlyFeeService(api).get_by_id(fee_id)
    await ensure_in_scope(user, fee, api)
    return present(MonthlyFee, fee)


@router.post("/", status_code=status.HTTP_201_CREATED, dependencies=[Depends(role_required([SUPER_ADMIN]))])
async def create_monthly_fee(payload: MonthlyFeeCreate, api: ApiClient = Depends(get_api_client)):
    return present(MonthlyFee, await MonthlyFeeService(api).create(payload.to_backend()))


@router.put("/{fee_id}", dependencies=[Depends(role_required([SUPER_ADMIN]))])
async def update_monthly_fee(fee_id: str, payload: MonthlyFeeUpdate, api: ApiClient = Depends(get_api_client)):
    svc = MonthlyFeeService(api)
    changes = payload.to_backend()
    if ("amount" in changes) != ("paidAmount" in changes):
        # one side of the paidAmount <= amount check lives on the stored fee
        current = MonthlyFee.model_validate(await svc.get_by_id(fee_id))
        amount = changes.get("amount", current.amount)
        paid = changes.get("paidAmount", current.paid_amount)
        if paid > amount:
            raise FormError({"paidAmount": "Paid amount cannot exceed the fee amount"})
    return present(MonthlyFee, await svc.update(fee_id, changes))


@router.delete("/{fee_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(role_required([SUPER_ADMIN]))])
async def delete_monthly_fee(fee_id: str, api: ApiClient = Depends(get_api_client)):
    await MonthlyFeeService(api).delete(fee_id)


@router.patch("/{fee_id}/mark-paid", dependencies=[Depends(role_required([SUPER_ADMIN]))])
async def mark_paid(fee_id: str, payload: PaymentIn, api: ApiClient = Depends(get_api_client)):
    svc = MonthlyFeeService(api)
    fee = MonthlyFee.model_validate(await svc.get_by_id(fee_id))
    if payload.paid_amount > fee.outstanding:
        raise FormError({"paidAmount": f"Payment exceeds the outstanding balance of {fee.outstanding:.2f}"})
    updated = await svc.mark_as_paid(fee_id, payload.paid_amount, payload.payment_date)
    logger.info("Monthly fee %s paid %.2f", fee_id, payload.paid_amount)
    return present(MonthlyFee, updated)


@router.get("/{fee_id}/bill")
async def download_bill(fee_id: str, user: ConsoleUser = Depends(role_required(STAFF_ROLES)), api: ApiClient = Depends(get_api_client)):
    svc = MonthlyFeeService(api)
    record = await svc.get_by_id(fee_id)
    await ensure_in_scope(user, record, api)
    fee = MonthlyFee.model_validate(record)
    if not fee.can_download_bill:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Bill is available once the fee is fully paid")
    content = await svc.generate_bill(fee_id)
    filename = bill_filename(fee.bus_number, fee.month or "")
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
