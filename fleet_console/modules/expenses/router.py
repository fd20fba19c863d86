from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from fleet_console.auth.deps import STAFF_ROLES, role_required
from fleet_console.listing import entities
from fleet_console.listing.fetch import scoped_loader
from fleet_console.modules.common import ListQuery, apply_scope, ensure_in_scope, list_query, render_page
from fleet_console.schemas.base import present
from fleet_console.schemas.expense import (
    ExpenseTransaction,
    ExpenseTransactionCreate,
    ExpenseTransactionUpdate,
    ExpenseType,
    ExpenseTypeCreate,
    ExpenseTypeUpdate,
)
from fleet_console.services.api_client import ApiClient, get_api_client
from fleet_console.services.auth import ConsoleUser
from fleet_console.services.expense import ExpenseTransactionService, ExpenseTypeService

router = APIRouter(tags=["expenses"])

staff = role_required(STAFF_ROLES)


# Expense types
@router.get("/types")
async def list_expense_types(query: ListQuery = Depends(list_query), user: ConsoleUser = Depends(staff), api: ApiClient = Depends(get_api_client)):
    scope_id = apply_scope(user, query)
    svc = ExpenseTypeService(api)
    if query.filters.bus_id and not scope_id:
        bus_id = query.filters.bus_id

        async def loader(_scope, params):
            return await svc.list_by_bus(bus_id, params)
    else:
        loader = scoped_loader(svc)
    return await render_page(loader, scope_id, query, entities.EXPENSE_TYPES, ExpenseType)


@router.get("/types/{type_id}")
async def get_expense_type(type_id: str, user: ConsoleUser = Depends(staff), api: ApiClient = Depends(get_api_client)):
    expense_type = await ExpenseTypeService(api).get_by_id(type_id)
    await ensure_in_scope(user, expense_type, api)
    return present(ExpenseType, expense_type)


@router.post("/types", status_code=status.HTTP_201_CREATED)
async def create_expense_type(payload: ExpenseTypeCreate, user: ConsoleUser = Depends(staff), api: ApiClient = Depends(get_api_client)):
    await ensure_in_scope(user, {"busId": payload.bus_id}, api)
    return present(ExpenseType, await ExpenseTypeService(api).create(payload.to_backend()))


@router.put("/types/{type_id}")
async def update_expense_type(type_id: str, payload: ExpenseTypeUpdate, user: ConsoleUser = Depends(staff), api: ApiClient = Depends(get_api_client)):
    svc = ExpenseTypeService(api)
    await ensure_in_scope(user, await svc.get_by_id(type_id), api)
    if payload.bus_id:
        await ensure_in_scope(user, {"busId": payload.bus_id}, api)
    return present(ExpenseType, await svc.update(type_id, payload.to_backend()))


@router.delete("/types/{type_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_expense_type(type_id: str, user: ConsoleUser = Depends(staff), api: ApiClient = Depends(get_api_client)):
    svc = ExpenseTypeService(api)
    await ensure_in_scope(user, await svc.get_by_id(type_id), api)
    await svc.delete(type_id)


# Expense transactions
@router.get("/transactions")
async def list_expense_transactions(
    query: ListQuery = Depends(list_query),
    expense_type_id: Optional[str] = Query(None, alias="expenseTypeId"),
    user: ConsoleUser = Depends(staff),
    api: ApiClient = Depends(get_api_client),
):
    """``category`` and ``expenseTypeId`` both select one expense type, which
    must itself be in the caller's scope."""
    scope_id = apply_scope(user, query)
    if expense_type_id:
        query.filters.category = expense_type_id
    f = query.filters
    if f.category:
        await ensure_in_scope(user, {"expenseTypeId": f.category}, api)
    svc = ExpenseTransactionService(api)

    async def loader(scope, params):
        if f.category:
            return await svc.list_by_type(f.category, params)
        if scope:
            return await svc.list_by_owner(scope, params)
        if f.start_date and f.end_date and not f.bus_id:
            return await svc.list_by_date_range(f.start_date.isoformat(), f.end_date.isoformat(), params)
        return await svc.list(params)

    return await render_page(loader, scope_id, query, entities.EXPENSE_TRANSACTIONS, ExpenseTransaction)


@router.get("/transactions/{transaction_id}")
async def get_expense_transaction(transaction_id: str, user: ConsoleUser = Depends(staff), api: ApiClient = Depends(get_api_client)):
    transaction = await ExpenseTransactionService(api).get_by_id(transaction_id)
    await ensure_in_scope(user, transaction, api)
    return present(ExpenseTransaction, transaction)


@router.post("/transactions", status_code=status.HTTP_201_CREATED)
async def create_expense_transaction(payload: ExpenseTransactionCreate, user: ConsoleUser = Depends(staff), api: ApiClient = Depends(get_api_client)):
    await ensure_in_scope(user, {"expenseTypeId": payload.expense_type_id}, api)
    return present(ExpenseTransaction, await ExpenseTransactionService(api).create(payload.to_backend()))


@router.put("/transactions/{transaction_id}")
async def update_expense_transaction(
    transaction_id: str, payload: ExpenseTransactionUpdate, user: ConsoleUser = Depends(staff), api: ApiClient = Depends(get_api_client)
):
    svc = ExpenseTransactionService(api)
    await ensure_in_scope(user, await svc.get_by_id(transaction_id), api)
    if payload.expense_type_id:
        await ensure_in_scope(user, {"expenseTypeId": payload.expense_type_id}, api)
    return present(ExpenseTransaction, await svc.update(transaction_id, payload.to_backend()))


@router.delete("/transactions/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_expense_transaction(transaction_id: str, user: ConsoleUser = Depends(staff), api: ApiClient = Depends(get_api_client)):
    svc = ExpenseTransactionService(api)
    await ensure_in_scope(user, await svc.get_by_id(transaction_id), api)
    await svc.delete(transaction_id)


@router.get("/summary")
async def expense_summary(query: ListQuery = Depends(list_query), user: ConsoleUser = Depends(staff), api: ApiClient = Depends(get_api_client)):
    scope_id = apply_scope(user, query)
    f = query.filters
    if f.category:
        await ensure_in_scope(user, {"expenseTypeId": f.category}, api)
    params = {
        "busId": f.bus_id,
        "ownerId": scope_id,
        "expenseTypeId": f.category,
        "startDate": f.start_date.isoformat() if f.start_date else None,
        "endDate": f.end_date.isoformat() if f.end_date else None,
    }
    return await ExpenseTransactionService(api).summary(params)
