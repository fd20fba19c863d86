"""
End-to-end console flow: the FastAPI app in-process (httpx.ASGITransport) in
front of a fake fleet backend (httpx.MockTransport).

Covers role scoping of list pages, paginated envelopes, client-side
validation that never reaches the backend, session expiry, upstream failures
and the monthly-fee bill download.
"""
import asyncio
import json
from datetime import date

import httpx
from fastapi import Request
from jose import jwt

from fleet_console.config import settings
from fleet_console.main import app
from fleet_console.services.api_client import ApiClient, bearer_token, get_api_client

PAID_FEE = {"_id": "f1", "busId": {"_id": "b1", "busNumber": "NB-1234"}, "ownerId": "o1", "month": "2024-05", "amount": 5000, "paidAmount": 5000}
PARTIAL_FEE = {"_id": "f2", "busId": {"_id": "b1", "busNumber": "NB-1234"}, "month": "2024-06", "amount": 5000, "paidAmount": 3000}


def token_for(user_id, role, assigned_buses=None):
    claims = {"id": user_id, "role": role, "username": user_id}
    if assigned_buses is not None:
        claims["assignedBuses"] = assigned_buses
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


ADMIN = token_for("a1", "admin")
OWNER = token_for("o1", "owner")
MANAGER = token_for("m1", "manager", ["b1", "b2"])
PASSENGER = token_for("u1", "user")


class FakeBackend:
    """Canned responses keyed by (method, path); records every request."""

    def __init__(self, routes):
        self.routes = routes
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path[len("/api"):]
        reply = self.routes.get((request.method, path))
        if reply is None:
            return httpx.Response(404, json={"message": f"No route {request.method} {path}"})
        if callable(reply):
            return reply(request)
        return reply

    def last(self, path):
        return [r for r in self.requests if r.url.path == "/api" + path][-1]


def call(backend, method, url, token=None, **kwargs):
    async def override(request: Request):
        async with httpx.AsyncClient(base_url="http://backend.test/api", transport=httpx.MockTransport(backend)) as http:
            yield ApiClient(http, token=bearer_token(request))

    async def _run():
        app.dependency_overrides[get_api_client] = override
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        try:
            async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://console.test") as client:
                return await client.request(method, url, headers=headers, **kwargs)
        finally:
            app.dependency_overrides.clear()

    return asyncio.run(_run())


def trips_envelope(request):
    return httpx.Response(200, json={
        "data": [
            {"_id": "t1", "tripNumber": 1, "busId": "b1", "startTime": "2024-05-01T06:00:00Z", "endTime": None, "status": "in-progress"},
            {"_id": "t2", "tripNumber": 2, "busId": "b1", "startTime": "2024-05-01T09:00:00Z", "endTime": "2024-05-01T11:00:00Z"},
        ],
        "total": 12,
        "currentPage": 2,
        "totalPages": 2,
    })


def test_admin_lists_trips_with_derived_status():
    backend = FakeBackend({("GET", "/trips"): trips_envelope})
    resp = call(backend, "GET", "/trips/?page=2&limit=10&status=active", token=ADMIN)
    assert resp.status_code == 200
    body = resp.json()
    assert (body["total"], body["currentPage"], body["totalPages"]) == (12, 2, 2)
    assert [t["status"] for t in body["data"]] == ["active", "completed"]
    assert body["data"][0]["statusLabel"] == "Active"
    assert body["data"][0]["backendStatus"] == "in-progress"
    assert dict(backend.last("/trips").url.params) == {"status": "active", "page": "2", "limit": "10"}


def test_show_all_page_size_is_forwarded():
    backend = FakeBackend({("GET", "/trips"): trips_envelope})
    call(backend, "GET", "/trips/?limit=all", token=ADMIN)
    assert backend.last("/trips").url.params["limit"] == "9999"


def test_bad_page_size_is_rejected():
    backend = FakeBackend({})
    resp = call(backend, "GET", "/trips/?limit=lots", token=ADMIN)
    assert resp.status_code == 422
    assert backend.requests == []


def test_owner_lists_are_scoped_to_owner():
    backend = FakeBackend({("GET", "/trips"): trips_envelope})
    resp = call(backend, "GET", "/trips/", token=OWNER)
    assert resp.status_code == 200
    assert backend.last("/trips").url.params["ownerId"] == "o1"


def test_manager_defaults_to_first_assigned_bus():
    backend = FakeBackend({("GET", "/trips"): trips_envelope})
    resp = call(backend, "GET", "/trips/", token=MANAGER)
    assert resp.status_code == 200
    params = backend.last("/trips").url.params
    assert params["busId"] == "b1"
    assert "ownerId" not in params


def test_manager_cannot_read_other_buses():
    backend = FakeBackend({("GET", "/trips"): trips_envelope})
    resp = call(backend, "GET", "/trips/?busId=b9", token=MANAGER)
    assert resp.status_code == 403
    assert backend.requests == []


def test_passengers_and_anonymous_callers_are_refused():
    backend = FakeBackend({("GET", "/trips"): trips_envelope})
    assert call(backend, "GET", "/trips/", token=PASSENGER).status_code == 403
    assert call(backend, "GET", "/trips/").status_code == 401
    assert call(backend, "GET", "/trips/", token="not-a-jwt").status_code == 401
    assert backend.requests == []


def test_bus_owner_bare_list_is_paginated_locally():
    buses = [{"_id": f"b{i}", "busNumber": f"NB-{i:04d}", "isActive": True} for i in range(1, 24)]
    backend = FakeBackend({("GET", "/buses/owner/o1"): httpx.Response(200, json=buses)})
    resp = call(backend, "GET", "/buses/?page=3", token=OWNER)
    assert resp.status_code == 200
    body = resp.json()
    assert [b["busNumber"] for b in body["data"]] == ["NB-0021", "NB-0022", "NB-0023"]
    assert (body["total"], body["currentPage"], body["totalPages"]) == (23, 3, 3)


def test_invalid_fee_form_never_reaches_backend():
    backend = FakeBackend({})
    resp = call(backend, "POST", "/monthly-fees/", token=ADMIN, json={
        "busId": "b1", "ownerId": "o1", "month": "2024-05", "amount": 1000, "paidAmount": 2000,
    })
    assert resp.status_code == 422
    assert resp.json() == {"message": "Validation failed", "errors": {"form": "Paid amount cannot exceed the fee amount"}}
    assert backend.requests == []


def test_payment_over_outstanding_is_rejected():
    backend = FakeBackend({("GET", "/monthly-fees/f2"): httpx.Response(200, json={"data": PARTIAL_FEE})})
    resp = call(backend, "PATCH", "/monthly-fees/f2/mark-paid", token=ADMIN, json={
        "paidAmount": 2500, "paymentDate": date.today().isoformat(),
    })
    assert resp.status_code == 422
    assert resp.json()["errors"] == {"paidAmount": "Payment exceeds the outstanding balance of 2000.00"}
    assert [r.method for r in backend.requests] == ["GET"]


def test_payment_settles_fee():
    settled = dict(PARTIAL_FEE, paidAmount=5000, status="paid")
    backend = FakeBackend({
        ("GET", "/monthly-fees/f2"): httpx.Response(200, json={"data": PARTIAL_FEE}),
        ("PATCH", "/monthly-fees/f2/mark-paid"): httpx.Response(200, json={"data": settled}),
    })
    resp = call(backend, "PATCH", "/monthly-fees/f2/mark-paid", token=ADMIN, json={
        "paidAmount": 2000, "paymentDate": date.today().isoformat(),
    })
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "paid"
    assert body["outstanding"] == 0
    assert body["canDownloadBill"] is True


def test_bill_download_for_paid_fee():
    backend = FakeBackend({
        ("GET", "/monthly-fees/f1"): httpx.Response(200, json={"data": PAID_FEE}),
        ("GET", "/monthly-fees/f1/bill"): httpx.Response(200, content=b"%PDF-1.4 bill", headers={"Content-Type": "application/pdf"}),
    })
    resp = call(backend, "GET", "/monthly-fees/f1/bill", token=OWNER)
    assert resp.status_code == 200
    assert resp.content == b"%PDF-1.4 bill"
    assert resp.headers["content-type"] == "application/pdf"
    assert 'filename="MonthlyFee_NB-1234_2024-05.pdf"' in resp.headers["content-disposition"]


def test_bill_needs_fully_paid_fee():
    backend = FakeBackend({("GET", "/monthly-fees/f2"): httpx.Response(200, json={"data": PARTIAL_FEE})})
    resp = call(backend, "GET", "/monthly-fees/f2/bill", token=ADMIN)
    assert resp.status_code == 409


def test_expired_session_asks_for_login():
    backend = FakeBackend({
        ("GET", "/trips"): httpx.Response(401, json={"message": "jwt expired"}),
        ("POST", "/auth/refresh-token"): httpx.Response(401, json={"message": "refresh token expired"}),
    })
    resp = call(backend, "GET", "/trips/", token=ADMIN)
    assert resp.status_code == 401
    body = resp.json()
    assert body["redirect"] == "/login"
    assert body["redirectDelayMs"] == settings.LOGIN_REDIRECT_DELAY_MS


def test_upstream_failure_is_retryable_bad_gateway():
    backend = FakeBackend({("GET", "/trips"): httpx.Response(500, json={"message": "Database unavailable"})})
    resp = call(backend, "GET", "/trips/", token=ADMIN)
    assert resp.status_code == 502
    assert resp.json() == {"message": "Database unavailable", "retryable": True}


def test_upstream_not_found_keeps_status():
    backend = FakeBackend({})
    resp = call(backend, "GET", "/trips/nope", token=ADMIN)
    assert resp.status_code == 404
    assert resp.json()["retryable"] is True


def test_route_search_maps_fields():
    routes = [
        {"_id": "r1", "routeNumber": "RT001", "routeName": "Colombo - Kandy", "isActive": True},
        {"_id": "r2", "routeNumber": "EX100", "routeName": "Airport Express", "isActive": True},
    ]
    backend = FakeBackend({("GET", "/routes"): httpx.Response(200, json={"data": routes})})
    resp = call(backend, "GET", "/routes/search?q=rt0", token=ADMIN)
    assert resp.status_code == 200
    assert [r["code"] for r in resp.json()] == ["RT001"]


def test_health_and_metrics():
    backend = FakeBackend({})
    assert call(backend, "GET", "/health").json() == {"status": "ok"}
    resp = call(backend, "GET", "/metrics")
    assert resp.status_code == 200
    assert b"fleet_console_upstream_latency_seconds" in resp.content


def test_expense_transactions_by_type_are_filtered_locally():
    txns = [
        {"_id": "x1", "expenseTypeId": {"_id": "et1", "expenseName": "Fuel"}, "amount": 100, "date": "2024-02-01T00:00:00Z"},
        {"_id": "x2", "expenseTypeId": "et2", "amount": 50, "date": "2024-02-02T00:00:00Z"},
    ]
    backend = FakeBackend({("GET", "/expense-transactions/type/et1"): httpx.Response(200, json={"data": txns})})
    resp = call(backend, "GET", "/expenses/transactions?expenseTypeId=et1", token=ADMIN)
    assert resp.status_code == 200
    body = resp.json()
    assert [t["_id"] for t in body["data"]] == ["x1"]
    assert body["total"] == 1


def test_expense_transaction_is_sent_with_datetime():
    created = {"_id": "x9", "expenseTypeId": "et1", "amount": 75, "date": "2024-02-01T00:00:00.000Z"}
    backend = FakeBackend({("POST", "/expense-transactions"): httpx.Response(201, json={"data": created})})
    resp = call(backend, "POST", "/expenses/transactions", token=ADMIN, json={
        "expenseTypeId": "et1", "amount": 75, "date": "2024-02-01",
    })
    assert resp.status_code == 201
    sent = json.loads(backend.last("/expense-transactions").content)
    assert sent["date"] == "2024-02-01T00:00:00"
    assert sent["expenseTypeId"] == "et1"


OTHER_FEE = {"_id": "f9", "busId": {"_id": "b9", "busNumber": "NB-9999"}, "ownerId": "o2", "month": "2024-05", "amount": 5000, "paidAmount": 5000}


def test_manager_cannot_read_fee_of_unassigned_bus():
    backend = FakeBackend({
        ("GET", "/monthly-fees/f9"): httpx.Response(200, json={"data": OTHER_FEE}),
        ("GET", "/monthly-fees/f1"): httpx.Response(200, json={"data": PAID_FEE}),
    })
    assert call(backend, "GET", "/monthly-fees/f9", token=MANAGER).status_code == 403
    resp = call(backend, "GET", "/monthly-fees/f1", token=MANAGER)
    assert resp.status_code == 200
    assert resp.json()["_id"] == "f1"


def test_owner_cannot_download_another_owners_bill():
    backend = FakeBackend({
        ("GET", "/monthly-fees/f9"): httpx.Response(200, json={"data": OTHER_FEE}),
        ("GET", "/monthly-fees/f9/bill"): httpx.Response(200, content=b"%PDF-1.4 not yours"),
    })
    resp = call(backend, "GET", "/monthly-fees/f9/bill", token=OWNER)
    assert resp.status_code == 403
    assert [r.url.path for r in backend.requests] == ["/api/monthly-fees/f9"]


def test_manager_cannot_list_transactions_of_foreign_expense_type():
    backend = FakeBackend({
        ("GET", "/expense-types/et9"): httpx.Response(200, json={"data": {"_id": "et9", "busId": "b9", "expenseName": "Fuel"}}),
        ("GET", "/expense-transactions/type/et9"): httpx.Response(200, json={
            "data": [{"_id": "x9", "expenseTypeId": "et9", "amount": 10}], "total": 1, "currentPage": 1, "totalPages": 1,
        }),
    })
    resp = call(backend, "GET", "/expenses/transactions?expenseTypeId=et9", token=MANAGER)
    assert resp.status_code == 403
    assert [r.url.path for r in backend.requests] == ["/api/expense-types/et9"]


def test_manager_cannot_record_expense_on_foreign_bus():
    backend = FakeBackend({
        ("GET", "/expense-types/et9"): httpx.Response(200, json={"data": {"_id": "et9", "busId": {"_id": "b9"}}}),
    })
    resp = call(backend, "POST", "/expenses/transactions", token=MANAGER, json={
        "expenseTypeId": "et9", "amount": 75, "date": "2024-02-01",
    })
    assert resp.status_code == 403
    assert [r.method for r in backend.requests] == ["GET"]


def test_owner_trip_scope_resolves_bare_bus_reference():
    trip = {"_id": "t5", "busId": "b5", "startTime": "2024-05-01T06:00:00Z"}
    backend = FakeBackend({
        ("GET", "/trips/t5"): httpx.Response(200, json={"data": trip}),
        ("GET", "/buses/b5"): httpx.Response(200, json={"data": {"_id": "b5", "ownerId": {"_id": "o2"}}}),
    })
    assert call(backend, "GET", "/trips/t5", token=OWNER).status_code == 403
    resp = call(backend, "GET", "/trips/t5", token=token_for("o2", "owner"))
    assert resp.status_code == 200
    assert resp.json()["status"] == "active"


def test_manager_cannot_complete_trip_of_unassigned_bus():
    backend = FakeBackend({
        ("GET", "/trips/t9"): httpx.Response(200, json={"data": {"_id": "t9", "busId": {"_id": "b9"}}}),
        ("PATCH", "/trips/t9/complete"): httpx.Response(200, json={"data": {"_id": "t9"}}),
    })
    resp = call(backend, "PATCH", "/trips/t9/complete", token=MANAGER)
    assert resp.status_code == 403
    assert [r.method for r in backend.requests] == ["GET"]


def test_single_records_of_other_buses_are_refused():
    backend = FakeBackend({
        ("GET", "/tickets/k9"): httpx.Response(200, json={"data": {"_id": "k9", "busId": "b9"}}),
        ("GET", "/day-end/d9"): httpx.Response(200, json={"data": {"_id": "d9", "busId": "b9"}}),
        ("GET", "/buses/b9"): httpx.Response(200, json={"data": {"_id": "b9", "ownerId": "o2"}}),
    })
    assert call(backend, "GET", "/tickets/k9", token=MANAGER).status_code == 403
    assert call(backend, "GET", "/day-end/d9", token=MANAGER).status_code == 403
    assert call(backend, "GET", "/buses/b9", token=OWNER).status_code == 403
    assert call(backend, "GET", "/buses/b9", token=ADMIN).status_code == 200


def test_manager_approves_day_end_of_assigned_bus():
    backend = FakeBackend({
        ("GET", "/day-end/d1"): httpx.Response(200, json={"data": {"_id": "d1", "busId": "b1", "status": "pending"}}),
        ("PATCH", "/day-end/d1/status"): httpx.Response(200, json={"data": {"_id": "d1", "busId": "b1", "status": "approved"}}),
    })
    resp = call(backend, "PATCH", "/day-end/d1/status", token=MANAGER, json={"status": "approved", "notes": "Cash matches"})
    assert resp.status_code == 200
    assert resp.json()["status"] == "approved"
    assert json.loads(backend.last("/day-end/d1/status").content) == {"status": "approved", "notes": "Cash matches"}


def test_day_end_decision_is_validated():
    backend = FakeBackend({})
    resp = call(backend, "PATCH", "/day-end/d1/status", token=MANAGER, json={"status": "rejected"})
    assert resp.status_code == 422
    assert resp.json()["errors"] == {"form": "A reason is required to reject a day-end report"}
    assert call(backend, "PATCH", "/day-end/d1/status", token=MANAGER, json={"status": "pending"}).status_code == 422
    assert backend.requests == []


def test_day_end_of_unassigned_bus_cannot_be_decided():
    backend = FakeBackend({("GET", "/day-end/d9"): httpx.Response(200, json={"data": {"_id": "d9", "busId": "b9"}})})
    resp = call(backend, "PATCH", "/day-end/d9/status", token=MANAGER, json={"status": "approved"})
    assert resp.status_code == 403
    assert [r.method for r in backend.requests] == ["GET"]


def test_stops_of_a_route_are_searched_and_paged_locally():
    stops = [
        {"_id": "s1", "stopCode": "CMB", "stopName": "Colombo Fort", "routeId": "r1", "isActive": True},
        {"_id": "s2", "stopCode": "KDW", "stopName": "Kadawatha", "routeId": "r1", "isActive": True},
        {"_id": "s3", "stopCode": "CMB2", "stopName": "Colombo Pettah", "routeId": "r1", "isActive": False},
    ]
    backend = FakeBackend({("GET", "/stops/route/r1"): httpx.Response(200, json={"data": stops})})
    resp = call(backend, "GET", "/stops/?routeId=r1&search=colombo&status=active", token=ADMIN)
    assert resp.status_code == 200
    body = resp.json()
    assert [s["stopCode"] for s in body["data"]] == ["CMB"]
    assert body["total"] == 1


def test_stop_status_filter_is_sent_as_active_flag():
    backend = FakeBackend({("GET", "/stops"): httpx.Response(200, json={"data": [], "count": 0, "totalPages": 1, "currentPage": 1})})
    resp = call(backend, "GET", "/stops/?status=inactive", token=ADMIN)
    assert resp.status_code == 200
    params = backend.last("/stops").url.params
    assert params["isActive"] == "false"
    assert "status" not in params


def test_stop_form_is_validated():
    backend = FakeBackend({})
    resp = call(backend, "POST", "/stops/", token=ADMIN, json={"stopCode": "CMB", "stopName": " ", "sectionNumber": 1, "routeId": "r1"})
    assert resp.status_code == 422
    assert resp.json()["errors"] == {"stopName": "Stop name is required"}
    assert backend.requests == []


def test_section_counts_fall_back_to_the_list():
    sections = [
        {"_id": "sc1", "sectionNumber": 1, "fare": 30, "category": "normal"},
        {"_id": "sc2", "sectionNumber": 2, "fare": 45, "category": "normal"},
        {"_id": "sc3", "sectionNumber": 1, "fare": 60, "category": "luxury"},
    ]
    backend = FakeBackend({("GET", "/sections"): httpx.Response(200, json={"data": sections})})
    resp = call(backend, "GET", "/sections/counts", token=ADMIN)
    assert resp.status_code == 200
    assert resp.json() == {"totalSections": 3, "sectionsByCategory": {"normal": 2, "luxury": 1}}
    assert backend.last("/sections").url.params["limit"] == "9999"


def test_empty_route_search_lists_active_routes():
    routes = [{"_id": f"r{i}", "routeNumber": f"RT{i:03d}", "routeName": f"Route {i}", "isActive": True} for i in range(1, 15)]
    backend = FakeBackend({("GET", "/routes"): httpx.Response(200, json={"data": routes})})
    resp = call(backend, "GET", "/routes/search", token=ADMIN)
    assert len(resp.json()) == 14
    resp = call(backend, "GET", "/routes/search?q=RT0", token=ADMIN)
    assert len(resp.json()) == settings.ROUTE_SEARCH_LIMIT
