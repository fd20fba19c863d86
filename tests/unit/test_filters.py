"""
Filter predicate evaluation over raw backend records.

Run with: pytest tests/unit/test_filters.py
"""
from datetime import date

from fleet_console.listing import entities
from fleet_console.listing.filters import FilterSet, filter_records, get_path, matches, ref_id, sort_records, to_date


TRIPS = [
    {"_id": "t1", "tripNumber": 1, "busId": {"_id": "b1", "busNumber": "NB-1001"}, "routeId": "r1",
     "direction": "forward", "date": "2024-03-01T06:00:00.000Z", "endTime": "2024-03-01T08:00:00.000Z"},
    {"_id": "t2", "tripNumber": 2, "busId": "b1", "routeId": "r2",
     "direction": "return", "date": "2024-03-02", "endTime": None},
    {"_id": "t3", "tripNumber": 3, "busId": "b2", "routeId": "r1",
     "direction": "forward", "date": "2024-03-05"},
]


def ids(records):
    return [r["_id"] for r in records]


def test_empty_filters_return_list_unchanged():
    assert filter_records(TRIPS, FilterSet(), entities.TRIPS) == TRIPS
    assert filter_records(TRIPS, None, entities.TRIPS) == TRIPS
    assert filter_records(TRIPS, FilterSet(search="   ", status=""), entities.TRIPS) == TRIPS


def test_bus_filter_matches_bare_and_populated_references():
    assert ids(filter_records(TRIPS, FilterSet(bus_id="b1"), entities.TRIPS)) == ["t1", "t2"]


def test_status_uses_derived_trip_status():
    assert ids(filter_records(TRIPS, FilterSet(status="active"), entities.TRIPS)) == ["t2", "t3"]
    assert ids(filter_records(TRIPS, FilterSet(status="completed"), entities.TRIPS)) == ["t1"]


def test_filters_combine_with_and():
    filters = FilterSet(bus_id="b1", route_id="r1")
    assert ids(filter_records(TRIPS, filters, entities.TRIPS)) == ["t1"]
    filters = FilterSet(route_id="r1", direction="forward", status="active")
    assert ids(filter_records(TRIPS, filters, entities.TRIPS)) == ["t3"]


def test_date_range_is_inclusive():
    filters = FilterSet(start_date=date(2024, 3, 1), end_date=date(2024, 3, 2))
    assert ids(filter_records(TRIPS, filters, entities.TRIPS)) == ["t1", "t2"]
    assert ids(filter_records(TRIPS, FilterSet.for_day("2024-03-05"), entities.TRIPS)) == ["t3"]


def test_open_ended_date_range():
    assert ids(filter_records(TRIPS, FilterSet(start_date="2024-03-02"), entities.TRIPS)) == ["t2", "t3"]
    assert ids(filter_records(TRIPS, FilterSet(end_date="2024-03-01"), entities.TRIPS)) == ["t1"]


def test_missing_fields_do_not_match_and_never_raise():
    record = {"_id": "x"}
    assert not matches(record, FilterSet(bus_id="b1"), entities.TRIPS)
    assert not matches(record, FilterSet(direction="forward"), entities.TRIPS)
    assert not matches(record, FilterSet(start_date="2024-01-01"), entities.TRIPS)
    assert not matches(record, FilterSet(search="1"), entities.TRIPS)
    assert not matches({"date": "not a date"}, FilterSet(start_date="2024-01-01"), entities.TRIPS)


def test_search_is_case_insensitive_substring():
    routes = [{"_id": "a", "code": "RT001"}, {"_id": "b", "code": "RT002"}, {"_id": "c", "code": "AB099"}]
    assert ids(filter_records(routes, FilterSet(search="rt0"), entities.ROUTES)) == ["a", "b"]
    assert ids(filter_records(routes, FilterSet(search="RT0"), entities.ROUTES)) == ["a", "b"]


def test_search_reaches_populated_fields():
    found = filter_records(TRIPS, FilterSet(search="nb-10"), entities.TRIPS)
    assert ids(found) == ["t1"]


def test_fee_status_filter_and_month():
    fees = [
        {"_id": "f1", "busId": "b1", "month": "2024-01", "amount": 5000, "paidAmount": 5000},
        {"_id": "f2", "busId": "b1", "month": "2024-02", "amount": 5000, "paidAmount": 3000},
        {"_id": "f3", "busId": "b2", "month": "2024-02", "amount": 5000, "paidAmount": 0},
    ]
    assert ids(filter_records(fees, FilterSet(status="partial"), entities.MONTHLY_FEES)) == ["f2"]
    assert ids(filter_records(fees, FilterSet(month="2024-02"), entities.MONTHLY_FEES)) == ["f2", "f3"]


def test_to_params_skips_wildcards_and_collapses_single_day():
    params = FilterSet(bus_id="b1", search="  ", status=None).to_params()
    assert params == {"busId": "b1"}
    assert FilterSet.for_day("2024-03-05").to_params() == {"date": "2024-03-05"}
    ranged = FilterSet(start_date="2024-03-01", end_date="2024-03-31").to_params()
    assert ranged == {"startDate": "2024-03-01", "endDate": "2024-03-31"}


def test_helpers():
    assert ref_id({"_id": "b1", "busNumber": "x"}) == "b1"
    assert ref_id("b2") == "b2"
    assert ref_id(None) is None
    assert get_path({"busId": {"busNumber": "NB"}}, "busId.busNumber") == "NB"
    assert get_path({"busId": "b1"}, "busId.busNumber") is None
    assert to_date("2024-03-01T23:30:00Z") == date(2024, 3, 1)
    assert to_date("garbage") is None


def test_sort_records_by_field_and_direction():
    records = [
        {"_id": "a", "tripNumber": 3, "busId": {"busNumber": "NB-2"}},
        {"_id": "b", "tripNumber": 1, "busId": {"busNumber": "nb-1"}},
        {"_id": "c"},
        {"_id": "d", "tripNumber": 2, "busId": {"busNumber": "NB-3"}},
    ]
    assert [r["_id"] for r in sort_records(records, "tripNumber")] == ["b", "d", "a", "c"]
    assert [r["_id"] for r in sort_records(records, "-tripNumber")] == ["a", "d", "b", "c"]
    assert [r["_id"] for r in sort_records(records, "busId.busNumber")] == ["b", "a", "d", "c"]
    assert sort_records(records, None) == records
