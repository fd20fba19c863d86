"""Filter predicate evaluation for list pages.

A record is a plain mapping as returned by the fleet backend (camelCase keys,
references either an id string or a populated object). Which field answers
which filter is described by a :class:`~fleet_console.listing.entities.ListingConfig`.
"""
from dataclasses import dataclass, fields
from datetime import date, datetime
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Union

Accessor = Callable[[Mapping[str, Any]], Any]
FieldRef = Union[str, Accessor, None]


@dataclass
class FilterSet:
    """Active filters of a list page. ``None`` and empty strings are wildcards.

    ``sort`` never excludes records: it names a field path to order by, with a
    leading ``-`` for descending.
    """

    bus_id: Optional[str] = None
    route_id: Optional[str] = None
    status: Optional[str] = None
    category: Optional[str] = None
    direction: Optional[str] = None
    month: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    search: Optional[str] = None
    sort: Optional[str] = None

    def __post_init__(self):
        self.start_date = to_date(self.start_date) if self.start_date is not None else None
        self.end_date = to_date(self.end_date) if self.end_date is not None else None

    @classmethod
    def for_day(cls, day: Union[date, str], **kwargs) -> "FilterSet":
        """A single ``date`` filter is the inclusive range [day, day]."""
        return cls(start_date=day, end_date=day, **kwargs)

    @property
    def search_term(self) -> str:
        return (self.search or "").strip()

    def is_empty(self) -> bool:
        return not any(_active(getattr(self, f.name)) for f in fields(self) if f.name != "sort")

    def replace(self, **changes) -> "FilterSet":
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        values.update(changes)
        return FilterSet(**values)

    def to_params(self) -> Dict[str, str]:
        """Query parameters understood by the fleet backend."""
        params = {
            "busId": self.bus_id,
            "routeId": self.route_id,
            "status": self.status,
            "category": self.category,
            "direction": self.direction,
            "month": self.month,
            "search": self.search_term,
            "sort": self.sort,
        }
        if self.start_date is not None and self.start_date == self.end_date:
            params["date"] = self.start_date.isoformat()
        else:
            params["startDate"] = self.start_date.isoformat() if self.start_date else None
            params["endDate"] = self.end_date.isoformat() if self.end_date else None
        return {k: str(v) for k, v in params.items() if _active(v)}


def _active(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    return True


def get_path(record: Mapping[str, Any], path: str) -> Any:
    """Resolve a dotted path (``busId.busNumber``) without raising on gaps."""
    current: Any = record
    for part in path.split("."):
        if isinstance(current, Mapping):
            current = current.get(part)
        else:
            current = getattr(current, part, None)
        if current is None:
            return None
    return current


def ref_id(value: Any) -> Optional[str]:
    """Id of a reference that may be a bare id or a populated object."""
    if value is None:
        return None
    if isinstance(value, Mapping):
        value = value.get("_id", value.get("id"))
        return str(value) if value is not None else None
    return str(value)


def to_date(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            pass
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return None
    return None


def resolve(record: Mapping[str, Any], ref: FieldRef) -> Any:
    if ref is None:
        return None
    if callable(ref):
        return ref(record)
    return get_path(record, ref)


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Mapping):
        return " ".join(_text(v) for v in value.values())
    return str(value)


def _search_matches(record: Mapping[str, Any], term: str, search_fields: Sequence[FieldRef]) -> bool:
    needle = term.lower()
    return any(needle in _text(resolve(record, ref)).lower() for ref in search_fields)


def matches(record: Mapping[str, Any], filters: FilterSet, config) -> bool:
    """True when ``record`` satisfies every active filter in ``filters``."""
    for name, ref in (("bus_id", config.bus), ("route_id", config.route)):
        wanted = getattr(filters, name)
        if _active(wanted) and ref_id(resolve(record, ref)) != str(wanted):
            return False

    for name, ref in (
        ("status", config.status),
        ("category", config.category),
        ("direction", config.direction),
        ("month", config.month),
    ):
        wanted = getattr(filters, name)
        if not _active(wanted):
            continue
        actual = resolve(record, ref)
        if actual is None or str(getattr(actual, "value", actual)) != str(wanted):
            return False

    if filters.start_date is not None or filters.end_date is not None:
        day = to_date(resolve(record, config.date))
        if day is None:
            return False
        if filters.start_date is not None and day < filters.start_date:
            return False
        if filters.end_date is not None and day > filters.end_date:
            return False

    term = filters.search_term
    if term and not _search_matches(record, term, config.search):
        return False

    return True


def filter_records(records: Iterable[Mapping[str, Any]], filters: Optional[FilterSet], config) -> List[Mapping[str, Any]]:
    records = list(records)
    if filters is None or filters.is_empty():
        return records
    return [r for r in records if matches(r, filters, config)]


def _sort_key(value: Any):
    if isinstance(value, (int, float)):
        return (0, value, "")
    return (1, 0, _text(value).lower())


def sort_records(records: Iterable[Mapping[str, Any]], sort: Optional[str]) -> List[Mapping[str, Any]]:
    """Order records by a dotted field; a leading ``-`` sorts descending.

    Records without the field keep their relative order after the others.
    """
    records = list(records)
    key = (sort or "").strip()
    if not key:
        return records
    descending = key.startswith("-")
    path = key.lstrip("-+")
    present = [r for r in records if get_path(r, path) is not None]
    missing = [r for r in records if get_path(r, path) is None]
    present.sort(key=lambda r: _sort_key(get_path(r, path)), reverse=descending)
    return present + missing
