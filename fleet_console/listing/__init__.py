from .filters import FilterSet, filter_records, matches, sort_records
from .pagination import PageInfo, PageSize, paginate, slice_page
from .fetch import ListFetcher, ListState, fetch_page

__all__ = [
    "FilterSet",
    "filter_records",
    "matches",
    "sort_records",
    "PageInfo",
    "PageSize",
    "paginate",
    "slice_page",
    "ListFetcher",
    "ListState",
    "fetch_page",
]
