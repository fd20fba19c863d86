import math
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Sequence, Tuple, TypeVar, Union

T = TypeVar("T")


class PageSize(IntEnum):
    # wire value kept from the backend's "show all" convention
    ALL = 9999


@dataclass(frozen=True)
class PageInfo:
    page: int
    total_pages: int
    start_index: int
    end_index: int  # exclusive
    total_items: int
    page_size: int

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def show_controls(self) -> bool:
        return self.total_pages > 1


def parse_page_size(value: Union[int, str, None], default: int) -> int:
    """Accept ``all`` or the sentinel number for the show-all page size."""
    if value is None or value == "":
        return default
    if isinstance(value, str):
        if value.strip().lower() == "all":
            return PageSize.ALL
        value = int(value)
    if value >= PageSize.ALL:
        return PageSize.ALL
    return value


def clamp_page(requested_page: int, total_pages: int) -> int:
    return min(max(int(requested_page), 1), total_pages)


def paginate(total_items: int, page_size: int, requested_page: int) -> PageInfo:
    if total_items < 0:
        raise ValueError("total_items must be >= 0")
    if page_size < 1:
        raise ValueError("page_size must be >= 1")

    if page_size >= PageSize.ALL:
        return PageInfo(page=1, total_pages=1, start_index=0, end_index=total_items,
                        total_items=total_items, page_size=PageSize.ALL)

    total_pages = max(1, math.ceil(total_items / page_size))
    page = clamp_page(requested_page, total_pages)
    start = (page - 1) * page_size
    end = min(start + page_size, total_items)
    return PageInfo(page=page, total_pages=total_pages, start_index=start, end_index=end,
                    total_items=total_items, page_size=page_size)


def slice_page(items: Sequence[T], page_size: int, requested_page: int) -> Tuple[List[T], PageInfo]:
    info = paginate(len(items), page_size, requested_page)
    return list(items[info.start_index:info.end_index]), info
