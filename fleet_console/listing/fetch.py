"""Remote fetch orchestration for list pages.

``fetch_page`` is the stateless request/normalize step used by the HTTP
routers. ``ListFetcher`` keeps filters, page and the last result for a
long-lived consumer and makes sure only the newest request updates its state.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional

from fleet_console.config import settings
from fleet_console.listing.entities import ListingConfig
from fleet_console.listing.filters import FilterSet, filter_records, sort_records
from fleet_console.listing.pagination import clamp_page, slice_page
from fleet_console.metrics import LIST_FETCHES, STALE_RESPONSES
from fleet_console.schemas.listing import PageResult
from fleet_console.services.api_client import ApiError

logger = logging.getLogger(__name__)

# (scope id, query params) -> raw backend payload
Loader = Callable[[Optional[str], Dict[str, Any]], Awaitable[Any]]

PAGINATION_KEYS = ("total", "totalCount", "totalPages", "currentPage")


def _items_of(payload: Dict[str, Any]) -> List[Any]:
    for key in ("data", "items"):
        value = payload.get(key)
        if isinstance(value, list):
            return value
    return []


def _is_paginated(payload: Any) -> bool:
    return isinstance(payload, dict) and any(k in payload for k in PAGINATION_KEYS)


def normalize_page(payload: Dict[str, Any], requested_page: int) -> PageResult:
    """Fill in whatever pagination fields the backend left out."""
    total = next((payload[k] for k in ("total", "totalCount", "count") if payload.get(k) is not None), None)
    current_page = payload.get("currentPage")
    total_pages = payload.get("totalPages")
    return PageResult(
        items=_items_of(payload),
        total=total if total is not None else 0,
        current_page=current_page if current_page is not None else requested_page,
        total_pages=total_pages if total_pages is not None else 1,
    )


def local_page(records: List[Any], filters: FilterSet, config: ListingConfig, page: int, limit: int) -> PageResult:
    """Filter, sort and paginate a complete record list in-process."""
    matched = sort_records(filter_records(records, filters, config), filters.sort)
    items, info = slice_page(matched, limit, page)
    return PageResult(items=items, total=info.total_items, current_page=info.page, total_pages=info.total_pages)


async def fetch_page(
    loader: Loader,
    scope_id: Optional[str],
    filters: FilterSet,
    page: int,
    limit: int,
    config: ListingConfig,
) -> PageResult:
    params: Dict[str, Any] = dict(filters.to_params())
    params.update(page=page, limit=limit)
    try:
        payload = await loader(scope_id, params)
    except ApiError:
        LIST_FETCHES.labels(entity=config.entity, result="error").inc()
        raise
    LIST_FETCHES.labels(entity=config.entity, result="ok").inc()

    if _is_paginated(payload):
        return normalize_page(payload, page)
    records = payload if isinstance(payload, list) else _items_of(payload or {})
    return local_page(records, filters, config, page, limit)


def scoped_loader(service) -> Loader:
    """List through the owner endpoint when a scope id is given."""

    async def _load(scope_id: Optional[str], params: Dict[str, Any]) -> Any:
        if scope_id:
            return await service.list_by_owner(scope_id, params)
        return await service.list(params)

    return _load


@dataclass
class ListError:
    message: str
    status: Optional[int] = None
    retryable: bool = True


@dataclass
class ListState:
    items: List[Any] = field(default_factory=list)
    total: int = 0
    current_page: int = 1
    total_pages: int = 1
    loading: bool = False
    error: Optional[ListError] = None


class ListFetcher:
    def __init__(
        self,
        loader: Loader,
        config: ListingConfig,
        scope_id: Optional[str] = None,
        filters: Optional[FilterSet] = None,
        page_size: Optional[int] = None,
        debounce: Optional[float] = None,
    ):
        self.loader = loader
        self.config = config
        self.scope_id = scope_id
        self.filters = filters or FilterSet()
        self.page = 1
        self.page_size = page_size or settings.DEFAULT_PAGE_SIZE
        self.debounce = settings.SEARCH_DEBOUNCE_SECONDS if debounce is None else debounce
        self.state = ListState()
        self._generation = 0
        self._pending_search: Optional[asyncio.Task] = None

    @property
    def generation(self) -> int:
        return self._generation

    async def load(self) -> ListState:
        self._generation += 1
        generation = self._generation
        self.state.loading = True
        self.state.error = None
        try:
            result = await fetch_page(self.loader, self.scope_id, self.filters, self.page, self.page_size, self.config)
        except ApiError as exc:
            if generation != self._generation:
                STALE_RESPONSES.labels(entity=self.config.entity).inc()
                return self.state
            logger.warning("Loading %s list failed: %s", self.config.entity, exc.message)
            self.state = ListState(error=ListError(exc.message, exc.status))
            return self.state

        if generation != self._generation:
            STALE_RESPONSES.labels(entity=self.config.entity).inc()
            logger.debug("Dropped stale %s response (generation %s < %s)", self.config.entity, generation, self._generation)
            return self.state

        self.page = clamp_page(result.current_page, max(result.total_pages, 1))
        self.state = ListState(
            items=result.items,
            total=result.total,
            current_page=result.current_page,
            total_pages=result.total_pages,
        )
        return self.state

    async def retry(self) -> ListState:
        return await self.load()

    async def set_filters(self, **changes) -> ListState:
        self.filters = self.filters.replace(**changes)
        self.page = 1
        return await self.load()

    async def set_page(self, page: int) -> ListState:
        self.page = max(int(page), 1)
        return await self.load()

    async def set_page_size(self, page_size: int) -> ListState:
        self.page_size = page_size
        self.page = 1
        return await self.load()

    async def set_scope(self, scope_id: Optional[str]) -> ListState:
        self.scope_id = scope_id
        self.page = 1
        return await self.load()

    def set_search(self, term: str) -> asyncio.Task:
        """Debounced search: only the last term typed within the window is fetched."""
        if self._pending_search is not None and not self._pending_search.done():
            self._pending_search.cancel()
        self.filters = self.filters.replace(search=term)
        self.page = 1

        async def _later() -> ListState:
            await asyncio.sleep(self.debounce)
            return await self.load()

        self._pending_search = asyncio.ensure_future(_later())
        return self._pending_search
