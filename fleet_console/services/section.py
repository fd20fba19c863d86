import logging
from collections import Counter
from typing import Any, Dict

from fleet_console.listing.pagination import PageSize
from fleet_console.services.api_client import ApiError, SessionExpired
from fleet_console.services.base import ResourceService, unwrap

logger = logging.getLogger(__name__)


class SectionService(ResourceService):
    path = "/sections"

    async def get_by_number(self, section_number: int) -> Dict[str, Any]:
        return unwrap(await self.api.get(f"{self.path}/number/{section_number}"))

    async def counts(self) -> Dict[str, Any]:
        """Total sections and sections per category.

        Older backends have no counts endpoint; the numbers are then tallied
        from the full section list.
        """
        try:
            data = unwrap(await self.api.get(f"{self.path}/counts"))
            return {"totalSections": data["totalCount"], "sectionsByCategory": data["countsByCategory"]}
        except SessionExpired:
            raise
        except (ApiError, KeyError, TypeError) as exc:
            logger.warning("Section counts unavailable, tallying from the list: %s", exc)
        sections = unwrap(await self.api.get(self.path, params={"limit": int(PageSize.ALL)})) or []
        by_category = Counter(s.get("category") for s in sections if s.get("category"))
        return {"totalSections": len(sections), "sectionsByCategory": dict(by_category)}
