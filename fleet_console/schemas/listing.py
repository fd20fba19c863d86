from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field


class PageResult(BaseModel):
    """Normalized list envelope: ``{data, total, currentPage, totalPages}``."""

    model_config = ConfigDict(populate_by_name=True)

    items: List[Any] = Field(default_factory=list, serialization_alias="data")
    total: int = 0
    current_page: int = Field(1, serialization_alias="currentPage")
    total_pages: int = Field(1, serialization_alias="totalPages")


class ErrorOut(BaseModel):
    message: str
    retryable: bool = True
