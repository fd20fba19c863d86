from typing import Optional

from pydantic import Field, field_validator

from fleet_console.schemas.base import ConsoleModel, FormModel, not_blank


class Route(ConsoleModel):
    name: Optional[str] = None
    code: Optional[str] = None
    start_location: Optional[str] = None
    end_location: Optional[str] = None
    distance: Optional[float] = None
    estimated_duration: Optional[float] = None
    is_active: Optional[bool] = None
    description: Optional[str] = None


class RouteSection(ConsoleModel):
    route_id: object = None
    stop_id: object = None
    category: Optional[str] = None
    fare: Optional[float] = None
    order: Optional[int] = None
    is_active: bool = True


class RouteSectionCreate(FormModel):
    route_id: str
    stop_id: str
    category: str
    fare: float = Field(..., ge=0)
    order: int = Field(..., ge=0)
    is_active: bool = True

    @field_validator("route_id", "stop_id", "category")
    @classmethod
    def _required(cls, v, info):
        return not_blank(v, f"{info.field_name} is required")


class RouteSectionUpdate(FormModel):
    route_id: Optional[str] = None
    stop_id: Optional[str] = None
    category: Optional[str] = None
    fare: Optional[float] = Field(None, ge=0)
    order: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None


class RouteCreate(FormModel):
    name: str
    code: str
    start_location: str
    end_location: str
    distance: float = Field(..., ge=0)
    estimated_duration: float = Field(..., ge=0)
    is_active: bool = True
    description: Optional[str] = None

    @field_validator("name", "code", "start_location", "end_location")
    @classmethod
    def _required(cls, v, info):
        return not_blank(v, f"{info.field_name} is required")


class RouteUpdate(FormModel):
    name: Optional[str] = None
    code: Optional[str] = None
    start_location: Optional[str] = None
    end_location: Optional[str] = None
    distance: Optional[float] = Field(None, ge=0)
    estimated_duration: Optional[float] = Field(None, ge=0)
    is_active: Optional[bool] = None
    description: Optional[str] = None
