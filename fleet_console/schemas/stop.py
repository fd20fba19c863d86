from typing import Any, Dict, Optional, Union

from pydantic import Field, field_validator

from fleet_console.schemas.base import ConsoleModel, FormModel, not_blank

Ref = Union[str, Dict[str, Any], None]


class Stop(ConsoleModel):
    stop_code: Optional[str] = None
    stop_name: Optional[str] = None
    section_number: Optional[int] = None
    route_id: Ref = None
    is_active: bool = True


class StopCreate(FormModel):
    stop_code: str
    stop_name: str
    section_number: int = Field(..., ge=0)
    route_id: str
    is_active: bool = True

    @field_validator("stop_code")
    @classmethod
    def _code_required(cls, v):
        return not_blank(v, "Stop code is required")

    @field_validator("stop_name")
    @classmethod
    def _name_required(cls, v):
        return not_blank(v, "Stop name is required")

    @field_validator("route_id")
    @classmethod
    def _route_required(cls, v):
        return not_blank(v, "Please select a route")


class StopUpdate(FormModel):
    stop_code: Optional[str] = None
    stop_name: Optional[str] = None
    section_number: Optional[int] = Field(None, ge=0)
    route_id: Optional[str] = None
    is_active: Optional[bool] = None
