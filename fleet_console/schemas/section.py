from enum import Enum
from typing import Optional

from pydantic import Field

from fleet_console.schemas.base import ConsoleModel, FormModel


class SectionCategory(str, Enum):
    NORMAL = "normal"
    LUXURY = "luxury"
    SEMI_LUXURY = "semi_luxury"
    HIGH_LUXURY = "high_luxury"
    SISU_SARIYA = "sisu_sariya"


class Section(ConsoleModel):
    section_number: Optional[int] = None
    fare: Optional[float] = None
    category: Optional[str] = None
    description: Optional[str] = None
    is_active: bool = True


class SectionCreate(FormModel):
    section_number: int = Field(..., ge=0)
    fare: float = Field(..., ge=0)
    category: SectionCategory = SectionCategory.NORMAL
    description: str = ""
    is_active: bool = True


class SectionUpdate(FormModel):
    section_number: Optional[int] = Field(None, ge=0)
    fare: Optional[float] = Field(None, ge=0)
    category: Optional[SectionCategory] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None
