from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ConsoleModel(BaseModel):
    """Backend record: camelCase on the wire, unknown fields kept as-is."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: Optional[str] = Field(None, alias="_id")

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


def present(model, record: Any) -> Dict[str, Any]:
    """Render one raw backend record through ``model`` (adds derived fields)."""
    return model.model_validate(record).to_wire()


class FormModel(BaseModel):
    """Form payload validated before anything is sent to the backend."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def to_backend(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


def not_blank(value: Optional[str], message: str) -> Optional[str]:
    if value is not None and not value.strip():
        raise ValueError(message)
    return value.strip() if value is not None else value
