from typing import Any, Dict, Iterable, Mapping

VALUE_ERROR_PREFIX = "Value error, "
FORM_KEY = "form"


class FormError(Exception):
    """Client-side validation failure; nothing was sent to the backend."""

    def __init__(self, errors: Mapping[str, str]):
        super().__init__("Validation failed")
        self.errors = dict(errors)


def field_errors(errors: Iterable[Mapping[str, Any]]) -> Dict[str, str]:
    """Flatten pydantic error dicts into ``{field: message}``, first message wins."""
    out: Dict[str, str] = {}
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        key = loc[-1] if loc else FORM_KEY
        message = str(err.get("msg", "Invalid value"))
        if message.startswith(VALUE_ERROR_PREFIX):
            message = message[len(VALUE_ERROR_PREFIX):]
        out.setdefault(key, message)
    return out


def error_body(errors: Mapping[str, str]) -> Dict[str, Any]:
    return {"message": "Validation failed", "errors": dict(errors)}
