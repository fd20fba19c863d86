from dataclasses import dataclass, field
from typing import List, Optional

from jose import JWTError, jwt

from fleet_console.config import settings

SUPER_ADMIN = "super-admin"
BUS_OWNER = "bus-owner"
MANAGER = "manager"
USER = "user"

_BACKEND_ROLES = {
    "admin": SUPER_ADMIN,
    "owner": BUS_OWNER,
    "manager": MANAGER,
}


def map_backend_role(backend_role: Optional[str]) -> str:
    return _BACKEND_ROLES.get((backend_role or "").lower(), USER)


@dataclass
class ConsoleUser:
    id: str
    role: str
    assigned_buses: List[str] = field(default_factory=list)
    username: Optional[str] = None


def decode_access_token(token: str) -> ConsoleUser:
    """Read the caller out of a backend-issued JWT. Raises JWTError when invalid."""
    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    user_id = payload.get("id") or payload.get("_id") or payload.get("sub")
    if not user_id:
        raise JWTError("Token has no subject")
    return ConsoleUser(
        id=str(user_id),
        role=map_backend_role(payload.get("role")),
        assigned_buses=[str(b) for b in payload.get("assignedBuses") or []],
        username=payload.get("username"),
    )
