from typing import Any, List, Mapping, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError

from fleet_console.listing.filters import get_path, ref_id
from fleet_console.services import auth as auth_service
from fleet_console.services.auth import BUS_OWNER, MANAGER, SUPER_ADMIN, ConsoleUser

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")

STAFF_ROLES = [SUPER_ADMIN, BUS_OWNER, MANAGER]


async def get_current_user(token: str = Depends(oauth2_scheme)) -> ConsoleUser:
    try:
        return auth_service.decode_access_token(token)
    except JWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid authentication credentials")


def role_required(allowed: List[str]):
    async def _dep(current_user: ConsoleUser = Depends(get_current_user)) -> ConsoleUser:
        if current_user.role not in allowed:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
        return current_user

    return _dep


def owner_scope(user: ConsoleUser) -> Optional[str]:
    """Owner id list queries are restricted to; super-admins see everything."""
    if user.role == BUS_OWNER:
        return user.id
    return None


def scoped_bus_id(user: ConsoleUser, requested: Optional[str]) -> Optional[str]:
    """Managers only see their assigned buses; default to the first one."""
    if user.role != MANAGER:
        return requested
    if requested:
        if requested not in user.assigned_buses:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Bus not assigned to you")
        return requested
    if not user.assigned_buses:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="No bus assigned")
    return user.assigned_buses[0]


def record_bus_id(record: Mapping[str, Any]) -> Optional[str]:
    """Bus a record belongs to, directly or through its expense type."""
    return ref_id(record.get("busId")) or ref_id(get_path(record, "expenseTypeId.busId"))


def record_owner_id(record: Mapping[str, Any]) -> Optional[str]:
    """Owner of a record, from the record itself or its populated bus."""
    for path in ("ownerId", "busId.ownerId", "expenseTypeId.busId.ownerId"):
        owner = ref_id(get_path(record, path))
        if owner:
            return owner
    return None


def check_record_scope(user: ConsoleUser, record: Mapping[str, Any]) -> None:
    """403 unless ``record`` is on one of the manager's buses or owned by the bus owner."""
    if user.role == MANAGER:
        if record_bus_id(record) not in user.assigned_buses:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Bus not assigned to you")
    elif user.role == BUS_OWNER:
        if record_owner_id(record) != user.id:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Record belongs to another owner")
