"""Role-based capability checks.

Every mutating call goes through ``require`` with the acting identity, so the
role rules live here instead of at each endpoint.
"""
from typing import Any, Mapping, Optional

from freezer.core.errors import AuthError, PermissionDeniedError

STUDENT = "student"
ADMIN = "admin"
SUPERADMIN = "superadmin"

_STAFF = frozenset({ADMIN, SUPERADMIN})
_EVERYONE = frozenset({STUDENT, ADMIN, SUPERADMIN})

_ROLE_ACTIONS = {
    "inventory:read": _EVERYONE,
    "inventory:create": _EVERYONE,
    "locations:read": _EVERYONE,
    "checkout:create": _EVERYONE,
    "checkout:list_own": _EVERYONE,
    "checkout:list_all": _STAFF,
    "inventory:expire": _STAFF,
    "users:set_role": frozenset({SUPERADMIN}),
}


def _attr(resource: Any, *names: str):
    if resource is None:
        return None
    for name in names:
        if isinstance(resource, Mapping):
            value = resource.get(name)
        else:
            value = getattr(resource, name, None)
        if value is not None:
            return value
    return None


def _owns_item(actor, item) -> bool:
    return item is not None and _attr(item, "created_by", "createdBy") == actor.uid


def can(actor, action: str, resource: Optional[Any] = None) -> bool:
    if actor is None:
        return False
    role = actor.role

    if action in _ROLE_ACTIONS:
        return role in _ROLE_ACTIONS[action]

    if action in ("inventory:update", "inventory:history"):
        return role in _STAFF or (role == STUDENT and _owns_item(actor, resource))

    if action == "checkout:return":
        borrower = _attr(resource, "user_id", "userId", "borrowed_by", "borrowedBy")
        return role in _STAFF or (borrower is not None and borrower == actor.uid)

    if action == "users:list":
        return role in _STAFF

    if action == "users:create":
        # resource is the role being granted
        if role == SUPERADMIN:
            return True
        return role == ADMIN and resource == STUDENT

    return False


def visible_roles(actor) -> Optional[tuple]:
    """Roles whose user records ``actor`` may list; ``None`` means all."""
    if actor.role == SUPERADMIN:
        return None
    if actor.role == ADMIN:
        return (STUDENT,)
    return ()


def require(actor, action: str, resource: Optional[Any] = None) -> None:
    if actor is None:
        raise AuthError("Not authenticated")
    if not can(actor, action, resource):
        raise PermissionDeniedError(action)


__all__ = ["ADMIN", "STUDENT", "SUPERADMIN", "can", "require", "visible_roles"]
