from typing import Literal, Optional

from freezer.schemas.common import UtcDatetime, WireModel

Role = Literal["student", "admin", "superadmin"]


class UserRead(WireModel):
    uid: str
    email: str
    name: Optional[str] = None
    role: Role
    created_at: UtcDatetime
    updated_at: UtcDatetime


class UserCreate(WireModel):
    email: str
    role: Role
    name: Optional[str] = None
    uid: Optional[str] = None


class RoleUpdate(WireModel):
    role: Role
