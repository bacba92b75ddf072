from typing import Optional

from fastapi import Cookie, Depends, Header
from sqlalchemy.orm import Session

from freezer.config import get_settings
from freezer.core.security import Identity, authenticate_request
from freezer.database.session import get_db
from freezer.services.user_service import ensure_user

_settings = get_settings()


def get_current_identity(
    authorization: Optional[str] = Header(None),
    auth_token: Optional[str] = Cookie(None, alias=_settings.AUTH_COOKIE_NAME),
    db: Session = Depends(get_db),
) -> Identity:
    identity = authenticate_request(authorization, auth_token)
    ensure_user(db, identity)
    return identity


__all__ = ["get_current_identity", "get_db"]
