from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

import jwt

from freezer.config import get_settings
from freezer.core.constants import ROLES
from freezer.core.dates import utc_now
from freezer.core.errors import AuthError


@dataclass(frozen=True)
class Identity:
    uid: str
    email: str
    role: str


def _get_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return None


def _require_secret() -> str:
    settings = get_settings()
    if not settings.JWT_SECRET:
        raise AuthError("JWT auth is not configured")
    return settings.JWT_SECRET


def create_access_token(identity: Identity, *, expires_in: Optional[timedelta] = None) -> str:
    settings = get_settings()
    secret = _require_secret()
    issued_at = utc_now()
    if expires_in is None:
        expires_in = timedelta(minutes=settings.JWT_EXPIRES_MINUTES)
    claims = {
        "sub": identity.uid,
        "email": identity.email,
        "role": identity.role,
        "iat": issued_at,
        "exp": issued_at + expires_in,
    }
    if settings.JWT_AUDIENCE:
        claims["aud"] = settings.JWT_AUDIENCE
    if settings.JWT_ISSUER:
        claims["iss"] = settings.JWT_ISSUER
    return jwt.encode(claims, secret, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Identity:
    settings = get_settings()
    secret = _require_secret()
    options = {"verify_aud": bool(settings.JWT_AUDIENCE), "require": ["sub", "exp"]}
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
            options=options,
        )
    except jwt.ExpiredSignatureError as exc:
        raise AuthError("Token expired") from exc
    except jwt.PyJWTError as exc:
        raise AuthError("Invalid token") from exc

    role = payload.get("role")
    if role not in ROLES:
        raise AuthError("Unknown role")
    return Identity(uid=str(payload["sub"]), email=payload.get("email") or "", role=role)


def authenticate_request(
    authorization: Optional[str],
    cookie_token: Optional[str] = None,
) -> Identity:
    token = _get_bearer_token(authorization) or cookie_token
    if not token:
        raise AuthError("Not authenticated")
    return decode_access_token(token)


__all__ = [
    "Identity",
    "authenticate_request",
    "create_access_token",
    "decode_access_token",
]
