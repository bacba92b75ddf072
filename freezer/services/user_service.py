import logging
import uuid
from typing import Optional, cast

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from freezer.core.constants import ROLES
from freezer.core.dates import utc_now
from freezer.core.errors import DuplicateUserError, UserNotFoundError, ValidationError
from freezer.core.permissions import require, visible_roles
from freezer.models.user import User
from freezer.services.inventory_service import store_call

logger = logging.getLogger(__name__)


def _check_role(role: str) -> None:
    if role not in ROLES:
        raise ValidationError({"role": "Role must be one of: {}".format(", ".join(ROLES))})


def get_user(db: Session, uid: str) -> User:
    with store_call(db, "Failed to load user"):
        user = db.get(User, uid)
    if user is None:
        raise UserNotFoundError(uid)
    return user


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    stmt = select(User).where(User.email == email.strip().lower())
    with store_call(db, "Failed to load user"):
        return db.execute(stmt).scalars().first()


def ensure_user(db: Session, identity) -> User:
    """Record the identity on first sight. The stored role is never changed here."""
    with store_call(db, "Failed to sync user"):
        user = db.get(User, identity.uid)
        if user is None:
            now = utc_now()
            email = (identity.email or "").strip().lower()
            user = User(
                uid=identity.uid,
                email=email,
                role=identity.role,
                created_at=now,
                updated_at=now,
            )
            db.add(user)
            try:
                db.commit()
            except IntegrityError as exc:
                db.rollback()
                logger.warning("Email %s is already registered to another user", email)
                raise DuplicateUserError(email) from exc
            logger.info("Registered user %s with role %s", user.uid, user.role, extra={"user_id": user.uid})
    return user


def list_visible_users(db: Session, actor) -> list[User]:
    require(actor, "users:list")
    roles = visible_roles(actor)
    stmt = select(User).order_by(User.email)
    if roles is not None:
        stmt = stmt.where(User.role.in_(roles))
    with store_call(db, "Failed to fetch users"):
        rows = db.execute(stmt).scalars().all()
    return cast(list[User], list(rows))


def create_user(
    db: Session,
    actor,
    email: str,
    role: str,
    *,
    name: Optional[str] = None,
    uid: Optional[str] = None,
) -> User:
    _check_role(role)
    require(actor, "users:create", role)
    email = (email or "").strip().lower()
    if not email or "@" not in email:
        raise ValidationError({"email": "A valid email is required"})
    if get_user_by_email(db, email) is not None:
        raise DuplicateUserError(email)

    now = utc_now()
    user = User(
        uid=uid or uuid.uuid4().hex,
        email=email,
        name=(name or "").strip() or None,
        role=role,
        created_at=now,
        updated_at=now,
    )
    with store_call(db, "Failed to create user"):
        db.add(user)
        db.commit()
        db.refresh(user)
    logger.info("User %s created %s as %s", actor.uid, email, role)
    return user


def set_user_role(db: Session, actor, uid: str, role: str) -> User:
    _check_role(role)
    # actor is None only for operator scripts run against the database directly
    if actor is not None:
        require(actor, "users:set_role")
    user = get_user(db, uid)
    with store_call(db, "Failed to update user role"):
        user.role = role
        user.updated_at = utc_now()
        db.commit()
        db.refresh(user)
    logger.info("Role for %s set to %s", user.email, role)
    return user


__all__ = [
    "create_user",
    "ensure_user",
    "get_user",
    "get_user_by_email",
    "list_visible_users",
    "set_user_role",
]
