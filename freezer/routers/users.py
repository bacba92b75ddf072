from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from freezer.core.security import Identity
from freezer.dependencies import get_current_identity, get_db
from freezer.schemas.user import RoleUpdate, UserCreate, UserRead
from freezer.services.user_service import (
    create_user,
    get_user,
    list_visible_users,
    set_user_role,
)

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=list[UserRead])
def list_users(
    db: Session = Depends(get_db),
    actor: Identity = Depends(get_current_identity),
):
    return list_visible_users(db, actor)


@router.get("/me", response_model=UserRead)
def read_current_user(
    db: Session = Depends(get_db),
    actor: Identity = Depends(get_current_identity),
):
    return get_user(db, actor.uid)


@router.post("", response_model=UserRead, status_code=201)
def add_user(
    payload: UserCreate,
    db: Session = Depends(get_db),
    actor: Identity = Depends(get_current_identity),
):
    return create_user(
        db,
        actor,
        payload.email,
        payload.role,
        name=payload.name,
        uid=payload.uid,
    )


@router.put("/{uid}/role", response_model=UserRead)
def update_user_role(
    uid: str,
    payload: RoleUpdate,
    db: Session = Depends(get_db),
    actor: Identity = Depends(get_current_identity),
):
    return set_user_role(db, actor, uid, payload.role)


__all__ = ["router"]
