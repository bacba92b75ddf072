from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from freezer.config import get_settings
from freezer.core.permissions import require
from freezer.core.security import Identity
from freezer.dependencies import get_current_identity, get_db
from freezer.schemas.inventory import (
    EditHistoryRead,
    InventoryItemRead,
    InventoryListRead,
)
from freezer.services.inventory_service import (
    InventoryRepository,
    create_inventory_item,
    update_inventory_item,
)

router = APIRouter(prefix="/inventory", tags=["Inventory"])


def _listing(items) -> InventoryListRead:
    return InventoryListRead(
        data=[InventoryItemRead.model_validate(item) for item in items],
        total=len(items),
    )


@router.get("", response_model=InventoryListRead)
def list_inventory(
    company: Optional[str] = Query(None),
    category: Optional[str] = Query(None, description="4C | -20C"),
    status: Optional[str] = Query(None, description="active | expired"),
    borrowed: bool = Query(False, description="Only items currently checked out"),
    created_by: Optional[str] = Query(None, alias="createdBy"),
    db: Session = Depends(get_db),
    actor: Identity = Depends(get_current_identity),
):
    require(actor, "inventory:read")
    filters = {
        "company": company,
        "category": category,
        "status": status,
        "borrowed": borrowed or None,
        "createdBy": created_by,
    }
    selected = [name for name, value in filters.items() if value]
    if len(selected) > 1:
        raise HTTPException(
            status_code=400,
            detail="Use one filter at a time: {}".format(", ".join(selected)),
        )

    repository = InventoryRepository(db)
    if company:
        items = repository.list_by_company(company)
    elif category:
        items = repository.list_by_category(category)
    elif status == "active":
        items = repository.list_active()
    elif status == "expired":
        items = repository.list_expired()
    elif status:
        raise HTTPException(status_code=400, detail="status must be active or expired.")
    elif borrowed:
        items = repository.list_borrowed()
    elif created_by:
        items = repository.list_by_creator(created_by)
    else:
        items = repository.fetch_all()
    return _listing(items)


@router.get("/search", response_model=InventoryListRead)
def search_inventory(
    q: str = Query("", description="Name, company, batch or CAS number"),
    db: Session = Depends(get_db),
    actor: Identity = Depends(get_current_identity),
):
    require(actor, "inventory:read")
    term = q.strip()
    if len(term) < get_settings().SEARCH_MIN_LENGTH:
        raise HTTPException(status_code=400, detail="Search term is too short.")
    return _listing(InventoryRepository(db).search(term))


@router.post("/expire")
def expire_inventory(
    db: Session = Depends(get_db),
    actor: Identity = Depends(get_current_identity),
):
    require(actor, "inventory:expire")
    updated = InventoryRepository(db).mark_expired()
    return {"status": "completed", "updated": updated}


@router.post("", response_model=InventoryItemRead, status_code=201)
def add_inventory_item(
    payload: dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    actor: Identity = Depends(get_current_identity),
):
    return create_inventory_item(db, payload, actor)


@router.get("/{item_id}", response_model=InventoryItemRead)
def get_inventory_item(
    item_id: str,
    db: Session = Depends(get_db),
    actor: Identity = Depends(get_current_identity),
):
    require(actor, "inventory:read")
    return InventoryRepository(db).get(item_id)


@router.patch("/{item_id}", response_model=InventoryItemRead)
def patch_inventory_item(
    item_id: str,
    payload: dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    actor: Identity = Depends(get_current_identity),
):
    if not payload:
        raise HTTPException(status_code=400, detail="No fields to update.")
    return update_inventory_item(db, item_id, payload, actor)


@router.get("/{item_id}/history", response_model=list[EditHistoryRead])
def get_item_history(
    item_id: str,
    db: Session = Depends(get_db),
    actor: Identity = Depends(get_current_identity),
):
    repository = InventoryRepository(db)
    item = repository.get(item_id)
    require(actor, "inventory:history", item)
    return repository.list_history(item_id)


__all__ = ["router"]
