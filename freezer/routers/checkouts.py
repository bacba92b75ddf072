from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from freezer.core.permissions import require
from freezer.core.security import Identity
from freezer.dependencies import get_current_identity, get_db
from freezer.schemas.checkout import CheckoutCreate, CheckoutRead
from freezer.services.checkout_service import CheckoutService
from freezer.services.inventory_service import InventoryRepository

router = APIRouter(tags=["Checkouts"])


@router.post("/inventory/{item_id}/checkout", response_model=CheckoutRead, status_code=201)
def checkout_item(
    item_id: str,
    payload: CheckoutCreate,
    db: Session = Depends(get_db),
    actor: Identity = Depends(get_current_identity),
):
    require(actor, "checkout:create")
    return CheckoutService(db).checkout(
        item_id,
        actor.uid,
        payload.quantity,
        expected_return_date=payload.expected_return_date,
        purpose=payload.purpose,
    )


@router.post("/inventory/{item_id}/return/{checkout_id}", response_model=CheckoutRead)
def return_item(
    item_id: str,
    checkout_id: str,
    db: Session = Depends(get_db),
    actor: Identity = Depends(get_current_identity),
):
    service = CheckoutService(db)
    require(actor, "checkout:return", service.get(checkout_id))
    return service.return_item(item_id, checkout_id)


@router.get("/inventory/{item_id}/checkouts", response_model=list[CheckoutRead])
def list_item_checkouts(
    item_id: str,
    db: Session = Depends(get_db),
    actor: Identity = Depends(get_current_identity),
):
    require(actor, "inventory:read")
    InventoryRepository(db).get(item_id)
    return CheckoutService(db).list_for_item(item_id)


@router.get("/checkouts", response_model=list[CheckoutRead])
def list_checkouts(
    scope: str = Query("mine", description="mine | active"),
    db: Session = Depends(get_db),
    actor: Identity = Depends(get_current_identity),
):
    service = CheckoutService(db)
    if scope == "active":
        require(actor, "checkout:list_all")
        return service.list_active()
    require(actor, "checkout:list_own")
    return service.list_for_user(actor.uid)


@router.get("/checkouts/overdue", response_model=list[CheckoutRead])
def list_overdue_checkouts(
    db: Session = Depends(get_db),
    actor: Identity = Depends(get_current_identity),
):
    require(actor, "checkout:list_all")
    return CheckoutService(db).list_overdue()


__all__ = ["router"]
