from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, cast

from sqlalchemy import select
from sqlalchemy import update as sa_update
from sqlalchemy.orm import Session

from freezer.core.dates import to_utc_timestamp, utc_now
from freezer.core.errors import (
    AuthError,
    CheckoutConflictError,
    CheckoutNotFoundError,
    ItemNotFoundError,
    ValidationError,
)
from freezer.core.validators import validate_checkout_request
from freezer.models.checkout import Checkout
from freezer.models.inventory_item import InventoryItem
from freezer.services.inventory_service import store_call

logger = logging.getLogger(__name__)


class CheckoutService:
    """Borrow/return lifecycle of an item.

    An item is ``available`` while ``borrowed_by`` is empty and ``borrowed``
    while one active Checkout exists. Both signals are written in the same
    transaction, and the item row is claimed with a compare-and-set on
    ``borrowed_by IS NULL`` so concurrent checkouts cannot both succeed.
    """

    def __init__(self, db: Session):
        self.db = db

    def get(self, checkout_id: str) -> Checkout:
        with store_call(self.db, "Failed to load checkout"):
            record = self.db.get(Checkout, checkout_id)
        if record is None:
            raise CheckoutNotFoundError(checkout_id)
        return record

    def checkout(
        self,
        item_id: str,
        user_id: str,
        quantity: int,
        expected_return_date: Optional[date | datetime | str] = None,
        purpose: Optional[str] = None,
    ) -> Checkout:
        if not user_id:
            raise AuthError("A signed-in user is required to check out items")
        result = validate_checkout_request(quantity, expected_return_date)
        if not result.is_valid:
            raise ValidationError(result.errors)

        now = utc_now()
        expected = to_utc_timestamp(expected_return_date) or now

        with store_call(self.db, "Failed to checkout item"):
            claimed = self.db.execute(
                sa_update(InventoryItem)
                .where(InventoryItem.id == item_id, InventoryItem.borrowed_by.is_(None))
                .values(
                    borrowed_by=user_id,
                    borrowed_at=now,
                    expected_return_date=expected,
                    updated_at=now,
                )
                .execution_options(synchronize_session=False)
            )
            if claimed.rowcount == 0:
                self.db.rollback()
                if self.db.get(InventoryItem, item_id) is None:
                    raise ItemNotFoundError(item_id)
                raise CheckoutConflictError("Item is already checked out")

            record = Checkout(
                inventory_id=item_id,
                user_id=user_id,
                checked_out_at=now,
                quantity=quantity,
                expected_return_date=expected,
                status="active",
                purpose=(purpose or "").strip() or None,
            )
            self.db.add(record)
            self.db.commit()
            self.db.refresh(record)
        self.db.expire_all()

        logger.info(
            "Item %s checked out by %s (checkout %s)", item_id, user_id, record.id,
            extra={"item_id": item_id, "checkout_id": record.id, "user_id": user_id},
        )
        return record

    def return_item(self, item_id: str, checkout_id: str) -> Checkout:
        record = self.get(checkout_id)
        if record.inventory_id != item_id:
            raise CheckoutConflictError("Checkout does not belong to this item")
        if record.status == "returned" or record.returned_at is not None:
            raise CheckoutConflictError("Checkout has already been returned")

        now = utc_now()
        with store_call(self.db, "Failed to return item"):
            closed = self.db.execute(
                sa_update(Checkout)
                .where(Checkout.id == checkout_id, Checkout.status == "active")
                .values(status="returned", returned_at=now)
                .execution_options(synchronize_session=False)
            )
            if closed.rowcount == 0:
                self.db.rollback()
                raise CheckoutConflictError("Checkout has already been returned")

            cleared = self.db.execute(
                sa_update(InventoryItem)
                .where(InventoryItem.id == item_id)
                .values(
                    borrowed_by=None,
                    borrowed_at=None,
                    expected_return_date=None,
                    updated_at=now,
                )
                .execution_options(synchronize_session=False)
            )
            if cleared.rowcount == 0:
                self.db.rollback()
                raise ItemNotFoundError(item_id)
            self.db.commit()
        self.db.expire_all()

        logger.info(
            "Item %s returned (checkout %s)", item_id, checkout_id,
            extra={"item_id": item_id, "checkout_id": checkout_id},
        )
        return self.get(checkout_id)

    def _list(self, stmt, message: str) -> list[Checkout]:
        with store_call(self.db, message):
            rows = self.db.execute(stmt.order_by(Checkout.checked_out_at.desc())).scalars().all()
        return cast(list[Checkout], list(rows))

    def list_for_item(self, item_id: str) -> list[Checkout]:
        stmt = select(Checkout).where(Checkout.inventory_id == item_id)
        return self._list(stmt, "Failed to fetch checkouts for item")

    def list_for_user(self, user_id: str) -> list[Checkout]:
        stmt = select(Checkout).where(Checkout.user_id == user_id)
        return self._list(stmt, "Failed to fetch checkouts for user")

    def list_active(self) -> list[Checkout]:
        stmt = select(Checkout).where(Checkout.status == "active")
        return self._list(stmt, "Failed to fetch active checkouts")

    def list_overdue(self, now: Optional[datetime] = None) -> list[Checkout]:
        now = now or utc_now()
        stmt = select(Checkout).where(
            Checkout.status == "active",
            Checkout.expected_return_date < now,
        )
        return self._list(stmt, "Failed to fetch overdue checkouts")


__all__ = ["CheckoutService"]
