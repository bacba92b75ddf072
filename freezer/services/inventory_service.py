"""Inventory Repository: every read and write of inventory items and their
edit history goes through ``InventoryRepository``.

The repository is bound to one SQLAlchemy session per request. It converts
store failures into ``StoreError`` with a stable message and never validates
on its own; ``create_inventory_item`` and ``update_inventory_item`` are the
validated entry points.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import date, datetime
from typing import Any, Mapping, Optional, cast

from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy import update as sa_update
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session

from freezer.core.constants import HISTORY_ACTION_UPDATE
from freezer.core.dates import as_utc, to_utc_timestamp, utc_now
from freezer.core.errors import (
    AuthError,
    DuplicateError,
    ItemNotFoundError,
    StoreError,
    StoreTimeoutError,
    ValidationError,
)
from freezer.core.location import build_location
from freezer.core.permissions import require
from freezer.core.validators import validate_duplicate_input, validate_inventory_item
from freezer.models.edit_history import EditHistoryEntry
from freezer.models.inventory_item import InventoryItem

logger = logging.getLogger(__name__)

# wire name -> column attribute
FIELD_COLUMNS = {
    "name": "name",
    "company": "company",
    "volume": "volume",
    "quantity": "quantity",
    "concentration": "concentration",
    "notes": "notes",
    "category": "category",
    "barcode": "barcode",
    "qrCode": "qr_code",
    "batchNumber": "batch_number",
    "serialNumber": "serial_number",
    "casNumber": "cas_number",
    "purchaseDate": "purchase_date",
    "expirationDate": "expiration_date",
    "status": "status",
    "borrowedBy": "borrowed_by",
    "borrowedAt": "borrowed_at",
    "expectedReturnDate": "expected_return_date",
}
_COLUMN_FIELDS = {column: field for field, column in FIELD_COLUMNS.items()}
_PROTECTED_FIELDS = {"id", "createdAt", "created_at", "createdBy", "created_by", "updatedAt", "updated_at"}
_DATE_FIELDS = {"purchaseDate", "expirationDate", "borrowedAt", "expectedReturnDate"}
# Written only by CheckoutService.
_CHECKOUT_FIELDS = {"borrowedBy", "borrowedAt", "expectedReturnDate"}
_TRIMMED_FIELDS = {"name", "company", "volume", "barcode", "qrCode"}
_NULLABLE_TEXT_FIELDS = {"concentration", "batchNumber", "serialNumber", "casNumber"}


def _strip(value) -> str:
    # Same text coercion as the validators: numbers in text fields are kept.
    if value is None:
        return ""
    return str(value).strip()


def _strip_or_none(value) -> Optional[str]:
    return _strip(value) or None


def _as_wire_dict(payload) -> dict:
    if isinstance(payload, BaseModel):
        return payload.model_dump(by_alias=True, exclude_unset=True)
    return dict(payload)


def _json_value(value):
    if isinstance(value, datetime):
        return as_utc(value).isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return value


def _is_timeout(exc: SQLAlchemyError) -> bool:
    if isinstance(exc, PoolTimeoutError):
        return True
    if isinstance(exc, OperationalError):
        text = str(exc.orig).lower()
        return "locked" in text or "timeout" in text or "timed out" in text
    return False


@contextmanager
def store_call(db: Session, message: str):
    """Run a store round trip; log and convert driver errors."""
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("%s: %s", message, exc.__class__.__name__)
        if _is_timeout(exc):
            raise StoreTimeoutError("{} (timed out)".format(message)) from exc
        raise StoreError(message) from exc


def item_to_wire(item: InventoryItem) -> dict:
    """Editable fields of ``item`` keyed by wire name, dates as ``YYYY-MM-DD``."""
    data = {}
    for field, column in FIELD_COLUMNS.items():
        value = getattr(item, column)
        if field in ("purchaseDate", "expirationDate") and value is not None:
            value = as_utc(value).date().isoformat()
        data[field] = value
    location = item.location
    data["location"] = (
        {"track": location["track"], "position": location["position"]} if location else None
    )
    return data


def compute_changes(item: InventoryItem, changes: Mapping[str, Any]) -> dict:
    """Field-level diff ``{field: {"from": old, "to": new}}`` for the audit log."""
    current = item_to_wire(item)
    diff = {}
    for field, new_value in changes.items():
        old_value = current.get(field)
        if field == "location":
            new_value = (
                {"track": new_value["track"], "position": new_value["position"]}
                if new_value
                else None
            )
        if field in _DATE_FIELDS and isinstance(new_value, (date, datetime)):
            new_value = _json_value(new_value)
        if _json_value(old_value) != _json_value(new_value):
            diff[field] = {"from": _json_value(old_value), "to": _json_value(new_value)}
    return diff


class InventoryRepository:
    def __init__(self, db: Session):
        self.db = db

    def _list(self, stmt, message: str) -> list[InventoryItem]:
        with store_call(self.db, message):
            rows = self.db.execute(stmt).scalars().all()
        return cast(list[InventoryItem], list(rows))

    def _sorted(self, stmt):
        return stmt.order_by(func.lower(InventoryItem.name), InventoryItem.id)

    def fetch_all(self) -> list[InventoryItem]:
        return self._list(self._sorted(select(InventoryItem)), "Failed to load inventory items")

    def get(self, item_id: str) -> InventoryItem:
        with store_call(self.db, "Failed to load inventory item"):
            item = self.db.get(InventoryItem, item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        return item

    def is_duplicate(self, name: str, company: str, batch_number: Optional[str] = None) -> bool:
        stmt = select(InventoryItem.id).where(
            InventoryItem.name == _strip(name),
            InventoryItem.company == _strip(company),
        )
        # A blank batch number matches any batch, the same as no batch number.
        if _strip(batch_number):
            stmt = stmt.where(InventoryItem.batch_number == _strip(batch_number))
        with store_call(self.db, "Failed to check for duplicates"):
            return self.db.execute(stmt.limit(1)).first() is not None

    def add(self, item_input, created_by: str) -> InventoryItem:
        """Unconditional write path; callers validate and de-duplicate first."""
        if not created_by:
            raise AuthError("A signed-in user is required to add inventory")
        data = _as_wire_dict(item_input)

        location = data.get("location") or {}
        location_data = build_location(location.get("track"), location.get("position"))

        now = utc_now()
        item = InventoryItem(
            name=_strip(data.get("name")),
            company=_strip(data.get("company")),
            volume=_strip(data.get("volume")),
            quantity=int(data.get("quantity") or 0),
            concentration=_strip_or_none(data.get("concentration")),
            purchase_date=to_utc_timestamp(data.get("purchaseDate")),
            expiration_date=to_utc_timestamp(data.get("expirationDate")),
            notes=_strip(data.get("notes")),
            batch_number=_strip_or_none(data.get("batchNumber")),
            serial_number=_strip_or_none(data.get("serialNumber")),
            cas_number=_strip_or_none(data.get("casNumber")),
            category=data.get("category"),
            barcode=_strip(data.get("barcode")),
            qr_code=_strip(data.get("qrCode")),
            status="active",
            created_by=created_by,
            created_at=now,
            updated_at=now,
            borrowed_by=None,
            borrowed_at=None,
            expected_return_date=None,
        )
        self._apply_location(item, location_data)

        with store_call(self.db, "Failed to add inventory item"):
            self.db.add(item)
            self.db.commit()
            self.db.refresh(item)
        logger.info(
            "Added inventory item %s (%s / %s)", item.id, item.name, item.company,
            extra={"item_id": item.id, "user_id": created_by},
        )
        return item

    @staticmethod
    def _apply_location(item: InventoryItem, location_data: Optional[dict]) -> None:
        if location_data is None:
            item.location_track = None
            item.location_position = None
            item.location_label = None
            item.location_description = None
            return
        item.location_track = location_data["track"]
        item.location_position = location_data["position"]
        item.location_label = location_data["label"]
        item.location_description = location_data["description"]

    def _column_values(self, changes: Mapping[str, Any]) -> dict:
        values = {}
        errors = {}
        for field, value in changes.items():
            if field in _PROTECTED_FIELDS:
                logger.warning("Ignoring attempt to change protected field %s", field)
                continue
            if field == "location":
                location = value or {}
                if isinstance(location, BaseModel):
                    location = location.model_dump()
                location_data = build_location(location.get("track"), location.get("position"))
                values["location_track"] = location_data and location_data["track"]
                values["location_position"] = location_data and location_data["position"]
                values["location_label"] = location_data and location_data["label"]
                values["location_description"] = location_data and location_data["description"]
                continue
            column = FIELD_COLUMNS.get(field) or (field if field in _COLUMN_FIELDS else None)
            if column is None:
                errors[field] = "Unknown field"
                continue
            wire_name = _COLUMN_FIELDS[column]
            if wire_name in _DATE_FIELDS:
                try:
                    value = to_utc_timestamp(value)
                except ValueError:
                    errors[field] = "Invalid date"
                    continue
            elif wire_name in _TRIMMED_FIELDS:
                value = _strip(value)
            elif wire_name in _NULLABLE_TEXT_FIELDS:
                value = _strip_or_none(value)
            elif wire_name == "notes":
                value = _strip(value)
            elif wire_name == "quantity" and isinstance(value, float) and value.is_integer():
                value = int(value)
            values[column] = value
        if errors:
            raise ValidationError(errors)
        return values

    def _stage_update(self, item_id: str, changes: Mapping[str, Any]) -> None:
        values = self._column_values(changes)
        values["updated_at"] = utc_now()
        result = self.db.execute(
            sa_update(InventoryItem)
            .where(InventoryItem.id == item_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self.db.rollback()
            raise ItemNotFoundError(item_id)

    def update(self, item_id: str, changes) -> None:
        """Merge ``changes`` (wire or column names) onto the stored item."""
        changes = _as_wire_dict(changes)
        with store_call(self.db, "Failed to update inventory item"):
            self._stage_update(item_id, changes)
            self.db.commit()
        self.db.expire_all()

    def _stage_history(self, item_id: str, changed_by: str, changes: Mapping[str, Any]) -> EditHistoryEntry:
        entry = EditHistoryEntry(
            item_id=item_id,
            action=HISTORY_ACTION_UPDATE,
            changed_by=changed_by,
            changed_at=utc_now(),
            changes={key: _json_value(value) for key, value in changes.items()},
        )
        self.db.add(entry)
        return entry

    def log_edit(self, item_id: str, changed_by: str, changes: Mapping[str, Any]) -> EditHistoryEntry:
        with store_call(self.db, "Failed to log edit history"):
            entry = self._stage_history(item_id, changed_by, changes)
            self.db.commit()
        return entry

    def update_with_history(self, item_id: str, changed_by: str, changes, diff) -> None:
        """``update`` and ``log_edit`` committed together."""
        changes = _as_wire_dict(changes)
        with store_call(self.db, "Failed to update inventory item"):
            self._stage_update(item_id, changes)
            if diff:
                self._stage_history(item_id, changed_by, diff)
            self.db.commit()
        self.db.expire_all()

    def list_history(self, item_id: str) -> list[EditHistoryEntry]:
        stmt = (
            select(EditHistoryEntry)
            .where(EditHistoryEntry.item_id == item_id)
            .order_by(EditHistoryEntry.changed_at.desc())
        )
        with store_call(self.db, "Failed to load edit history"):
            rows = self.db.execute(stmt).scalars().all()
        return cast(list[EditHistoryEntry], list(rows))

    def list_by_company(self, company: str) -> list[InventoryItem]:
        stmt = select(InventoryItem).where(InventoryItem.company == _strip(company))
        return self._list(self._sorted(stmt), "Failed to fetch items from {}".format(company))

    def list_by_category(self, category: str) -> list[InventoryItem]:
        stmt = select(InventoryItem).where(InventoryItem.category == category)
        return self._list(self._sorted(stmt), "Failed to fetch items from {}".format(category))

    def list_active(self) -> list[InventoryItem]:
        stmt = select(InventoryItem).where(InventoryItem.status == "active")
        return self._list(self._sorted(stmt), "Failed to fetch active items")

    def list_expired(self, now: Optional[datetime] = None) -> list[InventoryItem]:
        """Items past their expiration date that are still marked active."""
        now = now or utc_now()
        stmt = select(InventoryItem).where(
            InventoryItem.expiration_date.is_not(None),
            InventoryItem.expiration_date < now,
            InventoryItem.status == "active",
        )
        return self._list(self._sorted(stmt), "Failed to fetch expired items")

    def list_borrowed(self) -> list[InventoryItem]:
        stmt = select(InventoryItem).where(InventoryItem.borrowed_by.is_not(None))
        return self._list(self._sorted(stmt), "Failed to fetch borrowed items")

    def list_by_creator(self, user_id: str) -> list[InventoryItem]:
        stmt = select(InventoryItem).where(InventoryItem.created_by == user_id)
        return self._list(self._sorted(stmt), "Failed to fetch items created by user")

    def search(self, term: str) -> list[InventoryItem]:
        # Scans the whole collection in memory; fine while the catalog is small.
        needle = (term or "").strip().lower()
        try:
            items = self.fetch_all()
        except StoreError as exc:
            raise StoreError("Failed to search inventory") from exc

        def matches(item):
            for value in (item.name, item.company, item.batch_number, item.cas_number):
                if value and needle in value.lower():
                    return True
            return False

        return [item for item in items if matches(item)]

    def mark_expired(self, now: Optional[datetime] = None) -> int:
        """Flip active items whose expiration has passed to ``expired``."""
        now = now or utc_now()
        stmt = (
            sa_update(InventoryItem)
            .where(
                InventoryItem.expiration_date.is_not(None),
                InventoryItem.expiration_date < now,
                InventoryItem.status == "active",
            )
            .values(status="expired", updated_at=now)
            .execution_options(synchronize_session=False)
        )
        with store_call(self.db, "Failed to mark expired items"):
            result = self.db.execute(stmt)
            self.db.commit()
        self.db.expire_all()
        logger.info("Marked %d inventory item(s) as expired", result.rowcount)
        return result.rowcount


def create_inventory_item(db: Session, payload, actor) -> InventoryItem:
    require(actor, "inventory:create")
    data = _as_wire_dict(payload)

    result = validate_inventory_item(data)
    if not result.is_valid:
        logger.warning("Rejected inventory item: %s", ", ".join(sorted(result.errors)))
        raise ValidationError(result.errors)

    duplicate_check = validate_duplicate_input(data.get("name"), data.get("company"))
    if not duplicate_check.is_valid:
        raise ValidationError(duplicate_check.errors)

    repository = InventoryRepository(db)
    # Check-then-act: two concurrent creates can both pass this check.
    if repository.is_duplicate(data["name"], data["company"], data.get("batchNumber")):
        raise DuplicateError(
            _strip(data["name"]),
            _strip(data["company"]),
            _strip_or_none(data.get("batchNumber")),
        )
    return repository.add(data, actor.uid)


def _editable_changes(changes: Mapping[str, Any]) -> dict:
    """Client edits keyed by wire name; column names are accepted too."""
    editable = {}
    errors = {}
    for field, value in changes.items():
        if field in _PROTECTED_FIELDS:
            logger.warning("Ignoring attempt to change protected field %s", field)
            continue
        field = _COLUMN_FIELDS.get(field, field)
        if field in _CHECKOUT_FIELDS:
            errors[field] = "Changed only by checkout and return"
        elif field != "location" and field not in FIELD_COLUMNS:
            errors[field] = "Unknown field"
        else:
            editable[field] = value
    if errors:
        raise ValidationError(errors)
    return editable


def update_inventory_item(db: Session, item_id: str, changes, actor) -> InventoryItem:
    repository = InventoryRepository(db)
    item = repository.get(item_id)
    require(actor, "inventory:update", item)

    changes = _editable_changes(_as_wire_dict(changes))
    if "status" in changes and changes["status"] not in ("active", "expired", "archived"):
        raise ValidationError({"status": "Status must be active, expired or archived"})

    merged = item_to_wire(item)
    merged.update({key: value for key, value in changes.items() if key != "status"})
    result = validate_inventory_item(merged)
    if not result.is_valid:
        raise ValidationError(result.errors)

    diff = compute_changes(item, changes)
    repository.update_with_history(item_id, actor.uid, changes, diff)
    return repository.get(item_id)


__all__ = [
    "FIELD_COLUMNS",
    "InventoryRepository",
    "compute_changes",
    "create_inventory_item",
    "item_to_wire",
    "store_call",
    "update_inventory_item",
]
