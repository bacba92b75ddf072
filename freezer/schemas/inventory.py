from typing import Any, Literal, Optional

from freezer.schemas.common import UtcDatetime, WireModel

Category = Literal["4C", "-20C"]
ItemStatus = Literal["active", "expired", "archived"]


class LocationRead(WireModel):
    track: int
    position: int
    label: str
    description: str


class InventoryItemBase(WireModel):
    name: str
    company: str
    volume: str
    quantity: int
    category: Category
    barcode: str
    qr_code: str
    concentration: Optional[str] = None
    batch_number: Optional[str] = None
    serial_number: Optional[str] = None
    cas_number: Optional[str] = None
    notes: Optional[str] = None


class InventoryItemRead(InventoryItemBase):
    id: str
    notes: str = ""
    purchase_date: Optional[UtcDatetime] = None
    expiration_date: Optional[UtcDatetime] = None
    location: Optional[LocationRead] = None
    location_label: Optional[str] = None
    status: ItemStatus
    created_by: str
    created_at: UtcDatetime
    updated_at: UtcDatetime
    borrowed_by: Optional[str] = None
    borrowed_at: Optional[UtcDatetime] = None
    expected_return_date: Optional[UtcDatetime] = None


class EditHistoryRead(WireModel):
    id: str
    item_id: str
    action: str
    changed_by: str
    changed_at: UtcDatetime
    changes: dict[str, Any]


class InventoryListRead(WireModel):
    success: bool = True
    data: list[InventoryItemRead]
    total: int
