from freezer.schemas.common import WireModel
from freezer.schemas.inventory import InventoryItemRead


class LocationSlotRead(WireModel):
    track: int
    position: int
    label: str
    count: int
    status: str
    color: str
    items: list[InventoryItemRead]
    active_items: list[InventoryItemRead]
    expired_items: list[InventoryItemRead]


class LocationSummaryRead(WireModel):
    active_items: int
    expired_items: int
    empty_slots: int
    used_slots: int
    total_slots: int


class LocationMapRead(WireModel):
    slots: list[LocationSlotRead]
    summary: LocationSummaryRead
