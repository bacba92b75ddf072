from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional

from freezer.core.constants import FULL_SLOT_COUNT, MODERATE_SLOT_COUNT
from freezer.core.location import generate_location_label, iter_slots

SLOT_STATUS_EMPTY = "empty"
SLOT_STATUS_EXPIRED = "expired"
SLOT_STATUS_FULL = "full"
SLOT_STATUS_MODERATE = "moderate"
SLOT_STATUS_LOW = "low"

SLOT_COLORS = {
    SLOT_STATUS_EMPTY: "#f3f4f6",
    SLOT_STATUS_EXPIRED: "#fee2e2",
    SLOT_STATUS_FULL: "#dcfce7",
    SLOT_STATUS_MODERATE: "#e0e7ff",
    SLOT_STATUS_LOW: "#fef3c7",
}


@dataclass
class LocationSlotSummary:
    track: int
    position: int
    label: str
    items: list = field(default_factory=list)
    active_items: list = field(default_factory=list)
    expired_items: list = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.items)

    @property
    def status(self) -> str:
        return slot_status(self)

    @property
    def color(self) -> str:
        return SLOT_COLORS[self.status]


def _read(obj: Any, key: str):
    if obj is None:
        return None
    if isinstance(obj, Mapping):
        return obj.get(key)
    return getattr(obj, key, None)


def _item_label(item) -> Optional[str]:
    label = _read(_read(item, "location"), "label")
    if label:
        return label
    return _read(item, "locationLabel") or _read(item, "location_label")


def slot_status(slot: LocationSlotSummary) -> str:
    # Expired items outrank stock level.
    if slot.count == 0:
        return SLOT_STATUS_EMPTY
    if slot.expired_items:
        return SLOT_STATUS_EXPIRED
    if slot.count >= FULL_SLOT_COUNT:
        return SLOT_STATUS_FULL
    if slot.count >= MODERATE_SLOT_COUNT:
        return SLOT_STATUS_MODERATE
    return SLOT_STATUS_LOW


def build_location_map(items: Iterable) -> list[LocationSlotSummary]:
    slots = {}
    for track, position in iter_slots():
        label = generate_location_label(track, position)
        slots[label] = LocationSlotSummary(track=track, position=position, label=label)

    for item in items:
        slot = slots.get(_item_label(item))
        if slot is None:
            continue
        slot.items.append(item)
        status = _read(item, "status")
        if status == "expired":
            slot.expired_items.append(item)
        elif status == "active":
            slot.active_items.append(item)

    return sorted(slots.values(), key=lambda slot: (slot.track, slot.position))


def summarize_location_map(slots: list[LocationSlotSummary], items: Iterable) -> dict:
    items = list(items)
    return {
        "activeItems": sum(1 for item in items if _read(item, "status") == "active"),
        "expiredItems": sum(1 for item in items if _read(item, "status") == "expired"),
        "emptySlots": sum(1 for slot in slots if slot.count == 0),
        "usedSlots": sum(1 for slot in slots if slot.count > 0),
        "totalSlots": len(slots),
    }


__all__ = [
    "LocationSlotSummary",
    "SLOT_COLORS",
    "build_location_map",
    "slot_status",
    "summarize_location_map",
]
