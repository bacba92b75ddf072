from sqlalchemy.orm import Session

from freezer.core.occupancy import build_location_map, summarize_location_map
from freezer.services.inventory_service import InventoryRepository


def load_location_map(db: Session) -> dict:
    """Occupancy of the freezer grid from the live item list."""
    items = InventoryRepository(db).fetch_all()
    slots = build_location_map(items)
    return {"slots": slots, "summary": summarize_location_map(slots, items)}


__all__ = ["load_location_map"]
