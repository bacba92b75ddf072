from freezer.services.checkout_service import CheckoutService
from freezer.services.inventory_service import (
    InventoryRepository,
    create_inventory_item,
    update_inventory_item,
)
from freezer.services.location_service import load_location_map

__all__ = [
    "CheckoutService",
    "InventoryRepository",
    "create_inventory_item",
    "load_location_map",
    "update_inventory_item",
]
