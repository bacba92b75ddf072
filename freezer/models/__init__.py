import importlib

from freezer.models.checkout import Checkout
from freezer.models.edit_history import EditHistoryEntry
from freezer.models.inventory_item import InventoryItem
from freezer.models.user import User


def import_all_models() -> None:
    for module_name in (
        "freezer.models.checkout",
        "freezer.models.edit_history",
        "freezer.models.inventory_item",
        "freezer.models.user",
    ):
        importlib.import_module(module_name)


__all__ = [
    "Checkout",
    "EditHistoryEntry",
    "InventoryItem",
    "User",
    "import_all_models",
]
