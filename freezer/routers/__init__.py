from freezer.routers.checkouts import router as checkouts_router
from freezer.routers.health import router as health_router
from freezer.routers.inventory import router as inventory_router
from freezer.routers.locations import router as locations_router
from freezer.routers.users import router as users_router

__all__ = [
    "checkouts_router",
    "health_router",
    "inventory_router",
    "locations_router",
    "users_router",
]
