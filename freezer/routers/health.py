from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from freezer.config import get_settings
from freezer.core.errors import StoreError
from freezer.dependencies import get_db
from freezer.services.inventory_service import store_call

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(db: Session = Depends(get_db)):
    settings = get_settings()
    store = "ok"
    try:
        with store_call(db, "Store health check failed"):
            db.execute(text("SELECT 1"))
    except StoreError:
        store = "unavailable"
    return {
        "status": "ok" if store == "ok" else "degraded",
        "app": settings.APP_NAME,
        "environment": settings.ENVIRONMENT,
        "store": store,
        "time": datetime.now(timezone.utc).isoformat(),
    }
