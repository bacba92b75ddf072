from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from freezer.core.permissions import require
from freezer.core.security import Identity
from freezer.dependencies import get_current_identity, get_db
from freezer.schemas.location import LocationMapRead, LocationSlotRead, LocationSummaryRead
from freezer.services.location_service import load_location_map

router = APIRouter(prefix="/locations", tags=["Locations"])


@router.get("", response_model=LocationMapRead)
def get_location_map(
    db: Session = Depends(get_db),
    actor: Identity = Depends(get_current_identity),
):
    require(actor, "locations:read")
    location_map = load_location_map(db)
    return LocationMapRead(
        slots=[LocationSlotRead.model_validate(slot) for slot in location_map["slots"]],
        summary=LocationSummaryRead.model_validate(location_map["summary"]),
    )


__all__ = ["router"]
