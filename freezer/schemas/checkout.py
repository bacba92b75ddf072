from datetime import date
from typing import Literal, Optional

from freezer.schemas.common import UtcDatetime, WireModel


class CheckoutCreate(WireModel):
    quantity: int
    expected_return_date: Optional[date] = None
    purpose: Optional[str] = None


class CheckoutRead(WireModel):
    id: str
    inventory_id: str
    user_id: str
    checked_out_at: UtcDatetime
    quantity: int
    expected_return_date: UtcDatetime
    status: Literal["active", "returned"]
    purpose: Optional[str] = None
    returned_at: Optional[UtcDatetime] = None
