from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String

from freezer.core.dates import utc_now
from freezer.database.base import Base
from freezer.models._ids import new_id


class Checkout(Base):
    __tablename__ = "checkouts"

    id = Column(String(32), primary_key=True, default=new_id)
    inventory_id = Column(String(32), ForeignKey("inventory_items.id"), nullable=False)
    user_id = Column(String(128), nullable=False)

    checked_out_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    quantity = Column(Integer, nullable=False)
    expected_return_date = Column(DateTime(timezone=True), nullable=False)
    status = Column(String(16), nullable=False, default="active")
    purpose = Column(String(500))
    returned_at = Column(DateTime(timezone=True))

    __table_args__ = (
        Index("idx_checkouts_item_status", "inventory_id", "status"),
        Index("idx_checkouts_user", "user_id"),
    )


__all__ = ["Checkout"]
