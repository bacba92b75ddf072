from sqlalchemy import JSON, Column, DateTime, ForeignKey, Index, String

from freezer.core.dates import utc_now
from freezer.database.base import Base
from freezer.models._ids import new_id


class EditHistoryEntry(Base):
    """Append-only audit row; one per item update."""

    __tablename__ = "inventory_history"

    id = Column(String(32), primary_key=True, default=new_id)
    item_id = Column(String(32), ForeignKey("inventory_items.id"), nullable=False)
    action = Column(String(32), nullable=False, default="update")
    changed_by = Column(String(128), nullable=False)
    changed_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    changes = Column(JSON, nullable=False, default=dict)

    __table_args__ = (
        Index("idx_history_item_changed", "item_id", "changed_at"),
    )


__all__ = ["EditHistoryEntry"]
