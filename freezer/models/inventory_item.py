from sqlalchemy import Column, DateTime, Index, Integer, String, Text

from freezer.core.dates import utc_now
from freezer.database.base import Base
from freezer.models._ids import new_id


class InventoryItem(Base):
    __tablename__ = "inventory_items"

    id = Column(String(32), primary_key=True, default=new_id)

    name = Column(String(100), nullable=False)
    company = Column(String(100), nullable=False)
    volume = Column(String(50), nullable=False)
    quantity = Column(Integer, nullable=False, default=0)
    concentration = Column(String(50))
    notes = Column(Text, nullable=False, default="")

    category = Column(String(8), nullable=False)
    barcode = Column(String(100), nullable=False)
    qr_code = Column(String(100), nullable=False)

    batch_number = Column(String(50))
    serial_number = Column(String(50))
    cas_number = Column(String(50))

    purchase_date = Column(DateTime(timezone=True))
    expiration_date = Column(DateTime(timezone=True))

    location_track = Column(Integer)
    location_position = Column(Integer)
    location_label = Column(String(16))
    location_description = Column(String(100))

    status = Column(String(16), nullable=False, default="active")
    created_by = Column(String(128), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    borrowed_by = Column(String(128))
    borrowed_at = Column(DateTime(timezone=True))
    expected_return_date = Column(DateTime(timezone=True))

    __table_args__ = (
        Index("idx_inventory_business_key", "name", "company", "batch_number"),
        Index("idx_inventory_category", "category"),
        Index("idx_inventory_status", "status"),
        Index("idx_inventory_created_by", "created_by"),
    )

    @property
    def location(self):
        if self.location_track is None or self.location_position is None:
            return None
        return {
            "track": self.location_track,
            "position": self.location_position,
            "label": self.location_label,
            "description": self.location_description,
        }

    @property
    def is_borrowed(self) -> bool:
        return self.borrowed_by is not None

    def __repr__(self):
        return "<InventoryItem {} {!r} ({})>".format(self.id, self.name, self.company)


__all__ = ["InventoryItem"]
