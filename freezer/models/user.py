from sqlalchemy import Column, DateTime, String, UniqueConstraint

from freezer.core.dates import utc_now
from freezer.database.base import Base


class User(Base):
    __tablename__ = "users"

    uid = Column(String(128), primary_key=True)
    email = Column(String(255), nullable=False)
    name = Column(String(100))
    role = Column(String(16), nullable=False, default="student")

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
    )


__all__ = ["User"]
