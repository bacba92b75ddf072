from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from freezer.core.security import Identity
from freezer.database.base import Base
from freezer.models import import_all_models

STUDENT = Identity(uid="student-1", email="student@example.com", role="student")
OTHER_STUDENT = Identity(uid="student-2", email="other@example.com", role="student")
ADMIN = Identity(uid="admin-1", email="admin@example.com", role="admin")
SUPERADMIN = Identity(uid="super-1", email="super@example.com", role="superadmin")


def make_session_factory():
    import_all_models()
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return sessionmaker(bind=engine, expire_on_commit=False), engine


def sample_item(**overrides):
    item = {
        "name": "Sodium Chloride",
        "company": "Sigma-Aldrich",
        "volume": "500 g",
        "quantity": 10,
        "category": "4C",
        "barcode": "123456789",
        "qrCode": "QR001",
        "location": {"track": 1, "position": 1},
    }
    item.update(overrides)
    return item
