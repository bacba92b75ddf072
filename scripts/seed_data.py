import argparse
import logging

from sqlalchemy import delete, select

from freezer.core.logging import setup_logging
from freezer.core.security import Identity
from freezer.database import Base, engine, session_scope
from freezer.models import Checkout, EditHistoryEntry, InventoryItem, import_all_models
from freezer.services.inventory_service import create_inventory_item

logger = logging.getLogger(__name__)

SEED_USER = Identity(uid="seed-admin", email="seed-admin@example.com", role="superadmin")

SAMPLE_ITEMS = [
    {
        "name": "Sodium Chloride",
        "company": "Sigma-Aldrich",
        "volume": "500 g",
        "quantity": 10,
        "category": "4C",
        "barcode": "123456789",
        "qrCode": "QR001",
        "batchNumber": "BATCH-2024-001",
        "serialNumber": "SN-001",
        "casNumber": "7647-14-5",
        "expirationDate": "2026-12-31",
        "location": {"track": 1, "position": 1},
    },
    {
        "name": "Potassium Iodide",
        "company": "Fisher Scientific",
        "volume": "250 g",
        "quantity": 5,
        "category": "-20C",
        "barcode": "987654321",
        "qrCode": "QR002",
        "batchNumber": "BATCH-2024-002",
        "serialNumber": "SN-002",
        "casNumber": "7681-11-0",
        "expirationDate": "2027-06-30",
        "location": {"track": 2, "position": 2},
    },
    {
        "name": "Ethanol",
        "company": "VWR",
        "volume": "1000 mL",
        "quantity": 20,
        "category": "4C",
        "barcode": "111222333",
        "qrCode": "QR003",
        "batchNumber": "BATCH-2024-003",
        "serialNumber": "SN-003",
        "casNumber": "64-17-5",
        "expirationDate": "2025-12-31",
        "location": {"track": 3, "position": 1},
    },
]


def parse_args():
    parser = argparse.ArgumentParser(description="Seed sample freezer inventory.")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Clear existing inventory before seeding.",
    )
    return parser.parse_args()


def main():
    setup_logging()
    args = parse_args()

    import_all_models()
    Base.metadata.create_all(bind=engine)

    with session_scope() as db:
        if args.reset:
            db.execute(delete(Checkout))
            db.execute(delete(EditHistoryEntry))
            db.execute(delete(InventoryItem))
            db.commit()

        if db.execute(select(InventoryItem.id).limit(1)).first():
            print("Seed skipped: inventory already exists.")
            return

        for payload in SAMPLE_ITEMS:
            item = create_inventory_item(db, payload, SEED_USER)
            logger.info("Seeded %s at %s", item.name, item.location_label)
        print("Seeded {} inventory item(s).".format(len(SAMPLE_ITEMS)))


if __name__ == "__main__":
    main()
