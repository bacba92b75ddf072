import argparse
import logging
from datetime import datetime, timezone

from freezer.core.logging import setup_logging
from freezer.database import session_scope
from freezer.services.inventory_service import InventoryRepository

logger = logging.getLogger(__name__)


def parse_args():
    parser = argparse.ArgumentParser(description="Mark active items past their expiration date as expired.")
    parser.add_argument(
        "--as-of",
        help="Treat this YYYY-MM-DD date as today (defaults to now).",
    )
    return parser.parse_args()


def main():
    setup_logging()
    args = parse_args()
    now = None
    if args.as_of:
        day = datetime.strptime(args.as_of, "%Y-%m-%d")
        now = day.replace(tzinfo=timezone.utc)

    with session_scope() as db:
        updated = InventoryRepository(db).mark_expired(now)
    logger.info("Expiry sweep finished: %d item(s) updated", updated)


if __name__ == "__main__":
    main()
