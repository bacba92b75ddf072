from pathlib import Path


PACKAGE_DIR = Path(__file__).resolve().parents[1]
PROJECT_ROOT = PACKAGE_DIR.parent

CATEGORIES = ("4C", "-20C")
ITEM_STATUSES = ("active", "expired", "archived")
CHECKOUT_STATUSES = ("active", "returned")
ROLES = ("student", "admin", "superadmin")

TRACK_COUNT = 3
POSITION_COUNT = 2
TRACK_NAMES = ("Top", "Middle", "Bottom")
POSITION_NAMES = ("Left", "Right")

MAX_QUANTITY = 999999
MAX_NOTES_LENGTH = 500

# Occupancy thresholds for the location map.
FULL_SLOT_COUNT = 5
MODERATE_SLOT_COUNT = 2

HISTORY_ACTION_UPDATE = "update"
