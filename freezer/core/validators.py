"""Field validation for inventory items.

All validators here are pure: they never raise for bad input and never touch
the store. Results are field-keyed messages meant to be shown verbatim.
"""
import re
from typing import Mapping

from pydantic import BaseModel

from freezer.core.constants import CATEGORIES, MAX_NOTES_LENGTH, MAX_QUANTITY
from freezer.core.dates import is_valid_date_string
from freezer.core.location import validate_location
from freezer.core.result import ValidationResult

_BATCH_NUMBER_RE = re.compile(r"[A-Z0-9\-]+")
_CAS_NUMBER_RE = re.compile(r"[0-9]+-[0-9]+-[0-9]+")

REQUIRED_FIELDS = ("name", "company", "volume", "quantity", "category", "barcode", "qrCode")


def _as_mapping(item) -> Mapping:
    if item is None:
        return {}
    if isinstance(item, BaseModel):
        return item.model_dump(by_alias=True)
    return item


def _text(value) -> str:
    if value is None:
        return ""
    return str(value)


def _check_length(errors, field, value, *, label, minimum, maximum, missing):
    text = _text(value).strip()
    if not text:
        errors[field] = missing
    elif len(text) < minimum:
        errors[field] = "{} must be at least {} characters".format(label, minimum)
    elif len(text) > maximum:
        errors[field] = "{} must be less than {} characters".format(label, maximum)


def _check_quantity(errors, value):
    if value is None or value == "":
        errors["quantity"] = "Quantity is required"
        return
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        errors["quantity"] = "Quantity must be a whole number"
    elif value < 0:
        errors["quantity"] = "Quantity cannot be negative"
    elif value > MAX_QUANTITY:
        errors["quantity"] = "Quantity exceeds maximum"
    elif not float(value).is_integer():
        errors["quantity"] = "Quantity must be a whole number"


def validate_inventory_item(item) -> ValidationResult:
    data = _as_mapping(item)
    errors: dict[str, str] = {}

    # Required fields
    _check_length(
        errors, "name", data.get("name"),
        label="Item name", minimum=2, maximum=100, missing="Item name is required",
    )
    _check_length(
        errors, "company", data.get("company"),
        label="Company name", minimum=2, maximum=100,
        missing="Company/supplier name is required",
    )
    _check_length(
        errors, "volume", data.get("volume"),
        label="Volume", minimum=2, maximum=50, missing="Volume is required",
    )
    _check_quantity(errors, data.get("quantity"))

    category = data.get("category")
    if not category:
        errors["category"] = "Temperature zone is required"
    elif category not in CATEGORIES:
        errors["category"] = "Category must be 4C or -20C"

    _check_length(
        errors, "barcode", data.get("barcode"),
        label="Barcode", minimum=3, maximum=100, missing="Barcode is required",
    )
    _check_length(
        errors, "qrCode", data.get("qrCode"),
        label="QR code", minimum=3, maximum=100, missing="QR code is required",
    )

    # Optional fields
    concentration = _text(data.get("concentration"))
    if concentration and len(concentration.strip()) > 50:
        errors["concentration"] = "Concentration must be less than 50 characters"

    batch_number = _text(data.get("batchNumber"))
    if batch_number.strip():
        if not _BATCH_NUMBER_RE.fullmatch(batch_number):
            errors["batchNumber"] = (
                "Batch number format invalid (uppercase letters, numbers, hyphens only)"
            )
        elif len(batch_number) > 50:
            errors["batchNumber"] = "Batch number must be less than 50 characters"

    serial_number = _text(data.get("serialNumber"))
    if serial_number.strip() and len(serial_number) > 50:
        errors["serialNumber"] = "Serial number must be less than 50 characters"

    cas_number = _text(data.get("casNumber"))
    if cas_number.strip() and not _CAS_NUMBER_RE.fullmatch(cas_number):
        errors["casNumber"] = "CAS number format must be XXX-XX-X (e.g., 7732-18-5)"

    # Dates
    purchase_date = data.get("purchaseDate")
    expiration_date = data.get("expirationDate")
    if purchase_date and not is_valid_date_string(purchase_date):
        errors["purchaseDate"] = "Invalid purchase date"
    if expiration_date and not is_valid_date_string(expiration_date):
        errors["expirationDate"] = "Invalid expiration date"

    # ISO strings of valid dates order the same way the dates do.
    if (
        is_valid_date_string(purchase_date)
        and is_valid_date_string(expiration_date)
        and expiration_date <= purchase_date
    ):
        errors["expirationDate"] = "Expiration date must be after purchase date"

    location = data.get("location")
    if location is not None:
        location_result = validate_location(location)
        if not location_result.is_valid:
            errors["location"] = location_result.first_error()

    notes = _text(data.get("notes"))
    if len(notes) > MAX_NOTES_LENGTH:
        errors["notes"] = "Notes must be less than {} characters".format(MAX_NOTES_LENGTH)

    return ValidationResult(errors=errors)


def validate_duplicate_input(name, company) -> ValidationResult:
    """Presence checks run before a duplicate lookup."""
    errors = {}
    if not _text(name).strip():
        errors["name"] = "Name required for duplicate check"
    if not _text(company).strip():
        errors["company"] = "Company required for duplicate check"
    return ValidationResult(errors=errors)


def validate_checkout_request(quantity, expected_return_date=None) -> ValidationResult:
    errors = {}
    if quantity is None:
        errors["quantity"] = "Quantity is required"
    elif isinstance(quantity, bool) or not isinstance(quantity, int):
        errors["quantity"] = "Quantity must be a whole number"
    elif quantity < 1:
        errors["quantity"] = "Quantity must be at least 1"
    elif quantity > MAX_QUANTITY:
        errors["quantity"] = "Quantity exceeds maximum"

    if isinstance(expected_return_date, str) and expected_return_date:
        if not is_valid_date_string(expected_return_date):
            errors["expectedReturnDate"] = "Invalid expected return date"
    return ValidationResult(errors=errors)


def is_inventory_item_complete(item) -> bool:
    data = _as_mapping(item)
    for field in REQUIRED_FIELDS:
        value = data.get(field)
        if field == "quantity":
            if value is None:
                return False
        elif not value:
            return False
    return True


def sanitize_input(value: str) -> str:
    text = value.strip().replace("<", "").replace(">", "")
    return text.replace("&", "&amp;")[:MAX_NOTES_LENGTH]


def format_validation_errors(errors: Mapping[str, str]) -> str:
    return "\n".join(errors.values())


__all__ = [
    "REQUIRED_FIELDS",
    "ValidationResult",
    "format_validation_errors",
    "is_inventory_item_complete",
    "sanitize_input",
    "validate_checkout_request",
    "validate_duplicate_input",
    "validate_inventory_item",
    "validate_location",
]
