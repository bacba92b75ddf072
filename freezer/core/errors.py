from __future__ import annotations

from typing import Mapping, Optional


class FreezerError(Exception):
    """Base class for domain errors raised by the inventory core."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(FreezerError):
    """User-correctable input problems, keyed by field name."""

    def __init__(self, errors: Mapping[str, str], message: Optional[str] = None):
        self.errors = dict(errors)
        super().__init__(message or "\n".join(self.errors.values()) or "Invalid input")


class DuplicateError(FreezerError):
    def __init__(self, name: str, company: str, batch_number: Optional[str] = None):
        self.name = name
        self.company = company
        self.batch_number = batch_number
        message = "An item named '{}' from '{}' already exists".format(name, company)
        if batch_number:
            message = "{} (batch {})".format(message, batch_number)
        super().__init__(message)


class DuplicateUserError(DuplicateError):
    def __init__(self, email: str):
        self.email = email
        FreezerError.__init__(self, "A user with email '{}' already exists".format(email))


class StoreError(FreezerError):
    """Persistence failure with a stable, non-leaking message."""


class StoreTimeoutError(StoreError):
    pass


class ItemNotFoundError(StoreError):
    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__("Inventory item not found")


class CheckoutNotFoundError(StoreError):
    def __init__(self, checkout_id: str):
        self.checkout_id = checkout_id
        super().__init__("Checkout record not found")


class UserNotFoundError(StoreError):
    def __init__(self, uid: str):
        self.uid = uid
        super().__init__("User not found")


class CheckoutConflictError(FreezerError):
    """The item's borrow state does not allow the requested transition."""


class AuthError(FreezerError):
    """Missing, invalid or expired identity."""


class PermissionDeniedError(FreezerError):
    def __init__(self, action: str):
        self.action = action
        super().__init__("Insufficient permissions for {}".format(action))


__all__ = [
    "AuthError",
    "CheckoutConflictError",
    "CheckoutNotFoundError",
    "DuplicateError",
    "DuplicateUserError",
    "FreezerError",
    "ItemNotFoundError",
    "PermissionDeniedError",
    "StoreError",
    "StoreTimeoutError",
    "UserNotFoundError",
    "ValidationError",
]
