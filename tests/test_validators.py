import unittest
from datetime import date, timedelta
from typing import Optional

from support import sample_item

from freezer.core.validators import (
    format_validation_errors,
    is_inventory_item_complete,
    sanitize_input,
    validate_checkout_request,
    validate_duplicate_input,
    validate_inventory_item,
)
from freezer.schemas.common import WireModel


class ItemForm(WireModel):
    name: str
    company: str
    volume: str
    quantity: int
    category: str
    barcode: str
    qr_code: str
    batch_number: Optional[str] = None
    location: Optional[dict] = None


class ValidateInventoryItemTest(unittest.TestCase):
    def test_example_item_is_valid(self):
        result = validate_inventory_item(sample_item())
        self.assertTrue(result.is_valid)
        self.assertEqual(result.errors, {})

    def test_accepts_pydantic_model(self):
        model = ItemForm.model_validate(sample_item(batchNumber="BATCH-1"))
        self.assertTrue(validate_inventory_item(model).is_valid)

        model = ItemForm.model_validate(sample_item(qrCode="Q"))
        self.assertEqual(list(validate_inventory_item(model).errors), ["qrCode"])

    def test_single_rule_violation_flags_only_that_field(self):
        cases = [
            ("name", ""),
            ("name", "A"),
            ("name", "x" * 101),
            ("company", "  "),
            ("company", "B"),
            ("company", "c" * 101),
            ("volume", None),
            ("volume", "5"),
            ("volume", "v" * 51),
            ("quantity", None),
            ("quantity", -1),
            ("quantity", 1000000),
            ("quantity", 2.5),
            ("quantity", "ten"),
            ("category", None),
            ("category", "8C"),
            ("barcode", "12"),
            ("barcode", "b" * 101),
            ("qrCode", ""),
            ("qrCode", "Q1"),
            ("concentration", "c" * 51),
            ("batchNumber", "batch-1"),
            ("batchNumber", "B" * 51),
            ("serialNumber", "S" * 51),
            ("casNumber", "abc"),
            ("casNumber", "7732-18"),
            ("purchaseDate", "2024-13-01"),
            ("purchaseDate", "2024/01/01"),
            ("expirationDate", "2024-02-30"),
            ("location", {"track": 5, "position": 1}),
            ("notes", "n" * 501),
        ]
        for field, value in cases:
            with self.subTest(field=field, value=value):
                result = validate_inventory_item(sample_item(**{field: value}))
                self.assertFalse(result.is_valid)
                self.assertEqual(set(result.errors), {field})

    def test_messages(self):
        result = validate_inventory_item(sample_item(quantity=-1))
        self.assertEqual(result.errors["quantity"], "Quantity cannot be negative")

        result = validate_inventory_item(sample_item(name="x" * 101))
        self.assertEqual(result.errors["name"], "Item name must be less than 100 characters")

        result = validate_inventory_item(sample_item(name=""))
        self.assertEqual(result.errors["name"], "Item name is required")

        result = validate_inventory_item(sample_item(category="8C"))
        self.assertEqual(result.errors["category"], "Category must be 4C or -20C")

        result = validate_inventory_item(sample_item(quantity=2.5))
        self.assertEqual(result.errors["quantity"], "Quantity must be a whole number")

    def test_boundaries_pass(self):
        cases = [
            ("name", "ab"),
            ("name", "x" * 100),
            ("volume", "v" * 50),
            ("quantity", 0),
            ("quantity", 999999),
            ("barcode", "123"),
            ("concentration", "c" * 50),
            ("batchNumber", "B" * 50),
            ("serialNumber", "s" * 50),
            ("notes", "n" * 500),
            ("category", "-20C"),
        ]
        for field, value in cases:
            with self.subTest(field=field, value=value):
                self.assertTrue(validate_inventory_item(sample_item(**{field: value})).is_valid)

    def test_cas_number_format(self):
        result = validate_inventory_item(sample_item(casNumber="abc"))
        self.assertEqual(
            result.errors["casNumber"],
            "CAS number format must be XXX-XX-X (e.g., 7732-18-5)",
        )
        self.assertTrue(validate_inventory_item(sample_item(casNumber="7732-18-5")).is_valid)

    def test_blank_optional_fields_are_ignored(self):
        item = sample_item(
            concentration="",
            batchNumber="   ",
            serialNumber="",
            casNumber="",
            purchaseDate="",
            expirationDate=None,
            location=None,
            notes="",
        )
        self.assertTrue(validate_inventory_item(item).is_valid)

    def test_expiration_after_purchase(self):
        start = date(2024, 1, 1)
        for days in (1, 30, 400):
            with self.subTest(days=days):
                item = sample_item(
                    purchaseDate=start.isoformat(),
                    expirationDate=(start + timedelta(days=days)).isoformat(),
                )
                self.assertTrue(validate_inventory_item(item).is_valid)

    def test_expiration_not_after_purchase(self):
        start = date(2024, 6, 15)
        for days in (0, 1, 365):
            with self.subTest(days=days):
                item = sample_item(
                    purchaseDate=start.isoformat(),
                    expirationDate=(start - timedelta(days=days)).isoformat(),
                )
                result = validate_inventory_item(item)
                self.assertEqual(
                    result.errors,
                    {"expirationDate": "Expiration date must be after purchase date"},
                )

    def test_location_surfaces_first_error(self):
        result = validate_inventory_item(sample_item(location={"track": 9, "position": 9}))
        self.assertEqual(result.errors, {"location": "Track must be between 1 and 3"})

    def test_empty_location_object_is_checked(self):
        result = validate_inventory_item(sample_item(location={}))
        self.assertEqual(result.errors, {"location": "Track is required"})

        result = validate_inventory_item(sample_item(location={"track": 2}))
        self.assertEqual(result.errors, {"location": "Position is required"})

    def test_numeric_text_fields_are_read_as_text(self):
        self.assertTrue(validate_inventory_item(sample_item(barcode=123456789, qrCode=1001)).is_valid)

    def test_all_violations_collected(self):
        result = validate_inventory_item({})
        self.assertEqual(
            set(result.errors),
            {"name", "company", "volume", "quantity", "category", "barcode", "qrCode"},
        )


class CompanionValidatorsTest(unittest.TestCase):
    def test_duplicate_input_presence(self):
        self.assertTrue(validate_duplicate_input("Ethanol", "VWR").is_valid)
        result = validate_duplicate_input(" ", None)
        self.assertEqual(
            result.errors,
            {
                "name": "Name required for duplicate check",
                "company": "Company required for duplicate check",
            },
        )

    def test_checkout_request(self):
        self.assertTrue(validate_checkout_request(1).is_valid)
        self.assertTrue(validate_checkout_request(2, "2030-01-01").is_valid)
        self.assertIn("quantity", validate_checkout_request(0).errors)
        self.assertIn("quantity", validate_checkout_request(None).errors)
        self.assertIn("expectedReturnDate", validate_checkout_request(1, "soon").errors)

    def test_item_completeness(self):
        self.assertTrue(is_inventory_item_complete(sample_item(quantity=0)))
        self.assertFalse(is_inventory_item_complete(sample_item(qrCode="")))

    def test_sanitize_input(self):
        self.assertEqual(sanitize_input("  <b>Salt & Pepper</b> "), "bSalt &amp; Pepper/b")
        self.assertEqual(len(sanitize_input("x" * 600)), 500)

    def test_format_errors(self):
        self.assertEqual(
            format_validation_errors({"name": "Item name is required", "quantity": "Quantity is required"}),
            "Item name is required\nQuantity is required",
        )


if __name__ == "__main__":
    unittest.main()
