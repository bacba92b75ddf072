import unittest

from freezer.core.location import (
    build_location,
    generate_location_description,
    generate_location_label,
    iter_slots,
    validate_location,
)


class LocationLabelTest(unittest.TestCase):
    def test_labels_for_every_slot(self):
        labels = set()
        for track, position in iter_slots():
            with self.subTest(track=track, position=position):
                label = generate_location_label(track, position)
                self.assertEqual(label, "T{}-P{}".format(track, position))
                labels.add(label)
        self.assertEqual(len(labels), 6)

    def test_slots_are_ordered(self):
        self.assertEqual(
            list(iter_slots()),
            [(1, 1), (1, 2), (2, 1), (2, 2), (3, 1), (3, 2)],
        )

    def test_description_names_track_and_position(self):
        self.assertEqual(
            generate_location_description(1, 1),
            "Track 1 (Top), Position 1 (Left)",
        )
        self.assertEqual(
            generate_location_description(3, 2),
            "Track 3 (Bottom), Position 2 (Right)",
        )

    def test_description_falls_back_to_number(self):
        self.assertEqual(
            generate_location_description(4, 3),
            "Track 4 (4), Position 3 (3)",
        )

    def test_build_location(self):
        self.assertEqual(
            build_location(2, 1),
            {
                "track": 2,
                "position": 1,
                "label": "T2-P1",
                "description": "Track 2 (Middle), Position 1 (Left)",
            },
        )
        self.assertIsNone(build_location(None, 1))


class ValidateLocationTest(unittest.TestCase):
    def test_valid_slot(self):
        self.assertTrue(validate_location({"track": 3, "position": 2}).is_valid)

    def test_missing_both(self):
        result = validate_location({})
        self.assertEqual(
            result.errors,
            {"track": "Track is required", "position": "Position is required"},
        )

    def test_out_of_range(self):
        cases = [
            ({"track": 4, "position": 1}, "track", "Track must be between 1 and 3"),
            ({"track": -1, "position": 1}, "track", "Track must be between 1 and 3"),
            ({"track": 1, "position": 3}, "position", "Position must be 1 or 2"),
        ]
        for location, field, message in cases:
            with self.subTest(location=location):
                result = validate_location(location)
                self.assertFalse(result.is_valid)
                self.assertEqual(result.errors, {field: message})

    def test_zero_counts_as_missing(self):
        result = validate_location({"track": 0, "position": 1})
        self.assertEqual(result.errors, {"track": "Track is required"})


if __name__ == "__main__":
    unittest.main()
