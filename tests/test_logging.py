import json
import logging
import unittest

from freezer.core.logging import JsonFormatter


class JsonFormatterTest(unittest.TestCase):
    def _record(self, **extra):
        record = logging.LogRecord(
            "freezer.services.checkout_service", logging.INFO, __file__, 1,
            "Item %s returned", ("abc",), None,
        )
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_payload_fields(self):
        payload = json.loads(JsonFormatter("test").format(self._record()))
        self.assertEqual(payload["level"], "INFO")
        self.assertEqual(payload["env"], "test")
        self.assertEqual(payload["msg"], "Item abc returned")
        self.assertNotIn("item_id", payload)

    def test_context_fields_copied(self):
        record = self._record(item_id="abc", checkout_id="c1", unrelated="x")
        payload = json.loads(JsonFormatter("test").format(record))
        self.assertEqual(payload["item_id"], "abc")
        self.assertEqual(payload["checkout_id"], "c1")
        self.assertNotIn("unrelated", payload)


if __name__ == "__main__":
    unittest.main()
