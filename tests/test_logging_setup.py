from __future__ import annotations

import json
import logging
import unittest

from idea_feed.logging_setup import JsonFormatter, TextFormatter, setup_logging


class LoggingSetupTests(unittest.TestCase):
    def setUp(self) -> None:
        root = logging.getLogger()
        self._saved_handlers = root.handlers[:]
        self._saved_level = root.level

    def tearDown(self) -> None:
        root = logging.getLogger()
        for handler in root.handlers[:]:
            root.removeHandler(handler)
        for handler in self._saved_handlers:
            root.addHandler(handler)
        root.setLevel(self._saved_level)

    def test_json_formatter_emits_one_object_with_extras(self) -> None:
        record = logging.LogRecord(
            "idea_feed.pipeline", logging.INFO, __file__, 10, "Found %d ideas", (3,), None
        )
        record.platform = "reddit"

        payload = json.loads(JsonFormatter().format(record))

        self.assertEqual(payload["message"], "Found 3 ideas")
        self.assertEqual(payload["level"], "INFO")
        self.assertEqual(payload["platform"], "reddit")

    def test_setup_installs_single_handler(self) -> None:
        setup_logging("warning", "json")
        setup_logging("info", "text", verbose=True)

        root = logging.getLogger()
        self.assertEqual(len(root.handlers), 1)
        self.assertEqual(root.level, logging.DEBUG)
        self.assertIsInstance(root.handlers[0].formatter, TextFormatter)


if __name__ == "__main__":
    unittest.main()
