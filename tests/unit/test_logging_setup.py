import io
import json
import logging
import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "render"))
sys.path.insert(0, str(ROOT / "packages" / "stream"))
sys.path.insert(0, str(ROOT / "packages" / "core"))

from lolcat_core.logging_setup import JsonFormatter, configure_logging


class LoggingSetupTests(unittest.TestCase):
    def test_debug_messages_reach_stderr_with_prefix(self):
        stream = io.StringIO()
        logger = configure_logging(debug=True, stream=stream)
        logger.debug("processing source '-'")
        self.assertEqual(stream.getvalue(), "[lolcat] processing source '-'\n")

    def test_debug_hidden_by_default(self):
        stream = io.StringIO()
        logger = configure_logging(stream=stream)
        logger.debug("quiet")
        logger.warning("loud")
        self.assertEqual(stream.getvalue(), "[lolcat] loud\n")

    def test_reconfigure_replaces_handlers(self):
        configure_logging(stream=io.StringIO())
        logger = configure_logging(stream=io.StringIO())
        self.assertEqual(len(logger.handlers), 1)

    def test_json_formatter(self):
        record = logging.LogRecord("lolcat", logging.INFO, __file__, 1, "hello %s", ("world",), None)
        record.event = "greeting"
        payload = json.loads(JsonFormatter().format(record))
        self.assertEqual(payload["msg"], "hello world")
        self.assertEqual(payload["level"], "INFO")
        self.assertEqual(payload["event"], "greeting")


if __name__ == "__main__":
    unittest.main()
