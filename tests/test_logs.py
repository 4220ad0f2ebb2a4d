from __future__ import annotations

import logging
import tempfile
import unittest
from pathlib import Path
from unittest import mock

import structlog

from termtools.logs import configure_logging


class ConfigureLoggingTests(unittest.TestCase):
    def tearDown(self) -> None:
        for name in ("termtools", "py.warnings"):
            logger = logging.getLogger(name)
            for handler in list(logger.handlers):
                logger.removeHandler(handler)
                handler.close()
        logging.captureWarnings(False)
        structlog.reset_defaults()

    def test_without_file_records_are_discarded(self) -> None:
        with mock.patch.dict("os.environ", {}, clear=True):
            logger = configure_logging()

        self.assertEqual(len(logger.handlers), 1)
        self.assertIsInstance(logger.handlers[0], logging.NullHandler)
        self.assertEqual(logger.level, logging.WARNING)
        self.assertFalse(logger.propagate)

    def test_file_handler_renders_records_with_structlog(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            log_path = Path(tmp) / "termtools.log"
            logger = configure_logging(log_file=str(log_path), debug=True)
            self.assertIsInstance(logger.handlers[0].formatter, structlog.stdlib.ProcessorFormatter)

            logging.getLogger("termtools.process").debug("spawned %s", "rg")
            for handler in logger.handlers:
                handler.flush()

            content = log_path.read_text(encoding="utf-8")
            self.tearDown()

        self.assertIn("spawned rg", content)
        self.assertIn("debug", content)
        self.assertIn("termtools.process", content)
        self.assertNotIn("\x1b[", content)

    def test_warnings_are_routed_to_the_log_handler(self) -> None:
        with mock.patch("logging.captureWarnings") as capture:
            logger = configure_logging()

        capture.assert_called_once_with(True)
        warnings_logger = logging.getLogger("py.warnings")
        self.assertEqual(warnings_logger.handlers, logger.handlers)
        self.assertFalse(warnings_logger.propagate)

    def test_environment_supplies_missing_values(self) -> None:
        with mock.patch.dict("os.environ", {"TERMTOOLS_LOG_LEVEL": "info"}, clear=True):
            logger = configure_logging()
        self.assertEqual(logger.level, logging.INFO)

    def test_reconfiguring_replaces_handlers(self) -> None:
        configure_logging()
        logger = configure_logging()
        self.assertEqual(len(logger.handlers), 1)
        self.assertEqual(len(logging.getLogger("py.warnings").handlers), 1)


if __name__ == "__main__":
    unittest.main()
