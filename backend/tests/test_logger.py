"""
Tests for the logging setup
"""

import logging
import tempfile
import unittest
from logging.handlers import RotatingFileHandler, TimedRotatingFileHandler

from tradejournal.core.config import Settings
from tradejournal.monitoring.logger import LoggerFactory


class TestLoggerFactory(unittest.TestCase):
    """Test cases for LoggerFactory"""

    def setUp(self):
        self.root_handlers = logging.getLogger().handlers[:]
        self.root_level = logging.getLogger().level

    def tearDown(self):
        root = logging.getLogger()
        for handler in root.handlers[:]:
            root.removeHandler(handler)
            if handler not in self.root_handlers:
                handler.close()
        for handler in self.root_handlers:
            root.addHandler(handler)
        root.setLevel(self.root_level)

    def test_console_only_by_default(self):
        factory = LoggerFactory(Settings(log_level="warning", log_to_file=False))

        root = logging.getLogger()
        self.assertEqual(root.level, logging.WARNING)
        self.assertEqual(len(root.handlers), 1)
        self.assertIsInstance(root.handlers[0], logging.StreamHandler)
        self.assertFalse(factory.log_to_file)

    def test_file_handlers_when_enabled(self):
        with tempfile.TemporaryDirectory() as log_dir:
            factory = LoggerFactory(Settings(log_to_file=True, log_dir=log_dir))

            root = logging.getLogger()
            self.assertTrue(any(isinstance(h, RotatingFileHandler) for h in root.handlers))

            logger = factory.get_logger("test.component")
            self.assertIs(factory.get_logger("test.component"), logger)
            component_handlers = [h for h in logger.handlers if isinstance(h, TimedRotatingFileHandler)]
            self.assertEqual(len(component_handlers), 1)

            for handler in component_handlers:
                logger.removeHandler(handler)
                handler.close()
            LoggerFactory._loggers.pop("test.component", None)


if __name__ == "__main__":
    unittest.main()
