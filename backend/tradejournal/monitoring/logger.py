"""
Logging Module for TradeJournal

This module provides a centralized logging setup: a console handler on the
root logger and, when enabled, rotating log files in the configured log
directory.
"""

import os
import sys
import logging
import threading
from logging.handlers import RotatingFileHandler, TimedRotatingFileHandler
from typing import Optional

from tradejournal.core.config import Settings, get_settings


class LoggerFactory:
    """Factory class to create and configure loggers."""

    _instance = None
    _lock = threading.Lock()
    _loggers = {}

    @classmethod
    def get_instance(cls, settings: Optional[Settings] = None):
        """Get singleton instance of LoggerFactory."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls(settings or get_settings())
        return cls._instance

    def __init__(self, settings: Settings):
        """
        Initialize the logger factory.

        Args:
            settings: Application settings (log_level, log_dir, log_to_file)
        """
        self.default_level = getattr(logging, settings.log_level, logging.INFO)
        self.log_dir = settings.log_dir
        self.log_to_file = settings.log_to_file
        self.log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        self.date_format = "%Y-%m-%d %H:%M:%S"
        self.max_bytes = 10 * 1024 * 1024  # 10MB
        self.backup_count = 10

        if self.log_to_file:
            os.makedirs(self.log_dir, exist_ok=True)

        self._setup_root_logger()

    def _formatter(self) -> logging.Formatter:
        return logging.Formatter(self.log_format, self.date_format)

    def _setup_root_logger(self):
        """Set up the root logger with console handler and optional file handler."""
        root_logger = logging.getLogger()
        root_logger.setLevel(self.default_level)

        # Remove existing handlers
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(self._formatter())
        root_logger.addHandler(console_handler)

        if self.log_to_file:
            root_logger.addHandler(self._file_handler("tradejournal", rotate_when="size"))

    def _file_handler(self, name: str, rotate_when: str = "midnight") -> logging.Handler:
        log_file = os.path.join(self.log_dir, f"{name}.log")

        if rotate_when == "size":
            # Size-based rotation
            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=self.max_bytes,
                backupCount=self.backup_count
            )
        else:
            # Time-based rotation
            file_handler = TimedRotatingFileHandler(
                log_file,
                when=rotate_when,
                backupCount=self.backup_count
            )

        file_handler.setFormatter(self._formatter())
        return file_handler

    def get_logger(self, name, level=None, log_to_file=None, rotate_when="midnight"):
        """
        Get a logger with the specified name and configuration.

        Args:
            name: Logger name
            level: Log level (default: configured level)
            log_to_file: Whether to add a dedicated log file (default: configured)
            rotate_when: When to rotate logs ('size' or 'midnight')

        Returns:
            Configured logger
        """
        if name in self._loggers:
            return self._loggers[name]

        logger = logging.getLogger(name)
        logger.setLevel(level if level is not None else self.default_level)

        if log_to_file is None:
            log_to_file = self.log_to_file
        if log_to_file:
            logger.addHandler(self._file_handler(name, rotate_when))

        self._loggers[name] = logger
        return logger


def setup_logging(settings: Optional[Settings] = None) -> LoggerFactory:
    """Configure application logging once and return the factory."""
    return LoggerFactory.get_instance(settings)


def get_logger(name, **kwargs):
    """Get a configured logger."""
    return LoggerFactory.get_instance().get_logger(name, **kwargs)
