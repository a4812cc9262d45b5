"""Logging configuration for form logic tools."""
import logging
import sys

from .config import ConfigManager


class ColorFormatter(logging.Formatter):
    """Color-coded formatter for console output."""

    RESET = '\033[0m'
    LEVEL_COLORS = {
        logging.DEBUG: '\033[36m',
        logging.INFO: '\033[32m',
        logging.WARNING: '\033[33m',
        logging.ERROR: '\033[31m',
        logging.CRITICAL: '\033[35m',
    }

    def format(self, record):
        levelname = record.levelname
        color = self.LEVEL_COLORS.get(record.levelno)
        if color:
            record.levelname = f"{color}{levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


def setup_logging(config=None, stream=None):
    """Setup console logging for the form_logic command line.

    Level and colors come from ``FORM_LOGIC_LOG_LEVEL`` and
    ``FORM_LOGIC_LOG_COLORS``. Colors are only used on a terminal.
    """
    config = config or ConfigManager()
    stream = stream or sys.stderr

    log_level_str = str(config.log_level).upper()
    log_level = getattr(logging, log_level_str, logging.INFO)

    logger = logging.getLogger()
    logger.setLevel(log_level)

    color_formatter = ColorFormatter('%(asctime)s %(levelname)s %(name)-25s %(message)s')
    plain_formatter = logging.Formatter('%(asctime)s %(levelname)-8s %(name)-25s %(message)s')

    console_handler = logging.StreamHandler(stream)
    console_handler.setLevel(log_level)

    is_tty = hasattr(stream, 'isatty') and stream.isatty()
    if config.log_colors and is_tty:
        console_handler.setFormatter(color_formatter)
    else:
        console_handler.setFormatter(plain_formatter)

    # Clear existing handlers to avoid duplicates
    logger.handlers.clear()
    logger.addHandler(console_handler)

    logger.debug(f"Form logic logging initialized (level: {log_level_str})")

    return logger
