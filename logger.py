"""Logging configuration for Pocketbook.

Logs go to a dated file and to the console. CLI commands print their
tables and reports through the logger, so INFO lines reach the console
as plain text while warnings and errors keep a level prefix.
"""

import logging
from datetime import date
from config import Config

LOGGER_NAME = "pocketbook"


class ConsoleFormatter(logging.Formatter):
    """Plain messages for DEBUG/INFO, ``LEVEL - message`` above that."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if record.levelno >= logging.WARNING:
            return f"{record.levelname} - {message}"
        return message


def setup_logging(config: Config) -> logging.Logger:
    """Set up application logging with file and console handlers.

    Args:
        config: Application configuration containing log settings.

    Returns:
        Configured logger instance.
    """
    config.log_dir.mkdir(parents=True, exist_ok=True)

    level = logging.getLevelName(config.log_level.upper())
    console_level = min(logging.INFO, level)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(console_level)

    # Clear any existing handlers (in case this is called multiple times)
    logger.handlers.clear()

    detailed_formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # File handler - logs to pocketbook-{date}.log
    log_filename = f"pocketbook-{date.today().isoformat()}.log"
    file_handler = logging.FileHandler(config.log_dir / log_filename)
    file_handler.setLevel(level)
    file_handler.setFormatter(detailed_formatter)

    # The console always shows command output, even with a WARNING file level
    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(ConsoleFormatter("%(message)s"))

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    return logger


def get_logger() -> logging.Logger:
    """Get the application logger.

    Returns:
        The pocketbook logger instance.
    """
    return logging.getLogger(LOGGER_NAME)
