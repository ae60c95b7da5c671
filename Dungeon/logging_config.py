"""
Logging configuration for the dungeon engine.

Player-facing text is returned to the drivers as plain lines; everything
written here is diagnostics for the developer.
"""

import logging
import os

LOGGER_FORMAT = '%(asctime)s [%(name)s] %(levelname)s: %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
LOGGERS: dict[str, logging.Logger] = {}


def configure_logging(level: int | str = logging.WARNING, log_file: str | None = None) -> None:
    """
    Configure the root logger with a console handler and an optional file sink.

    Args:
        level: Log level, as an int or a level name such as "INFO".
        log_file: Optional path of a file receiving the same records.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {level}")

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(LOGGER_FORMAT, DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        directory = os.path.dirname(log_file)
        if directory and not os.path.exists(directory):
            os.makedirs(directory)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    root_logger.debug("Logging configured")


def get_logger(name: str) -> logging.Logger:
    """Returns a cached logger with the given name."""
    if name in LOGGERS:
        return LOGGERS[name]

    logger = logging.getLogger(name)
    LOGGERS[name] = logger
    return logger
