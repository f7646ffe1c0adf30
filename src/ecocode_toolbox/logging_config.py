"""
Logging configuration for the ecoCode toolbox

Console output is colored by level (blue debug, white info, yellow warning,
red error); debug messages only show in verbose mode. A rotating log file
with the structured format can be enabled in addition.
"""

import logging
import logging.handlers
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

import click

LEVEL_COLORS = {
    logging.DEBUG: "blue",
    logging.INFO: "white",
    logging.WARNING: "yellow",
    logging.ERROR: "red",
    logging.CRITICAL: "red",
}


class ColorFormatter(logging.Formatter):
    """Formatter that colors the whole message according to its level."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = LEVEL_COLORS.get(record.levelno)
        if color is None:
            return message
        return click.style(message, fg=color)


def setup_logging(
    verbose: bool = False,
    log_level: Optional[str] = None,
    enable_file_logging: bool = False,
    log_dir: Union[str, Path] = "logs",
) -> logging.Logger:
    """
    Set up logging for toolbox operations.

    Args:
        verbose: Enable debug output on the console
        log_level: Override console log level (DEBUG, INFO, WARNING, ERROR)
        enable_file_logging: Whether to write logs to a rotating file
        log_dir: Directory for log files

    Returns:
        Configured toolbox logger
    """
    if log_level:
        level = getattr(logging, log_level.upper(), logging.INFO)
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if enable_file_logging else level)

    # Clear any existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(ColorFormatter("%(message)s"))
    root_logger.addHandler(console_handler)

    log_file = None
    if enable_file_logging:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"toolbox_{timestamp}.log"

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,  # 10MB files, 5 backups
        )
        file_handler.setLevel(logging.DEBUG)  # Always debug level for files
        file_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root_logger.addHandler(file_handler)

    logger = logging.getLogger("ecocode_toolbox")
    logger.debug(f"Logging initialized - Level: {logging.getLevelName(level)}")
    if log_file is not None:
        logger.debug(f"Log file: {log_file.absolute()}")

    return logger
