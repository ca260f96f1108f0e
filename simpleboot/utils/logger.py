"""Logging setup - console output plus one log file per calendar day"""

import logging
import os
import sys
from datetime import date, datetime
from typing import Optional

from pythonjsonlogger.json import JsonFormatter

from simpleboot.constants import LOG_FILE_PREFIX, LOG_FILE_DATE_FORMAT

ROOT_LOGGER_NAME = 'simpleboot'
EVENT_LOGGER_NAME = ROOT_LOGGER_NAME + '.events'

CONSOLE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
FILE_FORMAT = '[%(asctime)s] %(message)s'
FILE_DATE_FORMAT = '%Y-%m-%d %H:%M'
JSON_FORMAT = '%(asctime)s %(name)s %(levelname)s %(message)s'


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger under the simpleboot hierarchy.

    Args:
        name: Logger name, usually __name__

    Returns:
        Logger instance
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + '.'):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def log_file_path(log_dir: str, day: Optional[date] = None) -> str:
    """Path of the log file for the given day (today by default)."""
    day = day or date.today()
    return os.path.join(log_dir, f"{LOG_FILE_PREFIX}{day.strftime(LOG_FILE_DATE_FORMAT)}.txt")


class DailyLogFileHandler(logging.FileHandler):
    """File handler that switches to a new file when the date changes."""

    def __init__(self, log_dir: str):
        self.log_dir = log_dir
        os.makedirs(log_dir, mode=0o755, exist_ok=True)
        super().__init__(log_file_path(log_dir), mode='a', encoding='utf-8', delay=True)

    def emit(self, record):
        current = os.path.abspath(log_file_path(self.log_dir))
        if current != self.baseFilename:
            if self.stream:
                self.stream.close()
                self.stream = None
            self.baseFilename = current
        super().emit(record)


def setup_logging(level: str = 'INFO', log_dir: Optional[str] = None,
                  json_format: bool = False, console: bool = True,
                  console_format: str = CONSOLE_FORMAT) -> logging.Logger:
    """
    Configure the simpleboot logger hierarchy.

    Args:
        level: Log level name
        log_dir: Directory for the per-day log files (no file logging if None)
        json_format: Write the log files as JSON lines
        console: Also log to stderr
        console_format: Format used on the console

    Returns:
        The root simpleboot logger
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    if console:
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(logging.Formatter(console_format))
        root.addHandler(stream_handler)

    if log_dir:
        try:
            file_handler = DailyLogFileHandler(log_dir)
        except OSError as e:
            root.warning(f"Cannot write logs to {log_dir}: {e}")
        else:
            if json_format:
                file_handler.setFormatter(JsonFormatter(JSON_FORMAT))
            else:
                file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATE_FORMAT))
            root.addHandler(file_handler)

    return root


def log_mount_event(file_name: str, loop_device: str, via: str):
    """Record a successful mount in the event log."""
    logging.getLogger(EVENT_LOGGER_NAME).info(
        f"Mounted: {file_name} to {loop_device} via {via}",
        extra={'event': 'mount', 'image': file_name, 'loop_device': loop_device, 'via': via}
    )


def log_unmount_event(file_name: str, loop_device: str):
    """Record a successful unmount in the event log."""
    logging.getLogger(EVENT_LOGGER_NAME).info(
        f"Unmounted: {file_name} from {loop_device}",
        extra={'event': 'unmount', 'image': file_name, 'loop_device': loop_device}
    )


def export_log_file(log_dir: str, day: Optional[date] = None) -> Optional[str]:
    """
    Locate the log file for a day.

    Args:
        log_dir: Log directory
        day: Day to export (today by default)

    Returns:
        Path of the log file, or None if nothing was logged that day
    """
    path = log_file_path(log_dir, day)
    if not os.path.isfile(path):
        return None
    return path


def parse_log_date(value: str) -> date:
    """Parse a YYYYMMDD or YYYY-MM-DD date string."""
    for fmt in (LOG_FILE_DATE_FORMAT, '%Y-%m-%d'):
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Invalid date: {value}. Expected YYYYMMDD or YYYY-MM-DD")
