"""
Unit tests for logging setup and the daily log files
"""

import json
import logging
from datetime import date

import pytest
from pythonjsonlogger.json import JsonFormatter

from simpleboot.utils.logger import (
    DailyLogFileHandler, get_logger, setup_logging, log_file_path, log_mount_event,
    export_log_file, parse_log_date,
)


@pytest.fixture
def reset_logging():
    yield
    root = logging.getLogger('simpleboot')
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()


def test_get_logger_namespaces():
    assert get_logger('simpleboot.services').name == 'simpleboot.services'
    assert get_logger('tests').name == 'simpleboot.tests'


def test_log_file_name(tmp_path):
    path = log_file_path(str(tmp_path), date(2024, 5, 1))
    assert path == str(tmp_path / 'mount_log_20240501.txt')


def test_events_written_to_daily_file(tmp_path, reset_logging):
    setup_logging('INFO', str(tmp_path), console=False)

    log_mount_event('ubuntu.iso', '/dev/block/loop0', 'configfs (USB_HDD)')

    with open(log_file_path(str(tmp_path))) as f:
        content = f.read()
    assert 'Mounted: ubuntu.iso to /dev/block/loop0 via configfs (USB_HDD)' in content
    assert content.startswith('[')


def test_json_log_file(tmp_path, reset_logging):
    setup_logging('INFO', str(tmp_path), json_format=True, console=False)

    log_mount_event('ubuntu.iso', '/dev/block/loop0', 'loopback (USB_HDD)')

    with open(log_file_path(str(tmp_path))) as f:
        entry = json.loads(f.readline())
    assert entry['message'].startswith('Mounted: ubuntu.iso')
    assert entry['loop_device'] == '/dev/block/loop0'

    handlers = [h for h in logging.getLogger('simpleboot').handlers
                if isinstance(h, DailyLogFileHandler)]
    assert isinstance(handlers[0].formatter, JsonFormatter)


def test_export_log_file(tmp_path):
    assert export_log_file(str(tmp_path), date(2024, 5, 1)) is None

    (tmp_path / 'mount_log_20240501.txt').write_text('[2024-05-01 10:00] Mounted\n')
    assert export_log_file(str(tmp_path), date(2024, 5, 1)) == \
        str(tmp_path / 'mount_log_20240501.txt')


def test_parse_log_date():
    assert parse_log_date('20240501') == date(2024, 5, 1)
    assert parse_log_date('2024-05-01') == date(2024, 5, 1)
    with pytest.raises(ValueError):
        parse_log_date('May 1st')
