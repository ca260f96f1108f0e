"""CLI command implementations"""

import json
import os
import shutil
import sys
from datetime import datetime
from typing import Optional

import click
from tabulate import tabulate

from simpleboot.config import SimpleBootConfig
from simpleboot.exceptions import SimpleBootException
from simpleboot.executor import ShellExecutor
from simpleboot.lock_manager import OperationLock
from simpleboot.models import DatabaseManager, MountOutcome, MountRecord
from simpleboot.services import MountService, MountStateStore, ImageCatalog, HostUsbControl
from simpleboot.utils.logger import get_logger, export_log_file, parse_log_date

LOG = get_logger(__name__)

MOUNT_LOCK = 'mount_unmount'


def _fail(message: str):
    click.secho(f"✗ {message}", fg='red')
    sys.exit(1)


def _report(outcome: MountOutcome):
    if outcome.success:
        click.secho(f"✓ {outcome.message}", fg='green')
        if outcome.loop_device:
            click.echo(f"  Loop device: {outcome.loop_device}")
    else:
        _fail(outcome.message)


def _dump(data, format: str) -> str:
    if format == 'yaml':
        import yaml
        return yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
    return json.dumps(data, indent=2)


def _format_time(millis: int) -> str:
    return datetime.fromtimestamp(millis / 1000).strftime('%Y-%m-%d %H:%M:%S')


def _format_size(size: int) -> str:
    for unit in ('B', 'KB', 'MB', 'GB'):
        if size < 1024 or unit == 'GB':
            return f"{size:.1f} {unit}" if unit != 'B' else f"{size} B"
        size /= 1024.0


def mount_image(config: SimpleBootConfig, image: str, method: str, mode: str, lun: int):
    """Mount an image by name (from the images directory) or by path"""
    found = ImageCatalog.from_config(config).find_image(image)
    image_path = found.path if found else os.path.abspath(image)

    service = MountService.from_config(config)
    try:
        with OperationLock.from_config(config).acquire(MOUNT_LOCK):
            current = service.current_mount()
            if current and current.image_path != image_path:
                _fail(f"Another image is already mounted ({current.file_name}). "
                      f"Unmount it first.")
            outcome = service.mount(image_path, method=method, presentation_mode=mode, lun=lun)
    except SimpleBootException as e:
        _fail(f"Error: {e}")
    finally:
        service.close()

    _report(outcome)


def unmount_image(config: SimpleBootConfig):
    """Unmount whatever is currently mounted"""
    service = MountService.from_config(config)
    try:
        with OperationLock.from_config(config).acquire(MOUNT_LOCK):
            outcome = service.unmount()
    except SimpleBootException as e:
        _fail(f"Error: {e}")
    finally:
        service.close()

    _report(outcome)


def _record_rows(record: MountRecord):
    return [
        ['Image', record.file_name],
        ['Path', record.image_path],
        ['Loop device', record.loop_device],
        ['LUN', record.lun],
        ['Mounted at', _format_time(record.mounted_at)],
    ]


def show_status(config: SimpleBootConfig, format: str = 'table'):
    """Show the persisted mount record"""
    db_manager = DatabaseManager.from_config(config)
    try:
        record = MountStateStore(db_manager).load()
    finally:
        db_manager.close()

    if format in ('json', 'yaml'):
        data = {'mounted': record is not None}
        if record:
            data.update(record.to_dict())
        click.echo(_dump(data, format))
        return

    if not record:
        click.echo("Nothing is currently mounted.")
        return
    click.echo(tabulate(_record_rows(record), tablefmt='grid'))


def list_images(config: SimpleBootConfig, format: str = 'table'):
    """List the ISO/IMG files in the images directory"""
    catalog = ImageCatalog.from_config(config)
    try:
        catalog.ensure_directories()
    except OSError as e:
        LOG.warning(f"Could not create directories: {e}")
    images = catalog.list_images()

    if format in ('json', 'yaml'):
        click.echo(_dump([image.to_dict() for image in images], format))
        return

    if not images:
        click.echo(f"No images found in {catalog.images_dir}")
        return
    data = [[image.name, _format_size(image.size), image.path] for image in images]
    click.echo(tabulate(data, headers=['Name', 'Size', 'Path'], tablefmt='grid'))
    click.echo(f"\nTotal: {len(images)} images")


def show_logs(config: SimpleBootConfig, day: Optional[str] = None,
              output: Optional[str] = None):
    """Print or export the log file of a day"""
    try:
        log_day = parse_log_date(day) if day else None
    except ValueError as e:
        _fail(str(e))

    path = export_log_file(config.log_dir, log_day)
    if not path:
        _fail(f"No log file for {day or 'today'} in {config.log_dir}")

    if output:
        shutil.copyfile(path, output)
        click.secho(f"✓ Log exported to {output}", fg='green')
        return

    with open(path, 'r', encoding='utf-8') as f:
        click.echo(f.read(), nl=False)


def _usb_control(config: SimpleBootConfig) -> HostUsbControl:
    executor = ShellExecutor(
        privilege_wrapper=config.privilege_wrapper,
        timeout=config.command_timeout
    )
    return HostUsbControl(executor)


def set_adb(config: SimpleBootConfig, enabled: bool):
    try:
        click.secho(f"✓ {_usb_control(config).set_adb(enabled)}", fg='green')
    except SimpleBootException as e:
        _fail(str(e))


def set_charging(config: SimpleBootConfig, enabled: bool):
    try:
        click.secho(f"✓ {_usb_control(config).set_charging(enabled)}", fg='green')
    except SimpleBootException as e:
        _fail(str(e))


def show_config(config: SimpleBootConfig):
    """Display current configuration"""
    click.echo(tabulate(sorted(config.as_dict().items()), headers=['Key', 'Value'],
                        tablefmt='grid'))
