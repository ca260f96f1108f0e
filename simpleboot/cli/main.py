"""Main CLI entry point with configuration options"""

import sys

import click

from simpleboot.cli import commands
from simpleboot.config import SimpleBootConfig
from simpleboot.exceptions import ConfigurationException
from simpleboot.models import MountMethod, PresentationMode
from simpleboot.utils.logger import get_logger, setup_logging
from simpleboot.version import version_string

LOG = get_logger(__name__)

FORMATS = click.Choice(['table', 'json', 'yaml'], case_sensitive=False)
SWITCH = click.Choice(['on', 'off'], case_sensitive=False)


@click.group()
@click.option('--config', type=click.Path(), help='Configuration file path')
@click.option('--db-url', help='Database URL for the mount state')
@click.option('--images-dir', type=click.Path(), help='Directory holding ISO/IMG files')
@click.option('--log-dir', type=click.Path(), help='Directory for the daily log files')
@click.option('--log-level',
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                                case_sensitive=False),
              help='Log level')
@click.option('--verbose', '-v', is_flag=True, help='Also log to the console')
@click.version_option(version_string(), prog_name='simpleboot')
@click.pass_context
def cli(ctx, config, db_url, images_dir, log_dir, log_level, verbose):
    """SimpleBoot - expose ISO/IMG files to a host as a USB drive"""
    ctx.ensure_object(dict)

    try:
        sb_config = SimpleBootConfig.from_file(config)
        sb_config.override(db_url=db_url, images_dir=images_dir, log_dir=log_dir,
                           log_level=log_level)
    except ConfigurationException as e:
        click.secho(f"Error loading configuration: {e}", fg='red', err=True)
        sys.exit(1)

    setup_logging(level=sb_config.log_level, log_dir=sb_config.log_dir,
                  json_format=sb_config.log_json, console=verbose,
                  console_format=sb_config.log_format)
    ctx.obj['config'] = sb_config


@cli.command()
@click.argument('image')
@click.option('--method', '-m',
              type=click.Choice([m.value for m in MountMethod], case_sensitive=False),
              default=MountMethod.AUTO.value,
              help='Mount method (auto tries configfs, legacy, then loopback)')
@click.option('--mode',
              type=click.Choice([m.value for m in PresentationMode], case_sensitive=False),
              default=PresentationMode.READ_ONLY_DISK.value,
              help='How the image is presented to the host')
@click.option('--lun', type=click.IntRange(min=0), default=0, help='Logical unit index')
@click.pass_context
def mount(ctx, image, method, mode, lun):
    """
    Mount an image as a USB drive

    Examples:
      simpleboot mount ubuntu.iso
      simpleboot mount /sdcard/SimpleBootISOs/ubuntu.iso --method configfs
    """
    commands.mount_image(ctx.obj['config'], image, method.lower(), mode.lower(), lun)


@cli.command()
@click.pass_context
def unmount(ctx):
    """
    Unmount the current image and restore USB

    Example:
      simpleboot unmount
    """
    commands.unmount_image(ctx.obj['config'])


@cli.command()
@click.option('--format', '-f', type=FORMATS, default='table', help='Output format')
@click.pass_context
def status(ctx, format):
    """
    Show what is currently mounted

    Examples:
      simpleboot status
      simpleboot status --format json
    """
    commands.show_status(ctx.obj['config'], format.lower())


@cli.command()
@click.option('--format', '-f', type=FORMATS, default='table', help='Output format')
@click.pass_context
def images(ctx, format):
    """
    List images available for mounting
    """
    commands.list_images(ctx.obj['config'], format.lower())


@cli.command()
@click.option('--date', 'day', help='Day to show, YYYYMMDD or YYYY-MM-DD (default: today)')
@click.option('--output', '-o', type=click.Path(), help='Export the log file to this path')
@click.pass_context
def logs(ctx, day, output):
    """
    Show or export a daily log file

    Examples:
      simpleboot logs
      simpleboot logs --date 2024-05-01 --output /sdcard/mount_log.txt
    """
    commands.show_logs(ctx.obj['config'], day, output)


@cli.command()
@click.argument('state', type=SWITCH)
@click.pass_context
def adb(ctx, state):
    """Turn the debug bridge on or off"""
    commands.set_adb(ctx.obj['config'], state.lower() == 'on')


@cli.command()
@click.argument('state', type=SWITCH)
@click.pass_context
def charging(ctx, state):
    """Turn USB charging on or off"""
    commands.set_charging(ctx.obj['config'], state.lower() == 'on')


@cli.command('check-config')
@click.pass_context
def check_config_cmd(ctx):
    """
    Display current configuration

    Example:
      simpleboot --config /etc/simpleboot/simpleboot.conf check-config
    """
    commands.show_config(ctx.obj['config'])


def main():
    """Main entry point"""
    cli(obj={})


if __name__ == '__main__':
    main()
