"""
SimpleBoot - USB mass storage gadget orchestration.

Turns a rooted device into a USB drive presenting an ISO/IMG file to a
host computer, using ConfigFS, the legacy android_usb gadget or a plain
loop device.
"""

from simpleboot.version import version_string
from simpleboot.config import SimpleBootConfig
from simpleboot.models import MountMethod, PresentationMode, MountOutcome, MountRecord
from simpleboot.services import MountService

__version__ = version_string()

__all__ = [
    'SimpleBootConfig',
    'MountMethod',
    'PresentationMode',
    'MountOutcome',
    'MountRecord',
    'MountService',
]
