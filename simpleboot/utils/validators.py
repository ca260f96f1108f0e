"""Validation utilities"""

import os

from simpleboot.constants import IMAGE_EXTENSIONS


def validate_image_path(path: str) -> bool:
    """Validate that path is absolute and references an existing regular file"""
    return bool(path) and os.path.isabs(path) and os.path.isfile(path)


def validate_lun(lun) -> bool:
    """Validate logical unit index"""
    return isinstance(lun, int) and not isinstance(lun, bool) and lun >= 0


def is_supported_image(name: str) -> bool:
    """Check whether a file name carries a mountable image extension"""
    _, ext = os.path.splitext(name)
    return ext[1:].lower() in IMAGE_EXTENSIONS


def validate_loop_device(device: str) -> bool:
    """Validate loop device path reported by losetup"""
    return bool(device) and device.startswith('/dev/') and 'loop' in device
