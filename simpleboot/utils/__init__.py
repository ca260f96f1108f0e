"""Utilities package"""

from simpleboot.utils.logger import get_logger, setup_logging
from simpleboot.utils.validators import (
    validate_image_path,
    validate_lun,
    is_supported_image,
    validate_loop_device,
)

__all__ = [
    'get_logger',
    'setup_logging',
    'validate_image_path',
    'validate_lun',
    'is_supported_image',
    'validate_loop_device',
]
