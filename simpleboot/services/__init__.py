"""Services package"""

from simpleboot.services.state_store import MountStateStore
from simpleboot.services.strategy import MountStrategySelector, build_drivers
from simpleboot.services.mount_service import MountService
from simpleboot.services.storage import ImageCatalog
from simpleboot.services.usb_control import HostUsbControl

__all__ = [
    'MountStateStore',
    'MountStrategySelector',
    'build_drivers',
    'MountService',
    'ImageCatalog',
    'HostUsbControl',
]
