"""Gadget drivers package"""

from simpleboot.drivers.base import BaseGadgetDriver
from simpleboot.drivers.configfs import ConfigFSDriver, VendorVariantDriver
from simpleboot.drivers.legacy import LegacyDriver
from simpleboot.drivers.loopback import LoopbackDriver

__all__ = [
    'BaseGadgetDriver',
    'ConfigFSDriver',
    'VendorVariantDriver',
    'LegacyDriver',
    'LoopbackDriver',
]
