"""Kernel-facing gadget components: environment probing, loop devices, teardown"""

from simpleboot.gadget.probe import EnvironmentProbe
from simpleboot.gadget.loop_allocator import LoopDeviceAllocator
from simpleboot.gadget.cleanup import CleanupCoordinator, CleanupStep

__all__ = [
    'EnvironmentProbe',
    'LoopDeviceAllocator',
    'CleanupCoordinator',
    'CleanupStep',
]
