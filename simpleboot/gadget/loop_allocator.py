"""Loop device allocation"""

from typing import Optional

from simpleboot.constants import (
    LOOP_MAX_LOOP_PARAM, LOOP_MAX_COUNT, LOOP_CONTROL_NODE, LOOP_NODE_PREFIX,
    LOOP_NODE_COUNT,
)
from simpleboot.executor import CommandExecutor
from simpleboot.utils.logger import get_logger
from simpleboot.utils.validators import validate_loop_device

LOG = get_logger(__name__)


class LoopDeviceAllocator:
    """Finds a free loop device, provisioning loop nodes once if none is free."""

    def __init__(self, executor: CommandExecutor):
        self.executor = executor

    @staticmethod
    def provision_commands():
        commands = [
            f"echo {LOOP_MAX_COUNT} > {LOOP_MAX_LOOP_PARAM} 2>/dev/null || true",
            f"mknod {LOOP_CONTROL_NODE} c 10 237 2>/dev/null || true",
        ]
        commands += [
            f"mknod -m 660 {LOOP_NODE_PREFIX}{i} b 7 {i} 2>/dev/null || true"
            for i in range(LOOP_NODE_COUNT)
        ]
        return commands

    def provision(self):
        """Recreate loop-control and loop block nodes (some kernels skip this at boot)."""
        LOG.info("Ensuring loop devices exist")
        self.executor.run(self.provision_commands(), strict=False)

    def find_free(self, losetup: str) -> Optional[str]:
        result = self.executor.run([f"{losetup} -f"])
        device = result.first_line() if result.success else ''
        return device if validate_loop_device(device) else None

    def acquire(self, losetup: str) -> Optional[str]:
        """
        Get the first free loop device.

        Args:
            losetup: Resolved loop setup binary

        Returns:
            Loop device path, or None if still nothing is free after one retry
        """
        self.provision()
        device = self.find_free(losetup)
        if not device:
            LOG.warning("No free loop device, retrying after node recreation")
            self.provision()
            device = self.find_free(losetup)

        if device:
            LOG.info(f"Selected loop device: {device}")
        else:
            LOG.error("No available loop device")
        return device
