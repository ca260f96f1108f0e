"""Mount strategy selection and the AUTO fallback chain"""

from typing import Callable, Dict, Optional

from simpleboot.config import SimpleBootConfig
from simpleboot.drivers import (
    BaseGadgetDriver, ConfigFSDriver, VendorVariantDriver, LegacyDriver, LoopbackDriver,
)
from simpleboot.executor import CommandExecutor
from simpleboot.gadget import EnvironmentProbe, LoopDeviceAllocator, CleanupCoordinator
from simpleboot.models import MountMethod, MountPhase, MountRequest, MountOutcome
from simpleboot.utils.logger import get_logger

LOG = get_logger(__name__)


def build_drivers(executor: CommandExecutor, config: SimpleBootConfig,
                  cleanup: Optional[CleanupCoordinator] = None,
                  phase_listener: Optional[Callable[[MountPhase], None]] = None
                  ) -> Dict[MountMethod, BaseGadgetDriver]:
    """Create one driver per concrete mount method sharing probe, allocator and cleanup."""
    probe = EnvironmentProbe(executor, config)
    allocator = LoopDeviceAllocator(executor)
    cleanup = cleanup or CleanupCoordinator(executor)
    return {
        driver_cls.method: driver_cls(executor, probe, allocator, cleanup, config,
                                      phase_listener=phase_listener)
        for driver_cls in (ConfigFSDriver, VendorVariantDriver, LegacyDriver, LoopbackDriver)
    }


class MountStrategySelector:
    """Maps a requested method onto a driver; AUTO walks the fallback chain."""

    AUTO_ORDER = (MountMethod.CONFIGFS, MountMethod.LEGACY, MountMethod.LOOPBACK)

    def __init__(self, drivers: Dict[MountMethod, BaseGadgetDriver]):
        self.drivers = drivers

    def select(self, method: MountMethod) -> BaseGadgetDriver:
        """
        Get the driver for a concrete method.

        Raises:
            ValueError: For AUTO or a method without a driver
        """
        try:
            return self.drivers[method]
        except KeyError:
            raise ValueError(f"No driver for mount method: {method.value}")

    def execute(self, request: MountRequest) -> MountOutcome:
        if request.method is not MountMethod.AUTO:
            return self.select(request.method).mount(request)
        return self._mount_auto(request)

    def _mount_auto(self, request: MountRequest) -> MountOutcome:
        outcome = None
        for position, method in enumerate(self.AUTO_ORDER):
            LOG.info(f"[auto] Attempting {method.label}")
            outcome = self.select(method).mount(request)
            if outcome.success:
                return outcome
            if position < len(self.AUTO_ORDER) - 1:
                next_method = self.AUTO_ORDER[position + 1]
                LOG.warning(f"[auto] {method.label} failed: {outcome.message}, "
                            f"trying {next_method.label}")
        LOG.error(f"[auto] All methods failed, last error: {outcome.message}")
        return outcome
