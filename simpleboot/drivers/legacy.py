"""Legacy android_usb gadget driver"""

from typing import List

from simpleboot.constants import LEGACY_USB_PATH, LEGACY_LUN_PATH, LEGACY_LUN_FILE
from simpleboot.exceptions import EnvironmentException
from simpleboot.drivers.base import BaseGadgetDriver
from simpleboot.models import MountMethod, MountRequest, MountOutcome, ResolvedEnvironment
from simpleboot.utils.logger import get_logger

LOG = get_logger(__name__)


class LegacyDriver(BaseGadgetDriver):
    """
    Exposes the image through the fixed /sys/class/android_usb layout.

    Legacy kernels only take block devices, so the image always goes
    through a loop device.
    """

    method = MountMethod.LEGACY

    def resolve(self, request: MountRequest) -> ResolvedEnvironment:
        self.probe.ensure_modules_loaded()
        env = self.resolve_loop(ResolvedEnvironment())
        if not self.probe.legacy_available():
            raise EnvironmentException("Legacy USB gadget interface not found.")
        env.lun_path = LEGACY_LUN_PATH
        return env

    def build_prepare_commands(self) -> List[str]:
        return self.usb_stack_off_commands() + [
            f"echo 0 > {LEGACY_USB_PATH}/enable",
            f"mkdir -p {LEGACY_LUN_PATH} || true",
        ]

    @staticmethod
    def build_activate_commands(request: MountRequest) -> List[str]:
        mode = request.presentation_mode
        return [
            f"echo {mode.cdrom_flag} > {LEGACY_LUN_PATH}/cdrom || true",
            f"echo {mode.read_only_flag} > {LEGACY_LUN_PATH}/ro || true",
            f"echo 1 > {LEGACY_LUN_PATH}/removable || true",
            f"echo 1 > {LEGACY_USB_PATH}/enable",
        ]

    def configure(self, env: ResolvedEnvironment, request: MountRequest) -> MountOutcome:
        result = self.executor.run(self.build_prepare_commands())
        if not result.success:
            return self.abort(env, result.diagnostic())

        bind = self.bind_via_loop(env, request.image_path, LEGACY_LUN_FILE)
        if not bind.bound:
            return self.abort(env, bind.diagnostic)

        result = self.executor.run(self.build_activate_commands(request))
        if not result.success:
            return self.abort(env, result.diagnostic())

        LOG.info(f"[legacy] Success -> {env.loop_device}")
        return MountOutcome.ok("Mounted using Legacy method.", loop_device=env.loop_device,
                               method=self.method)
