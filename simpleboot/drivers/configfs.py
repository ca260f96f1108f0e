"""ConfigFS gadget drivers"""

import shlex
from typing import List

from simpleboot.constants import GADGET_STRINGS_DIR
from simpleboot.exceptions import EnvironmentException
from simpleboot.drivers.base import BaseGadgetDriver
from simpleboot.models import (
    BindKind, BindResult, MountMethod, MountRequest, MountOutcome, ResolvedEnvironment,
)
from simpleboot.utils.logger import get_logger

LOG = get_logger(__name__)


class ConfigFSDriver(BaseGadgetDriver):
    """Composes the mass storage gadget through the ConfigFS usb_gadget tree."""

    method = MountMethod.CONFIGFS

    def success_message(self, request: MountRequest) -> str:
        return f"Mounted using ConfigFS ({request.presentation_mode.label})."

    def resolve(self, request: MountRequest) -> ResolvedEnvironment:
        self.probe.ensure_modules_loaded()
        env = self.resolve_loop(ResolvedEnvironment())

        env.configfs_root = self.probe.find_configfs_root()
        if not env.configfs_root:
            raise EnvironmentException("ConfigFS not found.")
        env.gadget_path = self.probe.resolve_gadget_path(env.configfs_root)
        if not env.gadget_path:
            raise EnvironmentException("ConfigFS not found.")
        env.config_dir = self.probe.resolve_config_dir(env.gadget_path)

        env.udc_name = self.probe.resolve_udc_name()
        if not env.udc_name:
            raise EnvironmentException("No UDC controller found.")

        env.function_path = self.probe.resolve_function_path(env.gadget_path)
        env.lun_path = self.probe.resolve_lun_path(env.function_path, request.lun)
        return env

    def build_prepare_commands(self, env: ResolvedEnvironment, request: MountRequest) -> List[str]:
        """Clean slate, directory tree, descriptors and LUN flags."""
        gadget, func, lun_dir = env.gadget_path, env.function_path, env.lun_path
        strings = f"{gadget}/{GADGET_STRINGS_DIR}"
        mode = request.presentation_mode

        return self.usb_stack_off_commands() + [
            # clean slate
            f"echo '' > {gadget}/UDC || true",
            f"find {gadget}/configs -type l -delete || true",
            f"rm -rf {gadget}/functions/ffs.adb || true",
            f"rm -rf {gadget}/functions/mass_storage.* || true",
            # structure
            f"mkdir -p {strings}",
            f"mkdir -p {env.config_path}",
            f"mkdir -p {func} {lun_dir}",
            # descriptors, ids only when unset
            f"test -s {gadget}/idVendor || echo {self.config.vendor_id} > {gadget}/idVendor",
            f"test -s {gadget}/idProduct || echo {self.config.product_id} > {gadget}/idProduct",
            f"echo {shlex.quote(self.config.manufacturer)} > {strings}/manufacturer",
            f"echo {shlex.quote(self.config.product)} > {strings}/product",
            f"echo SB$(date +%s) > {strings}/serialnumber",
            # LUN flags
            f"echo 0 > {func}/stall || true",
            f"echo {mode.cdrom_flag} > {lun_dir}/cdrom || true",
            f"echo {mode.read_only_flag} > {lun_dir}/ro || true",
            f"echo 1 > {lun_dir}/removable || true",
            f"echo 1 > {lun_dir}/nofua || true",
            f"echo '' > {lun_dir}/file || true",
        ]

    def build_activate_commands(self, env: ResolvedEnvironment) -> List[str]:
        return [
            f"ln -s {env.function_path} {env.config_path}/ || true",
            "sync",
            f"sleep {self.config.settle_delay:g}",
            f"echo {env.udc_name} > {env.gadget_path}/UDC",
        ]

    def bind_backing_store(self, env: ResolvedEnvironment, request: MountRequest) -> BindResult:
        """
        Bind the image to the LUN.

        Writing the plain file path avoids using up a loop device; kernels that
        only accept block devices reject it, so fall back to the loop device.
        """
        lun_file = f"{env.lun_path}/file"
        result = self.executor.run(
            [f"echo {shlex.quote(request.image_path)} > {shlex.quote(lun_file)}"]
        )
        if result.success:
            LOG.info("[bind] Image file bound directly")
            return BindResult.direct(request.image_path)

        LOG.info("[bind] Direct bind rejected, using loop device")
        return self.bind_via_loop(env, request.image_path, lun_file)

    def configure(self, env: ResolvedEnvironment, request: MountRequest) -> MountOutcome:
        if request.presentation_mode.deprecated:
            LOG.warning("Optical presentation mode is deprecated")

        result = self.executor.run(self.build_prepare_commands(env, request))
        if not result.success:
            return self.abort(env, result.diagnostic())

        bind = self.bind_backing_store(env, request)
        if not bind.bound:
            return self.abort(env, bind.diagnostic)
        if bind.kind is BindKind.DIRECT:
            # the loop device was only reserved, never attached
            env.loop_device = None

        result = self.executor.run(self.build_activate_commands(env))
        if not result.success:
            return self.abort(env, result.diagnostic())

        LOG.info(f"[{self.method.label}] Success -> {bind.target} ({bind.kind.value} bind)")
        return MountOutcome.ok(self.success_message(request), loop_device=env.loop_device,
                               method=self.method)


class VendorVariantDriver(ConfigFSDriver):
    """ConfigFS flow as used on Pixel (Tensor/GKI) kernels."""

    method = MountMethod.VENDOR_VARIANT

    def success_message(self, request: MountRequest) -> str:
        return "Mounted using Pixel method."
