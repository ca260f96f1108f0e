"""Environment probe - discovers which kernel gadget facilities are usable"""

from typing import Optional

from simpleboot.config import SimpleBootConfig
from simpleboot.constants import (
    CONFIGFS_ROOTS, CONFIGFS_DEFAULT_MOUNT, USB_GADGET_DIR, MASS_STORAGE_FUNCTIONS,
    DEFAULT_CONFIG_DIR, UDC_CLASS_PATH, LEGACY_USB_PATH, LOOP_SETUP_CANDIDATES,
    KERNEL_MODULES,
)
from simpleboot.executor import CommandExecutor
from simpleboot.utils.logger import get_logger

LOG = get_logger(__name__)


class EnvironmentProbe:
    """
    Query layer over the ConfigFS, UDC, legacy gadget and loop facilities.

    Results are never cached: kernel state is shared with the rest of the
    system and can change between mount attempts. The only side effects are
    idempotent directory creations and best-effort module loading.
    """

    def __init__(self, executor: CommandExecutor, config: SimpleBootConfig):
        self.executor = executor
        self.config = config

    # ---------- shell helpers ----------

    def dir_exists(self, path: str) -> bool:
        result = self.executor.run([f'[ -d "{path}" ] && echo OK || true'])
        return result.first_line() == 'OK'

    def ensure_dir(self, path: str):
        self.executor.run([f'mkdir -p "{path}" || true'])

    def first_child(self, path: str) -> Optional[str]:
        result = self.executor.run([f'ls -1 "{path}" 2>/dev/null | head -n1 || true'])
        return result.first_line() or None

    # ---------- environment prep ----------

    def ensure_modules_loaded(self):
        LOG.debug("Loading kernel modules")
        self.executor.run(
            [f"modprobe {module} 2>/dev/null || true" for module in KERNEL_MODULES],
            strict=False
        )

    def ensure_configfs_mounted(self):
        LOG.debug("Checking ConfigFS mount")
        self.executor.run([
            "mount | grep -q ' type configfs ' || "
            f"mount -t configfs configfs {CONFIGFS_DEFAULT_MOUNT} || true"
        ])

    # ---------- ConfigFS ----------

    def find_configfs_root(self) -> Optional[str]:
        """
        Find the ConfigFS root that carries (or accepts) a usb_gadget subtree.

        Returns:
            Root path, or None if no known root qualifies
        """
        self.ensure_configfs_mounted()
        for root in CONFIGFS_ROOTS:
            if not self.dir_exists(root):
                continue
            gadget_root = f"{root}/{USB_GADGET_DIR}"
            self.ensure_dir(gadget_root)
            if self.dir_exists(gadget_root):
                LOG.info(f"Using ConfigFS root: {root}")
                return root
        LOG.warning("Failed to find any valid ConfigFS root")
        return None

    def resolve_gadget_path(self, root: str) -> Optional[str]:
        """
        Reuse an existing gadget under root/usb_gadget, or create ours.

        Reusing avoids colliding with a gadget other software already set up.
        """
        gadget_root = f"{root}/{USB_GADGET_DIR}"
        existing = self.first_child(gadget_root)
        if existing:
            LOG.info(f"Reusing gadget: {gadget_root}/{existing}")
            return f"{gadget_root}/{existing}"

        gadget_path = f"{gadget_root}/{self.config.gadget_name}"
        self.ensure_dir(gadget_path)
        if self.dir_exists(gadget_path):
            LOG.info(f"Created gadget: {gadget_path}")
            return gadget_path
        return None

    def resolve_function_path(self, gadget_path: str) -> str:
        candidates = [f"{gadget_path}/functions/{name}" for name in MASS_STORAGE_FUNCTIONS]
        for path in candidates:
            if self.dir_exists(path):
                LOG.debug(f"Using existing function: {path}")
                return path
        # created later by the configure sequence
        LOG.debug(f"No mass storage function found, falling back to {candidates[0]}")
        return candidates[0]

    def resolve_lun_path(self, function_path: str, lun: int) -> str:
        indexed = f"{function_path}/lun.{lun}"
        if self.dir_exists(indexed):
            return indexed
        flat = f"{function_path}/lun"
        if self.dir_exists(flat):
            return flat
        return indexed

    def resolve_config_dir(self, gadget_path: str) -> str:
        return self.first_child(f"{gadget_path}/configs") or DEFAULT_CONFIG_DIR

    def resolve_udc_name(self) -> Optional[str]:
        udc = self.first_child(UDC_CLASS_PATH)
        LOG.info(f"Found UDC: {udc}")
        return udc

    # ---------- legacy ----------

    def legacy_available(self) -> bool:
        return self.dir_exists(LEGACY_USB_PATH)

    # ---------- loop ----------

    def resolve_loop_setup_binary(self) -> Optional[str]:
        for candidate in LOOP_SETUP_CANDIDATES:
            LOG.debug(f"Testing losetup candidate: {candidate}")
            result = self.executor.run([f"{candidate} -h || {candidate} --help || true"])
            if 'loop' in result.combined_output().lower():
                LOG.info(f"Using losetup binary '{candidate}'")
                return candidate
        LOG.warning("No valid losetup binary found")
        return None
