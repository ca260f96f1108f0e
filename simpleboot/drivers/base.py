"""Base gadget driver interface"""

import shlex
from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from simpleboot.config import SimpleBootConfig
from simpleboot.constants import USB_CONFIG_PROP, USB_STATE_PROP, USB_COMPOSITION_NONE
from simpleboot.exceptions import EnvironmentException
from simpleboot.executor import CommandExecutor
from simpleboot.models import (
    MountMethod, MountPhase, MountRequest, MountOutcome, ResolvedEnvironment, BindResult,
)
from simpleboot.gadget.cleanup import CleanupCoordinator
from simpleboot.gadget.loop_allocator import LoopDeviceAllocator
from simpleboot.gadget.probe import EnvironmentProbe
from simpleboot.utils.logger import get_logger

LOG = get_logger(__name__)


class BaseGadgetDriver(ABC):
    """Abstract base class for mount methods"""

    method: MountMethod = None

    def __init__(self, executor: CommandExecutor, probe: EnvironmentProbe,
                 allocator: LoopDeviceAllocator, cleanup: CleanupCoordinator,
                 config: SimpleBootConfig,
                 phase_listener: Optional[Callable[[MountPhase], None]] = None):
        self.executor = executor
        self.probe = probe
        self.allocator = allocator
        self.cleanup = cleanup
        self.config = config
        self.phase_listener = phase_listener

    def _notify(self, phase: MountPhase):
        if self.phase_listener:
            self.phase_listener(phase)

    def mount(self, request: MountRequest) -> MountOutcome:
        """
        Resolve the environment and configure the gadget.

        Missing prerequisites fail before any configure command is issued.
        """
        LOG.info(f"[{self.method.label}] Starting for {request.image_path} "
                 f"({request.presentation_mode.label}, lun={request.lun})")
        self._notify(MountPhase.PROBING)
        try:
            env = self.resolve(request)
        except EnvironmentException as e:
            LOG.error(f"[{self.method.label}] {e}")
            return MountOutcome.failure(str(e), method=self.method)
        self._notify(MountPhase.CONFIGURING)
        return self.configure(env, request)

    @abstractmethod
    def resolve(self, request: MountRequest) -> ResolvedEnvironment:
        """
        Probe the kernel facilities this method needs.

        Raises:
            EnvironmentException: If a prerequisite is missing
        """
        pass

    @abstractmethod
    def configure(self, env: ResolvedEnvironment, request: MountRequest) -> MountOutcome:
        """
        Run the command sequence for this method.

        Returns:
            MountOutcome; on failure the cleanup coordinator has already run
        """
        pass

    # ---------- shared steps ----------

    @staticmethod
    def usb_stack_off_commands() -> List[str]:
        """Drop the host-facing composition while the gadget is rebuilt."""
        return [
            f"setprop {USB_CONFIG_PROP} {USB_COMPOSITION_NONE} || true",
            f"setprop {USB_STATE_PROP} {USB_COMPOSITION_NONE} || true",
        ]

    def resolve_loop(self, env: ResolvedEnvironment) -> ResolvedEnvironment:
        env.loop_setup_binary = self.probe.resolve_loop_setup_binary()
        if not env.loop_setup_binary:
            raise EnvironmentException("No losetup binary found.")
        env.loop_device = self.allocator.acquire(env.loop_setup_binary)
        if not env.loop_device:
            raise EnvironmentException("No available loop device.")
        return env

    @staticmethod
    def attach_loop_commands(env: ResolvedEnvironment, image_path: str):
        losetup, loop = env.loop_setup_binary, env.loop_device
        return [
            f"{losetup} -d {loop} || true",
            f"{losetup} -r {loop} {shlex.quote(image_path)}",
        ]

    def bind_via_loop(self, env: ResolvedEnvironment, image_path: str,
                      lun_file: Optional[str] = None) -> BindResult:
        """Attach the image read-only to the loop device, then hand the device to the LUN."""
        commands = self.attach_loop_commands(env, image_path)
        if lun_file:
            commands.append(f"echo {shlex.quote(env.loop_device)} > {shlex.quote(lun_file)}")
        result = self.executor.run(commands)
        if not result.success:
            return BindResult.failed(result.diagnostic())
        return BindResult.loop(env.loop_device)

    def abort(self, env: ResolvedEnvironment, diagnostic: str) -> MountOutcome:
        LOG.error(f"[{self.method.label}] Failure:\n{diagnostic}")
        self.cleanup.run(env.loop_device)
        return MountOutcome.failure(diagnostic, method=self.method, cleaned_up=True)
