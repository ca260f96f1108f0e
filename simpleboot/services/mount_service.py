"""Mount service - orchestrates pre-flight checks, drivers, cleanup and the state store"""

from typing import Optional, Union

from simpleboot.config import SimpleBootConfig
from simpleboot.executor import CommandExecutor, ShellExecutor
from simpleboot.exceptions import (
    PreconditionException, ImageNotFoundException, DuplicateMountException, StateStoreException,
)
from simpleboot.gadget import CleanupCoordinator
from simpleboot.models import (
    DatabaseManager, MountMethod, PresentationMode, MountPhase, MountRequest, MountOutcome,
    MountRecord,
)
from simpleboot.services.state_store import MountStateStore
from simpleboot.services.strategy import MountStrategySelector, build_drivers
from simpleboot.utils.logger import get_logger, log_mount_event, log_unmount_event
from simpleboot.utils.validators import validate_image_path, validate_lun

LOG = get_logger(__name__)


class MountService:
    """
    Core mount/unmount service.

    Callers must not run two mount/unmount sequences at once; the CLI holds
    an OperationLock around every call for this reason.
    """

    def __init__(self, config: SimpleBootConfig, executor: CommandExecutor,
                 state_store: MountStateStore,
                 selector: Optional[MountStrategySelector] = None,
                 cleanup: Optional[CleanupCoordinator] = None):
        self.config = config
        self.executor = executor
        self.state_store = state_store
        self.cleanup = cleanup or CleanupCoordinator(executor)
        self.selector = selector or MountStrategySelector(
            build_drivers(executor, config, self.cleanup, phase_listener=self._set_phase)
        )
        self.phase = MountPhase.IDLE

    @classmethod
    def from_config(cls, config: SimpleBootConfig) -> 'MountService':
        executor = ShellExecutor(
            privilege_wrapper=config.privilege_wrapper,
            timeout=config.command_timeout
        )
        state_store = MountStateStore(DatabaseManager.from_config(config))
        return cls(config, executor, state_store)

    def _set_phase(self, phase: MountPhase):
        if phase is not self.phase:
            LOG.debug(f"Mount phase: {self.phase.value} -> {phase.value}")
        self.phase = phase

    def current_mount(self) -> Optional[MountRecord]:
        return self.state_store.load()

    def close(self):
        self.state_store.db_manager.close()

    def _preflight(self, request: MountRequest):
        """
        Checks that run before any privileged command is issued.

        Raises:
            PreconditionException: If the request cannot proceed
        """
        if not validate_lun(request.lun):
            raise PreconditionException(f"Invalid logical unit index: {request.lun}")

        if not validate_image_path(request.image_path):
            raise ImageNotFoundException("File does not exist.")

        existing = self.state_store.load()
        if existing and existing.image_path == request.image_path:
            LOG.warning(f"Same image already mounted ({existing.loop_device})")
            raise DuplicateMountException("Image is already mounted.")

    def mount(self, image_path: str,
              method: Union[MountMethod, str] = MountMethod.AUTO,
              presentation_mode: Union[PresentationMode, str] = PresentationMode.READ_ONLY_DISK,
              lun: int = 0) -> MountOutcome:
        """
        Expose an image to the host.

        Args:
            image_path: Path of the ISO/IMG file
            method: Mount method, AUTO tries ConfigFS, Legacy, then Loopback
            presentation_mode: How the LUN is presented to the host
            lun: Logical unit index

        Returns:
            MountOutcome; expected failures never raise
        """
        LOG.info(f"[mount] Request -> path={image_path}, method={method}, "
                 f"mode={presentation_mode}, lun={lun}")
        try:
            request = MountRequest(image_path, method, presentation_mode, lun)
            self._preflight(request)
        except ValueError as e:
            LOG.error(f"[mount] Invalid request: {e}")
            return MountOutcome.failure(f"Invalid request: {e}")
        except PreconditionException as e:
            LOG.error(f"[mount] Aborted: {e}")
            return MountOutcome.failure(str(e))

        self._set_phase(MountPhase.PROBING)
        outcome = self.selector.execute(request)

        if not outcome.success:
            self._set_phase(MountPhase.CLEANED_UP if outcome.cleaned_up else MountPhase.FAILED)
            LOG.info(f"[mount] Result -> success=False, message='{outcome.message}'")
            return outcome

        lun_used = '0' if outcome.method is MountMethod.LOOPBACK else str(request.lun)
        try:
            self.state_store.save(request.image_path, outcome.loop_device or '', lun_used)
        except StateStoreException as e:
            LOG.error(f"[mount] {e}")
            self.cleanup.run(outcome.loop_device)
            self._set_phase(MountPhase.CLEANED_UP)
            return MountOutcome.failure(str(e), method=outcome.method, cleaned_up=True)

        self._set_phase(MountPhase.ACTIVE)
        log_mount_event(
            request.file_name, outcome.loop_device or f"LUN {lun_used}",
            f"{outcome.method.label} ({request.presentation_mode.label})"
        )
        LOG.info(f"[mount] Result -> success=True, message='{outcome.message}'")
        return outcome

    def unmount(self) -> MountOutcome:
        """
        Tear down the gadget and loop device recorded in the state store.

        Returns:
            MountOutcome; fails without issuing commands if nothing is mounted
        """
        LOG.info("[unmount] Requested")
        record = self.state_store.load()
        if not record:
            LOG.info("[unmount] Nothing mounted")
            return MountOutcome.failure("Nothing is currently mounted.")

        LOG.info(f"[unmount] Cleaning up gadget and loop device {record.loop_device}")
        result = self.cleanup.run(record.loop_device or None)
        if not result.success:
            LOG.error(f"[unmount] Failure:\n{result.diagnostic()}")
            return MountOutcome.failure(result.diagnostic())

        try:
            self.state_store.clear()
        except StateStoreException as e:
            LOG.error(f"[unmount] {e}")
            return MountOutcome.failure(str(e))

        self._set_phase(MountPhase.IDLE)
        log_unmount_event(record.file_name, record.loop_device or f"LUN {record.lun}")
        LOG.info("[unmount] Success - cleared state, restored USB config")
        return MountOutcome.ok("Unmount successful.", loop_device=record.loop_device or None)
