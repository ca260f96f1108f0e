"""Cleanup coordinator - defensive teardown across every known gadget facility"""

from dataclasses import dataclass
from typing import List, Optional

from simpleboot.constants import (
    CONFIGFS_ROOTS, USB_GADGET_DIR, LEGACY_USB_PATH, LEGACY_LUN_FILE,
    LOOP_DETACH_TOOLS, USB_CONFIG_PROP, USB_STATE_PROP, USB_COMPOSITION_DEFAULT,
)
from simpleboot.executor import CommandExecutor, ExecResult
from simpleboot.utils.logger import get_logger

LOG = get_logger(__name__)


@dataclass(frozen=True)
class CleanupStep:
    """A teardown action; failures are tolerated unless ignore_failure is False"""
    command: str
    ignore_failure: bool = True

    def render(self) -> str:
        if self.ignore_failure:
            return f"{self.command} || true"
        return self.command


class CleanupCoordinator:
    """
    Reverses gadget state whether or not it was set up by the method in use.

    Every ConfigFS root, the legacy tree and every loop utility are visited,
    so state left behind by an earlier run with another method is repaired
    too. All steps are idempotent.
    """

    def __init__(self, executor: CommandExecutor):
        self.executor = executor

    @staticmethod
    def build_steps(loop_device: Optional[str] = None) -> List[CleanupStep]:
        steps = []
        for root in CONFIGFS_ROOTS:
            gadgets = f"{root}/{USB_GADGET_DIR}/*"
            steps += [
                CleanupStep(f"for g in {gadgets}; do echo '' > \"$g/UDC\"; done 2>/dev/null"),
                CleanupStep(f"find {gadgets}/configs -type l -delete 2>/dev/null"),
                CleanupStep(f"rm -rf {gadgets}/functions/mass_storage.* 2>/dev/null"),
            ]

        steps += [
            CleanupStep(f"echo 0 > {LEGACY_USB_PATH}/enable 2>/dev/null"),
            CleanupStep(f"echo '' > {LEGACY_LUN_FILE} 2>/dev/null"),
        ]

        if loop_device:
            steps += [
                CleanupStep(f"{tool} -d {loop_device} 2>/dev/null")
                for tool in LOOP_DETACH_TOOLS
            ]

        steps += [
            CleanupStep(f"setprop {USB_CONFIG_PROP} {USB_COMPOSITION_DEFAULT}"),
            CleanupStep(f"setprop {USB_STATE_PROP} {USB_COMPOSITION_DEFAULT}"),
        ]
        return steps

    def run(self, loop_device: Optional[str] = None) -> ExecResult:
        """
        Execute every teardown step in order.

        Args:
            loop_device: Loop device to detach, if one is known

        Returns:
            ExecResult of the batch
        """
        LOG.info(f"Performing cleanup for loop={loop_device}")
        commands = [step.render() for step in self.build_steps(loop_device)]
        result = self.executor.run(commands, strict=False)
        if result.success:
            LOG.info("Cleanup complete - USB restored")
        else:
            LOG.warning(f"Cleanup reported failure: {result.diagnostic()}")
        return result
