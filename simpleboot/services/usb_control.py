"""Host-facing USB toggles: debug bridge and charging"""

from typing import List

from simpleboot.constants import (
    USB_CONFIG_PROP, USB_COMPOSITION_DEFAULT, USB_COMPOSITION_NO_ADB, USB_CHARGE_NODE,
)
from simpleboot.exceptions import CommandExecutionException
from simpleboot.executor import CommandExecutor
from simpleboot.utils.logger import get_logger

LOG = get_logger(__name__)


class HostUsbControl:
    """Switches what the device offers the host next to the mass storage function."""

    def __init__(self, executor: CommandExecutor):
        self.executor = executor

    @staticmethod
    def adb_commands(enabled: bool) -> List[str]:
        composition = USB_COMPOSITION_DEFAULT if enabled else USB_COMPOSITION_NO_ADB
        return [f"setprop {USB_CONFIG_PROP} {composition}"]

    @staticmethod
    def charging_commands(enabled: bool) -> List[str]:
        return [f"echo {1 if enabled else 0} > {USB_CHARGE_NODE}"]

    def _apply(self, commands: List[str], description: str, done: str) -> str:
        result = self.executor.run(commands)
        if not result.success:
            LOG.error(f"Failed to {description}: {result.diagnostic()}")
            raise CommandExecutionException(f"Failed to {description}: {result.diagnostic()}")
        LOG.info(f"USB: {description}")
        return done

    def set_adb(self, enabled: bool) -> str:
        """
        Add or remove the debug bridge from the USB composition.

        Returns:
            Confirmation message

        Raises:
            CommandExecutionException: If setprop fails
        """
        return self._apply(self.adb_commands(enabled),
                           "enable ADB" if enabled else "disable ADB",
                           "ADB enabled." if enabled else "ADB disabled.")

    def set_charging(self, enabled: bool) -> str:
        """
        Allow or stop charging over USB.

        Raises:
            CommandExecutionException: If the charge node cannot be written
        """
        return self._apply(self.charging_commands(enabled),
                           "enable charging" if enabled else "disable charging",
                           "Charging enabled." if enabled else "Charging disabled.")
