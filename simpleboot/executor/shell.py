"""Shell executor - runs command batches through a privilege wrapper such as su"""

import shlex
import subprocess
from typing import List, Sequence

from simpleboot.executor.base import CommandExecutor, ExecResult
from simpleboot.utils.logger import get_logger

LOG = get_logger(__name__)


class ShellExecutor(CommandExecutor):
    """Runs each batch as a single shell script."""

    DEFAULT_SHELL = 'sh'

    def __init__(self, privilege_wrapper: str = 'su -c', timeout: int = 120,
                 shell: str = DEFAULT_SHELL):
        """
        Args:
            privilege_wrapper: Command prefix receiving the script as its last
                argument (e.g. 'su -c'). Empty runs the shell directly.
            timeout: Seconds before a batch is abandoned
            shell: Shell used when no wrapper is configured
        """
        self.privilege_wrapper = privilege_wrapper or ''
        self.timeout = timeout
        self.shell = shell

    @staticmethod
    def build_script(commands: Sequence[str], strict: bool = True) -> str:
        lines = list(commands)
        if strict:
            lines.insert(0, 'set -e')
        return '\n'.join(lines)

    def build_argv(self, script: str) -> List[str]:
        if self.privilege_wrapper.strip():
            return shlex.split(self.privilege_wrapper) + [script]
        return [self.shell, '-c', script]

    def run(self, commands: Sequence[str], strict: bool = True) -> ExecResult:
        commands = list(commands)
        if not commands:
            return ExecResult(True)

        script = self.build_script(commands, strict)
        LOG.debug(f"[CMD] {' && '.join(commands)}")

        try:
            result = subprocess.run(
                self.build_argv(script),
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
        except subprocess.TimeoutExpired:
            LOG.error(f"Command batch timed out after {self.timeout} seconds")
            return ExecResult(False, -1, '', f'Command timeout after {self.timeout} seconds')
        except OSError as e:
            LOG.error(f"Failed to start shell: {e}")
            return ExecResult(False, -1, '', str(e))

        if result.stdout.strip():
            LOG.debug(f"[OUT] {result.stdout.strip()[:4000]}")
        if result.stderr.strip():
            LOG.debug(f"[ERR] {result.stderr.strip()[:4000]}")

        return ExecResult(result.returncode == 0, result.returncode, result.stdout, result.stderr)
