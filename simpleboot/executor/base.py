"""Privileged command execution interface"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Sequence

from simpleboot.constants import NO_OUTPUT_MESSAGE


@dataclass
class ExecResult:
    """Aggregate result of a command batch"""
    success: bool
    returncode: int = 0
    stdout: str = ''
    stderr: str = ''

    @property
    def stdout_lines(self) -> List[str]:
        return [line for line in self.stdout.splitlines() if line.strip()]

    def first_line(self) -> str:
        """First non-empty stdout line, stripped"""
        lines = self.stdout_lines
        return lines[0].strip() if lines else ''

    def combined_output(self) -> str:
        return '\n'.join(part for part in (self.stdout.strip(), self.stderr.strip()) if part)

    def diagnostic(self) -> str:
        """Captured output for error reporting, never empty"""
        return self.combined_output() or NO_OUTPUT_MESSAGE


class CommandExecutor(ABC):
    """Abstract base class for privileged command executors"""

    @abstractmethod
    def run(self, commands: Sequence[str], strict: bool = True) -> ExecResult:
        """
        Execute an ordered batch of shell commands with elevated privileges.

        Args:
            commands: Shell command strings, executed in order
            strict: Stop at the first failing command. Cleanup batches
                pass False and make every command failure tolerant.

        Returns:
            ExecResult with aggregate status and captured output
        """
        pass
