"""Command executors package"""

from simpleboot.executor.base import CommandExecutor, ExecResult
from simpleboot.executor.shell import ShellExecutor

__all__ = ['CommandExecutor', 'ExecResult', 'ShellExecutor']
