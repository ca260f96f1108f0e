"""
Operation lock for mount/unmount sequences.

Only one mount or unmount may touch the gadget and the state store at a
time; flock on a lock file serializes concurrent CLI invocations.
"""

import os
import fcntl
import time
import errno
from contextlib import contextmanager
from typing import Optional

from simpleboot.exceptions import LockTimeoutException
from simpleboot.utils.logger import get_logger

LOG = get_logger(__name__)


class OperationLock:
    """File-based (flock) lock shared by every simpleboot process on the device."""

    DEFAULT_LOCK_DIR = "/data/local/tmp/simpleboot/lock"
    LOCK_TIMEOUT = 30
    POLL_INTERVAL = 0.1

    def __init__(self, lock_dir: Optional[str] = None, timeout: float = LOCK_TIMEOUT):
        """
        Args:
            lock_dir: Directory holding the lock files
            timeout: Seconds to wait for the lock before giving up
        """
        self.lock_dir = lock_dir or self.DEFAULT_LOCK_DIR
        self.timeout = timeout
        os.makedirs(self.lock_dir, mode=0o755, exist_ok=True)

    @classmethod
    def from_config(cls, config) -> 'OperationLock':
        return cls(lock_dir=config.lock_dir, timeout=config.lock_timeout)

    def lock_path(self, operation: str) -> str:
        return os.path.join(self.lock_dir, f"simpleboot_{operation}.lock")

    @contextmanager
    def acquire(self, operation: str = "mount_unmount"):
        """
        Hold the lock for the duration of the block.

        Args:
            operation: Name used for the lock file

        Raises:
            LockTimeoutException: If the lock is still held after the timeout

        Example:
            with OperationLock().acquire():
                service.unmount()
        """
        lock_file = open(self.lock_path(operation), 'w')
        acquired = False
        try:
            start_time = time.time()
            while True:
                try:
                    fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
                    acquired = True
                    LOG.debug(f"Acquired lock for {operation}")
                    break
                except OSError as e:
                    if e.errno not in (errno.EAGAIN, errno.EACCES):
                        raise

                    elapsed = time.time() - start_time
                    if elapsed >= self.timeout:
                        raise LockTimeoutException(
                            f"Another operation is in progress "
                            f"(could not lock {operation} after {self.timeout} seconds)"
                        )
                    time.sleep(self.POLL_INTERVAL)

            yield True

        finally:
            if acquired:
                try:
                    fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)
                    LOG.debug(f"Released lock for {operation}")
                except OSError as e:
                    LOG.error(f"Error releasing lock: {e}")
            lock_file.close()
