"""Mount state store - the single persisted record of what is mounted"""

import time
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from simpleboot.models import DatabaseManager, MountRecord, MountStateEntry
from simpleboot.exceptions import StateStoreException
from simpleboot.utils.logger import get_logger

LOG = get_logger(__name__)


class MountStateStore:
    """
    Durable single-slot store for the current MountRecord.

    Writes are last-writer-wins; the service layer guarantees only one
    mount or unmount runs at a time, so no locking happens here.
    """

    KEY_FILE_PATH = 'mounted_file_path'
    KEY_LOOP_DEVICE = 'loop_device'
    KEY_MOUNT_TIME = 'mount_time'
    KEY_LUN_USED = 'lun_used'
    KEYS = (KEY_FILE_PATH, KEY_LOOP_DEVICE, KEY_MOUNT_TIME, KEY_LUN_USED)

    def __init__(self, db_manager: DatabaseManager):
        self.db_manager = db_manager

    def save(self, image_path: str, loop_device: str, lun: str) -> MountRecord:
        """
        Overwrite the persisted record.

        Args:
            image_path: Image being exposed
            loop_device: Loop device allocated for it
            lun: Logical unit index, as a string

        Returns:
            The saved MountRecord

        Raises:
            StateStoreException: If the record cannot be written
        """
        record = MountRecord(
            image_path=image_path,
            loop_device=loop_device,
            lun=str(lun),
            mounted_at=int(time.time() * 1000)
        )
        LOG.info(f"Saving mount info -> filePath={image_path}, loop={loop_device}, lun={lun}")

        values = {
            self.KEY_FILE_PATH: record.image_path,
            self.KEY_LOOP_DEVICE: record.loop_device,
            self.KEY_MOUNT_TIME: str(record.mounted_at),
            self.KEY_LUN_USED: record.lun,
        }
        try:
            with self.db_manager.session_scope() as session:
                for key, value in values.items():
                    session.merge(MountStateEntry(key=key, value=value))
        except SQLAlchemyError as e:
            raise StateStoreException(f"Failed to save mount state: {e}")

        return record

    def load(self) -> Optional[MountRecord]:
        """
        Load the persisted record.

        Partially written or malformed state is treated as "nothing mounted".

        Returns:
            MountRecord, or None if there is no valid record
        """
        try:
            with self.db_manager.session_scope() as session:
                rows = session.query(MountStateEntry).filter(
                    MountStateEntry.key.in_(self.KEYS)
                ).all()
                values = {row.key: row.value for row in rows}
        except SQLAlchemyError as e:
            LOG.error(f"Error while loading mount state: {e}")
            return None

        file_path = values.get(self.KEY_FILE_PATH)
        loop_device = values.get(self.KEY_LOOP_DEVICE)
        lun = values.get(self.KEY_LUN_USED)
        try:
            mount_time = int(values.get(self.KEY_MOUNT_TIME) or -1)
        except ValueError:
            mount_time = -1

        if file_path is None or loop_device is None or lun is None or mount_time <= 0:
            LOG.debug("No valid mount info found")
            return None

        return MountRecord(file_path, loop_device, lun, mount_time)

    def clear(self):
        """
        Erase the record.

        Raises:
            StateStoreException: If the record cannot be removed
        """
        LOG.info("Clearing stored mount info")
        try:
            with self.db_manager.session_scope() as session:
                session.query(MountStateEntry).filter(
                    MountStateEntry.key.in_(self.KEYS)
                ).delete(synchronize_session=False)
        except SQLAlchemyError as e:
            raise StateStoreException(f"Failed to clear mount state: {e}")
