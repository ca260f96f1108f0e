"""Database models - key-value table holding the persisted mount record"""

import os
from datetime import datetime
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, Column, String, DateTime, Text
from sqlalchemy.orm import declarative_base, sessionmaker, scoped_session, Session
from sqlalchemy.pool import StaticPool

from simpleboot.config import SimpleBootConfig
from simpleboot.utils.logger import get_logger

LOG = get_logger(__name__)
Base = declarative_base()

IN_MEMORY_URLS = ('sqlite://', 'sqlite:///:memory:')


class MountStateEntry(Base):
    """Application-scoped key-value preference"""
    __tablename__ = 'mount_state'

    key = Column(String(64), primary_key=True)
    value = Column(Text, nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<MountStateEntry(key={self.key}, value={self.value})>"


class DatabaseManager:
    """Owns the engine for the state database; sessions are opened lazily"""

    def __init__(self, db_url: str):
        self.db_url = db_url
        self._engine = None
        self._sessions = None

    @classmethod
    def from_config(cls, config: SimpleBootConfig) -> 'DatabaseManager':
        return cls(config.db_url)

    @property
    def ready(self) -> bool:
        return self._sessions is not None

    def initialize(self):
        """Create the engine and the mount_state table if needed"""
        LOG.debug(f"Opening state database {self.db_url}")
        if self.db_url in IN_MEMORY_URLS:
            # one shared connection, otherwise every session sees an empty database
            engine = create_engine(self.db_url, connect_args={'check_same_thread': False},
                                   poolclass=StaticPool)
        else:
            self._ensure_sqlite_directory()
            engine = create_engine(self.db_url)

        Base.metadata.create_all(engine)
        self._engine = engine
        self._sessions = scoped_session(sessionmaker(bind=engine))

    def _ensure_sqlite_directory(self):
        prefix = 'sqlite:///'
        if not self.db_url.startswith(prefix):
            return
        directory = os.path.dirname(self.db_url[len(prefix):])
        if directory:
            os.makedirs(directory, mode=0o700, exist_ok=True)

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """Yield a session, commit on exit, roll back on any error"""
        if not self.ready:
            self.initialize()
        session = self._sessions()
        try:
            yield session
            session.commit()
        except Exception as e:
            LOG.debug(f"Rolling back mount state transaction: {e}")
            session.rollback()
            raise
        finally:
            session.close()

    def close(self):
        if self._sessions is not None:
            self._sessions.remove()
            self._sessions = None
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
