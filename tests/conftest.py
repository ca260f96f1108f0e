"""Shared fixtures"""

import pytest

from simpleboot.config import SimpleBootConfig
from simpleboot.models import DatabaseManager
from simpleboot.services import MountService, MountStateStore
from tests.fakes import configfs_kernel


@pytest.fixture
def config(tmp_path):
    return SimpleBootConfig(config_data={
        'db_url': 'sqlite://',
        'images_dir': str(tmp_path / 'images'),
        'log_dir': str(tmp_path / 'logs'),
        'lock_dir': str(tmp_path / 'lock'),
        'settle_delay': '0',
    }, use_environment=False)


@pytest.fixture
def db_manager():
    manager = DatabaseManager('sqlite://')
    manager.initialize()
    yield manager
    manager.close()


@pytest.fixture
def store(db_manager):
    return MountStateStore(db_manager)


@pytest.fixture
def image(tmp_path):
    path = tmp_path / 'images' / 'ubuntu.iso'
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b'\0' * 2048)
    return str(path)


@pytest.fixture
def other_image(tmp_path):
    path = tmp_path / 'images' / 'debian.img'
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b'\0' * 1024)
    return str(path)


@pytest.fixture
def executor():
    return configfs_kernel()


@pytest.fixture
def service(config, executor, store):
    return MountService(config, executor, store)
