"""
SimpleBoot Configuration Module
Supports loading from:
1. INI config file (/etc/simpleboot/simpleboot.conf)
2. Environment variables (override config file)
3. Default values (fallback)
"""

import os
import logging
from configparser import ConfigParser, Error as ConfigParserError
from typing import Dict, Any, Optional

from simpleboot.exceptions import ConfigurationException

logger = logging.getLogger(__name__)


class SimpleBootConfig:
    """SimpleBoot Configuration Manager"""

    CONFIG_FILE = '/etc/simpleboot/simpleboot.conf'
    CONFIG_SECTION = 'simpleboot'
    ENV_PREFIX = 'SIMPLEBOOT_'

    # Default values
    DEFAULT_DB_URL = 'sqlite:////data/local/tmp/simpleboot/state.db'
    DEFAULT_IMAGES_DIR = '/sdcard/SimpleBootISOs'
    DEFAULT_LOG_DIR = '/sdcard/SimpleBootLogs'
    DEFAULT_LOG_LEVEL = 'INFO'
    DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    DEFAULT_LOG_JSON = False
    DEFAULT_LOCK_DIR = '/data/local/tmp/simpleboot/lock'
    DEFAULT_LOCK_TIMEOUT = 30
    DEFAULT_PRIVILEGE_WRAPPER = 'su -c'
    DEFAULT_COMMAND_TIMEOUT = 120
    DEFAULT_SETTLE_DELAY = 1
    DEFAULT_GADGET_NAME = 'g1'
    DEFAULT_VENDOR_ID = '0x18d1'
    DEFAULT_PRODUCT_ID = '0x4e21'
    DEFAULT_MANUFACTURER = 'SimpleBoot'
    DEFAULT_PRODUCT = 'SimpleBoot USB'

    # key -> (default attribute, cast)
    _OPTIONS = {
        'db_url': ('DEFAULT_DB_URL', str),
        'images_dir': ('DEFAULT_IMAGES_DIR', str),
        'log_dir': ('DEFAULT_LOG_DIR', str),
        'log_level': ('DEFAULT_LOG_LEVEL', str),
        'log_format': ('DEFAULT_LOG_FORMAT', str),
        'log_json': ('DEFAULT_LOG_JSON', '_to_bool'),
        'lock_dir': ('DEFAULT_LOCK_DIR', str),
        'lock_timeout': ('DEFAULT_LOCK_TIMEOUT', int),
        'privilege_wrapper': ('DEFAULT_PRIVILEGE_WRAPPER', str),
        'command_timeout': ('DEFAULT_COMMAND_TIMEOUT', int),
        'settle_delay': ('DEFAULT_SETTLE_DELAY', float),
        'gadget_name': ('DEFAULT_GADGET_NAME', str),
        'vendor_id': ('DEFAULT_VENDOR_ID', str),
        'product_id': ('DEFAULT_PRODUCT_ID', str),
        'manufacturer': ('DEFAULT_MANUFACTURER', str),
        'product': ('DEFAULT_PRODUCT', str),
    }

    def __init__(self, config_data: Optional[Dict[str, Any]] = None,
                 use_environment: bool = True):
        """
        Build a configuration.

        Args:
            config_data: Values read from a config file (lowest priority
                above the defaults)
            use_environment: Whether SIMPLEBOOT_* environment variables
                override config_data
        """
        config_data = config_data or {}
        self.config_file = None

        # Priority: env var > config file > default
        for key, (default_attr, cast) in self._OPTIONS.items():
            value = config_data.get(key, getattr(self, default_attr))
            if use_environment:
                value = os.environ.get(self.ENV_PREFIX + key.upper(), value)
            setattr(self, key, self._cast(key, value, cast))

        if self.lock_timeout <= 0:
            raise ConfigurationException("lock_timeout must be positive")
        if self.settle_delay < 0:
            raise ConfigurationException("settle_delay must not be negative")

    @classmethod
    def from_file(cls, config_file: Optional[str] = None,
                  use_environment: bool = True) -> 'SimpleBootConfig':
        """
        Load configuration from an INI file and environment variables.

        Args:
            config_file: Path to config file (defaults to CONFIG_FILE)
            use_environment: Whether environment variables override the file

        Returns:
            SimpleBootConfig instance
        """
        config_file = config_file or cls.CONFIG_FILE
        logger.debug(f"Loading config from: {config_file}")

        config = cls(cls._load_ini_file(config_file), use_environment=use_environment)
        config.config_file = config_file
        return config

    @classmethod
    def _load_ini_file(cls, config_file: str) -> Dict[str, Any]:
        """
        Load configuration from INI file.

        Expected format:
        [simpleboot]
        db_url = sqlite:////data/local/tmp/simpleboot/state.db
        images_dir = /sdcard/SimpleBootISOs
        settle_delay = 1
        """
        config_data = {}

        if not os.path.exists(config_file):
            logger.debug(f"Config file not found: {config_file}, using defaults")
            return config_data

        parser = ConfigParser()
        try:
            parser.read(config_file)
        except ConfigParserError as e:
            raise ConfigurationException(f"Failed to parse config file {config_file}: {e}")

        for section in [cls.CONFIG_SECTION, 'DEFAULT']:
            if parser.has_section(section) or section == 'DEFAULT':
                for key, value in parser.items(section):
                    if key not in config_data:
                        config_data[key] = value

        logger.info(f"Loaded {len(config_data)} config parameters from {config_file}")
        return config_data

    @classmethod
    def _cast(cls, key: str, value: Any, cast) -> Any:
        if cast == '_to_bool':
            return cls._to_bool(value)
        try:
            return cast(value)
        except (TypeError, ValueError):
            raise ConfigurationException(f"Invalid value for {key}: {value!r}")

    @staticmethod
    def _to_bool(value: Any) -> bool:
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in ('1', 'true', 'yes', 'on')

    def override(self, **values) -> 'SimpleBootConfig':
        """Apply non-empty overrides (e.g. from CLI options)."""
        for key, value in values.items():
            if value is None:
                continue
            if key not in self._OPTIONS:
                raise ConfigurationException(f"Unknown configuration key: {key}")
            _, cast = self._OPTIONS[key]
            setattr(self, key, self._cast(key, value, cast))
        return self

    def as_dict(self) -> Dict[str, Any]:
        """Get configuration as dictionary."""
        return {key: getattr(self, key) for key in self._OPTIONS}

    def __repr__(self):
        return f"<SimpleBootConfig(file={self.config_file}, db_url={self.db_url})>"
