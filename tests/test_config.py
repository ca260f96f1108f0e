"""
Unit tests for configuration loading
"""

import os
import tempfile
import unittest
from unittest.mock import patch

from simpleboot.config import SimpleBootConfig
from simpleboot.exceptions import ConfigurationException


class TestSimpleBootConfig(unittest.TestCase):
    """Test cases for SimpleBootConfig"""

    def setUp(self):
        self.tmp_dir = tempfile.mkdtemp()
        self.config_file = os.path.join(self.tmp_dir, 'simpleboot.conf')

    def _write(self, text):
        with open(self.config_file, 'w') as f:
            f.write(text)

    def test_defaults(self):
        config = SimpleBootConfig(use_environment=False)

        self.assertEqual(config.images_dir, '/sdcard/SimpleBootISOs')
        self.assertEqual(config.privilege_wrapper, 'su -c')
        self.assertEqual(config.settle_delay, 1.0)
        self.assertFalse(config.log_json)

    def test_missing_file_uses_defaults(self):
        config = SimpleBootConfig.from_file(os.path.join(self.tmp_dir, 'nope.conf'),
                                            use_environment=False)
        self.assertEqual(config.gadget_name, 'g1')

    def test_file_values(self):
        self._write("[simpleboot]\n"
                    "images_dir = /data/isos\n"
                    "settle_delay = 2.5\n"
                    "log_json = yes\n")

        config = SimpleBootConfig.from_file(self.config_file, use_environment=False)

        self.assertEqual(config.images_dir, '/data/isos')
        self.assertEqual(config.settle_delay, 2.5)
        self.assertTrue(config.log_json)
        self.assertEqual(config.config_file, self.config_file)

    def test_environment_overrides_file(self):
        self._write("[simpleboot]\nlock_timeout = 10\n")

        with patch.dict(os.environ, {'SIMPLEBOOT_LOCK_TIMEOUT': '45'}):
            config = SimpleBootConfig.from_file(self.config_file)

        self.assertEqual(config.lock_timeout, 45)

    def test_override_ignores_none(self):
        config = SimpleBootConfig(use_environment=False)
        config.override(db_url='sqlite://', images_dir=None)

        self.assertEqual(config.db_url, 'sqlite://')
        self.assertEqual(config.images_dir, '/sdcard/SimpleBootISOs')

    def test_override_unknown_key(self):
        with self.assertRaises(ConfigurationException):
            SimpleBootConfig(use_environment=False).override(node_id='x')

    def test_invalid_number(self):
        with self.assertRaises(ConfigurationException):
            SimpleBootConfig({'command_timeout': 'soon'}, use_environment=False)

    def test_invalid_ranges(self):
        with self.assertRaises(ConfigurationException):
            SimpleBootConfig({'lock_timeout': '0'}, use_environment=False)
        with self.assertRaises(ConfigurationException):
            SimpleBootConfig({'settle_delay': '-1'}, use_environment=False)

    def test_malformed_file(self):
        self._write("this is not ini\n")
        with self.assertRaises(ConfigurationException):
            SimpleBootConfig.from_file(self.config_file, use_environment=False)

    def test_as_dict(self):
        data = SimpleBootConfig(use_environment=False).as_dict()
        self.assertIn('vendor_id', data)
        self.assertEqual(data['product_id'], '0x4e21')


if __name__ == '__main__':
    unittest.main()
