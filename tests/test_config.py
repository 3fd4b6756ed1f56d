# ========================
# tests/test_config.py
# ========================

import unittest
import sys
import os
from unittest import mock

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from eventlab.utils.config import Config


class TestConfig(unittest.TestCase):

    def test_defaults(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            config = Config()

        self.assertEqual(config.DEFAULT_INPUT_FILE, 'data/raw/events.csv')
        self.assertEqual(config.SAMPLE_ROWS, 500)
        self.assertEqual(config.SAMPLE_USERS, 50)
        self.assertIsNone(config.SAMPLE_SEED)
        self.assertEqual(config.PREVIEW_ROWS, 10)
        self.assertEqual(config.max_upload_bytes, 20 * 1024 * 1024)
        self.assertTrue(all(config.validate_config().values()))

    def test_environment_overrides(self):
        env = {'SAMPLE_ROWS': '25', 'SAMPLE_SEED': '9', 'LOG_LEVEL': 'DEBUG', 'API_PORT': '9000'}
        with mock.patch.dict(os.environ, env, clear=True):
            config = Config()

        self.assertEqual(config.SAMPLE_ROWS, 25)
        self.assertEqual(config.SAMPLE_SEED, 9)
        self.assertEqual(config.LOG_LEVEL, 'DEBUG')
        self.assertEqual(config.API_PORT, 9000)

    def test_dict_overrides_and_validation(self):
        config = Config({'preview_rows': 3, 'api_port': 80, 'log_level': 'LOUD', 'unknown': 1})

        self.assertEqual(config.PREVIEW_ROWS, 3)
        self.assertFalse(hasattr(config, 'UNKNOWN'))

        validations = config.validate_config()
        self.assertFalse(validations['api_port'])
        self.assertFalse(validations['log_level'])
        self.assertTrue(validations['preview_rows'])

    def test_to_dict_and_str(self):
        config = Config()

        settings = config.to_dict()

        self.assertIn('PREVIEW_ROWS', settings)
        self.assertNotIn('max_upload_bytes', settings)
        self.assertTrue(str(config).startswith("Configuration Settings:"))


if __name__ == '__main__':
    unittest.main()
