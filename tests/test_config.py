"""
tests/test_config.py
=====================
Settings loading from the environment.
"""

import os
import sys
import unittest
from unittest.mock import patch

# Ensure project root is on sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from src.config import DEFAULT_MAX_UPLOAD_BYTES, Settings, load_settings


class TestLoadSettings(unittest.TestCase):

    @patch.dict(os.environ, {}, clear=True)
    def test_missing_api_key_raises(self):
        with self.assertRaises(RuntimeError):
            load_settings()

    @patch.dict(os.environ, {"GEMINI_API_KEY": "k"}, clear=True)
    def test_defaults(self):
        settings = load_settings()
        self.assertEqual(settings.gemini_model, "gemini-2.5-flash")
        self.assertEqual(settings.mongodb_collection, "audioanalyses")
        self.assertEqual(settings.max_upload_bytes, 50 * 1024 * 1024)
        self.assertEqual(settings.max_upload_bytes, DEFAULT_MAX_UPLOAD_BYTES)
        self.assertFalse(settings.is_development)

    @patch.dict(os.environ, {
        "GEMINI_API_KEY": "k",
        "GEMINI_MODEL": "gemini-2.5-pro",
        "MONGODB_URI": "mongodb://db:27017",
        "MONGODB_DB": "qa",
        "APP_ENV": "Development",
        "MAX_UPLOAD_BYTES": "1024",
    }, clear=True)
    def test_overrides(self):
        settings = load_settings()
        self.assertEqual(settings.gemini_model, "gemini-2.5-pro")
        self.assertEqual(settings.mongodb_uri, "mongodb://db:27017")
        self.assertEqual(settings.mongodb_db, "qa")
        self.assertEqual(settings.max_upload_bytes, 1024)
        self.assertTrue(settings.is_development)

    def test_settings_immutable(self):
        settings = Settings(gemini_api_key="k")
        with self.assertRaises(AttributeError):
            settings.gemini_model = "other"


if __name__ == "__main__":
    unittest.main()
