"""Tests for settings assembly and validation."""

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from sitemap_digest.config import Settings, build_settings, load_config, load_environment


class TestBuildSettings(unittest.TestCase):
    """Test cases for build_settings()."""

    def test_defaults(self):
        settings = build_settings({}, environ={})

        self.assertEqual(settings.batch_size, 25)
        self.assertEqual(settings.progress_key, "monitoring_progress")
        self.assertEqual(settings.feed_delay_seconds, 0.2)
        self.assertFalse(settings.dry_run)

    def test_precedence_yaml_env_override(self):
        yaml_config = {"monitor": {"batch_size": 10, "timezone": "Europe/Berlin", "request_timeout": 12}}
        environ = {"BATCH_SIZE": "15", "TELEGRAM_TARGET_CHAT": "@chat", "REQUEST_TIMEOUT": "7.5"}
        settings = build_settings(yaml_config, environ=environ, batch_size=None, dry_run=True)

        self.assertEqual(settings.batch_size, 15)
        self.assertEqual(settings.timezone, "Europe/Berlin")
        self.assertEqual(settings.target_chat, "@chat")
        self.assertEqual(settings.request_timeout, 7.5)
        self.assertTrue(settings.dry_run)

        settings = build_settings(yaml_config, environ=environ, batch_size=3)
        self.assertEqual(settings.batch_size, 3)

    def test_load_config_missing_file(self):
        self.assertEqual(load_config("does/not/exist.yaml"), {})

    def test_load_config_file(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = os.path.join(tmp_dir, "config.yaml")
            with open(path, "w", encoding="utf-8") as f:
                f.write("monitor:\n  batch_size: 40\n")
            self.assertEqual(load_config(path), {"monitor": {"batch_size": 40}})


class TestLoadEnvironment(unittest.TestCase):
    """Test cases for load_environment()."""

    def setUp(self):
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp_dir.cleanup)
        os.makedirs(os.path.join(self.tmp_dir.name, "config"))

    def _write(self, relative_path, text):
        with open(os.path.join(self.tmp_dir.name, relative_path), "w", encoding="utf-8") as f:
            f.write(text)

    def test_environment_specific_file_wins(self):
        self._write("config/.env.staging", "SITEMAP_DIGEST_TEST_VALUE=staging\n")
        self._write(".env", "SITEMAP_DIGEST_TEST_VALUE=root\n")

        with mock.patch.dict(os.environ, {"ENVIRONMENT": "Staging"}):
            loaded = load_environment(self.tmp_dir.name)
            self.assertEqual(os.environ["SITEMAP_DIGEST_TEST_VALUE"], "staging")

        self.assertEqual(loaded, Path(self.tmp_dir.name) / "config" / ".env.staging")

    def test_falls_back_to_root_env(self):
        self._write(".env", "SITEMAP_DIGEST_TEST_VALUE=root\n")

        with mock.patch.dict(os.environ, {"ENVIRONMENT": "production"}):
            loaded = load_environment(self.tmp_dir.name)

        self.assertEqual(loaded, Path(self.tmp_dir.name) / ".env")

    def test_no_env_file(self):
        with mock.patch.dict(os.environ, {"ENVIRONMENT": "production"}):
            self.assertIsNone(load_environment(self.tmp_dir.name))


class TestValidate(unittest.TestCase):
    """Test cases for Settings.validate()."""

    def test_valid(self):
        settings = Settings(telegram_token="t", target_chat="@chat")
        self.assertEqual(settings.validate(), [])

    def test_problems_reported(self):
        settings = Settings(
            batch_size=0,
            store_backend="sheet",
            timezone="Mars/Olympus",
            feed_source="carrier-pigeon",
        )
        errors = settings.validate()

        self.assertIn("TELEGRAM_TARGET_CHAT is not set", errors)
        self.assertIn("TELEGRAM_BOT_TOKEN is not set", errors)
        self.assertIn("batch_size must be positive, got 0", errors)
        self.assertIn("GOOGLE_SPREADSHEET_ID is required for Google Sheets storage", errors)
        self.assertIn("Unknown timezone 'Mars/Olympus'", errors)
        self.assertIn("Unknown feed source 'carrier-pigeon'", errors)

    def test_dry_run_needs_no_token(self):
        settings = Settings(target_chat="@chat", dry_run=True)
        self.assertEqual(settings.validate(), [])


if __name__ == "__main__":
    unittest.main()
