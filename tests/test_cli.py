"""Tests for the command-line entry point."""

import argparse
import json
import unittest
from unittest import mock

from sitemap_digest import cli
from sitemap_digest.config import Settings
from sitemap_digest.context import build_context
from sitemap_digest.services.channels import LoggingChannel
from sitemap_digest.services.store import InMemoryStore


def feed_args(list_feeds=False, add_feed=None, remove_feed=None):
    return argparse.Namespace(list_feeds=list_feeds, add_feed=add_feed, remove_feed=remove_feed)


class TestManageFeeds(unittest.TestCase):
    """Test cases for manage_feeds()."""

    def setUp(self):
        self.store = InMemoryStore({"feeds": json.dumps(["https://a.com/sitemap.xml"])})
        settings = Settings(target_chat="@chat", store_backend="memory", dry_run=True)
        self.context = build_context(settings, store=self.store, channel=LoggingChannel())

    def test_add_feed(self):
        code = cli.manage_feeds(self.context, feed_args(add_feed="https://b.com/sitemap.xml"))

        self.assertEqual(code, 0)
        self.assertEqual(
            json.loads(self.store.get("feeds")),
            ["https://a.com/sitemap.xml", "https://b.com/sitemap.xml"],
        )

    def test_remove_missing_feed_fails(self):
        code = cli.manage_feeds(self.context, feed_args(remove_feed="https://zzz.com/sitemap.xml"))

        self.assertEqual(code, 1)
        self.assertEqual(json.loads(self.store.get("feeds")), ["https://a.com/sitemap.xml"])

    def test_list_feeds(self):
        with mock.patch("builtins.print") as printed:
            code = cli.manage_feeds(self.context, feed_args(list_feeds=True))

        self.assertEqual(code, 0)
        printed.assert_called_once_with("1. https://a.com/sitemap.xml")


class TestMain(unittest.TestCase):
    """Test cases for main()."""

    def setUp(self):
        self.store = InMemoryStore()
        patcher = mock.patch.object(cli, "setup_logging")
        patcher.start()
        self.addCleanup(patcher.stop)

    def _build(self, settings):
        return build_context(settings, store=self.store, channel=LoggingChannel())

    def test_add_feed_needs_no_bot_token(self):
        def settings_for(config, batch_size=None, dry_run=None):
            return Settings(target_chat="@chat", store_backend="memory", dry_run=bool(dry_run))

        with mock.patch.object(cli, "load_settings", side_effect=settings_for), \
                mock.patch.object(cli, "build_context", side_effect=self._build):
            code = cli.main(["--add-feed", "https://a.com/sitemap.xml"])

        self.assertEqual(code, 0)
        self.assertEqual(json.loads(self.store.get("feeds")), ["https://a.com/sitemap.xml"])

    def test_configuration_error_exit_code(self):
        with mock.patch.object(cli, "load_settings", return_value=Settings()):
            code = cli.main(["--once"])

        self.assertEqual(code, 2)


if __name__ == "__main__":
    unittest.main()
