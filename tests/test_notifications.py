"""Tests for immediate update and digest message composition."""

import unittest
from datetime import datetime
from unittest import mock

import pytz

from sitemap_digest.models.stats import AggregateResult, DomainStat, KeywordStat
from sitemap_digest.services.channels import LoggingChannel
from sitemap_digest.services.notifications import (
    format_digest,
    format_link_list,
    send_digest,
    send_update_notification,
)

FEED = "https://news.example.com/sitemap.xml"


class TestUpdateNotification(unittest.TestCase):
    """Test cases for send_update_notification()."""

    def setUp(self):
        self.channel = LoggingChannel()
        self.events = []
        self.urls = [f"https://news.example.com/story-{i}" for i in range(8)]

    def _sleep(self, seconds):
        self.events.append(("sleep", seconds))

    def test_header_links_footer_order(self):
        sent = send_update_notification(self.channel, "@chat", FEED, self.urls, sleep=self._sleep)

        self.assertTrue(sent)
        self.assertEqual(len(self.channel.sent), 3)
        header, links, footer = [entry["message"] for entry in self.channel.sent]
        self.assertIn("<b>news.example.com</b>", header)
        self.assertIn("(8 total)", header)
        self.assertIn("New links (8/8)", links)
        self.assertIn("update complete", footer)
        self.assertTrue(self.channel.sent[1]["suppress_link_preview"])
        self.assertEqual(self.events, [("sleep", 0.5)])

    def test_pause_comes_before_footer(self):
        channel = mock.Mock()
        manager = mock.Mock()
        manager.attach_mock(channel, "channel")
        manager.attach_mock(mock.Mock(), "sleep")

        send_update_notification(channel, "@chat", FEED, self.urls[:1], sleep=manager.sleep, footer_delay=0.5)

        names = [call[0] for call in manager.mock_calls]
        self.assertEqual(names, ["channel.send_text", "channel.send_text", "sleep", "channel.send_text"])

    def test_batch_mode_caps_links(self):
        send_update_notification(self.channel, "@chat", FEED, self.urls, batch_mode=True, sleep=self._sleep)

        links = self.channel.sent[1]["message"]
        self.assertIn("New links (5/8)", links)
        self.assertIn("... 3 more links not shown", links)
        self.assertNotIn("story-5", links)

    def test_content_is_attached_with_header_caption(self):
        send_update_notification(self.channel, "@chat", FEED, self.urls[:2], content=b"<urlset/>", sleep=self._sleep)

        first = self.channel.sent[0]
        self.assertEqual(first["kind"], "attachment")
        self.assertTrue(first["filename"].startswith("news.example.com_sitemap_"))
        self.assertTrue(first["filename"].endswith(".xml"))
        self.assertIn("news.example.com", first["caption"])
        self.assertEqual(len(self.channel.sent), 3)

    def test_missing_target_sends_nothing(self):
        self.assertFalse(send_update_notification(self.channel, None, FEED, self.urls, sleep=self._sleep))
        self.assertEqual(self.channel.sent, [])

    def test_no_new_urls_sends_nothing(self):
        self.assertFalse(send_update_notification(self.channel, "@chat", FEED, [], sleep=self._sleep))
        self.assertEqual(self.channel.sent, [])

    def test_transport_error_is_logged_not_raised(self):
        channel = mock.Mock()
        channel.send_text.side_effect = ConnectionError("telegram down")

        self.assertFalse(send_update_notification(channel, "@chat", FEED, self.urls, sleep=self._sleep))

    def test_link_list_escapes_html(self):
        text = format_link_list(["https://a.com/?q=1&r=<2>"])
        self.assertIn("&amp;r=&lt;2&gt;", text)


class TestDigest(unittest.TestCase):
    """Test cases for digest formatting and sending."""

    def setUp(self):
        self.aggregate = AggregateResult(
            keyword_stats=[KeywordStat("python", 3), KeywordStat("release", 1)],
            domain_stats=[
                DomainStat("big.com", 5, ["https://big.com/1", "https://big.com/2", "https://big.com/3"]),
                DomainStat("small.com", 1, ["https://small.com/a"]),
            ],
            total_new=6,
        )

    def test_section_order(self):
        text = format_digest(self.aggregate, processed_count=4, error_count=1, report_time="2024-05-01 08:00:00 UTC")

        title = text.index("Monitoring digest")
        big = text.index("big.com")
        small = text.index("small.com")
        keywords = text.index("Top keywords")
        total = text.index("Total new: 6")
        self.assertTrue(title < big < small < keywords < total)
        self.assertIn("Checked: 4 feed(s), failed: 1", text)
        self.assertIn("...and 2 more", text)
        self.assertIn("1. python (3x)", text)

    def test_empty_digest_says_so(self):
        text = format_digest(AggregateResult(), processed_count=3, error_count=0, report_time="now")

        self.assertIn("No new content", text)
        self.assertNotIn("failed", text)
        self.assertIn("Total new: 0", text)

    def test_send_digest_uses_timezone(self):
        channel = LoggingChannel()
        now = datetime(2024, 5, 1, 12, 0, tzinfo=pytz.utc)
        sent = send_digest(channel, "@chat", self.aggregate, 4, 0, now=now, tz=pytz.timezone("Asia/Shanghai"))

        self.assertTrue(sent)
        self.assertIn("2024-05-01 20:00:00 CST", channel.sent[0]["message"])

    def test_send_digest_requires_target(self):
        channel = LoggingChannel()
        self.assertFalse(send_digest(channel, "", self.aggregate, 4))
        self.assertEqual(channel.sent, [])


if __name__ == "__main__":
    unittest.main()
