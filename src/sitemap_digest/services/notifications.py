"""Composition of immediate per-feed updates and per-pass digests."""

import logging
import time
from datetime import datetime, tzinfo
from html import escape
from typing import Callable, List, Optional, Sequence
from urllib.parse import urlparse

import pytz

from ..models.stats import AggregateResult
from .channels import NotificationChannel

logger = logging.getLogger(__name__)

BATCH_MODE_MAX_URLS = 5
SEPARATOR = "------------------------------------"
DIGEST_RULE = "===================================="


def feed_domain(feed_url: str) -> str:
    try:
        return urlparse(feed_url).hostname or feed_url
    except ValueError:
        return feed_url


def format_update_header(feed_url: str, new_count: int) -> str:
    domain = escape(feed_domain(feed_url))
    return (
        f"✨ <b>{domain}</b> ✨\n"
        f"{SEPARATOR}\n"
        f"New content found! ({new_count} total)\n"
        f"Source: {escape(feed_url)}\n"
    )


def format_link_list(new_urls: Sequence[str], max_urls: Optional[int] = None) -> str:
    """
    Numbered list of new links, truncated to max_urls with a "more" suffix.

    Args:
        new_urls: All new URLs of the feed
        max_urls: Maximum number of links to list (None for all)
    """
    shown = list(new_urls) if max_urls is None else list(new_urls[:max_urls])
    lines = [f"🔗 <b>New links ({len(shown)}/{len(new_urls)})</b>"]
    lines.extend(f"{i}. {escape(url)}" for i, url in enumerate(shown, start=1))

    hidden = len(new_urls) - len(shown)
    if hidden > 0:
        lines.append("")
        lines.append(f"... {hidden} more links not shown")
    return "\n".join(lines)


def format_update_footer(feed_url: str) -> str:
    return f"✨ {escape(feed_domain(feed_url))} update complete ✨\n{SEPARATOR}"


def send_update_notification(
    channel: NotificationChannel,
    target: Optional[str],
    feed_url: str,
    new_urls: Sequence[str],
    content: Optional[bytes] = None,
    batch_mode: bool = False,
    max_urls: Optional[int] = None,
    sleep: Callable[[float], None] = time.sleep,
    footer_delay: float = 0.5,
) -> bool:
    """
    Send the header, link list and footer for one feed with new URLs.

    The three parts always go out in that order, with a short pause before
    the footer so it renders after the link list. When the raw feed content
    is available the header travels as the caption of the attached file.

    Args:
        channel: Transport to send through
        target: Chat identifier
        feed_url: Feed the URLs came from
        new_urls: Newly discovered URLs
        content: Raw feed document to attach
        batch_mode: Cap the link list at BATCH_MODE_MAX_URLS
        max_urls: Caller cap on the link list (None for all)
        sleep: Sleep function, replaceable in tests
        footer_delay: Pause before the footer, in seconds

    Returns:
        True if every message was sent
    """
    if not target:
        logger.error("❌ No notification target configured, update not sent")
        return False

    if not new_urls:
        logger.debug(f"No new URLs for {feed_url}, nothing to send")
        return False

    if batch_mode:
        max_urls = BATCH_MODE_MAX_URLS if max_urls is None else min(max_urls, BATCH_MODE_MAX_URLS)

    domain = feed_domain(feed_url)
    header = format_update_header(feed_url, len(new_urls))

    try:
        if content:
            filename = f"{domain}_sitemap_{datetime.now(pytz.utc).strftime('%Y-%m-%d')}.xml"
            channel.send_attachment(target, content, filename, caption=header)
            logger.info(f"📎 Sent {filename} for {feed_url}")
        else:
            channel.send_text(target, header)

        channel.send_text(target, format_link_list(new_urls, max_urls), suppress_link_preview=True)

        sleep(footer_delay)
        channel.send_text(target, format_update_footer(feed_url))
    except Exception as e:
        logger.error(f"❌ Failed to send update notification for {feed_url}: {e}")
        logger.debug("Exception details:", exc_info=True)
        return False

    logger.info(f"📨 Sent update notification for {domain} ({len(new_urls)} new)")
    return True


def format_digest(
    aggregate: AggregateResult,
    processed_count: int,
    error_count: int,
    report_time: str,
) -> str:
    lines: List[str] = [
        "📊 <b>Monitoring digest</b>",
        f"Report time: {report_time}",
        DIGEST_RULE,
        "",
        "📈 <b>Domain summary</b>",
    ]

    checked = f"Checked: {processed_count} feed(s)"
    if error_count > 0:
        checked += f", failed: {error_count}"
    lines.append(checked)
    lines.append("")

    if not aggregate.domain_stats:
        lines.append("No new content")
        lines.append("")
    else:
        for stat in aggregate.domain_stats:
            lines.append(f"🌐 <b>{escape(stat.domain)}</b>")
            lines.append(f"{stat.count} new link(s)")
            lines.append("Links:")
            lines.extend(f"{i}. {escape(url)}" for i, url in enumerate(stat.sample_urls, start=1))
            if stat.hidden_count > 0:
                lines.append(f"...and {stat.hidden_count} more")
            lines.append("")

    lines.append("🏷️ <b>Top keywords</b>")
    if aggregate.total_new == 0:
        lines.append("No new content in this check")
    elif not aggregate.keyword_stats:
        lines.append("No keywords extracted")
    else:
        lines.extend(
            f"{i}. {escape(stat.keyword)} ({stat.count}x)"
            for i, stat in enumerate(aggregate.keyword_stats, start=1)
        )

    lines.append("")
    lines.append(DIGEST_RULE)
    lines.append(f"📊 Total new: {aggregate.total_new} link(s)")
    return "\n".join(lines)


def send_digest(
    channel: NotificationChannel,
    target: Optional[str],
    aggregate: AggregateResult,
    processed_count: int,
    error_count: int = 0,
    now: Optional[datetime] = None,
    tz: tzinfo = pytz.utc,
) -> bool:
    """Send the composite digest for a pass. Returns True if it was sent."""
    if not target:
        logger.error("❌ No notification target configured, digest not sent")
        return False

    now = now or datetime.now(pytz.utc)
    if now.tzinfo is None:
        now = pytz.utc.localize(now)
    report_time = now.astimezone(tz).strftime("%Y-%m-%d %H:%M:%S %Z")

    message = format_digest(aggregate, processed_count, error_count, report_time)
    try:
        channel.send_text(target, message, suppress_link_preview=True)
    except Exception as e:
        logger.error(f"❌ Failed to send digest: {e}")
        logger.debug("Exception details:", exc_info=True)
        return False

    logger.info(f"📊 Sent digest: {aggregate.total_new} new link(s) across {len(aggregate.domain_stats)} domain(s)")
    return True
