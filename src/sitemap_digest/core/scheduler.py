"""Monitoring passes: cursor read, slice selection, inspection, notification, cursor write."""

import logging
from datetime import datetime, timezone
from typing import Optional

from ..context import SchedulerContext
from ..models.outcome import FeedOutcome, PassReport
from ..models.progress import ProgressRecord
from ..services.notifications import send_digest, send_update_notification
from .aggregator import aggregate
from .batch_selector import select
from .feed_processor import FeedProcessor

logger = logging.getLogger(__name__)


def _notify_immediately(context: SchedulerContext, outcome: FeedOutcome) -> None:
    if not outcome.has_updates:
        return
    send_update_notification(
        context.channel,
        context.settings.target_chat,
        outcome.feed_id,
        outcome.new_urls,
        content=outcome.content,
        sleep=context.sleep,
        footer_delay=context.settings.footer_delay_seconds,
    )


def run_monitoring_pass(context: SchedulerContext) -> Optional[PassReport]:
    """
    Run one scheduled pass over the next slice of the feed list.

    Every feed with new URLs gets an immediate notification as soon as it is
    checked; a digest of the whole slice follows when anything new was found.
    The cursor is written once, after the whole slice has been attempted. If
    the process is killed before that, the next pass retries the same slice.

    Returns:
        PassReport, or None when there are no feeds to check
    """
    settings = context.settings
    logger.info("⏰ Starting scheduled monitoring pass")

    feeds = context.feed_list.get_feeds()
    logger.info(f"📊 {len(feeds)} feed(s) configured")
    if not feeds:
        logger.info("📭 No feeds configured, nothing to do")
        return None

    cursor_store = context.cursor_store
    cursor = cursor_store.load()
    selection = select(feeds, cursor, settings.batch_size)
    logger.info(f"📦 Processing batch {selection.start_index + 1}-{selection.end_index}/{selection.total}")

    processor = FeedProcessor(
        context.inspect,
        delay_seconds=settings.feed_delay_seconds,
        sleep=context.sleep,
        on_outcome=lambda outcome: _notify_immediately(context, outcome),
    )
    outcomes = processor.process(selection.feeds, offset=selection.start_index, total=selection.total)

    cursor_written = cursor_store.save(ProgressRecord(
        last_index=selection.next_index,
        last_update=datetime.now(timezone.utc),
        total_feeds=selection.total,
        processed_in_this_batch=len(selection.feeds),
    ))

    report = PassReport(
        selection=selection,
        outcomes=outcomes,
        aggregate=aggregate(outcomes),
        cursor_written=cursor_written,
    )

    if report.aggregate.total_new > 0:
        logger.info(f"📊 Sending digest for {report.aggregate.total_new} new URL(s)")
        report.digest_sent = send_digest(
            context.channel,
            settings.target_chat,
            report.aggregate,
            report.processed_count,
            report.error_count,
            tz=settings.tz,
        )

    if selection.next_index == 0:
        logger.info("🔄 Cycle complete, the next pass starts from the beginning")
    else:
        logger.info(f"⏳ Batch done, {selection.total - selection.next_index} feed(s) left in this cycle")

    logger.info(
        f"✅ Monitoring pass finished: {report.processed_count} ok, {report.error_count} failed, "
        f"{report.aggregate.total_new} new URL(s)"
    )
    return report


def run_digest_check(context: SchedulerContext, target: Optional[str] = None) -> Optional[PassReport]:
    """
    Re-check every feed, bypassing the inspector's daily cache, and send one digest.

    The cursor is neither read nor written, and no immediate notifications are
    sent. The digest is sent even when nothing new was found so the recipient
    can tell an empty check from a missing one.

    Args:
        context: Scheduler context
        target: Chat to report to (defaults to the configured target)

    Returns:
        PassReport, or None when there are no feeds to check
    """
    target = target or context.settings.target_chat
    feeds = context.feed_list.get_feeds()
    if not feeds:
        logger.info("📭 No feeds configured, digest check skipped")
        return None

    logger.info(f"🔎 On-demand digest check over {len(feeds)} feed(s)")
    processor = FeedProcessor(
        context.inspect,
        delay_seconds=context.settings.feed_delay_seconds,
        sleep=context.sleep,
    )
    outcomes = processor.process(feeds, force_refresh=True)
    selection = select(feeds, ProgressRecord(), len(feeds))

    report = PassReport(selection=selection, outcomes=outcomes, aggregate=aggregate(outcomes))
    report.digest_sent = send_digest(
        context.channel,
        target,
        report.aggregate,
        report.processed_count,
        report.error_count,
        tz=context.settings.tz,
    )
    return report
