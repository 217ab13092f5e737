"""
Command-line entry point for the sitemap monitor.

--once runs a single monitoring pass in the foreground, --digest re-checks
every feed and sends one digest, and --serve starts the HTTP API together
with a timer that fires a monitoring pass every few minutes. --list-feeds,
--add-feed and --remove-feed manage the monitored feed list.
"""

import argparse
import logging
from datetime import datetime

import uvicorn
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .api import create_app
from .config import load_settings
from .context import build_context
from .core.scheduler import run_digest_check, run_monitoring_pass
from .core.triggers import TriggerHost
from .exceptions import ConfigurationError
from .utils.logging_utils import setup_logging


def serve(context, host_address: str, port: int) -> None:
    """Start the API and the timer trigger; blocks until interrupted."""
    host = TriggerHost(context)
    scheduler = BackgroundScheduler(timezone=context.settings.tz)
    scheduler.add_job(
        host.trigger_timer,
        IntervalTrigger(minutes=context.settings.schedule_minutes),
        id="monitoring_pass",
        max_instances=1,
        coalesce=True,
    )
    scheduler.start()
    logging.info(f"⏰ Timer trigger every {context.settings.schedule_minutes} minute(s)")

    try:
        uvicorn.run(create_app(host), host=host_address, port=port)
    finally:
        scheduler.shutdown(wait=False)
        host.shutdown(wait=True)


def manage_feeds(context, args) -> int:
    """Apply one feed-list command; returns the process exit code."""
    feed_list = context.feed_list

    if args.list_feeds:
        feeds = feed_list.get_feeds()
        for position, url in enumerate(feeds, start=1):
            print(f"{position}. {url}")
        logging.info(f"📋 {len(feeds)} feed(s) monitored")
        return 0

    if args.add_feed is not None:
        result = feed_list.add_feed(args.add_feed)
    else:
        result = feed_list.remove_feed(args.remove_feed)

    if result["success"]:
        logging.info(f"✅ {result['message']}")
        return 0
    logging.error(f"❌ {result['message']}")
    return 1


def main(argv=None):
    """Run the sitemap monitor."""
    parser = argparse.ArgumentParser(description="Monitor sitemaps for new pages and send digests")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="INFO",
        help="Set the logging level"
    )
    parser.add_argument(
        "--log-to-file",
        action="store_true",
        help="Log to file in addition to console"
    )
    parser.add_argument(
        "--config",
        help="Path to configuration file",
        default="config/config.yaml"
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--once", action="store_true", help="Run one monitoring pass and exit (default)")
    mode.add_argument("--digest", action="store_true", help="Re-check every feed and send one digest")
    mode.add_argument("--serve", action="store_true", help="Start the HTTP API with the timer trigger")
    mode.add_argument("--list-feeds", action="store_true", help="Print the monitored feeds and exit")
    mode.add_argument("--add-feed", metavar="URL", help="Append a feed to the monitored list")
    mode.add_argument("--remove-feed", metavar="URL", help="Drop a feed from the monitored list")

    parser.add_argument("--host", default="0.0.0.0", help="Bind address for --serve")
    parser.add_argument("--port", type=int, default=8080, help="Port for --serve")
    parser.add_argument("--batch-size", type=int, help="Override the number of feeds per pass")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Log notifications instead of sending them"
    )

    args = parser.parse_args(argv)
    setup_logging(log_level=getattr(logging, args.log_level), log_to_file=args.log_to_file)

    start_time = datetime.now()
    try:
        # Feed-list commands send nothing, so they never need a bot token
        managing_feeds = args.list_feeds or args.add_feed is not None or args.remove_feed is not None
        dry_run = True if managing_feeds else (args.dry_run or None)

        settings = load_settings(args.config, batch_size=args.batch_size, dry_run=dry_run)
        context = build_context(settings)

        if managing_feeds:
            return manage_feeds(context, args)

        if args.serve:
            serve(context, args.host, args.port)
        elif args.digest:
            run_digest_check(context)
        else:
            run_monitoring_pass(context)

        elapsed = (datetime.now() - start_time).total_seconds()
        logging.info(f"Total runtime: {elapsed:.2f} seconds")
        return 0

    except ConfigurationError as e:
        logging.error(str(e))
        return 2

    except KeyboardInterrupt:
        logging.warning("\nMonitor interrupted by user")
        return 130

    except Exception as e:
        logging.error(f"Monitor failed: {str(e)}")
        logging.debug("Exception details:", exc_info=True)
        return 1
