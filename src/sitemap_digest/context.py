"""Explicitly constructed scheduler context shared by the trigger entry points."""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from .config import Settings
from .core.cursor_store import CursorStore
from .exceptions import ConfigurationError
from .models.outcome import FeedOutcome
from .services.channels import LoggingChannel, NotificationChannel, TelegramChannel
from .services.feed_list import FeedListProvider, SheetFeedList, StoreFeedList
from .services.inspector import SitemapInspector
from .services.store import GoogleSheetStore, InMemoryStore, JsonFileStore, KeyValueStore
from .utils.auth import get_google_sheets_client

logger = logging.getLogger(__name__)


@dataclass
class SchedulerContext:
    """Collaborators and settings for monitoring passes.

    The host process creates one context and hands it to the triggers; there
    is no module-level instance.
    """
    settings: Settings
    store: KeyValueStore
    feed_list: FeedListProvider
    inspect: Callable[[str, bool], FeedOutcome]
    channel: NotificationChannel
    sleep: Callable[[float], None] = field(default=time.sleep)

    @property
    def cursor_store(self) -> CursorStore:
        return CursorStore(self.store, self.settings.progress_key)


def build_context(
    settings: Settings,
    store: Optional[KeyValueStore] = None,
    feed_list: Optional[FeedListProvider] = None,
    inspect: Optional[Callable[[str, bool], FeedOutcome]] = None,
    channel: Optional[NotificationChannel] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> SchedulerContext:
    """
    Validate settings and wire up the collaborators they describe.

    Collaborators passed explicitly take precedence over the configured ones.

    Raises:
        ConfigurationError: If the settings are invalid
    """
    errors = settings.validate()
    if errors:
        logger.error(f"❌ Configuration validation failed: {errors}")
        raise ConfigurationError(errors)

    sheets_client = None
    if (store is None and settings.store_backend == "sheet") or (
        feed_list is None and settings.feed_source == "sheet"
    ):
        sheets_client = get_google_sheets_client(settings.creds_file)

    if store is None:
        if settings.store_backend == "sheet":
            store = GoogleSheetStore(sheets_client, settings.spreadsheet_id, settings.store_worksheet)
        elif settings.store_backend == "memory":
            store = InMemoryStore()
        else:
            store = JsonFileStore(settings.store_path)

    if feed_list is None:
        if settings.feed_source == "sheet":
            feed_list = SheetFeedList(sheets_client, settings.spreadsheet_id, settings.feeds_worksheet)
        else:
            feed_list = StoreFeedList(store, settings.feeds_key)

    if inspect is None:
        inspect = SitemapInspector(store, timeout=settings.request_timeout)

    if channel is None:
        if settings.dry_run:
            channel = LoggingChannel()
        else:
            channel = TelegramChannel(settings.telegram_token, timeout=settings.request_timeout)

    logger.info(
        f"✅ Context ready: store={type(store).__name__}, feeds={type(feed_list).__name__}, "
        f"channel={type(channel).__name__}, batch_size={settings.batch_size}"
    )
    return SchedulerContext(
        settings=settings,
        store=store,
        feed_list=feed_list,
        inspect=inspect,
        channel=channel,
        sleep=sleep,
    )
