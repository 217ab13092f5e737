"""Providers of the ordered list of monitored feeds."""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List

import gspread
import pandas as pd

from .store import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_FEEDS_KEY = "feeds"


class FeedListProvider(ABC):
    @abstractmethod
    def get_feeds(self) -> List[str]:
        """Return feed URLs in insertion order."""

    def add_feed(self, url: str) -> Dict[str, Any]:
        return {"success": False, "message": f"{type(self).__name__} is read-only, edit its source instead"}

    def remove_feed(self, url: str) -> Dict[str, Any]:
        return {"success": False, "message": f"{type(self).__name__} is read-only, edit its source instead"}


class StoreFeedList(FeedListProvider):
    """Feed list kept as a JSON array in the key-value store.

    New feeds are appended at the end so the scheduling cursor stays
    meaningful; removing a feed mid-cycle may make the cursor skip one entry.
    """

    def __init__(self, store: KeyValueStore, key: str = DEFAULT_FEEDS_KEY):
        self.store = store
        self.key = key

    def get_feeds(self) -> List[str]:
        raw = self.store.get(self.key)
        if not raw:
            return []
        feeds = json.loads(raw)
        if not isinstance(feeds, list):
            raise ValueError(f"Feed list under '{self.key}' is not a JSON array")
        return [str(feed) for feed in feeds]

    def _save(self, feeds: List[str]) -> None:
        self.store.put(self.key, json.dumps(feeds, ensure_ascii=False))

    def add_feed(self, url: str) -> Dict[str, Any]:
        url = (url or "").strip()
        if not url:
            return {"success": False, "message": "Feed URL is empty"}

        feeds = self.get_feeds()
        if url in feeds:
            return {"success": False, "message": f"Feed already monitored: {url}"}

        feeds.append(url)
        self._save(feeds)
        logger.info(f"➕ Added feed {url} ({len(feeds)} total)")
        return {"success": True, "message": f"Added feed: {url}"}

    def remove_feed(self, url: str) -> Dict[str, Any]:
        url = (url or "").strip()
        feeds = self.get_feeds()
        if url not in feeds:
            return {"success": False, "message": f"Feed not found: {url}"}

        feeds.remove(url)
        self._save(feeds)
        logger.info(f"➖ Removed feed {url} ({len(feeds)} left)")
        return {"success": True, "message": f"Removed feed: {url}"}


class SheetFeedList(FeedListProvider):
    """Feed list read from a Google Sheet worksheet with a ``url`` column."""

    def __init__(self, client: gspread.Client, spreadsheet_id: str, worksheet_name: str = "Feeds"):
        self.client = client
        self.spreadsheet_id = spreadsheet_id
        self.worksheet_name = worksheet_name

    def get_feeds(self) -> List[str]:
        """
        Read the feed worksheet.

        An optional ``active`` column disables rows holding FALSE, no, 0 or off.

        Raises:
            ValueError: If the worksheet has no ``url`` column
        """
        sheet = self.client.open_by_key(self.spreadsheet_id)
        worksheet = sheet.worksheet(self.worksheet_name)
        df = pd.DataFrame(worksheet.get_all_records())

        if df.empty:
            return []

        df.columns = [str(col).strip().lower() for col in df.columns]
        if "url" not in df.columns:
            raise ValueError(f"Missing required column 'url' in worksheet '{self.worksheet_name}'")

        if "active" in df.columns:
            inactive = df["active"].astype(str).str.strip().str.lower().isin({"false", "no", "0", "off"})
            df = df[~inactive]

        urls = df["url"].astype(str).str.strip()
        urls = urls[urls != ""].drop_duplicates()
        logger.info(f"📄 Read {len(urls)} feed(s) from worksheet '{self.worksheet_name}'")
        return urls.tolist()
