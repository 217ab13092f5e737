"""Feed inspection: fetch a sitemap or RSS/Atom feed and diff it against the last snapshot."""

import gzip
import json
import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

import feedparser
import requests
from bs4 import BeautifulSoup

from ..models.outcome import FeedOutcome
from .store import KeyValueStore

logger = logging.getLogger(__name__)

USER_AGENT = "sitemap-digest/1.0 (+https://github.com/sitemap-digest)"

SNAPSHOT_KEY = "sitemap_urls:{url}"
CHECKED_KEY = "sitemap_checked:{url}"


class SitemapInspector:
    """
    Checks one feed for URLs that were not present at the previous check.

    Sitemaps (``<urlset>``), sitemap indexes (``<sitemapindex>``) and RSS/Atom
    feeds are supported. The URL set seen at each check is stored in the
    key-value store; the very first check of a feed only records that baseline
    and reports nothing new.
    """

    def __init__(
        self,
        store: KeyValueStore,
        session: Optional[requests.Session] = None,
        timeout: float = 30,
        max_child_sitemaps: int = 20,
        daily_cache: bool = True,
    ):
        """
        Initialize the inspector.

        Args:
            store: Key-value store for URL snapshots and last-check dates
            session: HTTP session (one is created if not provided)
            timeout: Timeout in seconds for every HTTP request
            max_child_sitemaps: Cap on child sitemaps fetched from an index
            daily_cache: Skip feeds already checked today unless force_refresh is set
        """
        if session is None:
            session = requests.Session()
            session.headers["User-Agent"] = USER_AGENT

        self.store = store
        self.session = session
        self.timeout = timeout
        self.max_child_sitemaps = max_child_sitemaps
        self.daily_cache = daily_cache

    def __call__(self, feed_url: str, force_refresh: bool = False) -> FeedOutcome:
        return self.inspect(feed_url, force_refresh)

    def inspect(self, feed_url: str, force_refresh: bool = False) -> FeedOutcome:
        today = datetime.now(timezone.utc).date().isoformat()
        checked_key = CHECKED_KEY.format(url=feed_url)

        if self.daily_cache and not force_refresh and self.store.get(checked_key) == today:
            logger.debug(f"{feed_url} already checked today, skipping")
            return FeedOutcome(feed_id=feed_url, success=True)

        try:
            content = self._fetch(feed_url)
            urls, complete = self._extract_urls(feed_url, content)
        except (requests.RequestException, ValueError) as e:
            return FeedOutcome(feed_id=feed_url, success=False, error_message=str(e))

        snapshot_key = SNAPSHOT_KEY.format(url=feed_url)
        previous_raw = self.store.get(snapshot_key)

        if previous_raw is None:
            logger.info(f"📥 Recorded baseline of {len(urls)} URL(s) for {feed_url}")
            new_urls = []
            snapshot = urls
        else:
            previous = json.loads(previous_raw)
            seen = set(previous)
            new_urls = [url for url in urls if url not in seen]
            if complete and urls:
                snapshot = urls
            else:
                # A partial or empty read must not forget URLs it could not see
                logger.warning(f"⚠️ Incomplete read of {feed_url}, keeping {len(previous)} previously seen URL(s)")
                snapshot = previous + new_urls

        if previous_raw is None or snapshot != previous:
            self.store.put(snapshot_key, json.dumps(snapshot, ensure_ascii=False))
        self.store.put(checked_key, today)

        return FeedOutcome(
            feed_id=feed_url,
            success=True,
            new_urls=new_urls,
            content=content if new_urls else None,
        )

    def _fetch(self, url: str) -> bytes:
        response = self.session.get(url, timeout=self.timeout)
        response.raise_for_status()
        content = response.content
        if content[:2] == b"\x1f\x8b":
            content = gzip.decompress(content)
        return content

    def _extract_urls(self, feed_url: str, content: bytes) -> Tuple[List[str], bool]:
        """
        Pull page URLs out of a feed document.

        Returns:
            The URLs and whether every child sitemap was read

        Raises:
            ValueError: If the document is neither a sitemap nor a parsable feed
        """
        kind, locations = parse_sitemap(content)
        if kind == "urlset":
            return _dedupe(locations), True

        if kind == "sitemapindex":
            urls = []
            complete = True
            children = locations[: self.max_child_sitemaps]
            if len(locations) > len(children):
                logger.warning(
                    f"⚠️ {feed_url} lists {len(locations)} child sitemaps, only the first {len(children)} are read"
                )
            for child_url in children:
                try:
                    child_kind, child_locations = parse_sitemap(self._fetch(child_url))
                except requests.RequestException as e:
                    logger.warning(f"⚠️ Skipping child sitemap {child_url}: {e}")
                    complete = False
                    continue
                if child_kind == "urlset":
                    urls.extend(child_locations)
                else:
                    complete = False
            return _dedupe(urls), complete

        feed = feedparser.parse(content)
        links = [entry.get("link", "").strip() for entry in feed.entries]
        links = [link for link in links if link]
        if not links and feed.bozo:
            raise ValueError(f"Unrecognized feed format for {feed_url}")
        return _dedupe(links), True


def parse_sitemap(content: bytes) -> Tuple[Optional[str], List[str]]:
    """
    Parse a sitemap document.

    Returns:
        ("urlset", page URLs), ("sitemapindex", child sitemap URLs),
        or (None, []) when the document is not a sitemap
    """
    soup = BeautifulSoup(content, "html.parser")

    if soup.find("sitemapindex") is not None:
        parent_tag = "sitemap"
        kind = "sitemapindex"
    elif soup.find("urlset") is not None:
        parent_tag = "url"
        kind = "urlset"
    else:
        return None, []

    locations = []
    for tag in soup.find_all(parent_tag):
        loc = tag.find("loc")
        if loc is not None and loc.get_text(strip=True):
            locations.append(loc.get_text(strip=True))
    return kind, locations


def _dedupe(urls: List[str]) -> List[str]:
    seen = set()
    result = []
    for url in urls:
        if url not in seen:
            seen.add(url)
            result.append(url)
    return result
