"""Sequential inspection of the feeds in one slice."""

import logging
import time
from typing import Callable, List, Optional, Sequence

from ..models.outcome import FeedOutcome

logger = logging.getLogger(__name__)

InspectFn = Callable[[str, bool], FeedOutcome]
OutcomeCallback = Callable[[FeedOutcome], None]


class FeedProcessor:
    """
    Runs the feed inspector over a slice, one feed at a time.

    Feeds are never checked concurrently. A fixed pause separates consecutive
    feeds so the total elapsed time of a pass stays predictable and remote
    hosts are not hit in bursts. A failure in one feed is recorded in its
    outcome and processing moves on to the next feed.
    """

    def __init__(
        self,
        inspect: InspectFn,
        delay_seconds: float = 0.2,
        sleep: Callable[[float], None] = time.sleep,
        on_outcome: Optional[OutcomeCallback] = None,
    ):
        """
        Initialize the processor.

        Args:
            inspect: Callable taking (feed_url, force_refresh) and returning a FeedOutcome
            delay_seconds: Pause between consecutive feeds
            sleep: Sleep function, replaceable in tests
            on_outcome: Called with every outcome as soon as it is known
        """
        self.inspect = inspect
        self.delay_seconds = delay_seconds
        self.sleep = sleep
        self.on_outcome = on_outcome

    def process(
        self,
        feeds: Sequence[str],
        force_refresh: bool = False,
        offset: int = 0,
        total: Optional[int] = None,
    ) -> List[FeedOutcome]:
        """
        Inspect every feed in the slice.

        Args:
            feeds: Slice of feed URLs to inspect
            force_refresh: Bypass the inspector's "already checked today" cache
            offset: Index of the first feed in the full list, for log messages
            total: Length of the full list, for log messages

        Returns:
            One outcome per feed, in slice order
        """
        total = total if total is not None else len(feeds)
        outcomes = []

        for i, feed_url in enumerate(feeds):
            logger.info(f"🔍 Checking feed [{offset + i + 1}/{total}]: {feed_url}")
            outcome = self._inspect_one(feed_url, force_refresh)
            outcomes.append(outcome)

            if outcome.success:
                if outcome.new_urls:
                    logger.info(f"✨ {feed_url}: {len(outcome.new_urls)} new URL(s)")
                else:
                    logger.info(f"✅ {feed_url}: no new URLs")
            else:
                logger.warning(f"⚠️ {feed_url} failed: {outcome.error_message}")

            if self.on_outcome is not None:
                try:
                    self.on_outcome(outcome)
                except Exception as e:
                    logger.error(f"❌ Outcome handler failed for {feed_url}: {e}")
                    logger.debug("Exception details:", exc_info=True)

            if i < len(feeds) - 1 and self.delay_seconds > 0:
                self.sleep(self.delay_seconds)

        return outcomes

    def _inspect_one(self, feed_url: str, force_refresh: bool) -> FeedOutcome:
        try:
            outcome = self.inspect(feed_url, force_refresh)
        except Exception as e:
            logger.debug("Exception details:", exc_info=True)
            return FeedOutcome(feed_id=feed_url, success=False, error_message=str(e) or type(e).__name__)

        if outcome is None:
            return FeedOutcome(feed_id=feed_url, success=False, error_message="Inspector returned no result")
        return outcome
