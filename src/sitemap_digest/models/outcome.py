"""Per-feed outcomes and per-pass results."""

from dataclasses import dataclass, field
from typing import List, Optional

from .stats import AggregateResult


@dataclass
class FeedOutcome:
    """Result of inspecting a single feed.

    Attributes:
        feed_id: The feed URL that was inspected
        success: Whether the inspection completed
        new_urls: URLs discovered since the previous inspection
        error_message: Why the inspection failed, if it did
        content: Raw feed document, attached to immediate notifications
    """
    feed_id: str
    success: bool
    new_urls: List[str] = field(default_factory=list)
    error_message: Optional[str] = None
    content: Optional[bytes] = None

    @property
    def has_updates(self) -> bool:
        return self.success and bool(self.new_urls)


@dataclass
class BatchSelection:
    """Contiguous slice of the feed list chosen for one pass."""
    feeds: List[str]
    start_index: int
    end_index: int
    next_index: int
    total: int


@dataclass
class PassReport:
    """Summary of one completed pass, returned to foreground callers."""
    selection: BatchSelection
    outcomes: List[FeedOutcome]
    aggregate: AggregateResult
    cursor_written: bool = False
    digest_sent: bool = False

    @property
    def processed_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.success)

    @property
    def error_count(self) -> int:
        return sum(1 for outcome in self.outcomes if not outcome.success)
