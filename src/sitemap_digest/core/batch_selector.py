"""Selection of the contiguous feed slice processed by one pass."""

import logging
from typing import Sequence

from ..models.outcome import BatchSelection
from ..models.progress import ProgressRecord

logger = logging.getLogger(__name__)


def select(feeds: Sequence[str], cursor: ProgressRecord, batch_size: int) -> BatchSelection:
    """
    Pick the slice of feeds to check in this pass and the cursor for the next one.

    A pass never wraps around the end of the list: when the slice reaches the
    tail, the next pass starts again from index 0.

    Args:
        feeds: Full ordered feed list
        cursor: Progress record read at the start of the pass
        batch_size: Maximum number of feeds per pass

    Returns:
        BatchSelection with the slice and the next start index

    Raises:
        ValueError: If batch_size is not positive
    """
    if batch_size <= 0:
        raise ValueError(f"batch_size must be positive, got {batch_size}")

    total = len(feeds)
    if total == 0:
        return BatchSelection(feeds=[], start_index=0, end_index=0, next_index=0, total=0)

    start_index = min(max(cursor.last_index, 0), total)
    if start_index >= total:
        # The list shrank since the cursor was written
        logger.warning(
            f"⚠️ Stored index {cursor.last_index} is out of range for {total} feeds, restarting from 0"
        )
        start_index = 0

    end_index = min(start_index + batch_size, total)
    next_index = 0 if end_index >= total else end_index

    return BatchSelection(
        feeds=list(feeds[start_index:end_index]),
        start_index=start_index,
        end_index=end_index,
        next_index=next_index,
        total=total,
    )
