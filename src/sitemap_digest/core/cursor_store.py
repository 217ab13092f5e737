"""Reading and writing the scheduling cursor through the key-value store."""

import logging

from ..models.progress import ProgressRecord
from ..services.store import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_PROGRESS_KEY = "monitoring_progress"


class CursorStore:
    """Persists a single ProgressRecord under a fixed key.

    Neither method raises: a failed read restarts the cycle from index 0 and a
    failed write leaves the previous cursor in place, so the next pass repeats
    the same slice.
    """

    def __init__(self, store: KeyValueStore, key: str = DEFAULT_PROGRESS_KEY):
        self.store = store
        self.key = key

    def load(self) -> ProgressRecord:
        try:
            raw = self.store.get(self.key)
        except Exception as e:
            logger.warning(f"⚠️ Failed to read progress '{self.key}', starting from 0: {e}")
            return ProgressRecord()

        if not raw:
            logger.info(f"No stored progress under '{self.key}', starting from 0")
            return ProgressRecord()

        try:
            return ProgressRecord.from_json(raw)
        except (ValueError, TypeError) as e:
            logger.warning(f"⚠️ Unreadable progress record '{self.key}', starting from 0: {e}")
            return ProgressRecord()

    def save(self, record: ProgressRecord) -> bool:
        try:
            self.store.put(self.key, record.to_json())
        except Exception as e:
            logger.error(f"❌ Failed to save progress '{self.key}': {e}")
            logger.debug("Exception details:", exc_info=True)
            return False

        logger.info(f"📝 Saved progress: next pass starts at index {record.last_index}")
        return True
