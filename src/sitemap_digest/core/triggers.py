"""Manual and timer trigger entry points that hand passes off to a background worker."""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional

from ..context import SchedulerContext
from .scheduler import run_digest_check, run_monitoring_pass

logger = logging.getLogger(__name__)


class TriggerHost:
    """
    Runs monitoring passes in the background on behalf of the host process.

    Each trigger returns a Future right away. The pass runs inside its own
    error boundary: failures are logged and the Future resolves to None, since
    a background pass has no caller to report to. With the default single
    worker, passes fired from the same host run one after another; passes
    from separate processes can still interleave cursor writes.
    """

    def __init__(self, context: SchedulerContext, max_workers: int = 1):
        self.context = context
        self.executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="monitor-pass")

    def _submit(self, source: str, job: Callable[[], object]) -> Future:
        def guarded():
            logger.info(f"▶️ {source} pass started")
            try:
                return job()
            except Exception as e:
                logger.error(f"❌ {source} pass failed: {e}")
                logger.debug("Exception details:", exc_info=True)
                return None

        logger.info(f"⏰ {source} trigger received, pass scheduled")
        return self.executor.submit(guarded)

    def trigger_manual(self) -> Future:
        return self._submit("Manual", lambda: run_monitoring_pass(self.context))

    def trigger_timer(self) -> Future:
        return self._submit("Timer", lambda: run_monitoring_pass(self.context))

    def trigger_digest(self, target: Optional[str] = None) -> Future:
        return self._submit("Digest", lambda: run_digest_check(self.context, target))

    def shutdown(self, wait: bool = True) -> None:
        self.executor.shutdown(wait=wait)
