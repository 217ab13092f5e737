from .outcome import BatchSelection, FeedOutcome, PassReport
from .progress import CURRENT_SCHEMA_VERSION, ProgressRecord
from .stats import AggregateResult, DomainStat, KeywordStat

__all__ = [
    "AggregateResult",
    "BatchSelection",
    "CURRENT_SCHEMA_VERSION",
    "DomainStat",
    "FeedOutcome",
    "KeywordStat",
    "PassReport",
    "ProgressRecord",
]
