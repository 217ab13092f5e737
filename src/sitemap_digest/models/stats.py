"""Digest statistics derived from a pass's new URLs."""

from dataclasses import dataclass, field
from typing import List


@dataclass
class KeywordStat:
    keyword: str
    count: int


@dataclass
class DomainStat:
    """New-URL count for one host, with a few sample links for display."""
    domain: str
    count: int
    sample_urls: List[str] = field(default_factory=list)

    @property
    def hidden_count(self) -> int:
        return self.count - len(self.sample_urls)


@dataclass
class AggregateResult:
    keyword_stats: List[KeywordStat] = field(default_factory=list)
    domain_stats: List[DomainStat] = field(default_factory=list)
    total_new: int = 0
