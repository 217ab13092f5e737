"""Keyword and domain statistics over the new URLs found in one pass."""

import re
from collections import Counter, OrderedDict
from typing import Iterable, List, Optional, Sequence
from urllib.parse import urlparse, ParseResult

from ..models.outcome import FeedOutcome
from ..models.stats import AggregateResult, DomainStat, KeywordStat

TOP_KEYWORDS = 10
SAMPLE_URLS_PER_DOMAIN = 3

STOP_WORDS = {"index", "page", "post", "article", "news", "blog"}

_NUMERIC = re.compile(r"^[0-9]+$")


def _parse_url(url: str) -> Optional[ParseResult]:
    """Parse an absolute URL, or return None if it cannot be used."""
    try:
        parsed = urlparse(url)
        if not parsed.scheme or not parsed.hostname:
            return None
    except (ValueError, TypeError, AttributeError):
        return None
    return parsed


def _path_keywords(path: str) -> List[str]:
    keywords = []
    for segment in path.split("/"):
        if len(segment) <= 2:
            continue
        if _NUMERIC.match(segment) or "." in segment or segment.lower() in STOP_WORDS:
            continue

        keyword = segment.replace("-", "").lower()
        if len(keyword) > 2:
            keywords.append(keyword)
    return keywords


def extract_keywords_with_count(urls: Iterable[str], limit: Optional[int] = TOP_KEYWORDS) -> List[KeywordStat]:
    """
    Count path keywords across all URLs.

    Counts are per occurrence, so a keyword appearing in several URLs
    accumulates. Ties keep the order in which keywords were first seen.

    Args:
        urls: New URLs found in the pass
        limit: Number of top keywords to return (None for all)

    Returns:
        KeywordStat list sorted by count descending
    """
    counts = Counter()
    for url in urls:
        parsed = _parse_url(url)
        if parsed is None:
            continue
        counts.update(_path_keywords(parsed.path))

    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    if limit is not None:
        ranked = ranked[:limit]
    return [KeywordStat(keyword=keyword, count=count) for keyword, count in ranked]


def extract_domain_stats(urls: Iterable[str], sample_size: int = SAMPLE_URLS_PER_DOMAIN) -> List[DomainStat]:
    """
    Group URLs by host.

    Args:
        urls: New URLs found in the pass
        sample_size: Number of sample URLs kept per host

    Returns:
        DomainStat list sorted by count descending, first-seen order on ties
    """
    by_domain = OrderedDict()
    for url in urls:
        parsed = _parse_url(url)
        if parsed is None:
            continue
        by_domain.setdefault(parsed.hostname, []).append(url)

    stats = [
        DomainStat(domain=domain, count=len(domain_urls), sample_urls=domain_urls[:sample_size])
        for domain, domain_urls in by_domain.items()
    ]
    stats.sort(key=lambda stat: stat.count, reverse=True)
    return stats


def collect_new_urls(outcomes: Sequence[FeedOutcome]) -> List[str]:
    """Flatten the new URLs of successful outcomes, in feed order."""
    urls = []
    for outcome in outcomes:
        if outcome.success and outcome.new_urls:
            urls.extend(outcome.new_urls)
    return urls


def aggregate(outcomes: Sequence[FeedOutcome]) -> AggregateResult:
    """Fold a pass's outcomes into digest statistics."""
    urls = collect_new_urls(outcomes)
    return AggregateResult(
        keyword_stats=extract_keywords_with_count(urls),
        domain_stats=extract_domain_stats(urls),
        total_new=len(urls),
    )
