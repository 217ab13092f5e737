"""
Sitemap Digest - watch sitemaps and feeds for new pages and report them to chat.

This package provides functionality to:
1. Check a growing list of sitemap/RSS feeds in resumable batches, one slice per pass
2. Send an immediate notification for every feed with new URLs
3. Summarize each pass in a digest grouped by domain with top path keywords
"""

__version__ = "1.0.0"

from .config import Settings, load_settings
from .context import SchedulerContext, build_context
from .core.scheduler import run_digest_check, run_monitoring_pass
from .core.triggers import TriggerHost
from .exceptions import ConfigurationError

__all__ = [
    "ConfigurationError",
    "SchedulerContext",
    "Settings",
    "TriggerHost",
    "build_context",
    "load_settings",
    "run_digest_check",
    "run_monitoring_pass",
]
