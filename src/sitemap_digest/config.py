"""Settings loaded from .env files, an optional YAML file and the environment."""

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytz
import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

STORE_BACKENDS = {"file", "sheet", "memory"}
FEED_SOURCES = {"store", "sheet"}

# Settings field -> environment variable
ENV_VARS = {
    "telegram_token": "TELEGRAM_BOT_TOKEN",
    "target_chat": "TELEGRAM_TARGET_CHAT",
    "batch_size": "BATCH_SIZE",
    "feed_delay_seconds": "FEED_DELAY_SECONDS",
    "footer_delay_seconds": "FOOTER_DELAY_SECONDS",
    "progress_key": "PROGRESS_KEY",
    "feeds_key": "FEEDS_KEY",
    "store_backend": "STORE_BACKEND",
    "store_path": "STORE_PATH",
    "feed_source": "FEED_SOURCE",
    "spreadsheet_id": "GOOGLE_SPREADSHEET_ID",
    "creds_file": "GOOGLE_CREDS_FILE_PATH",
    "feeds_worksheet": "GOOGLE_FEEDS_WORKSHEET",
    "store_worksheet": "GOOGLE_STORE_WORKSHEET",
    "timezone": "TIMEZONE",
    "request_timeout": "REQUEST_TIMEOUT",
    "schedule_minutes": "SCHEDULE_MINUTES",
}


@dataclass
class Settings:
    """Ambient configuration shared by every pass."""
    telegram_token: str = ""
    target_chat: str = ""
    batch_size: int = 25
    feed_delay_seconds: float = 0.2
    footer_delay_seconds: float = 0.5
    progress_key: str = "monitoring_progress"
    feeds_key: str = "feeds"
    store_backend: str = "file"
    store_path: str = "data/store.json"
    feed_source: str = "store"
    spreadsheet_id: str = ""
    creds_file: str = "secrets/service_account.json"
    feeds_worksheet: str = "Feeds"
    store_worksheet: str = "KeyValueStore"
    timezone: str = "UTC"
    request_timeout: float = 30.0
    schedule_minutes: int = 60
    dry_run: bool = False

    def validate(self) -> List[str]:
        """Return a list of configuration problems (empty when valid)."""
        errors = []
        if not self.target_chat:
            errors.append("TELEGRAM_TARGET_CHAT is not set")
        if not self.telegram_token and not self.dry_run:
            errors.append("TELEGRAM_BOT_TOKEN is not set")
        if self.batch_size <= 0:
            errors.append(f"batch_size must be positive, got {self.batch_size}")
        if self.schedule_minutes <= 0:
            errors.append(f"schedule_minutes must be positive, got {self.schedule_minutes}")
        if self.store_backend not in STORE_BACKENDS:
            errors.append(f"Unknown store backend '{self.store_backend}'")
        if self.feed_source not in FEED_SOURCES:
            errors.append(f"Unknown feed source '{self.feed_source}'")
        if "sheet" in (self.store_backend, self.feed_source) and not self.spreadsheet_id:
            errors.append("GOOGLE_SPREADSHEET_ID is required for Google Sheets storage")
        try:
            pytz.timezone(self.timezone)
        except pytz.exceptions.UnknownTimeZoneError:
            errors.append(f"Unknown timezone '{self.timezone}'")
        return errors

    @property
    def tz(self):
        return pytz.timezone(self.timezone)


def load_environment(base_dir: str = ".") -> Optional[Path]:
    """
    Load the first .env file found for the current ENVIRONMENT.

    Candidates under base_dir, in order: config/.env.<environment>,
    config/.env, .env. Values already present in the process environment
    are not overridden.

    Returns:
        The file that was loaded, or None when there was none
    """
    env = os.environ.get("ENVIRONMENT", "development").lower()
    logger.info(f"🌍 Running in {env.upper()} environment")

    base = Path(base_dir)
    for env_path in (base / "config" / f".env.{env}", base / "config" / ".env", base / ".env"):
        if env_path.exists():
            logger.info(f"📄 Loading environment from {env_path}")
            load_dotenv(env_path)
            return env_path

    logger.warning("⚠️ No .env file found. Using environment variables or defaults.")
    return None


def load_config(config_path: str = "config/config.yaml") -> Dict[str, Any]:
    """Load configuration from YAML file."""
    config = {}
    try:
        if os.path.exists(config_path):
            with open(config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f) or {}
            logger.info(f"Loaded configuration from {config_path}")
        else:
            logger.warning(f"Configuration file not found: {config_path}")
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Error loading configuration: {e}")
    return config


def _coerce(value: Any, default: Any) -> Any:
    if isinstance(default, bool):
        if isinstance(value, str):
            return value.strip().lower() in {"1", "true", "yes", "on"}
        return bool(value)
    if isinstance(default, int):
        return int(value)
    if isinstance(default, float):
        return float(value)
    return str(value)


def build_settings(
    yaml_config: Optional[Dict[str, Any]] = None,
    environ: Optional[Dict[str, str]] = None,
    **overrides: Any,
) -> Settings:
    """
    Merge defaults, the YAML ``monitor`` section, environment variables and
    explicit overrides, later sources winning.

    Raises:
        ValueError: If a numeric setting cannot be parsed
    """
    environ = os.environ if environ is None else environ
    section = (yaml_config or {}).get("monitor", {}) or {}
    defaults = Settings()
    values = {}

    for f in fields(Settings):
        default = getattr(defaults, f.name)
        value = default
        if f.name in section and section[f.name] is not None:
            value = section[f.name]
        env_name = ENV_VARS.get(f.name)
        if env_name and environ.get(env_name):
            value = environ[env_name]
        if f.name in overrides and overrides[f.name] is not None:
            value = overrides[f.name]
        values[f.name] = _coerce(value, default)

    return Settings(**values)


def load_settings(config_path: str = "config/config.yaml", **overrides: Any) -> Settings:
    """Load .env files and YAML, then build Settings."""
    env_file = load_environment()
    settings = build_settings(load_config(config_path), **overrides)
    logger.info(
        f"⚙️ Settings ready (env file: {env_file or 'none'}, store: {settings.store_backend}, "
        f"feeds: {settings.feed_source}, batch size: {settings.batch_size})"
    )
    return settings
