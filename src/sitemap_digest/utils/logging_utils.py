import logging
import sys
from datetime import datetime
from pathlib import Path


def setup_logging(log_level=logging.INFO, log_to_file=False):
    """Set up logging configuration."""
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    handlers = [logging.StreamHandler(sys.stdout)]

    if log_to_file:
        log_dir = Path("logs")
        log_dir.mkdir(exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        handlers.append(logging.FileHandler(log_dir / f"monitor_{timestamp}.log"))

    logging.basicConfig(level=log_level, format=log_format, handlers=handlers)

    # Suppress noisy loggers
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("apscheduler").setLevel(logging.WARNING)
    logging.getLogger("oauth2client").setLevel(logging.WARNING)
