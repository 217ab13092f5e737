"""Notification channels: transport only, no message composition."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List

import requests

logger = logging.getLogger(__name__)

TELEGRAM_API_URL = "https://api.telegram.org/bot{token}/{method}"


class NotificationChannel(ABC):
    @abstractmethod
    def send_text(self, target: str, message: str, suppress_link_preview: bool = True) -> Any:
        """Send an HTML-formatted text message."""

    @abstractmethod
    def send_attachment(self, target: str, blob: bytes, filename: str, caption: str = "") -> Any:
        """Send a file with an optional HTML caption."""


class TelegramChannel(NotificationChannel):
    """Telegram Bot API over HTTP."""

    def __init__(self, token: str, timeout: float = 30, session: requests.Session = None):
        self.token = token
        self.timeout = timeout
        self.session = session or requests.Session()

    def _url(self, method: str) -> str:
        return TELEGRAM_API_URL.format(token=self.token, method=method)

    def send_text(self, target: str, message: str, suppress_link_preview: bool = True) -> Dict[str, Any]:
        payload = {
            "chat_id": target,
            "text": message,
            "parse_mode": "HTML",
            "disable_web_page_preview": suppress_link_preview,
        }
        response = self.session.post(self._url("sendMessage"), json=payload, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def send_attachment(self, target: str, blob: bytes, filename: str, caption: str = "") -> Dict[str, Any]:
        data = {"chat_id": target}
        if caption:
            data["caption"] = caption
            data["parse_mode"] = "HTML"

        files = {"document": (filename, blob, "application/xml")}
        response = self.session.post(self._url("sendDocument"), data=data, files=files, timeout=self.timeout)
        response.raise_for_status()
        return response.json()


class LoggingChannel(NotificationChannel):
    """Logs messages instead of sending them. Used for dry runs and tests."""

    def __init__(self):
        self.sent: List[Dict[str, Any]] = []

    def send_text(self, target: str, message: str, suppress_link_preview: bool = True) -> Dict[str, Any]:
        self.sent.append({
            "kind": "text",
            "target": target,
            "message": message,
            "suppress_link_preview": suppress_link_preview,
        })
        logger.info(f"DRY RUN: message to {target}:\n{message}")
        return {"ok": True}

    def send_attachment(self, target: str, blob: bytes, filename: str, caption: str = "") -> Dict[str, Any]:
        self.sent.append({
            "kind": "attachment",
            "target": target,
            "filename": filename,
            "size": len(blob),
            "caption": caption,
        })
        logger.info(f"DRY RUN: attachment {filename} ({len(blob)} bytes) to {target}")
        return {"ok": True}
