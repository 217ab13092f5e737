"""Scheduling progress record persisted between monitoring passes."""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

CURRENT_SCHEMA_VERSION = 1


@dataclass
class ProgressRecord:
    """Cursor marking where the next monitoring pass should resume.

    Attributes:
        last_index: Index into the feed list where the next pass starts
        last_update: When the record was written (UTC)
        total_feeds: Length of the feed list at write time
        processed_in_this_batch: Number of feeds attempted by the writing pass
        schema_version: Layout version of the stored JSON document
    """
    last_index: int = 0
    last_update: Optional[datetime] = None
    total_feeds: int = 0
    processed_in_this_batch: int = 0
    schema_version: int = field(default=CURRENT_SCHEMA_VERSION)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schemaVersion": self.schema_version,
            "lastIndex": self.last_index,
            "lastUpdate": self.last_update.isoformat() if self.last_update else None,
            "totalFeeds": self.total_feeds,
            "processedInThisBatch": self.processed_in_this_batch,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, raw: str) -> "ProgressRecord":
        """
        Parse a stored progress document.

        Documents written before versioning was introduced carry no
        ``schemaVersion`` key and are read as version 1.

        Raises:
            ValueError: If the document is not a JSON object, has a schema
                version this code does not understand, or holds bad values
        """
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError("Progress record must be a JSON object")

        version = int(data.get("schemaVersion", 1))
        if version > CURRENT_SCHEMA_VERSION:
            raise ValueError(f"Unsupported progress schema version: {version}")

        last_update = data.get("lastUpdate")
        if last_update:
            if not isinstance(last_update, str):
                raise ValueError(f"Invalid lastUpdate in progress record: {last_update!r}")
            last_update = datetime.fromisoformat(last_update.replace("Z", "+00:00"))
            if last_update.tzinfo is None:
                last_update = last_update.replace(tzinfo=timezone.utc)

        last_index = int(data.get("lastIndex") or 0)
        if last_index < 0:
            raise ValueError(f"Negative lastIndex in progress record: {last_index}")

        return cls(
            last_index=last_index,
            last_update=last_update or None,
            total_feeds=int(data.get("totalFeeds") or 0),
            processed_in_this_batch=int(data.get("processedInThisBatch") or 0),
            schema_version=CURRENT_SCHEMA_VERSION,
        )
